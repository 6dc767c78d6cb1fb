import uuid
from datetime import datetime, timezone
from typing import Any, Protocol

from sqlalchemy import Date, DateTime, bindparam, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .database import SessionLocal
from .errors import StoreUnavailable
from .schemas import InterestEvent, Profile

PROFILE_FILTER_COLUMNS = {"gender": "gender", "os": "os"}
INTEREST_QUERY_COLUMNS = {"from": "from_user_id", "to": "to_user_id"}


class ProfileStore(Protocol):
    async def get_profile(self, profile_id: str) -> Profile | None: ...

    async def query_profiles(self, filters: dict[str, str], limit: int) -> list[Profile]: ...

    async def save_profile(self, profile: Profile) -> Profile: ...


class InterestLedger(Protocol):
    async def append_interest(self, from_id: str, to_id: str) -> InterestEvent: ...

    async def query_interest(self, by: str, profile_id: str) -> list[InterestEvent]: ...


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _profile_from_row(row: Any) -> Profile:
    return Profile(
        id=row["id"],
        name=row["name"],
        gender=row["gender"],
        os=row["os"],
        birth_date=row["birth_date"],
        bio=row["bio"],
        image=row["image"],
    )


def _event_from_row(row: Any) -> InterestEvent:
    return InterestEvent(from_id=row["from_user_id"], to_id=row["to_user_id"], timestamp=row["created_at"])


_PROFILE_SELECT = "SELECT id, name, gender, os, birth_date, bio, image FROM user_profile"
_EVENT_SELECT = "SELECT from_user_id, to_user_id, created_at FROM interest_event"


class SqlProfileStore:
    def __init__(self, session_factory=None) -> None:
        self._session_factory = session_factory or SessionLocal

    async def get_profile(self, profile_id: str) -> Profile | None:
        stmt = text(f"{_PROFILE_SELECT} WHERE id = :id").columns(birth_date=Date)
        try:
            async with self._session_factory() as db:
                row = (await db.execute(stmt, {"id": profile_id})).mappings().first()
        except SQLAlchemyError as exc:
            raise StoreUnavailable(f"profile lookup failed: {exc}") from exc
        return _profile_from_row(row) if row else None

    async def query_profiles(self, filters: dict[str, str], limit: int) -> list[Profile]:
        clauses: list[str] = []
        params: dict[str, Any] = {"limit": int(limit)}
        for key, value in sorted(filters.items()):
            column = PROFILE_FILTER_COLUMNS.get(key)
            if column is None:
                raise ValueError(f"unsupported profile filter: {key}")
            clauses.append(f"{column} = :{key}")
            params[key] = value
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        stmt = text(f"{_PROFILE_SELECT}{where} ORDER BY id LIMIT :limit").columns(birth_date=Date)
        try:
            async with self._session_factory() as db:
                rows = (await db.execute(stmt, params)).mappings().all()
        except SQLAlchemyError as exc:
            raise StoreUnavailable(f"profile query failed: {exc}") from exc
        return [_profile_from_row(r) for r in rows]

    async def save_profile(self, profile: Profile) -> Profile:
        stmt = text(
            """
            INSERT INTO user_profile (id, name, gender, os, birth_date, bio, image, updated_at)
            VALUES (:id, :name, :gender, :os, :birth_date, :bio, :image, :updated_at)
            ON CONFLICT (id) DO UPDATE SET
                name = excluded.name,
                gender = excluded.gender,
                os = excluded.os,
                birth_date = excluded.birth_date,
                bio = excluded.bio,
                image = excluded.image,
                updated_at = excluded.updated_at
            """
        ).bindparams(bindparam("birth_date", type_=Date), bindparam("updated_at", type_=DateTime(timezone=True)))
        try:
            async with self._session_factory() as db:
                await db.execute(
                    stmt,
                    {
                        "id": profile.id,
                        "name": profile.name,
                        "gender": profile.gender,
                        "os": profile.os,
                        "birth_date": profile.birth_date,
                        "bio": profile.bio,
                        "image": profile.image,
                        "updated_at": _now_utc(),
                    },
                )
                await db.commit()
        except SQLAlchemyError as exc:
            raise StoreUnavailable(f"profile save failed: {exc}") from exc
        return profile


class SqlInterestLedger:
    """Append-only like ledger; one row per ordered (from, to) pair."""

    def __init__(self, session_factory=None) -> None:
        self._session_factory = session_factory or SessionLocal

    async def append_interest(self, from_id: str, to_id: str) -> InterestEvent:
        insert = text(
            """
            INSERT INTO interest_event (id, from_user_id, to_user_id, created_at)
            VALUES (:id, :from_user_id, :to_user_id, :created_at)
            """
        ).bindparams(bindparam("created_at", type_=DateTime(timezone=True)))
        now = _now_utc()
        params = {"id": str(uuid.uuid4()), "from_user_id": from_id, "to_user_id": to_id, "created_at": now}
        try:
            async with self._session_factory() as db:
                try:
                    await db.execute(insert, params)
                    await db.commit()
                except IntegrityError:
                    await db.rollback()
                    existing = await self._find_pair(db, from_id, to_id)
                    if existing is None:
                        raise
                    return existing
        except SQLAlchemyError as exc:
            raise StoreUnavailable(f"interest append failed: {exc}") from exc
        return InterestEvent(from_id=from_id, to_id=to_id, timestamp=now)

    async def query_interest(self, by: str, profile_id: str) -> list[InterestEvent]:
        column = INTEREST_QUERY_COLUMNS.get(by)
        if column is None:
            raise ValueError(f"interest can only be queried by 'from' or 'to', got {by!r}")
        stmt = text(f"{_EVENT_SELECT} WHERE {column} = :profile_id ORDER BY created_at, id").columns(
            created_at=DateTime(timezone=True)
        )
        try:
            async with self._session_factory() as db:
                rows = (await db.execute(stmt, {"profile_id": profile_id})).mappings().all()
        except SQLAlchemyError as exc:
            raise StoreUnavailable(f"interest query failed: {exc}") from exc
        return [_event_from_row(r) for r in rows]

    async def _find_pair(self, db, from_id: str, to_id: str) -> InterestEvent | None:
        stmt = text(f"{_EVENT_SELECT} WHERE from_user_id = :from_user_id AND to_user_id = :to_user_id").columns(
            created_at=DateTime(timezone=True)
        )
        row = (await db.execute(stmt, {"from_user_id": from_id, "to_user_id": to_id})).mappings().first()
        return _event_from_row(row) if row else None


async def reset_store(session_factory=None) -> None:
    async with (session_factory or SessionLocal)() as db:
        await db.execute(text("DELETE FROM interest_event"))
        await db.execute(text("DELETE FROM user_profile"))
        await db.commit()
