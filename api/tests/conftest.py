import asyncio
from datetime import date, datetime, timedelta, timezone

import pytest

from distro_couple.errors import StoreUnavailable
from distro_couple.schemas import InterestEvent, Profile


def _make_profile(profile_id: str, gender: str = "kadin", os: str = "Ubuntu", **extra) -> Profile:
    extra.setdefault("name", f"User-{profile_id}")
    extra.setdefault("birth_date", date(1998, 6, 15))
    return Profile(id=profile_id, gender=gender, os=os, **extra)


class FakeProfileStore:
    def __init__(self, profiles=()):
        self.rows: dict[str, Profile] = {p.id: p for p in profiles}
        self.fail = False
        self.delay = 0.0
        self.get_calls: list[str] = []
        self.query_calls: list[tuple[dict, int]] = []

    async def get_profile(self, profile_id: str) -> Profile | None:
        self.get_calls.append(profile_id)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise StoreUnavailable("profile store unreachable")
        return self.rows.get(profile_id)

    async def query_profiles(self, filters: dict[str, str], limit: int) -> list[Profile]:
        self.query_calls.append((dict(filters), limit))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise StoreUnavailable("profile store unreachable")
        rows = [p for p in self.rows.values() if all(getattr(p, k) == v for k, v in filters.items())]
        return rows[:limit]

    async def save_profile(self, profile: Profile) -> Profile:
        if self.fail:
            raise StoreUnavailable("profile store unreachable")
        self.rows[profile.id] = profile
        return profile


class FakeInterestLedger:
    def __init__(self, allow_duplicates: bool = False):
        self.events: list[InterestEvent] = []
        self.allow_duplicates = allow_duplicates
        self.fail_append = False
        self.fail_query = False
        self._clock = datetime(2026, 1, 1, tzinfo=timezone.utc)

    async def append_interest(self, from_id: str, to_id: str) -> InterestEvent:
        if self.fail_append:
            raise StoreUnavailable("ledger write rejected")
        if not self.allow_duplicates:
            for e in self.events:
                if e.from_id == from_id and e.to_id == to_id:
                    return e
        self._clock += timedelta(seconds=1)
        event = InterestEvent(from_id=from_id, to_id=to_id, timestamp=self._clock)
        self.events.append(event)
        return event

    async def query_interest(self, by: str, profile_id: str) -> list[InterestEvent]:
        if self.fail_query:
            raise StoreUnavailable("ledger query failed")
        key = "from_id" if by == "from" else "to_id"
        return [e for e in self.events if getattr(e, key) == profile_id]

    def remove(self, from_id: str, to_id: str) -> None:
        self.events = [e for e in self.events if not (e.from_id == from_id and e.to_id == to_id)]


@pytest.fixture
def make_profile():
    return _make_profile


@pytest.fixture
def profile_store():
    return FakeProfileStore()


@pytest.fixture
def ledger():
    return FakeInterestLedger()
