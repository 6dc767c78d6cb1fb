from fastapi import Header, HTTPException

from .repo import SqlInterestLedger, SqlProfileStore
from .services.engine import MatchEngine

_engine: MatchEngine | None = None


def get_engine() -> MatchEngine:
    global _engine
    if _engine is None:
        _engine = MatchEngine(SqlProfileStore(), SqlInterestLedger())
    return _engine


def parse_actor_user_id(raw_actor_user_id: str | None) -> str:
    value = (raw_actor_user_id or "").strip()
    if not value:
        raise HTTPException(status_code=401, detail="X-Actor-User-Id header is required")
    return value


def get_viewer_id(x_actor_user_id: str | None = Header(default=None)) -> str:
    return parse_actor_user_id(x_actor_user_id)
