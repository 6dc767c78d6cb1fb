from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_engine, get_viewer_id
from ..errors import ProfileNotFound, SessionExhausted, SessionSuperseded, UnsupportedGender
from ..schemas import DecisionRequest
from ..services.engine import DecisionOutcome, MatchEngine
from ..services.state_machine import SwipeSession, parse_direction

router = APIRouter()
scaffold_router = APIRouter()


def _session_payload(session: SwipeSession) -> dict[str, Any]:
    state = session.state
    card = session.current()
    return {
        "session_id": session.id,
        "status": state.status,
        "position": state.position,
        "length": state.length,
        "remaining": state.remaining,
        "current": card.public_view() if card else None,
        "lookup_failed": session.lookup_failed,
    }


def _outcome_payload(outcome: DecisionOutcome, session: SwipeSession) -> dict[str, Any]:
    match = outcome.match
    return {
        "consumed_profile": outcome.consumed_profile.public_view(),
        "direction": outcome.direction.value,
        "match": {
            "matched": match.matched,
            "profile": match.profile.public_view() if match.profile else None,
        },
        "warning": outcome.warning,
        "session": _session_payload(session),
    }


def _require_session(engine: MatchEngine, viewer_id: str) -> SwipeSession:
    session = engine.current_session(viewer_id)
    if session is None:
        raise HTTPException(status_code=404, detail="No active swipe session; start one first")
    return session


@scaffold_router.get("/health")
def match_scaffold_health() -> dict[str, str]:
    return {"status": "ok", "module": "match"}


@router.post("/sessions")
async def start_session(
    viewer_id: str = Depends(get_viewer_id),
    engine: MatchEngine = Depends(get_engine),
) -> dict[str, Any]:
    try:
        viewer = await engine.require_viewer(viewer_id)
        session = await engine.start_session(viewer)
    except ProfileNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except UnsupportedGender as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except SessionSuperseded as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return _session_payload(session)


@router.get("/sessions/current")
def get_current_session(
    viewer_id: str = Depends(get_viewer_id),
    engine: MatchEngine = Depends(get_engine),
) -> dict[str, Any]:
    return _session_payload(_require_session(engine, viewer_id))


@router.post("/sessions/current/decisions")
async def decide(
    payload: DecisionRequest,
    viewer_id: str = Depends(get_viewer_id),
    engine: MatchEngine = Depends(get_engine),
) -> dict[str, Any]:
    session = _require_session(engine, viewer_id)
    try:
        direction = parse_direction(payload.direction)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    try:
        outcome = await engine.decide(session, direction)
    except (SessionExhausted, SessionSuperseded) as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return _outcome_payload(outcome, session)


@router.delete("/sessions/current")
def invalidate_session(
    viewer_id: str = Depends(get_viewer_id),
    engine: MatchEngine = Depends(get_engine),
) -> dict[str, str]:
    engine.invalidate(viewer_id)
    return {"status": "invalidated"}


@router.get("/matches")
async def get_matches(
    viewer_id: str = Depends(get_viewer_id),
    engine: MatchEngine = Depends(get_engine),
) -> dict[str, Any]:
    roster = await engine.get_roster(viewer_id)
    return {
        "matches": [p.public_view() for p in roster.profiles],
        "lookup_failed": roster.lookup_failed,
    }
