from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_engine, get_viewer_id
from ..errors import WriteFailure
from ..schemas import Profile, ProfileUpsertRequest
from ..services.candidates import OPPOSITE_GENDER
from ..services.distros import search_distros
from ..services.engine import MatchEngine

router = APIRouter()
scaffold_router = APIRouter()


@scaffold_router.get("/health")
def profile_scaffold_health() -> dict[str, str]:
    return {"status": "ok", "module": "profile"}


@router.get("/users/me/profile")
async def get_my_profile(
    viewer_id: str = Depends(get_viewer_id),
    engine: MatchEngine = Depends(get_engine),
) -> dict[str, Any]:
    profile = await engine.load_viewer(viewer_id)
    if profile is None:
        return {"profile": None, "needs_onboarding": True}
    return {"profile": profile.public_view(), "needs_onboarding": False}


@router.put("/users/me/profile")
async def put_my_profile(
    payload: ProfileUpsertRequest,
    viewer_id: str = Depends(get_viewer_id),
    engine: MatchEngine = Depends(get_engine),
) -> dict[str, Any]:
    profile = Profile(id=viewer_id, **payload.model_dump())
    if profile.gender not in OPPOSITE_GENDER:
        raise HTTPException(status_code=400, detail=f"gender must be one of: {', '.join(sorted(OPPOSITE_GENDER))}")
    try:
        saved = await engine.save_profile(profile)
    except WriteFailure as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    return {"profile": saved.public_view()}


@router.get("/distros")
def list_distros(q: str = "") -> dict[str, Any]:
    return {"distros": search_distros(q)}
