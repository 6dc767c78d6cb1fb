from __future__ import annotations

import logging

from ..config import CANDIDATE_LIMIT, GENDER_FEMALE, GENDER_MALE
from ..errors import UnsupportedGender
from ..repo import ProfileStore
from ..schemas import Profile, normalize_gender

logger = logging.getLogger(__name__)

OPPOSITE_GENDER = {GENDER_MALE: GENDER_FEMALE, GENDER_FEMALE: GENDER_MALE}


def opposite(gender: str | None) -> str:
    g = normalize_gender(gender)
    try:
        return OPPOSITE_GENDER[g]
    except KeyError:
        raise UnsupportedGender(gender) from None


def is_candidate(viewer: Profile, profile: Profile) -> bool:
    return profile.id != viewer.id and profile.gender == opposite(viewer.gender) and profile.os == viewer.os


async def select_candidates(store: ProfileStore, viewer: Profile, limit: int = CANDIDATE_LIMIT) -> list[Profile]:
    """Return up to ``limit`` profiles of the opposite gender on the viewer's OS, ordered by id.

    Store failures propagate as ``StoreUnavailable``; the engine decides how to degrade.
    """
    if limit <= 0:
        return []
    target = opposite(viewer.gender)
    rows = await store.query_profiles({"gender": target, "os": viewer.os}, limit)
    pool = sorted((p for p in rows if is_candidate(viewer, p)), key=lambda p: p.id)
    logger.debug("[CANDIDATES] viewer=%s os=%s target=%s pool=%s", viewer.id, viewer.os, target, len(pool))
    return pool[:limit]
