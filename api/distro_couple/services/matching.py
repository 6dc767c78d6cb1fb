from __future__ import annotations

import logging
from dataclasses import dataclass

from ..errors import LookupFailure, StoreUnavailable, WriteFailure
from ..repo import InterestLedger, ProfileStore
from ..schemas import Profile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchResult:
    matched: bool
    other_id: str | None = None
    profile: Profile | None = None


NO_MATCH = MatchResult(matched=False)


async def record_like(ledger: InterestLedger, from_id: str, to_id: str) -> MatchResult:
    """Append ``from_id -> to_id`` and report whether ``to_id -> from_id`` already exists.

    The append and the reverse lookup are two separate store calls. Two users liking
    each other at the same instant can both observe ``NO_MATCH``; the pair still shows
    up in ``compute_matches`` afterwards.
    """
    if from_id == to_id:
        raise ValueError("a profile cannot like itself")
    try:
        await ledger.append_interest(from_id, to_id)
    except StoreUnavailable as exc:
        raise WriteFailure(f"like {from_id}->{to_id} was not persisted") from exc

    try:
        reverse = await ledger.query_interest("from", to_id)
    except StoreUnavailable as exc:
        raise LookupFailure(f"reverse like lookup for {to_id}->{from_id} failed") from exc

    if any(e.to_id == from_id for e in reverse):
        return MatchResult(matched=True, other_id=to_id)
    return NO_MATCH


async def mutual_like_ids(ledger: InterestLedger, viewer_id: str) -> set[str]:
    try:
        outgoing = {e.to_id for e in await ledger.query_interest("from", viewer_id)}
        incoming = {e.from_id for e in await ledger.query_interest("to", viewer_id)}
    except StoreUnavailable as exc:
        raise LookupFailure(f"interest lookup for {viewer_id} failed") from exc
    mutual = outgoing & incoming
    mutual.discard(viewer_id)
    return mutual


async def compute_matches(profiles: ProfileStore, ledger: InterestLedger, viewer_id: str) -> list[Profile]:
    """Every profile the viewer liked that also liked the viewer back, ordered by id.

    Ids that no longer resolve to a profile are skipped.
    """
    roster: list[Profile] = []
    for other_id in sorted(await mutual_like_ids(ledger, viewer_id)):
        try:
            profile = await profiles.get_profile(other_id)
        except StoreUnavailable as exc:
            raise LookupFailure(f"profile hydration for {other_id} failed") from exc
        if profile is None:
            logger.debug("[ROSTER] viewer=%s skipping missing profile %s", viewer_id, other_id)
            continue
        roster.append(profile)
    return roster
