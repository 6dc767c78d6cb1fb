from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass

from ..config import CANDIDATE_LIMIT, PROFILE_FETCH_TIMEOUT_SECONDS
from ..errors import LookupFailure, ProfileNotFound, SessionExhausted, SessionSuperseded, StoreUnavailable, WriteFailure
from ..repo import InterestLedger, ProfileStore
from ..schemas import Profile
from .candidates import select_candidates
from .matching import NO_MATCH, MatchResult, compute_matches, record_like
from .state_machine import Direction, SessionState, SwipeSession, parse_direction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecisionOutcome:
    consumed_profile: Profile
    direction: Direction
    match: MatchResult
    state: SessionState
    warning: str | None = None


@dataclass(frozen=True)
class Roster:
    profiles: tuple[Profile, ...]
    lookup_failed: bool = False


class MatchEngine:
    """Session-facing entry point for candidate pools, swipe decisions and rosters.

    Every call takes the viewer explicitly. Store failures are converted here into
    ``LookupFailure``/``WriteFailure`` and degrade to empty results or warnings.
    """

    def __init__(
        self,
        profiles: ProfileStore,
        ledger: InterestLedger,
        *,
        candidate_limit: int = CANDIDATE_LIMIT,
        profile_timeout: float = PROFILE_FETCH_TIMEOUT_SECONDS,
    ) -> None:
        self.profiles = profiles
        self.ledger = ledger
        self.candidate_limit = candidate_limit
        self.profile_timeout = profile_timeout
        self._sessions: dict[str, SwipeSession] = {}
        self._current: dict[str, str] = {}
        self._generations: dict[str, int] = defaultdict(int)
        self._locks: dict[str, asyncio.Lock] = {}

    async def load_viewer(self, viewer_id: str) -> Profile | None:
        """Fetch the viewer's profile with a bounded wait; ``None`` means onboarding is needed."""
        try:
            return await asyncio.wait_for(self.profiles.get_profile(viewer_id), timeout=self.profile_timeout)
        except asyncio.TimeoutError:
            logger.warning("[PROFILE] fetch for %s timed out after %ss", viewer_id, self.profile_timeout)
        except StoreUnavailable as exc:
            logger.warning("[PROFILE] fetch for %s failed: %s", viewer_id, exc)
        return None

    async def require_viewer(self, viewer_id: str) -> Profile:
        viewer = await self.load_viewer(viewer_id)
        if viewer is None:
            raise ProfileNotFound(viewer_id)
        return viewer

    async def save_profile(self, profile: Profile) -> Profile:
        try:
            saved = await self.profiles.save_profile(profile)
        except StoreUnavailable as exc:
            logger.warning("[PROFILE] save for %s failed: %s", profile.id, exc)
            raise WriteFailure(f"profile {profile.id} was not saved") from exc
        # Gender or OS may have changed, so the old pool no longer applies.
        self.invalidate(profile.id)
        return saved

    async def start_session(self, viewer: Profile, limit: int | None = None) -> SwipeSession:
        generation = self._supersede(viewer.id)
        lookup_failed = False
        try:
            pool = await select_candidates(self.profiles, viewer, self.candidate_limit if limit is None else limit)
        except StoreUnavailable as exc:
            logger.warning("[CANDIDATES] lookup for %s failed, serving empty pool: %s", viewer.id, exc)
            pool, lookup_failed = [], True

        if self._generations[viewer.id] != generation:
            logger.warning("[SWIPE] discarding stale candidate fetch for %s", viewer.id)
            raise SessionSuperseded(f"candidate fetch for {viewer.id} was superseded")

        session = SwipeSession(viewer_id=viewer.id, pool=tuple(pool), lookup_failed=lookup_failed)
        self._sessions[session.id] = session
        self._current[viewer.id] = session.id
        self._locks[session.id] = asyncio.Lock()
        logger.info("[SWIPE] session %s started for %s with %s candidates", session.id, viewer.id, len(pool))
        return session

    def invalidate(self, viewer_id: str) -> None:
        self._supersede(viewer_id)

    def get_session(self, session_id: str) -> SwipeSession | None:
        return self._sessions.get(session_id)

    def current_session(self, viewer_id: str) -> SwipeSession | None:
        session_id = self._current.get(viewer_id)
        return self._sessions.get(session_id) if session_id else None

    async def decide(self, session: SwipeSession, direction: Direction | str) -> DecisionOutcome:
        direction = parse_direction(direction)
        lock = self._locks.get(session.id)
        if lock is None:
            self._reject_superseded(session)
        async with lock:
            if self._sessions.get(session.id) is not session:
                self._reject_superseded(session)
            profile = session.current()
            if profile is None:
                logger.warning("[SWIPE] rejected %s on exhausted session %s", direction.value, session.id)
                raise SessionExhausted(session.id, len(session.pool))

            match, warning = NO_MATCH, None
            if direction is Direction.LIKE:
                try:
                    result = await record_like(self.ledger, session.viewer_id, profile.id)
                except (WriteFailure, LookupFailure) as exc:
                    logger.warning("[MATCH] %s", exc)
                    warning = str(exc)
                else:
                    if result.matched:
                        match = MatchResult(matched=True, other_id=profile.id, profile=profile)
                        logger.info("[MATCH] %s and %s matched", session.viewer_id, profile.id)

            session.advance()
            logger.debug(
                "[SWIPE] session=%s %s %s position=%s/%s",
                session.id,
                direction.value,
                profile.id,
                session.position,
                len(session.pool),
            )
            return DecisionOutcome(
                consumed_profile=profile,
                direction=direction,
                match=match,
                state=session.state,
                warning=warning,
            )

    async def get_roster(self, viewer_id: str) -> Roster:
        try:
            profiles = await compute_matches(self.profiles, self.ledger, viewer_id)
        except LookupFailure as exc:
            logger.warning("[ROSTER] %s", exc)
            return Roster(profiles=(), lookup_failed=True)
        return Roster(profiles=tuple(profiles))

    def _reject_superseded(self, session: SwipeSession) -> None:
        logger.warning("[SWIPE] rejected decision on superseded session %s", session.id)
        raise SessionSuperseded(f"session {session.id} is no longer current for {session.viewer_id}")

    def _supersede(self, viewer_id: str) -> int:
        self._generations[viewer_id] += 1
        session_id = self._current.pop(viewer_id, None)
        if session_id:
            self._sessions.pop(session_id, None)
            self._locks.pop(session_id, None)
        return self._generations[viewer_id]
