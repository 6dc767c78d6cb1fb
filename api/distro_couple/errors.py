class EngineError(Exception):
    """Base class for failures the matching engine surfaces to callers."""


class StoreUnavailable(EngineError):
    """Transport-level failure raised by store implementations.

    Never surfaces past ``MatchEngine``; it is converted into ``LookupFailure``
    or ``WriteFailure`` there.
    """


class LookupFailure(EngineError):
    pass


class WriteFailure(EngineError):
    pass


class ProfileNotFound(EngineError):
    def __init__(self, profile_id: str) -> None:
        super().__init__(f"profile {profile_id} not found")
        self.profile_id = profile_id


class SessionExhausted(EngineError):
    def __init__(self, session_id: str, length: int) -> None:
        super().__init__(f"session {session_id} is exhausted ({length} profiles consumed)")
        self.session_id = session_id
        self.length = length


class SessionSuperseded(EngineError):
    """A candidate fetch finished after the viewer invalidated or restarted it."""


class UnsupportedGender(EngineError, ValueError):
    def __init__(self, gender: str | None) -> None:
        super().__init__(f"no opposite gender defined for {gender!r}")
        self.gender = gender
