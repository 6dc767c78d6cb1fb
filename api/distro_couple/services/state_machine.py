from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum

from ..errors import SessionExhausted
from ..schemas import Profile


class Direction(str, Enum):
    LIKE = "like"
    PASS = "pass"


_DIRECTION_ALIASES = {"like": Direction.LIKE, "right": Direction.LIKE, "pass": Direction.PASS, "left": Direction.PASS}


def parse_direction(value: str | Direction) -> Direction:
    if isinstance(value, Direction):
        return value
    try:
        return _DIRECTION_ALIASES[str(value).strip().lower()]
    except KeyError:
        raise ValueError(f"direction must be one of: like, pass (got {value!r})") from None


@dataclass(frozen=True)
class SessionState:
    position: int
    length: int

    @property
    def exhausted(self) -> bool:
        return self.position >= self.length

    @property
    def status(self) -> str:
        return "exhausted" if self.exhausted else "active"

    @property
    def remaining(self) -> int:
        return max(0, self.length - self.position)


@dataclass
class SwipeSession:
    """Forward-only cursor over one candidate pool.

    The pool is fixed at construction; a new session is required to scan it again.
    """

    viewer_id: str
    pool: tuple[Profile, ...]
    position: int = 0
    lookup_failed: bool = False
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self) -> None:
        self.pool = tuple(self.pool)

    @property
    def state(self) -> SessionState:
        return SessionState(position=self.position, length=len(self.pool))

    @property
    def exhausted(self) -> bool:
        return self.state.exhausted

    def current(self) -> Profile | None:
        if self.exhausted:
            return None
        return self.pool[self.position]

    def advance(self) -> Profile:
        if self.exhausted:
            raise SessionExhausted(self.id, len(self.pool))
        consumed = self.pool[self.position]
        self.position += 1
        return consumed
