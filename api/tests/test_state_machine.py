import pytest

from distro_couple.errors import SessionExhausted
from distro_couple.services.state_machine import Direction, SwipeSession, parse_direction


def _session(make_profile, n: int) -> SwipeSession:
    return SwipeSession(viewer_id="viewer", pool=[make_profile(f"p{i}") for i in range(n)])


def test_advance_moves_exactly_one_position(make_profile):
    session = _session(make_profile, 3)
    assert session.state.status == "active"
    assert session.current().id == "p0"

    consumed = session.advance()
    assert consumed.id == "p0"
    assert session.position == 1
    assert session.current().id == "p1"


def test_session_becomes_exhausted_at_pool_end(make_profile):
    session = _session(make_profile, 2)
    session.advance()
    session.advance()
    assert session.exhausted is True
    assert session.state.status == "exhausted"
    assert session.state.remaining == 0
    assert session.current() is None


def test_exhausted_session_rejects_advance_without_changing_state(make_profile):
    session = _session(make_profile, 1)
    session.advance()
    with pytest.raises(SessionExhausted):
        session.advance()
    assert session.position == 1


def test_empty_pool_starts_exhausted(make_profile):
    session = _session(make_profile, 0)
    assert session.exhausted is True
    with pytest.raises(SessionExhausted):
        session.advance()
    assert session.position == 0


def test_pool_is_frozen_at_construction(make_profile):
    pool = [make_profile("a"), make_profile("b")]
    session = SwipeSession(viewer_id="viewer", pool=pool)
    pool.append(make_profile("c"))
    assert session.state.length == 2


def test_parse_direction_accepts_swipe_aliases():
    assert parse_direction("like") is Direction.LIKE
    assert parse_direction("RIGHT") is Direction.LIKE
    assert parse_direction(" pass ") is Direction.PASS
    assert parse_direction("left") is Direction.PASS
    assert parse_direction(Direction.PASS) is Direction.PASS
    with pytest.raises(ValueError):
        parse_direction("superlike")
