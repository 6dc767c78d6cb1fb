import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

import distro_couple.main as m
from distro_couple.deps import get_engine
from distro_couple.services.engine import MatchEngine


@pytest.fixture
def client(profile_store, ledger):
    engine = MatchEngine(profile_store, ledger, profile_timeout=0.5)
    m.app.dependency_overrides[get_engine] = lambda: engine
    try:
        yield TestClient(m.app)
    finally:
        m.app.dependency_overrides.clear()


def _as(user_id: str) -> dict[str, str]:
    return {"X-Actor-User-Id": user_id}


def _onboard(client, user_id: str, gender: str, os: str = "Ubuntu") -> None:
    res = client.put(
        "/users/me/profile",
        headers=_as(user_id),
        json={"name": user_id.title(), "gender": gender, "os": os, "birthDate": "1999-03-01"},
    )
    assert res.status_code == 200, res.text


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/_scaffold/match/health").json()["module"] == "match"


def test_missing_actor_header_is_rejected(client):
    assert client.get("/matches").status_code == 401


def test_profile_before_onboarding_needs_onboarding(client):
    res = client.get("/users/me/profile", headers=_as("newbie"))
    assert res.status_code == 200
    assert res.json() == {"profile": None, "needs_onboarding": True}


def test_onboarding_rejects_unknown_gender(client):
    res = client.put("/users/me/profile", headers=_as("x"), json={"name": "X", "gender": "robot", "os": "Ubuntu"})
    assert res.status_code == 400


def test_swipe_and_match_flow(client):
    _onboard(client, "ali", "erkek")
    _onboard(client, "ayse", "kadin")
    _onboard(client, "zeynep", "kadin", os="Windows 11")

    me = client.get("/users/me/profile", headers=_as("ali")).json()
    assert me["profile"]["os"] == "Ubuntu"
    assert me["profile"]["age"] is not None

    started = client.post("/sessions", headers=_as("ali")).json()
    assert started["length"] == 1
    assert started["current"]["id"] == "ayse"

    liked = client.post("/sessions/current/decisions", headers=_as("ali"), json={"direction": "right"}).json()
    assert liked["match"]["matched"] is False
    assert liked["session"]["status"] == "exhausted"

    again = client.post("/sessions/current/decisions", headers=_as("ali"), json={"direction": "like"})
    assert again.status_code == 409

    client.post("/sessions", headers=_as("ayse"))
    back = client.post("/sessions/current/decisions", headers=_as("ayse"), json={"direction": "like"}).json()
    assert back["match"]["matched"] is True
    assert back["match"]["profile"]["id"] == "ali"

    roster = client.get("/matches", headers=_as("ali")).json()
    assert [p["id"] for p in roster["matches"]] == ["ayse"]
    assert roster["lookup_failed"] is False


def test_bad_direction_is_rejected(client):
    _onboard(client, "ali", "erkek")
    _onboard(client, "ayse", "kadin")
    client.post("/sessions", headers=_as("ali"))
    res = client.post("/sessions/current/decisions", headers=_as("ali"), json={"direction": "superlike"})
    assert res.status_code == 400
    assert client.get("/sessions/current", headers=_as("ali")).json()["position"] == 0


def test_invalidate_drops_session(client):
    _onboard(client, "ali", "erkek")
    client.post("/sessions", headers=_as("ali"))
    assert client.delete("/sessions/current", headers=_as("ali")).json() == {"status": "invalidated"}
    assert client.get("/sessions/current", headers=_as("ali")).status_code == 404


def test_session_requires_profile(client):
    assert client.post("/sessions", headers=_as("ghost")).status_code == 404


def test_roster_degrades_when_ledger_is_down(client, ledger):
    ledger.fail_query = True
    res = client.get("/matches", headers=_as("ali"))
    assert res.status_code == 200
    assert res.json() == {"matches": [], "lookup_failed": True}


def test_distro_search(client):
    res = client.get("/distros", params={"q": "linux"}).json()
    assert "Arch Linux" in res["distros"]
    assert "Ubuntu" not in res["distros"]


def test_onboarding_rejects_blank_os(client):
    res = client.put("/users/me/profile", headers=_as("x"), json={"name": "X", "gender": "erkek", "os": "   "})
    assert res.status_code == 422
    assert client.get("/users/me/profile", headers=_as("x")).json()["needs_onboarding"] is True


def test_restarted_session_takes_decisions(client, ledger):
    _onboard(client, "ali", "erkek")
    _onboard(client, "ayse", "kadin")
    client.post("/sessions", headers=_as("ali"))
    client.post("/sessions", headers=_as("ali"))
    res = client.post("/sessions/current/decisions", headers=_as("ali"), json={"direction": "like"})
    assert res.status_code == 200
    assert len(ledger.events) == 1
