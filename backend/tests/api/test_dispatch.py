"""Path dispatch — longest prefix first, nested prefixes owned by the nested group.

Invariants:
    - /api/voice and everything beneath it reach the voice group only
    - /api and everything else beneath it reach the general group
    - Unmatched paths fall through to the framework 404
"""

import pytest
from fastapi import APIRouter, FastAPI, Request

from l2rr2l_api.api.handler_groups import HandlerGroup, mount_handler_groups
from l2rr2l_api.main import create_app

from tests.api.fakes import build_settings


def _recording_router(label, hits):
    """Catch-all group that records every request it receives."""
    router = APIRouter()

    @router.api_route(
        "/{rest:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    )
    async def catch_all(rest: str, request: Request):
        hits.append((label, request.method, request.url.path))
        return {"group": label, "rest": rest}

    return router


@pytest.fixture
def hits():
    return []


@pytest.fixture
async def recording_client(hits, client_for):
    # General group registered first on purpose: order of the list must not matter
    app = create_app(build_settings(), groups=[
        HandlerGroup("/api", _recording_router("api", hits), name="api"),
        HandlerGroup("/api/voice", _recording_router("voice", hits), name="voice"),
    ])
    async with client_for(app) as c:
        yield c


@pytest.mark.parametrize("method, path", [
    ("GET", "/api/voice/voices"),
    ("POST", "/api/voice/tts"),
    ("DELETE", "/api/voice/voices/abc"),
    ("GET", "/api/voice/deeply/nested/path"),
    ("GET", "/api/voice/"),
])
async def test_voice_paths_reach_voice_group_only(recording_client, hits, method, path):
    res = await recording_client.request(method, path)

    assert res.status_code == 200
    assert res.json()["group"] == "voice"
    assert [h[0] for h in hits] == ["voice"]


@pytest.mark.parametrize("path", [
    "/api/lessons", "/api/children/42", "/api/voices", "/api/voice-settings",
])
async def test_other_api_paths_reach_general_group(recording_client, hits, path):
    res = await recording_client.get(path)

    assert res.status_code == 200
    assert res.json() == {"group": "api", "rest": path.removeprefix("/api/")}
    assert [h[0] for h in hits] == ["api"]


async def test_exact_voice_prefix_never_reaches_general_group(recording_client, hits):
    """The voice group routes nothing at its bare prefix, so the answer is 404."""
    res = await recording_client.get("/api/voice")

    assert res.status_code == 404
    assert hits == []


async def test_unknown_voice_path_is_404_not_general_group(client):
    res = await client.get("/api/voice/does-not-exist")

    assert res.status_code == 404


@pytest.mark.parametrize("path", ["/", "/apix", "/healthz", "/voice/voices", "/API"])
async def test_unmatched_paths_are_404(recording_client, hits, path):
    res = await recording_client.get(path)

    assert res.status_code == 404
    assert hits == []


async def test_default_general_group_identifies_api(client):
    for path in ("/api", "/api/"):
        res = await client.get(path)
        assert res.status_code == 200
        assert res.json() == {"message": "L2RR2L API", "version": "1.0.0"}


async def test_default_voice_group_is_mounted(client):
    res = await client.get("/api/voice/voices")

    assert res.status_code == 200
    assert "voices" in res.json()


# -- mount_handler_groups ------------------------------------------------------


def test_duplicate_prefixes_rejected():
    app = FastAPI()
    with pytest.raises(ValueError, match="Duplicate"):
        mount_handler_groups(app, [
            HandlerGroup("/api", APIRouter()),
            HandlerGroup("/api", APIRouter()),
        ])


@pytest.mark.parametrize("prefix", ["api", "/api/", ""])
def test_malformed_prefix_rejected(prefix):
    with pytest.raises(ValueError):
        HandlerGroup(prefix, APIRouter())


def test_owns_respects_segment_boundary():
    group = HandlerGroup("/api/voice", APIRouter())
    assert group.owns("/api/voice")
    assert group.owns("/api/voice/tts")
    assert not group.owns("/api/voices")
    assert not group.owns("/api")
