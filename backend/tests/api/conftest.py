"""API test fixtures — gateway app built from injected settings + httpx test client.

Invariants:
    - Settings never read .env; every test states the deployment mode it needs
    - The voice provider is always a FakeVoiceService unless a test builds its own
    - Lifespan is not run by ASGITransport; injected state is all the app sees
"""

import pytest

from l2rr2l_api.main import create_app

from tests.api.fakes import FakeVoiceService, build_settings, make_voice


@pytest.fixture
def settings():
    return build_settings()


@pytest.fixture
def fake_voice_service():
    return FakeVoiceService(voices=[
        make_voice("voice-1"),
        make_voice(
            "voice-2", name="Story Voice", description="Warm narrator",
            preview_url="https://example.com/preview.mp3",
            labels={"accent": "american"},
        ),
    ])


@pytest.fixture
def app(settings, fake_voice_service):
    return create_app(settings, voice_service=fake_voice_service)


@pytest.fixture
async def client(app, client_for):
    async with client_for(app) as c:
        yield c
