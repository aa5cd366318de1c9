"""Voice Routes — voice listing and text-to-speech, mounted at /api/voice.

Invariants:
    - Every route obtains its provider through get_voice_service (overridable)
    - Provider not configured → 503 before any provider call
    - Unknown voice → 404 VOICE_NOT_FOUND
    - Audio responses are audio/mpeg; /tts sets Content-Length, /tts/stream is chunked

Design Decisions:
    - Thin adapter: input validated by schemas, settings validated by the provider
      layer (core/voice_settings.py), errors rendered by the global handler
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response, StreamingResponse

from l2rr2l_api.core.errors import VoiceNotFoundError, VoiceServiceUnavailableError
from l2rr2l_api.core.voice_protocols import VoiceService
from l2rr2l_api.schemas.voice import TextToSpeechRequest, VoiceResponse

logger = logging.getLogger(__name__)
router = APIRouter()

AUDIO_MEDIA_TYPE = "audio/mpeg"


def get_voice_service(request: Request) -> VoiceService:
    """Provider stored on app.state by the lifespan (or injected by create_app)."""
    service = getattr(request.app.state, "voice_service", None)
    if service is None or not service.is_available():
        raise VoiceServiceUnavailableError()
    return service


@router.get("/voices")
async def list_voices(service: VoiceService = Depends(get_voice_service)):
    """List all available voices."""
    voices = await service.list_voices()
    return {"voices": [VoiceResponse.from_domain(v).to_wire() for v in voices]}


@router.get("/voices/{voice_id}")
async def get_voice(
    voice_id: str, service: VoiceService = Depends(get_voice_service),
):
    """Get a specific voice by ID."""
    voice = await service.get_voice(voice_id)
    if voice is None:
        raise VoiceNotFoundError(voice_id)
    return VoiceResponse.from_domain(voice).to_wire()


@router.delete("/voices/{voice_id}")
async def delete_voice(
    voice_id: str, service: VoiceService = Depends(get_voice_service),
):
    """Delete a cloned voice."""
    if not await service.delete_voice(voice_id):
        raise VoiceNotFoundError(voice_id)
    logger.info("Voice deleted", extra={"voice_id": voice_id})
    return {"success": True}


@router.post("/tts")
async def text_to_speech(
    body: TextToSpeechRequest, service: VoiceService = Depends(get_voice_service),
):
    """Convert text to speech; returns the whole clip."""
    audio = await service.text_to_speech(body.to_options())
    return Response(content=audio, media_type=AUDIO_MEDIA_TYPE)


@router.post("/tts/stream")
async def text_to_speech_stream(
    body: TextToSpeechRequest, service: VoiceService = Depends(get_voice_service),
):
    """Convert text to speech; audio is relayed as it arrives."""
    chunks = await service.text_to_speech_stream(body.to_options())
    return StreamingResponse(chunks, media_type=AUDIO_MEDIA_TYPE)
