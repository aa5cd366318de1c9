"""Voice Boundary — value types and the provider contract used by the voice routes.

Invariants:
    - Routes depend on VoiceService only, never on a concrete provider client
    - Implementations raise GatewayError subclasses, never transport exceptions

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
"""

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Protocol

from l2rr2l_api.core.voice_settings import VoiceSettings


@dataclass(frozen=True)
class Voice:
    """A provider voice as exposed to clients."""
    voice_id: str
    name: str = "Unknown"
    category: str | None = None
    description: str | None = None
    preview_url: str | None = None
    labels: dict[str, str] | None = None


@dataclass(frozen=True)
class TextToSpeechOptions:
    """One synthesis request; None fields fall back to provider defaults."""
    voice_id: str
    text: str
    model_id: str | None = None
    voice_settings: VoiceSettings | None = None
    output_format: str | None = None


class VoiceService(Protocol):
    """Contract for the text-to-speech provider — implemented by infrastructure."""
    def is_available(self) -> bool: ...
    async def list_voices(self) -> list[Voice]: ...
    async def get_voice(self, voice_id: str) -> Voice | None: ...
    async def delete_voice(self, voice_id: str) -> bool: ...
    async def text_to_speech(self, options: TextToSpeechOptions) -> bytes: ...
    async def text_to_speech_stream(
        self, options: TextToSpeechOptions,
    ) -> AsyncIterator[bytes]: ...
    async def aclose(self) -> None: ...
