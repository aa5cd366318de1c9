"""Voice Schemas — camelCase wire models for the voice routes.

Invariants:
    - TextToSpeechRequest.voiceId and .text are required and non-blank
    - Range checks on voiceSettings live in core/voice_settings.py, not here,
      so the client gets the VOICE_SETTINGS_INVALID envelope
    - VoiceResponse omits absent optional fields when dumped by alias
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from l2rr2l_api.core.voice_protocols import TextToSpeechOptions, Voice
from l2rr2l_api.core.voice_settings import VoiceSettings


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VoiceSettingsIn(_CamelModel):
    stability: float | None = None
    similarity_boost: float | None = None
    style: float | None = None
    speed: float | None = None
    use_speaker_boost: bool | None = None

    def to_domain(self) -> VoiceSettings:
        return VoiceSettings(**self.model_dump())


class TextToSpeechRequest(_CamelModel):
    """Body of POST /tts and POST /tts/stream."""
    voice_id: str = Field(min_length=1, max_length=128)
    text: str = Field(min_length=1, max_length=10_000)
    model_id: str | None = None
    voice_settings: VoiceSettingsIn | None = None
    output_format: str | None = None

    @field_validator("voice_id", "text")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    def to_options(self) -> TextToSpeechOptions:
        return TextToSpeechOptions(
            voice_id=self.voice_id,
            text=self.text,
            model_id=self.model_id,
            voice_settings=(
                self.voice_settings.to_domain() if self.voice_settings else None
            ),
            output_format=self.output_format,
        )


class VoiceResponse(_CamelModel):
    voice_id: str
    name: str
    category: str | None = None
    description: str | None = None
    preview_url: str | None = None
    labels: dict[str, str] | None = None

    @classmethod
    def from_domain(cls, voice: Voice) -> "VoiceResponse":
        return cls(
            voice_id=voice.voice_id,
            name=voice.name,
            category=voice.category,
            description=voice.description,
            preview_url=voice.preview_url,
            labels=voice.labels,
        )

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
