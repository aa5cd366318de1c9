"""Voice Settings — pure validation and defaulting of TTS voice parameters.

Invariants:
    - stability, similarity_boost, style in [0, 1]; speed in [0.5, 2.0]
    - Unset fields are never validated, only defaulted
    - prepare_voice_settings() returns a fully populated VoiceSettings or raises
    - Returns NEW objects — never mutates input

Design Decisions:
    - Violations collected, not fail-fast: the client sees every bad field at once
    - Field names in messages use the wire (camelCase) spelling clients send
"""

from dataclasses import dataclass, replace

from l2rr2l_api.core.errors import VoiceSettingsValidationFailedError

# Child-friendly default voice (Rachel: clear, warm)
DEFAULT_VOICE_ID = "EXAVITQu4vr4xnSDxMaL"
DEFAULT_MODEL_ID = "eleven_multilingual_v2"
DEFAULT_OUTPUT_FORMAT = "mp3_44100_128"

# attribute -> (wire name, min, max)
VOICE_SETTINGS_RANGES: dict[str, tuple[str, float, float]] = {
    "stability": ("stability", 0.0, 1.0),
    "similarity_boost": ("similarityBoost", 0.0, 1.0),
    "style": ("style", 0.0, 1.0),
    "speed": ("speed", 0.5, 2.0),
}


@dataclass(frozen=True)
class VoiceSettings:
    """Provider voice parameters; None means "use the default"."""
    stability: float | None = None
    similarity_boost: float | None = None
    style: float | None = None
    speed: float | None = None
    use_speaker_boost: bool | None = None


VOICE_SETTINGS_DEFAULTS = VoiceSettings(
    stability=0.5,
    similarity_boost=0.75,
    style=0.0,
    speed=1.0,
    use_speaker_boost=True,
)


@dataclass(frozen=True)
class VoiceSettingsViolation:
    """One out-of-range setting."""
    field: str
    value: float
    min: float
    max: float
    message: str


def validate_voice_settings(settings: VoiceSettings) -> list[VoiceSettingsViolation]:
    """Return every out-of-range field; empty list when all valid."""
    violations = []
    for attr, (wire_name, lo, hi) in VOICE_SETTINGS_RANGES.items():
        value = getattr(settings, attr)
        if value is None:
            continue
        if value < lo or value > hi:
            violations.append(VoiceSettingsViolation(
                field=wire_name, value=value, min=lo, max=hi,
                message=f"{wire_name} must be between {_fmt(lo)} and {_fmt(hi)}, got {_fmt(value)}",
            ))
    return violations


def apply_voice_settings_defaults(settings: VoiceSettings | None) -> VoiceSettings:
    """Fill every unset field from VOICE_SETTINGS_DEFAULTS."""
    if settings is None:
        return VOICE_SETTINGS_DEFAULTS
    filled = {
        name: getattr(VOICE_SETTINGS_DEFAULTS, name)
        for name in VOICE_SETTINGS_DEFAULTS.__dataclass_fields__
        if getattr(settings, name) is None
    }
    return replace(settings, **filled)


def prepare_voice_settings(settings: VoiceSettings | None) -> VoiceSettings:
    """Validate then default. Raises VoiceSettingsValidationFailedError."""
    if settings is not None:
        violations = validate_voice_settings(settings)
        if violations:
            raise VoiceSettingsValidationFailedError(violations)
    return apply_voice_settings_defaults(settings)


def _fmt(value: float) -> str:
    """1.0 -> '1', 0.5 -> '0.5' (matches what clients typed)."""
    return f"{value:g}"
