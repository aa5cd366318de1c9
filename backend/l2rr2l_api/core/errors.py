"""Error Hierarchy — typed, categorized exceptions for all gateway failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope used by every error response
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with GatewayError base: one global handler catches all
    - ErrorContext as dataclass: observability data without coupling to logging
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from l2rr2l_api.core.timestamps import format_timestamp, utcnow


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    EXTERNAL_API = "external_api"
    UNAVAILABLE = "unavailable"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Request-scoped context attached to an error."""
    timestamp: datetime = field(default_factory=utcnow)
    path: str | None = None
    voice_id: str | None = None
    debug_info: dict[str, Any] | None = None


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        error: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": format_timestamp(self.context.timestamp),
        }
        details = self.details()
        if details:
            error["details"] = details
        return {"error": error}

    def details(self) -> list[dict]:
        """Per-field details; empty for errors without any."""
        return []


# ─── Client Errors (400-level) ──────────────────────────────────

class MalformedJSONError(GatewayError):
    """Request declared a JSON body that could not be parsed."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Malformed JSON body: {reason}",
            "MALFORMED_JSON", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.reason = reason


class PayloadTooLargeError(GatewayError):
    """Request body exceeds the configured limit."""
    def __init__(self, limit_bytes: int, context: ErrorContext | None = None):
        super().__init__(
            f"Request body exceeds {limit_bytes} bytes",
            "PAYLOAD_TOO_LARGE", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 413,
        )
        self.limit_bytes = limit_bytes


class VoiceSettingsValidationFailedError(GatewayError):
    """One or more voice settings fall outside their accepted range."""
    def __init__(self, violations: list, context: ErrorContext | None = None):
        super().__init__(
            "Invalid voice settings: "
            + "; ".join(v.message for v in violations),
            "VOICE_SETTINGS_INVALID", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.violations = violations

    def details(self) -> list[dict]:
        return [
            {
                "field": v.field,
                "value": v.value,
                "min": v.min,
                "max": v.max,
                "message": v.message,
            }
            for v in self.violations
        ]


class VoiceNotFoundError(GatewayError):
    """Requested voice does not exist at the provider."""
    def __init__(self, voice_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.voice_id = voice_id
        super().__init__(
            f"Voice '{voice_id}' not found",
            "VOICE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.voice_id = voice_id


# ─── Infrastructure Errors (500-level) ──────────────────────────

class VoiceServiceUnavailableError(GatewayError):
    """Voice provider is not configured."""
    def __init__(
        self,
        message: str = "Voice service is unavailable. ELEVENLABS_API_KEY is not configured.",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VOICE_SERVICE_UNAVAILABLE", ErrorCategory.UNAVAILABLE,
            ErrorSeverity.CRITICAL, context, 503,
        )


class VoiceProviderError(GatewayError):
    """Voice provider call failed."""
    def __init__(
        self,
        message: str,
        operation: str,
        upstream_status: int | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Voice provider {operation} failed: {message}",
            "VOICE_PROVIDER_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 502,
        )
        self.operation = operation
        self.upstream_status = upstream_status
