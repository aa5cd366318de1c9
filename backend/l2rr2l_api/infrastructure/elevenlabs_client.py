"""ElevenLabs Voice Service — httpx client for the text-to-speech provider.

Invariants:
    - Without an API key the service is constructed but every call raises
      VoiceServiceUnavailableError (warning logged once at construction)
    - Rate limits (429) and transient errors (5xx, connection): retried with
      exponential backoff and jitter, Retry-After honoured
    - Client errors (4xx except 429): immediate failure, no retry
    - get_voice / delete_voice treat provider 404 as "absent", not as failure
    - All failures mapped to VoiceProviderError (core/errors.py)
    - Streaming opens the upstream response before returning the iterator;
      upstream errors surface before the first audio byte

Design Decisions:
    - Wrapper over raw httpx client: isolates retry logic from the routes
    - Streaming is never retried; the caller owns the open response
    - transport parameter lets tests inject httpx.MockTransport
"""

import asyncio
import logging
import random
from collections.abc import AsyncIterator

import httpx

from l2rr2l_api.core.errors import (
    ErrorContext, VoiceProviderError, VoiceServiceUnavailableError,
)
from l2rr2l_api.core.voice_protocols import TextToSpeechOptions, Voice
from l2rr2l_api.core.voice_settings import (
    DEFAULT_MODEL_ID, DEFAULT_OUTPUT_FORMAT, DEFAULT_VOICE_ID,
    prepare_voice_settings,
)

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


class ElevenLabsVoiceService:
    """VoiceService implementation backed by the ElevenLabs REST API."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://api.elevenlabs.io",
        timeout_seconds: float = 30.0,
        max_retries: int = 2,
        base_delay_ms: int = 500,
        max_delay_ms: int = 8_000,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self.client: httpx.AsyncClient | None = None
        if api_key:
            self.client = httpx.AsyncClient(
                base_url=base_url,
                headers={"xi-api-key": api_key},
                timeout=timeout_seconds,
                transport=transport,
            )
        else:
            logger.warning(
                "ELEVENLABS_API_KEY not configured. Voice features will be unavailable.",
            )

    def is_available(self) -> bool:
        return self.client is not None

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()

    # ─── Voices ─────────────────────────────────────────────────

    async def list_voices(self) -> list[Voice]:
        response = await self._request("list_voices", "GET", "/v1/voices")
        return [_to_voice(v) for v in response.json().get("voices", [])]

    async def get_voice(self, voice_id: str) -> Voice | None:
        response = await self._request(
            "get_voice", "GET", f"/v1/voices/{voice_id}",
            voice_id=voice_id, absent_on_404=True,
        )
        if response is None:
            return None
        return _to_voice(response.json())

    async def delete_voice(self, voice_id: str) -> bool:
        response = await self._request(
            "delete_voice", "DELETE", f"/v1/voices/{voice_id}",
            voice_id=voice_id, absent_on_404=True,
        )
        return response is not None

    # ─── Text to speech ─────────────────────────────────────────

    async def text_to_speech(self, options: TextToSpeechOptions) -> bytes:
        url, params, payload = self._build_tts_call(options, stream=False)
        response = await self._request(
            "text_to_speech", "POST", url,
            voice_id=options.voice_id, params=params, json=payload,
        )
        return response.content

    async def text_to_speech_stream(
        self, options: TextToSpeechOptions,
    ) -> AsyncIterator[bytes]:
        """Open the upstream stream; returns an iterator that closes it when done."""
        client = self._ensure_available()
        url, params, payload = self._build_tts_call(options, stream=True)
        context = ErrorContext(voice_id=options.voice_id)
        request = client.build_request("POST", url, params=params, json=payload)
        try:
            response = await client.send(request, stream=True)
        except httpx.TimeoutException as e:
            raise VoiceProviderError(
                "timeout", "text_to_speech_stream", context=context,
            ) from e
        except httpx.TransportError as e:
            raise VoiceProviderError(
                f"connection error: {e}", "text_to_speech_stream", context=context,
            ) from e
        if response.is_error:
            await response.aread()
            await response.aclose()
            self._log_failure("text_to_speech_stream", response)
            raise VoiceProviderError(
                f"HTTP {response.status_code}", "text_to_speech_stream",
                upstream_status=response.status_code, context=context,
            )
        return _iter_audio(response)

    def _build_tts_call(
        self, options: TextToSpeechOptions, *, stream: bool,
    ) -> tuple[str, dict, dict]:
        settings = prepare_voice_settings(options.voice_settings)
        voice_id = options.voice_id or DEFAULT_VOICE_ID
        url = f"/v1/text-to-speech/{voice_id}"
        if stream:
            url += "/stream"
        params = {"output_format": options.output_format or DEFAULT_OUTPUT_FORMAT}
        payload = {
            "text": options.text,
            "model_id": options.model_id or DEFAULT_MODEL_ID,
            "voice_settings": {
                "stability": settings.stability,
                "similarity_boost": settings.similarity_boost,
                "style": settings.style,
                "speed": settings.speed,
                "use_speaker_boost": settings.use_speaker_boost,
            },
        }
        return url, params, payload

    # ─── Transport ──────────────────────────────────────────────

    def _ensure_available(self) -> httpx.AsyncClient:
        if self.client is None:
            raise VoiceServiceUnavailableError()
        return self.client

    async def _request(
        self,
        operation: str,
        method: str,
        url: str,
        *,
        voice_id: str | None = None,
        absent_on_404: bool = False,
        **kwargs,
    ) -> httpx.Response | None:
        """Send with retry; returns None only for a 404 when absent_on_404."""
        client = self._ensure_available()
        context = ErrorContext(voice_id=voice_id)
        for attempt in range(self.max_retries + 1):
            try:
                response = await client.request(method, url, **kwargs)
            except httpx.TimeoutException as e:
                raise VoiceProviderError(
                    "timeout", operation, context=context,
                ) from e
            except httpx.TransportError as e:
                if attempt >= self.max_retries:
                    raise VoiceProviderError(
                        f"connection error after {attempt + 1} attempts: {e}",
                        operation, context=context,
                    ) from e
                await self._sleep_before_retry(operation, attempt, None)
                continue

            if absent_on_404 and response.status_code == 404:
                return None
            if not response.is_error:
                return response
            if response.status_code in _RETRYABLE_STATUS and attempt < self.max_retries:
                await self._sleep_before_retry(operation, attempt, response)
                continue
            self._log_failure(operation, response)
            raise VoiceProviderError(
                f"HTTP {response.status_code}", operation,
                upstream_status=response.status_code, context=context,
            )
        raise AssertionError("unreachable")  # pragma: no cover

    async def _sleep_before_retry(
        self, operation: str, attempt: int, response: httpx.Response | None,
    ) -> None:
        delay = self._retry_after_ms(response) or self._backoff(attempt)
        logger.warning(
            f"Voice provider {operation} retry after {delay}ms (attempt {attempt + 1})",
            extra={
                "operation": operation,
                "upstream_status": response.status_code if response else None,
            },
        )
        await asyncio.sleep(delay / 1000)

    def _log_failure(self, operation: str, response: httpx.Response) -> None:
        logger.error(
            f"Voice provider {operation} failed with HTTP {response.status_code}",
            extra={"operation": operation, "upstream_status": response.status_code},
        )

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311

    def _retry_after_ms(self, response: httpx.Response | None) -> int | None:
        """Retry-After header in milliseconds (seconds form only)."""
        if response is None:
            return None
        val = response.headers.get("retry-after")
        if val and val.isdigit():
            return min(self.max_delay_ms, int(val) * 1000)
        return None


async def _iter_audio(response: httpx.Response) -> AsyncIterator[bytes]:
    try:
        async for chunk in response.aiter_bytes():
            if chunk:
                yield chunk
    finally:
        await response.aclose()


def _to_voice(data: dict) -> Voice:
    return Voice(
        voice_id=data["voice_id"],
        name=data.get("name") or "Unknown",
        category=data.get("category"),
        description=data.get("description"),
        preview_url=data.get("preview_url"),
        labels=data.get("labels"),
    )
