"""JSON Body Middleware — parse JSON request bodies once, before any route runs.

Invariants:
    - Only requests whose media type is application/json are inspected
    - Malformed JSON → 400 MALFORMED_JSON; no handler ever sees the request
    - Bodies over the limit → 413 PAYLOAD_TOO_LARGE (declared length checked first;
      chunked bodies are cut off at the first chunk past the limit)
    - Deeply nested JSON → 400, never an unhandled RecursionError
    - Strict mode: top-level value must be an object or an array
    - Empty body parses to {}
    - Parsed value stored on request.state.json_body; raw body still readable downstream

Design Decisions:
    - BaseHTTPMiddleware: body read here is cached and replayed to the route
    - Errors rendered directly: middleware runs outside the app's exception handlers
"""

import json
import logging
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from l2rr2l_api.api.error_handlers import gateway_error_response
from l2rr2l_api.core.errors import (
    GatewayError, MalformedJSONError, PayloadTooLargeError,
)

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


class JSONBodyMiddleware(BaseHTTPMiddleware):
    """Reject unparseable or oversized JSON bodies; expose the parsed value."""

    def __init__(self, app, limit_bytes: int = 100 * 1024, strict: bool = True) -> None:
        super().__init__(app)
        self.limit_bytes = limit_bytes
        self.strict = strict

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        if not is_json_request(request):
            return await call_next(request)
        try:
            request.state.json_body = await self._read_json(request)
        except GatewayError as exc:
            return gateway_error_response(request, exc)
        return await call_next(request)

    async def _read_json(self, request: Request) -> Any:
        declared = request.headers.get("content-length")
        if declared and declared.isdigit() and int(declared) > self.limit_bytes:
            raise PayloadTooLargeError(self.limit_bytes)

        body = await self._read_limited(request)
        if not body.strip():
            return {}
        return parse_json(body, strict=self.strict)

    async def _read_limited(self, request: Request) -> bytes:
        """Read the body chunk by chunk, stopping as soon as it passes the limit."""
        buffer = bytearray()
        async for chunk in request.stream():
            buffer.extend(chunk)
            if len(buffer) > self.limit_bytes:
                raise PayloadTooLargeError(self.limit_bytes)
        # Cached body is what BaseHTTPMiddleware replays to the route
        request._body = bytes(buffer)
        return request._body


def is_json_request(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower() == JSON_MEDIA_TYPE


def parse_json(body: bytes, *, strict: bool = True) -> Any:
    """Decode a UTF-8 JSON document. Raises MalformedJSONError."""
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedJSONError("body is not valid UTF-8") from e
    try:
        value = json.loads(text, parse_constant=_reject_constant)
    except ValueError as e:
        raise MalformedJSONError(str(e)) from e
    except RecursionError as e:
        raise MalformedJSONError("nesting too deep") from e
    if strict and not isinstance(value, (dict, list)):
        raise MalformedJSONError("top-level value must be an object or array")
    return value


def get_json_body(request: Request) -> Any:
    """Dependency: the body parsed by JSONBodyMiddleware, or None."""
    return getattr(request.state, "json_body", None)


def _reject_constant(name: str) -> Any:
    # NaN / Infinity are not JSON
    raise ValueError(f"invalid literal {name}")
