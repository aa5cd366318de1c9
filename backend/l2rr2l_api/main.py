"""L2RR2L API — FastAPI application entry point.

Invariants:
    - Evaluation order per request: CORS → JSON body parse → path dispatch
    - CORS policy computed once from settings; production installs no CORS layer
    - Handler groups mounted longest prefix first (/api/voice before /api)
    - GET /health answered inline, never by a handler group
    - Global error handlers map GatewayError → structured JSON responses

Design Decisions:
    - create_app(settings) factory: configuration injected, tests need no env mutation
    - Lifespan over @app.on_event: owns the voice provider client's lifetime
    - Module-level `app` for ASGI server discovery (uvicorn l2rr2l_api.main:app)
"""

import logging
from collections.abc import Iterable
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from l2rr2l_api.api.error_handlers import register_error_handlers
from l2rr2l_api.api.handler_groups import HandlerGroup, mount_handler_groups
from l2rr2l_api.api.json_body import JSONBodyMiddleware
from l2rr2l_api.api.routes import api_root, health, voice
from l2rr2l_api.config import Settings, get_settings
from l2rr2l_api.core.cors_policy import CorsPolicy
from l2rr2l_api.core.voice_protocols import VoiceService
from l2rr2l_api.infrastructure.elevenlabs_client import ElevenLabsVoiceService
from l2rr2l_api.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    owns_voice_service = getattr(app.state, "voice_service", None) is None
    if owns_voice_service:
        app.state.voice_service = build_voice_service(settings)
    logger.info(
        f"L2RR2L API started ({settings.deployment_mode}, "
        f"cors={'on' if app.state.cors_policy.enabled else 'off'})",
    )
    yield
    if owns_voice_service:
        await app.state.voice_service.aclose()
    logger.info("L2RR2L API shutting down")


def build_voice_service(settings: Settings) -> ElevenLabsVoiceService:
    return ElevenLabsVoiceService(
        settings.elevenlabs_api_key,
        base_url=settings.elevenlabs_base_url,
        timeout_seconds=settings.elevenlabs_timeout_seconds,
        max_retries=settings.elevenlabs_max_retries,
        base_delay_ms=settings.elevenlabs_base_delay_ms,
        max_delay_ms=settings.elevenlabs_max_delay_ms,
    )


def default_handler_groups() -> list[HandlerGroup]:
    return [
        HandlerGroup("/api", api_root.router, name="api"),
        HandlerGroup("/api/voice", voice.router, name="voice"),
    ]


def create_app(
    settings: Settings | None = None,
    *,
    groups: Iterable[HandlerGroup] | None = None,
    voice_service: VoiceService | None = None,
) -> FastAPI:
    """Build the gateway. Every argument defaults to the production wiring."""
    settings = settings or get_settings()
    app = FastAPI(title="L2RR2L API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.cors_policy = CorsPolicy.for_deployment_mode(settings.deployment_mode)
    if voice_service is not None:
        app.state.voice_service = voice_service

    register_error_handlers(app)

    # Middleware added last runs first: CORS wraps body parsing
    app.add_middleware(
        JSONBodyMiddleware,
        limit_bytes=settings.json_body_limit_bytes,
        strict=settings.json_strict,
    )
    _install_cors(app, app.state.cors_policy)

    # Routes — explicit registration; inline health before the handler groups
    app.include_router(health.router)
    mount_handler_groups(
        app, default_handler_groups() if groups is None else groups,
    )
    return app


def _install_cors(app: FastAPI, policy: CorsPolicy) -> None:
    """Disabled policy → no CORS layer at all, not an empty allow-list."""
    if not policy.enabled:
        return
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(policy.allowed_origins),
        allow_credentials=policy.allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )


app = create_app()
