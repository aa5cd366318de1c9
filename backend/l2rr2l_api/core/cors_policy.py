"""CORS Policy — cross-origin access rules computed once from the deployment mode.

Invariants:
    - Production: policy disabled, no origin is ever permitted
    - Otherwise: exactly the two local dev-server origins are permitted
    - Credentials are always allowed for permitted origins
    - Immutable for the process lifetime (frozen dataclass)

Design Decisions:
    - Pure value object; the api layer decides how to install it
"""

from dataclasses import dataclass

PRODUCTION_MODE = "production"

DEV_ORIGINS: tuple[str, ...] = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)


@dataclass(frozen=True)
class CorsPolicy:
    """Which origins may read cross-origin responses."""
    allowed_origins: tuple[str, ...]
    allow_credentials: bool = True

    @classmethod
    def for_deployment_mode(cls, mode: str) -> "CorsPolicy":
        if mode == PRODUCTION_MODE:
            return cls(allowed_origins=())
        return cls(allowed_origins=DEV_ORIGINS)

    @property
    def enabled(self) -> bool:
        """False means no CORS layer at all (same-origin only)."""
        return bool(self.allowed_origins)

    def allows(self, origin: str | None) -> bool:
        return origin is not None and origin in self.allowed_origins
