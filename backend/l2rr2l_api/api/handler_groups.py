"""Handler Groups — opaque route groups mounted at fixed path prefixes.

Invariants:
    - A handler group is any APIRouter: it takes method, path and body and
      produces a response; the gateway never looks inside it
    - Prefixes start with "/" and never end with "/"; duplicates rejected
    - Dispatch is longest-prefix-first: a path at or beneath a nested prefix
      (e.g. /api/voice under /api) is owned by the nested group only
    - Paths the owning group does not route yield the framework 404

Design Decisions:
    - include_router over Mount: group routes share the app's exception
      handlers and dependency overrides
    - Nested prefixes get a trailing not-found route so the enclosing group
      can never claim the nested group's unmatched paths
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from fastapi import APIRouter, FastAPI, HTTPException, status

logger = logging.getLogger(__name__)

_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@dataclass(frozen=True)
class HandlerGroup:
    """An APIRouter bound to the prefix it owns."""
    prefix: str
    router: APIRouter
    name: str = ""

    def __post_init__(self):
        if not self.prefix.startswith("/") or self.prefix.endswith("/"):
            raise ValueError(
                f"Handler group prefix must start with '/' and not end with '/': {self.prefix!r}",
            )

    def owns(self, path: str) -> bool:
        """True if path is the prefix itself or lies beneath it."""
        return path == self.prefix or path.startswith(self.prefix + "/")


def mount_handler_groups(app: FastAPI, groups: Iterable[HandlerGroup]) -> None:
    """Include every group on the app, longest prefix first."""
    groups = list(groups)
    prefixes = [g.prefix for g in groups]
    duplicates = {p for p in prefixes if prefixes.count(p) > 1}
    if duplicates:
        raise ValueError(f"Duplicate handler group prefixes: {sorted(duplicates)}")

    for group in sorted(groups, key=lambda g: len(g.prefix), reverse=True):
        app.include_router(
            group.router, prefix=group.prefix,
            tags=[group.name] if group.name else None,
        )
        if _is_nested(group, groups):
            _add_not_found_routes(app, group)
        logger.debug(f"Mounted handler group {group.name or '?'} at {group.prefix}")


def _is_nested(group: HandlerGroup, groups: list[HandlerGroup]) -> bool:
    return any(
        other is not group and other.owns(group.prefix)
        for other in groups
    )


def _add_not_found_routes(app: FastAPI, group: HandlerGroup) -> None:
    """Claim every remaining path under group.prefix with a 404."""

    async def prefix_not_found():
        raise HTTPException(status.HTTP_404_NOT_FOUND)

    for path in (group.prefix, group.prefix + "/{rest:path}"):
        app.add_api_route(
            path, prefix_not_found, methods=_ALL_METHODS,
            include_in_schema=False,
        )
