"""Process Runner — serve the gateway with uvicorn.

Invariants:
    - Exactly one startup line, logged only after the socket is bound
    - Bind failure (port in use) exits the process nonzero

Design Decisions:
    - uvicorn.Server subclass: startup() returns after binding, so the line
      is never logged for a server that failed to listen
    - log_config=None: uvicorn logs through our root handler
"""

import logging

import uvicorn

from l2rr2l_api.config import get_settings
from l2rr2l_api.infrastructure.observability import setup_logging
from l2rr2l_api.main import create_app

logger = logging.getLogger(__name__)


class GatewayServer(uvicorn.Server):
    """uvicorn server that announces itself once listening."""

    async def startup(self, sockets=None) -> None:
        await super().startup(sockets=sockets)
        if self.started:
            logger.info(
                f"Server running on http://localhost:{self.config.port}",
                extra={"port": self.config.port},
            )


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    config = uvicorn.Config(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
    server = GatewayServer(config)
    server.run()
    if not server.started:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
