"""
Web server entry point.

Runs the aiohttp application on settings.host:settings.port.
"""

import sys
from pathlib import Path

from aiohttp import web
from loguru import logger


# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config.database import async_engine, async_session_maker  # noqa: E402
from app.config.settings import settings  # noqa: E402
from web.app import create_app  # noqa: E402
from web.initialization.logging import setup_logging  # noqa: E402
from web.initialization.services import (  # noqa: E402
    create_image_store,
    create_reconciliation_scheduler,
)


async def _dispose_engine(app: web.Application) -> None:
    await async_engine.dispose()
    logger.info("Database engine disposed")


def main() -> None:
    """Initialize and run the web server."""
    setup_logging(settings)
    settings.log_summary()

    app = create_app(
        settings,
        async_session_maker,
        image_store=create_image_store(settings),
        schedule_reconciliation=create_reconciliation_scheduler(),
    )
    app.on_cleanup.append(_dispose_engine)

    logger.info(f"Listening on http://{settings.host}:{settings.port}")
    web.run_app(app, host=settings.host, port=settings.port, print=None)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Server stopped by user (KeyboardInterrupt)")
    except Exception as e:
        logger.exception(f"Server crashed: {e}")
        sys.exit(1)
