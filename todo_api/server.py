"""
Process entry point: provision the database, then listen.

provisioning -> listening, or provisioning -> terminated with exit code 1.
"""
import asyncio
import logging
import sys

import uvicorn

from todo_api.config import Settings, settings as default_settings
from todo_api.database import provision
from todo_api.main import create_app

logger = logging.getLogger(__name__)


async def run(settings: Settings) -> int:
    result = await provision(settings)
    if not result.ok:
        logger.error("Startup aborted: %s", result.error)
        return 1

    config = uvicorn.Config(
        create_app(result.database, settings),
        host=settings.listen_host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    server = uvicorn.Server(config)
    try:
        await server.serve()
    finally:
        await result.database.dispose()
    return 0


def main(settings: Settings | None = None) -> None:
    settings = settings or default_settings
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    sys.exit(asyncio.run(run(settings)))


if __name__ == "__main__":
    main()
