"""Run the proxy with uvicorn: ``python -m blingproxy``."""

import logging

import uvicorn

from blingproxy.config import settings

logger = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(levelname)s:%(name)s:%(message)s",
    )
    logger.info("Starting blingproxy on port %d", settings.port)
    uvicorn.run("blingproxy.app:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
