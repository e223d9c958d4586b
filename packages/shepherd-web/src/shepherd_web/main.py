"""Entry point - starts the console server."""

import asyncio
import logging
import signal

import structlog
import uvicorn

from shepherd_web.rest.app import create_app
from shepherd_web.settings import WebSettings

logger = structlog.get_logger()


async def main() -> None:
    settings = WebSettings()
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper(), logging.INFO)
        ),
    )

    app = create_app(settings)
    config = uvicorn.Config(
        app,
        host="0.0.0.0",
        port=settings.rest_port,
        log_level=settings.log_level.lower(),
    )
    server = uvicorn.Server(config)

    logger.info("starting_console", rest_port=settings.rest_port, backend_url=settings.backend_url)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, setattr, server, "should_exit", True)

    await server.serve()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
