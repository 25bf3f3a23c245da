"""
Entry point module for tagstash service.

This module wires up configuration, logging, the health/metrics server, and
the Telegram bot polling runtime.
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from typing import Optional

import uvicorn


def _ensure_event_loop_policy() -> None:
    """Install uvloop if available for better performance."""
    try:
        import uvloop  # type: ignore

        asyncio.set_event_loop_policy(uvloop.EventLoopPolicy())
    except ImportError:  # pragma: no cover - fallback to default loop
        pass


async def _async_main(config) -> None:
    """Async entry point that sets up services and starts the bot."""
    from .bot.service import TagstashBotService
    from .web.health import create_app

    logger = logging.getLogger("tagstash")
    logger.info("starting tagstash", extra={"target_dir": config.target_dir})

    bot = TagstashBotService(config)

    health_task: Optional[asyncio.Task] = None
    if config.health_enable:
        health_server = uvicorn.Server(
            config=uvicorn.Config(
                app=create_app(config, bot.store, bot.captions),
                host="127.0.0.1" if config.bind_health_localhost_only else "0.0.0.0",
                port=config.health_port,
                log_level="info",
                access_log=False,
            )
        )
        health_task = asyncio.create_task(health_server.serve())
        logger.info("health monitoring server started", extra={"port": config.health_port})

    await bot.start()

    # Graceful shutdown signals
    stop_event = asyncio.Event()

    def _handle_signal(signame: str) -> None:
        logger.warning("received signal, stopping", extra={"signal": signame})
        stop_event.set()

    loop = asyncio.get_running_loop()
    for signame in ("SIGINT", "SIGTERM"):
        if hasattr(signal, signame):
            loop.add_signal_handler(getattr(signal, signame), _handle_signal, signame)

    try:
        await stop_event.wait()
    finally:
        logger.info("shutting down services")
        await bot.stop()
        if health_task:
            health_task.cancel()
            try:
                await health_task
            except asyncio.CancelledError:
                pass
        logger.info("shutdown complete")


def main() -> None:
    from .runtime.config import AppConfig, ConfigError
    from .runtime.logging_setup import setup_logging

    try:
        config = AppConfig.load()
    except ConfigError as e:
        logging.basicConfig(level=logging.ERROR)
        logging.getLogger("tagstash").error("invalid configuration: %s", e)
        sys.exit(1)
    setup_logging(config)

    _ensure_event_loop_policy()
    try:
        asyncio.run(_async_main(config))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
