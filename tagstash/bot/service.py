"""Telegram bot service for tagstash.

Builds the python-telegram-bot application, runs long polling with strictly
sequential update handling, and hands every message to the `MessageRouter`.
"""

from __future__ import annotations

import logging
from typing import Optional

from telegram import Update
from telegram.ext import (
    AIORateLimiter,
    Application,
    ApplicationBuilder,
    ContextTypes,
    MessageHandler,
    filters,
)

from ..ingest.caption_cache import CaptionCache
from ..metrics.registry import FAILED_MESSAGES
from ..runtime.config import AppConfig
from ..storage.local_store import LocalStore
from ..utils.reply_formatter import ReplyFormatter
from .mapper import to_inbound
from .router import MessageRouter
from .transfer import TelegramFileSource


logger = logging.getLogger("tagstash.bot")

# New messages only; edited messages and channel posts are ignored
MESSAGE_FILTER = filters.UpdateType.MESSAGE


class TagstashBotService:
    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._app: Optional[Application] = None
        self._router: Optional[MessageRouter] = None
        self._store = LocalStore(config)
        self._captions = CaptionCache(capacity=config.caption_cache_size)

    @property
    def captions(self) -> CaptionCache:
        return self._captions

    @property
    def store(self) -> LocalStore:
        return self._store

    async def start(self) -> None:
        builder = (
            ApplicationBuilder()
            .token(self._config.telegram_bot_token)
            .rate_limiter(AIORateLimiter())
            .concurrent_updates(False)
        )
        self._app = builder.build()
        self._app.add_handler(MessageHandler(MESSAGE_FILTER, self._on_message))
        self._app.add_error_handler(self._on_error)

        self._store.ensure_root()
        self._router = MessageRouter(
            self._config,
            self._captions,
            TelegramFileSource(self._app.bot),
            self._store,
        )

        # Lifecycle per PTB v21
        await self._app.initialize()
        await self._app.start()
        await self._app.updater.start_polling()
        logger.info(
            "bot started",
            extra={"target_dir": self._config.target_dir},
        )

    async def stop(self) -> None:
        if not self._app:
            return
        try:
            await self._app.updater.stop()
        except Exception:
            logger.exception("failed to stop updater")
        try:
            await self._app.stop()
        except Exception:
            logger.exception("failed to stop application")
        try:
            await self._app.shutdown()
        except Exception:
            logger.exception("failed to shut down application")

    async def _on_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.message
        if message is None or self._router is None:
            return

        async def reply(text: str) -> None:
            await message.reply_text(text)

        try:
            await self._router.handle(to_inbound(message), reply)
        except Exception as e:
            FAILED_MESSAGES.inc()
            logger.exception(
                "message handling failed",
                extra={"message_id": message.message_id, "chat_id": message.chat_id},
            )
            try:
                await reply(ReplyFormatter.format_failed(str(e) or type(e).__name__))
            except Exception:
                logger.exception("failed to send failure message")

    async def _on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        logger.error("telegram error", exc_info=context.error)
