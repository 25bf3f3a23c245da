"""Message router and per-kind handlers.

Dispatches a transport-neutral inbound message by kind, assembles the token
sequence for media messages, archives the file and reports the result back to
the chat through the supplied `reply` callable.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Awaitable, Callable, List, Optional

from ..ingest.caption_cache import CaptionCache
from ..ingest.messages import (
    InboundMessage,
    OtherMessage,
    PhotoMessage,
    Sender,
    StickerMessage,
    TextMessage,
    pick_biggest_photo,
)
from ..ingest.pipeline import FileSource, archive_file
from ..ingest.tokens import Token, hashtags, parse_message
from ..metrics.registry import REJECTED_MESSAGES, SKIPPED_ITEMS
from ..runtime.config import AppConfig
from ..storage.local_store import LocalStore
from ..utils.reply_formatter import ReplyFormatter


logger = logging.getLogger("tagstash.router")

Reply = Callable[[str], Awaitable[object]]
Clock = Callable[[], dt.datetime]


def is_sender_allowed(sender: Sender, config: AppConfig) -> bool:
    return config.is_allowed(sender.username)


def image_tokens(config: AppConfig, caption: Optional[str]) -> List[Token]:
    """Configured image tags followed by the parsed caption."""
    return hashtags(config.image_tags) + parse_message(caption or "")


def sticker_tokens(config: AppConfig) -> List[Token]:
    return hashtags(config.sticker_tags)


class MessageRouter:
    """Routes one message at a time; the caption cache is its only state."""

    def __init__(
        self,
        config: AppConfig,
        cache: CaptionCache,
        source: FileSource,
        store: LocalStore,
        clock: Clock = dt.datetime.now,
    ) -> None:
        self._config = config
        self._cache = cache
        self._source = source
        self._store = store
        self._clock = clock

    async def handle(self, message: InboundMessage, reply: Reply) -> None:
        sender = message.sender
        if not is_sender_allowed(sender, self._config):
            REJECTED_MESSAGES.inc()
            logger.warning(
                "unallowed user trying to send something",
                extra={"sender": sender.username or sender.display_name},
            )
            return

        match message:
            case TextMessage():
                await self._on_text(message, reply)
            case PhotoMessage():
                await self._on_photo(message, reply)
            case StickerMessage():
                await self._on_sticker(message, reply)
            case OtherMessage():
                pass

    async def _on_text(self, message: TextMessage, reply: Reply) -> None:
        logger.info(
            "text message",
            extra={"sender": message.sender.display_name, "text": message.text},
        )
        await reply(ReplyFormatter.format_echo(message.sender.display_name, message.text))

    async def _on_photo(self, message: PhotoMessage, reply: Reply) -> None:
        caption = self._cache.resolve(message.media_group_id, message.caption)
        biggest = pick_biggest_photo(message.variants)
        if biggest is None:
            SKIPPED_ITEMS.inc()
            logger.warning(
                "photo without file",
                extra={"media_group_id": message.media_group_id},
            )
            return

        tokens = image_tokens(self._config, caption)
        result = await archive_file(
            self._source, self._store, tokens, biggest.file_id, self._clock()
        )
        await reply(ReplyFormatter.format_saved(result.path))

    async def _on_sticker(self, message: StickerMessage, reply: Reply) -> None:
        if message.thumbnail_file_id is None:
            SKIPPED_ITEMS.inc()
            logger.warning("sticker without thumbnail", extra={"emoji": message.emoji})
            return

        result = await archive_file(
            self._source,
            self._store,
            sticker_tokens(self._config),
            message.thumbnail_file_id,
            self._clock(),
        )
        await reply(ReplyFormatter.format_saved(result.path))
