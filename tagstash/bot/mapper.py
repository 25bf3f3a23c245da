"""Telegram-to-ingest message mapping adapter.

This keeps python-telegram-bot specific details out of the router.
"""

from __future__ import annotations

from typing import Optional

from telegram import Message

from ..ingest.messages import (
    InboundMessage,
    OtherMessage,
    PhotoMessage,
    PhotoVariant,
    Sender,
    StickerMessage,
    TextMessage,
)


def sender_from_message(message: Message) -> Sender:
    user = getattr(message, "from_user", None)
    if user is None:
        return Sender(display_name="unknown")
    username: Optional[str] = getattr(user, "username", None) or None
    display_name = getattr(user, "first_name", None) or username or "unknown"
    return Sender(display_name=display_name, username=username)


def to_inbound(message: Message) -> InboundMessage:
    """Classify a PTB message into one of the ingest message kinds."""
    sender = sender_from_message(message)

    if message.photo:
        return PhotoMessage(
            sender=sender,
            variants=[
                PhotoVariant(file_id=p.file_id, file_size=p.file_size)
                for p in message.photo
            ],
            caption=message.caption or None,
            media_group_id=message.media_group_id or None,
        )

    sticker = getattr(message, "sticker", None)
    if sticker is not None:
        thumb = getattr(sticker, "thumbnail", None)
        return StickerMessage(
            sender=sender,
            thumbnail_file_id=thumb.file_id if thumb is not None else None,
            emoji=getattr(sticker, "emoji", None),
        )

    if message.text is not None:
        return TextMessage(sender=sender, text=message.text)

    return OtherMessage(sender=sender)
