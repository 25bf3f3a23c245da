"""Inbound message model.

Transport-neutral shapes the router dispatches on. The Telegram adapter maps
PTB objects into these so the ingestion code never touches `telegram` types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass(frozen=True)
class Sender:
    display_name: str
    username: Optional[str] = None


@dataclass(frozen=True)
class PhotoVariant:
    file_id: str
    file_size: Optional[int] = None


@dataclass(frozen=True)
class TextMessage:
    sender: Sender
    text: str


@dataclass(frozen=True)
class PhotoMessage:
    sender: Sender
    variants: List[PhotoVariant] = field(default_factory=list)
    caption: Optional[str] = None
    media_group_id: Optional[str] = None


@dataclass(frozen=True)
class StickerMessage:
    sender: Sender
    thumbnail_file_id: Optional[str] = None
    emoji: Optional[str] = None


@dataclass(frozen=True)
class OtherMessage:
    sender: Sender


InboundMessage = Union[TextMessage, PhotoMessage, StickerMessage, OtherMessage]


def _size_key(variant: PhotoVariant) -> tuple:
    # Sized variants rank above unsized ones; unsized ones tie with each other.
    if variant.file_size is None:
        return (0, 0)
    return (1, variant.file_size)


def pick_biggest_photo(variants: List[PhotoVariant]) -> Optional[PhotoVariant]:
    """Return the variant with the largest byte size, first one on ties."""
    if not variants:
        return None
    return max(variants, key=_size_key)
