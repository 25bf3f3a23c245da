"""In-memory caption cache for media groups.

Telegram delivers an album as separate messages sharing a `media_group_id`,
and only one of them carries the caption. The cache remembers the caption per
group so captionless siblings can reuse it, whichever order they arrive in
relative to the captioned item (siblings seen before the caption get nothing).
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Optional


logger = logging.getLogger("tagstash.caption_cache")

DEFAULT_CAPACITY = 10


class CaptionCache:
    """Bounded LRU map of media group id to caption.

    Only `record` refreshes recency. `lookup` is a pure read, so a burst of
    captionless siblings never keeps an old group alive.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"caption cache capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._entries: "OrderedDict[str, str]" = OrderedDict()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, group_id: object) -> bool:
        return group_id in self._entries

    def record(self, group_id: str, caption: str) -> None:
        self._entries[group_id] = caption
        self._entries.move_to_end(group_id)
        while len(self._entries) > self._capacity:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("evicted caption", extra={"media_group_id": evicted})

    def lookup(self, group_id: str) -> Optional[str]:
        return self._entries.get(group_id)

    def resolve(self, group_id: Optional[str], caption: Optional[str]) -> Optional[str]:
        """Return the effective caption for a message.

        A captioned group member records its caption, a captionless one reads
        whatever its group has recorded so far. Messages outside a group use
        their own caption.
        """
        if group_id and caption:
            self.record(group_id, caption)
            return caption
        if group_id:
            cached = self.lookup(group_id)
            logger.debug(
                "caption lookup",
                extra={"media_group_id": group_id, "hit": cached is not None},
            )
            return cached
        return caption
