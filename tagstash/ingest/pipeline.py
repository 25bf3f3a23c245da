"""Archive pipeline: resolve, name, download and write a single file.

Implements the per-file steps shared by photo and sticker handling. The
transfer side is abstracted behind `FileSource` so the Telegram adapter and
the tests can plug in their own implementations.
"""

from __future__ import annotations

import datetime as dt
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Protocol

from ..metrics.registry import ARCHIVED_BYTES, ARCHIVED_FILES, PROCESSING_SECONDS
from ..storage.local_store import LocalStore
from .paths import build_final_path
from .tokens import Token


logger = logging.getLogger("tagstash.ingest")


@dataclass
class RemoteFile:
    """A resolved file reference.

    `file_path` is the server-side name, used only for its extension.
    `handle` carries whatever the source needs to fetch the bytes later.
    """

    file_ref: str
    file_path: str
    file_size: Optional[int] = None
    handle: Any = None


@dataclass
class ArchiveResult:
    path: Path
    size_bytes: int


class FileSource(Protocol):
    """Transfer operations required by the pipeline."""

    async def resolve(self, file_ref: str) -> RemoteFile:
        ...

    async def fetch(self, remote: RemoteFile) -> bytes:
        ...


async def archive_file(
    source: FileSource,
    store: LocalStore,
    tokens: List[Token],
    file_ref: str,
    now: dt.datetime,
) -> ArchiveResult:
    """Download `file_ref` and write it under the path derived from `tokens`.

    Transfer and storage errors propagate to the caller; nothing is retried
    and a partially written file is left in place.
    """
    start = time.perf_counter()
    remote = await source.resolve(file_ref)
    target = build_final_path(store.root, tokens, remote.file_path, now)

    logger.info(
        "downloading file",
        extra={"target": str(target), "size": remote.file_size},
    )
    data = await source.fetch(remote)
    written = store.write_bytes(target, data)

    ARCHIVED_FILES.inc()
    ARCHIVED_BYTES.inc(written)
    PROCESSING_SECONDS.observe(time.perf_counter() - start)
    logger.info("file archived", extra={"path": str(target), "size": written})
    return ArchiveResult(path=target, size_bytes=written)
