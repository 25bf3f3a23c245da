"""Bot API backed file transfer."""

from __future__ import annotations

from telegram import Bot

from ..ingest.pipeline import RemoteFile


class TelegramFileSource:
    """Resolves file ids with `getFile` and downloads them in one request."""

    def __init__(self, bot: Bot) -> None:
        self._bot = bot

    async def resolve(self, file_ref: str) -> RemoteFile:
        tfile = await self._bot.get_file(file_ref)
        return RemoteFile(
            file_ref=file_ref,
            file_path=tfile.file_path or "",
            file_size=tfile.file_size,
            handle=tfile,
        )

    async def fetch(self, remote: RemoteFile) -> bytes:
        # telegram lib doesn't expose a streaming iterator; buffer in memory
        buf = await remote.handle.download_as_bytearray()
        return bytes(buf)
