"""Local filesystem storage for archived files.

Provides a thin wrapper that creates parent directories and writes payloads
in one go. No temp-file staging: a failed write may leave a partial file.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from ..runtime.config import AppConfig


class LocalStore:
    """Writes archived payloads below the configured target directory."""

    def __init__(self, config: AppConfig) -> None:
        self._root = Path(config.target_dir)

    @property
    def root(self) -> Path:
        return self._root

    def ensure_root(self) -> None:
        os.makedirs(self._root, exist_ok=True)

    def write_bytes(self, path: Union[str, os.PathLike], data: bytes) -> int:
        path = Path(path)
        os.makedirs(path.parent, exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
        return len(data)

    def check_writable(self) -> None:
        """Raise OSError unless the root is an existing, writable directory.

        Read-only: the root is never created here.
        """
        if not self._root.is_dir():
            raise NotADirectoryError(f"target dir {self._root} is missing or not a directory")
        if not os.access(self._root, os.W_OK | os.X_OK):
            raise PermissionError(f"target dir {self._root} is not writable")
