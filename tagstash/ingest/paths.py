"""Destination path construction.

Implements hashtag-to-directory mapping, file stem selection and the numeric
suffix collision resolution used when archiving a file.
"""

from __future__ import annotations

import datetime as _dt
import os
from pathlib import Path
from typing import Iterable, Optional, Union

from .tokens import Hashtag, Text, Token


FALLBACK_STEM_FORMAT = "file_%Y-%m-%d_%H-%M-%S"


def extension_of(source_name: str) -> Optional[str]:
    """Return the extension of the last path component, without the dot."""
    base = os.path.basename(source_name)
    ext = os.path.splitext(base)[1]
    return ext[1:] if ext else None


def fallback_stem(now: _dt.datetime) -> str:
    return now.strftime(FALLBACK_STEM_FORMAT)


def _with_ext(stem: str, ext: Optional[str]) -> str:
    return f"{stem}.{ext}" if ext is not None else stem


def build_final_path(
    root: Union[str, os.PathLike],
    tokens: Iterable[Token],
    source_name: str,
    now: _dt.datetime,
) -> Path:
    """Compute a destination path under `root` that does not exist yet.

    Args:
        root: Archive root directory.
        tokens: Configured tags followed by the parsed caption tokens.
        source_name: Remote file name, used only for its extension.
        now: Timestamp for the fallback stem when no text token is present.

    Returns:
        `root/<hashtag>/.../<stem>[.<ext>]`, or `<stem>_<n>[.<ext>]` with the
        smallest n >= 1 that is free when the plain name is taken. Existence
        checks go through `os.path.exists`, so an unreadable entry counts as
        free and the subsequent write reports the real error.
    """
    tokens = list(tokens)
    directory = Path(root)
    for token in tokens:
        if isinstance(token, Hashtag):
            directory = directory / token.text

    ext = extension_of(source_name)
    stem = next((t.text for t in tokens if isinstance(t, Text)), None)
    if stem is None:
        stem = fallback_stem(now)

    candidate = directory / _with_ext(stem, ext)
    tries = 0
    while os.path.exists(candidate):
        tries += 1
        candidate = directory / _with_ext(f"{stem}_{tries}", ext)
    return candidate
