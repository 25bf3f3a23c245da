"""Message tokenizer.

Splits caption or message text into `Hashtag` and `Text` tokens. Hashtags
become subdirectories of the archive, the first text word becomes the file name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Union


@dataclass(frozen=True)
class Hashtag:
    text: str


@dataclass(frozen=True)
class Text:
    text: str


Token = Union[Hashtag, Text]


def parse_message(text: str) -> List[Token]:
    tokens: List[Token] = []
    for word in text.split():
        if word.startswith("#"):
            tokens.append(Hashtag(word[1:]))
        else:
            tokens.append(Text(word))
    return tokens


def hashtags(tags: List[str]) -> List[Token]:
    """Wrap configured tag names as `Hashtag` tokens."""
    return [Hashtag(tag) for tag in tags]
