"""Reply message formatter for the tagstash bot.

Keeps every user-visible text in one place. Replies are sent as plain text
since they echo user input and file paths verbatim.
"""

from pathlib import Path
from typing import Union


class ReplyFormatter:
    """Formats bot replies with emojis for readability in the Telegram UI."""

    EMOJIS = {
        "success": "✅",
        "error": "❌",
    }

    @classmethod
    def format_echo(cls, display_name: str, text: str) -> str:
        return f"Hi, {display_name}! You wrote '{text}'"

    @classmethod
    def format_saved(cls, path: Union[str, Path]) -> str:
        return f"{cls.EMOJIS['success']} File saved to {path}"

    @classmethod
    def format_failed(cls, reason: str) -> str:
        """Format the reply sent when archiving a message raised an error."""
        return f"{cls.EMOJIS['error']} Could not save file: {reason}"
