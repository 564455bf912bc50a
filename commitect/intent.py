"""Intent Parsing - Turn the classifier's text into type and message."""

from dataclasses import dataclass
from enum import Enum


INTENT_PREFIX = "Intent:"
MESSAGE_PREFIX = "Message:"
FALLBACK_TYPE = "Intent"


class Choice(Enum):
    """What the user wants done with a presented result."""
    NONE = "none"
    COPY_MESSAGE = "message"
    COPY_FULL = "full"


@dataclass
class ParsedIntent:
    """Classifier output split into its two labelled lines."""
    type: str
    message: str
    raw: str = ""

    @property
    def is_structured(self) -> bool:
        return bool(self.type and self.message)

    @property
    def display_type(self) -> str:
        return self.type if self.is_structured else FALLBACK_TYPE

    @property
    def display_message(self) -> str:
        return self.message if self.is_structured else self.raw

    @property
    def full_text(self) -> str:
        return f"{self.display_type}: {self.display_message}"

    def text_for(self, choice: Choice) -> str | None:
        """Text to put on the clipboard for choice, None for no copy."""
        if choice is Choice.COPY_MESSAGE:
            return self.display_message
        if choice is Choice.COPY_FULL:
            return self.full_text
        return None


def parse_intent(raw: str) -> ParsedIntent:
    """
    Parse 'Intent: <type>' / 'Message: <text>' lines.

    Prefixes are case-sensitive and must start the line. Missing lines
    leave the field empty, which makes the caller fall back to raw.
    """
    intent_type = ""
    message = ""
    for line in raw.split('\n'):
        if line.startswith(INTENT_PREFIX):
            intent_type = line[len(INTENT_PREFIX):].strip()
        elif line.startswith(MESSAGE_PREFIX):
            message = line[len(MESSAGE_PREFIX):].strip()
    return ParsedIntent(type=intent_type, message=message, raw=raw)
