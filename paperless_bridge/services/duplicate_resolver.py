"""Recognition of Paperless "duplicate document" failures."""

import re
from typing import Optional

from ..core.config import Settings, get_settings

DEFAULT_DUPLICATE_PHRASE = "It is a duplicate"
DEFAULT_ID_PATTERN = r"(\d+)"


class DuplicateResolver:
    """Reads Paperless' human-readable failure message.

    Paperless rejects a known document with a message such as
    ``Not consumed: It is a duplicate of INV-2024.pdf (#482)``. The phrase
    flags the duplicate; the first digit run after the last ``#`` is the id
    of the document that already exists.
    """

    def __init__(
        self,
        phrase: str = DEFAULT_DUPLICATE_PHRASE,
        id_pattern: str = DEFAULT_ID_PATTERN,
    ):
        self.phrase = phrase
        self.id_pattern = re.compile(id_pattern)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "DuplicateResolver":
        settings = settings or get_settings()
        return cls(settings.duplicate_phrase, settings.duplicate_id_pattern)

    def is_duplicate_message(self, message: Optional[str]) -> bool:
        return bool(message) and self.phrase in message

    def extract_existing_id(self, message: Optional[str]) -> Optional[int]:
        if not message:
            return None

        hash_index = message.rfind("#")
        if hash_index == -1:
            return None

        match = self.id_pattern.search(message[hash_index + 1:])
        if not match:
            return None

        digits = match.group(1) if match.groups() else match.group(0)
        try:
            return int(digits)
        except ValueError:
            return None
