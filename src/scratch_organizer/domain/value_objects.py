"""
Domain value objects for Scratch Organizer.

Value objects are immutable and compared by their attributes, which lets
the scratch list hold them directly and compare whole lists by value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


MNEMONIC_MARKER = "&"


class AppendType(Enum):
    """Where new text or new scratches are placed in a sequence."""
    APPEND = "APPEND"
    PREPEND = "PREPEND"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional[AppendType]:
        """Parse a persisted value, returning None when it is absent."""
        if value is None:
            return None
        return cls(value.upper())


class DefaultScratchMeaning(Enum):
    """Which scratch counts as the default one."""
    TOPMOST = "TOPMOST"
    LAST_OPENED = "LAST_OPENED"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional[DefaultScratchMeaning]:
        if value is None:
            return None
        return cls(value.upper())


@dataclass(frozen=True, slots=True)
class Scratch:
    """
    A single named text scratch.

    The full name may contain '&' to mark a menu mnemonic, e.g. "&notes.txt".
    The file on disk is named after the full name with markers stripped.
    """

    full_name_with_mnemonics: str

    @classmethod
    def create(cls, full_name_with_mnemonics: str) -> Scratch:
        return cls(full_name_with_mnemonics)

    @property
    def file_name(self) -> str:
        """Leaf name of the backing file."""
        return self.full_name_with_mnemonics.replace(MNEMONIC_MARKER, "")

    @property
    def name(self) -> str:
        """File name without extension."""
        file_name = self.file_name
        index = file_name.rfind(".")
        return file_name if index <= 0 else file_name[:index]

    @property
    def extension(self) -> str:
        file_name = self.file_name
        index = file_name.rfind(".")
        return "" if index <= 0 else file_name[index + 1:]

    def __str__(self) -> str:
        return self.file_name


@dataclass(frozen=True, slots=True)
class Answer:
    """Yes, or no with a human-readable explanation."""

    is_yes: bool
    explanation: Optional[str] = None

    @classmethod
    def yes(cls) -> Answer:
        return cls(True)

    @classmethod
    def no(cls, explanation: str) -> Answer:
        return cls(False, explanation)

    @property
    def is_no(self) -> bool:
        return not self.is_yes

    def __str__(self) -> str:
        return "Yes" if self.is_yes else f"No ({self.explanation})"
