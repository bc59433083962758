"""
Filename classifier for program_docs.

Parses base names such as ``Chapt2Fig3a`` into a ProgramIdentity:

    Chapt<chapter><Exercise|Fig><number>[<variant>]

Only the ``Exercise``/``Fig`` token is case-insensitive. The variant is one
lowercase letter followed by optional digits (``a``, ``b1``).
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

UTILITY_CHAPTER = "utilities"

PROGRAM_PATTERN = re.compile(
    r"^Chapt(?P<chapter>[0-9]+)"
    r"(?P<kind>(?i:exercise|fig))"
    r"(?P<number>[0-9]+)"
    r"(?P<variant>[a-z][0-9]*)?$"
)


class ProgramKind(str, enum.Enum):
    """What a program's files illustrate."""

    EXERCISE = "Exercise"
    FIGURE = "Fig"
    UTILITY = "Utility"


@dataclass(frozen=True)
class ProgramIdentity:
    """Identity shared by every format of one logical program."""

    program_id: str
    chapter_key: str
    # None for utilities, which sort after every numbered chapter
    chapter_number: int | None
    kind: ProgramKind
    number: str = ""
    variant: str = ""

    @property
    def is_utility(self) -> bool:
        return self.kind is ProgramKind.UTILITY

    @property
    def display_label(self) -> str:
        """Short label such as ``Exercise 10`` or ``Fig 3A``."""
        if self.is_utility:
            return self.program_id
        return f"{self.kind.value} {self.number}{self.variant.upper()}"

    @property
    def title(self) -> str:
        """Page title such as ``Chapter 2 - Fig 3A``."""
        if self.is_utility:
            return self.program_id
        return f"Chapter {self.chapter_key} - {self.display_label}"


def classify(base_name: str) -> ProgramIdentity | None:
    """
    Classify a base name (extension already stripped).

    Args:
        base_name: File name without its extension.

    Returns:
        ProgramIdentity, or None when the name does not follow the convention.
    """
    match = PROGRAM_PATTERN.fullmatch(base_name)
    if not match:
        return None

    chapter = match.group("chapter")
    kind = ProgramKind.EXERCISE if match.group("kind").lower() == "exercise" else ProgramKind.FIGURE
    number = match.group("number")
    variant = match.group("variant") or ""

    return ProgramIdentity(
        program_id=f"Chapt{chapter}{kind.value}{number}{variant}",
        chapter_key=str(int(chapter)),
        chapter_number=int(chapter),
        kind=kind,
        number=number,
        variant=variant,
    )


def utility_identity(base_name: str) -> ProgramIdentity:
    """Fallback identity for a supported file outside the naming convention."""
    return ProgramIdentity(
        program_id=base_name,
        chapter_key=UTILITY_CHAPTER,
        chapter_number=None,
        kind=ProgramKind.UTILITY,
    )


def identify(base_name: str) -> ProgramIdentity:
    """Classify a base name, falling back to a utility identity."""
    return classify(base_name) or utility_identity(base_name)


def chapter_sort_key(chapter_key: str) -> tuple[int, int, str]:
    """Sort key placing numeric chapters ascending and utilities last."""
    if chapter_key.isdigit():
        return (0, int(chapter_key), chapter_key)
    return (1, 0, chapter_key)
