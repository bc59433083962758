"""
Grouping engine for program_docs.

Collects the source files that share a program identity, so that
``Chapt5Exercise5.m``, ``.pdf``, ``.tex`` and ``.html`` become one program.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import TYPE_CHECKING

from program_docs.classifier import ProgramIdentity, identify

if TYPE_CHECKING:
    from typing import Iterable

    from program_docs.filetypes import FileTypeDescriptor, FileTypeRegistry

logger = logging.getLogger(__name__)

UNSUPPORTED_EXTENSION = "unsupported-extension"


@dataclass(frozen=True)
class MemberFile:
    """One physical source file."""

    source_relative_path: str
    file_name: str
    extension: str

    @property
    def base_name(self) -> str:
        return self.file_name[: len(self.file_name) - len(self.extension)]

    @classmethod
    def from_relative_path(cls, relative_path: str) -> "MemberFile":
        path = PurePath(relative_path)
        return cls(
            source_relative_path=path.as_posix(),
            file_name=path.name,
            extension=path.suffix,
        )


@dataclass(frozen=True)
class SkippedFile:
    """A source file left out of the run, with the reason."""

    file_name: str
    reason: str


@dataclass
class ProgramGroup:
    """All member files of one program, in discovery order."""

    identity: ProgramIdentity
    members: list[tuple[MemberFile, FileTypeDescriptor]] = field(default_factory=list)

    @property
    def program_id(self) -> str:
        return self.identity.program_id

    def add(self, member: MemberFile, descriptor: FileTypeDescriptor) -> None:
        self.members.append((member, descriptor))


@dataclass
class GroupingResult:
    """Output of one grouping pass."""

    groups: dict[str, ProgramGroup] = field(default_factory=dict)
    skipped: list[SkippedFile] = field(default_factory=list)

    def by_chapter(self) -> dict[str, list[str]]:
        """chapterKey -> sorted programIds."""
        chapters: dict[str, set[str]] = {}
        for group in self.groups.values():
            chapters.setdefault(group.identity.chapter_key, set()).add(group.program_id)
        return {key: sorted(ids) for key, ids in chapters.items()}


def group_files(
    files: Iterable[MemberFile | str],
    registry: FileTypeRegistry,
) -> GroupingResult:
    """
    Group source files by program identity.

    Args:
        files: MemberFile records or source-relative paths.
        registry: Registry used to resolve each file's type.

    Returns:
        GroupingResult with groups keyed by programId and the skipped files.
    """
    result = GroupingResult()

    for item in files:
        member = item if isinstance(item, MemberFile) else MemberFile.from_relative_path(item)

        descriptor = registry.resolve(member.extension)
        if descriptor is None:
            logger.debug("Skipping %s: %s", member.source_relative_path, UNSUPPORTED_EXTENSION)
            result.skipped.append(SkippedFile(member.file_name, UNSUPPORTED_EXTENSION))
            continue

        # Unmatched names become utilities keyed by their own base name
        identity = identify(member.base_name)
        group = result.groups.get(identity.program_id)
        if group is None:
            group = ProgramGroup(identity)
            result.groups[identity.program_id] = group
        group.add(member, descriptor)

    return result
