"""
Output path planner for program_docs.

Derives every destination for a ProgramGroup from its identity alone:

    docs/<chapter segment>/<programId>/index<ext>
    docs/<chapter segment>/<programId>/<programId>_<typeTag><ext>
    static/<typeTag>/<programId>/<original file name>
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from program_docs.classifier import UTILITY_CHAPTER, chapter_sort_key

if TYPE_CHECKING:
    from typing import Sequence

    from program_docs.classifier import ProgramIdentity
    from program_docs.filetypes import FileTypeDescriptor
    from program_docs.grouping import MemberFile, ProgramGroup


@dataclass(frozen=True)
class PlannedMember:
    """Destinations for one member file."""

    member: MemberFile
    descriptor: FileTypeDescriptor
    static_path: PurePosixPath
    static_url: str
    detail_page: str

    @property
    def detail_link(self) -> str:
        """Relative link from the index page to the detail page."""
        return "./" + self.detail_page.rsplit(".", 1)[0]


@dataclass(frozen=True)
class OutputPlan:
    """Destinations for one program group."""

    identity: ProgramIdentity
    docs_dir: PurePosixPath
    index_page: str
    members: tuple[PlannedMember, ...]
    sort_priority: tuple[int, int, str]


def chapter_segment(chapter_key: str) -> str:
    """Docs directory name for a chapter key."""
    if chapter_key == UTILITY_CHAPTER:
        return UTILITY_CHAPTER
    return f"chapter{chapter_key}"


def doc_id(chapter_key: str, program_id: str) -> str:
    """Site document id of a program's index page."""
    return f"{chapter_segment(chapter_key)}/{program_id}/index"


class OutputPlanner:
    """Plans docs and static destinations for program groups."""

    def __init__(
        self,
        type_priority: Sequence[str] = (),
        page_extension: str = ".mdx",
        static_url_prefix: str = "/programs",
    ) -> None:
        """
        Initialize the planner.

        Args:
            type_priority: Type tags in display order; unlisted tags sort last.
            page_extension: Extension of generated documentation pages.
            static_url_prefix: URL under which the static root is served.
        """
        self.type_priority = {tag: rank for rank, tag in enumerate(type_priority)}
        self.page_extension = page_extension
        self.static_url_prefix = "/" + static_url_prefix.strip("/")

    def member_sort_key(self, member: MemberFile, descriptor: FileTypeDescriptor) -> tuple[int, str, str]:
        """Rank by type priority, unranked tags alphabetically, then file name."""
        rank = self.type_priority.get(descriptor.type_tag, len(self.type_priority))
        return (rank, descriptor.type_tag, member.file_name)

    def order_members(
        self, members: Sequence[tuple[MemberFile, FileTypeDescriptor]]
    ) -> list[tuple[MemberFile, FileTypeDescriptor]]:
        return sorted(members, key=lambda pair: self.member_sort_key(*pair))

    def plan(self, group: ProgramGroup) -> OutputPlan:
        """
        Plan all destinations for a group.

        Args:
            group: The program group.

        Returns:
            OutputPlan with members in display order.
        """
        identity = group.identity
        program_id = identity.program_id

        planned = []
        for member, descriptor in self.order_members(group.members):
            static_path = PurePosixPath(descriptor.type_tag, program_id, member.file_name)
            planned.append(
                PlannedMember(
                    member=member,
                    descriptor=descriptor,
                    static_path=static_path,
                    static_url=f"{self.static_url_prefix}/{static_path.as_posix()}",
                    detail_page=f"{program_id}_{descriptor.type_tag}{self.page_extension}",
                )
            )

        return OutputPlan(
            identity=identity,
            docs_dir=PurePosixPath(chapter_segment(identity.chapter_key), program_id),
            index_page=f"index{self.page_extension}",
            members=tuple(planned),
            sort_priority=chapter_sort_key(identity.chapter_key),
        )

    def plan_all(self, groups: Sequence[ProgramGroup]) -> list[OutputPlan]:
        """Plan every group, ordered by chapter then programId."""
        plans = [self.plan(group) for group in groups]
        plans.sort(key=lambda p: (p.sort_priority, p.identity.program_id))
        return plans
