"""
Main documentation builder for program_docs.

Coordinates the classifier, grouping engine, planner, renderers and sidebar
generator to turn the inbox into documentation pages and static files.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from jinja2 import TemplateError

from program_docs.classifier import UTILITY_CHAPTER, chapter_sort_key
from program_docs.filetypes import FileTypeRegistry
from program_docs.grouping import SkippedFile, group_files
from program_docs.navigation import build_navigation, write_sidebar
from program_docs.planner import OutputPlanner
from program_docs.renderers import (
    DetailPage,
    IndexPageRenderer,
    TemplateRenderer,
    create_default_registry,
)
from program_docs.utils import copy_file, iter_source_files, read_text, remove_tree, write_text

if TYPE_CHECKING:
    from pathlib import Path

    from program_docs.config import GeneratorConfig
    from program_docs.planner import OutputPlan
    from program_docs.renderers import RendererRegistry

logger = logging.getLogger(__name__)


class SourceNotFoundError(FileNotFoundError):
    """The inbox directory does not exist; nothing was generated."""


@dataclass
class RunStatistics:
    """Counters and diagnostics for one generation pass."""

    processed: int = 0
    programs: int = 0
    skipped: list[SkippedFile] = field(default_factory=list)
    by_type: Counter = field(default_factory=Counter)
    by_chapter: dict[str, list[str]] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    sidebar_written: bool = False

    def skip(self, file_name: str, reason: str) -> None:
        logger.warning("Skipped %s: %s", file_name, reason)
        self.skipped.append(SkippedFile(file_name, reason))

    def summary_lines(self, labels: dict[str, str] | None = None) -> list[str]:
        """Human-readable summary of the run."""
        labels = labels or {}
        lines = [
            f"   📁 Programs:  {self.programs}",
            f"   📄 Files:     {self.processed}",
            f"   ⏭️  Skipped:   {len(self.skipped)}",
        ]

        if self.by_type:
            lines.append("")
            lines.append("📊 Files by Type:")
            for type_tag in sorted(self.by_type):
                lines.append(f"   {labels.get(type_tag, type_tag)}: {self.by_type[type_tag]}")

        if self.by_chapter:
            lines.append("")
            lines.append("📚 Programs by Chapter:")
            for chapter_key in sorted(self.by_chapter, key=chapter_sort_key):
                name = "Utilities" if chapter_key == UTILITY_CHAPTER else f"Chapter {chapter_key}"
                lines.append(f"   {name}: {len(self.by_chapter[chapter_key])} program(s)")

        if self.skipped:
            lines.append("")
            lines.append("⚠️  Skipped Files:")
            for skipped in self.skipped:
                lines.append(f"   {skipped.file_name}: {skipped.reason}")

        for warning in self.warnings:
            lines.append(f"⚠️  {warning}")

        return lines


@dataclass
class CleanResult:
    """Paths removed by a clean pass."""

    removed: list[Path] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


class DocumentationBuilder:
    """Runs full generation passes over the inbox."""

    def __init__(
        self,
        settings: GeneratorConfig,
        renderers: RendererRegistry | None = None,
        templates: TemplateRenderer | None = None,
    ) -> None:
        """
        Initialize the builder.

        Args:
            settings: Immutable generator settings.
            renderers: Detail page renderers (default: one per configured type).
            templates: Template renderer (default: built-ins plus settings.templates_dir).
        """
        self.settings = settings
        self.file_types = FileTypeRegistry(settings.file_types)
        self.planner = OutputPlanner(
            type_priority=settings.type_priority,
            page_extension=settings.page_extension,
            static_url_prefix=settings.static_url_prefix,
        )
        self.templates = templates or TemplateRenderer(settings.templates_dir)
        self.renderers = renderers or create_default_registry(
            self.templates, settings, self.file_types.descriptors()
        )
        self.index_renderer = IndexPageRenderer(self.templates, settings)

    @property
    def supported_extensions(self) -> frozenset[str]:
        return self.file_types.extensions

    def type_labels(self) -> dict[str, str]:
        """type tag -> "<emoji> <label>" for summaries."""
        return {d.type_tag: f"{d.emoji} {d.label}" for d in self.file_types.descriptors()}

    def run(self) -> RunStatistics:
        """
        Run one full generation pass.

        Returns:
            RunStatistics for the pass.

        Raises:
            SourceNotFoundError: If the inbox directory is missing. Nothing
                is written in that case.
        """
        inbox = self.settings.inbox_dir
        if not inbox.is_dir():
            raise SourceNotFoundError(f"INBOX folder not found: {inbox}")

        stats = RunStatistics()

        sources = list(iter_source_files(inbox, self.settings.recursive, self.settings.exclude))
        logger.info("Scanning %s: %d file(s)", inbox, len(sources))

        grouping = group_files(sources, self.file_types)
        for skipped in grouping.skipped:
            stats.skip(skipped.file_name, skipped.reason)

        by_chapter: dict[str, list[str]] = {}
        for plan in self.planner.plan_all(list(grouping.groups.values())):
            if self._write_program(plan, stats):
                identity = plan.identity
                by_chapter.setdefault(identity.chapter_key, []).append(identity.program_id)

        stats.by_chapter = {key: sorted(ids) for key, ids in by_chapter.items()}
        stats.programs = sum(len(ids) for ids in by_chapter.values())

        self._write_sidebar(stats)
        return stats

    def _write_program(self, plan: OutputPlan, stats: RunStatistics) -> bool:
        """
        Copy members, render detail pages and the index page for one program.

        Returns:
            True if the program's index page was written.
        """
        settings = self.settings
        docs_dir = settings.docs_dir / plan.docs_dir
        # Members whose detail page exists; only these appear on the index page
        documented = []

        for item in plan.members:
            member, descriptor = item.member, item.descriptor
            source = settings.inbox_dir / member.source_relative_path

            renderer = self.renderers.get(descriptor)
            if renderer is None:
                stats.skip(member.file_name, f"no renderer for {descriptor.type_tag}")
                continue

            try:
                copy_file(source, settings.static_dir / item.static_path)
            except OSError as e:
                stats.skip(member.file_name, f"copy failed: {e}")
                continue

            try:
                content = read_text(source) if descriptor.is_text_renderable else None
            except OSError as e:
                stats.skip(member.file_name, f"read failed: {e}")
                continue

            try:
                page = renderer.render(DetailPage(plan=plan, item=item, content=content))
                write_text(docs_dir / item.detail_page, page)
            except TemplateError as e:
                stats.skip(member.file_name, f"render failed: {e}")
                continue
            except OSError as e:
                stats.skip(member.file_name, f"write failed: {e}")
                continue

            documented.append(item)
            stats.processed += 1
            stats.by_type[descriptor.type_tag] += 1

        if not documented:
            return False

        try:
            index = self.index_renderer.render(replace(plan, members=tuple(documented)))
            write_text(docs_dir / plan.index_page, index)
        except (TemplateError, OSError) as e:
            stats.skip(plan.index_page, f"index failed for {plan.identity.program_id}: {e}")
            return False

        logger.info(
            "%s/ %s (%d file(s))",
            plan.identity.program_id,
            "".join(item.descriptor.emoji for item in documented),
            len(documented),
        )
        return True

    def _write_sidebar(self, stats: RunStatistics) -> None:
        settings = self.settings
        nav = build_navigation(
            stats.by_chapter,
            settings.chapter_names,
            intro_doc_id=settings.intro_doc_id,
            intro_label=settings.intro_label,
        )
        try:
            write_sidebar(settings.sidebar_path, nav)
            stats.sidebar_written = True
        except OSError as e:
            message = f"Failed to update sidebar: {e}"
            logger.warning(message)
            stats.warnings.append(message)

    def clean(self) -> CleanResult:
        """
        Remove generated chapter directories and the static root.

        Safe to call when nothing has been generated.
        """
        result = CleanResult()
        targets = []

        docs_dir = self.settings.docs_dir
        if docs_dir.is_dir():
            for item in sorted(docs_dir.iterdir()):
                if item.is_dir() and (item.name.startswith("chapter") or item.name == UTILITY_CHAPTER):
                    targets.append(item)
        targets.append(self.settings.static_dir)

        for target in targets:
            try:
                if remove_tree(target):
                    logger.info("Removed: %s", target)
                    result.removed.append(target)
            except OSError as e:
                logger.warning("Failed to remove %s: %s", target, e)
                result.errors.append(f"Failed to remove {target}: {e}")

        return result
