"""
Sidebar navigation generator for program_docs.

Builds the nested navigation tree (intro, then one category per chapter)
and writes it as the site's ``sidebars.js``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from program_docs import __version__
from program_docs.classifier import UTILITY_CHAPTER, chapter_sort_key, identify
from program_docs.planner import doc_id

if TYPE_CHECKING:
    from typing import Any, Callable, Iterable, Mapping

logger = logging.getLogger(__name__)

UTILITY_CATEGORY_LABEL = "🧰 Utilities"

TIMESTAMP_PREFIX = " * Last updated: "


def chapter_title(chapter_key: str, chapter_names: Mapping[str, str]) -> str:
    """Category title such as ``Ch 3: Quantum Wells and Barriers``."""
    if chapter_key == UTILITY_CHAPTER:
        return UTILITY_CATEGORY_LABEL
    name = chapter_names.get(chapter_key) or f"Chapter {chapter_key}"
    return f"Ch {chapter_key}: {name}"


def default_label(program_id: str) -> str:
    """Short label for a programId (``Exercise 10``, ``Fig 3A``, or the id itself)."""
    return identify(program_id).display_label


def build_navigation(
    programs_by_chapter: Mapping[str, Iterable[str]],
    chapter_names: Mapping[str, str],
    label_for: Callable[[str], str] | Mapping[str, str] | None = None,
    intro_doc_id: str = "intro",
    intro_label: str = "📖 Introduction",
) -> list[dict[str, Any]]:
    """
    Build the navigation tree.

    Args:
        programs_by_chapter: chapterKey -> programIds.
        chapter_names: Chapter number -> display name.
        label_for: Label lookup (callable or mapping); defaults to the
            label derived from the programId.
        intro_doc_id: Document id of the introduction page.
        intro_label: Sidebar label of the introduction page.

    Returns:
        List of sidebar items. Depends only on the set of programIds per
        chapter, never on iteration order.
    """
    if label_for is None:
        lookup = default_label
    elif callable(label_for):
        lookup = label_for
    else:
        labels = label_for
        lookup = lambda program_id: labels.get(program_id) or default_label(program_id)  # noqa: E731

    nav: list[dict[str, Any]] = [
        {"type": "doc", "id": intro_doc_id, "label": intro_label},
    ]

    for chapter_key in sorted(programs_by_chapter, key=chapter_sort_key):
        program_ids = sorted(set(programs_by_chapter[chapter_key]))
        if not program_ids:
            continue
        nav.append({
            "type": "category",
            "label": chapter_title(chapter_key, chapter_names),
            "collapsed": True,
            "items": [
                {
                    "type": "doc",
                    "id": doc_id(chapter_key, program_id),
                    "label": lookup(program_id),
                }
                for program_id in program_ids
            ],
        })

    return nav


def render_sidebar(nav: list[dict[str, Any]], generated_at: datetime | None = None) -> str:
    """
    Render the navigation tree as a Docusaurus ``sidebars.js`` module.

    The timestamp only appears in the header comment.
    """
    generated_at = generated_at or datetime.now(timezone.utc)
    items = json.dumps(nav, indent=2, ensure_ascii=False)
    items = "\n".join("  " + line if i else line for i, line in enumerate(items.splitlines()))

    lines = [
        "/**",
        " * Auto-generated sidebar configuration",
        f" * Generated by: program-docs v{__version__}",
        f"{TIMESTAMP_PREFIX}{generated_at.isoformat(timespec='seconds')}",
        " *",
        " * DO NOT EDIT MANUALLY - Changes will be overwritten on next generation",
        " */",
        "",
        "// @ts-check",
        "",
        "/** @type {import('@docusaurus/plugin-content-docs').SidebarsConfig} */",
        "const sidebars = {",
        f"  tutorialSidebar: {items},",
        "};",
        "",
        "module.exports = sidebars;",
        "",
    ]
    return "\n".join(lines)


def write_sidebar(
    output_path: Path,
    nav: list[dict[str, Any]],
    generated_at: datetime | None = None,
) -> Path:
    """
    Write the sidebar file, replacing any previous one.

    Returns:
        Path to the written file.

    Raises:
        OSError: If the file cannot be written.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(render_sidebar(nav, generated_at))
    logger.info("Sidebar written: %s", output_path)
    return output_path
