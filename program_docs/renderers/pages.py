"""
Page renderer strategies: code, embedded frame, download-only, and the
per-program index page.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from program_docs.filetypes import RendererHint
from program_docs.renderers.base import PageRenderer, RendererRegistry, viewer_url

if TYPE_CHECKING:
    from typing import Any, Iterable

    from program_docs.config import GeneratorConfig
    from program_docs.filetypes import FileTypeDescriptor
    from program_docs.planner import OutputPlan
    from program_docs.renderers.base import DetailPage
    from program_docs.renderers.templates import TemplateRenderer

UNREADABLE_PLACEHOLDER = "Unable to read file"

_BACKTICK_RUN = re.compile(r"`{3,}")


def code_fence(content: str) -> str:
    """A backtick fence longer than any backtick run inside the content."""
    longest = max((len(m.group(0)) for m in _BACKTICK_RUN.finditer(content)), default=2)
    return "`" * max(3, longest + 1)


def truncate_content(content: str, max_length: int | None) -> tuple[str, bool]:
    """
    Cut content to max_length characters.

    Returns:
        (content, truncated) tuple.
    """
    if max_length is None or len(content) <= max_length:
        return content, False
    return content[:max_length], True


class CodePageRenderer(PageRenderer):
    """Inline syntax-highlighted source, capped at max_inline_length."""

    template_name = "code.mdx.j2"
    hint = RendererHint.CODE

    def context(self, page: DetailPage) -> dict[str, Any]:
        context = super().context(page)
        content = page.content
        if content is None:
            content = UNREADABLE_PLACEHOLDER
        content = content.rstrip("\n")

        shown, truncated = truncate_content(content, page.item.descriptor.max_inline_length)
        context.update(
            content=shown,
            fence=code_fence(shown),
            truncated=truncated,
            shown_length=len(shown),
            total_length=len(content),
        )
        return context


class EmbedPageRenderer(PageRenderer):
    """Embedded preview frame with an open-in-new-tab fallback."""

    template_name = "embed.mdx.j2"
    hint = RendererHint.EMBED_FRAME


class DownloadPageRenderer(PageRenderer):
    """Download links only; notebooks also link to nbviewer when configured."""

    template_name = "download.mdx.j2"
    hint = RendererHint.DOWNLOAD_ONLY

    def context(self, page: DetailPage) -> dict[str, Any]:
        context = super().context(page)
        context["nbviewer_url"] = self._nbviewer_url(page)
        return context

    def _nbviewer_url(self, page: DetailPage) -> str | None:
        settings = self.settings
        if page.item.member.extension.lower() != ".ipynb":
            return None
        if not (settings.nbviewer_base_url and settings.github_raw_base):
            return None
        raw = settings.github_raw_base.split("://", 1)[-1]
        return f"{settings.nbviewer_base_url}/url/{raw}{page.item.static_url}"


class IndexPageRenderer:
    """Renders the index page listing every member of a program."""

    template_name = "index.mdx.j2"

    def __init__(self, templates: TemplateRenderer, settings: GeneratorConfig) -> None:
        self.templates = templates
        self.settings = settings

    def render(self, plan: OutputPlan) -> str:
        identity = plan.identity
        chapter_name = "" if identity.is_utility else self.settings.chapter_name(identity.chapter_key)
        return self.templates.render(
            self.template_name,
            identity=identity,
            chapter_name=chapter_name,
            members=list(plan.members),
            viewer_url=viewer_url(self.settings, plan),
        )


def create_default_registry(
    templates: TemplateRenderer,
    settings: GeneratorConfig,
    descriptors: Iterable[FileTypeDescriptor] = (),
) -> RendererRegistry:
    """
    Build a registry with one default strategy per renderer hint and an
    explicit entry for every configured type tag.
    """
    registry = RendererRegistry()
    defaults = {
        renderer.hint: renderer
        for renderer in (
            CodePageRenderer(templates, settings),
            EmbedPageRenderer(templates, settings),
            DownloadPageRenderer(templates, settings),
        )
    }
    for renderer in defaults.values():
        registry.register_default(renderer)
    for descriptor in descriptors:
        registry.register(descriptor.type_tag, defaults[descriptor.renderer_hint])
    return registry
