"""
Base page renderer and the renderer registry.

Each type tag maps to one PageRenderer strategy. To support a new format,
register a renderer for its tag rather than editing the builder:

    registry.register("svg", EmbedPageRenderer(templates, settings))
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from typing import Any

    from program_docs.config import GeneratorConfig
    from program_docs.filetypes import FileTypeDescriptor, RendererHint
    from program_docs.planner import OutputPlan, PlannedMember
    from program_docs.renderers.templates import TemplateRenderer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetailPage:
    """Everything a detail page needs: the plan, one member and its text."""

    plan: OutputPlan
    item: PlannedMember
    # None when the file is not text-renderable or could not be read
    content: str | None = None


class PageRenderer(ABC):
    """
    Abstract base class for detail page renderers.

    Subclasses set `template_name` and may extend `context`.
    """

    template_name: ClassVar[str]

    def __init__(self, templates: TemplateRenderer, settings: GeneratorConfig) -> None:
        self.templates = templates
        self.settings = settings

    def render(self, page: DetailPage) -> str:
        """Render the detail page body."""
        return self.templates.render(self.template_name, **self.context(page))

    def context(self, page: DetailPage) -> dict[str, Any]:
        """Template variables shared by every detail page."""
        return {
            "identity": page.plan.identity,
            "item": page.item,
            "viewer_url": viewer_url(self.settings, page.plan),
        }

    @property
    @abstractmethod
    def hint(self) -> RendererHint:
        """The renderer hint this strategy implements."""
        ...


def viewer_url(settings: GeneratorConfig, plan: OutputPlan) -> str | None:
    """Interactive viewer link, when a viewer is configured."""
    if not settings.viewer_base_url or plan.identity.is_utility:
        return None
    return f"{settings.viewer_base_url}/{plan.identity.program_id}"


class RendererRegistry:
    """
    Registry of page renderers keyed by type tag.

    Tags without an explicit renderer fall back to the default strategy for
    their descriptor's renderer hint.
    """

    def __init__(self) -> None:
        self._by_tag: dict[str, PageRenderer] = {}
        self._by_hint: dict[RendererHint, PageRenderer] = {}

    def register(self, type_tag: str, renderer: PageRenderer) -> None:
        """Register a renderer for a type tag, replacing any previous one."""
        self._by_tag[type_tag] = renderer
        logger.debug("Registered renderer for %s: %s", type_tag, type(renderer).__name__)

    def register_default(self, renderer: PageRenderer) -> None:
        """Register the fallback renderer for the renderer's hint."""
        self._by_hint[renderer.hint] = renderer

    def get(self, descriptor: FileTypeDescriptor) -> PageRenderer | None:
        """
        Find the renderer for a file type.

        Returns:
            The tag's renderer, else the hint's default, else None.
        """
        renderer = self._by_tag.get(descriptor.type_tag)
        if renderer is None:
            renderer = self._by_hint.get(descriptor.renderer_hint)
        return renderer

    def list_tags(self) -> list[str]:
        """Type tags with an explicit renderer."""
        return list(self._by_tag)
