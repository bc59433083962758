"""
Page renderers for program_docs.

Each renderer turns a planned member file into an MDX documentation page.
Custom renderers can be added by inheriting from PageRenderer and
registering them for a type tag.
"""

from program_docs.renderers.base import DetailPage, PageRenderer, RendererRegistry
from program_docs.renderers.pages import (
    CodePageRenderer,
    DownloadPageRenderer,
    EmbedPageRenderer,
    IndexPageRenderer,
    create_default_registry,
)
from program_docs.renderers.templates import TemplateRenderer

__all__ = [
    "DetailPage",
    "PageRenderer",
    "RendererRegistry",
    "CodePageRenderer",
    "DownloadPageRenderer",
    "EmbedPageRenderer",
    "IndexPageRenderer",
    "TemplateRenderer",
    "create_default_registry",
]
