"""
File-type descriptors and the extension registry.

Every supported extension maps to exactly one FileTypeDescriptor. The
descriptor's type tag doubles as an output path segment, so it must stay
lowercase and filesystem-safe.

Example:
    registry = FileTypeRegistry([
        FileTypeDescriptor(".m", "matlab", "MATLAB", True, RendererHint.CODE, "matlab"),
    ])
    registry.resolve(".M")  # -> the matlab descriptor
    registry.resolve(".exe")  # -> None
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Iterable

logger = logging.getLogger(__name__)


class RendererHint(str, enum.Enum):
    """How a detail page presents a file."""

    CODE = "code"
    EMBED_FRAME = "embed-frame"
    DOWNLOAD_ONLY = "download-only"


@dataclass(frozen=True)
class FileTypeDescriptor:
    """Static description of one supported extension."""

    extension: str
    type_tag: str
    label: str
    is_text_renderable: bool
    renderer_hint: RendererHint
    code_language: str = "text"
    # Longer text is cut with a truncation notice; None means no cap
    max_inline_length: int | None = None
    emoji: str = "📄"
    color: str = "#6b7280"


class FileTypeRegistry:
    """
    Registry of supported file types.

    Maps lowercase extensions to descriptors and type tags back to the
    descriptor that first claimed them.
    """

    def __init__(self, descriptors: Iterable[FileTypeDescriptor] = ()) -> None:
        self._by_extension: dict[str, FileTypeDescriptor] = {}
        self._by_tag: dict[str, FileTypeDescriptor] = {}
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: FileTypeDescriptor) -> None:
        """
        Register a descriptor for its extension.

        Re-registering an extension replaces the earlier descriptor.
        """
        ext = descriptor.extension.lower()
        if not ext.startswith("."):
            ext = "." + ext
        self._by_extension[ext] = descriptor
        self._by_tag.setdefault(descriptor.type_tag, descriptor)
        logger.debug("Registered file type %s: %s", descriptor.type_tag, ext)

    def resolve(self, extension: str) -> FileTypeDescriptor | None:
        """
        Resolve an extension (with or without the dot, any case).

        Returns:
            The descriptor, or None when the extension is unsupported.
        """
        ext = extension.lower()
        if ext and not ext.startswith("."):
            ext = "." + ext
        return self._by_extension.get(ext)

    def for_tag(self, type_tag: str) -> FileTypeDescriptor | None:
        """Get the descriptor registered for a type tag."""
        return self._by_tag.get(type_tag)

    @property
    def extensions(self) -> frozenset[str]:
        """All supported extensions."""
        return frozenset(self._by_extension)

    @property
    def type_tags(self) -> list[str]:
        """All type tags, in registration order."""
        return list(self._by_tag)

    def descriptors(self) -> list[FileTypeDescriptor]:
        """One descriptor per type tag."""
        return list(self._by_tag.values())
