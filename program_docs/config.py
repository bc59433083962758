"""
Configuration constants and loading utilities for program_docs.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING

import yaml

from program_docs.filetypes import FileTypeDescriptor, RendererHint

if TYPE_CHECKING:
    from typing import Any, Mapping


class ConfigError(ValueError):
    """Raised when a configuration value cannot be used."""


DEFAULT_EXCLUDE = [
    ".git",
    ".svn",
    "__pycache__",
    ".ipynb_checkpoints",
    ".DS_Store",
    "Thumbs.db",
    "*.swp",
    "*~",
]


# Chapters of Levi's "Applied Quantum Mechanics"
DEFAULT_CHAPTER_NAMES = {
    "1": "Introduction to Quantum Mechanics",
    "2": "Schrödinger Equation",
    "3": "Quantum Wells and Barriers",
    "4": "Harmonic Oscillator",
    "5": "Tunneling and Resonance",
    "6": "Density of States",
    "7": "Band Structure",
    "8": "Perturbation Theory",
    "9": "Statistical Mechanics",
}


DEFAULT_CONFIG: dict[str, Any] = {
    "site": {
        "title": "Applied QM Documentation",
        "static_url_prefix": "/programs",
        "page_extension": ".mdx",
        "intro_doc_id": "intro",
        "intro_label": "📖 Introduction",
        # Optional external links shown on generated pages
        "viewer_base_url": None,
        "github_raw_base": None,
        "nbviewer_base_url": None,
    },

    # Relative paths resolve against the config file's directory
    "paths": {
        "inbox": "INBOX",
        "docs": "docs",
        "static": "static/programs",
        "sidebar": "sidebars.js",
        "templates": None,
    },

    "scan": {
        "recursive": False,
        "exclude": DEFAULT_EXCLUDE,
    },

    "chapters": DEFAULT_CHAPTER_NAMES,

    # extension -> descriptor
    "file_types": {
        ".m": {
            "type": "matlab",
            "label": "MATLAB",
            "emoji": "📊",
            "color": "#0076a8",
            "text": True,
            "renderer": "code",
            "language": "matlab",
        },
        ".ipynb": {
            "type": "notebook",
            "label": "Jupyter Notebook",
            "emoji": "📓",
            "color": "#f37626",
            "text": False,
            "renderer": "download-only",
        },
        ".tex": {
            "type": "latex",
            "label": "LaTeX",
            "emoji": "📝",
            "color": "#008080",
            "text": True,
            "renderer": "code",
            "language": "latex",
            "max_inline_length": 100000,
        },
        ".pdf": {
            "type": "pdf",
            "label": "PDF Document",
            "emoji": "📕",
            "color": "#dc2626",
            "text": False,
            "renderer": "embed-frame",
        },
        ".html": {
            "type": "html",
            "label": "HTML Page",
            "emoji": "🌐",
            "color": "#e34c26",
            "text": False,
            "renderer": "embed-frame",
        },
        ".htm": {
            "type": "html",
            "label": "HTML Page",
            "emoji": "🌐",
            "color": "#e34c26",
            "text": False,
            "renderer": "embed-frame",
        },
        ".txt": {
            "type": "text",
            "label": "Text File",
            "emoji": "📄",
            "color": "#6b7280",
            "text": True,
            "renderer": "code",
            "language": "text",
        },
    },

    # Display order of members on a program page
    "type_priority": ["matlab", "notebook", "latex", "pdf", "html", "text"],
}


_TYPE_TAG_RE = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


@dataclass(frozen=True)
class GeneratorConfig:
    """Immutable settings for one generator process."""

    inbox_dir: Path
    docs_dir: Path
    static_dir: Path
    sidebar_path: Path
    templates_dir: Path | None = None
    site_title: str = "Applied QM Documentation"
    static_url_prefix: str = "/programs"
    page_extension: str = ".mdx"
    intro_doc_id: str = "intro"
    intro_label: str = "📖 Introduction"
    viewer_base_url: str | None = None
    github_raw_base: str | None = None
    nbviewer_base_url: str | None = None
    recursive: bool = False
    exclude: tuple[str, ...] = tuple(DEFAULT_EXCLUDE)
    chapter_names: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_CHAPTER_NAMES))
    )
    file_types: tuple[FileTypeDescriptor, ...] = ()
    type_priority: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], base_dir: Path | None = None) -> "GeneratorConfig":
        """
        Build settings from a config dictionary.

        Args:
            data: Dictionary shaped like DEFAULT_CONFIG.
            base_dir: Directory that relative paths resolve against
                (default: current directory).

        Returns:
            GeneratorConfig instance.

        Raises:
            ConfigError: If a value is malformed.
        """
        base_dir = (base_dir or Path.cwd()).resolve()
        site = data.get("site") or {}
        paths = data.get("paths") or {}
        scan = data.get("scan") or {}

        def resolve(value: str | None) -> Path | None:
            if value is None:
                return None
            path = Path(value).expanduser()
            return path if path.is_absolute() else base_dir / path

        priority = data.get("type_priority") or []
        if not isinstance(priority, (list, tuple)):
            raise ConfigError("type_priority must be a list of type tags")

        chapters = {str(k): str(v) for k, v in (data.get("chapters") or {}).items()}

        return cls(
            inbox_dir=resolve(paths.get("inbox", "INBOX")),
            docs_dir=resolve(paths.get("docs", "docs")),
            static_dir=resolve(paths.get("static", "static/programs")),
            sidebar_path=resolve(paths.get("sidebar", "sidebars.js")),
            templates_dir=resolve(paths.get("templates")),
            site_title=site.get("title") or "Applied QM Documentation",
            static_url_prefix="/" + str(site.get("static_url_prefix", "/programs")).strip("/"),
            page_extension=_normalize_extension(site.get("page_extension", ".mdx")),
            intro_doc_id=site.get("intro_doc_id", "intro"),
            intro_label=site.get("intro_label", "📖 Introduction"),
            viewer_base_url=_strip_url(site.get("viewer_base_url")),
            github_raw_base=_strip_url(site.get("github_raw_base")),
            nbviewer_base_url=_strip_url(site.get("nbviewer_base_url")),
            recursive=bool(scan.get("recursive", False)),
            exclude=tuple(scan.get("exclude") or ()),
            chapter_names=MappingProxyType(chapters),
            file_types=parse_file_types(data.get("file_types") or {}),
            type_priority=tuple(str(tag) for tag in priority),
        )

    def with_overrides(self, **changes: Any) -> "GeneratorConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def chapter_name(self, chapter_key: str) -> str:
        """Display name for a numeric chapter key, generic when unmapped."""
        return self.chapter_names.get(chapter_key) or f"Chapter {chapter_key}"


def parse_file_types(table: Mapping[str, Mapping[str, Any]]) -> tuple[FileTypeDescriptor, ...]:
    """
    Convert the `file_types` config table into descriptors.

    Args:
        table: Mapping of extension -> descriptor fields.

    Returns:
        Tuple of descriptors, in table order.

    Raises:
        ConfigError: On an unknown renderer hint or an unsafe type tag.
    """
    descriptors = []
    for ext, entry in table.items():
        tag = str(entry.get("type", "")).strip()
        if not _TYPE_TAG_RE.fullmatch(tag):
            raise ConfigError(f"Invalid type tag {tag!r} for {ext}: use lowercase letters, digits, '-' or '_'")
        try:
            hint = RendererHint(entry.get("renderer", "download-only"))
        except ValueError:
            raise ConfigError(f"Unknown renderer {entry.get('renderer')!r} for {ext}") from None

        max_len = entry.get("max_inline_length")
        descriptors.append(
            FileTypeDescriptor(
                extension=_normalize_extension(ext),
                type_tag=tag,
                label=entry.get("label") or tag,
                is_text_renderable=bool(entry.get("text", False)),
                renderer_hint=hint,
                code_language=entry.get("language") or "text",
                max_inline_length=int(max_len) if max_len else None,
                emoji=entry.get("emoji") or "📄",
                color=entry.get("color") or "#6b7280",
            )
        )
    return tuple(descriptors)


def _normalize_extension(ext: str) -> str:
    ext = str(ext).strip().lower()
    return ext if ext.startswith(".") else "." + ext


def _strip_url(value: str | None) -> str | None:
    return value.rstrip("/") if value else None


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """
    Load configuration from YAML file, merged with defaults.

    Args:
        config_path: Path to the YAML configuration file, or None for defaults.

    Returns:
        Configuration dictionary with user values merged over defaults.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigError: If the file is not a YAML mapping.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is None:
        return config

    with open(config_path, "r", encoding="utf-8") as f:
        try:
            user_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(user_config, dict):
        raise ConfigError(f"{config_path} must contain a mapping at the top level")

    # Deep merge with defaults (one level); file_types and chapters replace wholesale
    for key, value in user_config.items():
        if (
            isinstance(value, dict)
            and key in config
            and isinstance(config[key], dict)
            and key not in ("file_types", "chapters")
        ):
            config[key] = {**config[key], **value}
        else:
            config[key] = value

    return config


def get_config_template() -> str:
    """Generate a commented YAML starter config."""
    return '''# =============================================================================
# program-docs configuration
# =============================================================================
# Relative paths are resolved against the directory holding this file.
# Run with: program-docs --config program-docs.yml
# =============================================================================

site:
  title: "Applied QM Documentation"
  # URL prefix under which the static tree is served
  static_url_prefix: /programs
  page_extension: .mdx
  intro_doc_id: intro
  intro_label: "📖 Introduction"
  # Optional: interactive viewer, appended with /<programId>
  viewer_base_url:
  # Optional: notebook links are <nbviewer_base_url>/url/<github_raw_base host+path><static URL>
  github_raw_base:
  nbviewer_base_url:

paths:
  inbox: INBOX
  docs: docs
  static: static/programs
  sidebar: sidebars.js
  # Directory of Jinja2 templates overriding the built-in pages
  templates:

scan:
  recursive: false
  exclude:
    - .git
    - __pycache__
    - .ipynb_checkpoints
    - .DS_Store

# Chapter number -> display name (unlisted chapters show as "Chapter N")
chapters:
  "1": Introduction to Quantum Mechanics
  "2": Schrödinger Equation
  "3": Quantum Wells and Barriers

# Extension -> file type. renderer is one of: code, embed-frame, download-only
# file_types:
#   ".m":
#     type: matlab
#     label: MATLAB
#     text: true
#     renderer: code
#     language: matlab

type_priority: [matlab, notebook, latex, pdf, html, text]
'''
