"""
Template system for generated pages.

Provides Jinja2-based templating with default MDX templates and support
for custom user templates. Variables use ``[[ ... ]]`` so that JSX style
objects (``style={{...}}``) pass through untouched.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import yaml
from jinja2 import ChoiceLoader, DictLoader, Environment, FileSystemLoader, StrictUndefined, TemplateNotFound

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)


_BUTTON = (
    "style={{padding: '10px 20px', backgroundColor: '%s', color: 'white', "
    "borderRadius: '6px', textDecoration: 'none', fontWeight: 'bold'}}"
)

_ACTIONS = """<div style={{display: 'flex', gap: '12px', flexWrap: 'wrap', marginBottom: '24px'}}>
{% if viewer_url %}
  <a href="[[ viewer_url ]]" target="_blank" rel="noopener noreferrer"
    """ + _BUTTON % "#6366f1" + """>
    🚀 Interactive Viewer
  </a>
{% endif %}
  <a href="[[ item.static_url ]]" download="[[ item.member.file_name ]]"
    """ + _BUTTON % "#10b981" + """>
    📥 Download [[ item.member.extension ]]
  </a>
  <a href="[[ item.static_url ]]" target="_blank" rel="noopener noreferrer"
    """ + _BUTTON % "#3b82f6" + """>
    🔗 Open Raw
  </a>
</div>
"""

_FRONT_MATTER = """---
title: [[ (identity.title ~ ' - ' ~ item.descriptor.label) | yaml_escape ]]
sidebar_label: [[ item.descriptor.label | yaml_escape ]]
---

# [[ identity.title | mdx_escape ]] - [[ item.descriptor.label ]]

"""

_BACK_LINK = """
---

[← Back to [[ identity.title | mdx_escape ]]](./)
"""


DEFAULT_TEMPLATES = {
    "index.mdx.j2": """---
title: [[ identity.title | yaml_escape ]]
sidebar_label: [[ identity.display_label | yaml_escape ]]
---

# [[ identity.title | mdx_escape ]]

{% if identity.is_utility %}
> **Utilities**: supporting files outside the chapter numbering
{% else %}
> **Chapter [[ identity.chapter_key ]]**: [[ chapter_name ]]
{% endif %}
>
> [[ members | map(attribute='descriptor.emoji') | join(' ') ]] [[ members | length ]] file(s) available
{% if viewer_url %}

<div style={{marginBottom: '24px'}}>
  <a href="[[ viewer_url ]]" target="_blank" rel="noopener noreferrer"
    style={{display: 'inline-flex', alignItems: 'center', gap: '8px', padding: '14px 28px', background: 'linear-gradient(135deg, #6366f1 0%, #8b5cf6 100%)', color: 'white', borderRadius: '10px', textDecoration: 'none', fontWeight: 'bold', fontSize: '16px'}}>
    🚀 Open Interactive Viewer
  </a>
</div>
{% endif %}

## Available Files
{% for item in members %}

<div style={{border: '1px solid #e5e7eb', borderRadius: '8px', padding: '16px', marginBottom: '12px', backgroundColor: '#fafafa'}}>
  <div style={{display: 'flex', alignItems: 'center', gap: '12px', marginBottom: '12px'}}>
    <span style={{fontSize: '24px'}}>[[ item.descriptor.emoji ]]</span>
    <div>
      <strong style={{color: '[[ item.descriptor.color ]]'}}>[[ item.descriptor.label ]]</strong>
      <div style={{fontSize: '12px', color: '#666'}}>`[[ item.member.file_name ]]`</div>
    </div>
  </div>
  <div style={{display: 'flex', gap: '8px', flexWrap: 'wrap'}}>
    <a href="[[ item.detail_link ]]"
      style={{padding: '6px 12px', backgroundColor: '[[ item.descriptor.color ]]', color: 'white', borderRadius: '4px', textDecoration: 'none', fontSize: '13px'}}>
      📖 View Details
    </a>
    <a href="[[ item.static_url ]]" download="[[ item.member.file_name ]]"
      style={{padding: '6px 12px', backgroundColor: '#10b981', color: 'white', borderRadius: '4px', textDecoration: 'none', fontSize: '13px'}}>
      📥 Download
    </a>
    <a href="[[ item.static_url ]]" target="_blank" rel="noopener noreferrer"
      style={{padding: '6px 12px', backgroundColor: '#6b7280', color: 'white', borderRadius: '4px', textDecoration: 'none', fontSize: '13px'}}>
      🔗 Open
    </a>
  </div>
</div>
{% endfor %}

---

*Program ID: `[[ identity.program_id ]]`*
""",

    "code.mdx.j2": _FRONT_MATTER + _ACTIONS + """
## Source Code

[[ fence ]][[ item.descriptor.code_language ]] title="[[ item.member.file_name ]]"
[[ content ]]
[[ fence ]]
{% if truncated %}

:::caution Truncated
Showing the first [[ shown_length | format_number ]] of [[ total_length | format_number ]] characters. Download the file to see the rest.
:::
{% endif %}
""" + _BACK_LINK,

    "embed.mdx.j2": _FRONT_MATTER + _ACTIONS + """
## Preview

<iframe
  src="[[ item.static_url ]]"
  title="[[ item.member.file_name ]]"
  style={{width: '100%', height: '80vh', border: '1px solid #e5e7eb', borderRadius: '8px'}}
/>

If the preview does not load, <a href="[[ item.static_url ]]" target="_blank" rel="noopener noreferrer">open [[ item.member.file_name ]] in a new tab</a>.
""" + _BACK_LINK,

    "download.mdx.j2": _FRONT_MATTER + _ACTIONS + """
## Download

`[[ item.member.file_name ]]` is available as a download ([[ item.descriptor.label ]]).
{% if nbviewer_url %}

<a href="[[ nbviewer_url ]]" target="_blank" rel="noopener noreferrer"
  """ + _BUTTON % "#f37626" + """>
  📓 View on nbviewer
</a>
{% endif %}
""" + _BACK_LINK,
}


# Characters that change the meaning of a plain YAML scalar anywhere in it
_YAML_SPECIAL = frozenset(":#\"'[]{},&*!|>%@`")
# Characters that only matter at the start of a plain scalar
_YAML_LEADING = frozenset("-?")


def yaml_escape(value: str) -> str:
    """
    Quote a front-matter value unless it reads back as the same plain string.

    Values with YAML indicator characters, surrounding whitespace, or a plain
    form that YAML would load as something else (``123``, ``null``) are
    double-quoted.
    """
    value = str(value)
    if not _needs_quotes(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _needs_quotes(value: str) -> bool:
    if not value or value != value.strip():
        return True
    if value[0] in _YAML_LEADING or any(ch in _YAML_SPECIAL for ch in value):
        return True
    try:
        return yaml.safe_load(value) != value
    except yaml.YAMLError:
        return True


def mdx_escape(value: str) -> str:
    """Escape characters MDX would treat as JSX in headings and prose."""
    return str(value).replace("{", "\\{").replace("}", "\\}").replace("<", "&lt;")


class TemplateRenderer:
    """
    Render page templates.

    Supports both default templates and custom user templates.
    """

    def __init__(self, custom_template_dir: Path | None = None) -> None:
        """
        Initialize the template renderer.

        Args:
            custom_template_dir: Optional directory with custom templates
                that override defaults of the same name.
        """
        self.custom_dir = custom_template_dir

        loaders = []
        if custom_template_dir and custom_template_dir.exists():
            loaders.append(FileSystemLoader(str(custom_template_dir)))
            logger.debug("Using custom templates from %s", custom_template_dir)
        loaders.append(DictLoader(DEFAULT_TEMPLATES))

        self.env = Environment(
            loader=ChoiceLoader(loaders),
            variable_start_string="[[",
            variable_end_string="]]",
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
            autoescape=False,
        )

        self.env.filters["format_number"] = lambda x: f"{int(x):,}"
        self.env.filters["yaml_escape"] = yaml_escape
        self.env.filters["mdx_escape"] = mdx_escape

    def render(self, template_name: str, **context: Any) -> str:
        """
        Render a template with context.

        Args:
            template_name: Name of the template (e.g., "code.mdx.j2")
            **context: Template context variables.

        Returns:
            Rendered template string.
        """
        template = self.env.get_template(template_name)
        return template.render(**context)

    def has_template(self, template_name: str) -> bool:
        """Check if a template exists."""
        try:
            self.env.get_template(template_name)
            return True
        except TemplateNotFound:
            return False


def create_template_dir(output_dir: Path) -> list[Path]:
    """
    Write the default templates into a directory for customization.

    Returns:
        Paths of the written templates.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for template_name, content in DEFAULT_TEMPLATES.items():
        template_path = output_dir / template_name
        with open(template_path, "w", encoding="utf-8") as f:
            f.write(content)
        written.append(template_path)
    return written
