from __future__ import annotations

from pathlib import Path

import pytest

from program_docs.config import GeneratorConfig, load_config
from program_docs.filetypes import FileTypeRegistry
from tests._fixtures.inbox_builder import InboxBuilder


@pytest.fixture
def inbox(tmp_path: Path) -> InboxBuilder:
    """Provide a reusable inbox builder rooted at the pytest tmp_path."""
    return InboxBuilder(tmp_path)


@pytest.fixture
def default_settings(tmp_path: Path) -> GeneratorConfig:
    return GeneratorConfig.from_dict(load_config(), base_dir=tmp_path)


@pytest.fixture
def registry(default_settings: GeneratorConfig) -> FileTypeRegistry:
    """Registry of the default file types."""
    return FileTypeRegistry(default_settings.file_types)
