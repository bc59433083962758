"""Tests for the program-docs command line."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from program_docs import __version__
from program_docs.cli import build_settings, create_parser, main
from program_docs.renderers.templates import DEFAULT_TEMPLATES
from tests._fixtures.inbox_builder import InboxBuilder


def test_parser_defaults() -> None:
    args = create_parser().parse_args([])

    assert not args.watch
    assert not args.clean
    assert not args.recursive
    assert not args.strict
    assert args.source is None
    assert args.config is None


def test_modes_are_mutually_exclusive() -> None:
    with pytest.raises(SystemExit):
        create_parser().parse_args(["--watch", "--clean"])


def test_version(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])

    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_init_config_prints_template(capsys) -> None:
    assert main(["--init-config"]) == 0

    config = yaml.safe_load(capsys.readouterr().out)
    assert config["paths"]["inbox"] == "INBOX"


def test_export_templates(tmp_path: Path) -> None:
    target = tmp_path / "templates"

    assert main(["--export-templates", str(target)]) == 0
    assert sorted(p.name for p in target.iterdir()) == sorted(DEFAULT_TEMPLATES)


def test_generate_once(inbox: InboxBuilder, capsys) -> None:
    inbox.touch("Chapt1Exercise8.m", "fermi.m")

    assert main(["--base-dir", str(inbox.root)]) == 0

    out = capsys.readouterr().out
    assert "Generation Complete" in out
    assert "📁 Programs:  2" in out
    assert (inbox.docs / "chapter1" / "Chapt1Exercise8" / "index.mdx").is_file()
    assert inbox.sidebar.is_file()


def test_source_flag_overrides_inbox(tmp_path: Path) -> None:
    sources = tmp_path / "elsewhere"
    sources.mkdir()
    (sources / "Chapt2Fig1.m").write_text("plot(1)\n", encoding="utf-8")
    site = tmp_path / "site"

    assert main(["--base-dir", str(site), "--source", str(sources)]) == 0
    assert (site / "docs" / "chapter2" / "Chapt2Fig1" / "index.mdx").is_file()


def test_missing_source_exit_codes(tmp_path: Path, capsys) -> None:
    assert main(["--base-dir", str(tmp_path)]) == 0
    assert "INBOX folder not found" in capsys.readouterr().err

    assert main(["--base-dir", str(tmp_path), "--strict"]) == 1
    assert not (tmp_path / "docs").exists()
    assert not (tmp_path / "sidebars.js").exists()


def test_missing_config_file(tmp_path: Path, capsys) -> None:
    assert main(["--config", str(tmp_path / "absent.yml")]) == 1
    assert "does not exist" in capsys.readouterr().err


def test_invalid_config_file(tmp_path: Path, capsys) -> None:
    config = tmp_path / "program-docs.yml"
    config.write_text("file_types:\n  .m:\n    type: Bad/Tag\n", encoding="utf-8")

    assert main(["--config", str(config)]) == 1
    assert "Invalid type tag" in capsys.readouterr().err


def test_config_directory_is_default_base(tmp_path: Path) -> None:
    config = tmp_path / "conf" / "program-docs.yml"
    config.parent.mkdir()
    config.write_text("paths:\n  inbox: ../INBOX\n", encoding="utf-8")

    settings = build_settings(create_parser().parse_args(["--config", str(config), "-r"]))

    assert settings.inbox_dir.resolve() == (tmp_path / "INBOX").resolve()
    assert settings.docs_dir == config.parent.resolve() / "docs"
    assert settings.recursive is True


def test_clean(inbox: InboxBuilder, capsys) -> None:
    inbox.touch("Chapt1Fig1.m")
    assert main(["--base-dir", str(inbox.root)]) == 0
    capsys.readouterr()

    assert main(["--base-dir", str(inbox.root), "--clean"]) == 0

    out = capsys.readouterr().out
    assert "Cleaned 2 folder(s)" in out
    assert not (inbox.docs / "chapter1").exists()
    assert not inbox.static.exists()
