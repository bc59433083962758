"""End-to-end tests for program_docs.builder."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from program_docs import builder as builder_module
from program_docs.builder import DocumentationBuilder, SourceNotFoundError
from program_docs.navigation import TIMESTAMP_PREFIX
from tests._fixtures.inbox_builder import InboxBuilder, snapshot


def _without_timestamp(files: dict[str, bytes]) -> dict[str, bytes]:
    stripped = {}
    for name, data in files.items():
        lines = data.decode("utf-8", errors="replace").splitlines()
        stripped[name] = "\n".join(l for l in lines if not l.startswith(TIMESTAMP_PREFIX)).encode()
    return stripped


def _site_outputs(inbox: InboxBuilder) -> dict[str, bytes]:
    files = {}
    for name in ("docs", "static"):
        files.update({f"{name}/{k}": v for k, v in snapshot(inbox.root / name).items()})
    files["sidebars.js"] = inbox.sidebar.read_bytes()
    return _without_timestamp(files)


def _sidebar_items(path: Path) -> list[dict]:
    text = path.read_text(encoding="utf-8")
    start = text.index("tutorialSidebar: ") + len("tutorialSidebar: ")
    return json.loads(text[start:text.index("\n};")].rstrip().rstrip(","))


def test_program_with_three_formats(inbox: InboxBuilder) -> None:
    inbox.write({
        "Chapt3Exercise10.m": "E = hbar^2 * k^2 / (2*m);\n",
        "Chapt3Exercise10.pdf": b"%PDF-1.4 fake",
        "Chapt3Exercise10.tex": "\\section{Well}\n",
    })

    stats = DocumentationBuilder(inbox.settings()).run()

    program_dir = inbox.docs / "chapter3" / "Chapt3Exercise10"
    assert sorted(p.name for p in program_dir.iterdir()) == [
        "Chapt3Exercise10_latex.mdx",
        "Chapt3Exercise10_matlab.mdx",
        "Chapt3Exercise10_pdf.mdx",
        "index.mdx",
    ]
    assert (inbox.static / "matlab" / "Chapt3Exercise10" / "Chapt3Exercise10.m").is_file()
    assert (inbox.static / "pdf" / "Chapt3Exercise10" / "Chapt3Exercise10.pdf").read_bytes() == b"%PDF-1.4 fake"
    assert (inbox.static / "latex" / "Chapt3Exercise10" / "Chapt3Exercise10.tex").is_file()

    assert "E = hbar^2 * k^2 / (2*m);" in (program_dir / "Chapt3Exercise10_matlab.mdx").read_text(encoding="utf-8")
    assert "<iframe" in (program_dir / "Chapt3Exercise10_pdf.mdx").read_text(encoding="utf-8")

    assert stats.programs == 1
    assert stats.processed == 3
    assert stats.skipped == []
    assert dict(stats.by_type) == {"matlab": 1, "pdf": 1, "latex": 1}
    assert sum(stats.by_type.values()) == stats.processed
    assert stats.by_chapter == {"3": ["Chapt3Exercise10"]}
    assert stats.sidebar_written is True

    nav = _sidebar_items(inbox.sidebar)
    assert nav[1]["label"] == "Ch 3: Quantum Wells and Barriers"
    assert nav[1]["items"] == [
        {"type": "doc", "id": "chapter3/Chapt3Exercise10/index", "label": "Exercise 10"},
    ]


def test_mixed_inbox(inbox: InboxBuilder) -> None:
    inbox.touch("Chapt1Exercise8.m", "Chapt1Ex8.pdf", "fermi.m", "Chapt2Fig3a.html")
    inbox.write({"notes.docx": b"PK", ".DS_Store": b"\0"})

    stats = DocumentationBuilder(inbox.settings()).run()

    assert stats.by_chapter == {
        "1": ["Chapt1Exercise8"],
        "2": ["Chapt2Fig3a"],
        "utilities": ["Chapt1Ex8", "fermi"],
    }
    assert stats.programs == 4
    assert [(s.file_name, s.reason) for s in stats.skipped] == [("notes.docx", "unsupported-extension")]
    assert (inbox.docs / "utilities" / "fermi" / "index.mdx").is_file()
    assert (inbox.static / "pdf" / "Chapt1Ex8" / "Chapt1Ex8.pdf").is_file()

    labels = [entry["label"] for entry in _sidebar_items(inbox.sidebar)]
    assert labels == [
        "📖 Introduction",
        "Ch 1: Introduction to Quantum Mechanics",
        "Ch 2: Schrödinger Equation",
        "🧰 Utilities",
    ]


def test_rerun_without_changes_is_idempotent(inbox: InboxBuilder) -> None:
    inbox.touch("Chapt1Fig1.m", "Chapt1Fig1.txt", "fermi.m")
    builder = DocumentationBuilder(inbox.settings())

    builder.run()
    first = _site_outputs(inbox)
    builder.run()

    assert _site_outputs(inbox) == first


def test_clean_then_run_matches_fresh_run(tmp_path: Path) -> None:
    fresh = InboxBuilder(tmp_path / "fresh")
    cleaned = InboxBuilder(tmp_path / "cleaned")
    for site in (fresh, cleaned):
        site.touch("Chapt2Fig1.m", "Chapt2Fig1.pdf")

    DocumentationBuilder(fresh.settings()).run()

    builder = DocumentationBuilder(cleaned.settings())
    builder.run()
    builder.clean()
    builder.run()

    assert _site_outputs(cleaned) == _site_outputs(fresh)


def test_clean_removes_generated_output_only(inbox: InboxBuilder) -> None:
    inbox.touch("Chapt1Fig1.m", "fermi.m")
    (inbox.docs / "intro.md").parent.mkdir(parents=True)
    (inbox.docs / "intro.md").write_text("# Intro\n", encoding="utf-8")
    builder = DocumentationBuilder(inbox.settings())
    builder.run()

    result = builder.clean()

    assert sorted(p.name for p in result.removed) == ["chapter1", "programs", "utilities"]
    assert result.errors == []
    assert sorted(p.name for p in inbox.docs.iterdir()) == ["intro.md"]
    assert not inbox.static.exists()
    assert (inbox.inbox / "Chapt1Fig1.m").is_file()

    assert builder.clean().removed == []


def test_missing_inbox_raises_without_writing(tmp_path: Path) -> None:
    site = InboxBuilder(tmp_path)
    site.inbox.rmdir()

    with pytest.raises(SourceNotFoundError, match="INBOX folder not found"):
        DocumentationBuilder(site.settings()).run()

    assert sorted(p.name for p in site.root.iterdir()) == []


def test_copy_failure_is_recorded_and_run_continues(inbox: InboxBuilder, monkeypatch) -> None:
    inbox.touch("Chapt1Fig1.m", "Chapt1Fig1.pdf", "Chapt2Fig1.m")
    real_copy = builder_module.copy_file

    def flaky_copy(source: Path, destination: Path) -> None:
        if source.name == "Chapt1Fig1.pdf":
            raise PermissionError("denied")
        real_copy(source, destination)

    monkeypatch.setattr(builder_module, "copy_file", flaky_copy)

    stats = DocumentationBuilder(inbox.settings()).run()

    assert [(s.file_name, s.reason) for s in stats.skipped] == [("Chapt1Fig1.pdf", "copy failed: denied")]
    assert stats.processed == 2
    assert stats.by_chapter == {"1": ["Chapt1Fig1"], "2": ["Chapt2Fig1"]}
    index = (inbox.docs / "chapter1" / "Chapt1Fig1" / "index.mdx").read_text(encoding="utf-8")
    assert "Chapt1Fig1_matlab" in index
    assert "Chapt1Fig1_pdf" not in index
    assert not (inbox.docs / "chapter1" / "Chapt1Fig1" / "Chapt1Fig1_pdf.mdx").exists()


def test_read_failure_is_recorded_and_member_left_off_index(inbox: InboxBuilder, monkeypatch) -> None:
    inbox.touch("Chapt1Fig1.m", "Chapt1Fig1.pdf")
    real_read = builder_module.read_text

    def flaky_read(path: Path) -> str:
        if path.name == "Chapt1Fig1.m":
            raise PermissionError("denied")
        return real_read(path)

    monkeypatch.setattr(builder_module, "read_text", flaky_read)

    stats = DocumentationBuilder(inbox.settings()).run()

    assert [(s.file_name, s.reason) for s in stats.skipped] == [("Chapt1Fig1.m", "read failed: denied")]
    assert stats.processed == 1
    assert dict(stats.by_type) == {"pdf": 1}
    program_dir = inbox.docs / "chapter1" / "Chapt1Fig1"
    assert not (program_dir / "Chapt1Fig1_matlab.mdx").exists()
    assert "Chapt1Fig1_matlab" not in (program_dir / "index.mdx").read_text(encoding="utf-8")
    assert (inbox.static / "matlab" / "Chapt1Fig1" / "Chapt1Fig1.m").is_file()


def test_detail_write_failure_keeps_index_links_valid(inbox: InboxBuilder, monkeypatch) -> None:
    inbox.touch("Chapt1Fig1.m", "Chapt1Fig1.pdf")
    real_write = builder_module.write_text

    def flaky_write(path: Path, content: str) -> None:
        if path.name == "Chapt1Fig1_matlab.mdx":
            raise OSError("disk full")
        real_write(path, content)

    monkeypatch.setattr(builder_module, "write_text", flaky_write)

    stats = DocumentationBuilder(inbox.settings()).run()

    assert [(s.file_name, s.reason) for s in stats.skipped] == [("Chapt1Fig1.m", "write failed: disk full")]
    assert stats.processed == 1
    assert dict(stats.by_type) == {"pdf": 1}
    index = (inbox.docs / "chapter1" / "Chapt1Fig1" / "index.mdx").read_text(encoding="utf-8")
    assert "./Chapt1Fig1_pdf" in index
    assert "Chapt1Fig1_matlab" not in index
    assert "1 file(s) available" in index


def test_program_without_copied_members_is_left_out(inbox: InboxBuilder, monkeypatch) -> None:
    inbox.touch("Chapt1Fig1.m", "Chapt2Fig1.m")
    real_copy = builder_module.copy_file

    def flaky_copy(source: Path, destination: Path) -> None:
        if source.name.startswith("Chapt1"):
            raise OSError("disk full")
        real_copy(source, destination)

    monkeypatch.setattr(builder_module, "copy_file", flaky_copy)

    stats = DocumentationBuilder(inbox.settings()).run()

    assert stats.programs == 1
    assert stats.by_chapter == {"2": ["Chapt2Fig1"]}
    assert not (inbox.docs / "chapter1").exists()
    assert [entry["label"] for entry in _sidebar_items(inbox.sidebar)][1:] == ["Ch 2: Schrödinger Equation"]


def test_sidebar_failure_becomes_warning(inbox: InboxBuilder) -> None:
    inbox.touch("Chapt1Fig1.m")
    blocked = inbox.root / "blocked"
    blocked.write_text("not a directory", encoding="utf-8")

    stats = DocumentationBuilder(inbox.settings(sidebar_path=blocked / "sidebars.js")).run()

    assert stats.sidebar_written is False
    assert len(stats.warnings) == 1
    assert stats.warnings[0].startswith("Failed to update sidebar")
    assert (inbox.docs / "chapter1" / "Chapt1Fig1" / "index.mdx").is_file()


def test_recursive_scan(inbox: InboxBuilder) -> None:
    inbox.touch("Chapt1Fig1.m", "week2/Chapt2Fig1.m", "week2/.ipynb_checkpoints/Chapt2Fig1.m")

    flat = DocumentationBuilder(inbox.settings()).run()
    assert flat.by_chapter == {"1": ["Chapt1Fig1"]}

    deep = DocumentationBuilder(inbox.settings(recursive=True)).run()
    assert deep.by_chapter == {"1": ["Chapt1Fig1"], "2": ["Chapt2Fig1"]}
    assert deep.processed == 2
    assert (inbox.static / "matlab" / "Chapt2Fig1" / "Chapt2Fig1.m").is_file()


def test_summary_lines(inbox: InboxBuilder) -> None:
    inbox.touch("Chapt1Fig1.m", "fermi.txt", "readme.md")
    builder = DocumentationBuilder(inbox.settings())

    lines = builder.run().summary_lines(builder.type_labels())

    assert "   📁 Programs:  2" in lines
    assert "   📊 MATLAB: 1" in lines
    assert "   Chapter 1: 1 program(s)" in lines
    assert "   Utilities: 1 program(s)" in lines
    assert "   readme.md: unsupported-extension" in lines
