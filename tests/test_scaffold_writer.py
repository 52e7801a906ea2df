from __future__ import annotations

import os
from pathlib import Path

import pytest

from src.platform_scaffold import writer
from src.platform_scaffold.context import build_scaffold_context
from src.platform_scaffold.manifest import ScaffoldTarget, build_manifest
from src.platform_scaffold.render_ci import GITIGNORE_MARKER
from src.platform_scaffold.writer import (
    OverwritePolicy,
    WriteOutcome,
    ensure_gitignore_block,
    write_file,
    write_targets,
)


def _snapshot(root: Path) -> dict[str, bytes]:
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


def test_write_file_creates_missing_parents(tmp_path: Path) -> None:
    (tmp_path / "sibling").mkdir()
    (tmp_path / "sibling" / "keep.txt").write_text("keep")

    target = tmp_path / "a" / "b" / "c.txt"
    assert write_file(target, b"hello", OverwritePolicy.PRESERVE) is WriteOutcome.WROTE

    assert target.read_bytes() == b"hello"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["a", "sibling"]
    assert (tmp_path / "sibling" / "keep.txt").read_text() == "keep"


def test_write_file_preserve_skips_existing(tmp_path: Path) -> None:
    target = tmp_path / "f.txt"
    target.write_bytes(b"A")

    assert write_file(target, b"B", OverwritePolicy.PRESERVE) is WriteOutcome.SKIPPED
    assert target.read_bytes() == b"A"


def test_write_file_force_replaces_exactly(tmp_path: Path) -> None:
    target = tmp_path / "f.txt"
    target.write_bytes(b"AAAAAAAAAAAA")

    assert write_file(target, b"B", OverwritePolicy.FORCE) is WriteOutcome.WROTE
    assert target.read_bytes() == b"B"


def test_write_file_keeps_mode_of_replaced_file(tmp_path: Path) -> None:
    target = tmp_path / "run.sh"
    target.write_bytes(b"old")
    os.chmod(target, 0o755)

    write_file(target, b"new", OverwritePolicy.FORCE)
    assert target.stat().st_mode & 0o777 == 0o755


def test_write_file_rejects_empty_path() -> None:
    with pytest.raises(ValueError):
        write_file("", b"x", OverwritePolicy.FORCE)


def test_failed_replace_leaves_previous_content(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    target = tmp_path / "f.txt"
    target.write_bytes(b"original")

    def _boom(src: str, dst: str) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(writer.os, "replace", _boom)
    with pytest.raises(OSError):
        write_file(target, b"replacement", OverwritePolicy.FORCE)

    assert target.read_bytes() == b"original"
    assert [p.name for p in tmp_path.iterdir()] == ["f.txt"]


def test_write_targets_is_idempotent_under_preserve(tmp_path: Path) -> None:
    targets = build_manifest(build_scaffold_context())

    first = write_targets(tmp_path, targets, OverwritePolicy.PRESERVE)
    assert all(r.outcome is WriteOutcome.WROTE for r in first)
    after_first = _snapshot(tmp_path)

    second = write_targets(tmp_path, targets, OverwritePolicy.PRESERVE)
    assert all(r.outcome is WriteOutcome.SKIPPED for r in second)
    assert all(r.existed for r in second)
    assert _snapshot(tmp_path) == after_first


def test_write_targets_force_restores_modified_file(tmp_path: Path) -> None:
    targets = build_manifest(build_scaffold_context())
    write_targets(tmp_path, targets, OverwritePolicy.PRESERVE)

    dockerfile = tmp_path / "app" / "Dockerfile"
    dockerfile.write_text("FROM scratch\n")

    results = write_targets(tmp_path, targets, OverwritePolicy.FORCE)
    assert all(r.outcome is WriteOutcome.WROTE for r in results)
    expected = next(t.content for t in targets if t.path == "app/Dockerfile")
    assert dockerfile.read_bytes() == expected


def test_write_targets_isolates_failures(tmp_path: Path) -> None:
    # A regular file where a directory is needed makes every app/* write fail.
    (tmp_path / "app").write_text("not a directory")
    targets = build_manifest(build_scaffold_context())

    results = write_targets(tmp_path, targets, OverwritePolicy.PRESERVE)
    by_path = {r.path: r for r in results}

    assert [r.path for r in results] == [t.path for t in targets]
    for p in ("app/Dockerfile", "app/package.json", "app/src/server.js"):
        assert by_path[p].outcome is WriteOutcome.FAILED
        assert by_path[p].error
        assert by_path[p].describe().startswith(f"FAILED: {p}: ")
    ok = [r for r in results if r.ok]
    assert len(ok) == len(targets) - 3
    assert (tmp_path / "helm" / "app" / "Chart.yaml").is_file()
    assert (tmp_path / ".github" / "workflows" / "microservices-dryrun.yml").is_file()


def test_write_targets_rejects_paths_outside_root(tmp_path: Path) -> None:
    targets = [
        ScaffoldTarget(path="../escape.txt", content=b"x"),
        ScaffoldTarget(path="/etc/absolute.txt", content=b"x"),
        ScaffoldTarget(path="inside.txt", content=b"x"),
    ]
    results = write_targets(tmp_path / "root", targets, OverwritePolicy.FORCE)

    assert [r.outcome for r in results] == [
        WriteOutcome.FAILED,
        WriteOutcome.FAILED,
        WriteOutcome.WROTE,
    ]
    assert not (tmp_path / "escape.txt").exists()
    assert (tmp_path / "root" / "inside.txt").read_bytes() == b"x"


def test_skip_line_mentions_force() -> None:
    r = writer.WriteResult(path="a.txt", outcome=WriteOutcome.SKIPPED, existed=True)
    assert r.describe() == "SKIP: a.txt exists (use --force to overwrite)"


def test_gitignore_block_written_when_missing(tmp_path: Path) -> None:
    r = ensure_gitignore_block(tmp_path, OverwritePolicy.PRESERVE)
    assert r.outcome is WriteOutcome.UPDATED
    text = (tmp_path / ".gitignore").read_text()
    assert text.startswith(GITIGNORE_MARKER + "\n")
    assert "helm/rendered.yaml\n" in text
    assert ".terraform/\n" in text


def test_gitignore_preserve_leaves_existing_file(tmp_path: Path) -> None:
    (tmp_path / ".gitignore").write_text("node_modules/\n")
    r = ensure_gitignore_block(tmp_path, OverwritePolicy.PRESERVE)
    assert r.outcome is WriteOutcome.SKIPPED
    assert (tmp_path / ".gitignore").read_text() == "node_modules/\n"


def test_gitignore_force_appends_once(tmp_path: Path) -> None:
    (tmp_path / ".gitignore").write_text("node_modules/")

    r1 = ensure_gitignore_block(tmp_path, OverwritePolicy.FORCE)
    r2 = ensure_gitignore_block(tmp_path, OverwritePolicy.FORCE)

    assert r1.outcome is WriteOutcome.UPDATED
    assert r2.outcome is WriteOutcome.SKIPPED
    text = (tmp_path / ".gitignore").read_text()
    assert text.startswith("node_modules/\n" + GITIGNORE_MARKER + "\n")
    assert text.count(GITIGNORE_MARKER) == 1
