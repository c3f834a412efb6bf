from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from shipit.platform.files import atomic_write_text, clear_directory, copy_tree_contents, remove_tree


def test_atomic_write_text_creates_parent_dirs(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "package.json"
    atomic_write_text(path, '{"version": "1.0.0"}\n')

    assert path.read_text(encoding="utf-8") == '{"version": "1.0.0"}\n'


def test_atomic_write_text_cleans_temp_file_on_replace_failure(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    path = tmp_path / "package.json"

    def fail_replace(_src: Path, _dst: Path) -> None:
        raise OSError("replace failed")

    monkeypatch.setattr(os, "replace", fail_replace)

    with pytest.raises(OSError, match="replace failed"):
        atomic_write_text(path, "payload")

    assert list(tmp_path.glob(".package.json.*.tmp")) == []


def test_remove_tree_handles_files_dirs_and_missing(tmp_path: Path) -> None:
    file = tmp_path / "a.txt"
    file.write_text("x", encoding="utf-8")
    tree = tmp_path / "tree" / "deep"
    tree.mkdir(parents=True)
    (tree / "b.txt").write_text("y", encoding="utf-8")

    remove_tree(file)
    remove_tree(tmp_path / "tree")
    remove_tree(tmp_path / "missing")

    assert list(tmp_path.iterdir()) == []


def test_clear_directory_keeps_named_entries(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "HEAD").write_text("ref", encoding="utf-8")
    (tmp_path / "old.js").write_text("x", encoding="utf-8")
    (tmp_path / "lib").mkdir()

    removed = clear_directory(tmp_path, keep=frozenset({".git"}))

    assert removed == ["lib", "old.js"]
    assert [p.name for p in tmp_path.iterdir()] == [".git"]
    assert (tmp_path / ".git" / "HEAD").exists()


def test_copy_tree_contents_merges_into_dest(tmp_path: Path) -> None:
    src = tmp_path / "amd"
    (src / "sub").mkdir(parents=True)
    (src / "index.js").write_text("main", encoding="utf-8")
    (src / "sub" / "util.js").write_text("util", encoding="utf-8")
    dest = tmp_path / "mirror"
    (dest / ".git").mkdir(parents=True)

    copy_tree_contents(src, dest)

    assert (dest / "index.js").read_text(encoding="utf-8") == "main"
    assert (dest / "sub" / "util.js").read_text(encoding="utf-8") == "util"
    assert (dest / ".git").is_dir()


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
def test_atomic_write_text_keeps_existing_mode(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    path.write_text("{}", encoding="utf-8")
    path.chmod(0o644)

    atomic_write_text(path, '{"version": "1.1.0"}\n')

    assert stat.S_IMODE(path.stat().st_mode) == 0o644


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
def test_atomic_write_text_new_file_follows_umask(tmp_path: Path) -> None:
    path = tmp_path / "CHANGELOG.md"
    old = os.umask(0o022)
    try:
        atomic_write_text(path, "# v1.1.0\n")
    finally:
        os.umask(old)

    assert stat.S_IMODE(path.stat().st_mode) == 0o644
