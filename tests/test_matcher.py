from __future__ import annotations

from pathlib import Path

import pytest

from conftest import write
from gitgate.core.matcher import MatcherBuildError, build_matcher, parse_rules


def test_parse_rules_skips_blanks_and_comments() -> None:
    rules = parse_rules(["# header", "", "   ", "*.log", r"\#notes", "!keep.log"])
    assert [(r.text, r.line) for r in rules] == [
        ("*.log", 4),
        (r"\#notes", 5),
        ("!keep.log", 6),
    ]
    assert [r.negated for r in rules] == [False, False, True]


def test_files_keep_their_anchor(repo: Path) -> None:
    gx = write(repo.parent / "global_ignore", "*.swp\n")
    root_gi = write(repo / ".gitignore", "*.log\n")
    nested = write(repo / "a" / "b" / ".gitignore", "*.tmp\n")

    m = build_matcher(repo, [gx, root_gi, nested])
    assert [f.base for f in m.files] == ["", "", "a/b"]
    assert m.num_rules == 3


def test_last_file_wins(repo: Path) -> None:
    first = write(repo / ".git" / "info" / "exclude", "*.log\n")
    second = write(repo / ".gitignore", "!keep.log\n")

    m = build_matcher(repo, [first, second])
    hit = m.matched("keep.log", is_dir=False)
    assert hit is not None and not hit.ignored
    assert hit.rule.text == "!keep.log"

    m = build_matcher(repo, [second, first])
    hit = m.matched("keep.log", is_dir=False)
    assert hit is not None and hit.ignored
    assert hit.source.path == first


def test_directory_candidates(repo: Path) -> None:
    m = build_matcher(repo, [write(repo / ".gitignore", "out/\n")])
    assert m.matched("out", is_dir=False) is None
    hit = m.matched("out", is_dir=True)
    assert hit is not None and hit.ignored


def test_nested_file_does_not_apply_to_its_own_directory(repo: Path) -> None:
    m = build_matcher(repo, [write(repo / "a" / ".gitignore", "*\n")])
    assert m.matched("a", is_dir=True) is None
    assert m.matched("a/x.txt", is_dir=False).ignored
    assert m.matched("b/x.txt", is_dir=False) is None


def test_unreadable_and_missing_files_are_skipped(repo: Path) -> None:
    good = write(repo / ".gitignore", "*.log\n")
    bad = repo / "a" / ".gitignore"
    bad.parent.mkdir()
    bad.write_bytes(b"\xff\xfe\n")

    m = build_matcher(repo, [repo / "missing" / ".gitignore", bad, good])
    assert [f.path for f in m.files] == [good]


def test_invalid_root(tmp_path: Path) -> None:
    with pytest.raises(MatcherBuildError):
        build_matcher(tmp_path / "nope", [])
    with pytest.raises(MatcherBuildError):
        build_matcher(Path("relative/root"), [])


def test_directory_rules_do_not_match_entries_below_them(repo: Path) -> None:
    m = build_matcher(repo, [write(repo / ".gitignore", "logs/\n*/\ncache\n")])
    assert m.matched("logs/app.log", is_dir=False) is None
    assert m.matched("x/cache/blob", is_dir=False) is None
    assert m.matched("logs", is_dir=True).rule.text == "*/"
    assert m.matched("x/cache", is_dir=False).rule.text == "cache"


def test_explicit_anchor_overrides_file_name(repo: Path) -> None:
    sub_gi = write(repo / "sub" / ".gitignore", "/top.txt\n")
    m = build_matcher(repo, [(sub_gi, "")])
    assert m.files[0].base == ""
    assert m.matched("top.txt", is_dir=False).ignored
    assert m.matched("sub/top.txt", is_dir=False) is None
