from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest

_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(_ROOT / "src"))


def write(p: Path, s: str) -> Path:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(s, encoding="utf-8")
    return p


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    # keep the host's git config and home dotfiles out of every test
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    for var in (
        "XDG_CONFIG_HOME",
        "GIT_CONFIG_GLOBAL",
        "GITGATE_LOG_LEVEL",
        "GITGATE_EVENTS_PATH",
        "GITGATE_DISABLE",
    ):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def home(_isolated_env: Path) -> Path:
    return _isolated_env


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    root = tmp_path / "repo"
    (root / ".git" / "info").mkdir(parents=True)
    return root


@pytest.fixture
def make_checker(home: Path) -> Callable:
    from gitgate.core.gitignore import GitIgnoreChecker

    def _make(root: Path, **kw):
        kw.setdefault("config_lookup", lambda key: None)
        kw.setdefault("home", home)
        return GitIgnoreChecker(root, **kw)

    return _make
