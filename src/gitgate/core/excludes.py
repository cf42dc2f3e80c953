from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from .gitops import ConfigLookup, git_config_get
from .logger import EventLogger

EXCLUDES_FILE_KEY = "core.excludesFile"


def _expand_home(raw: str, home: Path) -> Path:
    if raw == "~":
        return home
    if raw.startswith("~/"):
        return home / raw[2:]
    return Path(raw)


def find_global_excludes(
    *,
    config_lookup: Optional[ConfigLookup] = None,
    home: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
    logger: Optional[EventLogger] = None,
) -> Optional[Path]:
    """
    Locate the user's global ignore file. First existing candidate wins:
      1) git config core.excludesFile (leading ~ expanded)
      2) $XDG_CONFIG_HOME/git/ignore (default ~/.config/git/ignore)
      3) ~/.gitignore
    """
    lookup = config_lookup or git_config_get
    home = home or Path.home()
    env = os.environ if env is None else env

    candidates: list[tuple[str, Path]] = []
    configured = lookup(EXCLUDES_FILE_KEY)
    if configured:
        candidates.append(("git_config", _expand_home(configured, home)))

    xdg = env.get("XDG_CONFIG_HOME", "")
    config_dir = Path(xdg) if xdg else home / ".config"
    candidates.append(("xdg", config_dir / "git" / "ignore"))
    candidates.append(("legacy", home / ".gitignore"))

    for origin, p in candidates:
        if p.is_file():
            if logger:
                logger.debug(event="global_excludes_found", origin=origin, path=str(p))
            return p
    return None


def repo_exclude_path(git_dir: Path) -> Path:
    return git_dir / "info" / "exclude"
