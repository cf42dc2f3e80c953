from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Optional

# key -> configured value, or None when unset / unavailable
ConfigLookup = Callable[[str], Optional[str]]

GIT_TIMEOUT_S = 5.0


def _git(
    root: Optional[Path], *args: str, git: str = "git"
) -> Optional[subprocess.CompletedProcess[str]]:
    try:
        return subprocess.run(
            [git, *args],
            cwd=str(root) if root else None,
            text=True,
            capture_output=True,
            check=False,
            timeout=GIT_TIMEOUT_S,
        )
    except (OSError, subprocess.SubprocessError):
        # git missing from PATH, cwd gone, or hung
        return None


def git_config_get(
    key: str, *, cwd: Optional[Path] = None, git: str = "git"
) -> Optional[str]:
    """Return ``git config --get <key>``, or None on any failure."""
    p = _git(cwd, "config", "--get", key, git=git)
    if p is None or p.returncode != 0:
        return None
    v = (p.stdout or "").strip()
    return v or None


def make_config_lookup(*, cwd: Optional[Path] = None, git: str = "git") -> ConfigLookup:
    def lookup(key: str) -> Optional[str]:
        return git_config_get(key, cwd=cwd, git=git)

    return lookup
