from __future__ import annotations

from .core.gitignore import GitIgnoreChecker, MatchResult, is_path_git_ignored
from .core.matcher import MatcherBuildError
from .core.paths import find_repo_root

__all__ = [
    "GitIgnoreChecker",
    "MatchResult",
    "MatcherBuildError",
    "find_repo_root",
    "is_path_git_ignored",
]

__version__ = "0.3.0"
