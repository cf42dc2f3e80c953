from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

GIT_MARKER = ".git"
GITIGNORE_NAME = ".gitignore"


def find_repo_root(start: Path) -> Optional[Path]:
    """Walk upward from ``start`` to the first directory holding a ``.git`` entry."""
    cur = Path(start).resolve()
    if cur.is_file():
        cur = cur.parent
    while True:
        # .git is a file for worktrees and submodules
        if (cur / GIT_MARKER).exists():
            return cur
        parent = cur.parent
        if parent == cur:
            return None
        cur = parent


def resolve_git_dir(root: Path) -> Path:
    """
    The directory holding repo metadata such as info/exclude.
      - .git directory: itself
      - .git file (worktree, submodule): its "gitdir: <path>" target, then the
        shared dir named by that target's "commondir" file when present
    """
    marker = root / GIT_MARKER
    if not marker.is_file():
        return marker
    try:
        first = marker.read_text(encoding="utf-8", errors="replace").splitlines()[0]
    except (OSError, IndexError):
        return marker
    if not first.startswith("gitdir:"):
        return marker
    git_dir = Path(first[len("gitdir:") :].strip())
    if not git_dir.is_absolute():
        git_dir = root / git_dir
    commondir = git_dir / "commondir"
    if commondir.is_file():
        try:
            common = Path(commondir.read_text(encoding="utf-8").strip())
        except OSError:
            return git_dir.resolve()
        if not common.is_absolute():
            common = git_dir / common
        return common.resolve()
    return git_dir.resolve()


@dataclass(frozen=True)
class RepoPaths:
    root: Path
    git_dir: Path
    root_gitignore: Path

    @staticmethod
    def from_root(root: Path) -> "RepoPaths":
        root = Path(root).resolve()
        return RepoPaths(
            root=root,
            git_dir=resolve_git_dir(root),
            root_gitignore=root / GITIGNORE_NAME,
        )

    def relative(self, path: Path) -> Path:
        """Path relative to the root; absolute paths outside the root come back unchanged."""
        path = Path(path)
        if not path.is_absolute():
            return path
        for candidate in (path, path.resolve()):
            try:
                return candidate.relative_to(self.root)
            except ValueError:
                continue
        return path
