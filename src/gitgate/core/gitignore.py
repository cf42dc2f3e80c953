from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from .excludes import find_global_excludes, repo_exclude_path
from .gitops import ConfigLookup, make_config_lookup
from .logger import EventLogger
from .matcher import (
    CompiledMatcher,
    IgnoreSource,
    MatcherBuildError,
    RuleMatch,
    build_matcher,
)
from .paths import GITIGNORE_NAME, RepoPaths

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class MatchResult:
    ignored: bool
    # literal rule text; None unless ignored
    pattern: Optional[str] = None
    source: Optional[Path] = None
    line: Optional[int] = None

    @staticmethod
    def from_rule(m: RuleMatch) -> "MatchResult":
        return MatchResult(
            ignored=True, pattern=m.rule.text, source=m.source.path, line=m.rule.line
        )


NOT_IGNORED = MatchResult(ignored=False)


def collect_gitignore_files(repo_root: Path, target_dir: Path) -> List[Path]:
    """Every .gitignore from ``repo_root`` down to ``target_dir`` (both inclusive), root first.

    Returns [] when ``target_dir`` is outside the repository.
    """
    root = Path(repo_root)
    target = Path(target_dir)
    if not target.is_absolute():
        target = root / target
    target = Path(os.path.normpath(target))
    try:
        rel = target.relative_to(root)
    except ValueError:
        return []

    out: List[Path] = []
    cur = root
    for part in ("", *rel.parts):
        if part:
            cur = cur / part
        gi = cur / GITIGNORE_NAME
        if gi.is_file():
            out.append(gi)
    return out


class GitIgnoreChecker:
    """Decide whether paths under one repository are git-ignored.

    Global excludes, ``.git/info/exclude`` and the root ``.gitignore`` are
    compiled once. Queries under directories with their own ``.gitignore``
    files compile a throwaway matcher that also includes those files, so
    ignore files created after construction are still honored.
    """

    def __init__(
        self,
        repo_root: PathLike,
        *,
        config_lookup: Optional[ConfigLookup] = None,
        home: Optional[Path] = None,
        logger: Optional[EventLogger] = None,
    ) -> None:
        self.paths = RepoPaths.from_root(Path(repo_root))
        self.repo_root = self.paths.root
        self.logger = logger
        self._config_lookup = config_lookup or make_config_lookup(cwd=self.repo_root)
        self._home = home
        self._base_matcher = build_matcher(
            self.repo_root,
            [*self._exclude_files(), *self._root_gitignore()],
            logger=logger,
        )

    def _exclude_files(self) -> List[IgnoreSource]:
        # global and repo excludes anchor at the repo root, whatever the file is called
        out: List[IgnoreSource] = []
        global_excludes = find_global_excludes(
            config_lookup=self._config_lookup, home=self._home, logger=self.logger
        )
        # a dotfiles repo rooted at ~ already loads ~/.gitignore as its root file
        if global_excludes and global_excludes.resolve() != self.paths.root_gitignore:
            out.append((global_excludes, ""))
        info_exclude = repo_exclude_path(self.paths.git_dir)
        if info_exclude.is_file():
            out.append((info_exclude, ""))
        return out

    def _root_gitignore(self) -> List[Path]:
        gi = self.paths.root_gitignore
        return [gi] if gi.is_file() else []

    @property
    def base_matcher(self) -> CompiledMatcher:
        return self._base_matcher

    def _matcher_for(self, target_dir: Path) -> Optional[CompiledMatcher]:
        collected = collect_gitignore_files(self.repo_root, target_dir)
        if not collected or collected == [self.paths.root_gitignore]:
            return self._base_matcher
        try:
            return build_matcher(
                self.repo_root, [*self._exclude_files(), *collected], logger=self.logger
            )
        except MatcherBuildError as e:
            if self.logger:
                self.logger.warn(
                    event="matcher_rebuild_failed", dir=str(target_dir), msg=str(e)
                )
            return None

    def is_ignored(self, path: PathLike) -> MatchResult:
        rel = self.paths.relative(Path(path))
        if rel.is_absolute():
            target_dir = rel.parent
        else:
            target_dir = self.repo_root / rel.parent

        matcher = self._matcher_for(target_dir)
        if matcher is None:
            return NOT_IGNORED

        m = matcher.matched(rel.as_posix(), is_dir=False)
        if m is not None and m.ignored:
            return MatchResult.from_rule(m)

        # directory-only rules (trailing /) only match directory entries
        for ancestor in rel.parents:
            a = ancestor.as_posix()
            if a in (".", "/"):
                continue
            m = matcher.matched(a, is_dir=True)
            if m is not None and m.ignored:
                return MatchResult.from_rule(m)
        return NOT_IGNORED


def is_path_git_ignored(
    path: PathLike,
    repo_root: PathLike,
    *,
    config_lookup: Optional[ConfigLookup] = None,
    home: Optional[Path] = None,
    logger: Optional[EventLogger] = None,
) -> MatchResult:
    """One-off check. Reuse a GitIgnoreChecker when checking many paths."""
    checker = GitIgnoreChecker(
        repo_root, config_lookup=config_lookup, home=home, logger=logger
    )
    return checker.is_ignored(path)
