"""Compile ordered ignore files into a single gitignore matcher.

Each ignore file is compiled on its own and remembers the directory it is
anchored to. Precedence is purely positional: files are consulted in the order
they were given, lines in file order, and the last rule that matches wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple, Union

from pathspec.patterns.gitwildmatch import GitWildMatchPattern

from .logger import EventLogger
from .paths import GITIGNORE_NAME

# named group pathspec puts on the slash after a directory match
_DIR_MARK = "ps_d"

# a path, or (path, root-relative anchor)
IgnoreSource = Union[Path, Tuple[Path, str]]


class MatcherBuildError(Exception):
    pass


@dataclass(frozen=True)
class IgnoreRule:
    text: str
    line: int
    pattern: GitWildMatchPattern

    @property
    def negated(self) -> bool:
        return not self.pattern.include

    def hits(self, local: str) -> bool:
        """Match ``local`` as the entry itself, not as something below it.

        pathspec lets `logs/` match `logs/app.log` through its dir-mark
        group; entries below a directory are decided by checking that
        directory, so those descendant matches are rejected here.
        """
        m = self.pattern.regex.match(local)
        if m is None:
            return False
        if m.groupdict().get(_DIR_MARK) is not None and m.end(_DIR_MARK) < len(local):
            return False
        return True


@dataclass(frozen=True)
class IgnoreFile:
    path: Path
    # posix dir relative to the repo root; "" for root-anchored files
    base: str
    rules: tuple[IgnoreRule, ...]

    def relativize(self, rel_posix: str) -> Optional[str]:
        if not self.base:
            return rel_posix
        prefix = self.base + "/"
        if rel_posix.startswith(prefix):
            return rel_posix[len(prefix) :]
        return None


@dataclass(frozen=True)
class RuleMatch:
    ignored: bool
    rule: IgnoreRule
    source: IgnoreFile


def parse_rules(lines: Iterable[str]) -> tuple[IgnoreRule, ...]:
    rules: list[IgnoreRule] = []
    for lineno, raw in enumerate(lines, start=1):
        if not raw.strip() or raw.startswith("#"):
            continue
        pat = GitWildMatchPattern(raw)
        if pat.include is None:
            continue
        rules.append(IgnoreRule(text=raw, line=lineno, pattern=pat))
    return tuple(rules)


def load_ignore_file(path: Path, base: str = "") -> IgnoreFile:
    """Read and compile one ignore file.

    Raises OSError, UnicodeDecodeError or ValueError (pathspec's
    GitWildMatchPatternError) when the file cannot be used.
    """
    text = path.read_text(encoding="utf-8")
    if text.startswith("\ufeff"):
        text = text[1:]
    return IgnoreFile(path=path, base=base, rules=parse_rules(text.splitlines()))


def _base_for(root: Path, path: Path) -> str:
    # .gitignore files anchor at their own directory, everything else at the root
    if path.name != GITIGNORE_NAME:
        return ""
    try:
        rel = path.parent.relative_to(root)
    except ValueError:
        return ""
    base = rel.as_posix()
    return "" if base == "." else base


@dataclass(frozen=True)
class CompiledMatcher:
    root: Path
    files: tuple[IgnoreFile, ...]

    @property
    def num_rules(self) -> int:
        return sum(len(f.rules) for f in self.files)

    def matched(self, rel_posix: str, is_dir: bool) -> Optional[RuleMatch]:
        """Return the deciding rule for a root-relative path, or None if no rule applies."""
        rel_posix = rel_posix.strip("/")
        if not rel_posix:
            return None

        decision: Optional[RuleMatch] = None
        for src in self.files:
            local = src.relativize(rel_posix)
            if not local:
                continue
            if is_dir:
                local += "/"
            for rule in reversed(src.rules):
                if rule.hits(local):
                    decision = RuleMatch(ignored=not rule.negated, rule=rule, source=src)
                    break
        return decision


def build_matcher(
    root: Path,
    files: Sequence[IgnoreSource],
    *,
    logger: Optional[EventLogger] = None,
) -> CompiledMatcher:
    """Compile ``files`` in order; later files override earlier ones.

    Entries are either a path, anchored by its name and location, or a
    ``(path, base)`` pair with an explicit root-relative anchor.

    Files that cannot be read or parsed are skipped with a warning. Only an
    unusable root raises MatcherBuildError.
    """
    root = Path(root)
    if not root.is_absolute() or not root.is_dir():
        raise MatcherBuildError(f"repository root is not a directory: {root}")

    compiled: list[IgnoreFile] = []
    for entry in files:
        if isinstance(entry, tuple):
            path, base = entry
        else:
            path, base = entry, _base_for(root, entry)
        try:
            compiled.append(load_ignore_file(path, base=base))
        except (OSError, UnicodeDecodeError, ValueError) as e:
            if logger:
                logger.warn(
                    event="ignore_file_skipped",
                    path=str(path),
                    msg=f"{e.__class__.__name__}: {e}",
                )
            continue
    return CompiledMatcher(root=root, files=tuple(compiled))
