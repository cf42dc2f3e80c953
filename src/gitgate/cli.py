from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .core.config import ConfigError, GateConfig, load_config
from .core.gates import ALLOWED, PreToolUsePayload, check_git_ignored
from .core.gitignore import GitIgnoreChecker
from .core.gitops import make_config_lookup
from .core.logger import EventLogger
from .core.matcher import MatcherBuildError
from .core.paths import find_repo_root


def _resolve_root(root_arg: Optional[str], start: Path) -> Optional[Path]:
    if root_arg:
        return Path(root_arg).resolve()
    return find_repo_root(start)


def _make_checker(
    root: Path, cfg: GateConfig, log_level: Optional[str]
) -> tuple[GitIgnoreChecker, EventLogger]:
    logger = EventLogger(cfg.events_path, level=log_level or cfg.log_level)
    checker = GitIgnoreChecker(
        root,
        config_lookup=make_config_lookup(cwd=root, git=cfg.git_executable),
        logger=logger,
    )
    return checker, logger


def cmd_check(args: argparse.Namespace) -> int:
    cwd = Path.cwd()
    root = _resolve_root(args.root, cwd)
    if root is None:
        print("gitgate: not inside a git repository (use --root)", file=sys.stderr)
        return 2

    cfg, _ = load_config(root)
    checker, _ = _make_checker(root, cfg, args.log_level)

    any_ignored = False
    for s in args.paths:
        p = Path(s)
        if not p.is_absolute():
            p = cwd / p
        res = checker.is_ignored(p)
        if res.ignored:
            any_ignored = True
            print(f"{s}: ignored (pattern '{res.pattern}' from {res.source}:{res.line})")
        elif not args.quiet:
            print(f"{s}: not ignored")
    return 1 if any_ignored else 0


def cmd_hook(args: argparse.Namespace) -> int:
    raw = sys.stdin.read()
    try:
        payload = PreToolUsePayload.model_validate(json.loads(raw or "{}"))
    except (json.JSONDecodeError, ValidationError) as e:
        print(f"gitgate: invalid hook payload: {e}", file=sys.stderr)
        return 1

    start = Path(payload.cwd) if payload.cwd else Path.cwd()
    root = _resolve_root(args.root, start)
    if root is None:
        # outside any repository there is nothing to protect
        print(json.dumps(ALLOWED.to_json()))
        return 0

    cfg, _ = load_config(root)
    checker, logger = _make_checker(root, cfg, args.log_level)
    result = check_git_ignored(payload, checker=checker, cfg=cfg, logger=logger)
    print(json.dumps(result.to_json(), ensure_ascii=False))
    if result.blocked:
        print(result.message, file=sys.stderr)
        return 2
    return 0


def cmd_mcp(args: argparse.Namespace) -> int:
    import asyncio

    from .server.mcp_server import main as mcp_main

    asyncio.run(mcp_main())
    return 0


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--root",
        default=None,
        help="Repo root (default: nearest directory with .git above cwd)",
    )
    common.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARN", "ERROR"], default=None
    )

    p = argparse.ArgumentParser(prog="gitgate")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser(
        "check", parents=[common], help="Report whether paths are git-ignored"
    )
    sp.add_argument("paths", nargs="+", help="File path(s) to classify")
    sp.add_argument(
        "-q", "--quiet", action="store_true", help="Only print ignored paths"
    )
    sp.set_defaults(func=cmd_check)

    sp = sub.add_parser(
        "hook",
        parents=[common],
        help="PreToolUse hook: read JSON payload on stdin, block edits to ignored files",
    )
    sp.set_defaults(func=cmd_hook)

    sp = sub.add_parser("mcp", help="Run the MCP stdio server (needs the mcp extra)")
    sp.set_defaults(func=cmd_mcp)

    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return int(args.func(args))
    except ConfigError as e:
        raise SystemExit(f"gitgate: config error: {e}")
    except MatcherBuildError as e:
        raise SystemExit(f"gitgate: {e}")


if __name__ == "__main__":
    raise SystemExit(main())
