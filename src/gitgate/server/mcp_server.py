from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from ..core.config import load_config
from ..core.gitignore import GitIgnoreChecker
from ..core.gitops import make_config_lookup
from ..core.paths import find_repo_root


def check_paths(repo_root: str, paths: list[str]) -> dict[str, Any]:
    root = Path(repo_root).resolve()
    cfg, _ = load_config(root)
    checker = GitIgnoreChecker(
        root, config_lookup=make_config_lookup(cwd=root, git=cfg.git_executable)
    )
    out = []
    for s in paths:
        res = checker.is_ignored(s)
        out.append(
            {
                "path": s,
                "ignored": res.ignored,
                "pattern": res.pattern,
                "source": str(res.source) if res.source else None,
                "line": res.line,
            }
        )
    return {"repo_root": str(root), "results": out}


async def main() -> None:
    try:
        from mcp.server.fastmcp import FastMCP
    except Exception as e:
        raise RuntimeError('MCP server requires extra deps. Install: pip install -e ".[mcp]"') from e

    mcp = FastMCP("gitgate")

    @mcp.tool()
    def check_ignored(repo_root: str, paths: list[str]) -> dict[str, Any]:
        return check_paths(repo_root, paths)

    @mcp.tool()
    def repo_root(start: str) -> dict[str, Any]:
        root = find_repo_root(Path(start))
        return {"repo_root": str(root) if root else None}

    await mcp.run_stdio_async()


if __name__ == "__main__":
    asyncio.run(main())
