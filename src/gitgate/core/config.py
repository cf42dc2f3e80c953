from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .logger import LEVELS

DEFAULT_FILE_MODIFYING_TOOLS = ["Write", "Edit", "MultiEdit", "NotebookEdit"]


class ConfigError(Exception):
    pass


@dataclass
class GateConfig:
    prevent_update_git_ignored: bool = True
    file_modifying_tools: List[str] = field(
        default_factory=lambda: list(DEFAULT_FILE_MODIFYING_TOOLS)
    )
    log_level: str = "INFO"
    events_path: Optional[str] = None
    git_executable: str = "git"


def discover_config(root: Path) -> tuple[Path | None, Dict[str, Any]]:
    """
    Discovery order:
      1) gitgate.toml at repo root ([tool.gitgate] table or top-level keys)
      2) pyproject.toml [tool.gitgate]
    """
    gitgate_toml = root / "gitgate.toml"
    if gitgate_toml.exists():
        data = _read_toml(gitgate_toml)
        node = data.get("tool", {}).get("gitgate", data)
        return gitgate_toml, dict(node)

    pyproject = root / "pyproject.toml"
    if pyproject.exists():
        data = _read_toml(pyproject)
        node = data.get("tool", {}).get("gitgate")
        if node is not None:
            return pyproject, dict(node)

    return None, {}


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: {e}") from e


def load_config(root: Path) -> tuple[GateConfig, Path | None]:
    cfg_path, node = discover_config(root)

    tools = node.get("file_modifying_tools", DEFAULT_FILE_MODIFYING_TOOLS)
    if not isinstance(tools, list) or not all(isinstance(t, str) for t in tools):
        raise ConfigError("file_modifying_tools must be a list of strings")

    cfg = GateConfig(
        prevent_update_git_ignored=bool(node.get("prevent_update_git_ignored", True)),
        file_modifying_tools=list(tools),
        log_level=str(node.get("log_level", "INFO")).upper(),
        events_path=node.get("events_path"),
        git_executable=str(node.get("git_executable", "git")),
    )

    # Env overrides (useful for CI and one-off hook runs)
    if os.environ.get("GITGATE_LOG_LEVEL"):
        cfg.log_level = os.environ["GITGATE_LOG_LEVEL"].upper()
    if os.environ.get("GITGATE_EVENTS_PATH"):
        cfg.events_path = os.environ["GITGATE_EVENTS_PATH"]
    if os.environ.get("GITGATE_DISABLE"):
        cfg.prevent_update_git_ignored = False

    if cfg.log_level == "WARNING":
        cfg.log_level = "WARN"
    if cfg.log_level not in LEVELS:
        raise ConfigError(f"unknown log_level: {cfg.log_level}")
    if cfg.events_path and not os.path.isabs(cfg.events_path):
        cfg.events_path = str(root / cfg.events_path)
    return cfg, cfg_path
