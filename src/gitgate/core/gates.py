from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from .config import GateConfig
from .gitignore import GitIgnoreChecker, MatchResult
from .logger import EventLogger


class PreToolUsePayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    tool_name: str
    tool_input: Dict[str, Any] = Field(default_factory=dict)
    session_id: Optional[str] = None
    cwd: Optional[str] = None


@dataclass
class GateResult:
    blocked: bool
    message: Optional[str] = None
    match: Optional[MatchResult] = None

    def to_json(self) -> dict[str, Any]:
        return {"blocked": self.blocked, "message": self.message}


ALLOWED = GateResult(blocked=False)


def extract_file_path(tool_input: Mapping[str, Any]) -> Optional[str]:
    v = tool_input.get("file_path")
    if v is None:
        v = tool_input.get("notebook_path")
    return v if isinstance(v, str) and v else None


def check_git_ignored(
    payload: PreToolUsePayload,
    *,
    checker: GitIgnoreChecker,
    cfg: GateConfig,
    logger: Optional[EventLogger] = None,
) -> GateResult:
    if not cfg.prevent_update_git_ignored:
        return ALLOWED
    if payload.tool_name not in cfg.file_modifying_tools:
        return ALLOWED

    file_path = extract_file_path(payload.tool_input)
    if file_path is None:
        return ALLOWED

    p = Path(file_path)
    if not p.is_absolute():
        p = Path(payload.cwd or checker.repo_root) / p

    res = checker.is_ignored(p)
    if not res.ignored:
        return ALLOWED

    msg = (
        f"Blocked {payload.tool_name} operation: file matches .gitignore pattern "
        f"'{res.pattern}'. File: {file_path}"
    )
    if logger:
        logger.warn(
            event="path_blocked",
            tool_name=payload.tool_name,
            file_path=file_path,
            pattern=res.pattern,
            source=str(res.source) if res.source else None,
            line=res.line,
        )
    return GateResult(blocked=True, message=msg, match=res)
