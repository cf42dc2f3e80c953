from __future__ import annotations

import json
import os
import sys
import time
from dataclasses import dataclass
from typing import Any, Optional

LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40}


@dataclass
class EventLogger:
    """JSON-lines event sink.

    Appends to ``events_path`` when set, otherwise writes to stderr so hook
    stdout stays reserved for the hook response.
    """

    events_path: Optional[str] = None
    level: str = "INFO"

    def __post_init__(self) -> None:
        self.level = self.level.upper()
        if self.level == "WARNING":
            self.level = "WARN"
        if self.events_path:
            d = os.path.dirname(self.events_path)
            if d:
                os.makedirs(d, exist_ok=True)

    def _emit(self, level: str, rec: dict[str, Any]) -> None:
        if LEVELS[level] < LEVELS.get(self.level, 20):
            return
        rec2 = {"ts": time.time(), "level": level, **rec}
        line = json.dumps(rec2, ensure_ascii=False, default=str) + "\n"
        if not self.events_path:
            sys.stderr.write(line)
            return
        with open(self.events_path, "a", encoding="utf-8") as f:
            f.write(line)

    def debug(self, **rec: Any) -> None:
        self._emit("DEBUG", rec)

    def info(self, **rec: Any) -> None:
        self._emit("INFO", rec)

    def warn(self, **rec: Any) -> None:
        self._emit("WARN", rec)

    def error(self, **rec: Any) -> None:
        self._emit("ERROR", rec)
