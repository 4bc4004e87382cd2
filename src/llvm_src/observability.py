"""Structured build logging.

Records are kept in memory so stdout stays reserved for cargo metadata.
Every record carries the build phase, and cmake invocations also carry the
exact argv and exit status so a failed build can be replayed by hand.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class StructuredLogger:
    records: list[dict[str, Any]] = field(default_factory=list)

    def log(
        self,
        *,
        operation: str,
        phase: str | None,
        message: str,
        level: str = "info",
        command: Sequence[str] | None = None,
        returncode: int | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        record: dict[str, Any] = {
            "level": level,
            "operation": operation,
            "phase": phase,
            "message": message,
            "command": list(command) if command is not None else None,
            "returncode": returncode,
        }
        if extra is not None:
            record["extra"] = extra
        self.records.append(record)

    def records_for_phase(self, phase: str) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("phase") == phase]

    def commands(self) -> list[list[str]]:
        """Commands that were started, in order."""
        return [
            record["command"]
            for record in self.records
            if record["command"] is not None
            and record["returncode"] is None
            and record["level"] == "info"
        ]

    def failures(self) -> list[dict[str, Any]]:
        return [record for record in self.records if record["level"] == "error"]

    def to_json_lines(self, path: str | Path) -> Path:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        lines = [json.dumps(record, sort_keys=True) for record in self.records]
        output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return output_path
