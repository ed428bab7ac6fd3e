"""Structured stage logging and progress reporting."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TextIO


@dataclass(slots=True)
class StructuredLogger:
    records: list[dict[str, Any]] = field(default_factory=list)
    stream: TextIO | None = None

    def log(
        self,
        *,
        operation: str,
        stage: str | None,
        message: str,
        level: str = "info",
        extra: dict[str, Any] | None = None,
    ) -> None:
        record: dict[str, Any] = {
            "level": level,
            "operation": operation,
            "stage": stage,
            "message": message,
        }
        if extra is not None:
            record["extra"] = extra
        self.records.append(record)

    def progress(self, message: str, *, quiet: bool = False) -> None:
        """Print a user-facing progress line unless *quiet*."""
        if quiet:
            return
        print(message, file=self.stream if self.stream is not None else sys.stderr)

    def records_for_stage(self, stage: str) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("stage") == stage]

    def to_json_lines(self, path: str | Path) -> Path:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        lines = [json.dumps(record, sort_keys=True) for record in self.records]
        output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return output_path
