"""Run directories for exported assignment results."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from ..config import settings


class FileStorage:
    """Writes each run into its own ``runs/<prefix>_<UTC timestamp>`` directory under the data root."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.runs_root = self.root / "runs"
        self.runs_root.mkdir(parents=True, exist_ok=True)

    def make_run_directory(self, prefix: str = "assign") -> Path:
        # Microseconds keep back-to-back runs apart
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        run_dir = self.runs_root / f"{prefix}_{stamp}"
        run_dir.mkdir(parents=True, exist_ok=False)
        return run_dir

    def write_json(self, path: Path, data: Any, *, indent: int = 2) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, ensure_ascii=False, indent=indent, default=str), encoding="utf-8")

    def write_csv(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)

    def save_run(self, prefix: str, artifacts: Mapping[str, Any]) -> Path:
        """Write ``artifacts`` (file name -> payload) into a fresh run directory.

        ``.csv`` payloads must already be rendered text; anything else is dumped as JSON.
        """
        run_dir = self.make_run_directory(prefix=prefix)
        for name, payload in artifacts.items():
            target = run_dir / name
            if target.suffix == ".csv":
                self.write_csv(target, payload)
            else:
                self.write_json(target, payload)
        return run_dir
