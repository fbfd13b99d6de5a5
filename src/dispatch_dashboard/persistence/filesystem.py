"""Snapshot directories holding rendered surfaces and panel summaries."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from ..config import settings

PANELS_FILENAME = "panels.json"


class FileStorage:
    """Lays out dashboard snapshots as ``<root>/snapshots/<prefix>_<timestamp>/``.

    Each snapshot directory holds one ``<surface_id>.png`` per rendered surface
    and a single ``panels.json`` with the text state of the side panels.
    """

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.output_root).resolve()
        self.snapshots_root = self.root / "snapshots"

    def make_run_directory(self, prefix: str = "snapshot") -> Path:
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        path = self.snapshots_root / f"{prefix}_{timestamp}"
        path.mkdir(parents=True, exist_ok=False)
        return path

    def write_surface(self, run_dir: Path, surface_id: str, png: bytes) -> Path:
        if not png.startswith(b"\x89PNG"):
            raise ValueError(f"Surface '{surface_id}' is not PNG encoded.")
        path = run_dir / f"{surface_id}.png"
        path.write_bytes(png)
        return path

    def write_panels(self, run_dir: Path, summary: Mapping[str, Any]) -> Path:
        path = run_dir / PANELS_FILENAME
        path.write_text(json.dumps(summary, ensure_ascii=False, indent=2), encoding="utf-8")
        return path

    def save_snapshot(self, surfaces: Mapping[str, bytes], summary: Mapping[str, Any], prefix: str = "snapshot") -> Path:
        """Write every surface plus the panel summary into a fresh run directory."""
        run_dir = self.make_run_directory(prefix=prefix)
        for surface_id in sorted(surfaces):
            self.write_surface(run_dir, surface_id, surfaces[surface_id])
        self.write_panels(run_dir, summary)
        return run_dir
