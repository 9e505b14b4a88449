"""Writes compiled template assets to disk."""

import logging
from pathlib import Path
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


class FileEmitter:
    """`emit_file` callback writing assets below an output directory."""

    def __init__(self, out_dir: Path) -> None:
        self.out_dir = out_dir.resolve()
        self.emitted: List[Path] = []

    def __call__(self, asset: Dict[str, Any]) -> None:
        file_name = asset.get("fileName")
        if not file_name:
            raise ValueError("Asset has no fileName")

        target = (self.out_dir / file_name).resolve()
        if self.out_dir not in target.parents:
            raise ValueError(f"Asset path escapes output directory: {file_name}")

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(asset["source"], encoding="utf-8")
        self.emitted.append(target)
        logger.debug("Wrote %s (%d characters)", target, len(asset["source"]))
