from __future__ import annotations

from pathlib import Path
from typing import Optional

# Single source of truth for configuration file naming.
CFG_FILE = "lgate.yaml"
CFG_FILE_ALT = ".lgate.yaml"


def find_config(root: Path) -> Optional[Path]:
    """First existing configuration file in root (lgate.yaml, then .lgate.yaml)."""
    for name in (CFG_FILE, CFG_FILE_ALT):
        candidate = root / name
        if candidate.is_file():
            return candidate.resolve()
    return None


__all__ = ["CFG_FILE", "CFG_FILE_ALT", "find_config"]
