"""
Ready-made collaborators for the processor: a filesystem include resolver
and a registry of accepted custom directives.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple

_LOG = logging.getLogger("lgate.handlers")


class FileIncludeResolver:
    """
    Resolves `include "path"` against the including file's directory,
    then against each search path in order.

    Only checks that the target exists; resolved and missing paths are
    recorded for reporting.
    """

    def __init__(self, base_dir: Path, search_paths: Iterable[Path] = ()):
        self.base_dir = base_dir
        self.search_paths = [Path(p) for p in search_paths]
        self.resolved: List[Path] = []
        self.missing: List[str] = []

    def resolve(self, path: str) -> Optional[Path]:
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate if candidate.is_file() else None

        for directory in (self.base_dir, *self.search_paths):
            target = directory / candidate
            if target.is_file():
                return target.resolve()
        return None

    def __call__(self, path: str) -> bool:
        target = self.resolve(path)
        if target is None:
            _LOG.debug("Include not found: %s", path)
            self.missing.append(path)
            return False
        _LOG.debug("Include resolved: %s -> %s", path, target)
        self.resolved.append(target)
        return True


@dataclass
class CommandRegistry:
    """
    Accepts custom directives whose command word is registered.

    Every accepted call is kept as (command, value) in `seen`.
    """
    commands: Set[str] = field(default_factory=set)
    seen: List[Tuple[str, Optional[str]]] = field(default_factory=list)

    def __call__(self, command: str, value: Optional[str]) -> bool:
        if command not in self.commands:
            return False
        self.seen.append((command, value))
        return True


__all__ = ["FileIncludeResolver", "CommandRegistry"]
