"""
Выбор файлов для пакетной обработки.

Паттерны в синтаксисе .gitignore (gitwildmatch) компилируются
в PathSpec; пути сравниваются в POSIX-форме относительно корня.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import pathspec

from .config.paths import CFG_FILE, CFG_FILE_ALT

_ALWAYS_SKIPPED_DIRS = {".git", ".hg", ".svn", "__pycache__"}


@dataclass(frozen=True)
class FileSelector:
    """Скомпилированные паттерны выбора файлов."""
    allow_spec: Optional[pathspec.PathSpec]
    block_spec: Optional[pathspec.PathSpec]

    @classmethod
    def compile(cls, files: List[str], exclude: List[str]) -> FileSelector:
        return cls(
            allow_spec=pathspec.PathSpec.from_lines("gitwildmatch", files) if files else None,
            block_spec=pathspec.PathSpec.from_lines("gitwildmatch", exclude) if exclude else None,
        )

    def matches(self, rel_posix: str) -> bool:
        """
        Подходит ли путь.

        Без паттернов files ничего не выбирается: пакетная обработка
        переписывает файлы на месте и не должна трогать лишнее.
        """
        if self.allow_spec is None or not self.allow_spec.match_file(rel_posix):
            return False
        if self.block_spec is not None and self.block_spec.match_file(rel_posix):
            return False
        return True


def select_files(root: Path, files: List[str], exclude: List[str]) -> List[Path]:
    """
    Все файлы под root, подходящие под files и не попавшие в exclude.

    Returns:
        Отсортированный список путей относительно root
    """
    selector = FileSelector.compile(files, exclude)
    out: List[Path] = []

    for path in root.rglob("*"):
        rel = path.relative_to(root)
        if any(part in _ALWAYS_SKIPPED_DIRS for part in rel.parts):
            continue
        if not path.is_file() or rel.as_posix() in (CFG_FILE, CFG_FILE_ALT):
            continue
        if selector.matches(rel.as_posix()):
            out.append(rel)

    out.sort(key=lambda p: p.as_posix())
    return out


__all__ = ["FileSelector", "select_files"]
