"""
Набор определений (define) процессора.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Set

from ..errors import DuplicateDefineError, UnknownDefineError


class DefineSet:
    """
    Множество имён определений.

    Только членство: без значений, без регистронезависимости и шаблонов.
    Неудачные операции не меняют набор.
    """

    def __init__(self, names: Iterable[str] = ()):
        self._names: Set[str] = set()
        for name in names:
            self.add(name)

    def add(self, name: str) -> None:
        """
        Raises:
            DuplicateDefineError: Если имя уже определено
        """
        if name in self._names:
            raise DuplicateDefineError(name)
        self._names.add(str(name))

    def remove(self, name: str) -> None:
        """
        Raises:
            UnknownDefineError: Если имя не определено
        """
        if name not in self._names:
            raise UnknownDefineError(name)
        self._names.remove(name)

    def has(self, name: str) -> bool:
        return name in self._names

    def copy(self) -> DefineSet:
        clone = DefineSet()
        clone._names = set(self._names)
        return clone

    def sorted_names(self) -> List[str]:
        return sorted(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self):
        return f"DefineSet({self.sorted_names()!r})"


__all__ = ["DefineSet"]
