"""
Стек областей условных блоков.

Каждый открытый `if` добавляет кадр с набором флагов. Переходы между
состояниями (else, elif, endif) выполняются над верхним кадром.
Ошибочные переходы поднимают исключения и не меняют стек.
"""

from __future__ import annotations

from enum import Flag, auto
from typing import List, Optional

from ..errors import UnbalancedElifError, UnbalancedElseError, UnbalancedEndifError


class ScopeFlag(Flag):
    """Флаги кадра области."""
    PASSING = auto()  # содержимое сохраняется
    ERASING = auto()  # содержимое стирается
    ELSE = auto()     # ветка else уже была
    ELSEIF = auto()   # текущая ветка пришла из elif
    DEEP = auto()     # стирается безусловно, условия не вычисляются


class ScopeStack:
    """Стек кадров; глубина равна текущей вложенности `if`."""

    def __init__(self):
        self._frames: List[ScopeFlag] = []

    @property
    def depth(self) -> int:
        return len(self._frames)

    @property
    def top(self) -> Optional[ScopeFlag]:
        return self._frames[-1] if self._frames else None

    @property
    def erasing(self) -> bool:
        """Стирается ли содержимое текущего кадра."""
        top = self.top
        return top is not None and ScopeFlag.ERASING in top

    @property
    def deep_erasing(self) -> bool:
        top = self.top
        return top is not None and (ScopeFlag.ERASING | ScopeFlag.DEEP) in top

    def open(self, passed: bool) -> None:
        """Открывает кадр по результату условия."""
        self._frames.append(ScopeFlag.PASSING if passed else ScopeFlag.ERASING)

    def open_deep(self) -> None:
        """Открывает кадр внутри стираемой области, без вычисления условия."""
        self._frames.append(ScopeFlag.ERASING | ScopeFlag.DEEP)

    def enter_else(self) -> None:
        """
        Переключает верхний кадр на ветку else.

        Raises:
            UnbalancedElseError: Стек пуст или else в цепочке уже был
        """
        top = self._require_top(UnbalancedElseError())
        if ScopeFlag.ELSE in top:
            raise UnbalancedElseError(duplicate=True)

        if ScopeFlag.PASSING in top:
            self._frames[-1] = ScopeFlag.ERASING | ScopeFlag.ELSE
        else:
            self._frames[-1] = ScopeFlag.PASSING | ScopeFlag.ELSE

    def elif_taken(self) -> bool:
        """
        Проверяет, допустим ли elif, и была ли ветка цепочки уже выбрана.

        Raises:
            UnbalancedElifError: Стек пуст или цепочка уже прошла else
        """
        top = self._require_top(UnbalancedElifError())
        if ScopeFlag.ELSE in top:
            raise UnbalancedElifError(after_else=True)
        return ScopeFlag.PASSING in top

    def skip_elif(self) -> None:
        """Ветка цепочки уже выбрана: всё до endif стирается."""
        self._frames[-1] = ScopeFlag.ERASING | ScopeFlag.ELSEIF | ScopeFlag.DEEP

    def take_elif(self, passed: bool) -> None:
        state = ScopeFlag.PASSING if passed else ScopeFlag.ERASING
        self._frames[-1] = state | ScopeFlag.ELSEIF

    def close(self) -> ScopeFlag:
        """
        Закрывает верхний кадр.

        Raises:
            UnbalancedEndifError: Стек пуст
        """
        top = self._require_top(UnbalancedEndifError())
        self._frames.pop()
        return top

    def clear(self) -> None:
        self._frames.clear()

    def _require_top(self, error: Exception) -> ScopeFlag:
        if not self._frames:
            raise error
        return self._frames[-1]

    def __len__(self) -> int:
        return len(self._frames)

    def __repr__(self):
        return f"ScopeStack({self._frames!r})"


__all__ = ["ScopeFlag", "ScopeStack"]
