"""
Модели данных для вычисления условий.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Combinator(Enum):
    """Связка терма с предыдущим термом."""
    AND = "&&"
    OR = "||"


@dataclass
class Term:
    """
    Вычисленный терм условия: [!]NAME

    Attributes:
        passed: Истинность терма (с учётом отрицания)
        combinator: Связка, действовавшая перед термом, или None
    """
    passed: bool
    combinator: Optional[Combinator] = None


__all__ = ["Combinator", "Term"]
