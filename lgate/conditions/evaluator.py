"""
Вычислитель условий директив if/elif.

Разбирает последовательность термов от курсора до конца строки и
сворачивает их в одно булево значение: сначала все AND-связки,
затем все OR-связки. Скобки не поддерживаются.
"""

from __future__ import annotations

import operator
from dataclasses import replace
from typing import Callable, List

from ..errors import ConditionSyntaxError
from .lexer import Cursor, DirectiveLexer, TokenKind
from .model import Combinator, Term

_OPERATORS = {
    b"&&": Combinator.AND,
    b"||": Combinator.OR,
}


def fold_terms(terms: List[Term]) -> bool:
    """
    Сворачивает список термов в одно значение.

    Каждый проход идёт справа налево со второго элемента: терм со связкой
    текущего прохода объединяется с левым соседом и удаляется.

    Raises:
        AssertionError: Если после обоих проходов осталось не ровно одно значение
    """
    entries = [replace(term) for term in terms]

    for combinator, combine in (
        (Combinator.AND, operator.and_),
        (Combinator.OR, operator.or_),
    ):
        for i in range(len(entries) - 1, 0, -1):
            rhs = entries[i]
            if rhs.combinator is combinator:
                lhs = entries[i - 1]
                lhs.passed = combine(lhs.passed, rhs.passed)
                del entries[i]

    assert len(entries) == 1, f"malformed term stream, {len(entries)} values left after folding"
    return entries[0].passed


class ConditionEvaluator:
    """
    Разбирает и вычисляет условие прямо из буфера.

    Принимает лексер буфера и функцию проверки определений.
    """

    def __init__(self, lexer: DirectiveLexer, has_define: Callable[[str], bool]):
        self.lexer = lexer
        self.has_define = has_define

    def evaluate(self, cursor: Cursor) -> bool:
        """
        Вычисляет условие, начиная с позиции курсора.

        Потребляет всё до перевода строки включительно. При ошибке
        перевод строки не потребляется, чтобы вызывающий код мог
        пропустить остаток строки.

        Raises:
            ConditionSyntaxError: При неожиданном токене, неподдерживаемом
                операторе или пустом условии
        """
        data = self.lexer.data
        terms: List[Term] = []
        pending = None  # связка не сбрасывается после использования

        while True:
            token, consumed = self.lexer.next_token(cursor.offset)

            if token.kind in (TokenKind.NEWLINE, TokenKind.END):
                if not terms:
                    raise ConditionSyntaxError("Empty expression", token.start)
                cursor.advance(consumed - token.length)
                if token.kind is TokenKind.NEWLINE:
                    cursor.newline(token.length)
                break

            must_equal = True

            if token.kind is TokenKind.OPERATOR:
                op = token.raw(data)
                if op == b"!":
                    must_equal = False
                elif op in _OPERATORS:
                    pending = _OPERATORS[op]
                    cursor.advance(consumed)
                    continue
                else:
                    raise ConditionSyntaxError(
                        f"Unexpected operator '{op.decode('ascii')}'", token.start
                    )
                cursor.advance(consumed)
                token, consumed = self.lexer.next_token(cursor.offset)

            if token.kind is not TokenKind.WORD:
                raise ConditionSyntaxError(f"Unexpected {token.kind.value}", token.start)

            if terms and pending is None:
                raise ConditionSyntaxError(
                    f"Expected '&&' or '||' before '{token.text(data)}'", token.start
                )

            passed = self.has_define(token.text(data)) == must_equal
            terms.append(Term(passed=passed, combinator=pending))
            cursor.advance(consumed)

        return fold_terms(terms)


__all__ = ["ConditionEvaluator", "fold_terms"]
