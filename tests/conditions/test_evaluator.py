"""
Тесты для вычислителя условий.
"""

import pytest

from lgate.conditions import Combinator, ConditionEvaluator, Cursor, DirectiveLexer, Term, fold_terms
from lgate.errors import ConditionSyntaxError


def evaluate(source: bytes, defines=("A",)):
    """Вычисляет условие и возвращает (результат, курсор)."""
    data = bytearray(source)
    evaluator = ConditionEvaluator(DirectiveLexer(data, len(data)), set(defines).__contains__)
    cursor = Cursor()
    return evaluator.evaluate(cursor), cursor


class TestFoldTerms:

    def test_single_term(self):
        assert fold_terms([Term(True)]) is True
        assert fold_terms([Term(False)]) is False

    def test_and_before_or(self):
        """A || B && C == A || (B && C)"""
        terms = [
            Term(True),
            Term(True, Combinator.OR),
            Term(False, Combinator.AND),
        ]
        assert fold_terms(terms) is True

        terms = [
            Term(False),
            Term(True, Combinator.OR),
            Term(False, Combinator.AND),
        ]
        assert fold_terms(terms) is False

    def test_and_chain(self):
        terms = [Term(True), Term(True, Combinator.AND), Term(True, Combinator.AND)]
        assert fold_terms(terms) is True
        terms[1] = Term(False, Combinator.AND)
        assert fold_terms(terms) is False

    def test_input_not_modified(self):
        terms = [Term(True), Term(False, Combinator.AND)]
        fold_terms(terms)
        assert terms[0].passed is True
        assert len(terms) == 2

    def test_combinator_on_first_term_is_ignored(self):
        assert fold_terms([Term(True, Combinator.AND)]) is True

    def test_malformed_stream_is_assertion(self):
        """Два терма без связки нарушают внутренний инвариант"""
        with pytest.raises(AssertionError):
            fold_terms([Term(True), Term(False)])

    def test_empty_stream_is_assertion(self):
        with pytest.raises(AssertionError):
            fold_terms([])


class TestConditionEvaluator:

    def test_simple_word(self):
        assert evaluate(b"A\n")[0] is True
        assert evaluate(b"B\n")[0] is False

    def test_case_sensitive(self):
        assert evaluate(b"a\n")[0] is False

    def test_negation(self):
        assert evaluate(b"!A\n")[0] is False
        assert evaluate(b"!B\n")[0] is True
        assert evaluate(b"! B\n")[0] is True

    @pytest.mark.parametrize("source,expected", [
        (b"!A && B\n", False),
        (b"!A || B\n", False),
        (b"A || B\n", True),
        (b"A && B\n", False),
        (b"A && !B\n", True),
        (b"B || B || A\n", True),
        (b"A || B && B\n", True),
        (b"B && A || B\n", False),
    ])
    def test_boolean_folding(self, source, expected):
        assert evaluate(source)[0] is expected

    def test_combinator_persists(self):
        """Связка не сбрасывается: A && B C == A && B && C"""
        assert evaluate(b"A && A B\n", defines=("A",))[0] is False
        assert evaluate(b"A && A A\n", defines=("A",))[0] is True
        assert evaluate(b"B || B A\n", defines=("A",))[0] is True

    def test_consumes_newline(self):
        result, cursor = evaluate(b"A && A  \nnext")
        assert result is True
        assert cursor.offset == 9
        assert (cursor.line, cursor.column) == (2, 0)

    def test_crlf_consumed_once(self):
        _, cursor = evaluate(b"A\r\n\r\n")
        assert cursor.offset == 3
        assert cursor.line == 2

    def test_end_of_buffer_terminates(self):
        result, cursor = evaluate(b"A")
        assert result is True
        assert cursor.offset == 1
        assert cursor.line == 1

    def test_parentheses_rejected(self):
        with pytest.raises(ConditionSyntaxError) as exc:
            evaluate(b"(A)\n")
        assert "Unexpected operator '('" in str(exc.value)

    def test_operator_run_is_one_token(self):
        """&&! лексится одним оператором и не распознаётся"""
        with pytest.raises(ConditionSyntaxError):
            evaluate(b"A&&!B\n")

    def test_unknown_operator_rejected(self):
        with pytest.raises(ConditionSyntaxError):
            evaluate(b"A & A\n")

    def test_string_rejected(self):
        with pytest.raises(ConditionSyntaxError) as exc:
            evaluate(b'"A"\n')
        assert "STRING" in str(exc.value)

    def test_reject_rejected(self):
        with pytest.raises(ConditionSyntaxError):
            evaluate(b"A == 1\n")

    def test_empty_condition(self):
        with pytest.raises(ConditionSyntaxError):
            evaluate(b"   \n")

    def test_dangling_negation(self):
        with pytest.raises(ConditionSyntaxError):
            evaluate(b"!\n")

    def test_missing_combinator(self):
        with pytest.raises(ConditionSyntaxError) as exc:
            evaluate(b"A A\n")
        assert "Expected '&&' or '||'" in str(exc.value)

    def test_error_does_not_consume_newline(self):
        data = bytearray(b"A $\nB")
        evaluator = ConditionEvaluator(DirectiveLexer(data, len(data)), lambda name: True)
        cursor = Cursor()
        with pytest.raises(ConditionSyntaxError):
            evaluator.evaluate(cursor)
        assert cursor.line == 1
        assert cursor.offset <= 3
