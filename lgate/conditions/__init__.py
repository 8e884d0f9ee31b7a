"""
Лексер и вычислитель условий для строк директив.
"""

from .evaluator import ConditionEvaluator, fold_terms
from .lexer import Cursor, DirectiveLexer, Token, TokenKind, unescape_string
from .model import Combinator, Term

__all__ = [
    "ConditionEvaluator",
    "fold_terms",
    "Cursor",
    "DirectiveLexer",
    "Token",
    "TokenKind",
    "unescape_string",
    "Combinator",
    "Term",
]
