"""
Exceptions of the linegate preprocessor.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from LGateUserError.

Directive errors are raised by the lexer, the condition evaluator,
the define set and the scope stack. During a processing pass they are
caught by the processor, turned into diagnostics and the scan continues.

Programming errors and bugs should NOT inherit from LGateUserError:
they will propagate with full tracebacks.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class LGateUserError(Exception):
    """
    Base class for all user-facing errors in linegate.

    These errors indicate problems that the user can fix:
    malformed directives, unknown defines, invalid configuration, etc.
    """
    pass


class DiagnosticKind(Enum):
    """Kinds of problems reported during a processing pass."""
    LEX_MISMATCH = "lex-mismatch"
    DUPLICATE_DEFINE = "duplicate-define"
    UNKNOWN_DEFINE = "unknown-define"
    UNBALANCED_ELSE = "unbalanced-else"
    UNBALANCED_ELIF = "unbalanced-elif"
    UNBALANCED_ENDIF = "unbalanced-endif"
    UNCLOSED_SCOPE = "unclosed-scope"
    INCLUDE_UNCONFIGURED = "include-unconfigured"
    INCLUDE_FAILED = "include-failed"
    UNRECOGNIZED_DIRECTIVE = "unrecognized-directive"
    CONDITION_SYNTAX = "condition-syntax"


class DirectiveError(LGateUserError):
    """Recoverable error inside a directive line."""
    kind: ClassVar[DiagnosticKind]


@dataclass
class LexError(DirectiveError):
    """Token kind did not match the expected one."""
    expected: str
    actual: str
    position: int
    char: str = ""

    kind: ClassVar[DiagnosticKind] = DiagnosticKind.LEX_MISMATCH

    def __str__(self) -> str:
        return (
            f"Unexpected '{self.char}' of type {self.actual}, "
            f"was expecting a {self.expected}"
        )


@dataclass
class DuplicateDefineError(DirectiveError):
    name: str

    kind: ClassVar[DiagnosticKind] = DiagnosticKind.DUPLICATE_DEFINE

    def __str__(self) -> str:
        return f"Definition '{self.name}' already exists"


@dataclass
class UnknownDefineError(DirectiveError):
    name: str

    kind: ClassVar[DiagnosticKind] = DiagnosticKind.UNKNOWN_DEFINE

    def __str__(self) -> str:
        return f"Couldn't undefine '{self.name}' because it does not exist"


@dataclass
class UnbalancedElseError(DirectiveError):
    """`else` without an open `if`, or a second `else` in one chain."""
    duplicate: bool = False

    kind: ClassVar[DiagnosticKind] = DiagnosticKind.UNBALANCED_ELSE

    def __str__(self) -> str:
        if self.duplicate:
            return "Unexpected 'else': the chain already has an 'else' branch"
        return "Unexpected 'else' without matching 'if'"


@dataclass
class UnbalancedElifError(DirectiveError):
    """`elif` without an open `if`, or after the chain's `else`."""
    after_else: bool = False

    kind: ClassVar[DiagnosticKind] = DiagnosticKind.UNBALANCED_ELIF

    def __str__(self) -> str:
        if self.after_else:
            return "Unexpected 'elif' after 'else'"
        return "Unexpected 'elif' without matching 'if'"


@dataclass
class UnbalancedEndifError(DirectiveError):
    kind: ClassVar[DiagnosticKind] = DiagnosticKind.UNBALANCED_ENDIF

    def __str__(self) -> str:
        return "Unexpected 'endif' without matching 'if'"


@dataclass
class ConditionSyntaxError(DirectiveError):
    """Unexpected token or unsupported operator inside a condition."""
    message: str
    position: int

    kind: ClassVar[DiagnosticKind] = DiagnosticKind.CONDITION_SYNTAX

    def __str__(self) -> str:
        return f"{self.message} in condition"


class ProcessorConfigError(LGateUserError):
    """The processor is not usable in its current configuration or state."""
    pass


class ReentrancyError(ProcessorConfigError):
    """A pass was started while another pass on the same processor is running."""

    def __init__(self) -> None:
        super().__init__(
            "Illegal attempt to start processing while a previous pass is not finished"
        )


class ConfigError(LGateUserError, ValueError):
    """Invalid configuration file or value."""
    pass


__all__ = [
    "LGateUserError",
    "DiagnosticKind",
    "DirectiveError",
    "LexError",
    "DuplicateDefineError",
    "UnknownDefineError",
    "UnbalancedElseError",
    "UnbalancedElifError",
    "UnbalancedEndifError",
    "ConditionSyntaxError",
    "ProcessorConfigError",
    "ReentrancyError",
    "ConfigError",
]
