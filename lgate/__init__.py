"""
linegate: conditional text preprocessor.

Blanks excluded regions of a mutable buffer in place, keeping its length
and line structure intact.
"""

from .directives import (
    DefineSet,
    Diagnostic,
    DiagnosticKind,
    DirectiveProcessor,
    ProcessReport,
)
from .errors import (
    ConfigError,
    DirectiveError,
    LGateUserError,
    ProcessorConfigError,
    ReentrancyError,
)

__all__ = [
    "DefineSet",
    "Diagnostic",
    "DiagnosticKind",
    "DirectiveProcessor",
    "ProcessReport",
    "ConfigError",
    "DirectiveError",
    "LGateUserError",
    "ProcessorConfigError",
    "ReentrancyError",
]
