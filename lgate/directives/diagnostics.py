"""
Diagnostics collected during a processing pass.

Errors inside directives never stop the scan: each one becomes a
Diagnostic, is stored in the pass report and forwarded to the optional
sink supplied by the host.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from ..errors import DiagnosticKind


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str
    line: int
    column: int = 0

    def __str__(self) -> str:
        return f"line {self.line}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "line": self.line,
            "column": self.column,
        }


DiagnosticSink = Callable[[Diagnostic], None]


@dataclass
class ProcessReport:
    """
    Outcome of one pass.

    The buffer is transformed even when diagnostics were reported;
    callers decide from `ok` whether the output can be trusted.
    """
    diagnostics: List[Diagnostic] = field(default_factory=list)
    lines: int = 0
    depth: int = 0  # scopes left unclosed at end of buffer

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    @property
    def error_count(self) -> int:
        return len(self.diagnostics)

    def by_kind(self, kind: DiagnosticKind) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.kind is kind]

    def kinds(self) -> List[DiagnosticKind]:
        return [d.kind for d in self.diagnostics]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "lines": self.lines,
            "unclosed": self.depth,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


__all__ = ["Diagnostic", "DiagnosticKind", "DiagnosticSink", "ProcessReport"]
