"""
Shortcuts for running the processor in tests.
"""

from __future__ import annotations

from typing import List, Tuple

from lgate.directives import Diagnostic, DirectiveProcessor, ProcessReport


def run(processor: DirectiveProcessor, text: str) -> Tuple[str, ProcessReport]:
    """Processes ASCII text and returns (output, report)."""
    return processor.process_text(text)


def blank_like(text: str) -> str:
    """Text of the same shape where every non-newline character is a space."""
    return "".join(c if c in "\r\n" else " " for c in text)


class CollectingSink:
    """Diagnostic sink that keeps everything it receives."""

    def __init__(self):
        self.items: List[Diagnostic] = []

    def __call__(self, diagnostic: Diagnostic) -> None:
        self.items.append(diagnostic)


__all__ = ["run", "blank_like", "CollectingSink"]
