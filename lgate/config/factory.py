"""
Factory for creating configured processors.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..directives.diagnostics import DiagnosticSink
from ..directives.processor import DirectiveProcessor
from ..handlers import CommandRegistry, FileIncludeResolver
from .model import LGateConfig


def make_include_resolver(config: LGateConfig, root: Path, source: Path) -> FileIncludeResolver:
    """
    Include resolver for one source file.

    Searches the source's directory first, then include_paths relative to root.
    """
    return FileIncludeResolver(source.parent, [root / p for p in config.include_paths])


def build_processor(
    config: LGateConfig,
    root: Path,
    sink: Optional[DiagnosticSink] = None,
) -> DirectiveProcessor:
    """
    Create a processor from configuration.

    The include resolver searches root and include_paths; callers processing
    a concrete file should replace it via make_include_resolver().
    """
    return DirectiveProcessor(
        marker=config.marker,
        include_resolver=FileIncludeResolver(root, [root / p for p in config.include_paths]),
        command_handler=CommandRegistry(set(config.commands)),
        sink=sink,
        defines=config.defines,
    )


__all__ = ["build_processor", "make_include_resolver"]
