"""
Обработка директив: набор определений, стек областей, редактор буфера
и сам процессор.
"""

from .buffer import BufferEditor, effective_length
from .defines import DefineSet
from .diagnostics import Diagnostic, DiagnosticKind, ProcessReport
from .processor import CommandHandler, DirectiveProcessor, IncludeResolver
from .scope import ScopeFlag, ScopeStack

__all__ = [
    "BufferEditor",
    "effective_length",
    "DefineSet",
    "Diagnostic",
    "DiagnosticKind",
    "ProcessReport",
    "CommandHandler",
    "DirectiveProcessor",
    "IncludeResolver",
    "ScopeFlag",
    "ScopeStack",
]
