"""
Процессор директив.

Проходит по буферу байт за байтом, распознаёт строки директив
(маркер в колонке 0), выполняет их и переписывает буфер на месте:
строки директив и исключённые области заменяются пробелами,
переводы строк сохраняются, длина буфера не меняется.

Ошибки внутри директив не прерывают проход: каждая превращается
в диагностику, остаток строки пропускается, сканирование продолжается.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, Optional, Tuple

from ..conditions.evaluator import ConditionEvaluator
from ..conditions.lexer import CR, LF, Cursor, DirectiveLexer, TokenKind, is_terminated, unescape_string
from ..errors import (
    DiagnosticKind,
    DirectiveError,
    LexError,
    ProcessorConfigError,
    ReentrancyError,
)
from .buffer import BufferEditor, MutableBuffer, effective_length
from .defines import DefineSet
from .diagnostics import Diagnostic, DiagnosticSink, ProcessReport
from .scope import ScopeStack

_LOG = logging.getLogger("lgate.processor")

IncludeResolver = Callable[[str], bool]
CommandHandler = Callable[[str, Optional[str]], bool]

DEFAULT_MARKER = "#"


class DirectiveProcessor:
    """
    Условный препроцессор над изменяемым буфером.

    Набор определений живёт между вызовами process(); стек областей
    и курсор существуют только в пределах одного прохода.
    """

    def __init__(
        self,
        marker: str = DEFAULT_MARKER,
        include_resolver: Optional[IncludeResolver] = None,
        command_handler: Optional[CommandHandler] = None,
        sink: Optional[DiagnosticSink] = None,
        defines: Iterable[str] = (),
    ):
        """
        Args:
            marker: Символ, с которого начинаются директивы
            include_resolver: Обработчик `include "path"`; возвращает успех
            command_handler: Обработчик неизвестных директив (слово, значение)
            sink: Получатель диагностик
            defines: Начальные определения

        Raises:
            ProcessorConfigError: Если маркер не является одним ASCII-символом
        """
        if len(marker) != 1 or not marker.isascii() or marker in "\r\n":
            raise ProcessorConfigError(f"Marker must be a single ASCII character, got {marker!r}")

        self.marker = marker
        self.include_resolver = include_resolver
        self.command_handler = command_handler
        self.sink = sink
        self._defines = DefineSet(defines)

        self._busy = False
        self._marker_byte = ord(marker)
        self._handlers: Dict[str, Callable[[str], None]] = {
            "define": self._on_define,
            "undef": self._on_undef,
            "if": self._on_if,
            "elif": self._on_elif,
            "else": self._on_else,
            "endif": self._on_endif,
            "include": self._on_include,
        }

        # Состояние текущего прохода
        self._buffer: Optional[MutableBuffer] = None
        self._lexer: Optional[DirectiveLexer] = None
        self._editor: Optional[BufferEditor] = None
        self._evaluator: Optional[ConditionEvaluator] = None
        self._cursor = Cursor()
        self._stack = ScopeStack()
        self._result = ProcessReport()
        self._line = 0
        self._column = 0

    # ------------------------------------------------------------------ #
    # Определения и настройка
    # ------------------------------------------------------------------ #

    @property
    def defines(self) -> DefineSet:
        return self._defines

    @property
    def busy(self) -> bool:
        """Идёт ли сейчас проход."""
        return self._busy

    def add_define(self, name: str) -> None:
        self._defines.add(name)

    def remove_define(self, name: str) -> None:
        self._defines.remove(name)

    def has_define(self, name: str) -> bool:
        return self._defines.has(name)

    def set_include_resolver(self, resolver: Optional[IncludeResolver]) -> None:
        self.include_resolver = resolver

    def set_command_handler(self, handler: Optional[CommandHandler]) -> None:
        self.command_handler = handler

    def copy(self) -> DirectiveProcessor:
        """Новый процессор с теми же настройками и копией определений."""
        clone = DirectiveProcessor(
            marker=self.marker,
            include_resolver=self.include_resolver,
            command_handler=self.command_handler,
            sink=self.sink,
        )
        clone._defines = self._defines.copy()
        return clone

    __copy__ = copy

    # ------------------------------------------------------------------ #
    # Проход
    # ------------------------------------------------------------------ #

    def process(self, buffer: MutableBuffer, length: Optional[int] = None) -> ProcessReport:
        """
        Обрабатывает буфер на месте.

        Args:
            buffer: Изменяемый буфер (bytearray или записываемый memoryview)
            length: Длина области; по умолчанию до первого нулевого байта

        Returns:
            Отчёт прохода с диагностиками

        Raises:
            ReentrancyError: Если проход на этом процессоре уже идёт
        """
        if self._busy:
            raise ReentrancyError()
        if not isinstance(buffer, (bytearray, memoryview)) or (
            isinstance(buffer, memoryview) and buffer.readonly
        ):
            raise TypeError(f"Expected a writable buffer, got {type(buffer).__name__}")

        end = effective_length(buffer, length)

        self._busy = True
        try:
            return self._run(buffer, end)
        finally:
            self._buffer = None
            self._lexer = None
            self._editor = None
            self._evaluator = None
            self._stack.clear()
            self._busy = False

    def process_text(self, text: str, encoding: str = "utf-8") -> Tuple[str, ProcessReport]:
        """
        Обрабатывает строку через временный буфер.

        Стёртые многобайтовые символы превращаются в несколько пробелов,
        поэтому длина сохраняется в байтах, а не в символах.
        """
        buffer = bytearray(text.encode(encoding))
        report = self.process(buffer, len(buffer))
        return buffer.decode(encoding), report

    def _run(self, buffer: MutableBuffer, end: int) -> ProcessReport:
        self._buffer = buffer
        self._lexer = DirectiveLexer(buffer, end)
        self._editor = BufferEditor(buffer)
        self._evaluator = ConditionEvaluator(self._lexer, self._defines.has)
        self._cursor = cursor = Cursor()
        self._stack = ScopeStack()
        self._result = ProcessReport()

        _LOG.debug("Processing %d bytes with marker %r", end, self.marker)

        while cursor.offset < end:
            c = buffer[cursor.offset]

            if c == LF or c == CR:
                cursor.newline(self._lexer.classify(cursor.offset).length)
                continue

            if cursor.column > 0 or c != self._marker_byte:
                if self._stack.erasing:
                    self._editor.blank_byte(cursor.offset)
                cursor.advance()
                continue

            self._directive()

        depth = self._stack.depth
        if depth:
            self._emit(
                DiagnosticKind.UNCLOSED_SCOPE,
                f"{depth} scope(s) left unclosed at end of buffer (missing 'endif'?)",
                line=cursor.line,
                column=cursor.column,
            )

        self._result.depth = depth
        self._result.lines = cursor.line - 1 + (1 if cursor.column > 0 else 0)
        _LOG.debug(
            "Processed %d line(s), %d diagnostic(s)",
            self._result.lines, self._result.error_count,
        )
        return self._result

    def _directive(self) -> None:
        cursor = self._cursor
        start = cursor.offset
        self._line, self._column = cursor.line, cursor.column
        erasing = self._stack.erasing

        cursor.advance()  # маркер

        try:
            token = self._lexer.expect(cursor.offset, TokenKind.WORD)
        except LexError as e:
            # Мусор после маркера в стираемой области не интересен
            if not erasing:
                self._emit(e.kind, str(e))
            self._consume_line()
        else:
            command = token.text(self._buffer)
            cursor.advance(token.length)
            handler = self._handlers.get(command, self._on_custom)
            try:
                handler(command)
            except DirectiveError as e:
                self._emit(e.kind, str(e))
                self._consume_line()

        self._editor.blank(start, cursor.offset - start)

    # ------------------------------------------------------------------ #
    # Директивы
    # ------------------------------------------------------------------ #

    def _on_define(self, command: str) -> None:
        if self._stack.erasing:
            self._consume_line()
            return
        self._defines.add(self._expect_name())
        self._expect_eol()

    def _on_undef(self, command: str) -> None:
        if self._stack.erasing:
            self._consume_line()
            return
        self._defines.remove(self._expect_name())
        self._expect_eol()

    def _on_if(self, command: str) -> None:
        if self._stack.erasing:
            # Предок уже стирает: условие не вычисляем
            self._stack.open_deep()
            self._consume_line()
            return

        try:
            self._expect(TokenKind.WHITESPACE)
            passed = self._evaluator.evaluate(self._cursor)
        except DirectiveError:
            # Кадр всё равно нужен, чтобы endif оставался парным
            self._stack.open(False)
            raise
        self._stack.open(passed)

    def _on_elif(self, command: str) -> None:
        if self._stack.deep_erasing:
            self._consume_line()
            return

        if self._stack.elif_taken():
            self._stack.skip_elif()
            self._consume_line()
            return

        try:
            self._expect(TokenKind.WHITESPACE)
            passed = self._evaluator.evaluate(self._cursor)
        except DirectiveError:
            self._stack.take_elif(False)
            raise
        self._stack.take_elif(passed)

    def _on_else(self, command: str) -> None:
        if self._stack.deep_erasing:
            self._consume_line()
            return
        self._stack.enter_else()
        self._expect_eol()

    def _on_endif(self, command: str) -> None:
        self._stack.close()
        self._expect_eol()

    def _on_include(self, command: str) -> None:
        if self._stack.erasing:
            self._consume_line()
            return

        if self.include_resolver is None:
            self._emit(
                DiagnosticKind.INCLUDE_UNCONFIGURED,
                "No include resolver set up for 'include'",
            )
            self._consume_line()
            return

        self._expect(TokenKind.WHITESPACE)
        token = self._lexer.expect(self._cursor.offset, TokenKind.STRING)
        raw = token.raw(self._buffer)
        if not is_terminated(raw) or b"\n" in raw or b"\r" in raw:
            raise LexError(
                expected=TokenKind.STRING.value,
                actual="UNTERMINATED STRING",
                position=token.start,
                char='"',
            )
        self._cursor.advance(token.length)

        path = unescape_string(raw)
        if not self.include_resolver(path):
            self._emit(DiagnosticKind.INCLUDE_FAILED, f"Failed to include '{path}'")

        self._expect_eol()

    def _on_custom(self, command: str) -> None:
        erasing = self._stack.erasing
        value_start = self._cursor.offset
        self._consume_line()

        if erasing:
            return

        found = False
        if self.command_handler is not None:
            found = bool(self.command_handler(command, self._line_value(value_start)))

        if not found:
            self._emit(
                DiagnosticKind.UNRECOGNIZED_DIRECTIVE,
                f"Unrecognized directive '{command}'",
            )

    # ------------------------------------------------------------------ #
    # Вспомогательные методы
    # ------------------------------------------------------------------ #

    def _expect(self, kind: TokenKind) -> None:
        token = self._lexer.expect(self._cursor.offset, kind)
        self._cursor.advance(token.length)

    def _expect_name(self) -> str:
        self._expect(TokenKind.WHITESPACE)
        token = self._lexer.expect(self._cursor.offset, TokenKind.WORD)
        self._cursor.advance(token.length)
        return token.text(self._buffer)

    def _expect_eol(self) -> None:
        """Конец строки (допускаются хвостовые пробелы) или конец буфера."""
        token, consumed = self._lexer.next_token(self._cursor.offset)
        if token.kind is TokenKind.END:
            self._cursor.advance(consumed)
            return

        self._cursor.advance(consumed - token.length)
        self._lexer.expect(token.start, TokenKind.NEWLINE)
        self._cursor.newline(token.length)

    def _consume_line(self) -> None:
        """Пропускает остаток строки вместе с переводом строки."""
        cursor = self._cursor
        pos = self._line_end(cursor.offset)
        cursor.advance(pos - cursor.offset)
        if pos < self._lexer.end:
            cursor.newline(self._lexer.classify(pos).length)

    def _line_end(self, pos: int) -> int:
        end = self._lexer.end
        while pos < end and self._buffer[pos] not in (CR, LF):
            pos += 1
        return pos

    def _line_value(self, start: int) -> Optional[str]:
        raw = bytes(self._buffer[start:self._line_end(start)])
        value = raw.decode("utf-8", errors="replace").strip(" \t")
        return value or None

    def _emit(
        self,
        kind: DiagnosticKind,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        diagnostic = Diagnostic(
            kind=kind,
            message=message,
            line=self._line if line is None else line,
            column=self._column if column is None else column,
        )
        self._result.diagnostics.append(diagnostic)
        _LOG.warning("%s", diagnostic)
        if self.sink is not None:
            self.sink(diagnostic)


__all__ = [
    "DirectiveProcessor",
    "IncludeResolver",
    "CommandHandler",
    "DEFAULT_MARKER",
]
