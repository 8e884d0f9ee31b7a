"""
Лексер для строк директив.

Работает напрямую по изменяемому байтовому буферу, ничего в нём не меняя.
Каждый вызов classify() определяет вид токена по первому байту и жадно
расширяет совпадение, пока следующие байты совместимы с этим видом:
- пробелы и табуляция
- один перевод строки (\\n, \\r\\n или \\r)
- слова из ASCII букв, цифр и подчёркивания
- операторы из символов ! & | ( )
- строки в двойных кавычках с экранированием через обратный слэш
- любой другой байт даёт однобайтовый REJECT
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

from ..errors import LexError

Buffer = Union[bytearray, bytes, memoryview]

CR = 0x0D
LF = 0x0A
QUOTE = 0x22
BACKSLASH = 0x5C

_WHITESPACE = frozenset(b" \t")
_NEWLINE = frozenset(b"\r\n")
_WORD = frozenset(b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_")
_OPERATOR = frozenset(b"!&|()")


class TokenKind(Enum):
    """Виды токенов."""
    WHITESPACE = "WHITESPACE"
    NEWLINE = "NEWLINE"
    WORD = "WORD"
    OPERATOR = "OPERATOR"
    STRING = "STRING"
    REJECT = "REJECT"
    END = "END"  # конец буфера, длина всегда 0


@dataclass(frozen=True)
class Token:
    """
    Классифицированный участок буфера.

    Attributes:
        kind: Вид токена
        start: Смещение первого байта в буфере
        length: Длина в байтах
    """
    kind: TokenKind
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    def raw(self, data: Buffer) -> bytes:
        return bytes(data[self.start:self.end])

    def text(self, data: Buffer) -> str:
        return self.raw(data).decode("utf-8", errors="replace")

    def __repr__(self):
        return f"Token({self.kind.value}, start={self.start}, length={self.length})"


@dataclass
class Cursor:
    """
    Позиция сканирования: смещение, строка (с 1) и колонка (с 0).

    Двигается только вперёд.
    """
    offset: int = 0
    line: int = 1
    column: int = 0

    def advance(self, count: int = 1) -> None:
        self.offset += count
        self.column += count

    def newline(self, count: int = 1) -> None:
        """Пропускает перевод строки длиной count байт."""
        self.offset += count
        self.line += 1
        self.column = 0


class DirectiveLexer:
    """
    Классификатор токенов над участком буфера [0, end).

    Не хранит позицию: все методы принимают смещение и возвращают токен,
    продвижение курсора остаётся за вызывающим кодом.
    """

    def __init__(self, data: Buffer, end: int):
        """
        Args:
            data: Буфер для чтения
            end: Граница сканирования (не включительно)
        """
        self.data = data
        self.end = end

    def classify(self, pos: int) -> Token:
        """
        Определяет токен, начинающийся с позиции pos.

        Returns:
            Токен; на границе буфера END нулевой длины
        """
        if pos >= self.end:
            return Token(TokenKind.END, pos, 0)

        c = self.data[pos]

        if c == QUOTE:
            return Token(TokenKind.STRING, pos, self._scan_string(pos) - pos)

        if c in _NEWLINE:
            # Только один перевод строки за вызов
            length = 1
            if c == CR and pos + 1 < self.end and self.data[pos + 1] == LF:
                length = 2
            return Token(TokenKind.NEWLINE, pos, length)

        for kind, charset in (
            (TokenKind.WHITESPACE, _WHITESPACE),
            (TokenKind.WORD, _WORD),
            (TokenKind.OPERATOR, _OPERATOR),
        ):
            if c in charset:
                return Token(kind, pos, self._scan_run(pos, charset) - pos)

        return Token(TokenKind.REJECT, pos, 1)

    def expect(self, pos: int, kind: TokenKind) -> Token:
        """
        Классифицирует токен и проверяет его вид.

        Raises:
            LexError: Если вид токена отличается от ожидаемого
        """
        token = self.classify(pos)
        if token.kind is not kind:
            raise LexError(
                expected=kind.value,
                actual=token.kind.value,
                position=pos,
                char=self.describe_char(pos),
            )
        return token

    def next_token(self, pos: int) -> Tuple[Token, int]:
        """
        Как classify(), но пропускает ведущие пробелы.

        Returns:
            Кортеж (токен после пробелов, общая длина вместе с пробелами)
        """
        token = self.classify(pos)
        if token.kind is not TokenKind.WHITESPACE:
            return token, token.length

        following = self.classify(token.end)
        return following, token.length + following.length

    def describe_char(self, pos: int) -> str:
        """Печатное представление байта для сообщений об ошибках."""
        if pos >= self.end:
            return "<end>"
        c = self.data[pos]
        if c in _WORD:
            return chr(c)
        return f"\\x{c:02X}"

    def _scan_run(self, pos: int, charset: frozenset) -> int:
        while pos < self.end and self.data[pos] in charset:
            pos += 1
        return pos

    def _scan_string(self, pos: int) -> int:
        pos += 1  # открывающая кавычка
        while pos < self.end:
            c = self.data[pos]
            if c == BACKSLASH:
                pos += 2
                continue
            pos += 1
            if c == QUOTE:
                break
        # Незакрытая строка идёт до конца буфера
        return min(pos, self.end)


def is_terminated(raw: bytes) -> bool:
    """Закрыта ли строка кавычкой (а не обрезана концом буфера)."""
    return len(raw) >= 2 and raw.endswith(b'"') and not _ends_with_escape(raw[1:-1])


def unescape_string(raw: bytes) -> str:
    """
    Убирает кавычки у STRING-токена и раскрывает экранирование.

    Args:
        raw: Байты токена вместе с кавычками

    Returns:
        Содержимое строки
    """
    body = raw[1:-1] if is_terminated(raw) else raw[1:]

    out = bytearray()
    i = 0
    while i < len(body):
        c = body[i]
        if c == BACKSLASH and i + 1 < len(body):
            out.append(body[i + 1])
            i += 2
            continue
        out.append(c)
        i += 1
    return out.decode("utf-8", errors="replace")


def _ends_with_escape(body: bytes) -> bool:
    # Нечётное число обратных слэшей в конце экранирует кавычку
    count = len(body) - len(body.rstrip(b"\\"))
    return count % 2 == 1


__all__ = [
    "Buffer",
    "TokenKind",
    "Token",
    "Cursor",
    "DirectiveLexer",
    "is_terminated",
    "unescape_string",
]
