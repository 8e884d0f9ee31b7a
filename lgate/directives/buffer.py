"""
Редактирование буфера на месте без изменения длины.
"""

from __future__ import annotations

from typing import Optional, Union

SPACE = 0x20
_LINE_TERMINATORS = frozenset(b"\r\n")

MutableBuffer = Union[bytearray, memoryview]


def effective_length(buffer: MutableBuffer, length: Optional[int] = None) -> int:
    """
    Длина обрабатываемой области.

    Явная длина ограничивается размером буфера. Без неё область
    заканчивается на первом нулевом байте или на конце буфера.
    """
    if length is not None:
        if length < 0:
            raise ValueError(f"Negative buffer length: {length}")
        return min(length, len(buffer))

    index = bytes(buffer).find(b"\0")
    return index if index >= 0 else len(buffer)


class BufferEditor:
    """Заменяет байты пробелами, сохраняя переводы строк."""

    def __init__(self, buffer: MutableBuffer):
        self.buffer = buffer

    def blank(self, start: int, length: int) -> None:
        for pos in range(start, start + length):
            self.blank_byte(pos)

    def blank_byte(self, pos: int) -> None:
        if self.buffer[pos] not in _LINE_TERMINATORS:
            self.buffer[pos] = SPACE


__all__ = ["BufferEditor", "effective_length", "MutableBuffer"]
