"""
Модель конфигурации препроцессора.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..directives.processor import DEFAULT_MARKER
from ..errors import ConfigError

_KNOWN_KEYS = {"marker", "defines", "include_paths", "commands", "files", "exclude"}


def _str_list(data: Dict[str, Any], key: str) -> List[str]:
    value = data.get(key, [])
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{key}: expected a list of strings, got {value!r}")
    return list(value)


@dataclass
class LGateConfig:
    """
    Настройки процессора из lgate.yaml.

    Attributes:
        marker: Символ начала директивы
        defines: Определения, действующие с начала прохода
        include_paths: Каталоги поиска для include
        commands: Пользовательские директивы, которые принимаются без ошибки
        files: Паттерны файлов для команды apply (gitwildmatch)
        exclude: Паттерны исключения для apply
    """
    marker: str = DEFAULT_MARKER
    defines: List[str] = field(default_factory=list)
    include_paths: List[str] = field(default_factory=list)
    commands: List[str] = field(default_factory=list)
    files: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> LGateConfig:
        """
        Создание экземпляра из словаря (из YAML).

        Raises:
            ConfigError: При неизвестных ключах или неверных типах значений
        """
        unknown = sorted(set(data) - _KNOWN_KEYS)
        if unknown:
            raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}")

        marker = data.get("marker", DEFAULT_MARKER)
        if not isinstance(marker, str) or len(marker) != 1:
            raise ConfigError(f"marker: expected a single character, got {marker!r}")

        return cls(
            marker=marker,
            defines=_str_list(data, "defines"),
            include_paths=_str_list(data, "include_paths"),
            commands=_str_list(data, "commands"),
            files=_str_list(data, "files"),
            exclude=_str_list(data, "exclude"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация в словарь для YAML."""
        result: Dict[str, Any] = {"marker": self.marker}
        for key in ("defines", "include_paths", "commands", "files", "exclude"):
            value = getattr(self, key)
            if value:
                result[key] = list(value)
        return result


__all__ = ["LGateConfig"]
