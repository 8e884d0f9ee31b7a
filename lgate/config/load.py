"""
Загрузчик конфигурации lgate.yaml.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..errors import ConfigError
from .model import LGateConfig
from .paths import find_config

_LOG = logging.getLogger("lgate.config")

_yaml = YAML(typ="safe")


def _read_yaml_map(path: Path) -> dict:
    """Читает YAML файл и возвращает словарь."""
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"YAML must be a mapping: {path}")
    return raw


def load_config(path: Optional[Path] = None, root: Optional[Path] = None) -> LGateConfig:
    """
    Загрузить конфигурацию.

    • Явный путь должен существовать.
    • Без пути ищем lgate.yaml в root (по умолчанию текущий каталог).
    • Если файла нет, вернуть дефолты.
    """
    if path is not None:
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
    else:
        path = find_config(root or Path.cwd())
        if path is None:
            _LOG.debug("No config file found, using defaults")
            return LGateConfig()

    _LOG.debug("Loading config from %s", path)
    return LGateConfig.from_dict(_read_yaml_map(path))


__all__ = ["load_config"]
