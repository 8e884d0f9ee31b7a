from pathlib import Path

import pytest

from lgate.config import LGateConfig, build_processor, find_config, load_config, make_include_resolver
from lgate.errors import ConfigError, ProcessorConfigError
from lgate.handlers import CommandRegistry

from tests.infrastructure import write


# ========= Модель =========

def test_defaults():
    cfg = LGateConfig.from_dict({})
    assert cfg.marker == "#"
    assert cfg.defines == [] and cfg.files == []


def test_from_dict_full():
    cfg = LGateConfig.from_dict({
        "marker": "@",
        "defines": ["A", "B"],
        "include_paths": ["inc"],
        "commands": ["pragma"],
        "files": ["src/**/*.c"],
        "exclude": ["src/gen/"],
    })
    assert cfg.marker == "@"
    assert cfg.defines == ["A", "B"]
    assert cfg.commands == ["pragma"]
    assert cfg.to_dict()["exclude"] == ["src/gen/"]


def test_single_string_is_promoted_to_list():
    assert LGateConfig.from_dict({"defines": "A"}).defines == ["A"]


def test_null_list_is_empty():
    assert LGateConfig.from_dict({"defines": None}).defines == []


@pytest.mark.parametrize("data", [
    {"unknown": 1},
    {"marker": "##"},
    {"marker": 3},
    {"defines": [1, 2]},
    {"files": {"a": "b"}},
])
def test_invalid(data):
    with pytest.raises(ConfigError):
        LGateConfig.from_dict(data)


def test_to_dict_skips_empty():
    assert LGateConfig().to_dict() == {"marker": "#"}


# ========= Загрузка из файла =========

def test_load_missing_returns_defaults(tmp_path: Path):
    assert load_config(root=tmp_path) == LGateConfig()


def test_load_explicit_missing(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.yaml")


def test_load_from_root(tmp_path: Path):
    write(tmp_path / "lgate.yaml", 'marker: "@"\ndefines: [DEBUG]\n')
    cfg = load_config(root=tmp_path)
    assert cfg.marker == "@"
    assert cfg.defines == ["DEBUG"]


def test_alt_name(tmp_path: Path):
    write(tmp_path / ".lgate.yaml", "defines:\n  - X\n")
    assert find_config(tmp_path) == (tmp_path / ".lgate.yaml").resolve()
    assert load_config(root=tmp_path).defines == ["X"]


def test_primary_name_wins(tmp_path: Path):
    write(tmp_path / "lgate.yaml", "defines: [A]\n")
    write(tmp_path / ".lgate.yaml", "defines: [B]\n")
    assert load_config(root=tmp_path).defines == ["A"]


def test_empty_file(tmp_path: Path):
    write(tmp_path / "lgate.yaml", "")
    assert load_config(root=tmp_path) == LGateConfig()


@pytest.mark.parametrize("text", ["- a\n- b\n", "defines: [A\n"])
def test_bad_yaml(tmp_path: Path, text: str):
    write(tmp_path / "lgate.yaml", text)
    with pytest.raises(ConfigError):
        load_config(root=tmp_path)


# ========= Фабрика =========

def test_build_processor(tmp_path: Path):
    cfg = LGateConfig(marker="@", defines=["A"], commands=["pragma"])
    processor = build_processor(cfg, tmp_path)

    assert processor.marker == "@"
    assert processor.has_define("A")
    assert isinstance(processor.command_handler, CommandRegistry)

    out, report = processor.process_text("@pragma once\n@if A\nx\n@endif\n")
    assert report.ok
    assert "x" in out


def test_build_processor_rejects_non_ascii_marker(tmp_path: Path):
    with pytest.raises(ProcessorConfigError):
        build_processor(LGateConfig(marker="§"), tmp_path)


def test_include_resolver_per_source(tmp_path: Path):
    write(tmp_path / "pkg" / "local.h", "")
    write(tmp_path / "inc" / "shared.h", "")
    cfg = LGateConfig(include_paths=["inc"])

    resolver = make_include_resolver(cfg, tmp_path, tmp_path / "pkg" / "main.c")

    assert resolver("local.h")
    assert resolver("shared.h")
    assert not resolver("other.h")
