from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from importlib import metadata
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .config import LGateConfig, build_processor, load_config, make_include_resolver
from .directives import DirectiveProcessor, ProcessReport
from .errors import ConfigError, LGateUserError
from .filtering import select_files
from .handlers import CommandRegistry, FileIncludeResolver


def tool_version() -> str:
    """Версия установленного дистрибутива linegate."""
    try:
        return metadata.version("linegate")
    except metadata.PackageNotFoundError:
        return "0.0.0"


def jdumps(obj: Any) -> str:
    # Пути в ответах приводятся к строке
    return json.dumps(obj, ensure_ascii=False, default=str)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose or os.environ.get("LGATE_DEBUG") else logging.ERROR
    log = logging.getLogger("lgate")
    log.setLevel(level)
    if not log.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        log.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="lgate",
        description="Conditional text preprocessor (in-place, length and line preserving)",
        add_help=True,
    )
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Общие аргументы для всех подкоманд
    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument(
            "-D", "--define",
            action="append",
            metavar="NAME",
            help="добавить определение (можно указать несколько)",
        )
        sp.add_argument(
            "-U", "--undef",
            action="append",
            metavar="NAME",
            help="убрать определение из конфигурации",
        )
        sp.add_argument(
            "-I", "--include-path",
            action="append",
            metavar="DIR",
            help="каталог поиска для include",
        )
        sp.add_argument("--marker", help="символ начала директивы (по умолчанию '#')")
        sp.add_argument("--config", type=Path, help="путь к lgate.yaml")
        sp.add_argument("-v", "--verbose", action="store_true", help="отладочный лог в stderr")

    sp_render = sub.add_parser("render", help="Обработанный текст в stdout, ошибки в stderr")
    sp_render.add_argument("file", type=Path)
    add_common(sp_render)

    sp_report = sub.add_parser("report", help="JSON-отчёт о проходе")
    sp_report.add_argument("file", type=Path)
    add_common(sp_report)

    sp_apply = sub.add_parser("apply", help="Обработать файлы проекта на месте (JSON-сводка)")
    sp_apply.add_argument("root", type=Path, nargs="?", default=Path("."))
    sp_apply.add_argument("--dry-run", action="store_true", help="ничего не записывать")
    add_common(sp_apply)

    return p


def _config(ns: argparse.Namespace, root: Path) -> LGateConfig:
    """Конфигурация из файла с наложением аргументов командной строки."""
    cfg = load_config(ns.config, root)

    if ns.marker is not None:
        if len(ns.marker) != 1:
            raise ConfigError(f"--marker expects a single character, got {ns.marker!r}")
        cfg.marker = ns.marker

    for name in ns.define or []:
        if name not in cfg.defines:
            cfg.defines.append(name)

    for directory in ns.include_path or []:
        cfg.include_paths.append(str(Path(directory).resolve()))

    return cfg


def _processor(ns: argparse.Namespace, cfg: LGateConfig, root: Path) -> DirectiveProcessor:
    processor = build_processor(cfg, root)
    for name in ns.undef or []:
        processor.remove_define(name)
    return processor


def _format_diagnostics(path: Path, report: ProcessReport) -> str:
    return "".join(
        f"{path}:{d.line}:{d.column}: {d.kind.value}: {d.message}\n"
        for d in report.diagnostics
    )


def _run_file(
    processor: DirectiveProcessor,
    cfg: LGateConfig,
    root: Path,
    path: Path,
) -> Tuple[bytearray, ProcessReport, FileIncludeResolver]:
    resolver = make_include_resolver(cfg, root, path)
    processor.set_include_resolver(resolver)
    data = bytearray(path.read_bytes())
    report = processor.process(data, len(data))
    return data, report, resolver


def _cmd_render(ns: argparse.Namespace) -> int:
    root = ns.config.parent if ns.config else Path.cwd()
    cfg = _config(ns, root)
    processor = _processor(ns, cfg, root)

    data, report, _ = _run_file(processor, cfg, root, ns.file)
    sys.stdout.write(data.decode("utf-8", errors="replace"))
    sys.stderr.write(_format_diagnostics(ns.file, report))
    return 0 if report.ok else 1


def _cmd_report(ns: argparse.Namespace) -> int:
    root = ns.config.parent if ns.config else Path.cwd()
    cfg = _config(ns, root)
    processor = _processor(ns, cfg, root)

    _, report, resolver = _run_file(processor, cfg, root, ns.file)

    result: Dict[str, Any] = {"file": str(ns.file)}
    result.update(report.to_dict())
    result["defines"] = processor.defines.sorted_names()
    result["includes"] = {
        "resolved": [str(p) for p in resolver.resolved],
        "missing": list(resolver.missing),
    }
    handler = processor.command_handler
    if isinstance(handler, CommandRegistry):
        result["commands"] = [{"command": c, "value": v} for c, v in handler.seen]

    sys.stdout.write(jdumps(result))
    return 0 if report.ok else 1


def _cmd_apply(ns: argparse.Namespace) -> int:
    root = ns.root.resolve()
    cfg = _config(ns, root)
    if not cfg.files:
        raise ConfigError("No 'files' patterns configured for apply")

    base = _processor(ns, cfg, root)
    entries: List[Dict[str, Any]] = []
    all_ok = True

    for rel in select_files(root, cfg.files, cfg.exclude):
        path = root / rel
        original = path.read_bytes()
        # Определения из одного файла не должны влиять на другой
        data, report, _ = _run_file(base.copy(), cfg, root, path)
        changed = bytes(data) != original
        if changed and not ns.dry_run:
            path.write_bytes(bytes(data))
        all_ok = all_ok and report.ok
        sys.stderr.write(_format_diagnostics(rel, report))
        entries.append({
            "path": rel.as_posix(),
            "changed": changed,
            "diagnostics": [d.to_dict() for d in report.diagnostics],
        })

    sys.stdout.write(jdumps({"ok": all_ok, "dryRun": bool(ns.dry_run), "files": entries}))
    return 0 if all_ok else 1


def main(argv: Optional[List[str]] = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(ns.verbose)

    try:
        if ns.cmd == "render":
            return _cmd_render(ns)
        if ns.cmd == "report":
            return _cmd_report(ns)
        if ns.cmd == "apply":
            return _cmd_apply(ns)
    except LGateUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except OSError as e:
        sys.stderr.write(f"{e}\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
