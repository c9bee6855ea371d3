"""CLI entrypoints for rendering, config checks and language listing."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from importlib import metadata
from pathlib import Path

from taskcard_core import configure_logging, load_config
from taskcard_renderer import ConfigurationError, default_registry

from .batch import output_name, run_batch

logger = logging.getLogger("taskcard.cli")


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _installed_version() -> str:
    try:
        return metadata.version("taskcard")
    except Exception:
        return "0.1.0"


def cmd_render(args: argparse.Namespace) -> int:
    cfg = load_config(Path(args.config))
    if args.output_dir:
        cfg.output_dir = Path(args.output_dir).expanduser().resolve()

    results = run_batch(cfg, only=args.task)
    failed = [r for r in results if not r.success]
    _print_json(
        {
            "output_dir": str(cfg.output_dir),
            "rendered": len(results) - len(failed),
            "failed": len(failed),
            "results": [asdict(r) for r in results],
        }
    )
    return 0 if not failed else 1


def cmd_check(args: argparse.Namespace) -> int:
    cfg = load_config(Path(args.config))
    tasks = []
    problems = 0
    for task in cfg.tasks:
        issues = []
        if not task.title:
            issues.append("missing title")
        if task.number is None or str(task.number) == "":
            issues.append("missing number")
        if task.code and not default_registry.supports(task.language):
            issues.append(f"unsupported language: {task.language}")
        problems += len(issues)
        tasks.append(
            {
                "number": task.number,
                "panel": "code" if task.code else ("image" if task.image else None),
                "output": output_name(task.number),
                "issues": issues,
            }
        )

    _print_json(
        {
            "config": str(Path(args.config).resolve()),
            "output_dir": str(cfg.output_dir),
            "background_image": cfg.background_image,
            "code_block_position": cfg.code_block_position.value,
            "code_block_horizontal_position": cfg.code_block_horizontal_position.value,
            "group_element": cfg.group_element.kind.value if cfg.group_element else None,
            "tasks": tasks,
            "valid": problems == 0,
        }
    )
    return 0 if problems == 0 else 1


def cmd_languages(_args: argparse.Namespace) -> int:
    _print_json(default_registry.languages())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taskcard", description="Render programming-task images")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_installed_version()}")
    parser.add_argument("--log-file", default=None, help="Optional JSON log file (rotated daily)")
    sub = parser.add_subparsers(dest="command", required=True)

    render_cmd = sub.add_parser("render", help="Render every task in the config")
    render_cmd.add_argument("--config", default="config.json", help="Path to config.json")
    render_cmd.add_argument("--output-dir", default=None, help="Override outputDir from the config")
    render_cmd.add_argument("--task", default=None, help="Render only the task with this number")
    render_cmd.set_defaults(func=cmd_render)

    check_cmd = sub.add_parser("check", help="Validate the config and report per-task issues")
    check_cmd.add_argument("--config", default="config.json", help="Path to config.json")
    check_cmd.set_defaults(func=cmd_check)

    lang_cmd = sub.add_parser("languages", help="List supported code languages")
    lang_cmd.set_defaults(func=cmd_languages)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(log_file=Path(args.log_file).expanduser() if args.log_file else None)
    try:
        return int(args.func(args))
    except ConfigurationError as exc:
        logger.error("invalid configuration: %s", exc, extra={"event": "config_invalid"})
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
