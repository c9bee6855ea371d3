from __future__ import annotations

import runpy
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "apps" / "generator"))
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

import taskcard_app.__main__ as generator_main


def test_main_defaults_to_render(monkeypatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(generator_main, "_cli_main", lambda argv=None: calls.append(list(argv or [])) or 0)

    rc = generator_main.main([])
    assert rc == 0
    assert calls == [["render"]]


def test_bare_invocation_reads_sys_argv(monkeypatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(generator_main, "_cli_main", lambda argv=None: calls.append(list(argv or [])) or 0)
    monkeypatch.setattr(sys, "argv", ["taskcard"])

    assert generator_main.main() == 0
    assert calls == [["render"]]


def test_main_passes_through_args(monkeypatch) -> None:
    calls: list[list[str]] = []
    monkeypatch.setattr(generator_main, "_cli_main", lambda argv=None: calls.append(list(argv or [])) or 0)

    rc = generator_main.main(["check", "--config", "cards.json"])
    assert rc == 0
    assert calls == [["check", "--config", "cards.json"]]


def test_main_module_runpath_without_package_context() -> None:
    main_path = ROOT / "apps" / "generator" / "taskcard_app" / "__main__.py"
    result = runpy.run_path(str(main_path))
    assert "main" in result
