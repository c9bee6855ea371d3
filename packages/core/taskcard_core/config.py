"""Run configuration schema and loader for the generator's config.json."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any

from PIL import ImageColor

from taskcard_renderer.errors import ConfigurationError
from taskcard_renderer.models import (
    FontSettings,
    HighlightColors,
    HorizontalAlignment,
    OverlayElement,
    OverlayKind,
    TaskSpec,
    VerticalPosition,
)

CONFIG_FILE_NAME = "config.json"
DEFAULT_OUTPUT_DIR = "output"

# config.json uses camelCase keys.
_FONT_KEYS = {
    "fontFamily": "font_family",
    "titleSize": "title_size",
    "titleColor": "title_color",
    "titleHorizontalPosition": "title_alignment",
    "titleTopMargin": "title_top_margin",
    "bottomTitleSize": "footer_size",
    "bottomTitleColor": "footer_color",
    "bottomTitleHorizontalPosition": "footer_alignment",
    "bottomTitleMargin": "footer_bottom_margin",
    "codeFontFamily": "code_font_family",
    "codeSize": "code_size",
    "codeTextColor": "code_text_color",
    "codeBackgroundColor": "code_background_color",
    "codePadding": "code_padding",
    "codeBorderRadius": "code_border_radius",
    "codeBorderColor": "code_border_color",
}

_GROUP_KEYS = {
    "content": "content",
    "fontSize": "font_size",
    "fontColor": "font_color",
    "fontFamily": "font_family",
    "imagePath": "image_path",
    "marginRight": "margin_right",
    "marginBottom": "margin_bottom",
}


@dataclass
class RunConfig:
    font_settings: FontSettings = field(default_factory=FontSettings)
    tasks: list[TaskSpec] = field(default_factory=list)
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    background_image: str | None = None
    code_block_position: VerticalPosition = VerticalPosition.START
    code_block_horizontal_position: HorizontalAlignment = HorizontalAlignment.START
    group_element: OverlayElement | None = None
    base_dir: Path = Path(".")


def _object(value: Any, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"{name} must be an object")
    return value


def _enum(enum_type: type[Enum], value: Any, name: str):
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise ConfigurationError(f"{name} must be one of: {allowed} (got {value!r})") from None


def _int(value: Any, name: str, minimum: int = 0) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{name} must be a number (got {value!r})")
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum} (got {value!r})")
    return int(value)


def _color(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{name} must be a color string (got {value!r})")
    try:
        ImageColor.getrgb(value)
    except ValueError:
        raise ConfigurationError(f"{name} is not a recognised color: {value!r}") from None
    return value


def _optional_str(value: Any, name: str) -> str | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{name} must be a string (got {value!r})")
    return value


def _coerce(dataclass_type, attr: str, value: Any, name: str) -> Any:
    default = next(f.default for f in fields(dataclass_type) if f.name == attr)
    if isinstance(default, Enum):
        return _enum(type(default), value, name)
    if isinstance(default, int) and not isinstance(default, bool):
        minimum = 1 if attr.endswith("size") else 0
        return _int(value, name, minimum)
    if attr.endswith("color"):
        return _color(value, name)
    if not isinstance(value, str) or not value:
        raise ConfigurationError(f"{name} must be a non-empty string (got {value!r})")
    return value


def _merge(dataclass_type, raw: dict[str, Any], keys: dict[str, str], section: str, **extra: Any):
    kwargs: dict[str, Any] = dict(extra)
    for key, attr in keys.items():
        if key in raw and raw[key] is not None:
            kwargs[attr] = _coerce(dataclass_type, attr, raw[key], f"{section}.{key}")
    return dataclass_type(**kwargs)


def _highlight_colors(raw: Any) -> HighlightColors:
    data = _object(raw, "fontSettings.codeHighlightColors")
    kwargs = {}
    for f in fields(HighlightColors):
        value = data.get(f.name)
        if value:
            kwargs[f.name] = _color(value, f"fontSettings.codeHighlightColors.{f.name}")
    return HighlightColors(**kwargs)


def parse_font_settings(raw: Any) -> FontSettings:
    data = _object(raw, "fontSettings")
    return _merge(
        FontSettings,
        data,
        _FONT_KEYS,
        "fontSettings",
        highlight_colors=_highlight_colors(data.get("codeHighlightColors")),
    )


def parse_group_element(raw: Any) -> OverlayElement | None:
    if raw is None:
        return None
    data = _object(raw, "groupElement")
    kind = _enum(OverlayKind, data.get("type"), "groupElement.type")
    kwargs: dict[str, Any] = {"kind": kind}
    for key, attr in _GROUP_KEYS.items():
        value = data.get(key)
        if value is None:
            continue
        if attr in ("content", "image_path"):
            kwargs[attr] = _optional_str(value, f"groupElement.{key}")
        else:
            kwargs[attr] = _coerce(OverlayElement, attr, value, f"groupElement.{key}")
    return OverlayElement(**kwargs)


def parse_task(raw: Any, index: int) -> TaskSpec:
    data = _object(raw, f"tasks[{index}]")
    number = data.get("number")
    if number is not None and not isinstance(number, (str, int)):
        raise ConfigurationError(f"tasks[{index}].number must be a string or integer")
    return TaskSpec(
        title=_optional_str(data.get("title"), f"tasks[{index}].title"),
        number=number,
        code=_optional_str(data.get("code"), f"tasks[{index}].code"),
        language=_optional_str(data.get("language"), f"tasks[{index}].language"),
        image=_optional_str(data.get("image"), f"tasks[{index}].image"),
        bottom_title=_optional_str(data.get("bottomTitle"), f"tasks[{index}].bottomTitle"),
    )


def parse_config(raw: Any, base_dir: Path | None = None) -> RunConfig:
    """Validate a decoded config.json document.

    Missing font settings take their defaults; malformed values raise
    ``ConfigurationError``. Task title/number are checked per task at render
    time so that one bad task does not block the others.
    """
    data = _object(raw, "config")
    base_dir = (base_dir or Path(".")).resolve()

    tasks_raw = data.get("tasks", [])
    if not isinstance(tasks_raw, list):
        raise ConfigurationError("tasks must be a list")

    output_dir = Path(_optional_str(data.get("outputDir"), "outputDir") or DEFAULT_OUTPUT_DIR).expanduser()
    if not output_dir.is_absolute():
        output_dir = base_dir / output_dir

    return RunConfig(
        font_settings=parse_font_settings(data.get("fontSettings")),
        tasks=[parse_task(task, i) for i, task in enumerate(tasks_raw)],
        output_dir=output_dir,
        background_image=_optional_str(data.get("backgroundImage"), "backgroundImage"),
        code_block_position=_enum(VerticalPosition, data.get("codeBlockPosition", "start"), "codeBlockPosition"),
        code_block_horizontal_position=_enum(
            HorizontalAlignment, data.get("codeBlockHorizontalPosition", "start"), "codeBlockHorizontalPosition"
        ),
        group_element=parse_group_element(data.get("groupElement")),
        base_dir=base_dir,
    )


def load_config(path: Path | None = None) -> RunConfig:
    path = Path(path or CONFIG_FILE_NAME)
    if not path.exists():
        raise ConfigurationError(f"config file not found: {path}")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"config file could not be read: {path} ({exc})") from exc
    return parse_config(raw, base_dir=path.resolve().parent)
