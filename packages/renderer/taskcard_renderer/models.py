"""Typed renderer models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class HorizontalAlignment(str, Enum):
    START = "start"
    CENTER = "center"
    RIGHT = "right"


class VerticalPosition(str, Enum):
    START = "start"
    CENTER = "center"
    END = "end"


class OverlayKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"


@dataclass(frozen=True)
class HighlightColors:
    comment: str | None = None
    string: str | None = None
    number: str | None = None
    keyword: str | None = None
    function: str | None = None
    parameter: str | None = None
    variable: str | None = None
    operator: str | None = None
    punctuation: str | None = None


@dataclass(frozen=True)
class FontSettings:
    font_family: str = "DejaVuSans"
    title_size: int = 24
    title_color: str = "#000000"
    title_alignment: HorizontalAlignment = HorizontalAlignment.START
    title_top_margin: int = 40
    footer_size: int = 18
    footer_color: str = "#000000"
    footer_alignment: HorizontalAlignment = HorizontalAlignment.START
    footer_bottom_margin: int = 20
    code_font_family: str = "DejaVuSansMono"
    code_size: int = 14
    code_text_color: str = "#d4d4d4"
    code_background_color: str = "#1e1e1e"
    code_padding: int = 10
    code_border_radius: int = 8
    code_border_color: str = "#3c3c3c"
    highlight_colors: HighlightColors = field(default_factory=HighlightColors)


@dataclass(frozen=True)
class Leaf:
    text: str


@dataclass(frozen=True)
class Node:
    category: str
    content: Leaf | Node


@dataclass(frozen=True)
class NodeList:
    category: str
    contents: tuple[Leaf | Node, ...]


Token = Leaf | Node | NodeList


@dataclass(frozen=True)
class TextMetrics:
    width: float
    ascent: float
    descent: float


@dataclass(frozen=True)
class CodeLayout:
    rows: list[str]
    line_heights: list[float]
    line_height: int
    max_lines: int
    counted_lines: int
    width: float
    height: int


@dataclass(frozen=True)
class PanelGeometry:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class PanelPlacement:
    kind: str
    geometry: PanelGeometry
    painted_height: float


@dataclass(frozen=True)
class TextBlockGeometry:
    final_y: float
    lines: list[str]
    line_height: int

    @property
    def height(self) -> int:
        return len(self.lines) * self.line_height


@dataclass(frozen=True)
class OverlayElement:
    kind: OverlayKind
    content: str | None = None
    font_size: int = 14
    font_color: str = "#000000"
    font_family: str = "DejaVuSans"
    image_path: str | None = None
    margin_right: int = 10
    margin_bottom: int = 10


@dataclass(frozen=True)
class TaskSpec:
    title: str | None
    number: str | int | None
    code: str | None = None
    language: str | None = None
    image: str | None = None
    bottom_title: str | None = None
