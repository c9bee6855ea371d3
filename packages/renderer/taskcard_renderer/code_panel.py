"""Syntax-highlighted code panel: measure pass, background, per-character paint pass."""

from __future__ import annotations

import logging

from pygments.lexer import Lexer

from .errors import UnsupportedLanguageError
from .models import CodeLayout, FontSettings
from .surface import Surface, rounded_rect_path
from .text import flatten_token, token_category
from .tokenizer import LanguageRegistry, default_registry, tokenize_line

logger = logging.getLogger("taskcard.renderer.code_panel")

LINE_GAP = 5


def line_height_for(settings: FontSettings) -> int:
    return settings.code_size + LINE_GAP


def source_lines(code: str) -> list[str]:
    """Split ``code`` into lines, accepting CRLF and lone CR line endings."""
    return code.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def pick_color(category: str | None, settings: FontSettings) -> str:
    colors = settings.highlight_colors
    body = settings.code_text_color
    if category == "comment":
        return colors.comment or body
    if category in ("string", "number"):
        return colors.string or colors.number or body
    if category == "keyword":
        return colors.keyword or body
    if category == "function":
        return colors.function or body
    if category == "parameter":
        return colors.parameter or body
    if category == "variable":
        return colors.variable or body
    if category in ("operator", "punctuation"):
        return colors.operator or colors.punctuation or body
    return body


def measure_code_panel(
    surface: Surface,
    code: str,
    x: float,
    max_width: float,
    settings: FontSettings,
    lexer: Lexer,
    max_height: float,
) -> CodeLayout:
    """Tokenize every source line and measure the panel it needs.

    Rows wrap at token boundaries once the cursor passes ``x + max_width``.
    Only the first ``max_height // line_height`` source lines count toward
    the height; later lines are still measured for width.
    """
    padding = settings.code_padding
    line_height = line_height_for(settings)
    max_lines = int(max_height // line_height) if line_height > 0 else 0
    right_edge = x + max_width
    surface.set_font(settings.code_font_family, settings.code_size)

    rows: list[str] = []
    line_heights: list[float] = []
    counted = 0
    widest = 0.0

    for index, line in enumerate(source_lines(code)):
        cursor = x + padding
        first_row = len(rows)
        row = ""
        glyph_height = 0.0
        try:
            for token in tokenize_line(line, lexer):
                fragment = flatten_token(token)
                metrics = surface.measure_text(fragment)
                glyph_height = max(glyph_height, metrics.ascent + metrics.descent)
                cursor += metrics.width
                widest = max(widest, cursor - x + padding)
                row += fragment
                if cursor > right_edge:
                    rows.append(row)
                    row = ""
                    cursor = x + padding
        except Exception:
            logger.exception(
                "code line measure failed",
                extra={"event": "code_line_measure_failed", "line_index": index},
            )
            widest = max(widest, max_width)
            continue

        if row or len(rows) == first_row:
            rows.append(row)
        if counted < max_lines:
            line_heights.append(glyph_height)
            counted += 1

    return CodeLayout(
        rows=rows,
        line_heights=line_heights,
        line_height=line_height,
        max_lines=max_lines,
        counted_lines=counted,
        width=min(widest, max_width),
        height=counted * line_height + 2 * padding,
    )


def _paint_background(surface: Surface, x: float, y: float, layout: CodeLayout, settings: FontSettings) -> None:
    path = rounded_rect_path(x, y, layout.width, layout.height, settings.code_border_radius)
    surface.set_fill(settings.code_background_color)
    surface.fill_path(path)
    surface.set_stroke(settings.code_border_color)
    surface.stroke_path(path, width=1)


def _paint_code(
    surface: Surface,
    code: str,
    x: float,
    y: float,
    max_width: float,
    settings: FontSettings,
    lexer: Lexer,
    layout: CodeLayout,
) -> None:
    padding = settings.code_padding
    right_edge = x + max_width
    baseline = y + padding + layout.line_height
    painted = 0

    for index, line in enumerate(source_lines(code)):
        if painted >= layout.max_lines:
            break
        cursor = x + padding
        try:
            for token in tokenize_line(line, lexer):
                surface.set_fill(pick_color(token_category(token), settings))
                # Per character, so a long token can still wrap mid-token.
                for char in flatten_token(token):
                    surface.fill_text(char, cursor, baseline)
                    cursor += surface.measure_text(char).width
                    if cursor > right_edge:
                        cursor = x + padding
                        baseline += layout.line_height
        except Exception:
            logger.exception(
                "code line paint failed",
                extra={"event": "code_line_paint_failed", "line_index": index},
            )
            continue
        baseline += layout.line_height
        painted += 1


def render_code_panel(
    surface: Surface,
    code: str,
    x: float,
    y: float,
    max_width: float,
    settings: FontSettings,
    language: str | None,
    max_height: float,
    registry: LanguageRegistry | None = None,
) -> int:
    """Paint the code panel at ``(x, y)`` and return the height it reserves.

    The returned height comes from the measure pass, whatever the paint pass
    managed to draw. Returns 0 without painting for an unsupported language
    or when the panel cannot be rendered at all.
    """
    registry = registry or default_registry
    try:
        lexer = registry.resolve(language)
    except UnsupportedLanguageError:
        logger.error("unsupported language", extra={"event": "unsupported_language", "language": language})
        return 0

    try:
        with surface.saved():
            layout = measure_code_panel(surface, code, x, max_width, settings, lexer, max_height)
            _paint_background(surface, x, y, layout, settings)
            surface.set_font(settings.code_font_family, settings.code_size)
            _paint_code(surface, code, x, y, max_width, settings, lexer, layout)
        logger.debug(
            "code panel rendered",
            extra={
                "event": "code_panel_rendered",
                "language": language,
                "rows": len(layout.rows),
                "counted_lines": layout.counted_lines,
                "tallest_glyph": max(layout.line_heights, default=0.0),
            },
        )
        return layout.height
    except Exception:
        logger.exception(
            "code panel render failed",
            extra={"event": "code_panel_failed", "language": language, "x": x, "y": y, "max_width": max_width},
        )
        return 0
