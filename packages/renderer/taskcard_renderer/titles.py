"""Wrapped title text anchored to the top and footer text anchored to the bottom."""

from __future__ import annotations

import logging

from .models import FontSettings, HorizontalAlignment, TextBlockGeometry
from .surface import Surface
from .text import wrap_text

logger = logging.getLogger("taskcard.renderer.titles")

LINE_GAP = 5


def aligned_x(alignment: HorizontalAlignment, line_width: float, padding: float, image_width: float) -> float:
    available = image_width - 2 * padding
    if alignment == HorizontalAlignment.CENTER:
        return padding + (available - line_width) / 2
    if alignment == HorizontalAlignment.RIGHT:
        return image_width - padding - line_width
    return padding


def draw_text_block(
    surface: Surface,
    lines: list[str],
    start_y: float,
    line_height: int,
    alignment: HorizontalAlignment,
    padding: float,
    image_width: float,
) -> float:
    """Paint ``lines`` with the current font and fill; return the next baseline."""
    y = start_y
    for line in lines:
        x = aligned_x(alignment, surface.measure_text(line).width, padding, image_width)
        surface.fill_text(line, x, y)
        y += line_height
    return y


def _wrap(surface: Surface, text: str, padding: float, image_width: float) -> list[str]:
    # Surface text measurement is single-line only.
    flat = " ".join(text.splitlines())
    return wrap_text(flat, lambda s: surface.measure_text(s).width, image_width - 2 * padding)


def paint_title_lines(
    surface: Surface,
    lines: list[str],
    settings: FontSettings,
    start_y: float,
    padding: float,
    image_width: float,
) -> float:
    with surface.saved():
        surface.set_font(settings.font_family, settings.title_size)
        surface.set_fill(settings.title_color)
        return draw_text_block(
            surface, lines, start_y, settings.title_size + LINE_GAP, settings.title_alignment, padding, image_width
        )


def render_title(
    surface: Surface,
    text: str | None,
    settings: FontSettings,
    padding: float,
    image_width: float,
    top_margin: float,
) -> TextBlockGeometry:
    empty = TextBlockGeometry(final_y=top_margin, lines=[], line_height=0)
    if not text:
        return empty
    try:
        with surface.saved():
            surface.set_font(settings.font_family, settings.title_size)
            lines = _wrap(surface, text, padding, image_width)
        final_y = paint_title_lines(surface, lines, settings, top_margin, padding, image_width)
        return TextBlockGeometry(final_y=final_y, lines=lines, line_height=settings.title_size + LINE_GAP)
    except Exception:
        logger.exception("title render failed", extra={"event": "title_failed", "text": text})
        return empty


def render_footer(
    surface: Surface,
    text: str | None,
    settings: FontSettings,
    padding: float,
    image_width: float,
    bottom_margin: float,
    image_height: float,
) -> TextBlockGeometry:
    """Paint the footer so that its block ends at ``image_height - bottom_margin``."""
    empty = TextBlockGeometry(final_y=image_height, lines=[], line_height=0)
    if not text:
        return empty
    try:
        line_height = settings.footer_size + LINE_GAP
        with surface.saved():
            surface.set_font(settings.font_family, settings.footer_size)
            surface.set_fill(settings.footer_color)
            lines = _wrap(surface, text, padding, image_width)
            start_y = image_height - bottom_margin - len(lines) * line_height
            final_y = draw_text_block(
                surface, lines, start_y, line_height, settings.footer_alignment, padding, image_width
            )
        return TextBlockGeometry(final_y=final_y, lines=lines, line_height=line_height)
    except Exception:
        logger.exception("footer render failed", extra={"event": "footer_failed", "text": text})
        return empty
