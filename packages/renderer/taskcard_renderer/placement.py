"""Panel placement: vertical and horizontal policies for the code or image panel.

Geometry is always obtained from a measuring pass on a scratch surface of
the same size as the target before the real paint is committed.
"""

from __future__ import annotations

import logging

from .code_panel import measure_code_panel, render_code_panel
from .errors import UnsupportedLanguageError
from .image_panel import render_image_panel
from .models import (
    FontSettings,
    HorizontalAlignment,
    PanelGeometry,
    PanelPlacement,
    TaskSpec,
    TextBlockGeometry,
    VerticalPosition,
)
from .resources import ImageLoader
from .surface import Surface
from .titles import aligned_x, paint_title_lines
from .tokenizer import LanguageRegistry, default_registry

logger = logging.getLogger("taskcard.renderer.placement")

MIN_GAP = 20


def resolve_x(horizontal: HorizontalAlignment, panel_width: float, padding: float, image_width: float) -> float:
    return aligned_x(horizontal, panel_width, padding, image_width)


def resolve_y(
    vertical: VerticalPosition,
    panel_height: float,
    *,
    padding: float,
    image_height: float,
    title: TextBlockGeometry,
    footer: TextBlockGeometry,
) -> float:
    if vertical == VerticalPosition.START:
        return padding
    if vertical == VerticalPosition.CENTER:
        free = image_height - 2 * padding - panel_height - title.height - footer.height
        y = padding + free / 2 + title.height
    else:
        y = image_height - padding - MIN_GAP - footer.height - panel_height
    return max(y, title.final_y + MIN_GAP)


async def place_panel(
    surface: Surface,
    loader: ImageLoader,
    task: TaskSpec,
    settings: FontSettings,
    *,
    vertical: VerticalPosition,
    horizontal: HorizontalAlignment,
    padding: float,
    image_width: float,
    image_height: float,
    max_panel_height: float,
    title: TextBlockGeometry,
    footer: TextBlockGeometry,
    registry: LanguageRegistry | None = None,
) -> PanelPlacement | None:
    """Place and paint the task's panel; code wins over image.

    Returns ``None`` when the task has neither, or when the panel could not
    be measured (unsupported language, unreadable image).
    """
    layout = dict(
        vertical=vertical,
        horizontal=horizontal,
        padding=padding,
        image_width=image_width,
        image_height=image_height,
        max_panel_height=max_panel_height,
        title=title,
        footer=footer,
    )
    try:
        if task.code:
            return _place_code(surface, task, settings, registry or default_registry, **layout)
        if task.image:
            return await _place_image(surface, loader, task, settings, **layout)
        return None
    except Exception:
        logger.exception(
            "panel placement failed",
            extra={"event": "placement_failed", "task_number": task.number, "vertical": vertical.value},
        )
        return None


def _place_code(
    surface: Surface,
    task: TaskSpec,
    settings: FontSettings,
    registry: LanguageRegistry,
    *,
    vertical: VerticalPosition,
    horizontal: HorizontalAlignment,
    padding: float,
    image_width: float,
    image_height: float,
    max_panel_height: float,
    title: TextBlockGeometry,
    footer: TextBlockGeometry,
) -> PanelPlacement | None:
    try:
        lexer = registry.resolve(task.language)
    except UnsupportedLanguageError:
        logger.error(
            "unsupported language",
            extra={"event": "unsupported_language", "language": task.language, "task_number": task.number},
        )
        return None

    natural = measure_code_panel(
        surface.scratch(), task.code, padding, image_width - 2 * padding, settings, lexer, max_panel_height
    )
    y = resolve_y(vertical, natural.height, padding=padding, image_height=image_height, title=title, footer=footer)
    x = resolve_x(horizontal, natural.width, padding, image_width)

    height = render_code_panel(
        surface, task.code, x, y, natural.width, settings, task.language, max_panel_height, registry=registry
    )
    if vertical == VerticalPosition.START and title.lines:
        paint_title_lines(surface, title.lines, settings, y + height + MIN_GAP, padding, image_width)
    return PanelPlacement(kind="code", geometry=PanelGeometry(x, y, natural.width, height), painted_height=height)


async def _place_image(
    surface: Surface,
    loader: ImageLoader,
    task: TaskSpec,
    settings: FontSettings,
    *,
    vertical: VerticalPosition,
    horizontal: HorizontalAlignment,
    padding: float,
    image_width: float,
    image_height: float,
    max_panel_height: float,
    title: TextBlockGeometry,
    footer: TextBlockGeometry,
) -> PanelPlacement | None:
    box_width = image_width - 2 * padding
    box_height = max_panel_height + 2 * settings.code_padding
    panel_args = (box_width, box_height, settings.code_padding, settings.code_border_radius)

    natural_height = await render_image_panel(surface.scratch(), loader, task.image, padding, 0, *panel_args)
    if not natural_height:
        return None

    y = resolve_y(vertical, natural_height, padding=padding, image_height=image_height, title=title, footer=footer)
    x = resolve_x(horizontal, box_width, padding, image_width)

    height = await render_image_panel(surface, loader, task.image, x, y, *panel_args)
    if vertical == VerticalPosition.START and title.lines:
        paint_title_lines(surface, title.lines, settings, y + height + MIN_GAP, padding, image_width)
    return PanelPlacement(kind="image", geometry=PanelGeometry(x, y, box_width, height), painted_height=height)
