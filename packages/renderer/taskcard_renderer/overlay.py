"""Small decorative text or image anchored to the bottom-right margin."""

from __future__ import annotations

import logging

from .errors import ResourceError
from .models import OverlayElement, OverlayKind
from .resources import ImageLoader
from .surface import Surface

logger = logging.getLogger("taskcard.renderer.overlay")


async def render_overlay(
    surface: Surface,
    loader: ImageLoader,
    element: OverlayElement | None,
    image_width: float,
    image_height: float,
) -> None:
    if element is None:
        return
    try:
        if element.kind == OverlayKind.TEXT:
            _paint_text(surface, element, image_width, image_height)
        elif element.kind == OverlayKind.IMAGE:
            await _paint_image(surface, loader, element, image_width, image_height)
    except Exception:
        logger.exception("overlay render failed", extra={"event": "overlay_failed", "kind": element.kind.value})


def _paint_text(surface: Surface, element: OverlayElement, image_width: float, image_height: float) -> None:
    if not element.content:
        logger.info("overlay text is empty, skipping", extra={"event": "overlay_skipped"})
        return
    with surface.saved():
        surface.set_font(element.font_family, element.font_size)
        surface.set_fill(element.font_color)
        width = surface.measure_text(element.content).width
        surface.fill_text(
            element.content,
            image_width - element.margin_right - width,
            image_height - element.margin_bottom,
        )


async def _paint_image(
    surface: Surface,
    loader: ImageLoader,
    element: OverlayElement,
    image_width: float,
    image_height: float,
) -> None:
    if not element.image_path:
        logger.info("overlay image path is empty, skipping", extra={"event": "overlay_skipped"})
        return
    try:
        image = await loader.load(element.image_path)
    except ResourceError as exc:
        logger.error(
            "overlay image unavailable: %s",
            exc,
            extra={"event": "overlay_image_unavailable", "path": str(exc.path)},
        )
        return
    x = image_width - element.margin_right - image.width
    y = image_height - element.margin_bottom - image.height
    surface.draw_image(image, x, y, image.width, image.height)
