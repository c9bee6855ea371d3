"""Illustration panel: fit an external image into a box and clip it to rounded corners."""

from __future__ import annotations

import logging

from .errors import ResourceError
from .resources import ImageLoader
from .surface import Surface, rounded_rect_path

logger = logging.getLogger("taskcard.renderer.image_panel")


def fit_within(width: float, height: float, max_width: float, max_height: float) -> tuple[float, float]:
    """Shrink ``(width, height)`` to the box, width first and then height.

    Aspect ratio is preserved and images are never enlarged. The sequential
    order can leave one axis under-filled compared to a min-of-ratios fit;
    existing output depends on it.
    """
    if width <= 0 or height <= 0:
        return 0.0, 0.0
    aspect = width / height
    w, h = float(width), float(height)
    if w > max_width:
        w = float(max_width)
        h = w / aspect
    if h > max_height:
        h = float(max_height)
        w = h * aspect
    return w, h


async def render_image_panel(
    surface: Surface,
    loader: ImageLoader,
    image_path: str,
    x: float,
    y: float,
    max_width: float,
    max_height: float,
    padding: float,
    corner_radius: float,
) -> float:
    """Paint the image centered in its box and return the reserved height.

    The reservation is ``max_height + 2 * padding`` whatever the scaled size.
    A missing or unreadable image is logged and reserves nothing.
    """
    try:
        image = await loader.load(image_path)
    except ResourceError as exc:
        logger.error(
            "panel image unavailable: %s",
            exc,
            extra={"event": "panel_image_unavailable", "path": str(exc.path)},
        )
        return 0
    except Exception:
        logger.exception("panel image load failed", extra={"event": "panel_image_failed", "path": str(image_path)})
        return 0

    try:
        w, h = fit_within(image.width, image.height, max_width, max_height)
        img_x = x + padding + (max_width - w) / 2
        img_y = y + padding + (max_height - h) / 2
        if w > 0 and h > 0:
            with surface.clipped(rounded_rect_path(x, y, max_width, max_height, corner_radius)):
                surface.draw_image(image, img_x, img_y, w, h)
        return max_height + 2 * padding
    except Exception:
        logger.exception("panel image paint failed", extra={"event": "panel_image_failed", "path": str(image_path)})
        return 0
