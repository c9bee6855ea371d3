"""Task image composer for 600x400 PNG output."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .errors import ConfigurationError, ResourceError
from .models import (
    FontSettings,
    HorizontalAlignment,
    OverlayElement,
    PanelPlacement,
    TaskSpec,
    TextBlockGeometry,
    VerticalPosition,
)
from .overlay import render_overlay
from .placement import place_panel
from .resources import ImageLoader
from .surface import Surface
from .titles import render_footer, render_title
from .tokenizer import LanguageRegistry, default_registry

logger = logging.getLogger("taskcard.renderer.composer")

CANVAS_WIDTH = 600
CANVAS_HEIGHT = 400
PADDING = 10
MAX_PANEL_HEIGHT = 300


@dataclass(frozen=True)
class RenderOptions:
    background_image: str | None = None
    vertical: VerticalPosition = VerticalPosition.START
    horizontal: HorizontalAlignment = HorizontalAlignment.START
    overlay: OverlayElement | None = None


@dataclass(frozen=True)
class RenderResult:
    surface: Surface
    title: TextBlockGeometry
    footer: TextBlockGeometry
    panel: PanelPlacement | None


def validate_task(task: TaskSpec, settings: object) -> None:
    if not task.title or task.number is None or str(task.number) == "":
        raise ConfigurationError("task title and task number are required")
    if not isinstance(settings, FontSettings):
        raise ConfigurationError("font settings must be a FontSettings instance")


class TaskImageComposer:
    """Composes background, title, footer, panel and overlay into one image."""

    def __init__(
        self,
        loader: ImageLoader | None = None,
        width: int = CANVAS_WIDTH,
        height: int = CANVAS_HEIGHT,
        padding: int = PADDING,
        max_panel_height: int = MAX_PANEL_HEIGHT,
        registry: LanguageRegistry | None = None,
    ) -> None:
        self.loader = loader or ImageLoader()
        self.width = width
        self.height = height
        self.padding = padding
        self.max_panel_height = max_panel_height
        self.registry = registry or default_registry

    async def render(self, task: TaskSpec, settings: FontSettings, options: RenderOptions | None = None) -> bytes | None:
        """Render one task to PNG bytes, or ``None`` when the task is invalid."""
        try:
            result = await self.compose(task, settings, options)
            return result.surface.to_png()
        except ConfigurationError as exc:
            logger.error("task skipped: %s", exc, extra={"event": "task_invalid", "task_number": task.number})
            return None
        except Exception:
            logger.exception("task render failed", extra={"event": "task_failed", "task_number": task.number})
            return None

    async def compose(self, task: TaskSpec, settings: FontSettings, options: RenderOptions | None = None) -> RenderResult:
        validate_task(task, settings)
        options = options or RenderOptions()
        surface = await self._prepare_background(options.background_image)

        with surface.saved():
            title = render_title(surface, task.title, settings, self.padding, self.width, settings.title_top_margin)
            footer = render_footer(
                surface,
                task.bottom_title,
                settings,
                self.padding,
                self.width,
                settings.footer_bottom_margin,
                self.height,
            )
            panel = await place_panel(
                surface,
                self.loader,
                task,
                settings,
                vertical=options.vertical,
                horizontal=options.horizontal,
                padding=self.padding,
                image_width=self.width,
                image_height=self.height,
                max_panel_height=self.max_panel_height,
                title=title,
                footer=footer,
                registry=self.registry,
            )
            await render_overlay(surface, self.loader, options.overlay, self.width, self.height)

        logger.info(
            "task rendered",
            extra={
                "event": "task_rendered",
                "task_number": task.number,
                "panel": panel.kind if panel else None,
            },
        )
        return RenderResult(surface=surface, title=title, footer=footer, panel=panel)

    async def _prepare_background(self, path: str | None) -> Surface:
        if path:
            try:
                image = await self.loader.load(path)
                logger.info("background loaded", extra={"event": "background_loaded", "path": str(path)})
                return Surface.from_image(image, self.width, self.height)
            except ResourceError as exc:
                logger.error(
                    "background unavailable, using white: %s",
                    exc,
                    extra={"event": "background_unavailable", "path": str(exc.path)},
                )
            except Exception:
                logger.exception("background load failed", extra={"event": "background_failed", "path": str(path)})
        return Surface(self.width, self.height, background="white")
