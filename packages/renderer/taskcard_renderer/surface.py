"""Pillow-backed immediate-mode drawing surface with scoped paint state."""

from __future__ import annotations

import functools
from contextlib import contextmanager
from dataclasses import dataclass, replace
from io import BytesIO
from typing import Iterator

from PIL import Image, ImageChops, ImageDraw, ImageFont

from .errors import SurfaceError
from .models import TextMetrics

FontLike = ImageFont.FreeTypeFont | ImageFont.ImageFont

_FALLBACK_SANS = ("DejaVuSans.ttf", "Arial.ttf", "LiberationSans-Regular.ttf")
_FALLBACK_MONO = ("DejaVuSansMono.ttf", "Courier New.ttf", "LiberationMono-Regular.ttf")
_MONO_HINTS = ("mono", "courier", "consol", "code")


def _is_mono(family: str) -> bool:
    lowered = family.lower()
    return any(hint in lowered for hint in _MONO_HINTS)


def load_font(family: str, size: int) -> FontLike:
    size = max(1, int(size))
    candidates = [family]
    if not family.lower().endswith((".ttf", ".otf", ".ttc")):
        candidates.append(f"{family}.ttf")
    candidates.extend(_FALLBACK_MONO if _is_mono(family) else _FALLBACK_SANS)
    for name in candidates:
        try:
            return ImageFont.truetype(name, size)
        except (OSError, ValueError):
            continue
    return ImageFont.load_default(size)


def _quad(p0: tuple[float, float], ctrl: tuple[float, float], p1: tuple[float, float], segments: int) -> list[tuple[float, float]]:
    points = []
    for i in range(1, segments + 1):
        t = i / segments
        u = 1 - t
        points.append(
            (
                u * u * p0[0] + 2 * u * t * ctrl[0] + t * t * p1[0],
                u * u * p0[1] + 2 * u * t * ctrl[1] + t * t * p1[1],
            )
        )
    return points


def rounded_rect_path(x: float, y: float, width: float, height: float, radius: float, segments: int = 8) -> list[tuple[float, float]]:
    """Closed outline built from straight edges and quadratic corner curves.

    The radius is clamped to half of the shorter side.
    """
    width = max(0.0, float(width))
    height = max(0.0, float(height))
    r = max(0.0, min(float(radius), width / 2, height / 2))
    right = x + width
    bottom = y + height

    path = [(x + r, y), (right - r, y)]
    path += _quad((right - r, y), (right, y), (right, y + r), segments)
    path.append((right, bottom - r))
    path += _quad((right, bottom - r), (right, bottom), (right - r, bottom), segments)
    path.append((x + r, bottom))
    path += _quad((x + r, bottom), (x, bottom), (x, bottom - r), segments)
    path.append((x, y + r))
    path += _quad((x, y + r), (x, y), (x + r, y), segments)
    return path


def _surface_op(func):
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except SurfaceError:
            raise
        except (OSError, TypeError, ValueError) as exc:
            raise SurfaceError(f"{func.__name__} failed: {exc}") from exc

    return wrapper


@dataclass
class _PaintState:
    font: FontLike | None = None
    fill: str = "#000000"
    stroke: str = "#000000"
    clip: Image.Image | None = None


class Surface:
    """RGBA canvas with canvas-style paint state.

    ``saved()`` and ``clipped()`` restore the previous paint state on every
    exit path, including exceptions.
    """

    def __init__(
        self,
        width: int,
        height: int,
        background: str | None = "white",
        fonts: dict[tuple[str, int], FontLike] | None = None,
    ) -> None:
        self.width = int(width)
        self.height = int(height)
        color = background if background is not None else (0, 0, 0, 0)
        self._image = Image.new("RGBA", (self.width, self.height), color)
        self._state = _PaintState()
        self._stack: list[_PaintState] = []
        # Per-render font cache, shared only with this surface's scratch surfaces.
        self._fonts = fonts if fonts is not None else {}

    @classmethod
    def from_image(cls, image: Image.Image, width: int, height: int) -> Surface:
        surface = cls(width, height)
        stretched = image.convert("RGBA").resize((surface.width, surface.height), Image.Resampling.LANCZOS)
        surface._image.alpha_composite(stretched)
        return surface

    @property
    def image(self) -> Image.Image:
        return self._image

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def scratch(self) -> Surface:
        """Disposable off-screen surface of the same size, for measuring only."""
        return Surface(self.width, self.height, background=None, fonts=self._fonts)

    @contextmanager
    def saved(self) -> Iterator[Surface]:
        self._stack.append(replace(self._state))
        try:
            yield self
        finally:
            self._state = self._stack.pop()

    @contextmanager
    def clipped(self, path: list[tuple[float, float]]) -> Iterator[Surface]:
        with self.saved():
            mask = Image.new("L", self.size, 0)
            ImageDraw.Draw(mask).polygon(path, fill=255)
            if self._state.clip is not None:
                mask = ImageChops.multiply(mask, self._state.clip)
            self._state.clip = mask
            yield self

    def set_font(self, family: str, size: int) -> None:
        self._state.font = self._font(family, size)

    def set_fill(self, color: str) -> None:
        self._state.fill = color

    def set_stroke(self, color: str) -> None:
        self._state.stroke = color

    @property
    def font(self) -> FontLike:
        if self._state.font is None:
            self._state.font = self._font(_FALLBACK_SANS[0], 12)
        return self._state.font

    def _font(self, family: str, size: int) -> FontLike:
        key = (family, max(1, int(size)))
        if key not in self._fonts:
            self._fonts[key] = load_font(*key)
        return self._fonts[key]

    @_surface_op
    def measure_text(self, text: str) -> TextMetrics:
        font = self.font
        width = float(font.getlength(text))
        if isinstance(font, ImageFont.FreeTypeFont):
            _, top, _, bottom = font.getbbox(text, anchor="ls")
            return TextMetrics(width=width, ascent=float(-top), descent=float(bottom))
        _, top, _, bottom = font.getbbox(text)
        return TextMetrics(width=width, ascent=float(bottom - top), descent=0.0)

    @_surface_op
    def fill_text(self, text: str, x: float, y: float) -> None:
        """Paint ``text`` with its alphabetic baseline at ``y``."""
        font = self.font
        with self._target() as target:
            draw = ImageDraw.Draw(target)
            if isinstance(font, ImageFont.FreeTypeFont):
                draw.text((x, y), text, font=font, fill=self._state.fill, anchor="ls")
            else:
                _, top, _, bottom = font.getbbox(text)
                draw.text((x, y - (bottom - top)), text, font=font, fill=self._state.fill)

    @_surface_op
    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        with self._target() as target:
            ImageDraw.Draw(target).rectangle((x, y, x + width, y + height), fill=self._state.fill)

    @_surface_op
    def fill_path(self, path: list[tuple[float, float]]) -> None:
        with self._target() as target:
            ImageDraw.Draw(target).polygon(path, fill=self._state.fill)

    @_surface_op
    def stroke_path(self, path: list[tuple[float, float]], width: int = 1) -> None:
        with self._target() as target:
            ImageDraw.Draw(target).line(path + path[:1], fill=self._state.stroke, width=width)

    @_surface_op
    def draw_image(self, image: Image.Image, x: float, y: float, width: float, height: float) -> None:
        size = (max(1, round(width)), max(1, round(height)))
        scaled = image.convert("RGBA")
        if scaled.size != size:
            scaled = scaled.resize(size, Image.Resampling.LANCZOS)
        layer = Image.new("RGBA", self.size, (0, 0, 0, 0))
        layer.paste(scaled, (round(x), round(y)))
        self._composite(layer)

    @_surface_op
    def to_png(self) -> bytes:
        buf = BytesIO()
        self._image.save(buf, format="PNG")
        return buf.getvalue()

    @contextmanager
    def _target(self) -> Iterator[Image.Image]:
        if self._state.clip is None:
            yield self._image
            return
        layer = Image.new("RGBA", self.size, (0, 0, 0, 0))
        yield layer
        self._composite(layer)

    def _composite(self, layer: Image.Image) -> None:
        if self._state.clip is not None:
            layer.putalpha(ImageChops.multiply(layer.getchannel("A"), self._state.clip))
        self._image.alpha_composite(layer)
