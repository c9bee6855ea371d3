"""Asynchronous image loading for backgrounds, panels and overlays."""

from __future__ import annotations

import asyncio
from pathlib import Path

from PIL import Image

from .errors import ImageDecodeError, ResourceNotFoundError


def _decode(path: Path) -> Image.Image:
    try:
        with Image.open(path) as img:
            img.load()
            return img.convert("RGBA")
    except (OSError, Image.DecompressionBombError) as exc:
        raise ImageDecodeError(path) from exc


class ImageLoader:
    """Resolves image paths against ``base_dir`` and decodes them off the event loop."""

    def __init__(self, base_dir: Path | str | None = None) -> None:
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()

    def resolve(self, path: Path | str) -> Path:
        candidate = Path(path).expanduser()
        if not candidate.is_absolute():
            candidate = self.base_dir / candidate
        return candidate.resolve()

    async def exists(self, path: Path | str) -> bool:
        return await asyncio.to_thread(self.resolve(path).is_file)

    async def load(self, path: Path | str) -> Image.Image:
        resolved = self.resolve(path)
        if not await asyncio.to_thread(resolved.is_file):
            raise ResourceNotFoundError(resolved)
        return await asyncio.to_thread(_decode, resolved)
