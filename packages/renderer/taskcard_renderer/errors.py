"""Error taxonomy shared by the renderer, config loader and batch driver."""

from __future__ import annotations


class TaskCardError(Exception):
    """Base class for every error raised by TaskCard."""


class ConfigurationError(TaskCardError):
    """Required render inputs are missing or malformed."""


class ResourceError(TaskCardError):
    def __init__(self, path: object, message: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class ResourceNotFoundError(ResourceError):
    def __init__(self, path: object) -> None:
        super().__init__(path, "resource not found")


class ImageDecodeError(ResourceError):
    def __init__(self, path: object) -> None:
        super().__init__(path, "image could not be decoded")


class UnsupportedLanguageError(TaskCardError):
    def __init__(self, language: str | None) -> None:
        super().__init__(f"unsupported language: {language!r}")
        self.language = language


class SurfaceError(TaskCardError):
    """A measurement or paint call on the drawing surface failed."""
