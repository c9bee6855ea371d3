"""Layout and rendering engine for programming-task images."""

from .code_panel import measure_code_panel, render_code_panel
from .composer import RenderOptions, RenderResult, TaskImageComposer
from .errors import (
    ConfigurationError,
    ImageDecodeError,
    ResourceError,
    ResourceNotFoundError,
    SurfaceError,
    TaskCardError,
    UnsupportedLanguageError,
)
from .image_panel import fit_within, render_image_panel
from .models import (
    FontSettings,
    HighlightColors,
    HorizontalAlignment,
    Leaf,
    Node,
    NodeList,
    OverlayElement,
    OverlayKind,
    TaskSpec,
    TextBlockGeometry,
    VerticalPosition,
)
from .overlay import render_overlay
from .placement import place_panel
from .resources import ImageLoader
from .surface import Surface
from .text import flatten_token, wrap_text
from .titles import render_footer, render_title
from .tokenizer import LanguageRegistry, default_registry, tokenize_line

__all__ = [
    "ConfigurationError",
    "FontSettings",
    "HighlightColors",
    "HorizontalAlignment",
    "ImageDecodeError",
    "ImageLoader",
    "LanguageRegistry",
    "Leaf",
    "Node",
    "NodeList",
    "OverlayElement",
    "OverlayKind",
    "RenderOptions",
    "RenderResult",
    "ResourceError",
    "ResourceNotFoundError",
    "Surface",
    "SurfaceError",
    "TaskCardError",
    "TaskImageComposer",
    "TaskSpec",
    "TextBlockGeometry",
    "UnsupportedLanguageError",
    "VerticalPosition",
    "default_registry",
    "fit_within",
    "flatten_token",
    "measure_code_panel",
    "place_panel",
    "render_code_panel",
    "render_footer",
    "render_image_panel",
    "render_overlay",
    "render_title",
    "tokenize_line",
    "wrap_text",
]
