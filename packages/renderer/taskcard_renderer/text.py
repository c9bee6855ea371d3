"""Greedy word wrapping and token flattening."""

from __future__ import annotations

import logging
from typing import Callable

from .models import Leaf, Node, NodeList

logger = logging.getLogger("taskcard.renderer.text")


def wrap_text(text: str, measure: Callable[[str], float], max_width: float) -> list[str]:
    """Greedily wrap ``text`` into lines no wider than ``max_width``.

    Words are separated by single spaces only, so runs of spaces survive as
    empty words and ``" ".join(lines)`` gives back the input. A word wider
    than ``max_width`` is placed alone on its own line and never split. The
    trailing line is always emitted, so empty input yields ``[""]``.

    If ``measure`` raises, the failure is logged and an empty list is
    returned. Callers render nothing for that block and carry on with the
    rest of the image instead of aborting the task.
    """
    try:
        lines: list[str] = []
        current: str | None = None
        for word in text.split(" "):
            if current is None:
                current = word
                continue
            candidate = f"{current} {word}"
            if current and measure(candidate) > max_width:
                lines.append(current)
                current = word
            else:
                current = candidate
        lines.append(current or "")
        return lines
    except Exception:
        logger.exception("text wrap failed", extra={"event": "wrap_failed", "text": text})
        return []


def flatten_token(token: object) -> str:
    if isinstance(token, Leaf):
        return token.text
    if isinstance(token, Node):
        return flatten_token(token.content)
    if isinstance(token, NodeList):
        return "".join(flatten_token(part) for part in token.contents)
    return ""


def token_category(token: object) -> str | None:
    if isinstance(token, (Node, NodeList)):
        return token.category
    return None
