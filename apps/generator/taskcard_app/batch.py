"""Concurrent batch rendering of every configured task to task_<number>.png."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from taskcard_core.config import RunConfig
from taskcard_renderer import ImageLoader, RenderOptions, TaskImageComposer, TaskSpec

logger = logging.getLogger("taskcard.batch")


@dataclass(frozen=True)
class BatchResult:
    number: str | int | None
    success: bool
    path: Path | None = None
    error: str | None = None


def output_name(number: str | int | None) -> str:
    return f"task_{number}.png"


def render_options(cfg: RunConfig) -> RenderOptions:
    return RenderOptions(
        background_image=cfg.background_image,
        vertical=cfg.code_block_position,
        horizontal=cfg.code_block_horizontal_position,
        overlay=cfg.group_element,
    )


async def render_task(cfg: RunConfig, composer: TaskImageComposer, task: TaskSpec) -> BatchResult:
    data = await composer.render(task, cfg.font_settings, render_options(cfg))
    if data is None:
        return BatchResult(number=task.number, success=False, error="render failed")

    path = cfg.output_dir / output_name(task.number)
    try:
        await asyncio.to_thread(cfg.output_dir.mkdir, parents=True, exist_ok=True)
        await asyncio.to_thread(path.write_bytes, data)
    except OSError as exc:
        logger.exception("image save failed", extra={"event": "image_save_failed", "path": str(path)})
        return BatchResult(number=task.number, success=False, error=str(exc))

    logger.info("image saved", extra={"event": "image_saved", "path": str(path), "task_number": task.number})
    return BatchResult(number=task.number, success=True, path=path)


async def render_batch(
    cfg: RunConfig,
    composer: TaskImageComposer | None = None,
    only: str | None = None,
) -> list[BatchResult]:
    """Render tasks concurrently; a failing task never stops its siblings."""
    composer = composer or TaskImageComposer(loader=ImageLoader(cfg.base_dir))
    tasks = [t for t in cfg.tasks if only is None or str(t.number) == str(only)]

    logger.info("batch started", extra={"event": "batch_started", "task_count": len(tasks)})
    outcomes = await asyncio.gather(*(render_task(cfg, composer, task) for task in tasks), return_exceptions=True)
    results = []
    for task, outcome in zip(tasks, outcomes):
        if isinstance(outcome, BaseException):
            logger.error(
                "task crashed",
                exc_info=(type(outcome), outcome, outcome.__traceback__),
                extra={"event": "task_crashed", "task_number": task.number},
            )
            outcome = BatchResult(number=task.number, success=False, error=str(outcome))
        results.append(outcome)
    logger.info(
        "batch finished",
        extra={"event": "batch_finished", "rendered": sum(1 for r in results if r.success), "task_count": len(tasks)},
    )
    return list(results)


def run_batch(cfg: RunConfig, only: str | None = None) -> list[BatchResult]:
    return asyncio.run(render_batch(cfg, only=only))
