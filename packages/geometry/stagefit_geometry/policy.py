"""Dimension policies deciding the size an imported bitmap is resampled to.

Stage-fit uses three bands: images that fit the stage are doubled, images
that fit twice the stage are kept as they are, and anything larger is
aspect-fit to twice the stage. Backdrop-fit has no bands and always
aspect-fits to twice the frame, so one source can be re-fit to any number of
frame sizes.
"""

from __future__ import annotations

from typing import Union

from .models import FrameSize, ResizePlan
from .stage import DEFAULT_STAGE_SIZE, StageContext


StageLike = Union[StageContext, FrameSize, None]


def _stage_size(stage: StageLike) -> FrameSize:
    if stage is None:
        return DEFAULT_STAGE_SIZE
    if isinstance(stage, StageContext):
        return stage.native_size
    return stage


def _check_source(width: float, height: float) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"Source size must be positive: {width}x{height}")


def legacy_double(width: float, height: float) -> ResizePlan:
    """Resolution 1 bitmaps are half the current scale, so both sides double."""
    _check_source(width, height)
    return ResizePlan(width * 2, height * 2)


def get_resized_width_height(old_width: float, old_height: float, stage: StageLike = None) -> ResizePlan:
    _check_source(old_width, old_height)
    size = _stage_size(stage)
    stage_width, stage_height = size.width, size.height
    stage_ratio = stage_width / stage_height

    if old_width <= stage_width and old_height <= stage_height:
        return ResizePlan(old_width * 2, old_height * 2)

    # In-between image, already at the right scale.
    if old_width <= stage_width * 2 and old_height <= stage_height * 2:
        return ResizePlan(old_width, old_height)

    image_ratio = old_width / old_height
    if image_ratio >= stage_ratio:
        return ResizePlan(stage_width * 2, stage_width * 2 / image_ratio)
    # Tall, square, or not wide enough for width-fit to keep the height in range.
    return ResizePlan(stage_height * 2 * image_ratio, stage_height * 2)


def get_backdrop_resized_width_height(
    old_width: float,
    old_height: float,
    frame_width: float | None = None,
    frame_height: float | None = None,
    stage: StageLike = None,
) -> ResizePlan:
    _check_source(old_width, old_height)
    size = _stage_size(stage)
    width = frame_width or size.width
    height = frame_height or size.height
    frame_ratio = width / height

    image_ratio = old_width / old_height
    if image_ratio >= frame_ratio:
        return ResizePlan(height * 2 * image_ratio, height * 2)
    return ResizePlan(width * 2, width * 2 / image_ratio)
