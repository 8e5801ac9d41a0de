"""Geometry package: frame sizes, stage context, and bitmap sizing policies."""

from .models import FrameSize, ResizePlan
from .policy import get_backdrop_resized_width_height, get_resized_width_height, legacy_double
from .stage import DEFAULT_STAGE_SIZE, StageContext, is_valid_stage_size

__all__ = [
    "DEFAULT_STAGE_SIZE",
    "FrameSize",
    "ResizePlan",
    "StageContext",
    "get_backdrop_resized_width_height",
    "get_resized_width_height",
    "is_valid_stage_size",
    "legacy_double",
]
