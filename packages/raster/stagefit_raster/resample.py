"""Nearest-neighbour resampling for imported bitmaps."""

from __future__ import annotations

from PIL import Image

from stagefit_geometry.models import ResizePlan


def _pixels(value: float, axis: str) -> int:
    if value <= 0:
        raise ValueError(f"Resize {axis} must be positive, got {value}")
    # Fractional sizes truncate the way a canvas dimension does.
    return max(1, int(value))


def resize(image: Image.Image, new_width: float, new_height: float) -> Image.Image:
    """Return a new surface of exactly ``new_width`` x ``new_height`` using nearest-neighbour.

    The resize is done one axis at a time: width first with the source height
    kept, then height with the new width kept. A combined pass is allowed to
    smooth when shrinking; holding one axis fixed per pass keeps every output
    pixel a copy of a source pixel.
    """
    width = _pixels(new_width, "width")
    height = _pixels(new_height, "height")

    stretch_width = image.resize((width, image.height), resample=Image.NEAREST, reducing_gap=None)
    stretch_height = stretch_width.resize((width, height), resample=Image.NEAREST, reducing_gap=None)
    return stretch_height


def resize_to_plan(image: Image.Image, plan: ResizePlan) -> Image.Image:
    return resize(image, plan.width, plan.height)
