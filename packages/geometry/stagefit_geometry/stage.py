"""Stage native size context shared by sizing policies and import pipelines."""

from __future__ import annotations

import logging
from typing import Any

from .models import FrameSize, _is_real


DEFAULT_STAGE_SIZE = FrameSize(480, 360)

_log = logging.getLogger("stagefit.stage")


def is_valid_stage_size(value: Any) -> bool:
    if isinstance(value, FrameSize):
        return True
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        return False
    return all(_is_real(v) and v > 0 for v in value)


class StageContext:
    """Holds the current stage native size.

    Policies that are not given an explicit frame read ``native_size`` at call
    time, so an update is visible to every later call, including pipelines that
    were already awaiting a decode when the update happened.
    """

    def __init__(self, native_size: FrameSize | tuple[float, float] | None = None) -> None:
        self._native_size = DEFAULT_STAGE_SIZE if native_size is None else FrameSize.coerce(native_size)

    @property
    def native_size(self) -> FrameSize:
        return self._native_size

    def set_native_size(self, value: Any) -> bool:
        """Apply a new ``[width, height]`` pair; invalid values are ignored and return False."""
        if not is_valid_stage_size(value):
            _log.debug("stage size rejected: %r", value, extra={"event": "stage_size_rejected"})
            return False
        self._native_size = FrameSize.coerce(value)
        _log.info("stage size set to %s", self._native_size, extra={"event": "stage_size_changed"})
        return True

    def __repr__(self) -> str:
        return f"StageContext(native_size={self._native_size!r})"
