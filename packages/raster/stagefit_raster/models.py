"""Typed raster models exchanged with import pipelines."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class PixelData:
    """Row-major RGBA pixels of a resampled surface."""

    width: int
    height: int
    data: bytes

    def to_array(self) -> np.ndarray:
        return np.frombuffer(self.data, dtype=np.uint8).reshape((self.height, self.width, 4))


@dataclass(frozen=True)
class SourceAsset:
    data: bytes
    content_type: str
    data_format: str


@dataclass(frozen=True)
class NamedArtifact:
    name: str
    data: bytes
    content_type: str
