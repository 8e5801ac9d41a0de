"""Bitmap import error types."""

from __future__ import annotations


class BitmapError(Exception):
    pass


class DecodeError(BitmapError):
    """The input bytes or data URI could not be decoded as an image."""

    def __init__(self, detail: str | None = None) -> None:
        message = "Image load failed" if not detail else f"Image load failed: {detail}"
        super().__init__(message)
        self.detail = detail


class MalformedDataURIError(BitmapError, ValueError):
    pass
