"""Data URI, binary, and surface conversions plus content-addressed artifact naming."""

from __future__ import annotations

import asyncio
import base64
import binascii
import hashlib
import re
from io import BytesIO
from typing import Union

from PIL import Image, ImageOps

from .errors import DecodeError, MalformedDataURIError
from .models import NamedArtifact


BASE64_MARKER = ";base64,"
DEFAULT_CONTENT_TYPE = "image/png"

_MIME_RE = re.compile(r"^data:(.*?);")

_PIL_FORMATS: dict[str, str] = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/webp": "WEBP",
    "image/gif": "GIF",
    "image/bmp": "BMP",
}
_NO_ALPHA = {"JPEG"}

EncodedImage = Union[bytes, bytearray, memoryview, str]


def binary_to_data_uri(data: bytes, content_type: str) -> str:
    b64 = base64.b64encode(bytes(data)).decode("ascii")
    return f"data:{content_type};base64,{b64}"


def data_uri_to_binary(data_uri: str) -> bytes:
    index = data_uri.find(BASE64_MARKER)
    if index < 0:
        raise MalformedDataURIError("Data URI has no ';base64,' marker")
    try:
        return base64.b64decode(data_uri[index + len(BASE64_MARKER) :], validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedDataURIError(f"Invalid base64 payload: {exc}") from exc


def data_uri_content_type(data_uri: str) -> str:
    match = _MIME_RE.match(data_uri)
    if not match or not match.group(1):
        raise MalformedDataURIError("Data URI header has no content type")
    return match.group(1)


def content_digest(data: bytes) -> str:
    """MD5 hex digest, the id asset storage derives from an asset's bytes."""
    return hashlib.md5(bytes(data)).hexdigest()


def binary_to_file(data: bytes, content_type: str, extension: str) -> NamedArtifact:
    data = bytes(data)
    return NamedArtifact(name=f"{content_digest(data)}.{extension}", data=data, content_type=content_type)


def data_uri_to_file(data_uri: str, extension: str) -> NamedArtifact:
    content_type = data_uri_content_type(data_uri)
    return binary_to_file(data_uri_to_binary(data_uri), content_type, extension)


def pil_format(content_type: str) -> str:
    return _PIL_FORMATS.get(content_type.lower(), "PNG")


def produced_content_type(content_type: str) -> str:
    """Content type the encoder actually writes; unsupported types become PNG."""
    return content_type.lower() if content_type.lower() in _PIL_FORMATS else DEFAULT_CONTENT_TYPE


def encode_image(image: Image.Image, content_type: str = DEFAULT_CONTENT_TYPE) -> bytes:
    fmt = pil_format(content_type)
    if fmt in _NO_ALPHA and image.mode != "RGB":
        image = image.convert("RGB")
    buf = BytesIO()
    image.save(buf, format=fmt)
    return buf.getvalue()


def image_to_data_uri(image: Image.Image, content_type: str = DEFAULT_CONTENT_TYPE) -> str:
    return binary_to_data_uri(encode_image(image, content_type), produced_content_type(content_type))


def _decode_sync(data: bytes) -> Image.Image:
    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            # EXIF orientation is applied so width and height match the displayed image.
            return ImageOps.exif_transpose(img).convert("RGBA")
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
        raise DecodeError(str(exc)) from exc


async def decode_image(encoded: EncodedImage) -> Image.Image:
    """Decode bytes or a data URI into an RGBA surface without blocking the event loop."""
    if isinstance(encoded, str):
        try:
            data = data_uri_to_binary(encoded)
        except MalformedDataURIError as exc:
            raise DecodeError(str(exc)) from exc
    else:
        data = bytes(encoded)
    if not data:
        raise DecodeError("empty image data")
    return await asyncio.to_thread(_decode_sync, data)
