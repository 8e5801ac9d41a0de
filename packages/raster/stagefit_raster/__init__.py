"""Raster package: nearest-neighbour resampling and image format conversion."""

from .codec import (
    binary_to_data_uri,
    binary_to_file,
    content_digest,
    data_uri_content_type,
    data_uri_to_binary,
    data_uri_to_file,
    decode_image,
    encode_image,
    image_to_data_uri,
)
from .errors import BitmapError, DecodeError, MalformedDataURIError
from .models import NamedArtifact, PixelData, SourceAsset
from .resample import resize, resize_to_plan

__all__ = [
    "BitmapError",
    "DecodeError",
    "MalformedDataURIError",
    "NamedArtifact",
    "PixelData",
    "SourceAsset",
    "binary_to_data_uri",
    "binary_to_file",
    "content_digest",
    "data_uri_content_type",
    "data_uri_to_binary",
    "data_uri_to_file",
    "decode_image",
    "encode_image",
    "image_to_data_uri",
    "resize",
    "resize_to_plan",
]
