import base64
import hashlib
import sys
import unittest
from io import BytesIO
from pathlib import Path

import numpy as np
from PIL import Image

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "geometry"))
sys.path.insert(0, str(ROOT / "packages" / "raster"))

from stagefit_raster import (
    DecodeError,
    MalformedDataURIError,
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


def _png(width: int, height: int, color=(10, 200, 30, 255)) -> bytes:
    buf = BytesIO()
    Image.new("RGBA", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


def _rotated_jpeg(width: int, height: int, orientation: int = 6) -> bytes:
    exif = Image.Exif()
    exif[0x0112] = orientation
    buf = BytesIO()
    Image.new("RGB", (width, height), (120, 30, 60)).save(buf, format="JPEG", exif=exif)
    return buf.getvalue()


class DataUriTests(unittest.TestCase):
    def test_binary_to_data_uri_format(self):
        uri = binary_to_data_uri(b"\x00\x01\xff", "image/png")
        self.assertEqual(uri, "data:image/png;base64," + base64.b64encode(b"\x00\x01\xff").decode("ascii"))

    def test_round_trip_arbitrary_bytes(self):
        payload = bytes(range(256)) * 3
        self.assertEqual(data_uri_to_binary(binary_to_data_uri(payload, "application/octet-stream")), payload)

    def test_empty_payload(self):
        self.assertEqual(data_uri_to_binary(binary_to_data_uri(b"", "image/png")), b"")

    def test_missing_marker_fails(self):
        with self.assertRaises(MalformedDataURIError):
            data_uri_to_binary("data:image/png,iVBORw0KGgo=")
        with self.assertRaises(ValueError):
            data_uri_to_binary("not a data uri")

    def test_bad_base64_fails(self):
        with self.assertRaises(MalformedDataURIError):
            data_uri_to_binary("data:image/png;base64,abc")

    def test_non_alphabet_characters_fail(self):
        with self.assertRaises(MalformedDataURIError):
            data_uri_to_binary("data:image/png;base64,iVBO*w0K")

    def test_content_type_is_parsed(self):
        self.assertEqual(data_uri_content_type("data:image/jpeg;base64,AAAA"), "image/jpeg")
        with self.assertRaises(MalformedDataURIError):
            data_uri_content_type("image/jpeg;base64,AAAA")


class NamingTests(unittest.TestCase):
    def test_digest_is_md5(self):
        self.assertEqual(content_digest(b""), "d41d8cd98f00b204e9800998ecf8427e")
        self.assertEqual(content_digest(b"stage"), hashlib.md5(b"stage").hexdigest())

    def test_data_uri_to_file(self):
        payload = _png(3, 2)
        artifact = data_uri_to_file(binary_to_data_uri(payload, "image/png"), "png")
        self.assertEqual(artifact.name, f"{hashlib.md5(payload).hexdigest()}.png")
        self.assertEqual(artifact.data, payload)
        self.assertEqual(artifact.content_type, "image/png")

    def test_identical_bytes_get_identical_names(self):
        payload = _png(5, 5)
        first = data_uri_to_file(binary_to_data_uri(payload, "image/png"), "png")
        second = binary_to_file(bytearray(payload), "image/png", "png")
        self.assertEqual(first.name, second.name)
        self.assertNotEqual(first.name, binary_to_file(_png(5, 6), "image/png", "png").name)


class EncodeTests(unittest.TestCase):
    def test_png_keeps_alpha(self):
        img = Image.new("RGBA", (4, 4), (1, 2, 3, 40))
        decoded = Image.open(BytesIO(encode_image(img, "image/png")))
        self.assertEqual(decoded.format, "PNG")
        self.assertEqual(decoded.convert("RGBA").getpixel((0, 0)), (1, 2, 3, 40))

    def test_jpeg_drops_alpha(self):
        img = Image.new("RGBA", (8, 8), (200, 10, 10, 128))
        decoded = Image.open(BytesIO(encode_image(img, "image/jpeg")))
        self.assertEqual(decoded.format, "JPEG")
        self.assertEqual(decoded.mode, "RGB")

    def test_unknown_type_falls_back_to_png(self):
        img = Image.new("RGBA", (2, 2))
        uri = image_to_data_uri(img, "image/x-unknown")
        self.assertTrue(uri.startswith("data:image/png;base64,"))
        self.assertEqual(Image.open(BytesIO(data_uri_to_binary(uri))).format, "PNG")


class DecodeTests(unittest.IsolatedAsyncioTestCase):
    async def test_decode_bytes(self):
        img = await decode_image(_png(7, 3))
        self.assertEqual(img.size, (7, 3))
        self.assertEqual(img.mode, "RGBA")

    async def test_decode_data_uri(self):
        img = await decode_image(binary_to_data_uri(_png(2, 9), "image/png"))
        self.assertEqual(img.size, (2, 9))

    async def test_decode_palette_image_as_rgba(self):
        buf = BytesIO()
        Image.new("P", (4, 4), 3).save(buf, format="GIF")
        img = await decode_image(buf.getvalue())
        self.assertEqual(img.mode, "RGBA")

    async def test_exif_orientation_is_applied(self):
        img = await decode_image(_rotated_jpeg(400, 100))
        self.assertEqual(img.size, (100, 400))
        self.assertEqual(img.mode, "RGBA")

    async def test_garbage_fails(self):
        with self.assertRaises(DecodeError) as ctx:
            await decode_image(b"definitely not an image")
        self.assertTrue(str(ctx.exception).startswith("Image load failed"))

    async def test_truncated_png_fails(self):
        noise = np.random.default_rng(0).integers(0, 256, (64, 64), dtype=np.uint8)
        buf = BytesIO()
        Image.fromarray(noise).save(buf, format="PNG")
        with self.assertRaises(DecodeError):
            await decode_image(buf.getvalue()[:200])

    async def test_empty_and_malformed_uri_fail(self):
        with self.assertRaises(DecodeError):
            await decode_image(b"")
        with self.assertRaises(DecodeError):
            await decode_image("data:image/png,nothing")


if __name__ == "__main__":
    unittest.main()
