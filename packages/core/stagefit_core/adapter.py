"""Bitmap import pipelines fitting user and legacy bitmaps to the stage."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Iterable

from PIL import Image

from stagefit_geometry import (
    FrameSize,
    ResizePlan,
    StageContext,
    get_backdrop_resized_width_height,
    get_resized_width_height,
    legacy_double,
)
from stagefit_raster import (
    DecodeError,
    NamedArtifact,
    PixelData,
    SourceAsset,
    binary_to_data_uri,
    binary_to_file,
    data_uri_to_binary,
    data_uri_to_file,
    decode_image,
    encode_image,
    image_to_data_uri,
    resize,
)
from stagefit_raster.codec import DEFAULT_CONTENT_TYPE, EncodedImage

from .logging_setup import get_logger


Decoder = Callable[[EncodedImage], Awaitable[Image.Image]]

_log = get_logger("adapter")


class BitmapAdapter:
    """Adapts legacy and user-supplied bitmaps to the stage resolution.

    Every pipeline decodes its input once, decides a size with one of the
    dimension policies, resamples with nearest-neighbour, and re-encodes.
    A decode failure raises ``DecodeError`` to the awaiting caller and no
    output is produced.
    """

    def __init__(
        self,
        stage: StageContext | None = None,
        decoder: Decoder | None = None,
        output_content_type: str = DEFAULT_CONTENT_TYPE,
    ) -> None:
        self.stage = stage or StageContext()
        self._decode = decoder or decode_image
        self.output_content_type = output_content_type

    @property
    def stage_native_size(self) -> FrameSize:
        return self.stage.native_size

    def set_stage_native_size(self, value: Any) -> bool:
        return self.stage.set_native_size(value)

    def get_resized_width_height(self, old_width: float, old_height: float) -> ResizePlan:
        return get_resized_width_height(old_width, old_height, self.stage)

    def get_backdrop_resized_width_height(
        self,
        old_width: float,
        old_height: float,
        frame_width: float | None = None,
        frame_height: float | None = None,
    ) -> ResizePlan:
        return get_backdrop_resized_width_height(old_width, old_height, frame_width, frame_height, self.stage)

    @staticmethod
    def resize(image: Image.Image, new_width: float, new_height: float) -> Image.Image:
        return resize(image, new_width, new_height)

    async def _load(self, encoded: EncodedImage, pipeline: str) -> Image.Image:
        try:
            image = await self._decode(encoded)
        except DecodeError as exc:
            _log.warning("%s: %s", pipeline, exc, extra={"event": "bitmap_decode_failed"})
            raise
        _log.debug(
            "%s: decoded %dx%d", pipeline, image.width, image.height, extra={"event": "bitmap_decoded"}
        )
        return image

    def _resample(self, image: Image.Image, plan: ResizePlan, pipeline: str) -> Image.Image:
        resized = resize(image, plan.width, plan.height)
        _log.debug(
            "%s: resized %dx%d -> %dx%d",
            pipeline,
            image.width,
            image.height,
            resized.width,
            resized.height,
            extra={"event": "bitmap_resized"},
        )
        return resized

    def _as_data_uri(self, file_data: EncodedImage, file_type: str | None) -> str:
        if isinstance(file_data, str):
            return file_data
        return binary_to_data_uri(bytes(file_data), file_type or DEFAULT_CONTENT_TYPE)

    async def convert_resolution1_bitmap(self, data_uri: str) -> str:
        """Double a resolution 1 bitmap to the current scale and return it as a data URI."""
        image = await self._load(data_uri, "convert_resolution1_bitmap")
        plan = legacy_double(image.width, image.height)
        resized = self._resample(image, plan, "convert_resolution1_bitmap")
        return image_to_data_uri(resized, self.output_content_type)

    async def _import(self, file_data: EncodedImage, file_type: str | None, backdrop: bool) -> bytes:
        pipeline = "import_backdrop_bitmap" if backdrop else "import_bitmap"
        data_uri = self._as_data_uri(file_data, file_type)
        image = await self._load(data_uri, pipeline)
        if backdrop:
            plan = self.get_backdrop_resized_width_height(image.width, image.height)
        else:
            plan = self.get_resized_width_height(image.width, image.height)

        if plan.matches(image.width, image.height):
            _log.debug("%s: size unchanged", pipeline, extra={"event": "bitmap_passthrough"})
            return data_uri_to_binary(data_uri)
        return encode_image(self._resample(image, plan, pipeline), self.output_content_type)

    async def import_bitmap(self, file_data: EncodedImage, file_type: str | None = None) -> bytes:
        return await self._import(file_data, file_type, backdrop=False)

    async def import_backdrop_bitmap(self, file_data: EncodedImage, file_type: str | None = None) -> bytes:
        return await self._import(file_data, file_type, backdrop=True)

    async def change_backdrop_bitmap(self, asset_data: bytes, file_type: str) -> PixelData:
        """Re-fit a stored backdrop to the current stage and return its pixels for drawing."""
        image = await self._load(binary_to_data_uri(asset_data, file_type), "change_backdrop_bitmap")
        plan = self.get_backdrop_resized_width_height(image.width, image.height)
        resized = self._resample(image, plan, "change_backdrop_bitmap").convert("RGBA")
        return PixelData(width=resized.width, height=resized.height, data=resized.tobytes())

    async def adapt_multiple_stage_sizes(
        self,
        origin_asset: SourceAsset,
        stage_sizes: Iterable[Any],
    ) -> list[NamedArtifact]:
        """Fit the original backdrop to each frame in order, then append the original itself.

        Returns one artifact per frame plus the untouched original, each named
        by the MD5 of its bytes.
        """
        frames = [FrameSize.coerce(item) for item in stage_sizes]
        content_type = origin_asset.content_type
        image = await self._load(
            binary_to_data_uri(origin_asset.data, content_type), "adapt_multiple_stage_sizes"
        )

        result: list[NamedArtifact] = []
        for frame in frames:
            plan = get_backdrop_resized_width_height(
                image.width, image.height, frame.width, frame.height, self.stage
            )
            canvas = self._resample(image, plan, "adapt_multiple_stage_sizes")
            result.append(data_uri_to_file(image_to_data_uri(canvas, content_type), origin_asset.data_format))

        result.append(binary_to_file(origin_asset.data, content_type, origin_asset.data_format))
        _log.info(
            "adapted backdrop to %d frame size(s)", len(frames), extra={"event": "backdrop_adapted"}
        )
        return result
