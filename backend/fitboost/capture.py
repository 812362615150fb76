"""Image capture and upload for the body and food scanners.

Both acquisition modes, file picker and camera still, hand raw image
bytes to ``encode_image``, which normalises them to a base64 JPEG payload
the vision model accepts.

``ScanSession`` tracks one scanner: which slots are filled, whether the
camera is on, and the latest analysis. On an acquisition failure it
clears the failing slot, drops any previous result and stops the camera
before raising ``CaptureError``. Slots already filled are kept.
"""

import base64
import io
import logging
from collections.abc import Awaitable, Callable

from PIL import Image, ImageOps, UnidentifiedImageError
from pydantic import BaseModel

from fitboost import llm_service
from fitboost.coaching import SCAN_PROMPTS
from fitboost.config import settings
from fitboost.models import AIResponse, ScanType

logger = logging.getLogger(__name__)

MAX_SIDE = 1600
JPEG_QUALITY = 85

SCAN_SLOTS: dict[ScanType, tuple[str, ...]] = {
    "body": ("front", "back"),
    "food": ("plate",),
}

AnalyzeFn = Callable[[list[str], str, ScanType, str], Awaitable[AIResponse]]


class CaptureError(ValueError):
    """Raised when acquired bytes are not a readable image."""


class EncodedImage(BaseModel):
    """A base64-encoded image ready to send to the vision model."""

    mime_type: str = "image/jpeg"
    data: str

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


def encode_image(raw: bytes, max_side: int = MAX_SIDE) -> EncodedImage:
    """Normalise raw image bytes to a downsized base64 JPEG.

    Applies the EXIF orientation, flattens to RGB and bounds the longest
    side to *max_side* pixels.

    Args:
        raw: Image file bytes in any format Pillow reads.
        max_side: Longest allowed side in pixels.

    Returns:
        The encoded image.

    Raises:
        CaptureError: If *raw* is empty or not a readable image.
    """
    if not raw:
        raise CaptureError("No image data received.")
    try:
        with Image.open(io.BytesIO(raw)) as probe:
            probe.verify()
        # verify() leaves the image unusable, so reopen for the real work.
        with Image.open(io.BytesIO(raw)) as img:
            img = ImageOps.exif_transpose(img)
            img = img.convert("RGB")
            img.thumbnail((max_side, max_side))
            buffer = io.BytesIO()
            img.save(buffer, format="JPEG", quality=JPEG_QUALITY)
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise CaptureError(f"Unreadable image: {exc}") from exc
    return EncodedImage(data=base64.b64encode(buffer.getvalue()).decode("ascii"))


async def _default_analyze(
    images: list[str], prompt: str, scan_type: ScanType, language: str
) -> AIResponse:
    return await llm_service.analyze_image(images, prompt, scan_type, language)


class ScanSession:
    """State of one scanner page."""

    def __init__(
        self,
        scan_type: ScanType,
        analyze_fn: AnalyzeFn | None = None,
        language: str | None = None,
    ) -> None:
        self.scan_type = scan_type
        self.slots = SCAN_SLOTS[scan_type]
        self.language = language or settings.language
        self._analyze_fn = analyze_fn or _default_analyze
        self._images: dict[str, EncodedImage] = {}
        self.result: AIResponse | None = None
        self.camera_active = False

    @property
    def ready(self) -> bool:
        """True once every slot holds an image."""
        return all(slot in self._images for slot in self.slots)

    @property
    def missing_slots(self) -> list[str]:
        return [slot for slot in self.slots if slot not in self._images]

    def image(self, slot: str) -> EncodedImage | None:
        return self._images.get(slot)

    def images(self) -> list[EncodedImage]:
        """Captured images in slot order."""
        return [self._images[slot] for slot in self.slots if slot in self._images]

    def capture(self, slot: str, raw: bytes) -> EncodedImage:
        """Encode *raw* into *slot*, from either the file picker or the camera.

        Raises:
            ValueError: If *slot* does not belong to this scan type.
            CaptureError: If the bytes are unreadable (reset policy applied).
        """
        if slot not in self.slots:
            raise ValueError(f"Unknown slot '{slot}' for {self.scan_type} scan.")
        try:
            encoded = encode_image(raw)
        except CaptureError:
            logger.warning("Capture failed for %s/%s", self.scan_type, slot)
            self._images.pop(slot, None)
            self.result = None
            self.stop_camera()
            raise
        self._images[slot] = encoded
        self.result = None
        return encoded

    def start_camera(self) -> None:
        self.camera_active = True

    def stop_camera(self) -> None:
        self.camera_active = False

    def reset(self) -> None:
        """Drop every image, the result, and release the camera."""
        self._images.clear()
        self.result = None
        self.stop_camera()

    async def analyze(self) -> AIResponse:
        """Run the vision analysis for the captured images.

        Raises:
            ValueError: If a slot is still empty.
        """
        if not self.ready:
            raise ValueError(f"Missing image(s): {', '.join(self.missing_slots)}")
        self.result = await self._analyze_fn(
            [img.data for img in self.images()],
            SCAN_PROMPTS[self.scan_type],
            self.scan_type,
            self.language,
        )
        return self.result
