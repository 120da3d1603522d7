"""Recognition presenter: turns upload results into display state.

This is the collaborator that sits between a UI and ``UploadClient``:
- guards against recognizing before a photo is picked
- decodes the two base64 result images into Pillow images
- joins recognized lines for display
- maps every ``UploadError`` kind to a user-facing message

It runs on the caller's event loop; marshaling onto a UI thread, if the
toolkit needs one, stays with the UI.
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from plate_reader.client.errors import (
    Cancelled,
    DecodeError,
    EmptyResponseError,
    EncodingError,
    NetworkError,
    UploadError,
)
from plate_reader.client.upload_client import UploadClient
from plate_reader.schemas import UploadResponse

logger = logging.getLogger(__name__)

NO_IMAGE_SELECTED = "Select a license plate photo first."


@dataclass
class RecognitionState:
    selected_image: Image.Image | None = None
    prediction_image: Image.Image | None = None
    license_plate_image: Image.Image | None = None
    texts: str = ""
    error_message: str | None = None
    is_loading: bool = False


def describe_error(error: UploadError) -> str | None:
    """User-facing message for *error*; ``None`` when nothing should be shown."""
    if isinstance(error, Cancelled):
        return None
    if isinstance(error, EncodingError):
        return f"Could not prepare the photo for upload: {error}"
    if isinstance(error, NetworkError):
        return f"Could not reach the recognition service: {error}"
    if isinstance(error, EmptyResponseError):
        return "The recognition service returned no data."
    if isinstance(error, DecodeError):
        return "The recognition service returned an unreadable response."
    return f"Recognition request failed: {error}"


def _open_image(data: bytes | None) -> Image.Image | None:
    if not data:
        return None
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


class RecognitionPresenter:
    def __init__(self, client: UploadClient) -> None:
        self._client = client
        self.state = RecognitionState()

    def select_image(self, image: Image.Image) -> None:
        self.state.selected_image = image
        self.state.error_message = None

    def reset(self) -> None:
        """Clear the photo and all results (pull-to-refresh)."""
        logger.info("presenter_reset")
        self.state.selected_image = None
        self.state.prediction_image = None
        self.state.license_plate_image = None
        self.state.texts = ""
        self.state.is_loading = False

    async def recognize(self) -> None:
        if self.state.selected_image is None:
            self.state.error_message = NO_IMAGE_SELECTED
            return

        self.state.is_loading = True
        self.state.error_message = None
        try:
            response = await self._client.upload_image(self.state.selected_image)
        except UploadError as exc:
            logger.warning("recognition_failed", extra={"error": type(exc).__name__})
            self.state.error_message = describe_error(exc)
            return
        finally:
            self.state.is_loading = False

        self._apply(response)

    def _apply(self, response: UploadResponse) -> None:
        prediction = self._decode_image(response.decode_prediction_image, "prediction")
        if prediction is not None:
            self.state.prediction_image = prediction

        plate = self._decode_image(response.decode_license_plate_image, "license_plate_image")
        if plate is not None:
            self.state.license_plate_image = plate

        if response.texts is not None:
            self.state.texts = "\n".join(response.texts)

        logger.info(
            "recognition_complete",
            extra={
                "has_prediction": prediction is not None,
                "has_plate": plate is not None,
                "text_lines": len(response.texts or []),
            },
        )

    @staticmethod
    def _decode_image(decode, field: str) -> Image.Image | None:
        # Unusable image fields are skipped, the rest of the result still shows.
        try:
            return _open_image(decode())
        except (ValueError, UnidentifiedImageError, OSError, Image.DecompressionBombError) as exc:
            logger.warning("result_image_skipped", extra={"field": field, "error": str(exc)})
            return None
