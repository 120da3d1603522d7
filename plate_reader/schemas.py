from __future__ import annotations

import base64
import binascii

from pydantic import BaseModel, ConfigDict, Field


def _b64decode(value: str | None, field: str) -> bytes | None:
    if value is None:
        return None
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"{field} is not valid base64: {exc}") from exc


class UploadResponse(BaseModel):
    """Result of one recognition round trip.

    Every field is optional: the service returns whatever subset matches the
    detection outcome (no plate found usually means all three are absent or
    empty). Unknown keys are ignored; a present key with the wrong type fails
    validation as a whole.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    # Annotated detection overlay, base64
    prediction_image: str | None = Field(default=None, alias="prediction")
    # Cropped plate region, base64
    license_plate_image: str | None = None
    texts: list[str] | None = None

    def decode_prediction_image(self) -> bytes | None:
        return _b64decode(self.prediction_image, "prediction")

    def decode_license_plate_image(self) -> bytes | None:
        return _b64decode(self.license_plate_image, "license_plate_image")


class StubUploadOut(BaseModel):
    """Wire shape served by the stub recognition service."""

    prediction: str | None
    license_plate_image: str | None
    texts: list[str]
