from __future__ import annotations

import base64
import logging

from fastapi import APIRouter, File, HTTPException, UploadFile

from plate_reader.core.config import settings
from plate_reader.schemas import StubUploadOut

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/api/upload", response_model=StubUploadOut)
async def upload(file: UploadFile = File(...)) -> StubUploadOut:
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Image is empty")

    # No recognition here: the uploaded image comes back as both result images.
    encoded = base64.b64encode(content).decode("ascii")
    logger.info(
        "stub_upload_received",
        extra={"upload_filename": file.filename, "content_type": file.content_type, "image_bytes": len(content)},
    )
    return StubUploadOut(
        prediction=encoded,
        license_plate_image=encoded,
        texts=list(settings.stub_texts),
    )
