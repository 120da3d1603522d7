"""Shared pytest configuration and fixtures for the plate reader tests."""
from __future__ import annotations

import io
import os

# Provide env vars before any plate_reader module is imported
os.environ.setdefault("RECOGNITION_BASE_URL", "http://recognizer.test:5500")
os.environ.setdefault("REQUEST_TIMEOUT_S", "5")
os.environ.setdefault("STUB_TEXTS", '["12가 3456"]')

import pytest
from PIL import Image


@pytest.fixture
def plate_image() -> Image.Image:
    return Image.new("RGB", (64, 32), color=(240, 240, 240))


@pytest.fixture
def jpeg_bytes(plate_image: Image.Image) -> bytes:
    buf = io.BytesIO()
    plate_image.save(buf, format="JPEG")
    return buf.getvalue()
