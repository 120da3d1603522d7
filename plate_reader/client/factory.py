from __future__ import annotations

from plate_reader.client.upload_client import UploadClient
from plate_reader.core.config import Settings, settings as default_settings


def get_upload_client(settings: Settings | None = None, **overrides) -> UploadClient:
    """Return an UploadClient configured from *settings* (env / .env by default).

    Keyword *overrides* win over the settings, e.g. ``base_url=`` from a CLI flag
    or ``transport=`` in tests.
    """
    cfg = settings or default_settings
    options = {
        "base_url": cfg.recognition_base_url,
        "timeout": cfg.request_timeout_s,
        "upload_path": cfg.upload_path,
        "jpeg_quality": cfg.jpeg_quality,
    }
    options.update({k: v for k, v in overrides.items() if v is not None})
    return UploadClient(**options)
