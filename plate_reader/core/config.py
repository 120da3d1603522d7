from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    # Recognition service (scheme, host and port)
    recognition_base_url: str = "http://localhost:5500"
    upload_path: str = "/api/upload"
    request_timeout_s: float = Field(default=30.0, gt=0.0)

    # JPEG quality used when encoding Pillow images before upload
    jpeg_quality: int = Field(default=80, ge=1, le=95)

    # Lines returned by the stub recognition service
    stub_texts: list[str] = Field(default_factory=lambda: ["12가 3456"])


settings = Settings()
