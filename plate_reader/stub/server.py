"""Stand-in recognition service for local development and end-to-end tests.

Run it with ``python -m plate_reader serve-stub`` and point
RECOGNITION_BASE_URL at it.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI

from plate_reader.core.config import settings
from plate_reader.core.logging import configure_logging
from plate_reader.stub.routes import router


def create_app() -> FastAPI:
    configure_logging(settings.log_level)
    app = FastAPI(title="License Plate Recognition (stub)", version="0.1.0")
    app.include_router(router)

    @app.get("/")
    async def root():
        return {
            "message": "License plate recognition stub",
            "upload": "/api/upload",
            "health": "/health",
        }

    logging.getLogger(__name__).info("stub_app_created", extra={"app_env": settings.app_env})
    return app


app = create_app()
