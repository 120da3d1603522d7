"""UploadClient: one multipart POST to the recognition service per call."""
from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

import httpx
from PIL import Image
from pydantic import ValidationError

from plate_reader.client.encoding import DEFAULT_JPEG_QUALITY, encode_jpeg
from plate_reader.client.errors import (
    Cancelled,
    DecodeError,
    EmptyResponseError,
    EncodingError,
    NetworkError,
    UploadError,
)
from plate_reader.client.multipart import content_type, encode_file_part, new_boundary
from plate_reader.schemas import UploadResponse

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_PATH = "/api/upload"
DEFAULT_TIMEOUT_S = 30.0


@dataclass(frozen=True)
class UploadResult:
    """Outcome handed to ``submit`` callbacks: exactly one of the two is set."""

    response: UploadResponse | None = None
    error: UploadError | None = None

    def __post_init__(self) -> None:
        if (self.response is None) == (self.error is None):
            raise ValueError("UploadResult needs exactly one of response or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> UploadResponse:
        if self.error is not None:
            raise self.error
        return self.response  # type: ignore[return-value]


def _check_url(url: str) -> None:
    """Reject upload URLs httpx cannot send to, at construction time."""
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise ValueError(f"Invalid recognition service URL {url!r}: {exc}") from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ValueError(f"Invalid recognition service URL {url!r}: expected http(s)://host[:port]")


class UploadClient:
    """Client for the license-plate recognition service.

    Each ``upload`` call is independent: boundary, request and response live
    only inside the call, so any number of uploads may run concurrently on
    one instance. The only shared piece is the pooled ``httpx.AsyncClient``,
    created on first use and released by ``aclose()``.

    Config (via .env, see ``plate_reader.client.factory``):
        RECOGNITION_BASE_URL=http://192.168.0.46:5500
        REQUEST_TIMEOUT_S=30
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_S,
        upload_path: str = DEFAULT_UPLOAD_PATH,
        jpeg_quality: int = DEFAULT_JPEG_QUALITY,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._upload_url = f"{base_url.rstrip('/')}/{upload_path.lstrip('/')}"
        _check_url(self._upload_url)
        self._timeout = timeout
        self._jpeg_quality = jpeg_quality
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def upload_url(self) -> str:
        return self._upload_url

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> UploadClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ------------------------------------------------------------------ #
    #  Coroutine API                                                       #
    # ------------------------------------------------------------------ #

    async def upload(self, image_bytes: bytes) -> UploadResponse:
        """POST *image_bytes* as ``file`` and decode the JSON reply.

        Raises ``EncodingError`` before touching the network when the payload
        is empty, ``NetworkError`` on transport failure, ``EmptyResponseError``
        when the reply has no body and ``DecodeError`` when the body does not
        match ``UploadResponse``. A single attempt is made.
        """
        if not isinstance(image_bytes, (bytes, bytearray, memoryview)):
            raise EncodingError(f"Invalid image data: expected bytes, got {type(image_bytes).__name__}")
        payload = bytes(image_bytes)
        if not payload:
            raise EncodingError("Invalid image data: payload is empty")

        boundary = new_boundary(payload)
        body = encode_file_part(payload, boundary)
        headers = {"Content-Type": content_type(boundary)}

        logger.info("upload_started", extra={"url": self._upload_url, "image_bytes": len(payload)})
        t0 = time.monotonic()
        try:
            response = await self._get_client().post(self._upload_url, content=body, headers=headers)
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            logger.warning(
                "upload_network_error",
                extra={"url": self._upload_url, "error": f"{type(exc).__name__}: {exc}"},
            )
            raise NetworkError(f"Request to {self._upload_url} failed: {exc}", cause=exc) from exc

        duration_ms = int((time.monotonic() - t0) * 1000)
        logger.info(
            "upload_response",
            extra={
                "status_code": response.status_code,
                "body_bytes": len(response.content),
                "duration_ms": duration_ms,
            },
        )

        if not response.content:
            raise EmptyResponseError("Recognition service returned an empty body")

        try:
            return UploadResponse.model_validate_json(response.content)
        except ValidationError as exc:
            logger.warning("upload_decode_error", extra={"error_count": exc.error_count()})
            raise DecodeError(str(exc)) from exc

    async def upload_image(self, image: Image.Image) -> UploadResponse:
        """Encode a Pillow image as JPEG and upload it."""
        return await self.upload(encode_jpeg(image, self._jpeg_quality))

    # ------------------------------------------------------------------ #
    #  Callback API                                                        #
    # ------------------------------------------------------------------ #

    def submit(
        self,
        image_bytes: bytes,
        on_complete: Callable[[UploadResult], None],
    ) -> asyncio.Task[UploadResult]:
        """Schedule an upload on the running loop and report through *on_complete*.

        The callback runs once, on the loop that owns the task. Cancelling the
        task aborts the request and reports ``Cancelled``; a task cancelled
        before it started never calls back.
        """
        return asyncio.create_task(self._run(image_bytes, on_complete))

    async def _run(
        self,
        image_bytes: bytes,
        on_complete: Callable[[UploadResult], None],
    ) -> UploadResult:
        try:
            response = await self.upload(image_bytes)
        except asyncio.CancelledError:
            logger.info("upload_cancelled", extra={"url": self._upload_url})
            on_complete(UploadResult(error=Cancelled("Upload cancelled")))
            raise
        except UploadError as exc:
            result = UploadResult(error=exc)
        else:
            result = UploadResult(response=response)
        on_complete(result)
        return result
