"""Failure kinds of an upload round trip.

All of them travel through the same channel as a successful result: raised
from ``UploadClient.upload`` or delivered inside an ``UploadResult`` by
``UploadClient.submit``. None is fatal; the caller may simply let the user
try again.
"""
from __future__ import annotations


class UploadError(Exception):
    """Base class for every upload failure."""


class EncodingError(UploadError):
    """The source image could not be turned into upload bytes."""


class NetworkError(UploadError):
    """Transport failure: connectivity, DNS, TLS, timeout or reset."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class EmptyResponseError(UploadError):
    """The request went through but the service sent no body."""


class DecodeError(UploadError):
    """The response body is not JSON matching ``UploadResponse``."""

    def __init__(self, diagnostic: str) -> None:
        super().__init__(f"Could not decode recognition response: {diagnostic}")
        self.diagnostic = diagnostic


class Cancelled(UploadError):
    """The caller abandoned the upload before it completed."""
