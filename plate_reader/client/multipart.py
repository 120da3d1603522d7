from __future__ import annotations

import uuid

FIELD_NAME = "file"
FILENAME = "image.jpg"
PART_CONTENT_TYPE = "image/jpeg"

_CRLF = b"\r\n"


def new_boundary(payload: bytes = b"") -> str:
    """Return a fresh boundary token that does not occur inside *payload*."""
    while True:
        boundary = f"Boundary-{str(uuid.uuid4()).upper()}"
        if boundary.encode("ascii") not in payload:
            return boundary


def content_type(boundary: str) -> str:
    return f"multipart/form-data; boundary={boundary}"


def encode_file_part(payload: bytes, boundary: str) -> bytes:
    """Encode *payload* as the single ``file`` part of a multipart/form-data body."""
    delimiter = f"--{boundary}".encode("ascii")
    disposition = f'Content-Disposition: form-data; name="{FIELD_NAME}"; filename="{FILENAME}"'
    return b"".join(
        [
            delimiter + _CRLF,
            disposition.encode("utf-8") + _CRLF,
            f"Content-Type: {PART_CONTENT_TYPE}".encode("ascii") + _CRLF + _CRLF,
            payload + _CRLF,
            delimiter + b"--" + _CRLF,
        ]
    )
