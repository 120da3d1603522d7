"""
plate-reader CLI
================

Usage:
    plate-reader recognize <image>      Upload a photo and print the plate text
    plate-reader serve-stub             Run the stub recognition service
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from plate_reader.client.factory import get_upload_client
from plate_reader.client.upload_client import UploadClient
from plate_reader.core.config import settings
from plate_reader.core.logging import configure_logging
from plate_reader.presentation.presenter import RecognitionPresenter


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {value}")
    return number


async def _recognize(image: Image.Image, client: UploadClient) -> RecognitionPresenter:
    async with client:
        presenter = RecognitionPresenter(client)
        presenter.select_image(image)
        await presenter.recognize()
    return presenter


def cmd_recognize(args) -> int:
    """Recognize the plate in a single image."""
    image_path = Path(args.image)
    if not image_path.exists():
        print(f"Error: Image not found: {image_path}", file=sys.stderr)
        return 1

    try:
        image = Image.open(image_path)
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        print(f"Error: Cannot read image {image_path}: {exc}", file=sys.stderr)
        return 1

    try:
        client = get_upload_client(base_url=args.base_url, timeout=args.timeout)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    state = asyncio.run(_recognize(image, client)).state
    if state.error_message:
        print(f"Error: {state.error_message}", file=sys.stderr)
        return 1

    print(state.texts if state.texts else "(no plate text recognized)")

    if args.output_dir:
        out = Path(args.output_dir)
        out.mkdir(parents=True, exist_ok=True)
        for name, img in (("prediction.jpg", state.prediction_image), ("license_plate.jpg", state.license_plate_image)):
            if img is not None:
                img.convert("RGB").save(out / name, format="JPEG")
                print(f"Saved {out / name}")

    return 0


def cmd_serve_stub(args) -> int:
    """Run the stub recognition service."""
    import uvicorn

    uvicorn.run("plate_reader.stub.server:app", host=args.host, port=args.port)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="plate-reader",
        description="Upload license plate photos to a recognition service",
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    recognize_parser = subparsers.add_parser("recognize", help="Recognize the plate in an image")
    recognize_parser.add_argument("image", help="Path to image file")
    recognize_parser.add_argument("--base-url", help="Recognition service base URL (default: RECOGNITION_BASE_URL)")
    recognize_parser.add_argument("--timeout", type=_positive_float, help="Request timeout in seconds")
    recognize_parser.add_argument("--output-dir", "-o", help="Directory for the returned images")

    serve_parser = subparsers.add_parser("serve-stub", help="Run the stub recognition service")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", "-p", type=int, default=5500, help="Port number")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "recognize": cmd_recognize,
        "serve-stub": cmd_serve_stub,
    }
    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
