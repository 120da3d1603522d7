"""CLI tests: the upload client is swapped for one on a mocked transport."""
from __future__ import annotations

import base64
import io
from pathlib import Path

import httpx
import pytest
from PIL import Image

from plate_reader import cli
from plate_reader.client.upload_client import UploadClient


def _png_b64() -> str:
    buf = io.BytesIO()
    Image.new("RGB", (20, 10)).save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode()


def _patch_client(monkeypatch: pytest.MonkeyPatch, handler) -> list[dict]:
    calls: list[dict] = []

    def fake_factory(**overrides) -> UploadClient:
        calls.append(overrides)
        return UploadClient("http://cli.test", transport=httpx.MockTransport(handler))

    monkeypatch.setattr(cli, "get_upload_client", fake_factory)
    return calls


@pytest.fixture
def image_file(tmp_path: Path, plate_image: Image.Image) -> Path:
    path = tmp_path / "car.jpg"
    plate_image.save(path, format="JPEG")
    return path


def test_recognize_prints_texts_and_saves_images(
    monkeypatch: pytest.MonkeyPatch, capsys, image_file: Path, tmp_path: Path
) -> None:
    body = {"prediction": _png_b64(), "license_plate_image": _png_b64(), "texts": ["12가 3456"]}
    calls = _patch_client(monkeypatch, lambda request: httpx.Response(200, json=body))
    out_dir = tmp_path / "out"

    code = cli.main(["recognize", str(image_file), "--base-url", "http://x:1", "--output-dir", str(out_dir)])

    assert code == 0
    assert "12가 3456" in capsys.readouterr().out
    assert (out_dir / "prediction.jpg").exists()
    assert (out_dir / "license_plate.jpg").exists()
    assert calls == [{"base_url": "http://x:1", "timeout": None}]


def test_recognize_network_error_exits_1(monkeypatch: pytest.MonkeyPatch, capsys, image_file: Path) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused")

    _patch_client(monkeypatch, refuse)

    code = cli.main(["recognize", str(image_file)])

    assert code == 1
    assert "recognition service" in capsys.readouterr().err


def test_recognize_missing_file(capsys, tmp_path: Path) -> None:
    code = cli.main(["recognize", str(tmp_path / "missing.jpg")])
    assert code == 1
    assert "Image not found" in capsys.readouterr().err


def test_recognize_unreadable_file(capsys, tmp_path: Path) -> None:
    path = tmp_path / "notes.jpg"
    path.write_bytes(b"plain text, not an image")
    code = cli.main(["recognize", str(path)])
    assert code == 1
    assert "Cannot read image" in capsys.readouterr().err


def test_no_command_prints_help(capsys) -> None:
    assert cli.main([]) == 0
    assert "recognize" in capsys.readouterr().out


def test_recognize_malformed_base_url_exits_1(capsys, image_file: Path) -> None:
    code = cli.main(["recognize", str(image_file), "--base-url", "http://host:abc"])
    assert code == 1
    assert "Invalid recognition service URL" in capsys.readouterr().err


@pytest.mark.parametrize("timeout", ["0", "-5", "soon"])
def test_recognize_rejects_non_positive_timeout(capsys, image_file: Path, timeout: str) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["recognize", str(image_file), "--timeout", timeout])
    assert excinfo.value.code == 2
    assert "--timeout" in capsys.readouterr().err
