"""
Pytest configuration and fixtures
"""
import base64
import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from app.main import app


def make_image(fmt: str = "JPEG", size=(37, 23), mode: str = "RGB", color=(200, 30, 90)) -> bytes:
    """Encode a solid test image in memory."""
    if mode == "P":
        img = Image.new("RGB", size, color).convert("P")
    elif mode == "RGBA":
        img = Image.new("RGBA", size, color + (128,))
    else:
        img = Image.new(mode, size, color)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def fake_result(filename: str = "photo.jpg") -> dict:
    """A well-formed conversion response body."""
    base = filename.split(".")[0]
    tiff = base64.b64encode(b"II*\x00fake").decode("ascii")
    return {
        "success": True,
        "previewUrl": "data:image/jpeg;base64," + base64.b64encode(b"\xff\xd8preview").decode("ascii"),
        "downloadData": f"data:image/tiff;base64,{tiff}",
        "filename": f"{base}_cmyk.tiff",
        "metadata": {"width": 4, "height": 3, "format": "TIFF (CMYK)", "size": 8},
    }


@pytest.fixture
def client():
    """Create a test client"""
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def jpeg_bytes():
    return make_image("JPEG", size=(37, 23))


@pytest.fixture
def png_bytes():
    return make_image("PNG", size=(10, 20), mode="RGBA")
