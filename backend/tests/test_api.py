"""
Tests for the conversion endpoint
"""
import io

import pytest
from PIL import Image

from app.conversion.datauri import decode_data_uri
from app.conversion.service import get_conversion_service
from app.main import app
from conftest import make_image


class ExplodingService:
    """Stands in for the pipeline; any call is a test failure."""

    calls = 0

    @staticmethod
    def is_allowed_type(content_type):
        return content_type in ("image/jpeg", "image/jpg", "image/png")

    def convert(self, *args, **kwargs):
        ExplodingService.calls += 1
        raise AssertionError("pipeline must not run")


@pytest.fixture
def exploding_service():
    ExplodingService.calls = 0
    app.dependency_overrides[get_conversion_service] = ExplodingService
    yield ExplodingService


class TestConvertSuccess:
    """Tests for POST /api/convert with valid images"""

    def test_convert_jpeg(self, client, jpeg_bytes):
        response = client.post("/api/convert", files={"image": ("photo.jpg", jpeg_bytes, "image/jpeg")})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["filename"] == "photo_cmyk.tiff"
        assert data["metadata"]["width"] == 37
        assert data["metadata"]["height"] == 23
        assert data["metadata"]["format"] == "TIFF (CMYK)"
        assert data["previewUrl"].startswith("data:image/jpeg;base64,")
        assert data["downloadData"].startswith("data:image/tiff;base64,")

    def test_download_data_is_cmyk_tiff(self, client, jpeg_bytes):
        response = client.post("/api/convert", files={"image": ("photo.jpg", jpeg_bytes, "image/jpeg")})
        mime, payload = decode_data_uri(response.json()["downloadData"])

        assert mime == "image/tiff"
        assert response.json()["metadata"]["size"] == len(payload)
        with Image.open(io.BytesIO(payload)) as tiff:
            assert tiff.format == "TIFF"
            assert tiff.mode == "CMYK"
            assert tiff.size == (37, 23)
            assert tiff.tag_v2[262] == 5  # PhotometricInterpretation: separated
            assert tiff.tag_v2[277] == 4  # SamplesPerPixel
            assert tiff.info["compression"] == "tiff_lzw"
            assert tiff.tag_v2[317] == 2  # Predictor: horizontal differencing

    def test_preview_is_displayable_jpeg(self, client, png_bytes):
        response = client.post("/api/convert", files={"image": ("logo.png", png_bytes, "image/png")})
        _, payload = decode_data_uri(response.json()["previewUrl"])

        with Image.open(io.BytesIO(payload)) as preview:
            assert preview.format == "JPEG"
            assert preview.size == (10, 20)

    @pytest.mark.parametrize(
        "name,data,content_type,size",
        [
            ("wide.jpeg", make_image("JPEG", size=(120, 7)), "image/jpeg", (120, 7)),
            ("legacy.jpg", make_image("JPEG", size=(5, 9)), "image/jpg", (5, 9)),
            ("alpha.png", make_image("PNG", size=(33, 44), mode="RGBA"), "image/png", (33, 44)),
            ("palette.png", make_image("PNG", size=(16, 8), mode="P"), "image/png", (16, 8)),
            ("gray.png", make_image("PNG", size=(9, 3), mode="L", color=120), "image/png", (9, 3)),
        ],
    )
    def test_metadata_matches_input_dimensions(self, client, name, data, content_type, size):
        response = client.post("/api/convert", files={"image": (name, data, content_type)})

        assert response.status_code == 200
        meta = response.json()["metadata"]
        assert (meta["width"], meta["height"]) == size

    @pytest.mark.parametrize(
        "original,expected",
        [
            ("photo.jpg", "photo_cmyk.tiff"),
            ("archive.tar.png", "archive_cmyk.tiff"),
            ("IMG 0042.JPEG", "IMG 0042_cmyk.tiff"),
        ],
    )
    def test_filename_truncated_at_first_dot(self, client, jpeg_bytes, original, expected):
        response = client.post("/api/convert", files={"image": (original, jpeg_bytes, "image/jpeg")})

        assert response.json()["filename"] == expected


class TestConvertValidation:
    """Tests for rejected requests"""

    def test_no_file_provided(self, client):
        response = client.post("/api/convert")

        assert response.status_code == 400
        assert response.json() == {"error": "No file provided"}

    def test_wrong_field_name(self, client, jpeg_bytes):
        response = client.post("/api/convert", files={"file": ("photo.jpg", jpeg_bytes, "image/jpeg")})

        assert response.status_code == 400
        assert response.json()["error"] == "No file provided"

    @pytest.mark.parametrize("content_type", ["image/gif", "image/webp", "application/pdf", "text/plain", "image/tiff"])
    def test_invalid_file_type(self, client, exploding_service, content_type):
        response = client.post("/api/convert", files={"image": ("photo.jpg", b"whatever", content_type)})

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid file type")
        assert exploding_service.calls == 0

    def test_missing_file_does_not_run_pipeline(self, client, exploding_service):
        response = client.post("/api/convert", data={"note": "hello"})

        assert response.status_code == 400
        assert exploding_service.calls == 0

    def test_text_image_field_is_not_a_file(self, client, exploding_service):
        response = client.post("/api/convert", data={"image": "photo.jpg"})

        assert response.status_code == 400
        assert response.json() == {"error": "No file provided"}
        assert exploding_service.calls == 0

    def test_multipart_without_boundary(self, client, exploding_service):
        response = client.post(
            "/api/convert",
            content=b"garbage",
            headers={"Content-Type": "multipart/form-data"},
        )

        assert response.status_code == 400
        data = response.json()
        assert set(data) == {"error"}
        assert data["error"]
        assert exploding_service.calls == 0


class TestConvertFailure:
    """Tests for pipeline failures"""

    def test_corrupt_image(self, client):
        response = client.post("/api/convert", files={"image": ("broken.png", b"not an image", "image/png")})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to convert image. Please try again."}

    def test_truncated_jpeg(self, client, jpeg_bytes):
        response = client.post("/api/convert", files={"image": ("cut.jpg", jpeg_bytes[:40], "image/jpeg")})

        assert response.status_code == 500
        assert "error" in response.json()


class TestPreflightAndInfo:
    """Tests for OPTIONS /api/convert and informational routes"""

    def test_options_advertises_cors(self, client):
        response = client.options("/api/convert")

        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "*"
        assert "POST" in response.headers["access-control-allow-methods"]
        assert response.headers["access-control-allow-headers"] == "Content-Type"

    def test_browser_preflight(self, client):
        response = client.options(
            "/api/convert",
            headers={
                "Origin": "http://example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-methods"] == "POST, OPTIONS"
        assert response.headers["access-control-allow-headers"] == "Content-Type"
        assert "access-control-allow-credentials" not in response.headers

    def test_cross_origin_post_allowed(self, client, jpeg_bytes):
        response = client.post(
            "/api/convert",
            files={"image": ("photo.jpg", jpeg_bytes, "image/jpeg")},
            headers={"Origin": "http://example.com"},
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"

    def test_health(self, client):
        assert client.get("/api/health").json() == {"status": "ok"}

    def test_formats(self, client):
        data = client.get("/api/formats").json()

        assert data["input"] == ["image/jpeg", "image/jpg", "image/png"]
        assert data["output"]["label"] == "TIFF (CMYK)"
        assert data["preview"]["quality"] == 90

    def test_limits(self, client):
        assert client.get("/api/limits").json()["max_duration_seconds"] == 30

    def test_index_page(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "/api/convert" in response.text
        assert "About CMYK Conversion" in response.text

    def test_index_page_clear_stays_enabled_during_batch(self, client):
        page = client.get("/").text

        assert "getElementById('clear-all').disabled" not in page
        assert "if (!item) return;" in page
