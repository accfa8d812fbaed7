"""Integration tests for the REST API.

Requests run through the full FastAPI stack: schema validation, command
execution, exporters and the registered error handlers.
"""

import json
from io import BytesIO
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from perforations.infrastructure.exporters import ExportManager
from perforations.web.app import create_app
from perforations.web.dependencies import get_export_manager

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures" / "configs"

GRID_SETTINGS = {
    "min_size": 0.25,
    "max_size": 0.5,
    "spacing": {"horizontal": 1, "vertical": 1},
}

EXPORT_REQUEST = {
    "panel": {"width": 24, "height": 36},
    "perforations": [{"id": "a", "position": {"x": 1, "y": 1}, "size": 0.5}],
}


@pytest.fixture
def client(tmp_path: Path) -> TestClient:
    """Test client whose persisted exports land in tmp_path."""
    app = create_app()
    app.dependency_overrides[get_export_manager] = lambda: ExportManager(tmp_path)
    return TestClient(app)


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


class TestGenerateEndpoint:
    """Tests for POST /api/v1/perforations/generate."""

    def test_generate_grid(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/perforations/generate",
            json={"panel": {"width": 4, "height": 2}, "settings": GRID_SETTINGS},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["is_valid"] is True
        assert data["panel"] == {"width": 4.0, "height": 2.0, "units": "inches"}
        assert len(data["perforations"]) == 8
        assert data["statistics"]["total_perforations"] == 8
        assert data["perforations"][0]["shape"] == "circle"
        assert data["generated_at"] is not None

    def test_brightness_sizes_uniformly(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/perforations/generate",
            json={
                "panel": {"width": 4, "height": 2},
                "settings": GRID_SETTINGS,
                "brightness": 0,
            },
        )
        sizes = {p["size"] for p in response.json()["perforations"]}
        assert sizes == {0.5}

    def test_image_analysis_mean_drives_sizes(self, client: TestClient) -> None:
        """The nested analysis payload sizes holes like a scalar brightness."""
        response = client.post(
            "/api/v1/perforations/generate",
            json={
                "panel": {"width": 4, "height": 2},
                "settings": GRID_SETTINGS,
                "imageAnalysis": {"statistics": {"mean": 255, "std_dev": 0}},
            },
        )
        assert response.status_code == 200
        sizes = {p["size"] for p in response.json()["perforations"]}
        assert sizes == {0.25}

    def test_image_analysis_mean_out_of_range(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/perforations/generate",
            json={
                "panel": {"width": 4, "height": 2},
                "settings": GRID_SETTINGS,
                "imageAnalysis": {"statistics": {"mean": 300}},
            },
        )
        assert response.status_code == 422

    def test_application_validation_errors(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/perforations/generate",
            json={"panel": {"width": 500, "height": 2}, "settings": GRID_SETTINGS},
        )

        assert response.status_code == 422
        data = response.json()
        assert data["error_type"] == "validation"
        assert data["details"] == [{"message": "Panel width must be between 1 and 120 inches"}]

    def test_schema_validation_errors(self, client: TestClient) -> None:
        """Non-positive dimensions are rejected before the command runs."""
        response = client.post(
            "/api/v1/perforations/generate",
            json={"panel": {"width": 0, "height": 2}, "settings": GRID_SETTINGS},
        )
        assert response.status_code == 422
        assert "detail" in response.json()

    def test_custom_pattern_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/perforations/generate",
            json={
                "panel": {"width": 4, "height": 2},
                "settings": {**GRID_SETTINGS, "pattern": "custom"},
            },
        )
        assert response.status_code == 400
        assert response.json()["error_type"] == "invalid_pattern"


class TestGenerateFromConfig:
    """Tests for POST /api/v1/perforations/generate/from-config."""

    def test_minimal_config(self, client: TestClient) -> None:
        config = json.loads((FIXTURES_PATH / "valid_minimal.json").read_text())
        response = client.post(
            "/api/v1/perforations/generate/from-config", json={"config": config}
        )
        assert response.status_code == 200
        assert response.json()["statistics"]["total_perforations"] == 864

    def test_invalid_config(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/perforations/generate/from-config",
            json={"config": {"schema_version": "1.0"}},
        )
        assert response.status_code == 422
        data = response.json()
        assert data["error_type"] == "validation"
        assert {"panel", "perforation"} <= {d["path"] for d in data["details"]}

    def test_image_section_rejected(self, client: TestClient) -> None:
        config = json.loads((FIXTURES_PATH / "valid_minimal.json").read_text())
        config["schema_version"] = "1.1"
        config["image"] = {"path": "/etc/photo.png"}
        response = client.post(
            "/api/v1/perforations/generate/from-config", json={"config": config}
        )
        assert response.status_code == 422
        assert response.json()["detail"]["error_type"] == "config_error"


class TestCatalogEndpoints:
    def test_shapes(self, client: TestClient) -> None:
        response = client.get("/api/v1/perforations/shapes")
        assert response.status_code == 200
        ids = [shape["id"] for shape in response.json()["shapes"]]
        assert "circle" in ids
        assert "hexagon" in ids

    def test_patterns(self, client: TestClient) -> None:
        response = client.get("/api/v1/perforations/patterns")
        patterns = {p["id"]: p for p in response.json()["patterns"]}
        assert patterns["grid"]["supported"] is True
        assert patterns["custom"]["supported"] is False


class TestEstimationEndpoints:
    def test_calculate(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/perforations/calculate",
            json={"panel": {"width": 24, "height": 36}, "settings": GRID_SETTINGS},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["estimated_perforations"] == 864
        assert data["estimated_coverage"] == 11.04
        assert data["panel_area"] == 864

    def test_calculate_invalid(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/perforations/calculate",
            json={
                "panel": {"width": 24, "height": 36},
                "settings": {**GRID_SETTINGS, "min_size": 0.5, "max_size": 0.25},
            },
        )
        assert response.status_code == 422
        messages = [d["message"] for d in response.json()["details"]]
        assert "Maximum size must be greater than or equal to minimum size" in messages

    def test_recommendations(self, client: TestClient) -> None:
        response = client.get(
            "/api/v1/perforations/recommendations", params={"width": 24, "height": 36}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["pattern"] == "grid"
        assert data["shape"] == "square"
        assert data["coverage"] == "15-25%"

    def test_recommendations_rejects_unknown_complexity(self, client: TestClient) -> None:
        response = client.get(
            "/api/v1/perforations/recommendations",
            params={"width": 24, "height": 36, "image_complexity": "extreme"},
        )
        assert response.status_code == 422


class TestImageEndpoints:
    """Tests for the raw-body image endpoints."""

    def test_formats(self, client: TestClient) -> None:
        response = client.get("/api/v1/images/formats")
        assert response.status_code == 200
        data = response.json()
        names = [f["name"] for f in data["formats"]]
        assert names == ["JPEG", "PNG", "GIF", "BMP", "WEBP"]
        assert data["formats"][1] == {"name": "PNG", "extension": "png", "mime_type": "image/png"}
        assert data["max_bytes"] == 50 * 1024 * 1024

    def test_analyze(self, client: TestClient, gradient_png: bytes) -> None:
        response = client.post("/api/v1/images/analyze", content=gradient_png)

        assert response.status_code == 200
        data = response.json()
        assert (data["width"], data["height"]) == (16, 8)
        assert data["format"] == "PNG"
        assert data["channels"] == 3
        assert data["size"] == len(gradient_png)
        assert len(data["statistics"]["histogram"]) == 256

    def test_generate(self, client: TestClient, black_png: bytes) -> None:
        response = client.post(
            "/api/v1/images/generate",
            content=black_png,
            params={
                "canvas_width": 4,
                "canvas_height": 4,
                "min_spacing": 1,
                "max_spacing": 1,
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["summary"]["total_perforations"] == 16
        assert len(data["perforations"]) == 16
        assert data["processed_image"].startswith("data:image/png;base64,")

    def test_generate_invalid_options(self, client: TestClient, black_png: bytes) -> None:
        response = client.post(
            "/api/v1/images/generate",
            content=black_png,
            params={"min_size": 30, "max_size": 20},
        )
        assert response.status_code == 422
        assert response.json()["error_type"] == "validation"

    def test_preview(self, client: TestClient, black_png: bytes) -> None:
        response = client.post("/api/v1/images/preview", content=black_png)

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        with Image.open(BytesIO(response.content)) as overlay:
            assert overlay.size == (4, 4)

    def test_thresholds(self, client: TestClient, black_png: bytes) -> None:
        response = client.post("/api/v1/images/thresholds", content=black_png)

        assert response.status_code == 200
        data = response.json()
        assert data["median"] == 0
        assert data["histogram"][0] == 16

    def test_empty_body(self, client: TestClient) -> None:
        response = client.post("/api/v1/images/analyze", content=b"")
        assert response.status_code == 400
        assert response.json()["error_type"] == "image_decode"

    def test_undecodable_body(self, client: TestClient) -> None:
        response = client.post("/api/v1/images/thresholds", content=b"not an image")
        assert response.status_code == 400
        assert response.json()["error_type"] == "image_decode"

    def test_oversized_pixel_count(
        self, client: TestClient, gradient_png: bytes, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
        response = client.post("/api/v1/images/analyze", content=gradient_png)
        assert response.status_code == 400
        assert response.json()["error_type"] == "image_decode"


class TestExportEndpoints:
    """Tests for the export endpoints."""

    def test_formats(self, client: TestClient) -> None:
        response = client.get("/api/v1/export/formats")
        assert response.status_code == 200
        formats = response.json()["formats"]
        assert [f["name"] for f in formats] == ["dxf", "pdf", "svg"]
        assert formats[2]["mime_type"] == "image/svg+xml"

    def test_preview(self, client: TestClient) -> None:
        response = client.post("/api/v1/export/preview", json=EXPORT_REQUEST)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("image/svg+xml")
        assert 'data-id="a"' in response.text

    def test_export_format_download(self, client: TestClient) -> None:
        response = client.post("/api/v1/export/dxf", json=EXPORT_REQUEST)
        assert response.status_code == 200
        disposition = response.headers["content-disposition"]
        assert disposition.startswith("attachment; filename=panel_24x36inches_")
        assert disposition.endswith(".dxf")
        assert b"PERFORATIONS" in response.content

    def test_unknown_format(self, client: TestClient) -> None:
        response = client.post("/api/v1/export/stl", json=EXPORT_REQUEST)
        assert response.status_code == 400
        data = response.json()
        assert data["error_type"] == "unsupported_format"
        assert data["details"]["format"] == "stl"

    def test_invalid_export_settings(self, client: TestClient) -> None:
        response = client.post("/api/v1/export/svg", json={**EXPORT_REQUEST, "scale": 20})
        assert response.status_code == 422
        data = response.json()
        assert data["error_type"] == "export"
        assert data["details"] == [{"message": "Scale must be between 0.1 and 10", "format": "svg"}]

    def test_generate_then_download(self, client: TestClient, tmp_path: Path) -> None:
        response = client.post(
            "/api/v1/export/generate", json={**EXPORT_REQUEST, "format": "pdf"}
        )
        assert response.status_code == 200
        result = response.json()
        assert result["mime_type"] == "application/pdf"
        assert (tmp_path / "pdf" / result["filename"]).is_file()

        download = client.get(result["download_url"])
        assert download.status_code == 200
        assert download.content.startswith(b"%PDF")
        assert len(download.content) == result["size"]

    def test_download_missing(self, client: TestClient) -> None:
        response = client.get("/api/v1/export/download/svg/missing.svg")
        assert response.status_code == 404
        assert response.json()["detail"]["error_type"] == "not_found"
