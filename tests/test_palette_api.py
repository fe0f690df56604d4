"""
API tests for the /v1/palette endpoints.
"""

import base64
from collections import Counter

import pytest
from fastapi.testclient import TestClient

from main import app
from palette_service.config import config


COLORS = ["#FF0000", "#00FF00", "#0000FF", "#FF0001", "#FFFF00", "#00FFFF"]


def test_health_check(test_client, ready_runtime):
    """Health endpoint reports readiness."""
    response = test_client.get("/healthz")

    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert data["service"] == "palette-service"
    assert data["ready"] is True


def test_health_check_not_ready(test_client, cold_runtime):
    response = test_client.get("/healthz")
    assert response.status_code == 200
    assert response.json()["ready"] is False


class TestBuildPaletteEndpoint:
    """Test POST /v1/palette"""

    def test_success(self, test_client, ready_runtime):
        response = test_client.post("/v1/palette", json={"hexcodes": COLORS, "cluster_count": 3})

        assert response.status_code == 200
        data = response.json()
        assert Counter(data["colors"]) == Counter(COLORS)
        assert data["weights"] == [1] * len(COLORS)
        assert len(data["labels"]) == len(COLORS)
        assert data["color_space"] == "lch"
        assert data["sort_order"] == "hue_first"
        assert data["request_id"].startswith("pal-")
        assert data["swatch_png_b64"] is None
        assert data["figure"] is None

    def test_matches_direct_pipeline_call(self, test_client, ready_runtime):
        from palette_service.services.palette import build_palette

        response = test_client.post(
            "/v1/palette", json={"hexcodes": COLORS, "cluster_count": 2, "color_space": "hsl"}
        )
        assert response.json()["colors"] == list(build_palette(COLORS, 2, "hsl").colors)

    def test_artifacts(self, test_client, ready_runtime):
        response = test_client.post(
            "/v1/palette",
            json={"hexcodes": COLORS, "cluster_count": 2, "include_swatch": True, "include_figure": True}
        )

        assert response.status_code == 200
        data = response.json()
        png = base64.b64decode(data["swatch_png_b64"])
        assert png.startswith(b"\x89PNG")
        assert data["figure"]["data"][0]["marker"]["color"] == data["colors"]

    def test_invalid_hexcodes(self, test_client, ready_runtime):
        response = test_client.post(
            "/v1/palette", json={"hexcodes": ["#FF0000", "red", "#00FF0"], "cluster_count": 1}
        )

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["kind"] == "InvalidInput"
        assert detail["invalid_values"] == ["red", "#00FF0"]

    @pytest.mark.parametrize("k", [0, 21, 7])
    def test_invalid_cluster_count(self, test_client, ready_runtime, k):
        response = test_client.post("/v1/palette", json={"hexcodes": COLORS, "cluster_count": k})

        assert response.status_code == 422
        assert response.json()["detail"]["kind"] == "InvalidClusterCount"

    def test_unknown_color_space_rejected_by_schema(self, test_client, ready_runtime):
        response = test_client.post(
            "/v1/palette", json={"hexcodes": COLORS, "cluster_count": 2, "color_space": "cmyk"}
        )
        assert response.status_code == 422

    def test_not_ready(self, test_client, cold_runtime):
        response = test_client.post("/v1/palette", json={"hexcodes": COLORS, "cluster_count": 2})

        assert response.status_code == 503
        assert response.json()["detail"]["kind"] == "NotReady"
        assert response.headers["retry-after"] == "1"


class TestBuildPaletteFromText:
    """Test POST /v1/palette/text"""

    def test_text_block(self, test_client, ready_runtime):
        text = "#FF0000\n\n  #00FF00  \n#0000FF\n"
        response = test_client.post("/v1/palette/text", json={"text": text, "cluster_count": 1})

        assert response.status_code == 200
        assert sorted(response.json()["colors"]) == ["#0000FF", "#00FF00", "#FF0000"]

    def test_blank_text(self, test_client, ready_runtime):
        response = test_client.post("/v1/palette/text", json={"text": "\n\n", "cluster_count": 1})

        assert response.status_code == 422
        assert response.json()["detail"]["message"] == "Please enter at least one hexcode."


class TestMetricsEndpoint:
    """Test GET /v1/palette/metrics"""

    def test_counts_requests_and_failures(self, test_client, ready_runtime):
        test_client.post("/v1/palette", json={"hexcodes": COLORS, "cluster_count": 2})
        test_client.post("/v1/palette", json={"hexcodes": ["bad"], "cluster_count": 1})

        response = test_client.get("/v1/palette/metrics")
        assert response.status_code == 200
        data = response.json()
        assert data["counters"]["palette_requests_total"] == 2
        assert data["counters"]["palette_failed_total_InvalidInput"] == 1
        assert data["cluster_count_histogram"] == {"2": 1}
        assert "clustering_duration_ms" in data["timing_stats"]

    def test_rejected_cluster_count_not_in_histogram(self, test_client, ready_runtime):
        test_client.post("/v1/palette", json={"hexcodes": COLORS, "cluster_count": 999})

        data = test_client.get("/v1/palette/metrics").json()
        assert data["counters"]["palette_failed_total_InvalidClusterCount"] == 1
        assert data["cluster_count_histogram"] == {}


class TestConfiguredDefaults:
    """Test request defaults taken from configuration"""

    def test_default_sort_order_from_config(self, test_client, ready_runtime, monkeypatch):
        monkeypatch.setattr(config, "DEFAULT_SORT_ORDER", "lightness_first")

        response = test_client.post("/v1/palette", json={"hexcodes": COLORS, "cluster_count": 1})
        assert response.status_code == 200
        assert response.json()["sort_order"] == "lightness_first"

    def test_default_color_space_from_config(self, test_client, ready_runtime, monkeypatch):
        monkeypatch.setattr(config, "DEFAULT_COLOR_SPACE", "hsl")

        response = test_client.post("/v1/palette/text", json={"text": "\n".join(COLORS), "cluster_count": 2})
        assert response.status_code == 200
        assert response.json()["color_space"] == "hsl"

    def test_explicit_option_overrides_config(self, test_client, ready_runtime, monkeypatch):
        monkeypatch.setattr(config, "DEFAULT_SORT_ORDER", "lightness_first")

        response = test_client.post(
            "/v1/palette", json={"hexcodes": COLORS, "cluster_count": 1, "sort_order": "hue_first"}
        )
        assert response.json()["sort_order"] == "hue_first"


class TestStartupInitialization:
    """Test runtime warm-up through the application lifespan"""

    def test_eager_init_warms_runtime_on_startup(self, cold_runtime, monkeypatch):
        monkeypatch.setattr(config, "EAGER_INIT", True)

        with TestClient(app) as client:
            app.state.runtime_init.result(timeout=30)
            assert cold_runtime.ready
            response = client.post("/v1/palette", json={"hexcodes": COLORS, "cluster_count": 2})
            assert response.status_code == 200

    def test_first_request_starts_init_when_eager_init_disabled(self, cold_runtime, monkeypatch):
        monkeypatch.setattr(config, "EAGER_INIT", False)

        with TestClient(app) as client:
            assert app.state.runtime_init is None
            first = client.post("/v1/palette", json={"hexcodes": COLORS, "cluster_count": 2})
            assert first.status_code == 503
            assert first.json()["detail"]["kind"] == "NotReady"

            assert cold_runtime.wait_ready(timeout=30)
            retry = client.post("/v1/palette", json={"hexcodes": COLORS, "cluster_count": 2})
            assert retry.status_code == 200
