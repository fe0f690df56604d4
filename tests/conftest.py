"""
Test configuration and fixtures for palette service tests.
"""
import pytest
from fastapi.testclient import TestClient

# Import the main app
from main import app
from palette_service.services.palette.runtime import get_runtime
from palette_service.utils.metrics import reset_metrics


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def ready_runtime():
    """Global runtime, initialized."""
    runtime = get_runtime()
    runtime.initialize()
    return runtime


@pytest.fixture
def cold_runtime():
    """Global runtime in its not-yet-initialized state; re-initialized afterwards."""
    runtime = get_runtime()
    runtime.reset()
    yield runtime
    runtime.initialize()


@pytest.fixture(autouse=True)
def reset_metrics_between_tests():
    """Reset metrics before each test."""
    reset_metrics()


@pytest.fixture
def rainbow_hexcodes():
    """Distinct, well-spread colors."""
    return ["#FF0000", "#FF8000", "#FFFF00", "#00FF00", "#00FFFF", "#0000FF", "#8000FF", "#FF00FF"]
