import sys
from pathlib import Path
from unittest.mock import AsyncMock
from unittest.mock import MagicMock

import pytest

# Make 'odds_service' importable regardless of where pytest is run from.
repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from odds_service.extractor import HtmlOddsExtractor  # noqa: E402
from odds_service.quality.anomaly_detector import AnomalyDetector  # noqa: E402


@pytest.fixture
def extractor():
    return HtmlOddsExtractor()


@pytest.fixture
def detector():
    return AnomalyDetector()


# =============================================================================
# FASTAPI APP & CLIENT
# =============================================================================
@pytest.fixture
def mock_sync_service():
    """Pipeline double; keeps a real detector so the alerts endpoint has data."""
    service = MagicMock()
    service.fetch_and_save_odds = AsyncMock(return_value=0)
    service.detector = AnomalyDetector()
    return service


@pytest.fixture
async def app(mock_sync_service):
    from asgi_lifespan import LifespanManager

    from odds_service.api import app as fastapi_app
    from odds_service.api import get_sync_service

    fastapi_app.dependency_overrides[get_sync_service] = lambda: mock_sync_service
    async with LifespanManager(fastapi_app, startup_timeout=30) as manager:
        yield manager
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    from httpx import ASGITransport
    from httpx import AsyncClient

    async with AsyncClient(transport=ASGITransport(app=app.app), base_url="http://test") as ac:
        yield ac
