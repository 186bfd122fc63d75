"""
Pytest configuration and fixtures
"""
import pytest
import sys
from pathlib import Path
from unittest.mock import MagicMock

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.cards.cache import ResponseCache
from src.cards.service import CardService
from src.cards.store import CardStore
from src.cards.uploads import UploadCoordinator
from src.database.connection import DatabaseConnection

SIGNED_URL = "https://riskmap-images.s3.amazonaws.com/originals/abc1234.jpg?X-Amz-Signature=abc"


@pytest.fixture
def db(tmp_path):
    """Fresh SQLite database with the cards table."""
    connection = DatabaseConnection(database_url=f"sqlite:///{tmp_path / 'cards.db'}")
    connection.create_tables()
    yield connection
    connection.close()


@pytest.fixture
def store(db):
    return CardStore(db)


@pytest.fixture
def s3_client():
    """Mocked boto3 S3 client."""
    client = MagicMock()
    client.generate_presigned_url.return_value = SIGNED_URL
    return client


@pytest.fixture
def uploads(store, s3_client):
    return UploadCoordinator(store, s3_client=s3_client)


@pytest.fixture
def cache():
    """Isolated response cache per test."""
    return ResponseCache(ttl_seconds=60)


@pytest.fixture
def service(store, uploads, cache):
    return CardService(store=store, uploads=uploads, cache=cache)


@pytest.fixture
def client(service):
    """API test client wired to the isolated service."""
    from fastapi.testclient import TestClient
    from src.api.dependencies import get_card_service
    from src.api.main import app

    app.dependency_overrides[get_card_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def new_card():
    """Card creation body."""
    return {
        "username": "citizen_jkt",
        "network": "twitter",
        "language": "en",
    }


@pytest.fixture
def flood_report():
    """Well-formed flood report payload."""
    return {
        "disaster_type": "flood",
        "card_data": {
            "report_type": "flood",
            "flood_depth": 30,
        },
        "text": "Water up to the knees on Jalan Sudirman",
        "created_at": "2026-10-19T08:30:00Z",
        "location": {
            "lat": -6.2088,
            "lng": 106.8456,
        },
    }


@pytest.fixture
def earthquake_report():
    """Well-formed non-flood report payload."""
    return {
        "disaster_type": "earthquake",
        "card_data": {
            "report_type": "structure",
        },
        "text": "",
        "created_at": "2026-10-19T09:00:00+07:00",
        "location": {
            "lat": -7.7956,
            "lng": 110.3695,
        },
    }
