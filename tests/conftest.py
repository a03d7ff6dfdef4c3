"""
Pytest configuration and shared fixtures for the footprints API tests.
"""
import copy

import pytest

from footprints import create_app
from footprints.extensions import db
from footprints.models import Building
from footprints.services.building_record import BuildingRecord
from tests.fakes import FakeSession

TEST_SOURCE_URL = "https://data.example.test/resource/footprints.json"

SAMPLE_ROWS = [
    {"bin": "1001", "cnstrct_yr": "1925", "heightroof": "120.5", "shape_area": "1500.25", "feat_code": "2100"},
    {"bin": "1002", "cnstrct_yr": "1925", "heightroof": "45", "shape_area": "800", "feat_code": "2100"},
    {"bin": "1003", "cnstrct_yr": "2001", "heightroof": "300.75", "shape_area": "5000", "feat_code": "1006"},
    {"bin": "1004", "cnstrct_yr": "1899", "heightroof": "45", "shape_area": "620.5"},
    {"bin": "1005", "heightroof": "", "shape_area": "100"},
]


@pytest.fixture
def sample_rows():
    return copy.deepcopy(SAMPLE_ROWS)


@pytest.fixture
def fake_source(monkeypatch, sample_rows):
    """Route every requests.Session created by the open data client to a fake."""
    session = FakeSession(sample_rows)
    monkeypatch.setattr("footprints.services.open_data_client.requests.Session", lambda: session)
    return session


@pytest.fixture
def app_factory():
    """Build isolated apps; each one gets its own in-memory database."""
    created = []

    def _make(**overrides):
        config = {
            'TESTING': True,
            'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
            'SECRET_KEY': 'test-secret-key',
            'BOOTSTRAP_ON_STARTUP': False,
            'RATELIMIT_ENABLED': False,
            'CACHE_TYPE': 'SimpleCache',
            'OPEN_DATA_URL': TEST_SOURCE_URL,
            'OPEN_DATA_PAGE_SIZE': 1000,
            'OPEN_DATA_MAX_RECORDS': 0,
        }
        config.update(overrides)
        app = create_app(config)
        with app.app_context():
            db.create_all()
        created.append(app)
        return app

    yield _make

    for app in created:
        with app.app_context():
            db.session.remove()
            db.drop_all()


@pytest.fixture
def app(app_factory):
    """String typing, store-backed reads."""
    return app_factory()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


@pytest.fixture
def seed():
    """Insert source rows directly, bypassing the bootstrap service. Needs an app context."""
    def _seed(rows):
        for row in rows:
            record = BuildingRecord.from_source(row)
            db.session.add(Building(**record.to_model_kwargs()))
        db.session.commit()

    return _seed


@pytest.fixture
def seeded_app(app, seed, sample_rows):
    with app.app_context():
        seed(sample_rows)
    return app
