import pytest

from api import config
from api.index import app
from tests.fakes import UpstreamRecorder


@pytest.fixture
def client():
    app.config['TESTING'] = True
    with app.test_client() as c:
        yield c


@pytest.fixture
def upstream(monkeypatch):
    """Patch requests.get; tests set .response or .error before requesting."""
    recorder = UpstreamRecorder()
    monkeypatch.setattr('api.relay.requests.get', recorder)
    return recorder


@pytest.fixture(autouse=True)
def small_chunks(monkeypatch):
    monkeypatch.setattr(config, 'CHUNK_SIZE', 4)
    monkeypatch.setattr(config, 'UPSTREAM_TIMEOUT', None)
