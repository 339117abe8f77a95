import base64
from urllib.parse import urlsplit

import pytest
import requests

from ecbattack.oracle import EcbOracle
from ecbattack.remote import RemoteOracle
from ecbattack.runner import attack
from ecbattack.server import create_app


class FlaskResponse:
    def __init__(self, response):
        self._response = response
        self.status_code = response.status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._response.get_json()


class FlaskSession:
    """Routes RemoteOracle's requests into a Flask test client."""

    def __init__(self, client):
        self.client = client
        self.closed = False

    def post(self, url, json=None, timeout=None):
        return FlaskResponse(self.client.post(urlsplit(url).path, json=json))

    def get(self, url, timeout=None):
        return FlaskResponse(self.client.get(urlsplit(url).path))

    def close(self):
        self.closed = True


@pytest.fixture
def oracle():
    return EcbOracle(bytes(range(16)), b"FLAG{f4k3_f0r_t3st1ng}", prefix=b"user=")


@pytest.fixture
def client(oracle):
    return create_app(oracle).test_client()


def test_encrypt(client, oracle):
    response = client.post("/api/encrypt", json={"input": base64.b64encode(b"AAAA").decode()})
    assert response.status_code == 200
    assert base64.b64decode(response.get_json()["ciphertext"]) == oracle(b"AAAA")


def test_encrypt_missing_field(client):
    response = client.post("/api/encrypt", json={})
    assert response.status_code == 400
    assert "error" in response.get_json()


def test_encrypt_bad_base64(client):
    response = client.post("/api/encrypt", json={"input": "not base64!"})
    assert response.status_code == 400


def test_status(client):
    data = client.get("/status").get_json()
    assert data["status"] == "running"
    assert data["block_size"] == 16


def test_remote_attack(client):
    remote = RemoteOracle("http://oracle.test/", session=FlaskSession(client))
    assert remote.status()["service"] == "ECB Oracle"

    result = attack(remote)
    assert result.recovered == b"FLAG{f4k3_f0r_t3st1ng}"
    assert result.prefix_length == 5


def test_remote_error_propagates(client):
    remote = RemoteOracle("http://oracle.test", session=FlaskSession(client))
    remote.base_url = "http://oracle.test/missing"
    with pytest.raises(requests.HTTPError):
        remote(b"AAAA")


def test_remote_closes_its_own_session(monkeypatch):
    sessions = []

    class TrackedSession(requests.Session):
        def __init__(self):
            super().__init__()
            self.closed = False
            sessions.append(self)

        def close(self):
            self.closed = True
            super().close()

    monkeypatch.setattr(requests, "Session", TrackedSession)
    with RemoteOracle("http://oracle.test") as remote:
        assert remote.session is sessions[0]
        assert not sessions[0].closed
    assert sessions[0].closed


def test_remote_leaves_caller_session_open(client):
    session = FlaskSession(client)
    with RemoteOracle("http://oracle.test", session=session) as remote:
        assert remote(b"A")
    assert not session.closed
