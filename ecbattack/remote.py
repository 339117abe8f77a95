"""
Client side of the HTTP oracle: turns the service into a callable oracle.
"""

import base64

import requests

from .config import HTTP_TIMEOUT


class RemoteOracle:
    def __init__(self, base_url: str, session=None, timeout: float = HTTP_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = timeout

    def __call__(self, attacker_input: bytes) -> bytes:
        """Sends input to the server and returns the raw ciphertext"""
        response = self.session.post(
            f"{self.base_url}/api/encrypt",
            json={"input": base64.b64encode(attacker_input).decode()},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return base64.b64decode(response.json()["ciphertext"])

    def status(self) -> dict:
        response = self.session.get(f"{self.base_url}/status", timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def close(self) -> None:
        """Close the session if this oracle opened it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
