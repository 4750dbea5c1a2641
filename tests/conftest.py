"""
Pytest configuration for Sunrise DA adapter tests.

This file helps pytest find and run tests correctly by setting up the Python path
and shared fixtures.
"""

import base64
import hashlib
import os
import sys
import threading
from unittest.mock import MagicMock

import pytest
import requests

# Add the source directory to the Python path to help with imports
src_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if src_root not in sys.path:
    sys.path.insert(0, src_root)

from sunrise_da.core.config import AdapterConfig


def _mock_response(status_code=200, json_data=None, json_error=None):
    """Build a mock requests.Response."""
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Server Error", response=response
        )
    else:
        response.raise_for_status.return_value = None
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    return response


class FakeBlobService:
    """In-memory stand-in for a requests.Session talking to the blob service.

    Publishing stores the blob under a locator, fetching returns it. Blobs
    listed in ``locators`` get that exact locator; blobs in ``failing`` get
    an HTTP 500 on publish.
    """

    def __init__(self, locators=None, failing=()):
        self.locators = dict(locators or {})
        self.failing = set(failing)
        self.store = {}
        self.published = []
        self.requests = []
        self.lock = threading.Lock()

    def post(self, url, json=None, timeout=None):
        with self.lock:
            self.requests.append(("POST", url, json, timeout))

        data = base64.b64decode(json["blob"])
        if data in self.failing:
            return _mock_response(500)

        locator = self.locators.get(data) or f"ipfs://{hashlib.sha256(data).hexdigest()}"
        with self.lock:
            self.store[locator] = data
            self.published.append(locator)
        return _mock_response(200, {"tx_hash": "0xabc", "metadata_uri": locator})

    def get(self, url, params=None, timeout=None):
        with self.lock:
            self.requests.append(("GET", url, params, timeout))
            data = self.store.get(params["metadata_uri"])
        if data is None:
            return _mock_response(404)
        return _mock_response(200, {"blob": base64.b64encode(data).decode("ascii")})

    def close(self):
        pass


@pytest.fixture
def adapter_config():
    """Create an adapter config pointing at a fake blob service."""
    return AdapterConfig(
        server_url="http://sunrise.test",
        data_shard_count=10,
        parity_shard_count=5,
        request_timeout=5.0,
        max_concurrency=4,
    )


@pytest.fixture
def make_response():
    """Factory for mock HTTP responses."""
    return _mock_response


@pytest.fixture
def blob_service():
    """Create a fake blob service with the locators used across tests."""
    return FakeBlobService(locators={b"A": "loc1", b"BB": "loc2"})


@pytest.fixture
def failing_blob_service():
    """Create a fake blob service that rejects the blob b"BB"."""
    return FakeBlobService(locators={b"A": "loc1"}, failing={b"BB"})
