"""
HTTP clients for the Sunrise blob service.

This module provides the publish and fetch clients used by the DA adapter.
Each call performs exactly one HTTP request and never retries; retry policy
belongs to the caller.
"""

import binascii
import logging
from typing import Iterable, List, Optional

import requests
from requests.adapters import HTTPAdapter
from pydantic import ValidationError

from sunrise_da.core.config import AdapterConfig
from sunrise_da.core.da.errors import FetchError, PublishError
from sunrise_da.core.models.blob import GetBlobResponse, PublishRequest, PublishResponse

# Set up logging
logger = logging.getLogger(__name__)

PUBLISH_PATH = "/api/publish"
GET_BLOB_PATH = "/api/get-blob"


def create_session(config: AdapterConfig) -> requests.Session:
    """Create an HTTP session whose connection pool fits the publish fan-out.

    Args:
        config: Adapter configuration

    Returns:
        requests.Session: Session shared by the publish and fetch clients
    """
    session = requests.Session()
    adapter = HTTPAdapter(
        pool_connections=config.max_concurrency,
        pool_maxsize=config.max_concurrency,
    )
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update({"Accept": "application/json"})
    return session


class BlobPublishClient:
    """
    Client for the blob service's publish endpoint.

    Safe to share between threads: it holds no mutable state besides the
    underlying session's connection pool.
    """

    def __init__(self, config: AdapterConfig, session: Optional[requests.Session] = None):
        """Initialize the publish client.

        Args:
            config: Adapter configuration (server URL, shard counts, protocol)
            session: Optional HTTP session, a new one is created if None
        """
        self.config = config
        self.session = session or create_session(config)
        self.url = f"{config.server_url}{PUBLISH_PATH}"

    def publish(self, blob: bytes, timeout: Optional[float] = None) -> str:
        """Publish one blob and return its locator.

        Args:
            blob: Raw blob bytes
            timeout: Request timeout in seconds, defaults to the configured one

        Returns:
            str: The ``metadata_uri`` locator issued by the service

        Raises:
            PublishError: If the request fails or the response is malformed
        """
        request = PublishRequest.for_blob(
            blob,
            data_shard_count=self.config.data_shard_count,
            parity_shard_count=self.config.parity_shard_count,
            protocol=self.config.protocol,
        )

        logger.debug(f"Publishing blob of {len(blob)} bytes to {self.url}")
        try:
            response = self.session.post(
                self.url,
                json=request.model_dump(),
                timeout=timeout if timeout is not None else self.config.request_timeout,
            )
            response.raise_for_status()
            published = PublishResponse.model_validate(response.json())
        except (requests.RequestException, ValueError, ValidationError) as e:
            logger.error(f"Error publishing blob of {len(blob)} bytes: {str(e)}")
            raise PublishError(f"Failed to publish blob: {str(e)}") from e

        logger.debug(
            f"Published blob: metadata_uri={published.metadata_uri} tx_hash={published.tx_hash}"
        )
        return published.metadata_uri

    def close(self) -> None:
        self.session.close()


class BlobFetchClient:
    """Client for the blob service's get-blob endpoint."""

    def __init__(self, config: AdapterConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or create_session(config)
        self.url = f"{config.server_url}{GET_BLOB_PATH}"

    def fetch(self, locator: str, timeout: Optional[float] = None) -> bytes:
        """Fetch and decode one blob.

        Args:
            locator: Locator returned by a previous publish
            timeout: Request timeout in seconds, defaults to the configured one

        Returns:
            bytes: The blob data

        Raises:
            FetchError: If the request fails or the response cannot be decoded
        """
        logger.debug(f"Fetching blob {locator} from {self.url}")
        try:
            response = self.session.get(
                self.url,
                params={"metadata_uri": locator},
                timeout=timeout if timeout is not None else self.config.request_timeout,
            )
            response.raise_for_status()
            return GetBlobResponse.model_validate(response.json()).decode()
        except (requests.RequestException, ValueError, ValidationError, binascii.Error) as e:
            logger.error(f"Error fetching blob {locator}: {str(e)}")
            raise FetchError(f"Failed to fetch blob {locator}: {str(e)}", locator=locator) from e

    def fetch_many(self, locators: Iterable[str], timeout: Optional[float] = None) -> List[bytes]:
        """Fetch blobs one after another, failing on the first error.

        The returned list is in the same order as ``locators``.
        """
        return [self.fetch(locator, timeout=timeout) for locator in locators]

    def close(self) -> None:
        self.session.close()
