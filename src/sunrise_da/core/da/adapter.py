"""
Sunrise DA adapter for the Sunrise Rollkit integration.

This module implements the generic DA interface (max blob size, submit, get,
get IDs, proofs, commitments and validation) on top of the Sunrise blob
publishing service.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Union

from sunrise_da.core.config import AdapterConfig
from sunrise_da.core.da.client import (
    BlobFetchClient,
    BlobPublishClient,
    create_session,
)
from sunrise_da.core.da.codec import HeightID, LocatorID, as_identifier, encode_height
from sunrise_da.core.da.errors import InvalidIdentifierError
from sunrise_da.core.da.submitter import SubmissionCoordinator

# Set up logging
logger = logging.getLogger(__name__)

# 64 * 64 * 500 bytes
MAX_BLOB_SIZE = 2_048_000

IDLike = Union[bytes, str, LocatorID, HeightID]


class UnsupportedResult(list):
    """Empty result of an operation this adapter does not implement.

    Compares equal to an empty list, but ``supported`` lets callers tell
    "nothing to return" apart from "not implemented here".
    """

    supported = False

    def __init__(self, operation: str):
        super().__init__()
        self.operation = operation

    def __repr__(self) -> str:
        return f"UnsupportedResult({self.operation!r})"


class SunriseDA:
    """
    DA adapter backed by the Sunrise blob service.

    Submissions are published concurrently through a
    :class:`SubmissionCoordinator`; retrievals go through a
    :class:`BlobFetchClient`. Namespaces and gas prices are accepted for
    interface compatibility and ignored.
    """

    SUPPORTED_OPERATIONS = ("max_blob_size", "submit", "get", "get_ids")
    UNSUPPORTED_OPERATIONS = ("get_proofs", "commit", "validate")

    def __init__(
        self,
        config: AdapterConfig,
        publisher: Optional[BlobPublishClient] = None,
        fetcher: Optional[BlobFetchClient] = None,
    ):
        """Initialize the adapter.

        Args:
            config: Adapter configuration
            publisher: Optional publish client, created from config if None
            fetcher: Optional fetch client, created from config if None
        """
        self.config = config

        session = None
        if publisher is None or fetcher is None:
            session = create_session(config)
        self.publisher = publisher or BlobPublishClient(config, session)
        self.fetcher = fetcher or BlobFetchClient(config, session)
        self._session = session

        self.coordinator = SubmissionCoordinator(
            self.publisher,
            max_concurrency=config.max_concurrency,
            max_blob_size=MAX_BLOB_SIZE,
        )

        logger.info(
            f"Sunrise DA adapter initialized with server_url={config.server_url}, "
            f"shards={config.data_shard_count}+{config.parity_shard_count}"
        )

    def max_blob_size(self) -> int:
        """Return the largest blob size accepted by :meth:`submit`."""
        return MAX_BLOB_SIZE

    def submit(
        self,
        blobs: Sequence[bytes],
        gas_price: float = -1.0,
        namespace: bytes = b"",
        timeout: Optional[float] = None,
    ) -> List[bytes]:
        """Publish blobs and return their identifiers.

        All-or-nothing: either every blob yields one identifier, or
        ``SubmissionError`` is raised and no identifiers are returned.
        The order of identifiers follows completion, not input order.
        """
        return self.coordinator.submit(blobs, timeout=timeout)

    def get(
        self,
        ids: Iterable[IDLike],
        namespace: bytes = b"",
        timeout: Optional[float] = None,
    ) -> List[bytes]:
        """Fetch blobs by locator identifier, in the order of ``ids``.

        Raises:
            InvalidIdentifierError: If an identifier is not a locator
            FetchError: On the first identifier that cannot be fetched
        """
        locators = []
        for value in ids:
            identifier = as_identifier(value)
            if isinstance(identifier, HeightID):
                raise InvalidIdentifierError(
                    f"Height identifier {identifier.height} cannot be fetched, "
                    "only identifiers returned by submit can"
                )
            locators.append(identifier.locator)

        blobs = self.fetcher.fetch_many(locators, timeout=timeout)
        logger.info(f"Fetched {len(blobs)} blobs")
        return blobs

    def get_ids(self, height: int, namespace: bytes = b"") -> List[bytes]:
        """Return the single height identifier for ``height``.

        The blob service is not queried; the identifier names the height
        only and is rejected by :meth:`get`. Heights must lie in
        ``[0, 2**56)``.
        """
        return [encode_height(height)]

    def get_proofs(self, ids: Sequence[IDLike], namespace: bytes = b"") -> UnsupportedResult:
        return UnsupportedResult("get_proofs")

    def commit(self, blobs: Sequence[bytes], namespace: bytes = b"") -> UnsupportedResult:
        return UnsupportedResult("commit")

    def validate(
        self, ids: Sequence[IDLike], proofs: Sequence[bytes], namespace: bytes = b""
    ) -> UnsupportedResult:
        return UnsupportedResult("validate")

    def capabilities(self) -> Dict[str, bool]:
        """Map every DA interface operation to whether it is implemented."""
        capabilities = {name: True for name in self.SUPPORTED_OPERATIONS}
        capabilities.update({name: False for name in self.UNSUPPORTED_OPERATIONS})
        return capabilities

    def close(self) -> None:
        """Stop the publish workers and release HTTP connections."""
        self.coordinator.shutdown()
        if self._session is not None:
            self._session.close()
        logger.info("Sunrise DA adapter closed")

    def __enter__(self) -> "SunriseDA":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
