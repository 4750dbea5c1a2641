"""
Submission coordinator for the Sunrise DA adapter.

This module fans a batch of blobs out to the publish client in parallel and
folds the per-blob outcomes into a single all-or-nothing result.
"""
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional, Sequence

from sunrise_da.core.da.client import BlobPublishClient
from sunrise_da.core.da.codec import decode_locator, encode_locator
from sunrise_da.core.da.errors import (
    BlobTooLargeError,
    InvalidIdentifierError,
    PublishError,
    SubmissionError,
)

# Set up logging
logger = logging.getLogger(__name__)


class SubmissionCoordinator:
    """
    Publishes batches of blobs concurrently.

    Every blob of a batch gets its own unit of work on a thread pool bounded
    by ``max_concurrency``. The coordinator waits for all units to finish
    before looking at the outcome, so a failed batch never leaves work
    running behind the caller's back.
    """

    def __init__(
        self,
        publisher: BlobPublishClient,
        max_concurrency: int = 16,
        max_blob_size: Optional[int] = None,
    ):
        """Initialize the coordinator.

        Args:
            publisher: Client used to publish each blob
            max_concurrency: Maximum number of concurrent publish requests
            max_blob_size: Optional size limit checked before anything is published
        """
        if max_concurrency <= 0:
            raise ValueError("max_concurrency must be greater than 0")


        self.publisher = publisher
        self.max_concurrency = max_concurrency
        self.max_blob_size = max_blob_size

        self._executor: Optional[ThreadPoolExecutor] = None
        self._closed = False
        self._lock = threading.Lock()

    def _check_sizes(self, blobs: Sequence[bytes]) -> None:
        if self.max_blob_size is None:
            return
        for index, blob in enumerate(blobs):
            if len(blob) > self.max_blob_size:
                raise BlobTooLargeError(index, len(blob), self.max_blob_size)

    def _schedule(self, blobs: Sequence[bytes], timeout: Optional[float]) -> List[Future]:
        # Scheduling happens under the lock so shutdown cannot close the pool halfway
        with self._lock:
            if self._closed:
                raise SubmissionError(
                    [PublishError("Submission coordinator is closed")], len(blobs)
                )
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_concurrency,
                    thread_name_prefix="sunrise-publish",
                )
            return [
                self._executor.submit(self._publish_one, bytes(blob), timeout)
                for blob in blobs
            ]

    @staticmethod
    def _wait_all(futures: List[Future]) -> List[Future]:
        """Block until every future is done and return them in completion order.

        Done-callbacks also fire for futures cancelled by ``shutdown``.
        """
        completed: List[Future] = []
        completed_lock = threading.Lock()
        all_done = threading.Event()

        def _on_done(future: Future) -> None:
            with completed_lock:
                completed.append(future)
                if len(completed) == len(futures):
                    all_done.set()

        for future in futures:
            future.add_done_callback(_on_done)
        all_done.wait()
        return completed

    def submit(self, blobs: Sequence[bytes], timeout: Optional[float] = None) -> List[bytes]:
        """Publish a batch of blobs and return one identifier per blob.

        Identifiers are returned in completion order, not input order.

        Args:
            blobs: Blobs to publish
            timeout: Per-request timeout override in seconds

        Returns:
            List[bytes]: Locator-encoded identifiers, one per blob

        Raises:
            BlobTooLargeError: If a blob exceeds the max blob size
            SubmissionError: If any blob failed to publish, or the coordinator is closed
        """
        if not blobs:
            return []

        self._check_sizes(blobs)

        logger.info(f"Submitting batch of {len(blobs)} blobs")
        futures = self._schedule(blobs, timeout)

        ids: List[bytes] = []
        errors: List[Exception] = []
        for future in self._wait_all(futures):
            if future.cancelled():
                errors.append(PublishError("Publish cancelled before it started"))
                continue
            error = future.exception()
            if error is not None:
                errors.append(error)
            else:
                ids.append(future.result())

        if errors:
            if ids:
                # The service keeps these blobs, but the caller never learns their IDs
                logger.warning(
                    f"Discarding {len(ids)} published locators of failed batch: "
                    f"{[decode_locator(id_) for id_ in ids]}"
                )
            logger.error(f"Batch submission failed: {len(errors)} of {len(blobs)} blobs not published")
            raise SubmissionError(errors, len(blobs)) from errors[0]

        logger.info(f"Submitted batch of {len(blobs)} blobs")
        return ids

    def _publish_one(self, blob: bytes, timeout: Optional[float]) -> bytes:
        locator = self.publisher.publish(blob, timeout=timeout)
        try:
            return encode_locator(locator)
        except InvalidIdentifierError as e:
            raise PublishError(f"Service returned an unusable locator: {str(e)}") from e

    @property
    def closed(self) -> bool:
        return self._closed

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker pool, cancelling units that have not started yet.

        After shutdown every further ``submit`` raises ``SubmissionError``.
        """
        with self._lock:
            self._closed = True
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait, cancel_futures=True)
