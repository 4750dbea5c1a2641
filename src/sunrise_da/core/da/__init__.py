"""
Data Availability (DA) adapter for the Sunrise blob service.

This package provides the components that implement the generic DA
interface on top of Sunrise's HTTP publish and fetch endpoints.
"""

from sunrise_da.core.da.adapter import MAX_BLOB_SIZE, SunriseDA, UnsupportedResult
from sunrise_da.core.da.client import BlobFetchClient, BlobPublishClient
from sunrise_da.core.da.codec import HeightID, LocatorID, decode_id, encode_height
from sunrise_da.core.da.errors import (
    BlobTooLargeError,
    FetchError,
    InvalidIdentifierError,
    PublishError,
    SubmissionError,
    SunriseDAError,
)
from sunrise_da.core.da.submitter import SubmissionCoordinator

__all__ = [
    "MAX_BLOB_SIZE",
    "SunriseDA",
    "UnsupportedResult",
    "BlobFetchClient",
    "BlobPublishClient",
    "SubmissionCoordinator",
    "HeightID",
    "LocatorID",
    "decode_id",
    "encode_height",
    "SunriseDAError",
    "InvalidIdentifierError",
    "PublishError",
    "FetchError",
    "BlobTooLargeError",
    "SubmissionError",
]
