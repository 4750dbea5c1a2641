"""
Tests for the SunriseDA adapter.
"""
from unittest.mock import MagicMock

import pytest

from sunrise_da.core.da import (
    MAX_BLOB_SIZE,
    BlobFetchClient,
    BlobPublishClient,
    FetchError,
    HeightID,
    InvalidIdentifierError,
    LocatorID,
    SubmissionError,
    SunriseDA,
    UnsupportedResult,
)
from sunrise_da.core.da.codec import encode_height


@pytest.fixture
def sunrise_da(adapter_config, blob_service):
    """Create a SunriseDA adapter talking to the fake blob service."""
    da = SunriseDA(
        adapter_config,
        publisher=BlobPublishClient(adapter_config, blob_service),
        fetcher=BlobFetchClient(adapter_config, blob_service),
    )
    yield da
    da.close()


class TestSunriseDA:
    """Tests for the SunriseDA class."""

    def test_max_blob_size(self, sunrise_da):
        """The max blob size is the fixed 64*64*500 bytes."""
        assert sunrise_da.max_blob_size() == 64 * 64 * 500 == MAX_BLOB_SIZE == 2_048_000

    def test_submit_and_get(self, sunrise_da):
        """Blobs are fetched back by locator, not by position."""
        ids = sunrise_da.submit([b"A", b"BB"], gas_price=0.5, namespace=b"ignored")
        assert set(ids) == {b"loc1", b"loc2"}

        blobs = sunrise_da.get(ids)

        expected = {b"loc1": b"A", b"loc2": b"BB"}
        assert blobs == [expected[id_] for id_ in ids]

    def test_get_accepts_identifier_types(self, sunrise_da):
        sunrise_da.submit([b"A", b"BB"])

        assert sunrise_da.get([LocatorID("loc2"), "loc1", b"loc2"]) == [b"BB", b"A", b"BB"]

    def test_submit_failure_returns_no_ids(self, adapter_config, failing_blob_service):
        """A partially failed batch raises instead of returning identifiers."""
        da = SunriseDA(
            adapter_config,
            publisher=BlobPublishClient(adapter_config, failing_blob_service),
            fetcher=BlobFetchClient(adapter_config, failing_blob_service),
        )
        with da:
            with pytest.raises(SubmissionError):
                da.submit([b"A", b"BB"])

    def test_submit_blob_too_large(self, sunrise_da, blob_service):
        with pytest.raises(ValueError):
            sunrise_da.submit([b"x" * (MAX_BLOB_SIZE + 1)])
        assert blob_service.requests == []

    def test_get_unknown_locator(self, sunrise_da):
        with pytest.raises(FetchError):
            sunrise_da.get([b"nowhere"])

    def test_get_ids(self, sunrise_da):
        """get_ids returns exactly one height identifier."""
        ids = sunrise_da.get_ids(1234, namespace=b"ns")

        assert ids == [encode_height(1234)]
        assert len(ids[0]) == 8
        assert ids[0][4:] == (1234).to_bytes(4, "big")

    def test_get_rejects_height_ids(self, sunrise_da, blob_service):
        """Height identifiers cannot be dereferenced to blobs."""
        height_id = sunrise_da.get_ids(10)[0]

        with pytest.raises(InvalidIdentifierError):
            sunrise_da.get([height_id])
        with pytest.raises(InvalidIdentifierError):
            sunrise_da.get([HeightID(10)])
        assert blob_service.requests == []

    @pytest.mark.parametrize("height", [int.from_bytes(b"\x00loc1abc", "big"), 2**56 - 1])
    def test_get_rejects_large_height_ids(self, sunrise_da, blob_service, height):
        """Heights whose low bytes look like text are still never fetched."""
        with pytest.raises(InvalidIdentifierError):
            sunrise_da.get(sunrise_da.get_ids(height))
        assert blob_service.requests == []

    def test_get_ids_rejects_heights_that_read_as_locators(self, sunrise_da):
        with pytest.raises(InvalidIdentifierError):
            sunrise_da.get_ids(int.from_bytes(b"loc1abcd", "big"))

    def test_submit_after_close_rejected(self, sunrise_da, blob_service):
        sunrise_da.close()

        with pytest.raises(SubmissionError):
            sunrise_da.submit([b"A"])
        assert blob_service.requests == []

    @pytest.mark.parametrize(
        "operation,args",
        [
            ("get_proofs", ([b"loc1"],)),
            ("commit", ([b"A"],)),
            ("validate", ([b"loc1"], [b"proof"])),
        ],
    )
    def test_unsupported_operations(self, sunrise_da, operation, args):
        """Proof and commitment operations return an empty, unsupported result."""
        result = getattr(sunrise_da, operation)(*args)

        assert isinstance(result, UnsupportedResult)
        assert result == []
        assert len(result) == 0
        assert result.supported is False
        assert result.operation == operation

    def test_capabilities(self, sunrise_da):
        capabilities = sunrise_da.capabilities()

        assert capabilities["submit"] is True
        assert capabilities["get"] is True
        assert capabilities["commit"] is False
        assert set(capabilities) == {
            "max_blob_size", "submit", "get", "get_ids", "get_proofs", "commit", "validate"
        }

    def test_default_clients_share_session(self, adapter_config):
        """Adapters built from config alone share one HTTP session."""
        da = SunriseDA(adapter_config)
        try:
            assert da.publisher.session is da.fetcher.session
            assert da.publisher.url == "http://sunrise.test/api/publish"
            assert da.fetcher.url == "http://sunrise.test/api/get-blob"
        finally:
            da.close()

    def test_close_shuts_down_coordinator(self, adapter_config):
        da = SunriseDA(
            adapter_config,
            publisher=MagicMock(spec=BlobPublishClient),
            fetcher=MagicMock(spec=BlobFetchClient),
        )
        da.coordinator = MagicMock()

        with da:
            pass

        da.coordinator.shutdown.assert_called_once()
