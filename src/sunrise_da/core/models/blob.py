import base64
from pydantic import BaseModel, Field


class PublishRequest(BaseModel):
    blob: str = Field(..., description="Base64-encoded blob data")
    data_shard_count: int = Field(..., ge=0, description="Erasure-coding data shards")
    parity_shard_count: int = Field(..., ge=0, description="Erasure-coding parity shards")
    protocol: str = Field(..., description="Storage backend tag, e.g. ipfs")

    @classmethod
    def for_blob(
        cls, data: bytes, data_shard_count: int, parity_shard_count: int, protocol: str
    ) -> "PublishRequest":
        return cls(
            blob=base64.b64encode(data).decode("ascii"),
            data_shard_count=data_shard_count,
            parity_shard_count=parity_shard_count,
            protocol=protocol,
        )


class PublishResponse(BaseModel):
    tx_hash: str = Field("", description="Hash of the transaction that recorded the blob")
    metadata_uri: str = Field(..., min_length=1, description="Locator of the published blob")


class GetBlobResponse(BaseModel):
    blob: str = Field(..., description="Base64-encoded blob data")

    def decode(self) -> bytes:
        """Decode the blob payload.

        Raises:
            binascii.Error: If the payload is not valid base64
        """
        return base64.b64decode(self.blob, validate=True)
