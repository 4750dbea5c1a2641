"""
Identifier codec for the Sunrise DA adapter.

The DA interface names blobs with opaque byte strings. Two kinds coexist:
locator identifiers (the raw UTF-8 bytes of a ``metadata_uri`` returned by
the publish service) and height identifiers (an 8-byte big-endian block
height). They are modelled here as separate types so that a height can never
be mistaken for something that can be fetched.
"""

from dataclasses import dataclass
from typing import Union

from sunrise_da.core.da.errors import InvalidIdentifierError

HEIGHT_ID_LENGTH = 8
MAX_HEIGHT = 2**56 - 1


@dataclass(frozen=True)
class LocatorID:
    """Identifier of a blob previously published to the remote service."""

    locator: str

    def to_bytes(self) -> bytes:
        return encode_locator(self.locator)


@dataclass(frozen=True)
class HeightID:
    """Identifier enumerating a block height; never dereferenced to a blob."""

    height: int

    def to_bytes(self) -> bytes:
        return encode_height(self.height)


Identifier = Union[LocatorID, HeightID]


def encode_height(height: int) -> bytes:
    """Encode a block height as an 8-byte big-endian identifier.

    Heights are capped below 2**56 so the first byte is always NUL, which
    is what marks the identifier as a height rather than a locator.

    Args:
        height: Block height in [0, 2**56)

    Returns:
        bytes: 8-byte identifier

    Raises:
        InvalidIdentifierError: If the height is negative or too large
    """
    if isinstance(height, bool) or not isinstance(height, int):
        raise InvalidIdentifierError(f"Height must be an integer, got {type(height).__name__}")
    if height < 0 or height > MAX_HEIGHT:
        raise InvalidIdentifierError(f"Height {height} is outside [0, 2**56)")
    return height.to_bytes(HEIGHT_ID_LENGTH, "big")


def decode_height(raw: bytes) -> int:
    """Decode an 8-byte big-endian height identifier."""
    if len(raw) != HEIGHT_ID_LENGTH or raw[0] != 0:
        raise InvalidIdentifierError(
            f"Height identifier must be {HEIGHT_ID_LENGTH} bytes starting with NUL"
        )
    return int.from_bytes(bytes(raw), "big")


def encode_locator(locator: str) -> bytes:
    """Encode a locator string as identifier bytes."""
    _check_locator(locator)
    return locator.encode("utf-8")


def decode_locator(raw: bytes) -> str:
    """Decode identifier bytes back to the locator they were built from.

    Raises:
        InvalidIdentifierError: If the bytes are not UTF-8 or start with NUL
    """
    try:
        locator = bytes(raw).decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidIdentifierError(f"Identifier is not a valid locator: {e}") from e
    _check_locator(locator)
    return locator


def _check_locator(locator: str) -> None:
    if not locator:
        raise InvalidIdentifierError("Locator must not be empty")
    # A leading NUL is reserved for height identifiers
    if locator[0] == "\x00":
        raise InvalidIdentifierError(f"Locator must not start with NUL: {locator!r}")


def decode_id(raw: bytes) -> Identifier:
    """Classify raw identifier bytes.

    An 8-byte value starting with NUL is a height; anything else must be a
    UTF-8 locator.
    """
    raw = bytes(raw)
    if len(raw) == HEIGHT_ID_LENGTH and raw[0] == 0:
        return HeightID(decode_height(raw))
    return LocatorID(decode_locator(raw))


def as_identifier(value: Union[bytes, bytearray, str, LocatorID, HeightID]) -> Identifier:
    """Coerce bytes, a locator string or an identifier into an identifier."""
    if isinstance(value, (LocatorID, HeightID)):
        return value
    if isinstance(value, str):
        _check_locator(value)
        return LocatorID(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return decode_id(bytes(value))
    raise InvalidIdentifierError(f"Unsupported identifier type: {type(value).__name__}")
