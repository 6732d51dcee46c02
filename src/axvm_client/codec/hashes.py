"""
Hash and checksum helpers.

SHA-256 and RIPEMD-160 digests, plus "cb58": base58 over the payload
followed by the last four bytes of its SHA-256 digest.
"""

import hashlib

import base58

from ..constants import CHECKSUM_LEN
from ..runtime.errors import ChecksumError, EncodingError


def sha256_bytes(input_bytes: bytes) -> bytes:
    """
    Compute SHA-256 hash of input bytes.

    Args:
        input_bytes: Input bytes to hash

    Returns:
        SHA-256 hash as bytes (32 bytes)
    """
    return hashlib.sha256(input_bytes).digest()


def ripemd160_bytes(input_bytes: bytes) -> bytes:
    """Compute RIPEMD-160 hash of input bytes (20 bytes)."""
    ripemd = hashlib.new('ripemd160')
    ripemd.update(input_bytes)
    return ripemd.digest()


def add_checksum(payload: bytes) -> bytes:
    """Append the 4-byte SHA-256 checksum to a payload."""
    return payload + sha256_bytes(payload)[-CHECKSUM_LEN:]


def validate_checksum(data: bytes) -> bool:
    """Check that the trailing 4 bytes are the checksum of the rest."""
    if len(data) < CHECKSUM_LEN:
        return False
    payload, checksum = data[:-CHECKSUM_LEN], data[-CHECKSUM_LEN:]
    return sha256_bytes(payload)[-CHECKSUM_LEN:] == checksum


def cb58_encode(payload: bytes) -> str:
    """
    Encode bytes as a checksummed base58 string.

    Args:
        payload: Raw bytes

    Returns:
        cb58 string
    """
    return base58.b58encode(add_checksum(payload)).decode("ascii")


def cb58_decode(text: str) -> bytes:
    """
    Decode a checksummed base58 string.

    Args:
        text: cb58 string

    Returns:
        Payload bytes without the checksum

    Raises:
        EncodingError: If the text is not valid base58
        ChecksumError: If the checksum does not match
    """
    try:
        data = base58.b58decode(text)
    except ValueError as e:
        raise EncodingError(f"Invalid base58 string: {text!r}", cause=e)
    if not validate_checksum(data):
        raise ChecksumError("cb58 checksum mismatch", details={"value": text})
    return data[:-CHECKSUM_LEN]


def b58_decode(text: str) -> bytes:
    """Decode a plain base58 string."""
    try:
        return base58.b58decode(text)
    except ValueError as e:
        raise EncodingError(f"Invalid base58 string: {text!r}", cause=e)


def b58_encode(data: bytes) -> str:
    """Encode bytes as plain base58."""
    return base58.b58encode(data).decode("ascii")
