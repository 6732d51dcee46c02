"""
Human-readable address strings.

An address string is the chain alias, a dash, and the bech32 encoding of the
20-byte address under the network's human-readable part, e.g.
``Swap-axc1...``.
"""

from __future__ import annotations
from typing import Optional, Union

import bech32

from ..constants import ADDRESS_LEN
from ..runtime.errors import AddressError, ChecksumError


def address_to_string(hrp: str, chain_alias: str, address: bytes) -> str:
    """
    Format a 20-byte address for display.

    Args:
        hrp: Human-readable part of the network
        chain_alias: Chain alias prefix such as "Swap"
        address: Raw address bytes

    Returns:
        Address string
    """
    if len(address) != ADDRESS_LEN:
        raise AddressError(f"Address must be {ADDRESS_LEN} bytes, got {len(address)}")
    data = bech32.convertbits(address, 8, 5)
    return f"{chain_alias}-{bech32.bech32_encode(hrp, data)}"


def string_to_address(text: str, hrp: Optional[str] = None) -> bytes:
    """
    Parse an address string, with or without its chain alias prefix.

    Args:
        text: Address string
        hrp: Expected human-readable part; not checked when None

    Returns:
        20-byte address

    Raises:
        ChecksumError: If the bech32 checksum does not verify
        AddressError: If the string is malformed or has the wrong length or hrp
    """
    body = text.split("-", 1)[1] if "-" in text else text
    if "1" not in body:
        raise AddressError(f"Invalid address string: {text!r}")
    decoded_hrp, data = bech32.bech32_decode(body)
    if decoded_hrp is None or data is None:
        raise ChecksumError(f"Invalid bech32 address: {text!r}")
    if hrp is not None and decoded_hrp != hrp:
        raise AddressError(f"Address {text!r} has hrp {decoded_hrp!r}, expected {hrp!r}")
    raw = bech32.convertbits(data, 5, 8, False)
    if raw is None or len(raw) != ADDRESS_LEN:
        raise AddressError(f"Invalid address length in {text!r}")
    return bytes(raw)


def parse_address(value: Union[str, bytes], hrp: Optional[str] = None) -> bytes:
    """Accept either raw address bytes or an address string."""
    if isinstance(value, str):
        return string_to_address(value, hrp)
    address = bytes(value)
    if len(address) != ADDRESS_LEN:
        raise AddressError(f"Address must be {ADDRESS_LEN} bytes, got {len(address)}")
    return address
