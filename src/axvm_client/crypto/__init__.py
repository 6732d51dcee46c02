"""
Cryptographic primitives for the AXVM client.
"""

from .secp256k1 import (
    KeyPair,
    Secp256k1Error,
    address_from_public_key,
    recover_public_key,
    verify_signature,
)

__all__ = [
    "KeyPair",
    "Secp256k1Error",
    "address_from_public_key",
    "recover_public_key",
    "verify_signature",
]
