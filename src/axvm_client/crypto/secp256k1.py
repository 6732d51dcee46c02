"""
SECP256K1 key pairs for AXVM credentials.

Signatures are 65 bytes: ``r || s || recovery id``, produced with
deterministic RFC 6979 nonces and a canonical (low-s) ``s``. Messages are
32-byte digests; transactions sign ``sha256(unsigned tx bytes)``.

Addresses are ``ripemd160(sha256(compressed public key))``.
"""

from __future__ import annotations
import hashlib
from typing import Optional

import ecdsa
from ecdsa import SECP256k1, SigningKey, VerifyingKey
from ecdsa.util import sigdecode_string, sigencode_string_canonize

from ..codec.addresses import address_to_string
from ..codec.hashes import cb58_decode, cb58_encode, ripemd160_bytes, sha256_bytes
from ..constants import PRIVATE_KEY_PREFIX, SIGNATURE_LEN
from ..runtime.errors import EncodingError


class Secp256k1Error(EncodingError):
    """Invalid key material or signature bytes."""


def address_from_public_key(public_key: bytes) -> bytes:
    """Derive the 20-byte address of a compressed public key."""
    return ripemd160_bytes(sha256_bytes(public_key))


class KeyPair:
    """
    SECP256K1 key pair.

    Provides signing with public key recovery and address derivation.
    """

    def __init__(self, private_key_bytes: Optional[bytes] = None):
        """
        Initialize key pair.

        Args:
            private_key_bytes: 32-byte private key; a random key is generated when omitted
        """
        if private_key_bytes is None:
            self._signing_key = SigningKey.generate(curve=SECP256k1)
        else:
            if len(private_key_bytes) != 32:
                raise Secp256k1Error(f"Private key must be 32 bytes, got {len(private_key_bytes)}")
            try:
                self._signing_key = SigningKey.from_string(bytes(private_key_bytes), curve=SECP256k1)
            except ecdsa.MalformedPointError as e:
                raise Secp256k1Error("Invalid private key", cause=e)
        self._verifying_key = self._signing_key.get_verifying_key()
        self._public_key = self._verifying_key.to_string("compressed")
        self._address = address_from_public_key(self._public_key)

    @classmethod
    def generate(cls) -> KeyPair:
        """Generate a new random key pair."""
        return cls()

    @classmethod
    def from_private_key_string(cls, text: str) -> KeyPair:
        """
        Create key pair from a ``PrivateKey-<cb58>`` string.

        The prefix is optional.
        """
        if text.startswith(PRIVATE_KEY_PREFIX):
            text = text[len(PRIVATE_KEY_PREFIX):]
        return cls(cb58_decode(text))

    def get_private_key(self) -> bytes:
        return self._signing_key.to_string()

    def get_private_key_string(self) -> str:
        return PRIVATE_KEY_PREFIX + cb58_encode(self.get_private_key())

    def get_public_key(self) -> bytes:
        """33-byte compressed public key."""
        return self._public_key

    def get_address(self) -> bytes:
        return self._address

    def get_address_string(self, hrp: str, chain_alias: str) -> str:
        return address_to_string(hrp, chain_alias, self._address)

    def sign(self, message: bytes) -> bytes:
        """
        Sign a 32-byte message digest.

        Args:
            message: Digest to sign

        Returns:
            65-byte signature ``r || s || recovery id``
        """
        rs = self._signing_key.sign_digest_deterministic(
            message, hashfunc=hashlib.sha256, sigencode=sigencode_string_canonize)
        candidates = VerifyingKey.from_public_key_recovery_with_digest(
            rs, message, SECP256k1, hashfunc=hashlib.sha256, sigdecode=sigdecode_string)
        for recovery_id, candidate in enumerate(candidates):
            if candidate.to_string("compressed") == self._public_key:
                return rs + bytes([recovery_id])
        raise Secp256k1Error("Unable to compute recovery id for signature")

    def verify(self, message: bytes, signature: bytes) -> bool:
        """
        Verify a signature against this key pair's public key.

        Args:
            message: Digest that was signed
            signature: 65-byte signature

        Returns:
            True if signature is valid
        """
        return verify_signature(self._public_key, message, signature)

    def __repr__(self) -> str:
        return f"KeyPair(address={self._address.hex()})"


def verify_signature(public_key: bytes, message: bytes, signature: bytes) -> bool:
    """Check a 65-byte signature against a compressed public key."""
    if len(signature) != SIGNATURE_LEN:
        return False
    vk = VerifyingKey.from_string(public_key, curve=SECP256k1)
    try:
        return vk.verify_digest(signature[:64], message, sigdecode=sigdecode_string)
    except ecdsa.BadSignatureError:
        return False


def recover_public_key(message: bytes, signature: bytes) -> bytes:
    """
    Recover the compressed public key that produced a signature.

    Raises:
        Secp256k1Error: If the signature is malformed
    """
    if len(signature) != SIGNATURE_LEN or signature[64] > 1:
        raise Secp256k1Error(f"Signature must be {SIGNATURE_LEN} bytes with recovery id 0 or 1")
    candidates = VerifyingKey.from_public_key_recovery_with_digest(
        signature[:64], message, SECP256k1, hashfunc=hashlib.sha256, sigdecode=sigdecode_string)
    return candidates[signature[64]].to_string("compressed")
