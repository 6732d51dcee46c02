"""
SECP256K1 key pair and key chain tests.
"""

import pytest

from axvm_client.codec import cb58_decode, ripemd160_bytes, sha256_bytes, string_to_address
from axvm_client.crypto import KeyPair, Secp256k1Error, recover_public_key, verify_signature
from axvm_client.keys import KeyChain
from axvm_client.runtime.errors import KeyNotFoundError

MESSAGE = sha256_bytes(b"axvm test message")


@pytest.mark.unit
class TestKeyPair:
    """Test key derivation, signing and recovery."""

    def test_public_key_is_compressed(self, keypair_x):
        public_key = keypair_x.get_public_key()
        assert len(public_key) == 33
        assert public_key[0] in (2, 3)

    def test_address_derivation(self, keypair_x):
        expected = ripemd160_bytes(sha256_bytes(keypair_x.get_public_key()))
        assert keypair_x.get_address() == expected
        assert len(expected) == 20

    def test_distinct_keys_distinct_addresses(self, keypair_x, keypair_y):
        assert keypair_x.get_address() != keypair_y.get_address()

    def test_sign_and_verify(self, keypair_x, keypair_y):
        signature = keypair_x.sign(MESSAGE)
        assert len(signature) == 65
        assert signature[64] in (0, 1)
        assert keypair_x.verify(MESSAGE, signature)
        assert not keypair_y.verify(MESSAGE, signature)
        assert not keypair_x.verify(sha256_bytes(b"other"), signature)

    def test_signatures_are_deterministic(self, keypair_x):
        assert keypair_x.sign(MESSAGE) == keypair_x.sign(MESSAGE)

    def test_signature_is_low_s(self, keypair_x):
        order = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
        s = int.from_bytes(keypair_x.sign(MESSAGE)[32:64], "big")
        assert s <= order // 2

    def test_recover_public_key(self, keypair_x):
        signature = keypair_x.sign(MESSAGE)
        assert recover_public_key(MESSAGE, signature) == keypair_x.get_public_key()

    def test_recover_rejects_bad_signature(self):
        with pytest.raises(Secp256k1Error):
            recover_public_key(MESSAGE, b"\x00" * 64)
        with pytest.raises(Secp256k1Error):
            recover_public_key(MESSAGE, b"\x01" * 64 + b"\x05")

    def test_verify_rejects_wrong_length(self, keypair_x):
        assert not verify_signature(keypair_x.get_public_key(), MESSAGE, b"\x00" * 64)

    def test_private_key_string_roundtrip(self, keypair_x):
        text = keypair_x.get_private_key_string()
        assert text.startswith("PrivateKey-")
        assert cb58_decode(text[len("PrivateKey-"):]) == bytes([1] * 32)
        restored = KeyPair.from_private_key_string(text)
        assert restored.get_address() == keypair_x.get_address()
        bare = KeyPair.from_private_key_string(text[len("PrivateKey-"):])
        assert bare.get_address() == keypair_x.get_address()

    def test_invalid_private_key(self):
        with pytest.raises(Secp256k1Error):
            KeyPair(b"\x01" * 31)
        with pytest.raises(Secp256k1Error):
            KeyPair(bytes(32))

    def test_generated_keys_differ(self):
        assert KeyPair.generate().get_address() != KeyPair.generate().get_address()

    def test_address_string(self, keypair_x):
        text = keypair_x.get_address_string("fuji", "Swap")
        assert text.startswith("Swap-fuji1")
        assert string_to_address(text, "fuji") == keypair_x.get_address()


@pytest.mark.unit
class TestKeyChain:
    """Test key chain bookkeeping."""

    def test_get_key(self, key_chain, keypair_x, addr_x):
        assert key_chain.get_key(addr_x) is keypair_x
        assert key_chain.has_key(addr_x)
        assert len(key_chain) == 3

    def test_missing_key(self):
        with pytest.raises(KeyNotFoundError) as exc_info:
            KeyChain().get_key(bytes(20))
        assert exc_info.value.details["address"] == bytes(20).hex()

    def test_import_key(self, keypair_x):
        chain = KeyChain()
        from_string = chain.import_key(keypair_x.get_private_key_string())
        from_bytes = chain.import_key(keypair_x.get_private_key())
        assert from_string.get_address() == from_bytes.get_address() == keypair_x.get_address()
        assert len(chain) == 1

    def test_make_and_remove_key(self):
        chain = KeyChain()
        keypair = chain.make_key()
        assert chain.has_key(keypair.get_address())
        assert chain.remove_key(keypair)
        assert not chain.remove_key(keypair.get_address())
        assert len(chain) == 0

    def test_clone_is_independent(self, key_chain, addr_x):
        clone = key_chain.clone()
        clone.remove_key(addr_x)
        assert key_chain.has_key(addr_x)
        assert len(clone) == 2

    def test_union(self, keypair_x, keypair_y):
        left = KeyChain()
        left.add_key(keypair_x)
        right = KeyChain()
        right.add_key(keypair_y)
        combined = left.union(right)
        assert set(combined.get_addresses()) == {keypair_x.get_address(), keypair_y.get_address()}
        assert len(left) == 1

    def test_address_strings_use_chain_settings(self, keypair_x):
        chain = KeyChain("local", "Swap")
        chain.add_key(keypair_x)
        (text,) = chain.get_address_strings()
        assert text.startswith("Swap-local1")
        assert string_to_address(text, "local") == keypair_x.get_address()
