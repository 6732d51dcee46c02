"""
Shared fixtures for the AXVM client tests.

Key pairs are derived from fixed private keys and transaction ids from
fixed labels, so every run builds byte-identical transactions.
"""

import hashlib

import pytest

from axvm_client.constants import DEFAULT_BLOCKCHAIN_ID
from axvm_client.crypto import KeyPair
from axvm_client.keys import KeyChain
from axvm_client.types import SECPTransferOutput
from axvm_client.utxos import UTXO, UTXOSet


def txid_for(label):
    """Deterministic 32-byte transaction id for a label."""
    return hashlib.sha256(f"tx-{label}".encode()).digest()


@pytest.fixture
def keypair_x():
    return KeyPair(bytes([1] * 32))


@pytest.fixture
def keypair_y():
    return KeyPair(bytes([2] * 32))


@pytest.fixture
def keypair_z():
    return KeyPair(bytes([3] * 32))


@pytest.fixture
def addr_x(keypair_x):
    return keypair_x.get_address()


@pytest.fixture
def addr_y(keypair_y):
    return keypair_y.get_address()


@pytest.fixture
def addr_z(keypair_z):
    return keypair_z.get_address()


@pytest.fixture
def key_chain(keypair_x, keypair_y, keypair_z):
    """Key chain holding the X, Y and Z keys."""
    chain = KeyChain()
    for keypair in (keypair_x, keypair_y, keypair_z):
        chain.add_key(keypair)
    return chain


@pytest.fixture
def asset_a():
    return bytes([0xAA] * 32)


@pytest.fixture
def asset_b():
    return bytes([0xBB] * 32)


@pytest.fixture
def blockchain_id():
    return DEFAULT_BLOCKCHAIN_ID


@pytest.fixture
def make_utxo():
    """Factory building a UTXO from a label, asset and output."""
    def _make(label, asset_id, output, output_idx=0, codec_id=0):
        return UTXO(codec_id, txid_for(label), output_idx, asset_id, output)
    return _make


@pytest.fixture
def utxo_set_a(make_utxo, asset_a, addr_x):
    """Three UTXOs of asset A owned by X, with amounts 5, 7 and 20 in that order."""
    utxos = UTXOSet()
    for label, amount in (("a5", 5), ("a7", 7), ("a20", 20)):
        utxos.add(make_utxo(label, asset_a, SECPTransferOutput(amount, [addr_x])))
    return utxos
