"""
Signing tests: credential alignment, signature recovery and the signed envelope.
"""

import pytest

from axvm_client.codec import sha256_bytes
from axvm_client.crypto import recover_public_key, verify_signature
from axvm_client.keys import KeyChain
from axvm_client.runtime.errors import KeyNotFoundError
from axvm_client.tx import BaseTx, ImportTx, OperationTx, Tx, UnsignedTx
from axvm_client.types import (
    NFTCredential,
    NFTTransferOperation,
    NFTTransferOutput,
    SECPCredential,
    SECPTransferInput,
    SECPTransferOutput,
    TransferableInput,
    TransferableOperation,
    TransferableOutput,
)

from conftest import txid_for


def _input(label, amount, asset_id, signers, idx=0):
    inp = SECPTransferInput(amount)
    for address_index, address in signers:
        inp.add_signature_idx(address_index, address)
    return TransferableInput(txid_for(label), idx, asset_id, inp)


@pytest.mark.unit
class TestCredentialAlignment:
    """Test one credential per input, one signature per SigIdx."""

    def test_signatures_match_sig_idxs(self, key_chain, addr_x, addr_y, asset_a, blockchain_id):
        ins = [
            _input("one", 10, asset_a, [(0, addr_x)]),
            _input("two", 20, asset_a, [(0, addr_x), (1, addr_y)]),
        ]
        outs = [TransferableOutput(asset_a, SECPTransferOutput(29, [addr_y]))]
        unsigned = UnsignedTx(BaseTx(1, blockchain_id, outs, ins))
        tx = unsigned.sign(key_chain)

        credentials = tx.get_credentials()
        signed_ins = unsigned.get_transaction().get_ins()
        assert len(credentials) == len(signed_ins)
        for credential, inp in zip(credentials, signed_ins):
            assert isinstance(credential, SECPCredential)
            assert len(credential.get_signatures()) == len(inp.get_input().get_sig_idxs())

    def test_signatures_recover_source_keys(self, key_chain, keypair_x, keypair_y, addr_x, addr_y,
                                            asset_a, blockchain_id):
        ins = [_input("multi", 20, asset_a, [(0, addr_x), (1, addr_y)])]
        unsigned = UnsignedTx(BaseTx(1, blockchain_id, [], ins))
        tx = unsigned.sign(key_chain)
        message = sha256_bytes(unsigned.to_buffer())

        signatures = tx.get_credentials()[0].get_signatures()
        assert recover_public_key(message, signatures[0]) == keypair_x.get_public_key()
        assert recover_public_key(message, signatures[1]) == keypair_y.get_public_key()
        assert verify_signature(keypair_x.get_public_key(), message, signatures[0])
        assert not verify_signature(keypair_x.get_public_key(), message, signatures[1])

    def test_credentials_follow_canonical_input_order(self, key_chain, addr_x, addr_y, asset_a,
                                                      blockchain_id, keypair_y):
        first = _input("order", 1, asset_a, [(0, addr_x)], idx=5)
        second = _input("order", 1, asset_a, [(0, addr_y)], idx=1)
        unsigned = UnsignedTx(BaseTx(1, blockchain_id, [], [first, second]))
        tx = unsigned.sign(key_chain)
        message = sha256_bytes(unsigned.to_buffer())
        leading = tx.get_credentials()[0].get_signatures()[0]
        assert recover_public_key(message, leading) == keypair_y.get_public_key()

    def test_operations_signed_after_inputs(self, key_chain, addr_x, addr_y, asset_a, asset_b,
                                            blockchain_id):
        op = NFTTransferOperation(NFTTransferOutput(0, b"art", [addr_y]))
        op.add_signature_idx(0, addr_x)
        ops = [TransferableOperation(asset_b, [txid_for("nft") + bytes(4)], op)]
        ins = [_input("fee", 10, asset_a, [(0, addr_x)])]
        unsigned = UnsignedTx(OperationTx(1, blockchain_id, [], ins, b"", ops))
        credentials = unsigned.sign(key_chain).get_credentials()
        assert [type(c) for c in credentials] == [SECPCredential, NFTCredential]

    def test_import_inputs_signed(self, key_chain, addr_x, asset_a, blockchain_id):
        imports = [_input("atomic", 10, asset_a, [(0, addr_x)])]
        unsigned = UnsignedTx(ImportTx(1, blockchain_id, [], [], b"", bytes(32), imports))
        assert len(unsigned.sign(key_chain).get_credentials()) == 1

    def test_missing_key(self, addr_x, asset_a, blockchain_id):
        ins = [_input("nokey", 10, asset_a, [(0, addr_x)])]
        unsigned = UnsignedTx(BaseTx(1, blockchain_id, [], ins))
        with pytest.raises(KeyNotFoundError):
            unsigned.sign(KeyChain())


@pytest.mark.unit
class TestSignedEnvelope:
    """Test the signed transaction wire form."""

    def _signed(self, key_chain, addr_x, addr_y, asset_a, blockchain_id):
        ins = [_input("env", 10, asset_a, [(0, addr_x)])]
        outs = [TransferableOutput(asset_a, SECPTransferOutput(9, [addr_y]))]
        return UnsignedTx(BaseTx(1, blockchain_id, outs, ins, b"hello")).sign(key_chain)

    def test_layout(self, key_chain, addr_x, addr_y, asset_a, blockchain_id):
        tx = self._signed(key_chain, addr_x, addr_y, asset_a, blockchain_id)
        unsigned_bytes = tx.get_unsigned_tx().to_buffer()
        buf = tx.to_buffer()
        assert buf.startswith(unsigned_bytes)
        rest = buf[len(unsigned_bytes):]
        assert rest[:4] == (1).to_bytes(4, "big")
        assert rest[4:8] == (9).to_bytes(4, "big")
        assert rest[8:12] == (1).to_bytes(4, "big")
        assert len(rest) == 12 + 65

    def test_unsigned_header(self, key_chain, addr_x, addr_y, asset_a, blockchain_id):
        tx = self._signed(key_chain, addr_x, addr_y, asset_a, blockchain_id)
        unsigned_bytes = tx.get_unsigned_tx().to_buffer()
        assert unsigned_bytes[:2] == (0).to_bytes(2, "big")
        assert unsigned_bytes[2:6] == (0).to_bytes(4, "big")

    def test_string_roundtrip(self, key_chain, addr_x, addr_y, asset_a, blockchain_id):
        tx = self._signed(key_chain, addr_x, addr_y, asset_a, blockchain_id)
        parsed = Tx()
        parsed.from_string(tx.to_string())
        assert parsed.to_buffer() == tx.to_buffer()
        assert parsed.get_tx_id() == tx.get_tx_id()
        assert isinstance(parsed.get_unsigned_tx().get_transaction(), BaseTx)
        assert parsed.get_unsigned_tx().get_transaction().get_memo() == b"hello"

    def test_signing_is_deterministic(self, key_chain, addr_x, addr_y, asset_a, blockchain_id):
        first = self._signed(key_chain, addr_x, addr_y, asset_a, blockchain_id)
        second = self._signed(key_chain, addr_x, addr_y, asset_a, blockchain_id)
        assert first.to_buffer() == second.to_buffer()

    def test_serialize_roundtrip(self, key_chain, addr_x, addr_y, asset_a, blockchain_id):
        tx = self._signed(key_chain, addr_x, addr_y, asset_a, blockchain_id)
        restored = Tx()
        restored.deserialize(tx.serialize())
        assert restored.to_buffer() == tx.to_buffer()
