"""
Transaction variant tests: wire layout, canonical ordering and validation.
"""

import struct

import pytest

from axvm_client.codec import cb58_decode
from axvm_client.constants import PLATFORM_CHAIN_ID
from axvm_client.runtime.errors import (
    AssetNameError,
    ChainIdError,
    DenominationError,
    MemoLengthError,
    OperationError,
    SymbolError,
    TransferableInputError,
    TransferableOutputError,
)
from axvm_client.tx import (
    BaseTx,
    CreateAssetTx,
    ExportTx,
    GenesisAsset,
    GenesisData,
    ImportTx,
    OperationTx,
    UnsignedTx,
)
from axvm_client.types import (
    UTXOID,
    InitialStates,
    NFTTransferOperation,
    NFTTransferOutput,
    SECPMintOutput,
    SECPTransferInput,
    SECPTransferOutput,
    TransferableInput,
    TransferableOperation,
    TransferableOutput,
)

NETWORK_ID = 12345
CHAIN = bytes([0x10] * 32)
ASSET_A = bytes([0xAA] * 32)
ASSET_B = bytes([0xBB] * 32)
A1 = bytes([1] * 20)
A2 = bytes([2] * 20)


def _outs():
    return [
        TransferableOutput(ASSET_B, SECPTransferOutput(1, [A1])),
        TransferableOutput(ASSET_A, SECPTransferOutput(3, [A2])),
        TransferableOutput(ASSET_A, SECPTransferOutput(2, [A1])),
    ]


def _ins():
    result = []
    for txid_byte, idx in ((9, 0), (1, 5), (1, 2)):
        inp = SECPTransferInput(10)
        inp.add_signature_idx(0, A1)
        result.append(TransferableInput(bytes([txid_byte] * 32), idx, ASSET_A, inp))
    return result


@pytest.mark.unit
class TestBaseTx:
    """Test the common transaction header."""

    def test_header_layout(self):
        tx = BaseTx(NETWORK_ID, CHAIN, [], [], b"hi")
        assert tx.to_buffer() == (struct.pack(">I", NETWORK_ID) + CHAIN + struct.pack(">I", 0)
                                  + struct.pack(">I", 0) + struct.pack(">I", 2) + b"hi")

    def test_canonical_ordering(self):
        forward = BaseTx(NETWORK_ID, CHAIN, _outs(), _ins())
        backward = BaseTx(NETWORK_ID, CHAIN, list(reversed(_outs())), list(reversed(_ins())))
        assert forward.to_buffer() == backward.to_buffer()

    def test_inputs_sorted_by_txid_then_index(self):
        tx = BaseTx(NETWORK_ID, CHAIN, [], _ins())
        tx.to_buffer()
        assert [(i.get_txid()[0], i.get_output_idx()) for i in tx.get_ins()] == [(1, 2), (1, 5), (9, 0)]

    def test_roundtrip(self):
        tx = BaseTx(NETWORK_ID, CHAIN, _outs(), _ins(), b"memo")
        parsed = BaseTx()
        parsed.from_buffer(tx.to_buffer())
        assert parsed == tx
        assert parsed.get_network_id() == NETWORK_ID
        assert parsed.get_blockchain_id() == CHAIN

    def test_memo_limit(self):
        BaseTx(NETWORK_ID, CHAIN, [], [], b"\x00" * 256)
        with pytest.raises(MemoLengthError):
            BaseTx(NETWORK_ID, CHAIN, [], [], b"\x00" * 257)

    def test_element_types_checked(self):
        with pytest.raises(TransferableOutputError):
            BaseTx(NETWORK_ID, CHAIN, [SECPTransferOutput(1, [A1])], [])
        with pytest.raises(TransferableInputError):
            BaseTx(NETWORK_ID, CHAIN, [], [SECPTransferInput(1)])

    def test_clone(self):
        tx = BaseTx(NETWORK_ID, CHAIN, _outs(), _ins())
        clone = tx.clone()
        assert clone == tx
        assert clone is not tx


@pytest.mark.unit
class TestCreateAssetTx:
    """Test asset creation bodies."""

    def _state(self):
        state = InitialStates()
        state.add_output(SECPTransferOutput(1000, [A1]))
        state.add_output(SECPMintOutput([A1]))
        return state

    @pytest.mark.parametrize("denomination", [0, 9, 32])
    def test_roundtrip(self, denomination):
        tx = CreateAssetTx(NETWORK_ID, CHAIN, [], [], b"", "Coin", "COIN", denomination, self._state())
        parsed = CreateAssetTx()
        parsed.from_buffer(tx.to_buffer())
        assert parsed == tx
        assert parsed.get_denomination() == denomination
        assert parsed.get_name() == "Coin"
        assert parsed.get_symbol() == "COIN"

    def test_description_limits(self):
        with pytest.raises(DenominationError):
            CreateAssetTx(name="n", symbol="S", denomination=33)
        with pytest.raises(SymbolError):
            CreateAssetTx(name="n", symbol="TOOLONG", denomination=0)
        with pytest.raises(AssetNameError):
            CreateAssetTx(name="x" * 129, symbol="S", denomination=0)


@pytest.mark.unit
class TestOperationTx:
    """Test operation transactions."""

    def _op(self, group_id):
        op = NFTTransferOperation(NFTTransferOutput(group_id, b"", [A2]))
        op.add_signature_idx(0, A1)
        return TransferableOperation(ASSET_A, [UTXOID.from_parts(bytes([group_id] * 32), 0)], op)

    def test_ops_sorted(self):
        forward = OperationTx(NETWORK_ID, CHAIN, [], [], b"", [self._op(1), self._op(2)])
        backward = OperationTx(NETWORK_ID, CHAIN, [], [], b"", [self._op(2), self._op(1)])
        assert forward.to_buffer() == backward.to_buffer()

    def test_roundtrip(self):
        tx = OperationTx(NETWORK_ID, CHAIN, _outs(), _ins(), b"", [self._op(4)])
        parsed = OperationTx()
        parsed.from_buffer(tx.to_buffer())
        assert parsed == tx
        assert len(parsed.get_operations()) == 1

    def test_op_type_checked(self):
        with pytest.raises(OperationError):
            OperationTx(NETWORK_ID, CHAIN, [], [], b"", [NFTTransferOperation()])


@pytest.mark.unit
class TestImportExport:
    """Test cross-chain transactions."""

    def test_export_without_destination_fails(self):
        tx = ExportTx(NETWORK_ID, CHAIN, [], [], b"", None, _outs())
        with pytest.raises(ChainIdError):
            tx.to_buffer()
        with pytest.raises(ChainIdError):
            UnsignedTx(tx).to_buffer()

    def test_import_without_source_fails(self):
        tx = ImportTx(NETWORK_ID, CHAIN, [], [], b"", None, _ins())
        with pytest.raises(ChainIdError):
            tx.to_buffer()

    def test_export_roundtrip_and_totals(self):
        destination = cb58_decode(PLATFORM_CHAIN_ID)
        tx = ExportTx(NETWORK_ID, CHAIN, _outs()[:1], [], b"", destination, _outs()[1:])
        parsed = ExportTx()
        parsed.from_buffer(tx.to_buffer())
        assert parsed == tx
        assert parsed.get_destination_chain() == destination
        assert parsed.get_export_total() == 5
        assert len(parsed.get_total_outs()) == 3

    def test_import_roundtrip_and_totals(self):
        tx = ImportTx(NETWORK_ID, CHAIN, [], _ins()[:1], b"", bytes(32), _ins()[1:])
        parsed = ImportTx()
        parsed.from_buffer(tx.to_buffer())
        assert parsed == tx
        assert len(parsed.get_import_inputs()) == 2
        assert len(parsed.get_total_ins()) == 3

    def test_burn_counts_cross_chain_lists(self):
        tx = ImportTx(NETWORK_ID, CHAIN, _outs()[1:], [], b"", bytes(32), _ins())
        unsigned = UnsignedTx(tx)
        assert unsigned.get_input_total(ASSET_A) == 30
        assert unsigned.get_output_total(ASSET_A) == 5
        assert unsigned.get_burn(ASSET_A) == 25


@pytest.mark.unit
class TestGenesis:
    """Test genesis assets and genesis data."""

    def _asset(self):
        state = InitialStates()
        state.add_output(SECPTransferOutput(10**18, [A1, A2], 0, 1))
        return GenesisAsset("asset1", "AXC", "AXC", 9, state, b"genesis", NETWORK_ID)

    def test_genesis_asset_roundtrip(self):
        asset = self._asset()
        parsed = GenesisAsset()
        parsed.from_buffer(asset.to_buffer(NETWORK_ID))
        assert parsed.get_asset_alias() == "asset1"
        assert parsed.get_name() == "AXC"
        assert parsed.get_symbol() == "AXC"
        assert parsed.get_denomination() == 9
        assert parsed.get_initial_states() == asset.get_initial_states()
        assert parsed.get_network_id() == NETWORK_ID
        assert parsed.get_memo() == b"genesis"

    def test_genesis_asset_header_is_empty(self):
        buf = self._asset().to_buffer(1)
        alias = struct.pack(">H", 6) + b"asset1"
        assert buf.startswith(alias + struct.pack(">I", 1) + bytes(32)
                              + struct.pack(">I", 0) + struct.pack(">I", 0))

    def test_network_override_leaves_asset_unchanged(self):
        asset = self._asset()
        before = asset.to_buffer()
        overridden = asset.to_buffer(5)
        assert overridden[8:12] == struct.pack(">I", 5)
        assert asset.get_network_id() == NETWORK_ID
        assert asset.to_buffer() == before

    def test_genesis_data_does_not_rewrite_assets(self):
        asset = self._asset()
        before = asset.to_buffer()
        GenesisData([asset], 5).to_buffer()
        assert asset.get_network_id() == NETWORK_ID
        assert asset.to_buffer() == before

    def test_genesis_data_roundtrip(self):
        data = GenesisData([self._asset()], NETWORK_ID)
        parsed = GenesisData()
        parsed.from_buffer(data.to_buffer())
        assert parsed.get_network_id() == NETWORK_ID
        assert len(parsed.get_genesis_assets()) == 1
        assert parsed.to_buffer() == data.to_buffer()
