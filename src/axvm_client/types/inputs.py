"""
Input variants.

An input spends a whole UTXO. TransferableInput names the UTXO (txid and
output index) and its asset; the variant body carries the amount and the
SigIdx list of owner addresses that will sign.
"""

from __future__ import annotations
import struct
from typing import Any, Dict, List, Optional

from ..codec.reader import BinaryReader
from ..codec.serialization import (
    Encoding,
    Field,
    Serializable,
    build_selection_table,
    select_variant,
    type_id_for,
)
from ..codec.writer import BinaryWriter
from ..constants import ASSET_ID_LEN, TX_ID_LEN
from ..runtime.errors import SerializationError
from .primitives import UTXOID, SigIdx


class Input(Serializable):
    """Base of all input variants: holds the ordered SigIdx list."""

    _credential_name = "SECPCredential"

    def __init__(self):
        super().__init__()
        self._sig_idxs: List[SigIdx] = []

    def get_input_id(self) -> int:
        return self.get_type_id()

    def get_credential_id(self) -> int:
        """Credential type id matching this input under its codec version."""
        return type_id_for(self._credential_name, self._codec_id)

    def get_sig_idxs(self) -> List[SigIdx]:
        return list(self._sig_idxs)

    def add_signature_idx(self, address_index: int, source: bytes) -> None:
        """
        Append a signature slot.

        Args:
            address_index: Position of the signer in the consumed output's owners
            source: The signer's address
        """
        sig_idx = SigIdx(address_index, source)
        sig_idx.set_source(source)
        self._sig_idxs.append(sig_idx)

    def _write_sig_idxs(self, writer: BinaryWriter) -> None:
        writer.u32(len(self._sig_idxs))
        for sig_idx in self._sig_idxs:
            sig_idx._write(writer)

    def _read_sig_idxs(self, reader: BinaryReader) -> None:
        self._sig_idxs = []
        for _ in range(reader.u32()):
            sig_idx = SigIdx()
            sig_idx._read(reader)
            self._sig_idxs.append(sig_idx)

    def serialize(self, mode: Encoding = Encoding.HEX) -> Dict[str, Any]:
        fields = super().serialize(mode)
        fields["sigIdxs"] = [str(s.get_address_index()) for s in self._sig_idxs]
        return fields

    def deserialize(self, fields: Dict[str, Any], mode: Encoding = Encoding.HEX) -> None:
        super().deserialize(fields, mode)
        self._sig_idxs = [SigIdx(int(i)) for i in fields.get("sigIdxs", [])]


class SECPTransferInput(Input):
    """Spends a fungible amount: amount, numSigIdx, sigIdx..."""

    _type_name = "SECPTransferInput"
    _schema = (Field("amount", "_amount", "int", Encoding.DECIMAL_STRING),)

    def __init__(self, amount: int = 0):
        super().__init__()
        self._amount = amount

    def get_amount(self) -> int:
        return self._amount

    def _write(self, writer: BinaryWriter) -> None:
        writer.u64(self._amount)
        self._write_sig_idxs(writer)

    def _read(self, reader: BinaryReader) -> None:
        self._amount = reader.u64()
        self._read_sig_idxs(reader)


_INPUT_TABLE = build_selection_table({"SECPTransferInput": SECPTransferInput})


def select_input_class(input_id: int, *args: Any, **kwargs: Any) -> Input:
    """
    Construct the input variant for a type id.

    Raises:
        UnknownTypeIdError: If the id is not an input type
    """
    return select_variant(_INPUT_TABLE, input_id, "input", *args, **kwargs)


class TransferableInput(Serializable):
    """txID, outputIndex, assetID, inputTypeID, body."""

    _schema = (
        Field("txid", "_txid", "bytes", Encoding.CB58),
        Field("outputidx", "_output_idx", "int", Encoding.DECIMAL_STRING),
        Field("assetID", "_asset_id", "bytes", Encoding.CB58),
    )

    def __init__(self, txid: bytes = bytes(TX_ID_LEN), output_idx: int = 0,
                 asset_id: bytes = bytes(ASSET_ID_LEN), input: Optional[Input] = None):
        super().__init__()
        self._txid = self._check_len(txid, TX_ID_LEN, "Transaction id")
        self._output_idx = output_idx
        self._asset_id = self._check_len(asset_id, ASSET_ID_LEN, "Asset id")
        self._input = input

    def get_txid(self) -> bytes:
        return self._txid

    def get_output_idx(self) -> int:
        return self._output_idx

    def get_asset_id(self) -> bytes:
        return self._asset_id

    def get_input(self) -> Input:
        return self._input

    def get_utxo_id(self) -> str:
        return UTXOID.from_parts(self._txid, self._output_idx).to_string()

    def sort_key(self) -> bytes:
        """Canonical ordering key: txid then big-endian output index."""
        return self._txid + struct.pack(">I", self._output_idx)

    def _write(self, writer: BinaryWriter) -> None:
        writer.fixed_bytes(self._txid, TX_ID_LEN)
        writer.u32(self._output_idx)
        writer.fixed_bytes(self._asset_id, ASSET_ID_LEN)
        writer.u32(self._input.get_input_id())
        self._input._write(writer)

    def _read(self, reader: BinaryReader) -> None:
        self._txid = reader.bytes(TX_ID_LEN)
        self._output_idx = reader.u32()
        self._asset_id = reader.bytes(ASSET_ID_LEN)
        self._input = select_input_class(reader.u32())
        self._input._read(reader)

    def serialize(self, mode: Encoding = Encoding.HEX) -> Dict[str, Any]:
        fields = super().serialize(mode)
        fields["input"] = self._input.serialize(mode)
        return fields

    def deserialize(self, fields: Dict[str, Any], mode: Encoding = Encoding.HEX) -> None:
        super().deserialize(fields, mode)
        input_fields = fields.get("input")
        if not isinstance(input_fields, dict) or "_typeID" not in input_fields:
            raise SerializationError("Input fields must carry a _typeID")
        self._input = select_input_class(int(input_fields["_typeID"]))
        self._input.deserialize(input_fields, mode)
