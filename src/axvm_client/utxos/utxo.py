"""
A single unspent transaction output as reported by a node.

codec (u16), txID (32), outputIndex (u32), assetID (32), outputTypeID (u32),
output body.
"""

from __future__ import annotations
from typing import Any, Dict, Optional

from ..codec.hashes import cb58_decode, cb58_encode
from ..codec.reader import BinaryReader
from ..codec.serialization import Encoding, Field, Serializable
from ..codec.writer import BinaryWriter
from ..constants import ASSET_ID_LEN, LATEST_CODEC, TX_ID_LEN
from ..types.outputs import Output, _deserialize_output, select_output_class
from ..types.primitives import UTXOID


class UTXO(Serializable):
    """An output together with the transaction output that created it."""

    _schema = (
        Field("txid", "_txid", "bytes", Encoding.CB58),
        Field("outputidx", "_output_idx", "int", Encoding.DECIMAL_STRING),
        Field("assetID", "_asset_id", "bytes", Encoding.CB58),
    )

    def __init__(self, codec_id: int = LATEST_CODEC, txid: bytes = bytes(TX_ID_LEN),
                 output_idx: int = 0, asset_id: bytes = bytes(ASSET_ID_LEN),
                 output: Optional[Output] = None):
        super().__init__()
        self.set_codec_id(codec_id)
        self._txid = self._check_len(txid, TX_ID_LEN, "Transaction id")
        self._output_idx = output_idx
        self._asset_id = self._check_len(asset_id, ASSET_ID_LEN, "Asset id")
        self._output = output

    def get_type_name(self) -> str:
        return "UTXO"

    def get_txid(self) -> bytes:
        return self._txid

    def get_output_idx(self) -> int:
        return self._output_idx

    def get_asset_id(self) -> bytes:
        return self._asset_id

    def get_output(self) -> Output:
        return self._output

    def get_utxo_id(self) -> str:
        """cb58 string of ``txid || outputIndex``; the key a UTXOSet stores it under."""
        return UTXOID.from_parts(self._txid, self._output_idx).to_string()

    def _write(self, writer: BinaryWriter) -> None:
        writer.u16(self._codec_id)
        writer.fixed_bytes(self._txid, TX_ID_LEN)
        writer.u32(self._output_idx)
        writer.fixed_bytes(self._asset_id, ASSET_ID_LEN)
        writer.u32(self._output.get_output_id())
        self._output._write(writer)

    def _read(self, reader: BinaryReader) -> None:
        self.set_codec_id(reader.u16())
        self._txid = reader.bytes(TX_ID_LEN)
        self._output_idx = reader.u32()
        self._asset_id = reader.bytes(ASSET_ID_LEN)
        self._output = select_output_class(reader.u32())
        self._output._read(reader)

    def to_string(self) -> str:
        return cb58_encode(self.to_buffer())

    def from_string(self, text: str) -> int:
        """
        Populate from a cb58 string.

        Raises:
            ChecksumError: If the checksum does not match
        """
        return self.from_buffer(cb58_decode(text))

    def clone(self) -> UTXO:
        utxo = UTXO()
        utxo.from_buffer(self.to_buffer())
        return utxo

    def serialize(self, mode: Encoding = Encoding.HEX) -> Dict[str, Any]:
        fields = super().serialize(mode)
        fields["output"] = self._output.serialize(mode)
        return fields

    def deserialize(self, fields: Dict[str, Any], mode: Encoding = Encoding.HEX) -> None:
        super().deserialize(fields, mode)
        self._output = _deserialize_output(fields.get("output"), mode)

    def __repr__(self) -> str:
        return f"UTXO({self.get_utxo_id()})"
