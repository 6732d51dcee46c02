"""
Operation variants.

Operations consume UTXOs that are not plain amounts (mint authorities and
NFTs) and produce new outputs. Each operation starts with its own SigIdx
list; TransferableOperation wraps it with the asset id and the sorted list
of UTXOIDs it consumes.
"""

from __future__ import annotations
import struct
from typing import Any, Dict, List, Optional, Sequence, Union

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
from ..constants import ASSET_ID_LEN
from ..runtime.errors import SerializationError
from .outputs import NFTTransferOutput, OutputOwners, SECPMintOutput, SECPTransferOutput
from .primitives import UTXOID, SigIdx


class Operation(Serializable):
    """Base of all operation variants: holds the ordered SigIdx list."""

    _credential_name = "SECPCredential"

    def __init__(self):
        super().__init__()
        self._sig_idxs: List[SigIdx] = []

    def get_operation_id(self) -> int:
        return self.get_type_id()

    def get_credential_id(self) -> int:
        return type_id_for(self._credential_name, self._codec_id)

    def get_sig_idxs(self) -> List[SigIdx]:
        return list(self._sig_idxs)

    def add_signature_idx(self, address_index: int, source: bytes) -> None:
        sig_idx = SigIdx(address_index, source)
        sig_idx.set_source(source)
        self._sig_idxs.append(sig_idx)

    def sort_key(self) -> bytes:
        """u32 operation id followed by the body."""
        return struct.pack(">I", self.get_operation_id()) + self.to_buffer()

    def _write(self, writer: BinaryWriter) -> None:
        writer.u32(len(self._sig_idxs))
        for sig_idx in self._sig_idxs:
            sig_idx._write(writer)

    def _read(self, reader: BinaryReader) -> None:
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


class SECPMintOperation(Operation):
    """
    Mints a fungible amount.

    Re-issues the mint authority (``mint_output``) and creates the minted
    ``transfer_output``; both bodies follow the SigIdx list without type ids.
    """

    _type_name = "SECPMintOperation"

    def __init__(self, mint_output: Optional[SECPMintOutput] = None,
                 transfer_output: Optional[SECPTransferOutput] = None):
        super().__init__()
        self._mint_output = mint_output if mint_output is not None else SECPMintOutput()
        self._transfer_output = transfer_output if transfer_output is not None else SECPTransferOutput()

    def set_codec_id(self, codec_id: int) -> None:
        super().set_codec_id(codec_id)
        self._mint_output.set_codec_id(codec_id)
        self._transfer_output.set_codec_id(codec_id)

    def get_mint_output(self) -> SECPMintOutput:
        return self._mint_output

    def get_transfer_output(self) -> SECPTransferOutput:
        return self._transfer_output

    def _write(self, writer: BinaryWriter) -> None:
        super()._write(writer)
        self._mint_output._write(writer)
        self._transfer_output._write(writer)

    def _read(self, reader: BinaryReader) -> None:
        super()._read(reader)
        self._mint_output._read(reader)
        self._transfer_output._read(reader)

    def serialize(self, mode: Encoding = Encoding.HEX) -> Dict[str, Any]:
        fields = super().serialize(mode)
        fields["mintOutput"] = self._mint_output.serialize(mode)
        fields["transferOutputs"] = self._transfer_output.serialize(mode)
        return fields

    def deserialize(self, fields: Dict[str, Any], mode: Encoding = Encoding.HEX) -> None:
        super().deserialize(fields, mode)
        self._mint_output = SECPMintOutput()
        self._mint_output.deserialize(fields["mintOutput"], mode)
        self._transfer_output = SECPTransferOutput()
        self._transfer_output.deserialize(fields["transferOutputs"], mode)


class NFTMintOperation(Operation):
    """Mints one NFT per owner set: groupID, payload, numOwners, OutputOwners..."""

    _type_name = "NFTMintOperation"
    _credential_name = "NFTCredential"
    _schema = (
        Field("groupID", "_group_id", "int", Encoding.DECIMAL_STRING),
        Field("payload", "_payload", "bytes", Encoding.CB58),
    )

    def __init__(self, group_id: int = 0, payload: bytes = b"",
                 output_owners: Optional[Sequence[OutputOwners]] = None):
        super().__init__()
        self._group_id = group_id
        self._payload = bytes(payload or b"")
        self._output_owners: List[OutputOwners] = list(output_owners or [])

    def get_group_id(self) -> int:
        return self._group_id

    def get_payload(self) -> bytes:
        return self._payload

    def get_output_owners(self) -> List[OutputOwners]:
        return list(self._output_owners)

    def _write(self, writer: BinaryWriter) -> None:
        super()._write(writer)
        writer.u32(self._group_id)
        writer.u32_prefixed_bytes(self._payload)
        writer.u32(len(self._output_owners))
        for owners in self._output_owners:
            owners._write(writer)

    def _read(self, reader: BinaryReader) -> None:
        super()._read(reader)
        self._group_id = reader.u32()
        self._payload = reader.u32_prefixed_bytes()
        self._output_owners = []
        for _ in range(reader.u32()):
            owners = OutputOwners()
            owners._read(reader)
            self._output_owners.append(owners)

    def serialize(self, mode: Encoding = Encoding.HEX) -> Dict[str, Any]:
        fields = super().serialize(mode)
        fields["outputOwners"] = [o.serialize(mode) for o in self._output_owners]
        return fields

    def deserialize(self, fields: Dict[str, Any], mode: Encoding = Encoding.HEX) -> None:
        super().deserialize(fields, mode)
        self._output_owners = []
        for owner_fields in fields.get("outputOwners", []):
            owners = OutputOwners()
            owners.deserialize(owner_fields, mode)
            self._output_owners.append(owners)


class NFTTransferOperation(Operation):
    """Moves an NFT to new owners; the body is an NFTTransferOutput body."""

    _type_name = "NFTTransferOperation"
    _credential_name = "NFTCredential"

    def __init__(self, output: Optional[NFTTransferOutput] = None):
        super().__init__()
        self._output = output if output is not None else NFTTransferOutput()

    def set_codec_id(self, codec_id: int) -> None:
        super().set_codec_id(codec_id)
        self._output.set_codec_id(codec_id)

    def get_output(self) -> NFTTransferOutput:
        return self._output

    def _write(self, writer: BinaryWriter) -> None:
        super()._write(writer)
        self._output._write(writer)

    def _read(self, reader: BinaryReader) -> None:
        super()._read(reader)
        self._output._read(reader)

    def serialize(self, mode: Encoding = Encoding.HEX) -> Dict[str, Any]:
        fields = super().serialize(mode)
        fields["output"] = self._output.serialize(mode)
        return fields

    def deserialize(self, fields: Dict[str, Any], mode: Encoding = Encoding.HEX) -> None:
        super().deserialize(fields, mode)
        self._output = NFTTransferOutput()
        self._output.deserialize(fields["output"], mode)


_OPERATION_TABLE = build_selection_table({
    "SECPMintOperation": SECPMintOperation,
    "NFTMintOperation": NFTMintOperation,
    "NFTTransferOperation": NFTTransferOperation,
})


def select_operation_class(operation_id: int, *args: Any, **kwargs: Any) -> Operation:
    """
    Construct the operation variant for a type id.

    Raises:
        UnknownTypeIdError: If the id is not an operation type
    """
    return select_variant(_OPERATION_TABLE, operation_id, "operation", *args, **kwargs)


UTXOIDLike = Union[UTXOID, bytes, str]


class TransferableOperation(Serializable):
    """assetID, numUTXOIDs, UTXOID... (sorted), opTypeID, body."""

    _schema = (Field("assetID", "_asset_id", "bytes", Encoding.CB58),)

    def __init__(self, asset_id: bytes = bytes(ASSET_ID_LEN),
                 utxo_ids: Optional[Sequence[UTXOIDLike]] = None,
                 operation: Optional[Operation] = None):
        super().__init__()
        self._asset_id = self._check_len(asset_id, ASSET_ID_LEN, "Asset id")
        self._utxo_ids: List[UTXOID] = [UTXOID.coerce(u) for u in (utxo_ids or [])]
        self._operation = operation

    def get_asset_id(self) -> bytes:
        return self._asset_id

    def get_utxo_ids(self) -> List[UTXOID]:
        return list(self._utxo_ids)

    def get_operation(self) -> Operation:
        return self._operation

    def sort_key(self) -> bytes:
        return self.to_buffer()

    def _write(self, writer: BinaryWriter) -> None:
        writer.fixed_bytes(self._asset_id, ASSET_ID_LEN)
        utxo_ids = sorted(self._utxo_ids)
        writer.u32(len(utxo_ids))
        for utxo_id in utxo_ids:
            utxo_id._write(writer)
        writer.u32(self._operation.get_operation_id())
        self._operation._write(writer)

    def _read(self, reader: BinaryReader) -> None:
        self._asset_id = reader.bytes(ASSET_ID_LEN)
        self._utxo_ids = []
        for _ in range(reader.u32()):
            utxo_id = UTXOID()
            utxo_id._read(reader)
            self._utxo_ids.append(utxo_id)
        self._operation = select_operation_class(reader.u32())
        self._operation._read(reader)

    def serialize(self, mode: Encoding = Encoding.HEX) -> Dict[str, Any]:
        fields = super().serialize(mode)
        fields["utxoIDs"] = [u.to_string() for u in self._utxo_ids]
        fields["operation"] = self._operation.serialize(mode)
        return fields

    def deserialize(self, fields: Dict[str, Any], mode: Encoding = Encoding.HEX) -> None:
        super().deserialize(fields, mode)
        self._utxo_ids = [UTXOID.from_string(u) for u in fields.get("utxoIDs", [])]
        op_fields = fields.get("operation")
        if not isinstance(op_fields, dict) or "_typeID" not in op_fields:
            raise SerializationError("Operation fields must carry a _typeID")
        self._operation = select_operation_class(int(op_fields["_typeID"]))
        self._operation.deserialize(op_fields, mode)
