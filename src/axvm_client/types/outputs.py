"""
Output variants and their ownership rules.

Every output carries an OutputOwners block (locktime, threshold, sorted
owner addresses) after its variant payload. TransferableOutput prefixes an
output with its asset id and type id.
"""

from __future__ import annotations
import struct
from typing import Any, Dict, List, Optional, Sequence, Union

from ..codec.addresses import parse_address
from ..codec.reader import BinaryReader
from ..codec.serialization import (
    Encoding,
    Field,
    Serializable,
    build_selection_table,
    decode_field,
    encode_field,
    select_variant,
)
from ..codec.writer import BinaryWriter
from ..constants import ADDRESS_LEN, ASSET_ID_LEN, NFT_PAYLOAD_MAX_LEN
from ..runtime.errors import AddressIndexError, EncodingError, SerializationError, ThresholdError
from .primitives import unix_now

_ADDRESS_FIELD = Field("address", "_addresses", "bytes", Encoding.CB58)

AddressLike = Union[bytes, str]


class OutputOwners(Serializable):
    """
    Who may spend an output and from when.

    Addresses are kept sorted ascending so serialization is deterministic.
    """

    _schema = (
        Field("locktime", "_locktime", "int", Encoding.DECIMAL_STRING),
        Field("threshold", "_threshold", "int", Encoding.DECIMAL_STRING),
    )

    def __init__(self, addresses: Optional[Sequence[AddressLike]] = None,
                 locktime: int = 0, threshold: int = 1):
        """
        Args:
            addresses: Owner addresses, raw 20-byte values or address strings
            locktime: Earliest time the output may be spent
            threshold: Number of owner signatures required

        Raises:
            ThresholdError: If threshold exceeds the number of addresses
        """
        super().__init__()
        self._locktime = locktime
        self._threshold = threshold
        self._addresses: List[bytes] = []
        if addresses:
            if threshold > len(addresses):
                raise ThresholdError(
                    f"Threshold {threshold} exceeds the number of owner addresses ({len(addresses)})",
                    details={"threshold": threshold, "addresses": len(addresses)})
            self._addresses = sorted(parse_address(a) for a in addresses)

    def get_locktime(self) -> int:
        return self._locktime

    def get_threshold(self) -> int:
        return self._threshold

    def get_addresses(self) -> List[bytes]:
        return list(self._addresses)

    def get_address(self, idx: int) -> bytes:
        """
        Owner address at a position.

        Raises:
            AddressIndexError: If idx is out of range
        """
        if idx < 0 or idx >= len(self._addresses):
            raise AddressIndexError(f"Address index {idx} out of range for {len(self._addresses)} owners")
        return self._addresses[idx]

    def get_address_idx(self, address: bytes) -> int:
        """Position of an address among the owners, or -1 if absent."""
        try:
            return self._addresses.index(bytes(address))
        except ValueError:
            return -1

    def get_spenders(self, addresses: Sequence[bytes], as_of: Optional[int] = None) -> List[bytes]:
        """
        Candidate addresses able to sign for this output at a given time.

        Owners are walked in sorted order and the result stops growing once
        it reaches the threshold. A locked output has no spenders.

        Args:
            addresses: Candidate signer addresses
            as_of: Logical timestamp, defaults to now

        Returns:
            Qualified spender addresses
        """
        if as_of is None:
            as_of = unix_now()
        qualified: List[bytes] = []
        if self._locktime > as_of:
            return qualified
        candidates = [bytes(a) for a in addresses]
        for owner in self._addresses:
            if len(qualified) >= self._threshold:
                break
            for candidate in candidates:
                if len(qualified) >= self._threshold:
                    break
                if candidate == owner:
                    qualified.append(candidate)
        return qualified

    def meets_threshold(self, addresses: Sequence[bytes], as_of: Optional[int] = None) -> bool:
        """True when the candidates can spend this output at ``as_of``."""
        if as_of is None:
            as_of = unix_now()
        if self._locktime > as_of:
            return False
        return len(self.get_spenders(addresses, as_of)) >= self._threshold

    def _write(self, writer: BinaryWriter) -> None:
        writer.u64(self._locktime)
        writer.u32(self._threshold)
        writer.u32(len(self._addresses))
        for address in sorted(self._addresses):
            writer.fixed_bytes(address, ADDRESS_LEN)

    def _read(self, reader: BinaryReader) -> None:
        self._locktime = reader.u64()
        self._threshold = reader.u32()
        count = reader.u32()
        self._addresses = [reader.bytes(ADDRESS_LEN) for _ in range(count)]

    def serialize(self, mode: Encoding = Encoding.HEX) -> Dict[str, Any]:
        fields = super().serialize(mode)
        fields["addresses"] = [encode_field(a, _ADDRESS_FIELD, mode) for a in self._addresses]
        return fields

    def deserialize(self, fields: Dict[str, Any], mode: Encoding = Encoding.HEX) -> None:
        super().deserialize(fields, mode)
        self._addresses = sorted(decode_field(a, _ADDRESS_FIELD, mode) for a in fields.get("addresses", []))


class Output(OutputOwners):
    """Base of all output variants."""

    def get_output_id(self) -> int:
        return self.get_type_id()

    def make_transferable(self, asset_id: bytes) -> 'TransferableOutput':
        return TransferableOutput(asset_id, self)

    def sort_key(self) -> bytes:
        """Canonical ordering key: u32 output id followed by the body."""
        return struct.pack(">I", self.get_output_id()) + self.to_buffer()

    def clone(self) -> 'Output':
        out = select_output_class(self.get_output_id())
        out.from_buffer(self.to_buffer())
        return out


class AmountOutput(Output):
    """Output carrying a fixed-width amount ahead of its owners."""

    _schema = OutputOwners._schema + (
        Field("amount", "_amount", "int", Encoding.DECIMAL_STRING),
    )

    def __init__(self, amount: int = 0, addresses: Optional[Sequence[AddressLike]] = None,
                 locktime: int = 0, threshold: int = 1):
        super().__init__(addresses, locktime, threshold)
        self._amount = amount

    def get_amount(self) -> int:
        return self._amount

    def _write(self, writer: BinaryWriter) -> None:
        writer.u64(self._amount)
        super()._write(writer)

    def _read(self, reader: BinaryReader) -> None:
        self._amount = reader.u64()
        super()._read(reader)


class SECPTransferOutput(AmountOutput):
    """Fungible transfer output: amount then owners."""

    _type_name = "SECPTransferOutput"


class SECPMintOutput(Output):
    """Mint authority for a fungible asset: owners only."""

    _type_name = "SECPMintOutput"


class NFTOutput(Output):
    """Output belonging to an NFT group."""

    _schema = OutputOwners._schema + (
        Field("groupID", "_group_id", "int", Encoding.DECIMAL_STRING),
    )

    def __init__(self, group_id: int = 0, addresses: Optional[Sequence[AddressLike]] = None,
                 locktime: int = 0, threshold: int = 1):
        super().__init__(addresses, locktime, threshold)
        self._group_id = group_id

    def get_group_id(self) -> int:
        return self._group_id


class NFTMintOutput(NFTOutput):
    """Mint authority for one NFT group: group id then owners."""

    _type_name = "NFTMintOutput"

    def _write(self, writer: BinaryWriter) -> None:
        writer.u32(self._group_id)
        super()._write(writer)

    def _read(self, reader: BinaryReader) -> None:
        self._group_id = reader.u32()
        super()._read(reader)


class NFTTransferOutput(NFTOutput):
    """An NFT: group id, length-prefixed payload, owners."""

    _type_name = "NFTTransferOutput"
    _schema = NFTOutput._schema + (
        Field("payload", "_payload", "bytes", Encoding.CB58),
    )

    def __init__(self, group_id: int = 0, payload: bytes = b"",
                 addresses: Optional[Sequence[AddressLike]] = None,
                 locktime: int = 0, threshold: int = 1):
        super().__init__(group_id, addresses, locktime, threshold)
        payload = bytes(payload or b"")
        if len(payload) > NFT_PAYLOAD_MAX_LEN:
            raise EncodingError(f"NFT payload exceeds {NFT_PAYLOAD_MAX_LEN} bytes",
                                details={"length": len(payload)})
        self._payload = payload

    def get_payload(self) -> bytes:
        return self._payload

    def _write(self, writer: BinaryWriter) -> None:
        writer.u32(self._group_id)
        writer.u32_prefixed_bytes(self._payload)
        super()._write(writer)

    def _read(self, reader: BinaryReader) -> None:
        self._group_id = reader.u32()
        self._payload = reader.u32_prefixed_bytes()
        super()._read(reader)


_OUTPUT_TABLE = build_selection_table({
    "SECPTransferOutput": SECPTransferOutput,
    "SECPMintOutput": SECPMintOutput,
    "NFTMintOutput": NFTMintOutput,
    "NFTTransferOutput": NFTTransferOutput,
})


def select_output_class(output_id: int, *args: Any, **kwargs: Any) -> Output:
    """
    Construct the output variant for a type id.

    Raises:
        UnknownTypeIdError: If the id is not an output type
    """
    return select_variant(_OUTPUT_TABLE, output_id, "output", *args, **kwargs)


class TransferableOutput(Serializable):
    """An output tagged with the asset it holds: assetID, typeID, body."""

    _schema = (Field("assetID", "_asset_id", "bytes", Encoding.CB58),)

    def __init__(self, asset_id: bytes = bytes(ASSET_ID_LEN), output: Optional[Output] = None):
        super().__init__()
        self._asset_id = self._check_len(asset_id, ASSET_ID_LEN, "Asset id")
        self._output = output

    def get_asset_id(self) -> bytes:
        return self._asset_id

    def get_output(self) -> Output:
        return self._output

    def sort_key(self) -> bytes:
        return self.to_buffer()

    def _write(self, writer: BinaryWriter) -> None:
        writer.fixed_bytes(self._asset_id, ASSET_ID_LEN)
        writer.u32(self._output.get_output_id())
        self._output._write(writer)

    def _read(self, reader: BinaryReader) -> None:
        self._asset_id = reader.bytes(ASSET_ID_LEN)
        self._output = select_output_class(reader.u32())
        self._output._read(reader)

    def serialize(self, mode: Encoding = Encoding.HEX) -> Dict[str, Any]:
        fields = super().serialize(mode)
        fields["output"] = self._output.serialize(mode)
        return fields

    def deserialize(self, fields: Dict[str, Any], mode: Encoding = Encoding.HEX) -> None:
        super().deserialize(fields, mode)
        self._output = _deserialize_output(fields.get("output"), mode)


def _deserialize_output(fields: Optional[Dict[str, Any]], mode: Encoding) -> Output:
    if not isinstance(fields, dict) or "_typeID" not in fields:
        raise SerializationError("Output fields must carry a _typeID")
    output = select_output_class(int(fields["_typeID"]))
    output.deserialize(fields, mode)
    return output
