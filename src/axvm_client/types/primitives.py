"""
Primitive value types shared by outputs, inputs and operations.

Asset ids, addresses, transaction ids and blockchain ids are plain ``bytes``
of fixed length, ordered as raw byte strings. UTXOID and SigIdx get small
classes because they carry structure.
"""

from __future__ import annotations
import struct
import time
from typing import Union

from ..codec.hashes import b58_decode, b58_encode, validate_checksum, add_checksum
from ..codec.reader import BinaryReader
from ..codec.serialization import Serializable
from ..codec.writer import BinaryWriter
from ..constants import ADDRESS_LEN, CHECKSUM_LEN, TX_ID_LEN, UTXO_ID_LEN
from ..runtime.errors import AddressError, ChecksumError


def unix_now() -> int:
    """Current time as whole seconds since the epoch."""
    return int(time.time())


class UTXOID(Serializable):
    """
    Reference to one output of one transaction.

    36 bytes on the wire: the 32-byte transaction id followed by the u32
    output index. The string form is cb58.
    """

    def __init__(self, raw: bytes = bytes(UTXO_ID_LEN)):
        super().__init__()
        self._raw = self._check_len(raw, UTXO_ID_LEN, "UTXOID")

    @classmethod
    def from_parts(cls, txid: bytes, output_idx: int) -> 'UTXOID':
        txid = cls._check_len(txid, TX_ID_LEN, "Transaction id")
        return cls(txid + struct.pack(">I", output_idx))

    @classmethod
    def from_string(cls, text: str) -> 'UTXOID':
        """
        Parse a UTXOID string.

        Accepts the 40-byte checksummed cb58 form or a bare 36-byte base58
        form.

        Raises:
            ChecksumError: If a checksummed form does not verify
            AddressError: If the decoded length is neither 36 nor 40 bytes
        """
        data = b58_decode(text)
        if len(data) == UTXO_ID_LEN + CHECKSUM_LEN:
            if not validate_checksum(data):
                raise ChecksumError(f"UTXOID checksum mismatch: {text}")
            return cls(data[:UTXO_ID_LEN])
        if len(data) == UTXO_ID_LEN:
            return cls(data)
        raise AddressError(f"Invalid UTXOID length {len(data)}: {text}")

    @classmethod
    def coerce(cls, value: Union['UTXOID', bytes, str]) -> 'UTXOID':
        """Build a UTXOID from a UTXOID, raw bytes or a string."""
        if isinstance(value, UTXOID):
            return cls(value.to_bytes())
        if isinstance(value, str):
            return cls.from_string(value)
        return cls(bytes(value))

    def to_string(self) -> str:
        return b58_encode(add_checksum(self._raw))

    def to_bytes(self) -> bytes:
        return self._raw

    def get_txid(self) -> bytes:
        return self._raw[:TX_ID_LEN]

    def get_output_idx(self) -> int:
        return struct.unpack(">I", self._raw[TX_ID_LEN:])[0]

    def _write(self, writer: BinaryWriter) -> None:
        writer.fixed_bytes(self._raw, UTXO_ID_LEN)

    def _read(self, reader: BinaryReader) -> None:
        self._raw = reader.bytes(UTXO_ID_LEN)

    def __lt__(self, other: 'UTXOID') -> bool:
        return self._raw < other._raw

    def __hash__(self) -> int:
        return hash(self._raw)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"UTXOID({self.to_string()})"


class SigIdx(Serializable):
    """
    Signature slot pointing at one owner address of the consumed output.

    Only the address index is serialized; the source address is kept so the
    signer knows which key to use.
    """

    def __init__(self, address_index: int = 0, source: bytes = bytes(ADDRESS_LEN)):
        super().__init__()
        self._address_index = address_index
        self._source = bytes(source)

    def get_address_index(self) -> int:
        return self._address_index

    def get_source(self) -> bytes:
        return self._source

    def set_source(self, source: bytes) -> None:
        self._source = self._check_len(source, ADDRESS_LEN, "SigIdx source")

    def _write(self, writer: BinaryWriter) -> None:
        writer.u32(self._address_index)

    def _read(self, reader: BinaryReader) -> None:
        self._address_index = reader.u32()

    def __repr__(self) -> str:
        return f"SigIdx({self._address_index}, {self._source.hex()})"
