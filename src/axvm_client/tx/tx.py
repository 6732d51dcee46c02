"""
Unsigned and signed transaction envelopes.

UnsignedTx: codec (u16), txTypeID (u32), transaction body.
Tx: UnsignedTx bytes, numCreds (u32), then (credentialTypeID, body) per credential.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence, TYPE_CHECKING

from ..codec.hashes import cb58_decode, cb58_encode, sha256_bytes
from ..codec.reader import BinaryReader
from ..codec.serialization import Encoding, Serializable, build_selection_table, select_variant
from ..codec.writer import BinaryWriter
from ..constants import LATEST_CODEC
from ..runtime.errors import SerializationError
from ..types.credentials import Credential, select_credential_class
from ..types.inputs import SECPTransferInput
from ..types.outputs import AmountOutput
from .basetx import BaseTx
from .createassettx import CreateAssetTx
from .exporttx import ExportTx
from .importtx import ImportTx
from .operationtx import OperationTx

if TYPE_CHECKING:
    from ..keys.keychain import KeyChain

_TX_TABLE = build_selection_table({
    "BaseTx": BaseTx,
    "CreateAssetTx": CreateAssetTx,
    "OperationTx": OperationTx,
    "ImportTx": ImportTx,
    "ExportTx": ExportTx,
})


def select_tx_class(tx_type: int, *args: Any, **kwargs: Any) -> BaseTx:
    """
    Construct the transaction variant for a transaction type id.

    Raises:
        UnknownTypeIdError: If the id is not a transaction type
    """
    return select_variant(_TX_TABLE, tx_type, "transaction", *args, **kwargs)


class UnsignedTx(Serializable):
    """A transaction body tagged with its codec version and type id."""

    def __init__(self, transaction: Optional[BaseTx] = None, codec_id: int = LATEST_CODEC):
        super().__init__()
        self.set_codec_id(codec_id)
        self._transaction = transaction

    def get_transaction(self) -> BaseTx:
        return self._transaction

    def _write(self, writer: BinaryWriter) -> None:
        writer.u16(self._codec_id)
        writer.u32(self._transaction.get_tx_type())
        self._transaction._write(writer)

    def _read(self, reader: BinaryReader) -> None:
        self.set_codec_id(reader.u16())
        self._transaction = select_tx_class(reader.u32())
        self._transaction.set_codec_id(self._codec_id)
        self._transaction._read(reader)

    def get_input_total(self, asset_id: bytes) -> int:
        """Sum of consumed amounts of an asset, imported inputs included."""
        total = 0
        for inp in self._transaction.get_total_ins():
            if inp.get_asset_id() == asset_id and isinstance(inp.get_input(), SECPTransferInput):
                total += inp.get_input().get_amount()
        return total

    def get_output_total(self, asset_id: bytes) -> int:
        """Sum of created amounts of an asset, exported outputs included."""
        total = 0
        for out in self._transaction.get_total_outs():
            if out.get_asset_id() == asset_id and isinstance(out.get_output(), AmountOutput):
                total += out.get_output().get_amount()
        return total

    def get_burn(self, asset_id: bytes) -> int:
        """Amount of an asset the transaction destroys, i.e. its fee."""
        return self.get_input_total(asset_id) - self.get_output_total(asset_id)

    def sign(self, key_chain: KeyChain) -> Tx:
        """
        Sign the transaction with keys from a key chain.

        The message is ``sha256`` of the unsigned bytes; serializing first
        puts inputs into canonical order so credentials line up with them.
        """
        message = sha256_bytes(self.to_buffer())
        credentials = self._transaction.sign(message, key_chain)
        return Tx(self, credentials)

    def serialize(self, mode: Encoding = Encoding.HEX) -> Dict[str, Any]:
        fields = super().serialize(mode)
        fields["transaction"] = self._transaction.serialize(mode)
        return fields

    def deserialize(self, fields: Dict[str, Any], mode: Encoding = Encoding.HEX) -> None:
        super().deserialize(fields, mode)
        tx_fields = fields.get("transaction")
        if not isinstance(tx_fields, dict) or "_typeID" not in tx_fields:
            raise SerializationError("Transaction fields must carry a _typeID")
        self._transaction = select_tx_class(int(tx_fields["_typeID"]))
        self._transaction.deserialize(tx_fields, mode)


class Tx(Serializable):
    """A signed transaction: the unsigned envelope plus its credentials."""

    def __init__(self, unsigned_tx: Optional[UnsignedTx] = None,
                 credentials: Optional[Sequence[Credential]] = None):
        super().__init__()
        self._unsigned_tx = unsigned_tx if unsigned_tx is not None else UnsignedTx()
        self._credentials: List[Credential] = list(credentials or [])

    def get_unsigned_tx(self) -> UnsignedTx:
        return self._unsigned_tx

    def get_credentials(self) -> List[Credential]:
        return list(self._credentials)

    def get_tx_id(self) -> bytes:
        """Transaction id: sha256 of the signed bytes."""
        return sha256_bytes(self.to_buffer())

    def _write(self, writer: BinaryWriter) -> None:
        self._unsigned_tx._write(writer)
        writer.u32(len(self._credentials))
        for credential in self._credentials:
            writer.u32(credential.get_credential_id())
            credential._write(writer)

    def _read(self, reader: BinaryReader) -> None:
        self._unsigned_tx = UnsignedTx()
        self._unsigned_tx._read(reader)
        self._credentials = []
        for _ in range(reader.u32()):
            credential = select_credential_class(reader.u32())
            credential._read(reader)
            self._credentials.append(credential)

    def to_string(self) -> str:
        return cb58_encode(self.to_buffer())

    def from_string(self, text: str) -> int:
        return self.from_buffer(cb58_decode(text))

    def serialize(self, mode: Encoding = Encoding.HEX) -> Dict[str, Any]:
        fields = super().serialize(mode)
        fields["unsignedTx"] = self._unsigned_tx.serialize(mode)
        fields["credentials"] = [c.serialize(mode) for c in self._credentials]
        return fields

    def deserialize(self, fields: Dict[str, Any], mode: Encoding = Encoding.HEX) -> None:
        super().deserialize(fields, mode)
        self._unsigned_tx = UnsignedTx()
        self._unsigned_tx.deserialize(fields["unsignedTx"], mode)
        self._credentials = []
        for cred_fields in fields.get("credentials", []):
            if "_typeID" not in cred_fields:
                raise SerializationError("Credential fields must carry a _typeID")
            credential = select_credential_class(int(cred_fields["_typeID"]))
            credential.deserialize(cred_fields, mode)
            self._credentials.append(credential)
