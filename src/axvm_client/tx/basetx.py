"""
BaseTx: the common transaction header every AXVM transaction starts with.

networkID, blockchainID, numOuts, outs, numIns, ins, memoLen, memo.
Outputs and inputs are put into canonical order before serialization so
that independently built transactions produce identical signing bytes.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Sequence, TYPE_CHECKING

from ..codec.reader import BinaryReader
from ..codec.serialization import Encoding, Field, Serializable
from ..codec.writer import BinaryWriter
from ..constants import BLOCKCHAIN_ID_LEN, DEFAULT_NETWORK_ID, MAX_MEMO_LEN
from ..runtime.errors import MemoLengthError, TransferableInputError, TransferableOutputError
from ..types.credentials import Credential, select_credential_class
from ..types.inputs import TransferableInput
from ..types.outputs import TransferableOutput

if TYPE_CHECKING:
    from ..keys.keychain import KeyChain

logger = logging.getLogger(__name__)


def check_outputs(outs: Optional[Sequence[Any]], context: str) -> List[TransferableOutput]:
    """Copy an output list, rejecting anything that is not a TransferableOutput."""
    result = list(outs or [])
    for out in result:
        if not isinstance(out, TransferableOutput):
            raise TransferableOutputError(
                f"{context}: {type(out).__name__} is not a TransferableOutput")
    return result


def check_inputs(ins: Optional[Sequence[Any]], context: str) -> List[TransferableInput]:
    """Copy an input list, rejecting anything that is not a TransferableInput."""
    result = list(ins or [])
    for inp in result:
        if not isinstance(inp, TransferableInput):
            raise TransferableInputError(
                f"{context}: {type(inp).__name__} is not a TransferableInput")
    return result


def check_memo(memo: Optional[bytes]) -> bytes:
    memo = bytes(memo or b"")
    if len(memo) > MAX_MEMO_LEN:
        raise MemoLengthError(f"Memo is {len(memo)} bytes, limit is {MAX_MEMO_LEN}",
                              details={"length": len(memo)})
    return memo


def write_outputs(writer: BinaryWriter, outs: List[TransferableOutput]) -> None:
    outs.sort(key=lambda o: o.sort_key())
    writer.u32(len(outs))
    for out in outs:
        out._write(writer)


def read_outputs(reader: BinaryReader) -> List[TransferableOutput]:
    outs = []
    for _ in range(reader.u32()):
        out = TransferableOutput()
        out._read(reader)
        outs.append(out)
    return outs


def write_inputs(writer: BinaryWriter, ins: List[TransferableInput]) -> None:
    ins.sort(key=lambda i: i.sort_key())
    writer.u32(len(ins))
    for inp in ins:
        inp._write(writer)


def read_inputs(reader: BinaryReader) -> List[TransferableInput]:
    ins = []
    for _ in range(reader.u32()):
        inp = TransferableInput()
        inp._read(reader)
        ins.append(inp)
    return ins


def deserialize_list(cls: type, items: Sequence[Dict[str, Any]], mode: Encoding) -> List[Any]:
    result = []
    for fields in items:
        item = cls()
        item.deserialize(fields, mode)
        result.append(item)
    return result


class BaseTx(Serializable):
    """
    Plain value transfer and the header of every other transaction type.
    """

    _type_name = "BaseTx"
    _schema = (
        Field("networkID", "_network_id", "int", Encoding.DECIMAL_STRING),
        Field("blockchainID", "_blockchain_id", "bytes", Encoding.CB58),
        Field("memo", "_memo", "bytes", Encoding.HEX),
    )

    def __init__(self, network_id: int = DEFAULT_NETWORK_ID,
                 blockchain_id: bytes = bytes(BLOCKCHAIN_ID_LEN),
                 outs: Optional[Sequence[TransferableOutput]] = None,
                 ins: Optional[Sequence[TransferableInput]] = None,
                 memo: Optional[bytes] = None):
        """
        Args:
            network_id: Network the transaction is valid on
            blockchain_id: Chain the transaction is issued to
            outs: Transferable outputs
            ins: Transferable inputs
            memo: Arbitrary data, up to 256 bytes

        Raises:
            TransferableOutputError: If outs holds a non-TransferableOutput
            TransferableInputError: If ins holds a non-TransferableInput
            MemoLengthError: If memo is longer than 256 bytes
        """
        super().__init__()
        self._network_id = network_id
        self._blockchain_id = self._check_len(blockchain_id, BLOCKCHAIN_ID_LEN, "Blockchain id")
        self._outs = check_outputs(outs, type(self).__name__)
        self._ins = check_inputs(ins, type(self).__name__)
        self._memo = check_memo(memo)

    def get_tx_type(self) -> int:
        return self.get_type_id()

    def get_network_id(self) -> int:
        return self._network_id

    def get_blockchain_id(self) -> bytes:
        return self._blockchain_id

    def get_outs(self) -> List[TransferableOutput]:
        return list(self._outs)

    def get_ins(self) -> List[TransferableInput]:
        return list(self._ins)

    def get_total_outs(self) -> List[TransferableOutput]:
        """Every output the transaction creates, on any chain."""
        return self.get_outs()

    def get_total_ins(self) -> List[TransferableInput]:
        """Every input the transaction consumes, on any chain."""
        return self.get_ins()

    def get_memo(self) -> bytes:
        return self._memo

    def _write(self, writer: BinaryWriter) -> None:
        check_memo(self._memo)
        writer.u32(self._network_id)
        writer.fixed_bytes(self._blockchain_id, BLOCKCHAIN_ID_LEN)
        write_outputs(writer, self._outs)
        write_inputs(writer, self._ins)
        writer.u32_prefixed_bytes(self._memo)

    def _read(self, reader: BinaryReader) -> None:
        self._network_id = reader.u32()
        self._blockchain_id = reader.bytes(BLOCKCHAIN_ID_LEN)
        self._outs = read_outputs(reader)
        self._ins = read_inputs(reader)
        self._memo = reader.u32_prefixed_bytes()

    def _signables(self) -> List[Any]:
        """Inputs and operations needing a credential, in signing order."""
        self._ins.sort(key=lambda i: i.sort_key())
        return [inp.get_input() for inp in self._ins]

    def sign(self, message: bytes, key_chain: KeyChain) -> List[Credential]:
        """
        Produce one credential per input (and per operation where present).

        For every SigIdx of an input the key of its source address signs
        ``message``; signatures are appended in SigIdx order.

        Args:
            message: Digest to sign
            key_chain: Keys available for signing

        Returns:
            Credentials aligned with the serialized input order

        Raises:
            KeyNotFoundError: If a SigIdx source has no key in the chain
        """
        credentials: List[Credential] = []
        for item in self._signables():
            credential = select_credential_class(item.get_credential_id())
            for sig_idx in item.get_sig_idxs():
                keypair = key_chain.get_key(sig_idx.get_source())
                credential.add_signature(keypair.sign(message))
            credentials.append(credential)
        logger.debug("Signed %s with %d credentials", self.get_type_name(), len(credentials))
        return credentials

    def clone(self) -> BaseTx:
        """Copy via the wire format; SigIdx source addresses are not preserved."""
        copy = type(self)()
        copy.from_buffer(self.to_buffer())
        return copy

    def serialize(self, mode: Encoding = Encoding.HEX) -> Dict[str, Any]:
        fields = super().serialize(mode)
        fields["outs"] = [o.serialize(mode) for o in self._outs]
        fields["ins"] = [i.serialize(mode) for i in self._ins]
        return fields

    def deserialize(self, fields: Dict[str, Any], mode: Encoding = Encoding.HEX) -> None:
        super().deserialize(fields, mode)
        self._outs = deserialize_list(TransferableOutput, fields.get("outs", []), mode)
        self._ins = deserialize_list(TransferableInput, fields.get("ins", []), mode)
        self._memo = check_memo(self._memo)
