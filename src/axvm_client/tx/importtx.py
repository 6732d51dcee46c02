"""ImportTx: BaseTx plus a source chain and the inputs it imports from there."""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence

from ..codec.hashes import cb58_decode, cb58_encode
from ..codec.reader import BinaryReader
from ..codec.serialization import Encoding
from ..codec.writer import BinaryWriter
from ..constants import BLOCKCHAIN_ID_LEN, DEFAULT_NETWORK_ID
from ..runtime.errors import ChainIdError
from ..types.inputs import TransferableInput
from ..types.outputs import TransferableOutput
from .basetx import BaseTx, check_inputs, deserialize_list, read_inputs, write_inputs


class ImportTx(BaseTx):
    """sourceChain, numIns, importIns... after the BaseTx body."""

    _type_name = "ImportTx"

    def __init__(self, network_id: int = DEFAULT_NETWORK_ID,
                 blockchain_id: bytes = bytes(BLOCKCHAIN_ID_LEN),
                 outs: Optional[Sequence[TransferableOutput]] = None,
                 ins: Optional[Sequence[TransferableInput]] = None,
                 memo: Optional[bytes] = None,
                 source_chain: Optional[bytes] = None,
                 import_ins: Optional[Sequence[TransferableInput]] = None):
        """
        Raises:
            TransferableInputError: If import_ins holds a non-TransferableInput
        """
        super().__init__(network_id, blockchain_id, outs, ins, memo)
        self._source_chain = (None if source_chain is None
                              else self._check_len(source_chain, BLOCKCHAIN_ID_LEN, "Source chain"))
        self._import_ins = check_inputs(import_ins, "ImportTx")

    def get_source_chain(self) -> Optional[bytes]:
        return self._source_chain

    def get_import_inputs(self) -> List[TransferableInput]:
        return list(self._import_ins)

    def get_total_ins(self) -> List[TransferableInput]:
        return self.get_ins() + self.get_import_inputs()

    def _write(self, writer: BinaryWriter) -> None:
        if self._source_chain is None:
            raise ChainIdError("ImportTx: source chain is not set")
        super()._write(writer)
        writer.fixed_bytes(self._source_chain, BLOCKCHAIN_ID_LEN)
        write_inputs(writer, self._import_ins)

    def _read(self, reader: BinaryReader) -> None:
        super()._read(reader)
        self._source_chain = reader.bytes(BLOCKCHAIN_ID_LEN)
        self._import_ins = read_inputs(reader)

    def _signables(self) -> List[Any]:
        items = super()._signables()
        self._import_ins.sort(key=lambda i: i.sort_key())
        return items + [inp.get_input() for inp in self._import_ins]

    def serialize(self, mode: Encoding = Encoding.HEX) -> Dict[str, Any]:
        fields = super().serialize(mode)
        if self._source_chain is not None:
            fields["sourceChain"] = (cb58_encode(self._source_chain) if mode == Encoding.DISPLAY
                                     else self._source_chain.hex())
        fields["importIns"] = [i.serialize(mode) for i in self._import_ins]
        return fields

    def deserialize(self, fields: Dict[str, Any], mode: Encoding = Encoding.HEX) -> None:
        super().deserialize(fields, mode)
        chain = fields.get("sourceChain")
        if chain is None:
            self._source_chain = None
        else:
            self._source_chain = cb58_decode(chain) if mode == Encoding.DISPLAY else bytes.fromhex(chain)
        self._import_ins = deserialize_list(TransferableInput, fields.get("importIns", []), mode)
