"""ExportTx: BaseTx plus a destination chain and the outputs sent there."""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence

from ..codec.hashes import cb58_decode, cb58_encode
from ..codec.reader import BinaryReader
from ..codec.serialization import Encoding
from ..codec.writer import BinaryWriter
from ..constants import BLOCKCHAIN_ID_LEN, DEFAULT_NETWORK_ID
from ..runtime.errors import ChainIdError
from ..types.inputs import TransferableInput
from ..types.outputs import AmountOutput, TransferableOutput
from .basetx import BaseTx, check_outputs, deserialize_list, read_outputs, write_outputs


class ExportTx(BaseTx):
    """destinationChain, numOuts, exportOuts... after the BaseTx body."""

    _type_name = "ExportTx"

    def __init__(self, network_id: int = DEFAULT_NETWORK_ID,
                 blockchain_id: bytes = bytes(BLOCKCHAIN_ID_LEN),
                 outs: Optional[Sequence[TransferableOutput]] = None,
                 ins: Optional[Sequence[TransferableInput]] = None,
                 memo: Optional[bytes] = None,
                 destination_chain: Optional[bytes] = None,
                 export_outs: Optional[Sequence[TransferableOutput]] = None):
        """
        Raises:
            TransferableOutputError: If export_outs holds a non-TransferableOutput
        """
        super().__init__(network_id, blockchain_id, outs, ins, memo)
        self._destination_chain = (None if destination_chain is None
                                   else self._check_len(destination_chain, BLOCKCHAIN_ID_LEN,
                                                        "Destination chain"))
        self._export_outs = check_outputs(export_outs, "ExportTx")

    def get_destination_chain(self) -> Optional[bytes]:
        return self._destination_chain

    def get_export_outputs(self) -> List[TransferableOutput]:
        return list(self._export_outs)

    def get_export_total(self) -> int:
        """Sum of the amounts leaving this chain."""
        return sum(o.get_output().get_amount() for o in self._export_outs
                   if isinstance(o.get_output(), AmountOutput))

    def get_total_outs(self) -> List[TransferableOutput]:
        return self.get_outs() + self.get_export_outputs()

    def _write(self, writer: BinaryWriter) -> None:
        if self._destination_chain is None:
            raise ChainIdError("ExportTx: destination chain is not set")
        super()._write(writer)
        writer.fixed_bytes(self._destination_chain, BLOCKCHAIN_ID_LEN)
        write_outputs(writer, self._export_outs)

    def _read(self, reader: BinaryReader) -> None:
        super()._read(reader)
        self._destination_chain = reader.bytes(BLOCKCHAIN_ID_LEN)
        self._export_outs = read_outputs(reader)

    def serialize(self, mode: Encoding = Encoding.HEX) -> Dict[str, Any]:
        fields = super().serialize(mode)
        if self._destination_chain is not None:
            fields["destinationChain"] = (cb58_encode(self._destination_chain) if mode == Encoding.DISPLAY
                                          else self._destination_chain.hex())
        fields["exportOuts"] = [o.serialize(mode) for o in self._export_outs]
        return fields

    def deserialize(self, fields: Dict[str, Any], mode: Encoding = Encoding.HEX) -> None:
        super().deserialize(fields, mode)
        chain = fields.get("destinationChain")
        if chain is None:
            self._destination_chain = None
        else:
            self._destination_chain = cb58_decode(chain) if mode == Encoding.DISPLAY else bytes.fromhex(chain)
        self._export_outs = deserialize_list(TransferableOutput, fields.get("exportOuts", []), mode)
