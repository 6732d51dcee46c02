"""OperationTx: BaseTx plus a list of TransferableOperations."""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence

from ..codec.reader import BinaryReader
from ..codec.serialization import Encoding
from ..codec.writer import BinaryWriter
from ..constants import BLOCKCHAIN_ID_LEN, DEFAULT_NETWORK_ID
from ..runtime.errors import OperationError
from ..types.inputs import TransferableInput
from ..types.ops import TransferableOperation
from ..types.outputs import TransferableOutput
from .basetx import BaseTx, deserialize_list


class OperationTx(BaseTx):
    """Mints and NFT transfers; signs inputs first, then operations."""

    _type_name = "OperationTx"

    def __init__(self, network_id: int = DEFAULT_NETWORK_ID,
                 blockchain_id: bytes = bytes(BLOCKCHAIN_ID_LEN),
                 outs: Optional[Sequence[TransferableOutput]] = None,
                 ins: Optional[Sequence[TransferableInput]] = None,
                 memo: Optional[bytes] = None,
                 ops: Optional[Sequence[TransferableOperation]] = None):
        super().__init__(network_id, blockchain_id, outs, ins, memo)
        self._ops: List[TransferableOperation] = list(ops or [])
        for op in self._ops:
            if not isinstance(op, TransferableOperation):
                raise OperationError(f"OperationTx: {type(op).__name__} is not a TransferableOperation")

    def get_operations(self) -> List[TransferableOperation]:
        return list(self._ops)

    def add_operation(self, op: TransferableOperation) -> None:
        if not isinstance(op, TransferableOperation):
            raise OperationError(f"OperationTx: {type(op).__name__} is not a TransferableOperation")
        self._ops.append(op)

    def _write(self, writer: BinaryWriter) -> None:
        super()._write(writer)
        self._ops.sort(key=lambda o: o.sort_key())
        writer.u32(len(self._ops))
        for op in self._ops:
            op._write(writer)

    def _read(self, reader: BinaryReader) -> None:
        super()._read(reader)
        self._ops = []
        for _ in range(reader.u32()):
            op = TransferableOperation()
            op._read(reader)
            self._ops.append(op)

    def _signables(self) -> List[Any]:
        items = super()._signables()
        self._ops.sort(key=lambda o: o.sort_key())
        return items + [op.get_operation() for op in self._ops]

    def serialize(self, mode: Encoding = Encoding.HEX) -> Dict[str, Any]:
        fields = super().serialize(mode)
        fields["ops"] = [o.serialize(mode) for o in self._ops]
        return fields

    def deserialize(self, fields: Dict[str, Any], mode: Encoding = Encoding.HEX) -> None:
        super().deserialize(fields, mode)
        self._ops = deserialize_list(TransferableOperation, fields.get("ops", []), mode)
