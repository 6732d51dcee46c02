"""
Genesis state of an asset: outputs grouped by feature extension (fx) id.
"""

from __future__ import annotations
from typing import Any, Dict, List

from ..codec.reader import BinaryReader
from ..codec.serialization import Encoding, Serializable
from ..codec.writer import BinaryWriter
from ..constants import SECP_FX_ID
from ..runtime.errors import SerializationError
from .outputs import Output, select_output_class


class InitialStates(Serializable):
    """
    numFx, then per fx id ascending: fxID, numOutputs, (outputTypeID, body)...

    Outputs within an fx are emitted in canonical output order.
    """

    def __init__(self):
        super().__init__()
        self._fxs: Dict[int, List[Output]] = {}

    def add_output(self, output: Output, fx_id: int = SECP_FX_ID) -> None:
        self._fxs.setdefault(fx_id, []).append(output)

    def get_outputs(self, fx_id: int = SECP_FX_ID) -> List[Output]:
        return list(self._fxs.get(fx_id, []))

    def get_fx_ids(self) -> List[int]:
        return sorted(self._fxs)

    def _write(self, writer: BinaryWriter) -> None:
        writer.u32(len(self._fxs))
        for fx_id in sorted(self._fxs):
            outputs = sorted(self._fxs[fx_id], key=lambda o: o.sort_key())
            writer.u32(fx_id)
            writer.u32(len(outputs))
            for output in outputs:
                writer.u32(output.get_output_id())
                output._write(writer)

    def _read(self, reader: BinaryReader) -> None:
        self._fxs = {}
        for _ in range(reader.u32()):
            fx_id = reader.u32()
            outputs = []
            for _ in range(reader.u32()):
                output = select_output_class(reader.u32())
                output._read(reader)
                outputs.append(output)
            self._fxs[fx_id] = outputs

    def serialize(self, mode: Encoding = Encoding.HEX) -> Dict[str, Any]:
        fields = super().serialize(mode)
        fields["fxs"] = {
            str(fx_id): [o.serialize(mode) for o in outputs]
            for fx_id, outputs in self._fxs.items()
        }
        return fields

    def deserialize(self, fields: Dict[str, Any], mode: Encoding = Encoding.HEX) -> None:
        super().deserialize(fields, mode)
        self._fxs = {}
        for fx_id, outputs in fields.get("fxs", {}).items():
            decoded = []
            for out_fields in outputs:
                if "_typeID" not in out_fields:
                    raise SerializationError("Initial state output must carry a _typeID")
                output = select_output_class(int(out_fields["_typeID"]))
                output.deserialize(out_fields, mode)
                decoded.append(output)
            self._fxs[int(fx_id)] = decoded
