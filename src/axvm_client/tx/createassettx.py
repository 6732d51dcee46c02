"""CreateAssetTx: BaseTx plus name, symbol, denomination and initial state."""

from __future__ import annotations
from typing import Any, Dict, Optional, Sequence

from ..codec.reader import BinaryReader
from ..codec.serialization import Encoding, Field
from ..codec.writer import BinaryWriter
from ..constants import (
    ASSET_NAME_MAX_LEN,
    BLOCKCHAIN_ID_LEN,
    DEFAULT_NETWORK_ID,
    MAX_DENOMINATION,
    SYMBOL_MAX_LEN,
)
from ..runtime.errors import AssetNameError, DenominationError, SymbolError
from ..types.initialstates import InitialStates
from ..types.inputs import TransferableInput
from ..types.outputs import TransferableOutput
from .basetx import BaseTx


def check_asset_description(name: str, symbol: str, denomination: int) -> None:
    """
    Validate the descriptive fields of a new asset.

    Raises:
        AssetNameError: Name longer than 128 characters
        SymbolError: Symbol longer than 4 characters
        DenominationError: Denomination outside [0, 32]
    """
    if len(name) > ASSET_NAME_MAX_LEN:
        raise AssetNameError(f"Asset name may not exceed {ASSET_NAME_MAX_LEN} characters",
                             details={"name": name})
    if len(symbol) > SYMBOL_MAX_LEN:
        raise SymbolError(f"Asset symbol may not exceed {SYMBOL_MAX_LEN} characters",
                          details={"symbol": symbol})
    if not 0 <= denomination <= MAX_DENOMINATION:
        raise DenominationError(f"Denomination must be between 0 and {MAX_DENOMINATION}",
                                details={"denomination": denomination})


class CreateAssetTx(BaseTx):
    """Creates a new asset whose genesis outputs are given by ``initial_state``."""

    _type_name = "CreateAssetTx"
    _schema = BaseTx._schema + (
        Field("name", "_name", "str", Encoding.UTF8),
        Field("symbol", "_symbol", "str", Encoding.UTF8),
        Field("denomination", "_denomination", "int", Encoding.DECIMAL_STRING),
    )

    def __init__(self, network_id: int = DEFAULT_NETWORK_ID,
                 blockchain_id: bytes = bytes(BLOCKCHAIN_ID_LEN),
                 outs: Optional[Sequence[TransferableOutput]] = None,
                 ins: Optional[Sequence[TransferableInput]] = None,
                 memo: Optional[bytes] = None,
                 name: str = "", symbol: str = "", denomination: int = 0,
                 initial_state: Optional[InitialStates] = None):
        super().__init__(network_id, blockchain_id, outs, ins, memo)
        check_asset_description(name, symbol, denomination)
        self._name = name
        self._symbol = symbol
        self._denomination = denomination
        self._initial_state = initial_state if initial_state is not None else InitialStates()

    def get_name(self) -> str:
        return self._name

    def get_symbol(self) -> str:
        return self._symbol

    def get_denomination(self) -> int:
        return self._denomination

    def get_initial_states(self) -> InitialStates:
        return self._initial_state

    def _write_description(self, writer: BinaryWriter) -> None:
        writer.u16_prefixed_string(self._name)
        writer.u16_prefixed_string(self._symbol)
        writer.u8(self._denomination)
        self._initial_state._write(writer)

    def _read_description(self, reader: BinaryReader) -> None:
        self._name = reader.u16_prefixed_string()
        self._symbol = reader.u16_prefixed_string()
        self._denomination = reader.u8()
        self._initial_state = InitialStates()
        self._initial_state._read(reader)

    def _write(self, writer: BinaryWriter) -> None:
        super()._write(writer)
        self._write_description(writer)

    def _read(self, reader: BinaryReader) -> None:
        super()._read(reader)
        self._read_description(reader)

    def serialize(self, mode: Encoding = Encoding.HEX) -> Dict[str, Any]:
        fields = super().serialize(mode)
        fields["initialState"] = self._initial_state.serialize(mode)
        return fields

    def deserialize(self, fields: Dict[str, Any], mode: Encoding = Encoding.HEX) -> None:
        super().deserialize(fields, mode)
        self._initial_state = InitialStates()
        self._initial_state.deserialize(fields["initialState"], mode)
