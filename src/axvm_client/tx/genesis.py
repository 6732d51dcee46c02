"""
Genesis assets and genesis data.

A GenesisAsset is a CreateAssetTx defined before the network exists: its
blockchain id is all zeros, it has no inputs or outputs, and the network id
is supplied when it is serialized.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence

from ..codec.reader import BinaryReader
from ..codec.serialization import Encoding, Field, Serializable
from ..codec.writer import BinaryWriter
from ..constants import BLOCKCHAIN_ID_LEN, DEFAULT_NETWORK_ID
from ..types.initialstates import InitialStates
from .basetx import check_memo, deserialize_list, write_inputs, write_outputs
from .createassettx import CreateAssetTx


class GenesisAsset(CreateAssetTx):
    """
    aliasLen, alias, then a CreateAssetTx body with an empty header.
    """

    _schema = CreateAssetTx._schema + (
        Field("assetAlias", "_asset_alias", "str", Encoding.UTF8),
    )

    def __init__(self, asset_alias: str = "", name: str = "", symbol: str = "",
                 denomination: int = 0, initial_state: Optional[InitialStates] = None,
                 memo: Optional[bytes] = None, network_id: int = DEFAULT_NETWORK_ID):
        super().__init__(network_id, bytes(BLOCKCHAIN_ID_LEN), [], [], memo,
                         name, symbol, denomination, initial_state)
        self._asset_alias = asset_alias

    def get_type_name(self) -> str:
        return "GenesisAsset"

    def get_asset_alias(self) -> str:
        return self._asset_alias

    def to_buffer(self, network_id: Optional[int] = None) -> bytes:
        """
        Serialize under the given network id.

        Args:
            network_id: Network id to embed; the asset's current one when None
        """
        writer = BinaryWriter()
        self.write_for_network(writer, self._network_id if network_id is None else network_id)
        return writer.to_bytes()

    def write_for_network(self, writer: BinaryWriter, network_id: int) -> None:
        writer.u16_prefixed_string(self._asset_alias)
        writer.u32(network_id)
        writer.fixed_bytes(bytes(BLOCKCHAIN_ID_LEN), BLOCKCHAIN_ID_LEN)
        write_outputs(writer, [])
        write_inputs(writer, [])
        writer.u32_prefixed_bytes(check_memo(self._memo))
        self._write_description(writer)

    def _write(self, writer: BinaryWriter) -> None:
        self.write_for_network(writer, self._network_id)

    def _read(self, reader: BinaryReader) -> None:
        self._asset_alias = reader.u16_prefixed_string()
        super()._read(reader)


class GenesisData(Serializable):
    """codec, numAssets, GenesisAsset..."""

    _schema = (Field("networkID", "_network_id", "int", Encoding.DECIMAL_STRING),)

    def __init__(self, genesis_assets: Optional[Sequence[GenesisAsset]] = None,
                 network_id: int = DEFAULT_NETWORK_ID):
        super().__init__()
        self._genesis_assets: List[GenesisAsset] = list(genesis_assets or [])
        self._network_id = network_id

    def get_genesis_assets(self) -> List[GenesisAsset]:
        return list(self._genesis_assets)

    def get_network_id(self) -> int:
        return self._network_id

    def _write(self, writer: BinaryWriter) -> None:
        writer.u16(self._codec_id)
        writer.u32(len(self._genesis_assets))
        for asset in self._genesis_assets:
            asset.write_for_network(writer, self._network_id)

    def _read(self, reader: BinaryReader) -> None:
        self.set_codec_id(reader.u16())
        self._genesis_assets = []
        for _ in range(reader.u32()):
            asset = GenesisAsset()
            asset._read(reader)
            self._genesis_assets.append(asset)
        if self._genesis_assets:
            self._network_id = self._genesis_assets[0].get_network_id()

    def serialize(self, mode: Encoding = Encoding.HEX) -> Dict[str, Any]:
        fields = super().serialize(mode)
        fields["genesisAssets"] = [a.serialize(mode) for a in self._genesis_assets]
        return fields

    def deserialize(self, fields: Dict[str, Any], mode: Encoding = Encoding.HEX) -> None:
        super().deserialize(fields, mode)
        self._genesis_assets = deserialize_list(GenesisAsset, fields.get("genesisAssets", []), mode)
