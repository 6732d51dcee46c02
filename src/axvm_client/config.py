"""
Network configuration.

Per-network defaults for the swap chain: human-readable address part,
chain alias, blockchain id, primary asset id and fee schedule. Values are
plain pydantic models so callers can override any field.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from .codec.hashes import cb58_decode
from .constants import DEFAULT_CHAIN_ALIAS, NETWORK_ID_TO_HRP

logger = logging.getLogger(__name__)

# Fee units, in nAXC
ONE_AXC = 1_000_000_000
DECI_AXC = ONE_AXC // 10
CENTI_AXC = ONE_AXC // 100
MILLI_AXC = ONE_AXC // 1000
MICRO_AXC = ONE_AXC // 1_000_000
NANO_AXC = 1

CUSTOM_NETWORK_ID = 1337


class NetworkConfig(BaseModel):
    """
    Swap chain settings for one network.

    Matches the per-network chain table shipped with the client.
    """
    network_id: int = Field(ge=0, alias="networkID", description="Network id embedded in transactions")
    hrp: str = Field(description="Human-readable part of address strings")
    chain_alias: str = Field(default=DEFAULT_CHAIN_ALIAS, alias="alias", description="Chain alias prefix")
    blockchain_id: str = Field(alias="blockchainID", description="Swap chain id as a cb58 string")
    axc_asset_id: Optional[str] = Field(default=None, alias="axcAssetID",
                                        description="Primary asset id as a cb58 string")
    tx_fee: int = Field(default=0, ge=0, alias="txFee", description="Fee for a base or import/export tx")
    creation_tx_fee: int = Field(default=0, ge=0, alias="creationTxFee",
                                 description="Fee for an asset creation tx")
    mint_tx_fee: int = Field(default=0, ge=0, alias="mintTxFee", description="Fee for a mint tx")

    model_config = {"populate_by_name": True}

    @field_validator("hrp", "chain_alias")
    @classmethod
    def validate_non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("must not be empty")
        return v

    def get_blockchain_id_bytes(self) -> bytes:
        """Decoded blockchain id."""
        return cb58_decode(self.blockchain_id)

    def get_axc_asset_id_bytes(self) -> Optional[bytes]:
        """Decoded primary asset id, or None when the network has none configured."""
        if self.axc_asset_id is None:
            return None
        return cb58_decode(self.axc_asset_id)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


_PUBLIC_FEES: Dict[str, int] = {
    "tx_fee": MILLI_AXC,
    "creation_tx_fee": CENTI_AXC,
    "mint_tx_fee": MILLI_AXC,
}

_ZERO_FEES: Dict[str, int] = {"tx_fee": 0, "creation_tx_fee": 0, "mint_tx_fee": 0}

_MAINNET_ASSET = "FvwEAhmxKfeiG8SnEvq42hc6whRyY3EFYAvebMqDNDGCgxN5Z"
_TESTNET_ASSET = "U8iRqJoiJm8xZHAacmvYyZVwqQx6uDNtQeP3CQ6fcgQk3JqnK"

_NETWORKS: Dict[int, Dict[str, Any]] = {
    0: dict(blockchain_id="2vrXWHgGxh5n3YsLHMV16YVVJTpT4z45Fmb4y3bL6si8kLCyg9", **_PUBLIC_FEES),
    1: dict(blockchain_id="2oYMBNV4eNHyqk2fjjV5nVQLDbtmNJzq5s3qs3Lo6ftnC6FByM",
            axc_asset_id=_MAINNET_ASSET, **_PUBLIC_FEES),
    2: dict(blockchain_id="4ktRjsAKxgMr2aEzv9SWmrU7Xk5FniHUrVCX4P1TZSfTLZWFM", **_ZERO_FEES),
    3: dict(blockchain_id="rrEWX7gc7D9mwcdrdBxBTdqh1a7WDVsMuadhTZgyXfFcRz45L", **_ZERO_FEES),
    4: dict(blockchain_id="jnUjZSRt16TcRnZzmh5aMhavwVHz3zBrSN8GfFMTQkzUnoBxC", **_PUBLIC_FEES),
    5: dict(blockchain_id="2JVSBoinj9C2J33VntvzYtVJNZdN2NKiwwKjcumHUWEb5DbBrm",
            axc_asset_id=_TESTNET_ASSET, **_PUBLIC_FEES),
    1337: dict(blockchain_id="qzfF3A11KzpcHkkqznEyQgupQrCNS6WV6fTUTwZpEKqhj1QE7",
               axc_asset_id="BUuypiq2wyuLMvyhzFXcPyxPMCgSp7eeDohhQRqTChoBjKziC", **_PUBLIC_FEES),
    12345: dict(blockchain_id="2eNy1mUFdmaxXNj1eQHUe7Np4gju9sJsEtWQ4MX3ToiNKuADed",
                axc_asset_id="2fombhL7aGPwj3KH4bfrmJwW6PVnMobf9Y2fn9GwxiAAJyFDbe", **_PUBLIC_FEES),
}


def get_network_config(network_id: int) -> NetworkConfig:
    """
    Built-in configuration for a network id.

    Unknown ids get the custom network's chain settings under their own id.

    Args:
        network_id: Network id

    Returns:
        A fresh NetworkConfig the caller may modify
    """
    defaults = _NETWORKS.get(network_id)
    if defaults is None:
        logger.debug("No defaults for network %d, using custom network settings", network_id)
        defaults = _NETWORKS[CUSTOM_NETWORK_ID]
    hrp = NETWORK_ID_TO_HRP.get(network_id, NETWORK_ID_TO_HRP[CUSTOM_NETWORK_ID])
    return NetworkConfig(network_id=network_id, hrp=hrp, **defaults)
