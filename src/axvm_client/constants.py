"""
AXVM constants.

Type identifiers for every wire variant under both codec versions, fixed
field lengths and the network defaults shared by the rest of the package.
"""

from __future__ import annotations
from typing import Dict, Tuple


LATEST_CODEC = 0
CODEC_IDS: Tuple[int, ...] = (0, 1)

SECP_FX_ID = 0
NFT_FX_ID = 1

# Fixed field widths
ASSET_ID_LEN = 32
BLOCKCHAIN_ID_LEN = 32
TX_ID_LEN = 32
ADDRESS_LEN = 20
UTXO_ID_LEN = 36
SIGNATURE_LEN = 65
CHECKSUM_LEN = 4

SYMBOL_MAX_LEN = 4
ASSET_NAME_MAX_LEN = 128
MAX_DENOMINATION = 32
MAX_MEMO_LEN = 256
NFT_PAYLOAD_MAX_LEN = 1024

# Variant name -> (codec 0 id, codec 1 id)
TYPE_IDS: Dict[str, Tuple[int, int]] = {
    # inputs
    "SECPTransferInput": (5, 65536),
    # outputs
    "SECPMintOutput": (6, 65537),
    "SECPTransferOutput": (7, 65538),
    "NFTMintOutput": (10, 131072),
    "NFTTransferOutput": (11, 131073),
    # operations
    "SECPMintOperation": (8, 65539),
    "NFTMintOperation": (12, 131074),
    "NFTTransferOperation": (13, 131075),
    # credentials
    "SECPCredential": (9, 65540),
    "NFTCredential": (14, 131076),
    # transactions
    "BaseTx": (0, 0),
    "CreateAssetTx": (1, 1),
    "OperationTx": (2, 2),
    "ImportTx": (3, 3),
    "ExportTx": (4, 4),
}

# Network defaults
DEFAULT_NETWORK_ID = 1
DEFAULT_CHAIN_ALIAS = "Swap"
DEFAULT_BLOCKCHAIN_ID = bytes([16] * BLOCKCHAIN_ID_LEN)
PLATFORM_CHAIN_ID = "11111111111111111111111111111111LpoYY"
PRIMARY_ASSET_ALIAS = "AXC"
PRIVATE_KEY_PREFIX = "PrivateKey-"

NETWORK_ID_TO_HRP: Dict[int, str] = {
    0: "custom",
    1: "axc",
    2: "cascade",
    3: "denali",
    4: "everest",
    5: "fuji",
    1337: "custom",
    12345: "local",
}

HRP_TO_NETWORK_ID: Dict[str, int] = {
    "axc": 1,
    "cascade": 2,
    "denali": 3,
    "everest": 4,
    "fuji": 5,
    "custom": 1337,
    "local": 12345,
}
