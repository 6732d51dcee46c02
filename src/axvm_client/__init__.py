"""
AXVM Python Client Core

Transaction model and coin selection for the AXVM swap chain: the binary
wire format of outputs, inputs, operations, credentials and transactions,
a UTXO set that builds unsigned transactions, and signing with secp256k1
key chains.
"""

from .config import NetworkConfig, get_network_config
from .constants import LATEST_CODEC, NFT_FX_ID, SECP_FX_ID
from .runtime.errors import *  # noqa: F401,F403
from .codec import Encoding, address_to_string, cb58_decode, cb58_encode, string_to_address
from .crypto import KeyPair
from .keys import KeyChain
from .types import *  # noqa: F401,F403
from .tx import *  # noqa: F401,F403
from .utxos import AssetAmount, AssetAmountDestination, MergeRule, UTXO, UTXOSet
from .transport import Transport, fetch_utxo_set, issue_tx

__version__ = "0.1.0"
