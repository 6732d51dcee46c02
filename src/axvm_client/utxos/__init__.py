"""
UTXO bookkeeping and coin selection.
"""

from .assetamount import AssetAmount, AssetAmountDestination
from .utxo import UTXO
from .utxoset import MergeRule, UTXOSet

__all__ = [
    "AssetAmount",
    "AssetAmountDestination",
    "MergeRule",
    "UTXO",
    "UTXOSet",
]
