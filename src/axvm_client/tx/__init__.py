"""
AXVM transaction variants and envelopes.
"""

from .basetx import BaseTx
from .createassettx import CreateAssetTx
from .exporttx import ExportTx
from .genesis import GenesisAsset, GenesisData
from .importtx import ImportTx
from .operationtx import OperationTx
from .tx import Tx, UnsignedTx, select_tx_class

__all__ = [
    "BaseTx",
    "CreateAssetTx",
    "ExportTx",
    "GenesisAsset",
    "GenesisData",
    "ImportTx",
    "OperationTx",
    "Tx",
    "UnsignedTx",
    "select_tx_class",
]
