"""
AXVM wire value types: outputs, inputs, operations and credentials.
"""

from .credentials import Credential, NFTCredential, SECPCredential, select_credential_class
from .initialstates import InitialStates
from .inputs import Input, SECPTransferInput, TransferableInput, select_input_class
from .minterset import MinterSet
from .ops import (
    NFTMintOperation,
    NFTTransferOperation,
    Operation,
    SECPMintOperation,
    TransferableOperation,
    select_operation_class,
)
from .outputs import (
    AmountOutput,
    NFTMintOutput,
    NFTOutput,
    NFTTransferOutput,
    Output,
    OutputOwners,
    SECPMintOutput,
    SECPTransferOutput,
    TransferableOutput,
    select_output_class,
)
from .primitives import UTXOID, SigIdx

__all__ = [
    "AmountOutput",
    "Credential",
    "InitialStates",
    "Input",
    "MinterSet",
    "NFTCredential",
    "NFTMintOperation",
    "NFTMintOutput",
    "NFTOutput",
    "NFTTransferOperation",
    "NFTTransferOutput",
    "Operation",
    "Output",
    "OutputOwners",
    "SECPCredential",
    "SECPMintOperation",
    "SECPMintOutput",
    "SECPTransferInput",
    "SECPTransferOutput",
    "SigIdx",
    "TransferableInput",
    "TransferableOperation",
    "TransferableOutput",
    "UTXOID",
    "select_credential_class",
    "select_input_class",
    "select_operation_class",
    "select_output_class",
]
