"""
AXVM Error Model

This module provides the error hierarchy for the AXVM client core. Every
failure raised by the codec, the transaction model or the coin-selection
engine derives from AXVMError and carries a numeric ErrorCode.

Errors fall into five categories. Authorization and accounting errors are
caused by the caller's request (wrong sender, not enough funds) and are safe
to show to a user as is; codec and structural errors indicate malformed data
or a library/version mismatch.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """AXVM client error codes."""

    # General errors (1-99)
    UNKNOWN = 1
    INTERNAL = 2

    # Codec errors (100-199)
    CODEC_ERROR = 100
    INVALID_CODEC_ID = 101
    UNKNOWN_TYPE_ID = 102
    ENCODING_ERROR = 103
    TRUNCATED_BUFFER = 104

    # Structural errors (200-299)
    STRUCTURAL_ERROR = 200
    MISSING_CHAIN_ID = 201
    INVALID_OUTPUT = 202
    INVALID_INPUT = 203
    INVALID_OPERATION = 204
    MEMO_TOO_LONG = 205
    INVALID_DENOMINATION = 206
    INVALID_NAME = 207
    INVALID_SYMBOL = 208
    INVALID_SERIALIZATION = 209
    INVALID_BUFFER_SIZE = 210

    # Authorization errors (300-399)
    AUTHORIZATION_ERROR = 300
    INVALID_ADDRESS = 301
    INVALID_CHECKSUM = 302
    ADDRESS_INDEX_OUT_OF_RANGE = 303
    KEY_NOT_FOUND = 304

    # Accounting errors (400-499)
    ACCOUNTING_ERROR = 400
    THRESHOLD_EXCEEDED = 401
    INSUFFICIENT_FUNDS = 402
    MISSING_FEE_ASSET = 403

    # Lookup errors (500-599)
    LOOKUP_ERROR = 500
    UTXO_NOT_FOUND = 501
    WRONG_OUTPUT_TYPE = 502


class AXVMError(Exception):
    """
    Base class for all AXVM client errors.

    Provides a structured error with a code, free-form details and an
    optional underlying cause.
    """

    default_code = ErrorCode.UNKNOWN
    user_facing = False

    def __init__(self, message: str, code: Optional[ErrorCode] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize an AXVM error.

        Args:
            message: Error message
            code: Error code, defaults to the class default
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code
        self.details = details or {}
        self.cause = cause

    @property
    def is_user_facing(self) -> bool:
        """True when the error stems from the caller's request rather than a library bug."""
        return self.user_facing

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AXVMError':
        """Create error from dictionary representation."""
        code = ErrorCode(data.get("code", cls.default_code))
        message = data.get("message", "Unknown error")
        details = data.get("details")
        return cls(message, code, details)


# Codec errors

class CodecError(AXVMError):
    """Wire format errors: bad codec version, unknown tag, malformed bytes."""
    default_code = ErrorCode.CODEC_ERROR


class CodecIdError(CodecError):
    """Codec version outside the supported set."""
    default_code = ErrorCode.INVALID_CODEC_ID


class UnknownTypeIdError(CodecError):
    """Type tag with no matching variant in its category."""
    default_code = ErrorCode.UNKNOWN_TYPE_ID


class EncodingError(CodecError):
    """Value does not fit its wire width or string form."""
    default_code = ErrorCode.ENCODING_ERROR


class TruncatedBufferError(CodecError):
    """Attempt to read beyond the end of a buffer."""
    default_code = ErrorCode.TRUNCATED_BUFFER


# Structural errors

class StructuralError(AXVMError):
    """Missing or wrongly typed fields in a structure."""
    default_code = ErrorCode.STRUCTURAL_ERROR


class ChainIdError(StructuralError):
    default_code = ErrorCode.MISSING_CHAIN_ID


class TransferableOutputError(StructuralError):
    default_code = ErrorCode.INVALID_OUTPUT


class TransferableInputError(StructuralError):
    default_code = ErrorCode.INVALID_INPUT


class OperationError(StructuralError):
    default_code = ErrorCode.INVALID_OPERATION


class MemoLengthError(StructuralError):
    default_code = ErrorCode.MEMO_TOO_LONG


class DenominationError(StructuralError):
    default_code = ErrorCode.INVALID_DENOMINATION


class AssetNameError(StructuralError):
    default_code = ErrorCode.INVALID_NAME


class SymbolError(StructuralError):
    default_code = ErrorCode.INVALID_SYMBOL


class SerializationError(StructuralError):
    """Malformed human-readable field bag."""
    default_code = ErrorCode.INVALID_SERIALIZATION


class BufferSizeError(StructuralError):
    """Fixed-width value with the wrong length."""
    default_code = ErrorCode.INVALID_BUFFER_SIZE


# Authorization errors

class AuthorizationError(AXVMError):
    """Signer or address problems."""
    default_code = ErrorCode.AUTHORIZATION_ERROR
    user_facing = True


class AddressError(AuthorizationError):
    default_code = ErrorCode.INVALID_ADDRESS


class ChecksumError(AuthorizationError):
    default_code = ErrorCode.INVALID_CHECKSUM


class AddressIndexError(AuthorizationError):
    default_code = ErrorCode.ADDRESS_INDEX_OUT_OF_RANGE


class KeyNotFoundError(AuthorizationError):
    default_code = ErrorCode.KEY_NOT_FOUND


# Accounting errors

class AccountingError(AXVMError):
    """Spend request cannot be satisfied as asked."""
    default_code = ErrorCode.ACCOUNTING_ERROR
    user_facing = True


class ThresholdError(AccountingError):
    default_code = ErrorCode.THRESHOLD_EXCEEDED


class InsufficientFundsError(AccountingError):
    default_code = ErrorCode.INSUFFICIENT_FUNDS


class FeeAssetError(AccountingError):
    default_code = ErrorCode.MISSING_FEE_ASSET


# Lookup errors

class UTXOLookupError(AXVMError):
    """Referenced UTXO is absent or of the wrong kind."""
    default_code = ErrorCode.LOOKUP_ERROR


class UTXOError(UTXOLookupError):
    default_code = ErrorCode.UTXO_NOT_FOUND


class OutputTypeError(UTXOLookupError):
    default_code = ErrorCode.WRONG_OUTPUT_TYPE


class SECPMintOutputError(OutputTypeError):
    pass


class NFTMintOutputError(OutputTypeError):
    pass


__all__ = [
    "ErrorCode",
    "AXVMError",
    "CodecError",
    "CodecIdError",
    "UnknownTypeIdError",
    "EncodingError",
    "TruncatedBufferError",
    "StructuralError",
    "ChainIdError",
    "TransferableOutputError",
    "TransferableInputError",
    "OperationError",
    "MemoLengthError",
    "DenominationError",
    "AssetNameError",
    "SymbolError",
    "SerializationError",
    "BufferSizeError",
    "AuthorizationError",
    "AddressError",
    "ChecksumError",
    "AddressIndexError",
    "KeyNotFoundError",
    "AccountingError",
    "ThresholdError",
    "InsufficientFundsError",
    "FeeAssetError",
    "UTXOLookupError",
    "UTXOError",
    "OutputTypeError",
    "SECPMintOutputError",
    "NFTMintOutputError",
]
