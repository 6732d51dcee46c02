"""
Binary Writer

Big-endian fixed-width encoding used by every AXVM wire structure.
Integers are unsigned and written at their exact width; variable-length
fields carry a u16 or u32 length prefix followed by the raw bytes.
"""

import struct
from typing import List

from ..runtime.errors import EncodingError


class BinaryWriter:
    """
    Accumulating big-endian byte writer.

    Values that do not fit their declared width raise EncodingError instead
    of being silently truncated.
    """

    def __init__(self):
        """Initialize writer with empty byte buffer."""
        self._bb: List[bytes] = []

    def _uint(self, fmt: str, v: int, bits: int) -> None:
        if v < 0 or v >= (1 << bits):
            raise EncodingError(f"Value {v} does not fit in u{bits}", details={"value": v, "bits": bits})
        self._bb.append(struct.pack(fmt, v))

    def u8(self, v: int) -> None:
        """
        Write unsigned 8-bit integer.

        Args:
            v: Integer value to write (0-255)
        """
        self._uint(">B", v, 8)

    def u16(self, v: int) -> None:
        """
        Write unsigned 16-bit big-endian integer.

        Args:
            v: Integer value to write
        """
        self._uint(">H", v, 16)

    def u32(self, v: int) -> None:
        """
        Write unsigned 32-bit big-endian integer.

        Args:
            v: Integer value to write
        """
        self._uint(">I", v, 32)

    def u64(self, v: int) -> None:
        """
        Write unsigned 64-bit big-endian integer.

        Args:
            v: Integer value to write
        """
        self._uint(">Q", v, 64)

    def bytes(self, v: bytes) -> None:
        """
        Write raw bytes without length prefix.

        Args:
            v: Bytes to write directly
        """
        self._bb.append(bytes(v))

    def fixed_bytes(self, v: bytes, size: int) -> None:
        """
        Write raw bytes that must have an exact length.

        Args:
            v: Bytes to write
            size: Required length
        """
        if len(v) != size:
            raise EncodingError(f"Expected {size} bytes, got {len(v)}", details={"size": size, "actual": len(v)})
        self.bytes(v)

    def u16_prefixed_bytes(self, v: bytes) -> None:
        """
        Write bytes with a u16 length prefix.

        Args:
            v: Bytes to write with length prefix
        """
        self.u16(len(v))
        self.bytes(v)

    def u32_prefixed_bytes(self, v: bytes) -> None:
        """
        Write bytes with a u32 length prefix.

        Args:
            v: Bytes to write with length prefix
        """
        self.u32(len(v))
        self.bytes(v)

    def u16_prefixed_string(self, s: str) -> None:
        """
        Write a UTF-8 string with a u16 length prefix.

        Args:
            s: String to write
        """
        self.u16_prefixed_bytes(s.encode("utf-8"))

    def to_bytes(self) -> bytes:
        """
        Return accumulated bytes as immutable bytes object.

        Returns:
            Bytes containing all written data
        """
        return b"".join(self._bb)
