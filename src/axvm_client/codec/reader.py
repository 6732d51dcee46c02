"""
Binary Reader

Inverse of BinaryWriter: big-endian fixed-width decoding with an explicit
offset, so that structures can report how far they consumed a buffer.
"""

import builtins
import struct

from ..runtime.errors import TruncatedBufferError


class BinaryReader:
    """
    Big-endian byte reader over an immutable buffer.

    Reads beyond the end of the buffer raise TruncatedBufferError.
    """

    def __init__(self, buf: builtins.bytes, offset: int = 0):
        """
        Initialize reader with byte buffer.

        Args:
            buf: Byte buffer to read from
            offset: Position of the first byte to read
        """
        self._buf = builtins.bytes(buf)
        self._off = offset

    @property
    def offset(self) -> int:
        """Current read position."""
        return self._off

    @property
    def eof(self) -> bool:
        """
        Check if at end of buffer.

        Returns:
            True if at end of buffer
        """
        return self._off >= len(self._buf)

    def _take(self, size: int) -> builtins.bytes:
        if self._off + size > len(self._buf):
            raise TruncatedBufferError(
                f"Buffer overflow: need {size} bytes at offset {self._off}, buffer has {len(self._buf)}",
                details={"offset": self._off, "size": size, "length": len(self._buf)},
            )
        chunk = self._buf[self._off : self._off + size]
        self._off += size
        return chunk

    def u8(self) -> int:
        """
        Read unsigned 8-bit integer.

        Returns:
            Unsigned 8-bit integer value
        """
        return self._take(1)[0]

    def u16(self) -> int:
        """
        Read unsigned 16-bit big-endian integer.

        Returns:
            Unsigned 16-bit integer value
        """
        return struct.unpack(">H", self._take(2))[0]

    def u32(self) -> int:
        """
        Read unsigned 32-bit big-endian integer.

        Returns:
            Unsigned 32-bit integer value
        """
        return struct.unpack(">I", self._take(4))[0]

    def u64(self) -> int:
        """
        Read unsigned 64-bit big-endian integer.

        Returns:
            Unsigned 64-bit integer value
        """
        return struct.unpack(">Q", self._take(8))[0]

    def bytes(self, n: int) -> builtins.bytes:
        """
        Read raw bytes of specified length.

        Args:
            n: Number of bytes to read

        Returns:
            Bytes of length n
        """
        return self._take(n)

    def u16_prefixed_bytes(self) -> builtins.bytes:
        """Read bytes preceded by a u16 length."""
        return self._take(self.u16())

    def u32_prefixed_bytes(self) -> builtins.bytes:
        """Read bytes preceded by a u32 length."""
        return self._take(self.u32())

    def u16_prefixed_string(self) -> str:
        """Read a UTF-8 string preceded by a u16 length."""
        return self.u16_prefixed_bytes().decode("utf-8")
