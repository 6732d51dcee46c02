"""
AXVM Binary Codec Module

Key components:
- writer.py / reader.py: big-endian fixed-width primitives
- hashes.py: SHA-256, RIPEMD-160 and cb58 checksummed strings
- addresses.py: bech32 address strings
- serialization.py: Serializable base, type id tables and human-readable fields
"""

from .addresses import address_to_string, parse_address, string_to_address
from .hashes import cb58_decode, cb58_encode, ripemd160_bytes, sha256_bytes
from .reader import BinaryReader
from .serialization import Encoding, Field, Serializable, type_id_for
from .writer import BinaryWriter

__all__ = [
    "BinaryReader",
    "BinaryWriter",
    "Encoding",
    "Field",
    "Serializable",
    "address_to_string",
    "cb58_decode",
    "cb58_encode",
    "parse_address",
    "ripemd160_bytes",
    "sha256_bytes",
    "string_to_address",
    "type_id_for",
]
