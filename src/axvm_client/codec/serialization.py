"""
Structure base class and human-readable serialization.

Every wire structure derives from Serializable. Binary encoding goes through
``_write``/``_read`` on a BinaryWriter/BinaryReader pair; the public
``to_buffer``/``from_buffer`` wrap them. Human-readable encoding is driven by
a per-class ``_schema`` of Field entries, each naming the attribute, the kind
of value it holds and the Encoding used to display it.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Tuple

from ..constants import CODEC_IDS, LATEST_CODEC, TYPE_IDS
from ..runtime.errors import (
    BufferSizeError,
    CodecIdError,
    EncodingError,
    SerializationError,
    UnknownTypeIdError,
)
from .hashes import cb58_decode, cb58_encode
from .reader import BinaryReader
from .writer import BinaryWriter


class Encoding(str, Enum):
    """Field encodings for human-readable forms."""

    HEX = "hex"
    CB58 = "cb58"
    UTF8 = "utf8"
    DECIMAL_STRING = "decimalString"
    # Serialize every field with its own declared encoding
    DISPLAY = "display"


@dataclass(frozen=True)
class Field:
    """
    Schema entry for one serialized attribute.

    Attributes:
        name: Key in the serialized dict
        attr: Instance attribute holding the value
        kind: "bytes", "int" or "str"
        encoding: Encoding used in display mode
    """

    name: str
    attr: str
    kind: str
    encoding: Encoding


def encode_field(value: Any, field: Field, mode: Encoding = Encoding.HEX) -> str:
    """
    Encode one field value as a string.

    In HEX mode byte values are hex and integers decimal strings; in DISPLAY
    mode the field's declared encoding applies.
    """
    encoding = field.encoding if mode == Encoding.DISPLAY else Encoding.HEX
    if field.kind == "int":
        return str(int(value))
    if field.kind == "str":
        value = value.encode("utf-8")
        if encoding == Encoding.UTF8:
            return value.decode("utf-8")
    raw = bytes(value)
    if encoding == Encoding.CB58:
        return cb58_encode(raw)
    if encoding == Encoding.UTF8:
        return raw.decode("utf-8")
    return raw.hex()


def decode_field(text: str, field: Field, mode: Encoding = Encoding.HEX) -> Any:
    """Inverse of encode_field."""
    encoding = field.encoding if mode == Encoding.DISPLAY else Encoding.HEX
    if not isinstance(text, str):
        raise SerializationError(f"Field {field.name!r} must be a string, got {type(text).__name__}")
    if field.kind == "int":
        try:
            return int(text, 10)
        except ValueError as e:
            raise SerializationError(f"Field {field.name!r} is not a decimal string: {text!r}", cause=e)
    if encoding == Encoding.CB58:
        raw = cb58_decode(text)
    elif encoding == Encoding.UTF8:
        raw = text.encode("utf-8")
    else:
        try:
            raw = bytes.fromhex(text)
        except ValueError as e:
            raise SerializationError(f"Field {field.name!r} is not hex: {text!r}", cause=e)
    if field.kind == "str":
        return raw.decode("utf-8")
    return raw


def type_id_for(type_name: str, codec_id: int) -> int:
    """
    Type id of a variant under a codec version.

    Raises:
        CodecIdError: If codec_id is not a supported codec version
    """
    if codec_id not in CODEC_IDS:
        raise CodecIdError(f"Invalid codec id {codec_id}, expected one of {CODEC_IDS}",
                           details={"type": type_name, "codec_id": codec_id})
    return TYPE_IDS[type_name][codec_id]


class Serializable:
    """
    Base for every binary structure of the AXVM wire format.

    Subclasses set ``_type_name`` when they have a registered type id, and
    implement ``_write``/``_read``.
    """

    _type_name: ClassVar[str] = ""
    _schema: ClassVar[Tuple[Field, ...]] = ()

    def __init__(self):
        self._codec_id = LATEST_CODEC

    # codec version

    def get_codec_id(self) -> int:
        return self._codec_id

    def set_codec_id(self, codec_id: int) -> None:
        """
        Switch the structure to another codec version.

        Raises:
            CodecIdError: Unless codec_id is 0 or 1
        """
        if codec_id not in CODEC_IDS:
            raise CodecIdError(f"{type(self).__name__}.set_codec_id: invalid codec id {codec_id}",
                               details={"codec_id": codec_id})
        self._codec_id = codec_id

    def get_type_id(self) -> int:
        """Type id under the active codec version."""
        return type_id_for(self._type_name, self._codec_id)

    def get_type_name(self) -> str:
        return self._type_name or type(self).__name__

    # binary

    def _write(self, writer: BinaryWriter) -> None:
        raise NotImplementedError

    def _read(self, reader: BinaryReader) -> None:
        raise NotImplementedError

    def to_buffer(self) -> bytes:
        """Serialize to the exact wire bytes."""
        writer = BinaryWriter()
        self._write(writer)
        return writer.to_bytes()

    def from_buffer(self, buf: bytes, offset: int = 0) -> int:
        """
        Populate this instance from wire bytes.

        Args:
            buf: Buffer holding the structure
            offset: Position of the first byte of the structure

        Returns:
            Offset just past the structure
        """
        reader = BinaryReader(buf, offset)
        self._read(reader)
        return reader.offset

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self.to_buffer() == other.to_buffer()

    __hash__ = None  # type: ignore[assignment]

    # human readable

    def serialize(self, mode: Encoding = Encoding.HEX) -> Dict[str, Any]:
        """
        Encode into a plain dict of strings.

        Args:
            mode: Encoding.HEX or Encoding.DISPLAY

        Returns:
            Field dict including type metadata
        """
        fields: Dict[str, Any] = {
            "_typeName": self.get_type_name(),
            "_codecID": self._codec_id,
        }
        if self._type_name:
            fields["_typeID"] = self.get_type_id()
        for field in self._schema:
            fields[field.name] = encode_field(getattr(self, field.attr), field, mode)
        return fields

    def deserialize(self, fields: Dict[str, Any], mode: Encoding = Encoding.HEX) -> None:
        """
        Populate this instance from a dict produced by serialize.

        Raises:
            SerializationError: On type name mismatch or missing fields
        """
        if not isinstance(fields, dict):
            raise SerializationError(f"{type(self).__name__}.deserialize expects a dict")
        type_name = fields.get("_typeName")
        if type_name is not None and type_name != self.get_type_name():
            raise SerializationError(
                f"Type name mismatch: expected {self.get_type_name()!r}, got {type_name!r}")
        if "_codecID" in fields:
            self.set_codec_id(int(fields["_codecID"]))
        for field in self._schema:
            if field.name not in fields:
                raise SerializationError(f"{type(self).__name__}: missing field {field.name!r}")
            setattr(self, field.attr, decode_field(fields[field.name], field, mode))

    @staticmethod
    def _check_len(value: bytes, size: int, what: str) -> bytes:
        value = bytes(value)
        if len(value) != size:
            raise BufferSizeError(f"{what} must be {size} bytes, got {len(value)}",
                                  details={"expected": size, "actual": len(value)})
        return value


def require_type_id(type_id: int, expected: Dict[int, Any], category: str) -> Any:
    """Look up a category selection table, failing on unknown tags."""
    try:
        return expected[type_id]
    except KeyError:
        raise UnknownTypeIdError(f"Unknown {category} type id {type_id}",
                                 details={"category": category, "type_id": type_id}) from None


def build_selection_table(classes: Dict[str, type]) -> Dict[int, Tuple[type, int]]:
    """
    Map every type id of the given variants to ``(class, codec_id)``.

    The table is static data derived from TYPE_IDS.
    """
    table: Dict[int, Tuple[type, int]] = {}
    for name, cls in classes.items():
        for codec_id in CODEC_IDS:
            type_id = TYPE_IDS[name][codec_id]
            if type_id in table and table[type_id][0] is not cls:
                raise EncodingError(f"Type id {type_id} registered twice")
            table.setdefault(type_id, (cls, codec_id))
    return table


def select_variant(table: Dict[int, Tuple[type, int]], type_id: int, category: str,
                   *args: Any, **kwargs: Any) -> Any:
    """
    Construct the variant registered for a type id.

    The instance adopts the codec version the type id belongs to, so that
    re-serializing it reproduces the same tag.
    """
    cls, codec_id = require_type_id(type_id, table, category)
    instance = cls(*args, **kwargs)
    instance.set_codec_id(codec_id)
    return instance
