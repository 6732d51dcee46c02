"""
Credentials: per-input signature bundles.

A credential's signatures are index-aligned with the SigIdx list of the
input or operation it authorizes.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence

from ..codec.reader import BinaryReader
from ..codec.serialization import Encoding, Serializable, build_selection_table, select_variant
from ..codec.writer import BinaryWriter
from ..constants import SIGNATURE_LEN


class Credential(Serializable):
    """numSigs, then 65-byte recoverable signatures."""

    def __init__(self, signatures: Optional[Sequence[bytes]] = None):
        super().__init__()
        self._signatures: List[bytes] = []
        for sig in signatures or []:
            self.add_signature(sig)

    def get_credential_id(self) -> int:
        return self.get_type_id()

    def add_signature(self, signature: bytes) -> int:
        """
        Append a signature.

        Returns:
            Number of signatures now held
        """
        self._signatures.append(self._check_len(signature, SIGNATURE_LEN, "Signature"))
        return len(self._signatures)

    def get_signatures(self) -> List[bytes]:
        return list(self._signatures)

    def _write(self, writer: BinaryWriter) -> None:
        writer.u32(len(self._signatures))
        for sig in self._signatures:
            writer.fixed_bytes(sig, SIGNATURE_LEN)

    def _read(self, reader: BinaryReader) -> None:
        self._signatures = [reader.bytes(SIGNATURE_LEN) for _ in range(reader.u32())]

    def serialize(self, mode: Encoding = Encoding.HEX) -> Dict[str, Any]:
        fields = super().serialize(mode)
        fields["sigArray"] = [sig.hex() for sig in self._signatures]
        return fields

    def deserialize(self, fields: Dict[str, Any], mode: Encoding = Encoding.HEX) -> None:
        super().deserialize(fields, mode)
        self._signatures = []
        for sig in fields.get("sigArray", []):
            self.add_signature(bytes.fromhex(sig))


class SECPCredential(Credential):
    _type_name = "SECPCredential"


class NFTCredential(Credential):
    _type_name = "NFTCredential"


_CREDENTIAL_TABLE = build_selection_table({
    "SECPCredential": SECPCredential,
    "NFTCredential": NFTCredential,
})


def select_credential_class(credential_id: int, *args: Any, **kwargs: Any) -> Credential:
    """
    Construct the credential variant for a credential type id.

    Raises:
        UnknownTypeIdError: If the id is not a credential type
    """
    return select_variant(_CREDENTIAL_TABLE, credential_id, "credential", *args, **kwargs)
