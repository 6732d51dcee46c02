"""Minter sets for NFT asset creation."""

from __future__ import annotations
from typing import List, Optional, Sequence, Union

from ..codec.addresses import parse_address


class MinterSet:
    """A threshold and the addresses allowed to mint one NFT group."""

    def __init__(self, threshold: int = 1, minters: Optional[Sequence[Union[bytes, str]]] = None,
                 hrp: Optional[str] = None):
        """
        Args:
            threshold: Signatures required to mint
            minters: Minter addresses as raw bytes or address strings
            hrp: Expected human-readable part when strings are given
        """
        self._threshold = threshold
        self._minters: List[bytes] = [parse_address(m, hrp) for m in (minters or [])]

    def get_threshold(self) -> int:
        return self._threshold

    def get_minters(self) -> List[bytes]:
        return list(self._minters)
