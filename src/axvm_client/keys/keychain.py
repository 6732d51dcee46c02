"""
Key chain: the set of key pairs a wallet can sign with, indexed by address.
"""

from __future__ import annotations
import logging
from typing import Dict, List, Optional, Union

from ..codec.addresses import address_to_string
from ..constants import DEFAULT_CHAIN_ALIAS, NETWORK_ID_TO_HRP, DEFAULT_NETWORK_ID
from ..crypto.secp256k1 import KeyPair
from ..runtime.errors import KeyNotFoundError

logger = logging.getLogger(__name__)


class KeyChain:
    """
    Collection of KeyPair objects keyed by their 20-byte address.

    The hrp and chain alias are only used to render address strings.
    """

    def __init__(self, hrp: str = NETWORK_ID_TO_HRP[DEFAULT_NETWORK_ID],
                 chain_alias: str = DEFAULT_CHAIN_ALIAS):
        self.hrp = hrp
        self.chain_alias = chain_alias
        self._keys: Dict[bytes, KeyPair] = {}

    def make_key(self) -> KeyPair:
        """Generate a new key pair and add it to the chain."""
        keypair = KeyPair.generate()
        self.add_key(keypair)
        return keypair

    def import_key(self, private_key: Union[bytes, str]) -> KeyPair:
        """
        Add a key from raw private key bytes or a ``PrivateKey-`` string.

        Returns:
            The imported key pair
        """
        if isinstance(private_key, str):
            keypair = KeyPair.from_private_key_string(private_key)
        else:
            keypair = KeyPair(private_key)
        self.add_key(keypair)
        return keypair

    def add_key(self, keypair: KeyPair) -> None:
        self._keys[keypair.get_address()] = keypair
        logger.debug("Added key for address %s", keypair.get_address().hex())

    def remove_key(self, key: Union[KeyPair, bytes]) -> bool:
        """Remove a key by key pair or address; returns whether it was present."""
        address = key.get_address() if isinstance(key, KeyPair) else bytes(key)
        return self._keys.pop(address, None) is not None

    def has_key(self, address: bytes) -> bool:
        return bytes(address) in self._keys

    def get_key(self, address: bytes) -> KeyPair:
        """
        Key pair for an address.

        Raises:
            KeyNotFoundError: If no key for the address is held
        """
        try:
            return self._keys[bytes(address)]
        except KeyError:
            raise KeyNotFoundError(f"No key for address {bytes(address).hex()}",
                                   details={"address": bytes(address).hex()}) from None

    def get_addresses(self) -> List[bytes]:
        return list(self._keys)

    def get_address_strings(self, addresses: Optional[List[bytes]] = None) -> List[str]:
        targets = addresses if addresses is not None else self.get_addresses()
        return [address_to_string(self.hrp, self.chain_alias, a) for a in targets]

    def clone(self) -> KeyChain:
        chain = KeyChain(self.hrp, self.chain_alias)
        for keypair in self._keys.values():
            chain.add_key(KeyPair(keypair.get_private_key()))
        return chain

    def union(self, other: KeyChain) -> KeyChain:
        """New chain holding the keys of both chains."""
        chain = self.clone()
        for keypair in other._keys.values():
            chain.add_key(KeyPair(keypair.get_private_key()))
        return chain

    def __len__(self) -> int:
        return len(self._keys)
