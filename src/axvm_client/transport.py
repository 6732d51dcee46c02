"""
Boundary to the node transport.

The client core never performs I/O. A transport that fetches UTXOs and
accepts signed transactions is supplied by the caller and only has to match
the Transport protocol below.
"""

from __future__ import annotations
import logging
from typing import List, Optional, Protocol, Sequence

from .tx.tx import Tx
from .utxos.utxoset import UTXOSet

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """
    Interface for swap chain node clients.

    UTXOs and transactions travel as cb58 strings.
    """

    def get_utxos(self, addresses: Sequence[str], source_chain: Optional[str] = None) -> List[str]:
        """Fetch the UTXOs owned by the address strings."""
        ...

    def issue_tx(self, tx: str) -> str:
        """Submit a signed transaction; returns its id as a cb58 string."""
        ...


def fetch_utxo_set(transport: Transport, addresses: Sequence[str],
                   source_chain: Optional[str] = None,
                   utxoset: Optional[UTXOSet] = None) -> UTXOSet:
    """
    Load the UTXOs of some addresses into a set.

    Args:
        transport: Node client
        addresses: Owner address strings
        source_chain: Fetch atomic UTXOs exported from this chain instead
        utxoset: Set to add to; a new one when None

    Returns:
        The populated set
    """
    result = utxoset if utxoset is not None else UTXOSet()
    added = result.add_array(transport.get_utxos(addresses, source_chain))
    logger.debug("Fetched %d UTXOs for %d addresses", len(added), len(addresses))
    return result


def issue_tx(transport: Transport, tx: Tx) -> str:
    """Serialize a signed transaction and hand it to the transport."""
    tx_id = transport.issue_tx(tx.to_string())
    logger.debug("Issued transaction %s", tx_id)
    return tx_id
