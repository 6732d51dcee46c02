"""
Per-build accumulators for coin selection.

An AssetAmountDestination records, for one transaction being built, how much
of each asset must be sent and burned, who sends and receives, and the
inputs, outputs and change produced while selecting UTXOs.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..types.inputs import TransferableInput
from ..types.outputs import TransferableOutput


@dataclass
class AssetAmount:
    """
    Target and progress for one asset.

    ``finished`` flips once ``spent`` covers ``amount + burn``; the excess
    is recorded as ``change``.
    """
    asset_id: bytes
    amount: int = 0
    burn: int = 0
    spent: int = 0
    change: int = 0
    finished: bool = False

    def get_asset_id(self) -> bytes:
        return self.asset_id

    def get_amount(self) -> int:
        return self.amount

    def get_burn(self) -> int:
        return self.burn

    def get_spent(self) -> int:
        return self.spent

    def get_change(self) -> int:
        return self.change

    def is_finished(self) -> bool:
        return self.finished

    def spend_amount(self, value: int) -> bool:
        """
        Record a consumed UTXO amount.

        Returns:
            True once the target is covered
        """
        if not self.finished:
            self.spent += value
            total = self.amount + self.burn
            if self.spent >= total:
                self.change = self.spent - total
                self.finished = True
        return self.finished


class AssetAmountDestination:
    """Everything one build call accumulates while selecting coins."""

    def __init__(self, destinations: Sequence[bytes], senders: Sequence[bytes],
                 change_addresses: Sequence[bytes]):
        self.destinations: List[bytes] = list(destinations)
        self.senders: List[bytes] = list(senders)
        self.change_addresses: List[bytes] = list(change_addresses)
        self._amounts: Dict[bytes, AssetAmount] = {}
        self._inputs: List[TransferableInput] = []
        self._outputs: List[TransferableOutput] = []
        self._change: List[TransferableOutput] = []

    def add_asset_amount(self, asset_id: bytes, amount: int, burn: int) -> None:
        """Require ``amount`` sent plus ``burn`` destroyed; repeated ids accumulate."""
        asset_id = bytes(asset_id)
        existing = self._amounts.get(asset_id)
        if existing is None:
            self._amounts[asset_id] = AssetAmount(asset_id, amount, burn)
        else:
            existing.amount += amount
            existing.burn += burn

    def get_destinations(self) -> List[bytes]:
        return list(self.destinations)

    def get_senders(self) -> List[bytes]:
        return list(self.senders)

    def get_change_addresses(self) -> List[bytes]:
        return list(self.change_addresses)

    def asset_exists(self, asset_id: bytes) -> bool:
        return bytes(asset_id) in self._amounts

    def get_asset_amount(self, asset_id: bytes) -> Optional[AssetAmount]:
        return self._amounts.get(bytes(asset_id))

    def get_amounts(self) -> List[AssetAmount]:
        return list(self._amounts.values())

    def can_complete(self) -> bool:
        """True when every requested asset is covered."""
        return all(a.is_finished() for a in self._amounts.values())

    def add_input(self, inp: TransferableInput) -> None:
        self._inputs.append(inp)

    def add_output(self, out: TransferableOutput) -> None:
        self._outputs.append(out)

    def add_change(self, out: TransferableOutput) -> None:
        self._change.append(out)

    def get_inputs(self) -> List[TransferableInput]:
        return list(self._inputs)

    def get_outputs(self) -> List[TransferableOutput]:
        return list(self._outputs)

    def get_change_outputs(self) -> List[TransferableOutput]:
        return list(self._change)

    def get_all_outputs(self) -> List[TransferableOutput]:
        """Destination outputs followed by change outputs."""
        return self._outputs + self._change
