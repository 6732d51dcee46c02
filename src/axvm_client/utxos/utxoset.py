"""
UTXO set, coin selection and transaction builders.

The set indexes UTXOs by id and by owner address. ``get_minimum_spendable``
is a greedy scan over the set in insertion order: it consumes whole UTXOs
until every requested asset is covered, then emits destination and change
outputs. The ``build_*_tx`` methods wrap it and return unsigned
transactions.
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ..codec.addresses import parse_address
from ..codec.hashes import cb58_decode, cb58_encode
from ..codec.serialization import Encoding
from ..constants import NFT_FX_ID, PLATFORM_CHAIN_ID
from ..runtime.errors import (
    AddressError,
    FeeAssetError,
    InsufficientFundsError,
    NFTMintOutputError,
    OutputTypeError,
    SECPMintOutputError,
    ThresholdError,
    UTXOError,
)
from ..tx.basetx import BaseTx
from ..tx.createassettx import CreateAssetTx
from ..tx.exporttx import ExportTx
from ..tx.importtx import ImportTx
from ..tx.operationtx import OperationTx
from ..tx.tx import UnsignedTx
from ..types.initialstates import InitialStates
from ..types.inputs import SECPTransferInput, TransferableInput
from ..types.minterset import MinterSet
from ..types.ops import (
    NFTMintOperation,
    NFTTransferOperation,
    Operation,
    SECPMintOperation,
    TransferableOperation,
)
from ..types.outputs import (
    AmountOutput,
    NFTMintOutput,
    NFTTransferOutput,
    OutputOwners,
    SECPMintOutput,
    SECPTransferOutput,
    TransferableOutput,
    select_output_class,
)
from ..types.primitives import UTXOID, unix_now
from .assetamount import AssetAmountDestination
from .utxo import UTXO

logger = logging.getLogger(__name__)

AddressLike = Union[bytes, str]
UTXOLike = Union[UTXO, str, bytes]
UTXOIDLike = Union[UTXOID, str, bytes]


class MergeRule(str, Enum):
    """How ``merge_by_rule`` combines two sets."""
    INTERSECTION = "intersection"
    DIFFERENCE_SELF = "differenceSelf"
    DIFFERENCE_NEW = "differenceNew"
    SYM_DIFFERENCE = "symDifference"
    UNION = "union"
    UNION_MINUS_NEW = "unionMinusNew"
    UNION_MINUS_SELF = "unionMinusSelf"


def _addresses(values: Optional[Sequence[AddressLike]]) -> List[bytes]:
    return [parse_address(v) for v in (values or [])]


def _check_threshold(threshold: int, to_addresses: Sequence[AddressLike], context: str) -> None:
    if threshold > len(to_addresses):
        raise ThresholdError(f"{context}: threshold is greater than number of addresses",
                             details={"threshold": threshold, "addresses": len(to_addresses)})


def _utxo_key(utxoid: UTXOIDLike) -> str:
    return UTXOID.coerce(utxoid).to_string()


def _add_sig_idxs(target: Union[SECPTransferInput, Operation], output: OutputOwners,
                  spenders: Sequence[bytes], context: str) -> None:
    for spender in spenders:
        idx = output.get_address_idx(spender)
        if idx == -1:
            raise AddressError(f"{context}: no such address in output: {spender.hex()}",
                               details={"address": spender.hex()})
        target.add_signature_idx(idx, spender)


class UTXOSet:
    """
    Mutable collection of UTXOs owned by a wallet.

    Iteration order is insertion order and is the order coin selection scans
    in. Not safe for concurrent mutation.
    """

    def __init__(self):
        self._utxos: Dict[str, UTXO] = {}
        self._address_utxos: Dict[bytes, Dict[str, int]] = {}

    # indexing

    @staticmethod
    def parse_utxo(utxo: UTXOLike) -> UTXO:
        """
        Copy a UTXO given as an object, cb58 string or raw bytes.

        Raises:
            UTXOError: If the argument is none of these
        """
        parsed = UTXO()
        if isinstance(utxo, str):
            parsed.from_buffer(cb58_decode(utxo))
        elif isinstance(utxo, UTXO):
            parsed.from_buffer(utxo.to_buffer())
        elif isinstance(utxo, (bytes, bytearray)):
            parsed.from_buffer(bytes(utxo))
        else:
            raise UTXOError(f"UTXOSet.parse_utxo: {type(utxo).__name__} is not a UTXO or string")
        return parsed

    def add(self, utxo: UTXOLike, overwrite: bool = False) -> Optional[UTXO]:
        """
        Store a copy of a UTXO and index it under each owner address.

        Returns:
            The stored UTXO, or None when it was already present and
            ``overwrite`` is False
        """
        parsed = self.parse_utxo(utxo)
        key = parsed.get_utxo_id()
        if key in self._utxos and not overwrite:
            return None
        self._utxos[key] = parsed
        output = parsed.get_output()
        for address in output.get_addresses():
            self._address_utxos.setdefault(address, {})[key] = output.get_locktime()
        return parsed

    def add_array(self, utxos: Sequence[UTXOLike], overwrite: bool = False) -> List[UTXO]:
        """Add several UTXOs; returns those actually stored."""
        added = []
        for utxo in utxos:
            result = self.add(utxo, overwrite)
            if result is not None:
                added.append(result)
        return added

    def remove(self, utxo: UTXOLike) -> Optional[UTXO]:
        """Remove a UTXO; returns it, or None when it was not in the set."""
        parsed = self.parse_utxo(utxo)
        key = parsed.get_utxo_id()
        removed = self._utxos.pop(key, None)
        if removed is None:
            return None
        for address in removed.get_output().get_addresses():
            index = self._address_utxos.get(address)
            if index is not None:
                index.pop(key, None)
        return removed

    def remove_array(self, utxos: Sequence[UTXOLike]) -> List[UTXO]:
        removed = []
        for utxo in utxos:
            result = self.remove(utxo)
            if result is not None:
                removed.append(result)
        return removed

    def includes(self, utxo: UTXOLike) -> bool:
        try:
            parsed = self.parse_utxo(utxo)
        except UTXOError:
            return False
        return parsed.get_utxo_id() in self._utxos

    def get_utxo(self, utxoid: UTXOIDLike) -> Optional[UTXO]:
        return self._utxos.get(_utxo_key(utxoid))

    def get_all_utxos(self, utxoids: Optional[Sequence[UTXOIDLike]] = None) -> List[UTXO]:
        """All UTXOs in insertion order, or those named by ``utxoids`` that exist."""
        if utxoids is None:
            return list(self._utxos.values())
        results = []
        for utxoid in utxoids:
            utxo = self._utxos.get(_utxo_key(utxoid))
            if utxo is not None:
                results.append(utxo)
        return results

    def get_all_utxo_strings(self, utxoids: Optional[Sequence[UTXOIDLike]] = None) -> List[str]:
        return [u.to_string() for u in self.get_all_utxos(utxoids)]

    def get_utxo_ids(self, addresses: Optional[Sequence[AddressLike]] = None,
                     spendable: bool = True, as_of: Optional[int] = None) -> List[str]:
        """
        Ids of UTXOs owned by any of the addresses.

        Args:
            addresses: Owner addresses; every UTXO id when None
            spendable: Only include UTXOs whose locktime has passed
            as_of: Logical timestamp for the locktime check, defaults to now

        Returns:
            UTXO id strings without duplicates
        """
        if addresses is None:
            return list(self._utxos)
        if as_of is None:
            as_of = unix_now()
        results: List[str] = []
        seen = set()
        for address in _addresses(addresses):
            for key, locktime in self._address_utxos.get(address, {}).items():
                if key in seen:
                    continue
                if spendable and locktime > as_of:
                    continue
                seen.add(key)
                results.append(key)
        return results

    def get_addresses(self) -> List[bytes]:
        return list(self._address_utxos)

    def get_balance(self, addresses: Sequence[AddressLike], asset_id: Union[bytes, str],
                    as_of: Optional[int] = None) -> int:
        """
        Spendable amount of an asset held by the addresses.

        Only amount outputs whose threshold the addresses meet are counted.
        """
        if isinstance(asset_id, str):
            asset_id = cb58_decode(asset_id)
        if as_of is None:
            as_of = unix_now()
        owners = _addresses(addresses)
        total = 0
        for utxo in self.get_all_utxos(self.get_utxo_ids(owners, as_of=as_of)):
            output = utxo.get_output()
            if (isinstance(output, AmountOutput) and utxo.get_asset_id() == asset_id
                    and output.meets_threshold(owners, as_of)):
                total += output.get_amount()
        return total

    def get_asset_ids(self, addresses: Optional[Sequence[AddressLike]] = None) -> List[bytes]:
        """Distinct asset ids held, in first-seen order."""
        utxoids = None if addresses is None else self.get_utxo_ids(addresses)
        results: List[bytes] = []
        for utxo in self.get_all_utxos(utxoids):
            if utxo.get_asset_id() not in results:
                results.append(utxo.get_asset_id())
        return results

    def filter(self, args: Sequence[Any], predicate: Callable[..., bool]) -> UTXOSet:
        """New set of the UTXOs for which ``predicate(utxo, *args)`` holds."""
        result = UTXOSet()
        for utxo in self._utxos.values():
            if predicate(utxo, *args):
                result.add(utxo)
        return result

    def clone(self) -> UTXOSet:
        result = UTXOSet()
        result.add_array(self.get_all_utxos())
        return result

    def __len__(self) -> int:
        return len(self._utxos)

    # set algebra

    def merge(self, utxoset: UTXOSet, has_utxoids: Optional[Sequence[UTXOIDLike]] = None) -> UTXOSet:
        """
        New set with this set's UTXOs followed by the other's.

        Entries already present are not overwritten, so this set wins.
        """
        result = UTXOSet()
        result.add_array(self.get_all_utxos(has_utxoids))
        result.add_array(utxoset.get_all_utxos(has_utxoids))
        return result

    def intersection(self, utxoset: UTXOSet) -> UTXOSet:
        other = set(utxoset.get_utxo_ids())
        return self.merge(utxoset, [k for k in self.get_utxo_ids() if k in other])

    def difference(self, utxoset: UTXOSet) -> UTXOSet:
        other = set(utxoset.get_utxo_ids())
        return self.merge(utxoset, [k for k in self.get_utxo_ids() if k not in other])

    def sym_difference(self, utxoset: UTXOSet) -> UTXOSet:
        mine = self.get_utxo_ids()
        theirs = utxoset.get_utxo_ids()
        mine_set, theirs_set = set(mine), set(theirs)
        keep = [k for k in mine if k not in theirs_set] + [k for k in theirs if k not in mine_set]
        return self.merge(utxoset, keep)

    def union(self, utxoset: UTXOSet) -> UTXOSet:
        return self.merge(utxoset)

    def merge_by_rule(self, utxoset: UTXOSet, rule: Union[MergeRule, str]) -> UTXOSet:
        """
        Combine with another set and replace this set's contents with the result.

        Raises:
            UTXOError: If the rule is unknown

        Returns:
            The combined set
        """
        try:
            rule = MergeRule(rule)
        except ValueError:
            raise UTXOError(f"UTXOSet.merge_by_rule: bad merge rule {rule!r}") from None
        if rule == MergeRule.INTERSECTION:
            combined = self.intersection(utxoset)
        elif rule in (MergeRule.DIFFERENCE_SELF, MergeRule.UNION_MINUS_NEW):
            combined = self.difference(utxoset)
        elif rule in (MergeRule.DIFFERENCE_NEW, MergeRule.UNION_MINUS_SELF):
            combined = utxoset.difference(self)
        elif rule == MergeRule.SYM_DIFFERENCE:
            combined = self.sym_difference(utxoset)
        else:
            combined = self.union(utxoset)
        self._utxos = dict(combined._utxos)
        self._address_utxos = {a: dict(m) for a, m in combined._address_utxos.items()}
        return combined

    # human readable

    def serialize(self, mode: Encoding = Encoding.HEX) -> Dict[str, Any]:
        address_utxos = {}
        for address, index in self._address_utxos.items():
            key = cb58_encode(address) if mode == Encoding.DISPLAY else address.hex()
            address_utxos[key] = {utxoid: str(locktime) for utxoid, locktime in index.items()}
        return {
            "_typeName": "UTXOSet",
            "utxos": {key: utxo.serialize(mode) for key, utxo in self._utxos.items()},
            "addressUTXOs": address_utxos,
        }

    def deserialize(self, fields: Dict[str, Any], mode: Encoding = Encoding.HEX) -> None:
        utxos: Dict[str, UTXO] = {}
        for key, utxo_fields in fields.get("utxos", {}).items():
            utxo = UTXO()
            utxo.deserialize(utxo_fields, mode)
            utxos[key] = utxo
        address_utxos: Dict[bytes, Dict[str, int]] = {}
        for address, index in fields.get("addressUTXOs", {}).items():
            raw = cb58_decode(address) if mode == Encoding.DISPLAY else bytes.fromhex(address)
            address_utxos[raw] = {utxoid: int(locktime) for utxoid, locktime in index.items()}
        self._utxos = utxos
        self._address_utxos = address_utxos

    # coin selection

    def get_minimum_spendable(self, aad: AssetAmountDestination, as_of: Optional[int] = None,
                              locktime: int = 0, threshold: int = 1) -> None:
        """
        Select UTXOs covering every asset amount requested in ``aad``.

        UTXOs are consumed whole, in set order, while the senders meet their
        threshold at ``as_of``. Once covered, one destination output per
        asset with a positive amount and one change output per positive
        change are added to ``aad``, using the output variant of the
        consumed UTXOs.

        Args:
            aad: Accumulator for this build; receives inputs and outputs
            as_of: Logical timestamp for locktime checks, defaults to now
            locktime: Locktime of the destination outputs
            threshold: Threshold of the destination outputs

        Raises:
            InsufficientFundsError: If the set cannot cover the request
            AddressError: If a spender is not among an output's owners
        """
        if as_of is None:
            as_of = unix_now()
        senders = aad.get_senders()
        output_ids: Dict[bytes, int] = {}
        for utxo in self.get_all_utxos():
            if aad.can_complete():
                break
            asset_id = utxo.get_asset_id()
            output = utxo.get_output()
            if not aad.asset_exists(asset_id) or not isinstance(output, AmountOutput):
                continue
            if not output.meets_threshold(senders, as_of):
                continue
            amount = aad.get_asset_amount(asset_id)
            if amount.is_finished():
                continue
            output_ids[asset_id] = output.get_output_id()
            amount.spend_amount(output.get_amount())
            inp = SECPTransferInput(output.get_amount())
            inp.set_codec_id(output.get_codec_id())
            _add_sig_idxs(inp, output, output.get_spenders(senders, as_of),
                          "UTXOSet.get_minimum_spendable")
            aad.add_input(TransferableInput(utxo.get_txid(), utxo.get_output_idx(), asset_id, inp))
            logger.debug("Consumed UTXO %s (%d of asset %s)", utxo.get_utxo_id(),
                         output.get_amount(), asset_id.hex())

        if not aad.can_complete():
            raise InsufficientFundsError(
                "UTXOSet.get_minimum_spendable: insufficient funds to create the transaction",
                details={"assets": [a.get_asset_id().hex() for a in aad.get_amounts()
                                    if not a.is_finished()]})

        for amount in aad.get_amounts():
            asset_id = amount.get_asset_id()
            if amount.get_amount() > 0:
                spend = select_output_class(output_ids[asset_id], amount.get_amount(),
                                            aad.get_destinations(), locktime, threshold)
                aad.add_output(TransferableOutput(asset_id, spend))
            if amount.get_change() > 0:
                change = select_output_class(output_ids[asset_id], amount.get_change(),
                                             aad.get_change_addresses())
                aad.add_change(TransferableOutput(asset_id, change))
                logger.debug("Change of %d for asset %s", amount.get_change(), asset_id.hex())

    @staticmethod
    def _fee_check(fee: int, fee_asset_id: Optional[bytes]) -> bool:
        """
        Whether a fee has to be paid.

        Raises:
            FeeAssetError: If a positive fee comes without a fee asset
        """
        if fee <= 0:
            return False
        if fee_asset_id is None:
            raise FeeAssetError(f"A fee of {fee} was given without a fee asset id",
                                details={"fee": fee})
        return True

    def _spend_fee(self, from_addresses: List[bytes], change_addresses: List[bytes],
                   fee: int, fee_asset_id: Optional[bytes], as_of: int):
        """Inputs and change outputs paying a standalone fee."""
        if not self._fee_check(fee, fee_asset_id):
            return [], []
        aad = AssetAmountDestination(from_addresses, from_addresses, change_addresses)
        aad.add_asset_amount(fee_asset_id, 0, fee)
        self.get_minimum_spendable(aad, as_of)
        return aad.get_inputs(), aad.get_all_outputs()

    # builders

    def build_base_tx(self, network_id: int, blockchain_id: bytes, amount: int,
                      asset_id: bytes, to_addresses: Sequence[AddressLike],
                      from_addresses: Sequence[AddressLike],
                      change_addresses: Optional[Sequence[AddressLike]] = None,
                      fee: int = 0, fee_asset_id: Optional[bytes] = None,
                      memo: Optional[bytes] = None, as_of: Optional[int] = None,
                      locktime: int = 0, threshold: int = 1) -> Optional[UnsignedTx]:
        """
        Build a plain transfer of one asset.

        Args:
            network_id: Network id
            blockchain_id: Chain the transaction is issued to
            amount: Amount to send, in the asset's smallest unit
            asset_id: Asset to send
            to_addresses: Recipients
            from_addresses: Addresses whose UTXOs may be spent
            change_addresses: Owners of the change, defaults to to_addresses
            fee: Amount burned as fee
            fee_asset_id: Asset the fee is paid in, defaults to asset_id
            memo: Up to 256 bytes of arbitrary data
            as_of: Logical timestamp for locktime checks
            locktime: Locktime of the created outputs
            threshold: Signatures required to spend the created outputs

        Returns:
            The unsigned transaction, or None when amount is zero

        Raises:
            ThresholdError: If threshold exceeds the number of recipients
            InsufficientFundsError: If the set cannot cover amount and fee
        """
        _check_threshold(threshold, to_addresses, "UTXOSet.build_base_tx")
        to = _addresses(to_addresses)
        change = to if change_addresses is None else _addresses(change_addresses)
        if fee_asset_id is None:
            fee_asset_id = asset_id
        if amount == 0:
            return None
        if as_of is None:
            as_of = unix_now()

        aad = AssetAmountDestination(to, _addresses(from_addresses), change)
        if asset_id == fee_asset_id:
            aad.add_asset_amount(asset_id, amount, fee)
        else:
            aad.add_asset_amount(asset_id, amount, 0)
            if self._fee_check(fee, fee_asset_id):
                aad.add_asset_amount(fee_asset_id, 0, fee)
        self.get_minimum_spendable(aad, as_of, locktime, threshold)

        tx = BaseTx(network_id, blockchain_id, aad.get_all_outputs(), aad.get_inputs(), memo)
        logger.debug("Built BaseTx with %d inputs and %d outputs",
                     len(tx.get_ins()), len(tx.get_outs()))
        return UnsignedTx(tx)

    def build_create_asset_tx(self, network_id: int, blockchain_id: bytes,
                              from_addresses: Sequence[AddressLike],
                              change_addresses: Sequence[AddressLike],
                              initial_state: InitialStates, name: str, symbol: str,
                              denomination: int,
                              mint_outputs: Optional[Sequence[SECPMintOutput]] = None,
                              fee: int = 0, fee_asset_id: Optional[bytes] = None,
                              memo: Optional[bytes] = None,
                              as_of: Optional[int] = None) -> UnsignedTx:
        """
        Build a CreateAssetTx paying its fee from the set.

        Raises:
            SECPMintOutputError: If a mint output is not a SECPMintOutput
            AssetNameError: If name is longer than 128 characters
            SymbolError: If symbol is longer than 4 characters
            DenominationError: If denomination is outside [0, 32]
        """
        if as_of is None:
            as_of = unix_now()
        for mint_output in mint_outputs or []:
            if not isinstance(mint_output, SECPMintOutput):
                raise SECPMintOutputError(
                    "UTXOSet.build_create_asset_tx: a submitted mint output was not of type SECPMintOutput")
        ins, outs = self._spend_fee(_addresses(from_addresses), _addresses(change_addresses),
                                    fee, fee_asset_id, as_of)
        for mint_output in mint_outputs or []:
            initial_state.add_output(mint_output)
        tx = CreateAssetTx(network_id, blockchain_id, outs, ins, memo,
                           name, symbol, denomination, initial_state)
        return UnsignedTx(tx)

    def build_secp_mint_tx(self, network_id: int, blockchain_id: bytes,
                           mint_owner: SECPMintOutput, transfer_owner: SECPTransferOutput,
                           from_addresses: Sequence[AddressLike],
                           change_addresses: Sequence[AddressLike],
                           mint_utxoid: UTXOIDLike, fee: int = 0,
                           fee_asset_id: Optional[bytes] = None, memo: Optional[bytes] = None,
                           as_of: Optional[int] = None) -> UnsignedTx:
        """
        Build an OperationTx that spends a mint authority to mint more of an asset.

        Args:
            mint_owner: New mint authority
            transfer_owner: Output receiving the minted amount
            mint_utxoid: UTXO holding the current SECPMintOutput

        Raises:
            UTXOError: If mint_utxoid is not in the set
            SECPMintOutputError: If the UTXO does not hold a SECPMintOutput
        """
        if as_of is None:
            as_of = unix_now()
        senders = _addresses(from_addresses)
        utxo = self.get_utxo(mint_utxoid)
        if utxo is None:
            raise UTXOError("UTXOSet.build_secp_mint_tx: UTXOID not found",
                            details={"utxoid": str(mint_utxoid)})
        output = utxo.get_output()
        if not isinstance(output, SECPMintOutput):
            raise SECPMintOutputError("UTXOSet.build_secp_mint_tx: UTXO is not a SECPMintOutput",
                                      details={"output_id": output.get_output_id()})
        ins, outs = self._spend_fee(senders, _addresses(change_addresses), fee, fee_asset_id, as_of)

        op = SECPMintOperation(mint_owner, transfer_owner)
        op.set_codec_id(output.get_codec_id())
        _add_sig_idxs(op, output, output.get_spenders(senders, as_of), "UTXOSet.build_secp_mint_tx")
        ops = [TransferableOperation(utxo.get_asset_id(), [utxo.get_utxo_id()], op)]
        return UnsignedTx(OperationTx(network_id, blockchain_id, outs, ins, memo, ops))

    def build_create_nft_asset_tx(self, network_id: int, blockchain_id: bytes,
                                  from_addresses: Sequence[AddressLike],
                                  change_addresses: Sequence[AddressLike],
                                  minter_sets: Sequence[MinterSet], name: str, symbol: str,
                                  fee: int = 0, fee_asset_id: Optional[bytes] = None,
                                  memo: Optional[bytes] = None, as_of: Optional[int] = None,
                                  locktime: int = 0) -> UnsignedTx:
        """
        Build a CreateAssetTx for an NFT family.

        Each minter set becomes one NFTMintOutput whose group id is its
        position in ``minter_sets``. Denomination is always 0.
        """
        if as_of is None:
            as_of = unix_now()
        ins, outs = self._spend_fee(_addresses(from_addresses), _addresses(change_addresses),
                                    fee, fee_asset_id, as_of)
        initial_state = InitialStates()
        for group_id, minter_set in enumerate(minter_sets):
            mint_output = NFTMintOutput(group_id, minter_set.get_minters(), locktime,
                                        minter_set.get_threshold())
            initial_state.add_output(mint_output, NFT_FX_ID)
        tx = CreateAssetTx(network_id, blockchain_id, outs, ins, memo, name, symbol, 0, initial_state)
        return UnsignedTx(tx)

    def build_create_nft_mint_tx(self, network_id: int, blockchain_id: bytes,
                                 owners: Sequence[OutputOwners],
                                 from_addresses: Sequence[AddressLike],
                                 change_addresses: Sequence[AddressLike],
                                 utxoids: Sequence[UTXOIDLike], group_id: int = 0,
                                 payload: bytes = b"", fee: int = 0,
                                 fee_asset_id: Optional[bytes] = None,
                                 memo: Optional[bytes] = None,
                                 as_of: Optional[int] = None) -> UnsignedTx:
        """
        Build an OperationTx minting NFTs from one or more mint authorities.

        Every referenced UTXO gets its own NFTMintOperation, signed by the
        senders among that UTXO's owners.

        Raises:
            UTXOError: If a UTXO id is not in the set
            NFTMintOutputError: If a UTXO does not hold an NFTMintOutput
        """
        if as_of is None:
            as_of = unix_now()
        senders = _addresses(from_addresses)
        utxos = []
        for utxoid in utxoids:
            utxo = self.get_utxo(utxoid)
            if utxo is None:
                raise UTXOError("UTXOSet.build_create_nft_mint_tx: UTXOID not found",
                                details={"utxoid": str(utxoid)})
            if not isinstance(utxo.get_output(), NFTMintOutput):
                raise NFTMintOutputError(
                    "UTXOSet.build_create_nft_mint_tx: UTXO is not an NFTMintOutput",
                    details={"output_id": utxo.get_output().get_output_id()})
            utxos.append(utxo)
        ins, outs = self._spend_fee(senders, _addresses(change_addresses), fee, fee_asset_id, as_of)

        ops = []
        for utxo in utxos:
            output = utxo.get_output()
            op = NFTMintOperation(group_id, payload, owners)
            op.set_codec_id(output.get_codec_id())
            _add_sig_idxs(op, output, output.get_spenders(senders, as_of),
                          "UTXOSet.build_create_nft_mint_tx")
            ops.append(TransferableOperation(utxo.get_asset_id(), [utxo.get_utxo_id()], op))
        return UnsignedTx(OperationTx(network_id, blockchain_id, outs, ins, memo, ops))

    def build_nft_transfer_tx(self, network_id: int, blockchain_id: bytes,
                              to_addresses: Sequence[AddressLike],
                              from_addresses: Sequence[AddressLike],
                              change_addresses: Sequence[AddressLike],
                              utxoids: Sequence[UTXOIDLike], fee: int = 0,
                              fee_asset_id: Optional[bytes] = None,
                              memo: Optional[bytes] = None, as_of: Optional[int] = None,
                              locktime: int = 0, threshold: int = 1) -> UnsignedTx:
        """
        Build an OperationTx moving NFTs to new owners.

        Raises:
            ThresholdError: If threshold exceeds the number of recipients
            UTXOError: If a UTXO id is not in the set
            OutputTypeError: If a UTXO does not hold an NFTTransferOutput
        """
        _check_threshold(threshold, to_addresses, "UTXOSet.build_nft_transfer_tx")
        if as_of is None:
            as_of = unix_now()
        to = _addresses(to_addresses)
        senders = _addresses(from_addresses)
        utxos = []
        for utxoid in utxoids:
            utxo = self.get_utxo(utxoid)
            if utxo is None:
                raise UTXOError("UTXOSet.build_nft_transfer_tx: UTXOID not found",
                                details={"utxoid": str(utxoid)})
            if not isinstance(utxo.get_output(), NFTTransferOutput):
                raise OutputTypeError("UTXOSet.build_nft_transfer_tx: UTXO is not an NFTTransferOutput",
                                      details={"output_id": utxo.get_output().get_output_id()})
            utxos.append(utxo)
        ins, outs = self._spend_fee(senders, _addresses(change_addresses), fee, fee_asset_id, as_of)

        ops = []
        for utxo in utxos:
            output = utxo.get_output()
            outbound = NFTTransferOutput(output.get_group_id(), output.get_payload(),
                                         to, locktime, threshold)
            op = NFTTransferOperation(outbound)
            op.set_codec_id(output.get_codec_id())
            _add_sig_idxs(op, output, output.get_spenders(senders, as_of),
                          "UTXOSet.build_nft_transfer_tx")
            ops.append(TransferableOperation(utxo.get_asset_id(), [utxo.get_utxo_id()], op))
        return UnsignedTx(OperationTx(network_id, blockchain_id, outs, ins, memo, ops))

    def build_import_tx(self, network_id: int, blockchain_id: bytes,
                        to_addresses: Sequence[AddressLike],
                        from_addresses: Sequence[AddressLike],
                        change_addresses: Sequence[AddressLike],
                        atomics: Sequence[UTXO], source_chain: Optional[bytes] = None,
                        fee: int = 0, fee_asset_id: Optional[bytes] = None,
                        memo: Optional[bytes] = None, as_of: Optional[int] = None,
                        locktime: int = 0, threshold: int = 1) -> UnsignedTx:
        """
        Build an ImportTx consuming atomic UTXOs exported from another chain.

        Each atomic is spent in full. The fee is taken from atomics of the
        fee asset first; what is left of each atomic goes to
        ``to_addresses``. Any fee the atomics do not cover is paid from
        this set.

        Args:
            atomics: UTXOs held in shared memory with the source chain
            source_chain: Chain the atomics were exported from

        Raises:
            ThresholdError: If threshold exceeds the number of recipients
            OutputTypeError: If an atomic does not hold an amount output
            InsufficientFundsError: If the remaining fee cannot be covered
        """
        _check_threshold(threshold, to_addresses, "UTXOSet.build_import_tx")
        if as_of is None:
            as_of = unix_now()
        to = _addresses(to_addresses)
        import_ins: List[TransferableInput] = []
        outs: List[TransferableOutput] = []
        fee_paid = 0
        for utxo in atomics:
            asset_id = utxo.get_asset_id()
            output = utxo.get_output()
            if not isinstance(output, AmountOutput):
                raise OutputTypeError("UTXOSet.build_import_tx: atomic UTXO is not an amount output",
                                      details={"utxoid": utxo.get_utxo_id()})
            amount = output.get_amount()
            remainder = amount
            if fee_asset_id is not None and fee > 0 and fee_paid < fee and asset_id == fee_asset_id:
                fee_paid += amount
                if fee_paid > fee:
                    remainder = fee_paid - fee
                    fee_paid = fee
                else:
                    remainder = 0

            inp = SECPTransferInput(amount)
            inp.set_codec_id(output.get_codec_id())
            _add_sig_idxs(inp, output, output.get_spenders(output.get_addresses(), as_of),
                          "UTXOSet.build_import_tx")
            import_ins.append(TransferableInput(utxo.get_txid(), utxo.get_output_idx(), asset_id, inp))
            if remainder > 0:
                spend = select_output_class(output.get_output_id(), remainder, to, locktime, threshold)
                outs.append(TransferableOutput(asset_id, spend))

        ins: List[TransferableInput] = []
        fee_remaining = fee - fee_paid
        if fee_remaining > 0 and self._fee_check(fee_remaining, fee_asset_id):
            aad = AssetAmountDestination(to, _addresses(from_addresses), _addresses(change_addresses))
            aad.add_asset_amount(fee_asset_id, 0, fee_remaining)
            self.get_minimum_spendable(aad, as_of, locktime, threshold)
            ins = aad.get_inputs()
            outs = outs + aad.get_all_outputs()
        logger.debug("Built ImportTx with %d import inputs, fee paid from atomics %d",
                     len(import_ins), fee_paid)
        tx = ImportTx(network_id, blockchain_id, outs, ins, memo, source_chain, import_ins)
        return UnsignedTx(tx)

    def build_export_tx(self, network_id: int, blockchain_id: bytes, amount: int,
                        asset_id: bytes, to_addresses: Sequence[AddressLike],
                        from_addresses: Sequence[AddressLike],
                        change_addresses: Optional[Sequence[AddressLike]] = None,
                        destination_chain: Optional[bytes] = None, fee: int = 0,
                        fee_asset_id: Optional[bytes] = None, memo: Optional[bytes] = None,
                        as_of: Optional[int] = None, locktime: int = 0,
                        threshold: int = 1) -> Optional[UnsignedTx]:
        """
        Build an ExportTx sending an amount to another chain.

        Destination outputs become export outputs; change stays on this
        chain. The destination defaults to the platform chain.

        Returns:
            The unsigned transaction, or None when amount is zero

        Raises:
            ThresholdError: If threshold exceeds the number of recipients
            InsufficientFundsError: If the set cannot cover amount and fee
        """
        _check_threshold(threshold, to_addresses, "UTXOSet.build_export_tx")
        to = _addresses(to_addresses)
        change = to if change_addresses is None else _addresses(change_addresses)
        if amount == 0:
            return None
        if fee_asset_id is None:
            fee_asset_id = asset_id
        if destination_chain is None:
            destination_chain = cb58_decode(PLATFORM_CHAIN_ID)
        if as_of is None:
            as_of = unix_now()

        aad = AssetAmountDestination(to, _addresses(from_addresses), change)
        if asset_id == fee_asset_id:
            aad.add_asset_amount(asset_id, amount, fee)
        else:
            aad.add_asset_amount(asset_id, amount, 0)
            if self._fee_check(fee, fee_asset_id):
                aad.add_asset_amount(fee_asset_id, 0, fee)
        self.get_minimum_spendable(aad, as_of, locktime, threshold)

        tx = ExportTx(network_id, blockchain_id, aad.get_change_outputs(), aad.get_inputs(), memo,
                      destination_chain, aad.get_outputs())
        return UnsignedTx(tx)
