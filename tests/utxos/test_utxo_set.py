"""
UTXO and UTXOSet bookkeeping tests: indexing, balances, set algebra and
human-readable round trips.
"""

import pytest

from axvm_client.codec import Encoding
from axvm_client.runtime.errors import ChecksumError, UTXOError
from axvm_client.types import UTXOID, SECPMintOutput, SECPTransferOutput, select_output_class
from axvm_client.utxos import UTXO, AssetAmount, AssetAmountDestination, MergeRule, UTXOSet

from conftest import txid_for


@pytest.mark.unit
class TestUTXO:
    """Test single UTXO encoding."""

    def test_utxo_id(self, make_utxo, asset_a, addr_x):
        utxo = make_utxo("id", asset_a, SECPTransferOutput(1, [addr_x]), output_idx=3)
        assert utxo.get_utxo_id() == UTXOID.from_parts(txid_for("id"), 3).to_string()

    def test_wire_layout(self, make_utxo, asset_a, addr_x):
        output = SECPTransferOutput(1, [addr_x])
        buf = make_utxo("wire", asset_a, output, output_idx=2).to_buffer()
        assert buf[:2] == (0).to_bytes(2, "big")
        assert buf[2:34] == txid_for("wire")
        assert buf[34:38] == (2).to_bytes(4, "big")
        assert buf[38:70] == asset_a
        assert buf[70:74] == (7).to_bytes(4, "big")
        assert buf[74:] == output.to_buffer()

    def test_string_roundtrip(self, make_utxo, asset_a, addr_x):
        output = select_output_class(131073, 2, b"art", [addr_x])
        utxo = make_utxo("str", asset_a, output, codec_id=1)
        parsed = UTXO()
        parsed.from_string(utxo.to_string())
        assert parsed == utxo
        assert parsed.get_codec_id() == 1
        assert parsed.get_output().get_codec_id() == 1
        assert parsed.get_output().get_payload() == b"art"

    def test_tampered_string(self, make_utxo, asset_a, addr_x):
        text = make_utxo("bad", asset_a, SECPTransferOutput(1, [addr_x])).to_string()
        tampered = text[:-1] + ("2" if text[-1] != "2" else "3")
        with pytest.raises(ChecksumError):
            UTXO().from_string(tampered)

    @pytest.mark.parametrize("mode", [Encoding.HEX, Encoding.DISPLAY])
    def test_serialize_roundtrip(self, make_utxo, asset_a, addr_x, mode):
        utxo = make_utxo("ser", asset_a, SECPMintOutput([addr_x]))
        fields = utxo.serialize(mode)
        assert fields["_typeName"] == "UTXO"
        restored = UTXO()
        restored.deserialize(fields, mode)
        assert restored.to_buffer() == utxo.to_buffer()

    def test_clone(self, make_utxo, asset_a, addr_x):
        utxo = make_utxo("clone", asset_a, SECPTransferOutput(4, [addr_x]))
        clone = utxo.clone()
        assert clone == utxo
        assert clone is not utxo


@pytest.mark.unit
class TestIndexing:
    """Test add, remove and lookups."""

    def test_add_returns_stored_copy(self, make_utxo, asset_a, addr_x):
        utxos = UTXOSet()
        utxo = make_utxo("add", asset_a, SECPTransferOutput(1, [addr_x]))
        stored = utxos.add(utxo)
        assert stored == utxo
        assert stored is not utxo
        assert utxos.add(utxo) is None
        assert utxos.add(utxo, overwrite=True) == utxo
        assert len(utxos) == 1

    def test_add_accepts_strings_and_bytes(self, make_utxo, asset_a, addr_x):
        utxos = UTXOSet()
        first = make_utxo("s", asset_a, SECPTransferOutput(1, [addr_x]))
        second = make_utxo("b", asset_a, SECPTransferOutput(2, [addr_x]))
        added = utxos.add_array([first.to_string(), second.to_buffer()])
        assert len(added) == 2
        assert utxos.includes(first)
        assert utxos.includes(second.to_string())

    def test_parse_rejects_other_types(self):
        with pytest.raises(UTXOError):
            UTXOSet.parse_utxo(42)
        assert not UTXOSet().includes(42)

    def test_remove(self, utxo_set_a):
        first = utxo_set_a.get_all_utxos()[0]
        assert utxo_set_a.remove(first) == first
        assert utxo_set_a.remove(first) is None
        assert not utxo_set_a.includes(first)
        assert len(utxo_set_a) == 2

    def test_remove_drops_address_index(self, utxo_set_a, addr_x):
        removed = utxo_set_a.remove_array(utxo_set_a.get_all_utxos())
        assert len(removed) == 3
        assert utxo_set_a.get_utxo_ids([addr_x]) == []

    def test_get_utxo_by_id_forms(self, utxo_set_a):
        utxo = utxo_set_a.get_all_utxos()[1]
        utxoid = UTXOID.from_parts(utxo.get_txid(), utxo.get_output_idx())
        assert utxo_set_a.get_utxo(utxoid) == utxo
        assert utxo_set_a.get_utxo(utxoid.to_string()) == utxo
        assert utxo_set_a.get_utxo(utxoid.to_bytes()) == utxo
        assert utxo_set_a.get_utxo(UTXOID.from_parts(txid_for("missing"), 0)) is None

    def test_insertion_order_kept(self, utxo_set_a):
        amounts = [u.get_output().get_amount() for u in utxo_set_a.get_all_utxos()]
        assert amounts == [5, 7, 20]
        assert len(utxo_set_a.get_all_utxo_strings()) == 3

    def test_get_all_utxos_skips_unknown_ids(self, utxo_set_a):
        known = utxo_set_a.get_utxo_ids()[0]
        missing = UTXOID.from_parts(txid_for("missing"), 0).to_string()
        assert len(utxo_set_a.get_all_utxos([known, missing])) == 1


@pytest.mark.unit
class TestOwnershipQueries:
    """Test address, balance and spendability queries."""

    def test_utxo_ids_by_address(self, utxo_set_a, make_utxo, asset_a, addr_x, addr_y):
        utxo_set_a.add(make_utxo("shared", asset_a, SECPTransferOutput(1, [addr_x, addr_y])))
        assert len(utxo_set_a.get_utxo_ids([addr_x])) == 4
        assert len(utxo_set_a.get_utxo_ids([addr_y])) == 1
        assert len(utxo_set_a.get_utxo_ids([addr_x, addr_y])) == 4

    def test_locked_utxos_not_spendable(self, make_utxo, asset_a, addr_x):
        utxos = UTXOSet()
        utxos.add(make_utxo("locked", asset_a, SECPTransferOutput(9, [addr_x], 500)))
        assert utxos.get_utxo_ids([addr_x], as_of=499) == []
        assert len(utxos.get_utxo_ids([addr_x], as_of=500)) == 1
        assert len(utxos.get_utxo_ids([addr_x], spendable=False, as_of=0)) == 1

    def test_balance(self, utxo_set_a, make_utxo, asset_a, asset_b, addr_x, addr_y):
        utxo_set_a.add(make_utxo("b", asset_b, SECPTransferOutput(3, [addr_x])))
        utxo_set_a.add(make_utxo("mint", asset_a, SECPMintOutput([addr_x])))
        assert utxo_set_a.get_balance([addr_x], asset_a) == 32
        assert utxo_set_a.get_balance([addr_x], asset_b) == 3
        assert utxo_set_a.get_balance([addr_y], asset_a) == 0

    def test_balance_respects_threshold(self, make_utxo, asset_a, addr_x, addr_y):
        utxos = UTXOSet()
        utxos.add(make_utxo("multisig", asset_a, SECPTransferOutput(50, [addr_x, addr_y], 0, 2)))
        assert utxos.get_balance([addr_x], asset_a) == 0
        assert utxos.get_balance([addr_x, addr_y], asset_a) == 50

    def test_asset_ids_and_addresses(self, utxo_set_a, make_utxo, asset_a, asset_b, addr_x, addr_y):
        utxo_set_a.add(make_utxo("b", asset_b, SECPTransferOutput(3, [addr_y])))
        assert utxo_set_a.get_asset_ids() == [asset_a, asset_b]
        assert utxo_set_a.get_asset_ids([addr_y]) == [asset_b]
        assert set(utxo_set_a.get_addresses()) == {addr_x, addr_y}

    def test_filter(self, utxo_set_a):
        large = utxo_set_a.filter([6], lambda utxo, limit: utxo.get_output().get_amount() > limit)
        assert sorted(u.get_output().get_amount() for u in large.get_all_utxos()) == [7, 20]

    def test_clone_is_independent(self, utxo_set_a):
        clone = utxo_set_a.clone()
        clone.remove(clone.get_all_utxos()[0])
        assert len(utxo_set_a) == 3
        assert len(clone) == 2


@pytest.fixture
def overlapping_sets(make_utxo, asset_a, addr_x):
    five, seven, twenty = (make_utxo(label, asset_a, SECPTransferOutput(amount, [addr_x]))
                           for label, amount in (("a5", 5), ("a7", 7), ("a20", 20)))
    left = UTXOSet()
    left.add_array([five, seven])
    right = UTXOSet()
    right.add_array([seven, twenty])
    return left, right


def _amounts(utxos):
    return sorted(u.get_output().get_amount() for u in utxos.get_all_utxos())


@pytest.mark.unit
class TestSetAlgebra:
    """Test merge rules."""

    @pytest.mark.parametrize("rule,expected", [
        (MergeRule.INTERSECTION, [7]),
        (MergeRule.DIFFERENCE_SELF, [5]),
        (MergeRule.DIFFERENCE_NEW, [20]),
        (MergeRule.SYM_DIFFERENCE, [5, 20]),
        (MergeRule.UNION, [5, 7, 20]),
        (MergeRule.UNION_MINUS_NEW, [5]),
        (MergeRule.UNION_MINUS_SELF, [20]),
    ])
    def test_merge_by_rule(self, overlapping_sets, rule, expected):
        left, right = overlapping_sets
        combined = left.merge_by_rule(right, rule)
        assert _amounts(combined) == expected
        assert _amounts(left) == expected
        assert _amounts(right) == [7, 20]

    def test_rule_given_as_string(self, overlapping_sets):
        left, right = overlapping_sets
        assert _amounts(left.merge_by_rule(right, "symDifference")) == [5, 20]

    def test_unknown_rule(self, overlapping_sets):
        left, right = overlapping_sets
        with pytest.raises(UTXOError):
            left.merge_by_rule(right, "everything")

    def test_merged_set_reindexes_addresses(self, overlapping_sets, addr_x):
        left, right = overlapping_sets
        left.merge_by_rule(right, MergeRule.DIFFERENCE_NEW)
        assert len(left.get_utxo_ids([addr_x])) == 1

    def test_union_keeps_left_entries_first(self, overlapping_sets):
        left, right = overlapping_sets
        amounts = [u.get_output().get_amount() for u in left.union(right).get_all_utxos()]
        assert amounts == [5, 7, 20]


@pytest.mark.unit
class TestSetSerialization:
    """Test human-readable round trips of a whole set."""

    @pytest.mark.parametrize("mode", [Encoding.HEX, Encoding.DISPLAY])
    def test_roundtrip(self, utxo_set_a, addr_x, mode):
        fields = utxo_set_a.serialize(mode)
        assert fields["_typeName"] == "UTXOSet"
        restored = UTXOSet()
        restored.deserialize(fields, mode)
        assert restored.get_all_utxo_strings() == utxo_set_a.get_all_utxo_strings()
        assert restored.get_utxo_ids([addr_x]) == utxo_set_a.get_utxo_ids([addr_x])


@pytest.mark.unit
class TestAssetAmounts:
    """Test per-build accumulators."""

    def test_spend_amount_finishes_with_change(self):
        amount = AssetAmount(bytes(32), 10, 1)
        assert not amount.spend_amount(5)
        assert amount.spend_amount(7)
        assert amount.get_spent() == 12
        assert amount.get_change() == 1
        assert amount.spend_amount(100)
        assert amount.get_spent() == 12

    def test_exact_spend_has_no_change(self):
        amount = AssetAmount(bytes(32), 4)
        assert amount.spend_amount(4)
        assert amount.get_change() == 0

    def test_destination_accumulates_repeated_assets(self, asset_a, asset_b, addr_x, addr_y):
        aad = AssetAmountDestination([addr_y], [addr_x], [addr_x])
        aad.add_asset_amount(asset_a, 10, 0)
        aad.add_asset_amount(asset_a, 0, 2)
        aad.add_asset_amount(asset_b, 0, 1)
        assert len(aad.get_amounts()) == 2
        assert aad.get_asset_amount(asset_a).get_amount() == 10
        assert aad.get_asset_amount(asset_a).get_burn() == 2
        assert aad.asset_exists(asset_b)
        assert not aad.can_complete()
        aad.get_asset_amount(asset_a).spend_amount(12)
        aad.get_asset_amount(asset_b).spend_amount(1)
        assert aad.can_complete()
