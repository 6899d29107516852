"""
Tests for UTXO and selection result models
"""

import logging

import pytest
from pydantic import ValidationError

from cardano_utxo_engine import (
    AssetAmount,
    AssetRequirement,
    InsufficientFundsError,
    InvalidUtxoError,
    SelectionAlgorithm,
    SelectionResult,
    UnspentOutput,
)

from .factories import AssetFactory, UtxoFactory


class TestUnspentOutput:
    """Test UTXO construction and normalization"""

    def test_from_blockfrost_record(self):
        """Test that a decoded API record validates with string quantities"""
        unit = AssetFactory.create_unit()
        utxo = UnspentOutput.from_blockfrost(
            {
                "address": "addr_test1vq" + "x" * 50,
                "tx_hash": "f" * 64,
                "output_index": 1,
                "amount": [{"unit": "lovelace", "quantity": "2000000"}, {"unit": unit, "quantity": "1"}],
                "block": "ignored",
                "data_hash": None,
                "inline_datum": None,
                "reference_script_hash": None,
            }
        )

        assert utxo.ref == ("f" * 64, 1)
        assert utxo.lovelace == 2_000_000
        assert utxo.assets == {unit: 1}
        assert not utxo.is_pure_ada

    def test_missing_lovelace_is_zero(self, caplog):
        """Test that an output without lovelace gets a zero entry and a warning"""
        unit = AssetFactory.create_unit()
        with caplog.at_level(logging.WARNING):
            utxo = UnspentOutput.model_validate(
                {"tx_hash": "e" * 64, "output_index": 0, "amount": [{"unit": unit, "quantity": "3"}]}
            )

        assert utxo.amount[0] == AssetAmount(unit="lovelace", quantity=0)
        assert utxo.lovelace == 0
        assert utxo.assets == {unit: 3}
        assert "no lovelace entry" in caplog.text

    @pytest.mark.parametrize("entry", [{"unit": "lovelace"}, {"unit": "lovelace", "quantity": None}])
    def test_missing_quantity_is_zero(self, entry, caplog):
        """Test that an amount entry without a quantity counts as zero"""
        unit = AssetFactory.create_unit()
        with caplog.at_level(logging.WARNING):
            utxo = UnspentOutput.from_blockfrost(
                {"tx_hash": "c" * 64, "output_index": 2, "amount": [{"unit": unit}, entry]}
            )

        assert utxo.amount[0] == AssetAmount(unit="lovelace", quantity=0)
        assert utxo.assets == {unit: 0}
        assert "no quantity" in caplog.text

    def test_non_mapping_record_rejected(self):
        """Test that a record of the wrong shape raises InvalidUtxoError"""
        with pytest.raises(InvalidUtxoError, match="Invalid UTXO record"):
            UnspentOutput.from_blockfrost(["c" * 64, 0])

    def test_empty_amount_list(self):
        utxo = UnspentOutput(tx_hash="e" * 64, output_index=0, amount=())
        assert utxo.lovelace == 0
        assert utxo.is_pure_ada

    def test_lovelace_moved_first(self):
        """Test that lovelace is always the first entry"""
        unit = AssetFactory.create_unit()
        utxo = UnspentOutput.model_validate(
            {
                "tx_hash": "d" * 64,
                "output_index": 0,
                "amount": [{"unit": unit, "quantity": 4}, {"unit": "lovelace", "quantity": 1_500_000}],
            }
        )
        assert utxo.amount[0].unit == "lovelace"
        assert utxo.lovelace == 1_500_000

    def test_duplicate_lovelace_rejected(self):
        """Test that two lovelace entries cannot be normalized"""
        raw = UtxoFactory.create_raw(1_000_000)
        raw["amount"].append({"unit": "lovelace", "quantity": "5"})

        with pytest.raises(ValidationError):
            UnspentOutput.model_validate(raw)
        with pytest.raises(InvalidUtxoError, match="more than one lovelace"):
            UnspentOutput.from_blockfrost(raw)

    @pytest.mark.parametrize("quantity", ["-1", -1, 1.5, "1e6"])
    def test_invalid_quantities_rejected(self, quantity):
        raw = UtxoFactory.create_raw(1_000_000)
        raw["amount"][0]["quantity"] = quantity
        with pytest.raises(InvalidUtxoError):
            UnspentOutput.from_blockfrost(raw)

    def test_quantities_are_exact(self):
        """Test quantities above 2**64"""
        utxo = UtxoFactory.create(2**70)
        assert utxo.lovelace == 2**70

    def test_duplicate_asset_units_are_summed(self):
        unit = AssetFactory.create_unit()
        raw = UtxoFactory.create_raw(1_000_000, {unit: 2})
        raw["amount"].append({"unit": unit, "quantity": "3"})
        utxo = UnspentOutput.from_blockfrost(raw)
        assert utxo.assets == {unit: 5}
        assert utxo.quantity_of(unit) == 5

    def test_is_frozen(self):
        utxo = UtxoFactory.create(1_000_000)
        with pytest.raises(ValidationError):
            utxo.output_index = 3

    def test_datum_flags(self):
        assert UtxoFactory.create(1_000_000, data_hash="ab" * 32).has_datum
        assert UtxoFactory.create(1_000_000, inline_datum="d87980").has_datum
        assert not UtxoFactory.create(1_000_000).has_datum

    def test_min_lovelace_pure_ada(self):
        assert UtxoFactory.create(1_000_000).min_lovelace() == "1000000"

    def test_min_lovelace_with_asset(self):
        """Test (27 + 6 + 28 + 5 + 12 + 160) * 4310 for one 5-byte asset name"""
        utxo = UtxoFactory.create(2_000_000, {AssetFactory.create_unit("a", "MyNFT"): 1})
        assert utxo.min_lovelace() == "1025780"

    def test_min_lovelace_with_inline_datum(self):
        """Test that a hex inline datum is sized from its length"""
        utxo = UtxoFactory.create(2_000_000, inline_datum="00" * 100)
        assert utxo.min_lovelace() == "1245590"
        assert utxo.min_lovelace(datum_size=0) == "1000000"

    def test_dump_serializes_quantities_as_strings(self):
        raw = UtxoFactory.create_raw(1_000_000)
        dumped = UnspentOutput.from_blockfrost(raw).model_dump(exclude_none=True)
        assert dumped["amount"] == [{"unit": "lovelace", "quantity": "1000000"}]


class TestAssetRequirement:
    """Test asset requirement parsing"""

    def test_string_quantity(self):
        assert AssetRequirement(unit="x", quantity="10").quantity == 10

    def test_negative_rejected(self):
        with pytest.raises(ValidationError):
            AssetRequirement(unit="x", quantity=-1)


class TestSelectionResult:
    """Test derived totals on selection results"""

    def _result(self, utxos, required, requirements=()):
        return SelectionResult(
            algorithm=SelectionAlgorithm.LARGEST_FIRST,
            selected=tuple(utxos),
            required_lovelace=required,
            required_assets=tuple(requirements),
        )

    def test_totals_and_change(self, token_unit):
        result = self._result(
            [UtxoFactory.create(5_000_000, {token_unit: 3}), UtxoFactory.create(2_000_000, {token_unit: 4})],
            6_000_000,
            [AssetRequirement(unit=token_unit, quantity=5)],
        )

        assert result.count == 2
        assert result.total_lovelace == 7_000_000
        assert result.total_ada == 7.0
        assert result.total_assets == {token_unit: 7}
        assert result.change == 1_000_000
        assert result.change_assets == {token_unit: 2}
        assert result.is_sufficient
        assert result.ensure_sufficient() is result

    def test_under_funded(self, token_unit):
        result = self._result(
            [UtxoFactory.create(1_000_000)], 3_000_000, [AssetRequirement(unit=token_unit, quantity=2)]
        )

        assert result.change == -2_000_000
        assert result.shortfall_lovelace == 2_000_000
        assert result.missing_assets == {token_unit: 2}
        assert not result.is_sufficient

        with pytest.raises(InsufficientFundsError) as exc_info:
            result.ensure_sufficient()
        assert exc_info.value.shortfall_lovelace == 2_000_000
        assert exc_info.value.missing_assets == {token_unit: 2}
        assert "Insufficient balance" in str(exc_info.value)

    def test_fully_consumed_assets_leave_no_change(self, token_unit):
        result = self._result(
            [UtxoFactory.create(3_000_000, {token_unit: 2})], 1_000_000, [AssetRequirement(unit=token_unit, quantity=2)]
        )
        assert result.change_assets == {}

    def test_change_spendability(self, token_unit):
        """Test change sizing against the change bundle"""
        enough = self._result([UtxoFactory.create(5_000_000, {token_unit: 1})], 3_000_000)
        assert int(enough.change_min_lovelace()) > 1_000_000
        assert enough.change_is_spendable()

        dust = self._result([UtxoFactory.create(3_500_000)], 3_000_000)
        assert dust.change == 500_000
        assert not dust.change_is_spendable()

        exact = self._result([UtxoFactory.create(3_000_000)], 3_000_000)
        assert exact.change_is_spendable()

    def test_summary(self):
        result = self._result([UtxoFactory.create(5_000_000, tx_hash="2" * 64)], 3_000_000)
        summary = result.summary()

        assert summary["count"] == 1
        assert summary["totalLovelace"] == "5000000"
        assert summary["totalAda"] == 5.0
        assert summary["change"] == "2000000"
        assert summary["selected"][0]["tx_hash"] == "2" * 64
        assert summary["selected"][0]["amount"][0]["quantity"] == "5000000"
