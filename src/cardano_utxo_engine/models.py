"""
UTXO and Selection Models

Pydantic models for the values the engine consumes and produces. Field names
follow the Blockfrost ``/addresses/{address}/utxos`` payload so decoded API
responses validate directly.
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator, model_validator

from .amounts import lovelace_to_ada, parse_quantity
from .config import EngineSettings
from .enums import SelectionAlgorithm
from .exceptions import InsufficientFundsError, InvalidUtxoError
from .min_utxo import calculate_min_utxo_for_assets


logger = logging.getLogger(__name__)

LOVELACE_UNIT = "lovelace"


def _unit_of(entry: Any) -> Optional[str]:
    if isinstance(entry, Mapping):
        return entry.get("unit")
    return getattr(entry, "unit", None)


def _fill_missing_quantity(entry: Any, utxo_id: str) -> Any:
    if isinstance(entry, Mapping) and entry.get("quantity") is None:
        logger.warning(f"UTXO {utxo_id} has no quantity for unit {entry.get('unit')}, treating it as 0")
        return {**entry, "quantity": 0}
    return entry


class AssetAmount(BaseModel):
    """Quantity of a single unit held by an output"""

    model_config = ConfigDict(frozen=True)

    unit: str = Field(min_length=1, description="'lovelace' or policy ID + hex asset name")
    quantity: int = Field(ge=0, description="Exact quantity (serialized as string)")

    @field_validator("quantity", mode="before")
    @classmethod
    def _exact_quantity(cls, value: Any) -> int:
        return parse_quantity(value)

    @field_serializer("quantity")
    def _serialize_quantity(self, quantity: int) -> str:
        return str(quantity)


class AssetRequirement(BaseModel):
    """Minimum quantity of a unit a selection must gather"""

    model_config = ConfigDict(frozen=True)

    unit: str = Field(min_length=1)
    quantity: int = Field(ge=0, description="Minimum quantity required")

    @field_validator("quantity", mode="before")
    @classmethod
    def _exact_quantity(cls, value: Any) -> int:
        return parse_quantity(value)


class UnspentOutput(BaseModel):
    """
    An unspent transaction output

    The amount list always holds exactly one lovelace entry, and it is always
    the first entry. Outputs arriving without one get a zero lovelace entry,
    and entries with no quantity count as zero; outputs with more than one
    lovelace entry are rejected.
    """

    model_config = ConfigDict(frozen=True)

    tx_hash: str = Field(min_length=1, description="Transaction hash (hex)")
    output_index: int = Field(ge=0)
    amount: tuple[AssetAmount, ...]
    address: Optional[str] = None
    data_hash: Optional[str] = None
    inline_datum: Optional[Any] = None
    reference_script_hash: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_lovelace(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data

        utxo_id = f"{data.get('tx_hash')}#{data.get('output_index')}"
        amounts = [_fill_missing_quantity(entry, utxo_id) for entry in data.get("amount") or []]
        units = [_unit_of(entry) for entry in amounts]
        lovelace_entries = units.count(LOVELACE_UNIT)

        if lovelace_entries > 1:
            raise ValueError("UTXO amount list contains more than one lovelace entry")
        if lovelace_entries == 0:
            logger.warning(f"UTXO {utxo_id} has no lovelace entry, treating it as 0")
            amounts.insert(0, {"unit": LOVELACE_UNIT, "quantity": 0})
        else:
            amounts.insert(0, amounts.pop(units.index(LOVELACE_UNIT)))

        return {**data, "amount": amounts}

    @classmethod
    def from_blockfrost(cls, raw: Mapping[str, Any]) -> "UnspentOutput":
        """
        Build an output from a decoded Blockfrost UTXO record

        Raises:
            InvalidUtxoError: If the record cannot be normalized
        """
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            if isinstance(raw, Mapping):
                raise InvalidUtxoError(f"Invalid UTXO {raw.get('tx_hash')}#{raw.get('output_index')}: {e}") from e
            raise InvalidUtxoError(f"Invalid UTXO record: {e}") from e

    @property
    def ref(self) -> tuple[str, int]:
        """Output reference (tx_hash, output_index)"""
        return self.tx_hash, self.output_index

    @property
    def lovelace(self) -> int:
        return self.amount[0].quantity

    @property
    def assets(self) -> dict[str, int]:
        """Native asset quantities keyed by unit"""
        totals: dict[str, int] = {}
        for entry in self.amount[1:]:
            totals[entry.unit] = totals.get(entry.unit, 0) + entry.quantity
        return totals

    def quantity_of(self, unit: str) -> int:
        return sum(entry.quantity for entry in self.amount if entry.unit == unit)

    @property
    def is_pure_ada(self) -> bool:
        return len(self.amount) == 1

    @property
    def has_datum(self) -> bool:
        return self.data_hash is not None or self.inline_datum is not None

    def min_lovelace(self, datum_size: Optional[int] = None, settings: Optional[EngineSettings] = None) -> str:
        """
        Minimum lovelace this output must carry

        Args:
            datum_size: Inline datum size in bytes; derived from a hex CBOR
                inline datum when omitted
        """
        has_inline_datum = self.inline_datum is not None
        if datum_size is None:
            datum_size = len(self.inline_datum) // 2 if isinstance(self.inline_datum, str) else 0
        return calculate_min_utxo_for_assets(
            self.assets.keys(), has_inline_datum=has_inline_datum, datum_size=datum_size, settings=settings
        )


class SelectionResult(BaseModel):
    """
    Outcome of a coin selection

    ``selected`` keeps selection order. Totals are always derived from the
    selected outputs, so asset totals stay correct whatever strategy added
    the outputs. A result may be under-funded; check ``is_sufficient`` or
    call ``ensure_sufficient()``.
    """

    model_config = ConfigDict(frozen=True)

    algorithm: SelectionAlgorithm
    selected: tuple[UnspentOutput, ...] = ()
    required_lovelace: int = Field(ge=0)
    required_assets: tuple[AssetRequirement, ...] = ()

    @property
    def count(self) -> int:
        return len(self.selected)

    @property
    def total_lovelace(self) -> int:
        return sum(utxo.lovelace for utxo in self.selected)

    @property
    def total_ada(self) -> float:
        return lovelace_to_ada(self.total_lovelace)

    @property
    def total_assets(self) -> dict[str, int]:
        totals: dict[str, int] = {}
        for utxo in self.selected:
            for unit, quantity in utxo.assets.items():
                totals[unit] = totals.get(unit, 0) + quantity
        return totals

    def total_of(self, unit: str) -> int:
        if unit == LOVELACE_UNIT:
            return self.total_lovelace
        return self.total_assets.get(unit, 0)

    @property
    def change(self) -> int:
        """Lovelace left over after the requirement (negative when under-funded)"""
        return self.total_lovelace - self.required_lovelace

    @property
    def change_assets(self) -> dict[str, int]:
        """Native assets returned as change, net of asset requirements"""
        remaining = self.total_assets
        for requirement in self.required_assets:
            if requirement.unit in remaining:
                remaining[requirement.unit] -= requirement.quantity
        return {unit: quantity for unit, quantity in remaining.items() if quantity > 0}

    @property
    def shortfall_lovelace(self) -> int:
        return max(0, -self.change)

    @property
    def missing_assets(self) -> dict[str, int]:
        missing = {}
        for requirement in self.required_assets:
            collected = self.total_of(requirement.unit)
            if collected < requirement.quantity:
                missing[requirement.unit] = requirement.quantity - collected
        return missing

    @property
    def is_sufficient(self) -> bool:
        return self.shortfall_lovelace == 0 and not self.missing_assets

    def ensure_sufficient(self) -> "SelectionResult":
        """
        Return self, or raise if the selection is under-funded

        Raises:
            InsufficientFundsError: If lovelace or any required asset is short
        """
        if not self.is_sufficient:
            raise InsufficientFundsError(self.shortfall_lovelace, self.missing_assets)
        return self

    def change_min_lovelace(self, settings: Optional[EngineSettings] = None) -> str:
        """Minimum lovelace the change output needs for its asset bundle"""
        return calculate_min_utxo_for_assets(self.change_assets.keys(), settings=settings)

    def change_is_spendable(self, settings: Optional[EngineSettings] = None) -> bool:
        """
        Whether the change can be paid out as a valid output

        No change at all needs no output and counts as spendable.
        """
        if self.change == 0 and not self.change_assets:
            return True
        return self.change >= int(self.change_min_lovelace(settings=settings))

    def summary(self) -> dict[str, Any]:
        """Plain record for serialization by the request layer"""
        return {
            "selected": [utxo.model_dump(exclude_none=True) for utxo in self.selected],
            "count": self.count,
            "totalLovelace": str(self.total_lovelace),
            "totalAda": self.total_ada,
            "change": str(self.change),
        }
