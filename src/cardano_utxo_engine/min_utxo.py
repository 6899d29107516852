"""
Minimum UTXO Sizing

Every output on Cardano must carry at least ``coins_per_utxo_byte`` lovelace
for each byte it occupies in the UTXO set. This module estimates the
serialized size of an output from the shape of its value and datum and
prices it with the linear cost model.

Reference:
- CIP-55: https://cips.cardano.org/cip/CIP-0055
"""

from typing import Iterable, Optional

from .config import EngineSettings, get_settings


def estimate_output_size(
    num_assets: int,
    total_asset_name_length: int,
    num_policy_ids: int,
    has_inline_datum: bool = False,
    datum_size: int = 0,
    settings: Optional[EngineSettings] = None,
) -> int:
    """
    Estimate the size units of an output before the constant overhead

    Args:
        num_assets: Number of distinct native assets in the output
        total_asset_name_length: Sum of asset name lengths in bytes
        num_policy_ids: Number of distinct policy IDs
        has_inline_datum: Whether the output holds an inline datum
        datum_size: Serialized datum size in bytes

    Returns:
        Estimated size in bytes

    Raises:
        ValueError: If any size parameter is negative
    """
    for name, value in (
        ("num_assets", num_assets),
        ("total_asset_name_length", total_asset_name_length),
        ("num_policy_ids", num_policy_ids),
        ("datum_size", datum_size),
    ):
        if value < 0:
            raise ValueError(f"{name} must be non-negative, got {value}")

    settings = settings or get_settings()
    size = settings.utxo_entry_size_without_val

    if num_assets > 0:
        size += settings.bundle_overhead
        size += num_policy_ids * settings.policy_id_size
        size += total_asset_name_length
        size += num_assets * settings.asset_entry_overhead

    if has_inline_datum:
        size += datum_size + settings.datum_overhead

    return size


def calculate_min_utxo_lovelace(
    num_assets: int,
    total_asset_name_length: int,
    num_policy_ids: int,
    has_inline_datum: bool = False,
    datum_size: int = 0,
    settings: Optional[EngineSettings] = None,
) -> str:
    """
    Calculate the minimum lovelace an output must hold

    Example:
        >>> calculate_min_utxo_lovelace(0, 0, 0)
        '1000000'

    Returns:
        Minimum lovelace as a decimal string, never below the protocol floor
    """
    settings = settings or get_settings()
    size = estimate_output_size(
        num_assets,
        total_asset_name_length,
        num_policy_ids,
        has_inline_datum,
        datum_size,
        settings=settings,
    )
    min_lovelace = max(settings.min_utxo_floor, settings.coins_per_utxo_byte * (settings.constant_overhead + size))
    return str(min_lovelace)


POLICY_ID_HEX_LENGTH = 56


def split_asset_unit(unit: str) -> tuple[str, str]:
    """
    Split a Blockfrost asset unit into policy ID and hex asset name

    The first 56 hex characters are the policy ID, the rest is the asset name.
    """
    return unit[:POLICY_ID_HEX_LENGTH], unit[POLICY_ID_HEX_LENGTH:]


def asset_bundle_shape(units: Iterable[str]) -> tuple[int, int, int]:
    """
    Describe a multi-asset bundle for sizing

    Args:
        units: Asset units (policy ID + hex asset name), lovelace excluded

    Returns:
        Tuple of (num_assets, total_asset_name_length, num_policy_ids)
    """
    distinct = set(units)
    policies = set()
    name_length = 0
    for unit in distinct:
        policy_id, asset_name = split_asset_unit(unit)
        policies.add(policy_id)
        name_length += len(asset_name) // 2
    return len(distinct), name_length, len(policies)


def calculate_min_utxo_for_assets(
    units: Iterable[str],
    has_inline_datum: bool = False,
    datum_size: int = 0,
    settings: Optional[EngineSettings] = None,
) -> str:
    """Minimum lovelace for an output carrying the given asset units"""
    num_assets, name_length, num_policies = asset_bundle_shape(units)
    return calculate_min_utxo_lovelace(
        num_assets, name_length, num_policies, has_inline_datum, datum_size, settings=settings
    )
