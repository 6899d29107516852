"""
Cardano UTXO Engine

Coin selection and protocol sizing for Cardano transactions, separated from
any network or wallet code. Operates on in-memory UTXO sets and metadata
trees supplied by the caller.
"""

from .amounts import LOVELACE_PER_ADA, ada_to_lovelace, lovelace_to_ada, parse_quantity
from .config import EngineSettings, get_settings
from .enums import AddressType, DRepType, GovernanceActionType, MetadataStandard, SelectionAlgorithm
from .exceptions import EngineError, InsufficientFundsError, InvalidUtxoError, UnsupportedAlgorithmError
from .fees import FeeEstimate, estimate_fee
from .metadata import (
    MetadataNotFound,
    MetadataValidationResult,
    parse_cip25_metadata,
    parse_cip68_metadata,
    parse_transaction_metadata,
    validate_metadata,
    validate_metadata_size,
)
from .min_utxo import calculate_min_utxo_for_assets, calculate_min_utxo_lovelace
from .models import AssetAmount, AssetRequirement, SelectionResult, UnspentOutput
from .selection import find_collateral_utxos, select_largest_first, select_random_improve, select_utxos
from .validators import (
    asset_fingerprint,
    get_address_type,
    is_mainnet_address,
    is_valid_cardano_address,
    is_valid_policy_id,
    is_valid_pool_id,
    is_valid_tx_hash,
)


__all__ = [
    "LOVELACE_PER_ADA",
    "ada_to_lovelace",
    "lovelace_to_ada",
    "parse_quantity",
    "EngineSettings",
    "get_settings",
    "AddressType",
    "DRepType",
    "GovernanceActionType",
    "MetadataStandard",
    "SelectionAlgorithm",
    "EngineError",
    "InsufficientFundsError",
    "InvalidUtxoError",
    "UnsupportedAlgorithmError",
    "FeeEstimate",
    "estimate_fee",
    "MetadataNotFound",
    "MetadataValidationResult",
    "parse_cip25_metadata",
    "parse_cip68_metadata",
    "parse_transaction_metadata",
    "validate_metadata",
    "validate_metadata_size",
    "calculate_min_utxo_for_assets",
    "calculate_min_utxo_lovelace",
    "AssetAmount",
    "AssetRequirement",
    "SelectionResult",
    "UnspentOutput",
    "find_collateral_utxos",
    "select_largest_first",
    "select_random_improve",
    "select_utxos",
    "asset_fingerprint",
    "get_address_type",
    "is_mainnet_address",
    "is_valid_cardano_address",
    "is_valid_policy_id",
    "is_valid_pool_id",
    "is_valid_tx_hash",
]
