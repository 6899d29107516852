"""
Engine Configuration

Protocol constants used by the sizing, selection and metadata code.
Defaults match the current Cardano protocol parameters; any of them can be
overridden through ``CARDANO_ENGINE_*`` environment variables or a ``.env`` file.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Get the project root directory (two levels up from src/cardano_utxo_engine/)
PROJECT_ROOT = Path(__file__).parent.parent.parent


class EngineSettings(BaseSettings):
    """
    Settings for the coin selection and protocol sizing engine

    Everything here is a plain number; the engine never reads credentials
    or network configuration.
    """

    # ============================================================================
    # Minimum UTXO sizing (Babbage cost model)
    # ============================================================================

    coins_per_utxo_byte: int = Field(4310, ge=0)
    utxo_entry_size_without_val: int = Field(27, ge=0)
    constant_overhead: int = Field(160, ge=0)  # bytes added before costing
    min_utxo_floor: int = Field(1_000_000, ge=0)
    bundle_overhead: int = Field(6, ge=0)
    policy_id_size: int = Field(28, ge=0)
    asset_entry_overhead: int = Field(12, ge=0)
    datum_overhead: int = Field(2, ge=0)

    # ============================================================================
    # Coin selection
    # ============================================================================

    improve_target_multiplier: int = Field(2, ge=1)
    improve_threshold_percent: int = Field(80, ge=0, le=100)
    collateral_min_lovelace: int = Field(5_000_000, ge=0)

    # ============================================================================
    # Fees (linear fee parameters, mainnet defaults)
    # ============================================================================

    min_fee_a: int = Field(44, ge=0)
    min_fee_b: int = Field(155_381, ge=0)
    assumed_tx_size: int = Field(300, gt=0)

    # ============================================================================
    # Transaction metadata
    # ============================================================================

    metadata_max_string_bytes: int = Field(64, gt=0)
    metadata_max_label: int = Field(2**53 - 1, ge=0)
    metadata_max_size: int = Field(16_384, gt=0)  # 16KB max per transaction

    model_config = SettingsConfigDict(
        env_prefix="CARDANO_ENGINE_",
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> EngineSettings:
    """Process-wide settings instance"""
    return EngineSettings()
