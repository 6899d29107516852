"""
Fee Estimation

Rough fee estimate from the linear fee parameters. Real fees depend on the
final serialized transaction, so this is only good for sizing a selection
target before the transaction is built.
"""

from typing import Optional

from pydantic import BaseModel, Field

from .amounts import lovelace_to_ada
from .config import EngineSettings, get_settings


class FeeEstimate(BaseModel):
    """Estimated fee for a transaction of an assumed size"""

    estimated_fee: str = Field(description="Fee in lovelace (as string for large numbers)")
    estimated_fee_ada: float
    min_fee_a: int = Field(description="Lovelace per byte")
    min_fee_b: int = Field(description="Constant lovelace per transaction")
    assumed_tx_size: int


def estimate_fee(
    min_fee_a: Optional[int] = None,
    min_fee_b: Optional[int] = None,
    tx_size: Optional[int] = None,
    settings: Optional[EngineSettings] = None,
) -> FeeEstimate:
    """
    Estimate a fee as ``min_fee_a * tx_size + min_fee_b``

    Parameters left out come from the engine settings (mainnet defaults,
    300 byte transaction).
    """
    settings = settings or get_settings()
    min_fee_a = settings.min_fee_a if min_fee_a is None else min_fee_a
    min_fee_b = settings.min_fee_b if min_fee_b is None else min_fee_b
    tx_size = settings.assumed_tx_size if tx_size is None else tx_size

    if min(min_fee_a, min_fee_b, tx_size) < 0:
        raise ValueError("Fee parameters and transaction size must be non-negative")

    fee = min_fee_a * tx_size + min_fee_b
    return FeeEstimate(
        estimated_fee=str(fee),
        estimated_fee_ada=lovelace_to_ada(fee),
        min_fee_a=min_fee_a,
        min_fee_b=min_fee_b,
        assumed_tx_size=tx_size,
    )
