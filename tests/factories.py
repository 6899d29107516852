"""
Test Data Factories

Builders for UTXOs and Blockfrost-shaped records used across the test suite.
"""

import itertools
from typing import Optional

from cardano_utxo_engine import UnspentOutput


_counter = itertools.count()


class UtxoFactory:
    """Factory for generating UTXOs"""

    @staticmethod
    def create_tx_hash() -> str:
        """Generate a unique 64-character transaction hash"""
        return f"{next(_counter):064x}"

    @staticmethod
    def create_raw(
        lovelace: int,
        assets: Optional[dict[str, int]] = None,
        tx_hash: Optional[str] = None,
        output_index: int = 0,
        **extra,
    ) -> dict:
        """Generate a Blockfrost-style UTXO record with string quantities"""
        amount = [{"unit": "lovelace", "quantity": str(lovelace)}]
        for unit, quantity in (assets or {}).items():
            amount.append({"unit": unit, "quantity": str(quantity)})
        return {
            "tx_hash": tx_hash or UtxoFactory.create_tx_hash(),
            "output_index": output_index,
            "amount": amount,
            **extra,
        }

    @staticmethod
    def create(lovelace: int, assets: Optional[dict[str, int]] = None, **kwargs) -> UnspentOutput:
        """Generate an UnspentOutput"""
        return UnspentOutput.from_blockfrost(UtxoFactory.create_raw(lovelace, assets, **kwargs))


class AssetFactory:
    """Factory for asset units"""

    @staticmethod
    def create_policy_id(fill: str = "a") -> str:
        return fill * 56

    @staticmethod
    def create_unit(policy_fill: str = "a", asset_name: str = "MyNFT") -> str:
        """Policy ID followed by the hex-encoded asset name"""
        return AssetFactory.create_policy_id(policy_fill) + asset_name.encode("utf-8").hex()
