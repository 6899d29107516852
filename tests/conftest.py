"""
Pytest configuration for engine tests

Shared fixtures for UTXO sets, asset units and settings.
"""

import pytest

from cardano_utxo_engine import EngineSettings, get_settings

from .factories import AssetFactory, UtxoFactory


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make every test see a fresh settings instance"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def engine_settings():
    """Settings with protocol defaults, independent of the environment"""
    return EngineSettings(_env_file=None)


@pytest.fixture
def simple_utxos():
    """Three pure-ADA outputs: 1, 5 and 2 ADA, in that order"""
    return [
        UtxoFactory.create(1_000_000, tx_hash="1" * 64),
        UtxoFactory.create(5_000_000, tx_hash="2" * 64),
        UtxoFactory.create(2_000_000, tx_hash="3" * 64),
    ]


@pytest.fixture
def token_unit():
    """Unit of a fungible test token"""
    return AssetFactory.create_unit("b", "TOKEN")


@pytest.fixture
def token_utxos(token_unit):
    """A large ADA-only output and two smaller outputs holding tokens"""
    return [
        UtxoFactory.create(10_000_000, tx_hash="a" * 64),
        UtxoFactory.create(2_000_000, {token_unit: 5}, tx_hash="b" * 64),
        UtxoFactory.create(3_000_000, {token_unit: 2}, tx_hash="c" * 64),
    ]
