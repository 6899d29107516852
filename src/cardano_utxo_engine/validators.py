"""
Identifier Validation

Lightweight format checks for addresses, hashes and pool IDs, plus CIP-14
asset fingerprints. Address checks look at the human-readable prefix and
length only; they do not verify bech32 checksums.

Reference:
- CIP-14: https://cips.cardano.org/cip/CIP-0014
"""

import hashlib
import re

from pycardano.crypto.bech32 import encode

from .enums import AddressType


_HEX_56 = re.compile(r"[a-fA-F0-9]{56}")
_HEX_64 = re.compile(r"[a-fA-F0-9]{64}")

SHELLEY_PREFIXES = ("addr1", "addr_test1")
STAKE_PREFIXES = ("stake1", "stake_test1")
BYRON_PREFIXES = ("Ae2", "DdzFF")

# First data character after the separator carries the CIP-19 header type nibble
_SHELLEY_HEADER_TYPES = {
    "q": AddressType.BASE,
    "z": AddressType.BASE,
    "y": AddressType.BASE,
    "x": AddressType.BASE,
    "g": AddressType.POINTER,
    "2": AddressType.POINTER,
    "v": AddressType.ENTERPRISE,
    "w": AddressType.ENTERPRISE,
}


def is_valid_cardano_address(address: str) -> bool:
    """
    Check whether a string looks like a Cardano address

    Accepts Shelley payment addresses (58-108 chars), stake addresses
    (54-64 chars) and Byron base58 addresses (50-120 chars).
    """
    if not address:
        return False

    if address.startswith(SHELLEY_PREFIXES):
        return 58 <= len(address) <= 108
    if address.startswith(STAKE_PREFIXES):
        return 54 <= len(address) <= 64
    if address.startswith(BYRON_PREFIXES):
        return 50 <= len(address) <= 120

    return False


def get_address_type(address: str) -> AddressType:
    """
    Classify an address from its prefix and CIP-19 header

    Payment addresses with a header outside the base, pointer and enterprise
    types are reported as ``SHELLEY``.
    """
    if address.startswith(SHELLEY_PREFIXES):
        header = address[address.index("1") + 1 : address.index("1") + 2]
        return _SHELLEY_HEADER_TYPES.get(header, AddressType.SHELLEY)
    if address.startswith(STAKE_PREFIXES):
        return AddressType.REWARD
    if address.startswith(BYRON_PREFIXES):
        return AddressType.BYRON
    return AddressType.UNKNOWN


def is_mainnet_address(address: str) -> bool:
    return address.startswith(("addr1", "stake1", "Ae2"))


def is_valid_policy_id(policy_id: str) -> bool:
    return bool(_HEX_56.fullmatch(policy_id))


def is_valid_tx_hash(tx_hash: str) -> bool:
    return bool(_HEX_64.fullmatch(tx_hash))


def is_valid_pool_id(pool_id: str) -> bool:
    return pool_id.startswith("pool1") and len(pool_id) == 56


def asset_fingerprint(policy_id: str, asset_name: str = "") -> str:
    """
    Compute the CIP-14 fingerprint of a native asset

    Args:
        policy_id: Policy ID (56 hex characters)
        asset_name: Asset name, hex-encoded

    Returns:
        Bech32 fingerprint with the ``asset`` prefix

    Raises:
        ValueError: If the policy ID or asset name is not valid hex

    Example:
        >>> asset_fingerprint("7eae28af2208be856f7a119668ae52a49b73725e326dc16579dcc373")
        'asset1rjklcrnsdzqp65wjgrg55sy9723kw09mlgvlc3'
    """
    if not is_valid_policy_id(policy_id):
        raise ValueError(f"Invalid policy ID: {policy_id}")

    digest = hashlib.blake2b(bytes.fromhex(policy_id) + bytes.fromhex(asset_name), digest_size=20).digest()
    return encode("asset", digest)
