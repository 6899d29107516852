"""
Shared Enums

Single source of truth for the string and integer enumerations used by
selection, metadata parsing and identifier validation.
"""

from enum import Enum


# ============================================================================
# Selection Enums
# ============================================================================


class SelectionAlgorithm(str, Enum):
    """Coin selection strategies"""

    LARGEST_FIRST = "largestFirst"
    RANDOM_IMPROVE = "randomImprove"


# ============================================================================
# Metadata Enums
# ============================================================================


class MetadataStandard(str, Enum):
    """Known on-chain metadata conventions"""

    CIP25 = "CIP-25"
    CIP68 = "CIP-68"


# ============================================================================
# Address Enums
# ============================================================================


class AddressType(str, Enum):
    """
    Address kinds recognised from the bech32/base58 prefix

    - BASE: payment + staking credential
    - ENTERPRISE: payment credential only
    - POINTER: staking part is a chain pointer
    - REWARD: stake (reward account) address
    - SHELLEY: other Shelley-era header
    - BYRON: legacy base58 address
    """

    BASE = "base"
    ENTERPRISE = "enterprise"
    POINTER = "pointer"
    REWARD = "reward"
    SHELLEY = "shelley"
    BYRON = "byron"
    UNKNOWN = "unknown"


# ============================================================================
# Governance Enums (CIP-1694)
# ============================================================================


class GovernanceActionType(int, Enum):
    """Governance action tags"""

    PARAMETER_CHANGE = 0
    HARD_FORK_INITIATION = 1
    TREASURY_WITHDRAWALS = 2
    NO_CONFIDENCE = 3
    UPDATE_COMMITTEE = 4
    NEW_CONSTITUTION = 5
    INFO_ACTION = 6


class DRepType(int, Enum):
    """DRep credential kinds"""

    KEY_HASH = 0
    SCRIPT_HASH = 1
    ALWAYS_ABSTAIN = 2
    ALWAYS_NO_CONFIDENCE = 3
