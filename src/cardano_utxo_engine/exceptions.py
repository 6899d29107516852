"""
Engine Exceptions

Selection and metadata validation report problems through their return
values; the exceptions below cover caller errors and the opt-in
sufficiency check.
"""


class EngineError(Exception):
    """Base exception for the coin selection engine"""

    pass


class InvalidUtxoError(EngineError, ValueError):
    """Raised when UTXO data is structurally broken and cannot be normalized"""

    pass


class UnsupportedAlgorithmError(EngineError, ValueError):
    """Raised when an unknown coin selection algorithm is requested"""

    pass


class InsufficientFundsError(EngineError):
    """Raised when a selection does not cover the requested amounts"""

    def __init__(self, shortfall_lovelace: int, missing_assets: dict[str, int] | None = None):
        self.shortfall_lovelace = shortfall_lovelace
        self.missing_assets = dict(missing_assets or {})

        parts = []
        if shortfall_lovelace > 0:
            parts.append(f"{shortfall_lovelace} lovelace")
        for unit, quantity in self.missing_assets.items():
            parts.append(f"{quantity} of {unit}")
        super().__init__(f"Insufficient balance: missing {', '.join(parts)}")
