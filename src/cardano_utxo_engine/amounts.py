"""
Amount Arithmetic

Exact lovelace arithmetic and ADA/lovelace conversion. On-chain values are
always carried as Python ``int``; floats only appear on the display side.
"""

from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext
from typing import Union


LOVELACE_PER_ADA = 1_000_000

QuantityLike = Union[int, str]
AdaLike = Union[int, float, str, Decimal]


def parse_quantity(value: QuantityLike) -> int:
    """
    Parse an exact integer quantity

    Accepts ``int`` or a base-10 integer string (Blockfrost returns quantities
    as strings). Floats are rejected so that large on-chain values are never
    rounded on the way in.

    Args:
        value: Quantity as int or decimal string

    Returns:
        Quantity as int

    Raises:
        ValueError: If the value is not an exact integer
    """
    if isinstance(value, bool):
        raise ValueError(f"Quantity must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text.lstrip("-").isdigit():
            raise ValueError(f"Quantity must be a base-10 integer string, got {value!r}")
        return int(text)
    raise ValueError(f"Quantity must be an int or numeric string, got {type(value).__name__}")


def lovelace_to_ada(lovelace: QuantityLike) -> float:
    """
    Convert lovelace to ADA

    Args:
        lovelace: Amount in lovelace as int or decimal string

    Returns:
        Amount in ADA (display only)
    """
    return parse_quantity(lovelace) / LOVELACE_PER_ADA


def ada_to_lovelace(ada: AdaLike) -> str:
    """
    Convert ADA to lovelace

    The product is truncated toward zero, so fractions of a lovelace are
    dropped rather than rounded: ``ada_to_lovelace(1.0000009) == "1000000"``.
    Floats go through their shortest decimal repr first, which keeps values
    like ``0.1`` exact.

    Args:
        ada: Amount in ADA

    Returns:
        Amount in lovelace as a decimal string

    Raises:
        ValueError: If the amount is not a finite number
    """
    if isinstance(ada, bool):
        raise ValueError(f"ADA amount must be numeric, got {ada!r}")
    try:
        amount = ada if isinstance(ada, Decimal) else Decimal(str(ada))
    except InvalidOperation as e:
        raise ValueError(f"ADA amount must be numeric, got {ada!r}") from e
    if not amount.is_finite():
        raise ValueError(f"ADA amount must be finite, got {ada!r}")

    if isinstance(ada, int):
        return str(ada * LOVELACE_PER_ADA)

    # Enough digits for the full product, so only the final truncation rounds
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(amount.as_tuple().digits) + 7)
        lovelace = (amount * LOVELACE_PER_ADA).to_integral_value(rounding=ROUND_DOWN)
    return str(int(lovelace))
