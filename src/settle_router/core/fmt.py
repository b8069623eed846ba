"""
Formatting helpers (non-core arithmetic).

Core arithmetic uses ints. Decimal here is only for display (logs, reports),
converting smallest units to whole units using the asset scale.
"""

from decimal import Decimal

from .amounts import check_amount
from .assets import Asset
from .exc import AmountDomainError


def amount_to_decimal(value: int, scale: int) -> Decimal:
    """Convert an integer amount into whole units for printing only.

      amount_to_decimal(12345, 2) -> Decimal('123.45')
    """
    check_amount(value)
    if scale < 0:
        raise AmountDomainError("amount_to_decimal(): scale must be >= 0")
    return Decimal(value).scaleb(-scale)


def fmt_amount(value: int, asset: str) -> str:
    """Render ``value`` of ``asset`` as e.g. '123.45 USD'.

    Falls back to the raw integer when the asset name does not parse.
    """
    try:
        a = Asset.from_name(asset)
    except ValueError:
        return f"{value} {asset}"
    return f"{amount_to_decimal(value, a.scale):f} {a.code}"


__all__ = [
    "amount_to_decimal",
    "fmt_amount",
]
