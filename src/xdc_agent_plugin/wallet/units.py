"""Conversion between decimal display amounts and integer minor units."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, localcontext

NATIVE_DECIMALS = 18

# Enough significant digits for any uint256 at any decimal count.
_PRECISION = 100


def format_units(value: int, decimals: int = NATIVE_DECIMALS) -> str:
    """Render *value* minor units as a plain decimal string.

    Trailing zeros are dropped and no exponent notation is used, so
    ``10**18`` at 18 decimals renders as ``"1"`` and ``0`` as ``"0"``.
    """
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        amount = Decimal(int(value)).scaleb(-int(decimals))
        text = format(amount.normalize(), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def parse_units(amount: str | int | Decimal, decimals: int = NATIVE_DECIMALS) -> int:
    """Parse a decimal amount such as ``"0.1"`` into integer minor units.

    Raises ``ValueError`` for non-numeric, negative, or over-precise input.
    """
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount '{amount}'. Provide a number like '0.1'.") from exc

    if not value.is_finite():
        raise ValueError(f"Invalid amount '{amount}'.")
    if value < 0:
        raise ValueError(f"Amount must not be negative: '{amount}'.")

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        scaled = value.scaleb(int(decimals))
        if scaled != scaled.to_integral_value():
            raise ValueError(
                f"Amount '{amount}' has more than {decimals} decimal places."
            )
        return int(scaled)
