"""
Unified money formatting for activity descriptions and exports.

Usage:
    from studiodesk.utils.money import format_money

    format_money(85000)            -> "₹85,000"
    format_money(1200.5, decimals=2) -> "₹1,200.50"
"""
from decimal import Decimal

from studiodesk.config import get_settings


def format_money(amount, decimals: int = 0, symbol: str | None = None) -> str:
    """
    Format an amount with thousands separators and the studio currency symbol.

    Args:
        amount: int / float / Decimal / str
        decimals: digits after the decimal point
        symbol: override for settings.CURRENCY_SYMBOL
    """
    if isinstance(amount, str):
        amount = Decimal(amount)
    if symbol is None:
        symbol = get_settings().CURRENCY_SYMBOL
    fmt = f"{{:,.{decimals}f}}"
    return f"{symbol}{fmt.format(amount)}"
