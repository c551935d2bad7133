# app/services/currency.py
#
# Currency Formatting
# The currency is always passed in (from Settings), never read from a
# module-level constant.

from typing import Any, Dict

from app.config import Currency


def format_currency(amount: float | None, currency: Currency, show_decimals: bool = False) -> str:
    """
    Format an amount in the given currency, e.g. "Rs. 25,000" or "$ 1,234.50".
    Missing amounts render as zero.
    """
    if amount is None:
        return f"{currency.symbol} 0"
    if show_decimals:
        return f"{currency.symbol} {amount:,.2f}"
    return f"{currency.symbol} {amount:,.0f}"


def format_currency_with_code(amount: float | None, currency: Currency) -> str:
    """Same as format_currency but prefixed with the ISO code ("LKR 25,000")."""
    if amount is None:
        return f"{currency.code} 0"
    return f"{currency.code} {amount:,.0f}"


def currency_info(currency: Currency) -> Dict[str, Any]:
    return {
        "code": currency.code,
        "symbol": currency.symbol,
        "locale": currency.locale,
        "name": currency.name,
    }
