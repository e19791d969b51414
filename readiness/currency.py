"""Currency normalization helpers for BOM cost figures."""

from .normalize import to_number

DEFAULT_BASE_CURRENCY = "CAD"


def normalize_currency_code(currency, default: str = DEFAULT_BASE_CURRENCY) -> str:
    """Upper-case a currency code; blank or missing codes become default."""
    if currency is None:
        return default
    code = str(currency).strip().upper()
    return code or default


def convert_to_base_currency(
    amount,
    currency,
    exchange_rate,
    base_currency: str = DEFAULT_BASE_CURRENCY
) -> float:
    """
    Convert an amount into the base currency.

    Amounts already in the base currency (or with no currency) pass through.
    The rate converts currency -> base and defaults to 1 when unusable.
    """
    value = to_number(amount)
    code = normalize_currency_code(currency, default=normalize_currency_code(base_currency))
    if code == normalize_currency_code(base_currency):
        return value
    return value * to_number(exchange_rate, fallback=1.0)
