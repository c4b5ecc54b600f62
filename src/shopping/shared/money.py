"""Price display helpers. Amounts are whole shillings (UGX has no minor unit)."""

DEFAULT_CURRENCY = "UGX"


def format_price(amount: int | None, currency: str = DEFAULT_CURRENCY) -> str:
    """Format an amount for display: ``format_price(28000)`` -> ``"UGX 28,000"``."""
    if amount is None:
        return f"{currency} 0"
    return f"{currency} {round(amount):,}"
