"""
General helper utilities
"""


def format_currency(amount: float, symbol: str = "₹") -> str:
    """Format amount with a currency symbol, whole units only"""
    return f"{symbol}{amount:,.0f}"


def format_percentage(value: float) -> str:
    return f"{value:.1f}%"
