"""
Formatters utility.

Utility functions for formatting amounts and records.
"""

from decimal import ROUND_DOWN, Decimal

from app.config.business_constants import LAMPORTS_PER_SOL


def lamports_to_sol(lamports: int) -> Decimal:
    """Convert lamports to SOL."""
    return Decimal(lamports) / Decimal(LAMPORTS_PER_SOL)


def sol_to_lamports(amount: Decimal) -> int:
    """
    Convert SOL to whole lamports.

    Fractions of a lamport are truncated.
    """
    return int((amount * LAMPORTS_PER_SOL).to_integral_value(rounding=ROUND_DOWN))


def format_sol(amount: Decimal, places: int) -> str:
    """
    Format SOL amount with fixed decimal places.

    Examples:
        >>> format_sol(Decimal("0.111"), 3)
        '0.111'
        >>> format_sol(Decimal("0.05"), 4)
        '0.0500'
    """
    return f"{amount:.{places}f}"
