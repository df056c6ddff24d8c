"""Locale-aware number formatting for amounts shown to applicants"""

import math
import re

_NON_NUMERIC = re.compile(r"[^\d-]")
_LEADING_INTEGER = re.compile(r"^-?\d+")

_SEPARATORS = {
    # locale: (thousands, decimal)
    "es-AR": (".", ","),
    "en-US": (",", "."),
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _group(value: str, thousands: str, decimal: str) -> str:
    """Swap Python's "," / "." grouping for the locale's separators"""
    return value.replace(",", "\0").replace(".", decimal).replace("\0", thousands)


def format_number(value: float, language: str = "es") -> str:
    """Round to an integer and group thousands: 1.000.000 (es) or 1,000,000 (en)"""
    rounded = f"{_round_half_up(value):,}"
    if language == "es":
        return rounded.replace(",", ".")
    return rounded


def format_currency(value: float, language: str = "es") -> str:
    return f"${format_number(value, language)}"


def parse_formatted_number(value: str) -> int:
    """Parse a formatted integer back, ignoring separators and symbols. 0 if unparseable."""
    match = _LEADING_INTEGER.match(_NON_NUMERIC.sub("", value or ""))
    return int(match.group()) if match else 0


def format_currency_amount(amount: float, currency: str, locale: str = "es-AR") -> str:
    """Two-decimal amount prefixed by the currency code, e.g. "ARS 1.234,56" """
    thousands, decimal = _SEPARATORS.get(locale, _SEPARATORS["en-US"])
    return f"{currency} {_group(f'{amount:,.2f}', thousands, decimal)}"
