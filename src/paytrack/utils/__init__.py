"""Utility functions for paytrack."""

from paytrack.utils.amount_parser import coerce_cell_amount, parse_amount
from paytrack.utils.month_parser import financial_year_label, format_month_year, parse_month_year

__all__ = [
    "coerce_cell_amount",
    "parse_amount",
    "financial_year_label",
    "format_month_year",
    "parse_month_year",
]
