"""
Utility functions for the price index tree.
"""

from price_index_mcp.utils.numbers import (
    is_total_code,
    parse_number,
    parse_numeric_column,
    round_display,
)

__all__ = [
    "parse_number",
    "parse_numeric_column",
    "is_total_code",
    "round_display",
]
