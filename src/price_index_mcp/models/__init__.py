"""
Pydantic models for the price index tree.
"""

from price_index_mcp.models.category import Category, Variation
from price_index_mcp.models.record import ColumnMapping, FlatRecord

__all__ = ["Category", "Variation", "ColumnMapping", "FlatRecord"]
