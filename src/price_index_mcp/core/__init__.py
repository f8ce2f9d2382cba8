"""
Core functionality for the price index tree.
"""

from price_index_mcp.core.aggregator import aggregate, compute_variation
from price_index_mcp.core.builder import build_raw_tree, build_tree
from price_index_mcp.core.exceptions import (
    CategoryNotFoundError,
    IndexTreeError,
    InvalidWeightError,
    RecordParseError,
    SourceNotFoundError,
)
from price_index_mcp.core.loader import parse_rows, read_records
from price_index_mcp.core.rebalancer import rebalance
from price_index_mcp.core.session import IndexTreeSession

__all__ = [
    "IndexTreeSession",
    "aggregate",
    "build_raw_tree",
    "build_tree",
    "compute_variation",
    "parse_rows",
    "read_records",
    "rebalance",
    "CategoryNotFoundError",
    "IndexTreeError",
    "InvalidWeightError",
    "RecordParseError",
    "SourceNotFoundError",
]
