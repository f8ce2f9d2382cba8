"""
Custom exceptions for the price index tree.
"""


class IndexTreeError(Exception):
    """Base exception for price index tree errors."""
    pass


class SourceNotFoundError(IndexTreeError):
    """Raised when the source CSV file cannot be found."""
    pass


class RecordParseError(IndexTreeError):
    """Raised when the source CSV file cannot be decoded or parsed."""
    pass


class CategoryNotFoundError(IndexTreeError):
    """Raised when no category carries the requested code."""

    def __init__(self, code: str):
        super().__init__(f"Category not found: {code}")
        self.code = code


class InvalidWeightError(IndexTreeError):
    """Raised when a weight edit is negative or not a finite number."""
    pass
