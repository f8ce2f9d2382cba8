"""
Session holding the current price index tree.

Loads the source records lazily and swaps the current snapshot after each
weight edit.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from price_index_mcp.core.builder import build_tree
from price_index_mcp.core.exceptions import CategoryNotFoundError
from price_index_mcp.core.loader import read_records
from price_index_mcp.core.rebalancer import rebalance
from price_index_mcp.core.tree import find_category, locate, path_to
from price_index_mcp.models.category import Category
from price_index_mcp.models.record import DEFAULT_COLUMNS, ColumnMapping, FlatRecord

logger = logging.getLogger(__name__)

DEFAULT_CSV_NAME = "Tableau_Données_Détaillées_2025-02.csv"


class IndexTreeSession:
    """
    Owner of the "current tree" reference.

    The tree itself is immutable; each edit replaces the reference with the
    snapshot returned by the rebalancer. Edits must be serialized by the
    caller.
    """

    def __init__(
        self,
        csv_path: Optional[Path] = None,
        columns: ColumnMapping = DEFAULT_COLUMNS,
        delimiter: str = ",",
    ):
        """
        Initialize the session.

        Args:
            csv_path: Path to the source CSV file.
                     If None, uses the default file name in the working directory.
            columns: Column names of each record field
            delimiter: CSV field delimiter
        """
        if csv_path is None:
            csv_path = Path.cwd() / DEFAULT_CSV_NAME

        self.csv_path = csv_path
        self.columns = columns
        self.delimiter = delimiter
        self._initial: Optional[Category] = None
        self._current: Optional[Category] = None

    def is_available(self) -> bool:
        """Check if a tree is loaded or the source file exists."""
        return self._current is not None or self.csv_path.is_file()

    def load_records(self, records: Iterable[FlatRecord]) -> Category:
        """
        Build the tree from in-memory records, replacing any loaded tree.

        Returns:
            Root of the freshly built tree
        """
        tree = build_tree(records)
        self._initial = tree
        self._current = tree
        return tree

    def get_tree(self) -> Category:
        """Return the current snapshot, loading the source file on first use."""
        if self._current is None:
            logger.info(f"Loading price index records from {self.csv_path}")
            return self.load_records(
                read_records(self.csv_path, self.columns, self.delimiter)
            )
        return self._current

    def get_category(self, code: str) -> Category:
        """
        Get a category from the current snapshot.

        Raises:
            CategoryNotFoundError: If no category carries the code
        """
        category = find_category(self.get_tree(), code)
        if category is None:
            raise CategoryNotFoundError(code)
        return category

    def get_ancestors(self, code: str) -> List[Category]:
        """
        Get the ancestors of a category, nearest first, ending with the root.

        Raises:
            CategoryNotFoundError: If no category carries the code
        """
        tree = self.get_tree()
        positions = locate(tree, code)
        if positions is None:
            raise CategoryNotFoundError(code)
        return list(reversed(path_to(tree, positions)[:-1]))

    def update_weight(self, code: str, weight: float) -> Category:
        """
        Apply a weight edit and make the result the current snapshot.

        Returns:
            Root of the new snapshot
        """
        self._current = rebalance(self.get_tree(), code, weight)
        return self._current

    def reset(self) -> Category:
        """Discard all edits, restoring the snapshot built at load."""
        if self._initial is None:
            return self.get_tree()
        self._current = self._initial
        return self._initial
