"""
MCP tool definitions for the price index tree.

Exposes the session's query and edit operations through the Model Context
Protocol.
"""

from typing import Any, Dict, List, Optional

from price_index_mcp.core.session import IndexTreeSession
from price_index_mcp.models.category import PERIODS, Category
from price_index_mcp.utils.numbers import round_display


def category_row(category: Category) -> Dict[str, Any]:
    """
    Flatten a category into a display row.

    Index values and variations are rounded to one decimal; the weight
    is kept as stored.
    """
    return {
        "code": category.code,
        "name": category.name,
        "weight": category.weight,
        "depth": category.depth,
        "indices": {
            period: round_display(value)
            for period, value in zip(PERIODS, category.index_values)
        },
        "variation": {
            "monthly_percent": round_display(category.variation.monthly),
            "trimester_percent": round_display(category.variation.trimester),
            "yearly_percent": round_display(category.variation.yearly),
        },
        "child_count": len(category.children),
    }


def category_view(category: Category, max_depth: Optional[int] = None) -> Dict[str, Any]:
    """
    Nested display view of a category and its descendants.

    Args:
        category: Node at the top of the view
        max_depth: Number of levels to expand below the node (None = all)
    """
    view = category_row(category)
    if max_depth is None or max_depth > 0:
        next_depth = None if max_depth is None else max_depth - 1
        view["children"] = [category_view(child, next_depth) for child in category.children]
    else:
        view["children"] = []
        view["collapsed"] = bool(category.children)
    return view


class IndexTreeTools:
    """Collection of MCP tools for browsing and editing the price index tree."""

    def __init__(self, session: IndexTreeSession):
        """
        Initialize tools with a session.

        Args:
            session: IndexTreeSession instance
        """
        self.session = session

    def get_category_tree(
        self, code: Optional[str] = None, max_depth: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Get the nested category tree.

        Args:
            code: Category at the top of the view (default: root)
            max_depth: Levels to expand below it (default: all)

        Returns:
            Dict with the nested view

        Raises:
            CategoryNotFoundError: If code is not in the tree
            ValueError: If max_depth is negative
        """
        if max_depth is not None and max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {max_depth}")

        top = self.session.get_category(code) if code else self.session.get_tree()
        return {"tree": category_view(top, max_depth)}

    def get_category(self, code: str) -> Dict[str, Any]:
        """
        Get one category with the codes of its subcategories.

        Args:
            code: Category code to query

        Returns:
            Dict with category details
        """
        category = self.session.get_category(code)
        row = category_row(category)
        row["children"] = [child.code for child in category.children]
        return row

    def list_categories(self, parent_code: Optional[str] = None) -> Dict[str, Any]:
        """
        List the direct subcategories of a category.

        Args:
            parent_code: Category whose children to list (default: root)

        Returns:
            Dict with category count and list of rows
        """
        parent = (
            self.session.get_category(parent_code)
            if parent_code
            else self.session.get_tree()
        )

        return {
            "parent": parent.code,
            "count": len(parent.children),
            "categories": [category_row(child) for child in parent.children],
        }

    def update_weight(self, code: str, weight: float) -> Dict[str, Any]:
        """
        Change the weight of a category.

        Descendants are rescaled in proportion and ancestors recomputed.

        Args:
            code: Category code to edit
            weight: New weight (finite, >= 0)

        Returns:
            Dict with the edited category and its ancestors up to the root

        Raises:
            CategoryNotFoundError: If code is not in the tree
            InvalidWeightError: If weight is negative or not finite
        """
        self.session.update_weight(code, weight)

        return {
            "category": category_row(self.session.get_category(code)),
            "ancestors": [category_row(a) for a in self.session.get_ancestors(code)],
        }

    def reset_weights(self) -> Dict[str, Any]:
        """
        Discard all weight edits.

        Returns:
            Dict with the restored root row
        """
        tree = self.session.reset()
        return {"root": category_row(tree)}


def create_tool_schemas() -> List[Dict[str, Any]]:
    """
    Create MCP tool schemas for all tools.

    Returns:
        List of tool schema definitions
    """
    return [
        {
            "name": "get_category_tree",
            "description": (
                "Get the price index category tree with weights, index values "
                "for the five periods (n-12, n-3, n-2, n-1, n) and monthly, "
                "trimester and yearly variation percentages. Optionally start "
                "from a category code and limit the expanded depth."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "code": {
                        "type": "string",
                        "description": "Category code at the top of the view (default: root)",
                    },
                    "max_depth": {
                        "type": "integer",
                        "description": "Levels to expand below the category (default: all)",
                        "minimum": 0,
                    },
                },
            },
        },
        {
            "name": "get_category",
            "description": "Get one category by code, with the codes of its subcategories.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "code": {
                        "type": "string",
                        "description": "Category code, e.g. 01.1",
                    },
                },
                "required": ["code"],
            },
        },
        {
            "name": "list_categories",
            "description": (
                "List the direct subcategories of a category, or the top-level "
                "categories when no parent code is given."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "parent_code": {
                        "type": "string",
                        "description": "Parent category code (default: root)",
                    },
                },
            },
        },
        {
            "name": "update_weight",
            "description": (
                "Set the weight (pondération) of a category. Subcategory weights "
                "are rescaled proportionally and parent categories are "
                "recomputed up to the root."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "code": {
                        "type": "string",
                        "description": "Category code to edit",
                    },
                    "weight": {
                        "type": "number",
                        "description": "New weight (>= 0)",
                        "minimum": 0,
                    },
                },
                "required": ["code", "weight"],
            },
        },
        {
            "name": "reset_weights",
            "description": "Discard every weight edit and restore the loaded values.",
            "inputSchema": {
                "type": "object",
                "properties": {},
            },
        },
    ]
