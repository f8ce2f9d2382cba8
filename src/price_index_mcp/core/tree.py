"""
Read-only queries over a category tree.

Parent relations are derived from codes, never stored on the nodes.
"""

import math
from typing import Iterator, List, Optional, Tuple

from price_index_mcp.models.category import Category


def parent_code(code: str) -> str:
    """
    Return the structural parent code of a code.

    The parent is the code with its last dot-separated segment removed;
    top-level codes have the empty string as parent.
    """
    return code.rpartition(".")[0]


def walk(tree: Category) -> Iterator[Tuple[Category, int]]:
    """Yield every node with its structural level, in pre-order."""
    stack: List[Tuple[Category, int]] = [(tree, 0)]
    while stack:
        node, level = stack.pop()
        yield node, level
        stack.extend((child, level + 1) for child in reversed(node.children))


def locate(tree: Category, code: str) -> Optional[Tuple[int, ...]]:
    """
    Find the position of a code in the tree.

    Returns:
        Child indexes leading from the root to the node (empty for the
        root itself), or None if the code is not in the tree
    """
    if tree.code == code:
        return ()
    for position, child in enumerate(tree.children):
        found = locate(child, code)
        if found is not None:
            return (position,) + found
    return None


def path_to(tree: Category, positions: Tuple[int, ...]) -> List[Category]:
    """Return the nodes from the root down to the node at ``positions``."""
    nodes = [tree]
    for position in positions:
        nodes.append(nodes[-1].children[position])
    return nodes


def find_category(tree: Category, code: str) -> Optional[Category]:
    """Return the node carrying ``code``, or None."""
    positions = locate(tree, code)
    if positions is None:
        return None
    return path_to(tree, positions)[-1]


def check_invariants(tree: Category, rel_tol: float = 1e-9) -> List[str]:
    """
    Check structural and weight invariants of a tree.

    Codes must be unique and every parent's weight must match the sum of
    its children's weights, unless those children weigh nothing at all.

    Returns:
        Human-readable descriptions of each violation (empty when valid)
    """
    problems: List[str] = []
    seen = set()

    for node, _ in walk(tree):
        if node.code in seen:
            problems.append(f"Duplicate code: {node.code}")
        seen.add(node.code)

        if not node.children:
            continue
        total = sum(child.weight for child in node.children)
        if total > 0 and not math.isclose(node.weight, total, rel_tol=rel_tol, abs_tol=1e-9):
            problems.append(
                f"Weight of {node.code} is {node.weight}, children sum to {total}"
            )

    return problems
