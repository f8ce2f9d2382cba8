"""
Weight edits with downward rescaling and upward re-aggregation.
"""

import logging
import math

from price_index_mcp.core.aggregator import recompute_from_children
from price_index_mcp.core.exceptions import CategoryNotFoundError, InvalidWeightError
from price_index_mcp.core.tree import locate, path_to
from price_index_mcp.models.category import Category

logger = logging.getLogger(__name__)


def scale_subtree(node: Category, scale: float) -> Category:
    """Multiply the weight of ``node`` and of all its descendants by ``scale``."""
    return node.model_copy(
        update={
            "weight": node.weight * scale,
            "children": tuple(scale_subtree(child, scale) for child in node.children),
        }
    )


def _apply_weight(target: Category, new_weight: float) -> Category:
    if not target.children:
        return target.model_copy(update={"weight": new_weight})

    children = target.children
    total_child_weight = sum(child.weight for child in children)
    if total_child_weight <= 0:
        logger.debug(
            f"Children of {target.code} weigh nothing, leaving their weights unchanged"
        )
    elif not math.isclose(total_child_weight, new_weight):
        # Children already summing to the target stay as they are, so a
        # repeated edit does not drift by rounding
        scale = new_weight / total_child_weight
        children = tuple(scale_subtree(child, scale) for child in children)

    # Only weights move down; the children's own index values are kept
    updated = recompute_from_children(target, children)
    return updated.model_copy(update={"weight": new_weight})


def rebalance(tree: Category, code: str, new_weight: float) -> Category:
    """
    Set the weight of one category and return the resulting tree.

    Descendants of the edited category are rescaled to keep their relative
    proportions, then every ancestor up to the root gets its weight and
    index values recomputed from its children. The input tree is never
    modified: nodes off the edited path are shared with the result.

    Args:
        tree: Root of the current snapshot
        code: Code of the category to edit
        new_weight: New weight, finite and non-negative

    Returns:
        Root of the new snapshot

    Raises:
        InvalidWeightError: If new_weight is negative or not finite
        CategoryNotFoundError: If no category carries the code
    """
    if isinstance(new_weight, bool) or not isinstance(new_weight, (int, float)):
        raise InvalidWeightError(f"Weight must be a number, got {new_weight!r}")
    if not math.isfinite(new_weight) or new_weight < 0:
        raise InvalidWeightError(f"Weight must be finite and non-negative, got {new_weight}")

    positions = locate(tree, code)
    if positions is None:
        raise CategoryNotFoundError(code)

    path = path_to(tree, positions)
    updated = _apply_weight(path[-1], float(new_weight))

    # Walk back up to the root, rebuilding each ancestor around the new child
    for ancestor, position in zip(reversed(path[:-1]), reversed(positions)):
        children = ancestor.children[:position] + (updated,) + ancestor.children[position + 1:]
        updated = recompute_from_children(ancestor, children).model_copy(
            update={"weight": sum(child.weight for child in children)}
        )

    logger.info(f"Set weight of {code} to {new_weight}")
    return updated
