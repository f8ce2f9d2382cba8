"""
Weighted-mean aggregation of index values.

Both the load-time aggregation pass and the weight rebalancer go through
``recompute_from_children`` so the two paths share a single formula.
"""

from typing import Sequence

from price_index_mcp.models.category import (
    NEWEST,
    OLDEST,
    PERIODS,
    PREVIOUS,
    QUARTER_AGO,
    Category,
    IndexValues,
    Variation,
)


def _percent_change(current: float, reference: float) -> float:
    if reference == 0:
        return 0.0
    return (current - reference) / reference * 100


def compute_variation(index_values: IndexValues) -> Variation:
    """
    Derive variation percentages from five index values.

    Each percentage is left at 0.0 when its reference reading is zero.
    """
    newest = index_values[NEWEST]
    return Variation(
        monthly=_percent_change(newest, index_values[PREVIOUS]),
        trimester=_percent_change(newest, index_values[QUARTER_AGO]),
        yearly=_percent_change(newest, index_values[OLDEST]),
    )


def weighted_index_values(
    children: Sequence[Category], previous: IndexValues
) -> IndexValues:
    """
    Compute the weighted mean of each period over the children.

    Children reading zero for a period are ignored for that period. When no
    child contributes any weight, the previous value is kept.

    Args:
        children: Subcategories to aggregate
        previous: Current index values of the parent

    Returns:
        New index values, one per period
    """
    values = []
    for position in range(len(PERIODS)):
        weighted_sum = 0.0
        valid_weight = 0.0
        for child in children:
            value = child.index_values[position]
            if value != 0:
                weighted_sum += value * child.weight
                valid_weight += child.weight
        values.append(weighted_sum / valid_weight if valid_weight > 0 else previous[position])
    return tuple(values)  # type: ignore[return-value]


def recompute_from_children(node: Category, children: Sequence[Category]) -> Category:
    """Return ``node`` with its children replaced and its indices re-derived."""
    index_values = weighted_index_values(children, node.index_values)
    return node.model_copy(
        update={
            "children": tuple(children),
            "index_values": index_values,
            "variation": compute_variation(index_values),
        }
    )


def aggregate(node: Category) -> Category:
    """
    Aggregate a tree bottom-up, starting from ``node``.

    Leaves are returned unchanged. Every parent gets weighted-mean index
    values from its aggregated children, and its weight becomes the sum of
    its children's weights whenever that sum is positive.
    """
    if not node.children:
        return node

    children = [aggregate(child) for child in node.children]
    updated = recompute_from_children(node, children)

    total_weight = sum(child.weight for child in children)
    if total_weight > 0 and total_weight != node.weight:
        updated = updated.model_copy(update={"weight": total_weight})
    return updated
