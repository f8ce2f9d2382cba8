"""
Tree construction from flat weighted records.
"""

import logging
import re
from collections import defaultdict
from typing import Dict, Iterable, List

from price_index_mcp.core.aggregator import aggregate, compute_variation
from price_index_mcp.core.tree import parent_code
from price_index_mcp.models.category import ROOT_CODE, ROOT_NAME, Category
from price_index_mcp.models.record import FlatRecord
from price_index_mcp.utils.numbers import is_total_code

logger = logging.getLogger(__name__)

# Names starting with this marker denote nested categories in the source table
DEPTH_MARKER = "__"
_MARKER_PREFIX = re.compile(r"^__\s+")


def _to_category(record: FlatRecord) -> Category:
    """Create a childless category from a record, with its own variation."""
    return Category(
        code=record.code or "",
        name=_MARKER_PREFIX.sub("", record.name),
        weight=record.weight,
        index_values=record.index_values,
        variation=compute_variation(record.index_values),
        depth=1 if record.name.startswith(DEPTH_MARKER) else 0,
    )


def build_raw_tree(records: Iterable[FlatRecord]) -> Category:
    """
    Build the category hierarchy without aggregating index values.

    Records with a missing or total code are skipped. A record whose parent
    code matches no other record is attached under the synthetic root.

    Args:
        records: Flat source records, in source order

    Returns:
        Synthetic root category owning all top-level categories
    """
    categories: Dict[str, Category] = {}
    skipped = 0

    for record in records:
        if is_total_code(record.code):
            skipped += 1
            logger.debug(f"Skipping record without usable code: {record.name!r}")
            continue
        if record.code == ROOT_CODE:
            skipped += 1
            logger.warning(f"Skipping record using the reserved root code {ROOT_CODE}")
            continue
        if record.code in categories:
            logger.warning(f"Duplicate category code {record.code}, keeping last record")
        categories[record.code] = _to_category(record)

    children_of: Dict[str, List[str]] = defaultdict(list)
    for code in categories:
        parent = parent_code(code)
        children_of[parent if parent in categories else ROOT_CODE].append(code)

    def assemble(code: str) -> Category:
        node = categories[code]
        if code not in children_of:
            return node
        children = tuple(assemble(child) for child in children_of[code])
        return node.model_copy(update={"children": children})

    top_level = tuple(assemble(code) for code in children_of.get(ROOT_CODE, []))
    logger.debug(
        f"Built {len(categories)} categories ({len(top_level)} top-level), "
        f"skipped {skipped} records"
    )

    return Category(
        code=ROOT_CODE,
        name=ROOT_NAME,
        weight=sum(child.weight for child in top_level),
        children=top_level,
    )


def build_tree(records: Iterable[FlatRecord]) -> Category:
    """
    Build and aggregate the category tree from flat records.

    This is the single load-time entry point: tree construction followed by
    the bottom-up weighted-mean aggregation.
    """
    return aggregate(build_raw_tree(records))
