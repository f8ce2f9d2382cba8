"""
Category model for the price index tree.
"""

from typing import Tuple

from pydantic import BaseModel, Field, computed_field

# Fixed periods, oldest to newest. Index values are stored positionally.
PERIODS: Tuple[str, ...] = ("n-12", "n-3", "n-2", "n-1", "n")
OLDEST, QUARTER_AGO, TWO_MONTHS_AGO, PREVIOUS, NEWEST = range(len(PERIODS))

IndexValues = Tuple[float, float, float, float, float]
ZERO_INDEX: IndexValues = (0.0, 0.0, 0.0, 0.0, 0.0)

ROOT_CODE = "index0"
ROOT_NAME = "Root Category"


class Variation(BaseModel):
    """Period-over-period variation percentages of a category."""

    model_config = {"strict": True, "frozen": True}

    monthly: float = 0.0
    trimester: float = 0.0
    yearly: float = 0.0


class Category(BaseModel):
    """
    Represents one node of the price index hierarchy.

    Instances are frozen: every edit produces new nodes along the edited
    path while untouched subtrees are shared between snapshots.
    """

    model_config = {"strict": True, "frozen": True}

    # Required fields
    code: str
    name: str

    # Weighting
    weight: float = 0.0  # "pondération"

    # Index readings, ordered as PERIODS
    index_values: IndexValues = ZERO_INDEX
    variation: Variation = Field(default_factory=Variation)

    children: Tuple["Category", ...] = ()

    # 1 when the source name carried the nesting marker, else 0
    depth: int = Field(default=0, ge=0, le=1)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_leaf(self) -> bool:
        """Whether this category has no subcategories."""
        return not self.children

    @property
    def newest(self) -> float:
        """Index value of the most recent period."""
        return self.index_values[NEWEST]
