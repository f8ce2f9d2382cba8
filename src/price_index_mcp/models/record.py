"""
Flat source record and column mapping models.
"""

from typing import Any, Mapping, Optional, Tuple

from pydantic import BaseModel, Field

from price_index_mcp.models.category import ZERO_INDEX, IndexValues
from price_index_mcp.utils.numbers import parse_number


class ColumnMapping(BaseModel):
    """
    Names of the source columns holding each record field.

    Defaults match the detailed index table published as
    "Tableau_Données_Détaillées_2025-02.csv".
    """

    model_config = {"frozen": True}

    code: str = "Numéro"
    name: str = "Regroupement"
    weight: str = "Pondération"
    # Oldest to newest: n-12, n-3, n-2, n-1, n
    periods: Tuple[str, str, str, str, str] = (
        "Indice février 2024",
        "Indice novembre 2024",
        "Indice décembre 2024",
        "Indice janvier 2025",
        "Indice février 2025",
    )


DEFAULT_COLUMNS = ColumnMapping()


class FlatRecord(BaseModel):
    """One row of the source table, with numeric fields already coerced."""

    model_config = {"frozen": True}

    code: Optional[str] = None
    name: str = ""
    weight: float = 0.0
    index_values: IndexValues = Field(default=ZERO_INDEX)

    @classmethod
    def from_row(
        cls, row: Mapping[str, Any], columns: ColumnMapping = DEFAULT_COLUMNS
    ) -> "FlatRecord":
        """
        Build a record from a mapping keyed by column name.

        Missing or malformed numeric fields become 0.0.
        """
        raw_code = row.get(columns.code)
        code = str(raw_code).strip() if raw_code is not None else None
        raw_name = row.get(columns.name)

        index_values = tuple(parse_number(row.get(column)) for column in columns.periods)

        return cls(
            code=code or None,
            name=str(raw_name) if raw_name is not None else "",
            weight=parse_number(row.get(columns.weight)),
            index_values=index_values,
        )
