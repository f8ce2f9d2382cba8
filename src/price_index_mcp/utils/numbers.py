"""
Number helpers for parsing source fields and formatting display values.
"""

from typing import Any

import pandas as pd

_BLANKS = {"nan": "", "None": "", "none": "", "<NA>": "", "NaN": "", "NaT": ""}


def parse_numeric_column(series: pd.Series) -> pd.Series:
    """
    Vectorised numeric parser handling comma/dot ambiguity.

    Unparsable, missing and non-finite values become 0.0.

    Args:
        series: Raw column values (strings or numbers)

    Returns:
        Float series of the same index
    """
    s = series.astype(str).str.strip()
    s = s.str.replace("\u00a0", "", regex=False).str.replace(" ", "", regex=False)
    s = s.replace(_BLANKS)

    has_comma = s.str.contains(",", na=False, regex=False)
    has_dot = s.str.contains(".", na=False, regex=False)
    has_both = has_comma & has_dot
    comma_last = s.str.rfind(",") > s.str.rfind(".")

    # European: 1.234,5 -> 1234.5
    euro = has_both & comma_last
    s = s.where(~euro, s.str.replace(".", "", regex=False).str.replace(",", ".", regex=False))
    # US: 1,234.5 -> 1234.5
    us = has_both & ~comma_last
    s = s.where(~us, s.str.replace(",", "", regex=False))
    # Only comma: 98,7 -> 98.7
    only_comma = has_comma & ~has_dot
    s = s.where(~only_comma, s.str.replace(",", ".", regex=False))

    parsed = pd.to_numeric(s, errors="coerce").astype(float)
    return parsed.replace([float("inf"), float("-inf")], 0.0).fillna(0.0)


def parse_number(value: Any) -> float:
    """
    Parse a single raw field into a float, never failing.

    Uses the same rules as ``parse_numeric_column``.

    Args:
        value: Raw field value from a source record

    Returns:
        Parsed value, or 0.0 if the value is missing, unparsable or not finite
    """
    if value is None or isinstance(value, bool):
        return 0.0
    return float(parse_numeric_column(pd.Series([value], dtype=object)).iloc[0])


def is_total_code(value: Any) -> bool:
    """
    Check whether a raw code is missing or the "total" sentinel.

    Blank codes and codes that read as the number zero ("0", "00", "0.0")
    identify the total row of the source table.
    """
    if value is None:
        return True
    text = str(value).strip()
    if not text:
        return True
    try:
        return float(text) == 0
    except ValueError:
        return False


def round_display(value: float) -> float:
    """Round a value to one decimal place for display."""
    return round(value, 1)
