"""
CSV reader producing flat records for the tree builder.
"""

import logging
from pathlib import Path
from typing import Any, Iterable, List, Mapping

import pandas as pd

from price_index_mcp.core.exceptions import RecordParseError, SourceNotFoundError
from price_index_mcp.models.record import DEFAULT_COLUMNS, ColumnMapping, FlatRecord
from price_index_mcp.utils.numbers import parse_numeric_column

logger = logging.getLogger(__name__)


def parse_rows(
    rows: Iterable[Mapping[str, Any]], columns: ColumnMapping = DEFAULT_COLUMNS
) -> List[FlatRecord]:
    """
    Convert mappings keyed by column name into flat records.

    Args:
        rows: Source rows, e.g. from DataFrame.to_dict(orient="records")
        columns: Column names of each record field

    Returns:
        One record per row, in source order
    """
    return [FlatRecord.from_row(row, columns) for row in rows]


def read_records(
    csv_path: Path,
    columns: ColumnMapping = DEFAULT_COLUMNS,
    delimiter: str = ",",
) -> List[FlatRecord]:
    """
    Read flat records from a CSV file with a header row.

    Blank lines are skipped and a UTF-8 byte order mark is accepted.

    Args:
        csv_path: Path to the CSV file
        columns: Column names of each record field
        delimiter: Field delimiter

    Returns:
        List of FlatRecord objects

    Raises:
        SourceNotFoundError: If the file does not exist
        RecordParseError: If the file cannot be decoded or parsed
    """
    if not csv_path.exists():
        raise SourceNotFoundError(f"Source file not found: {csv_path}")

    try:
        df = pd.read_csv(csv_path, sep=delimiter, encoding="utf-8-sig", dtype=str)
    except UnicodeDecodeError as e:
        raise RecordParseError(f"Cannot decode {csv_path}: {e}") from e
    except pd.errors.EmptyDataError as e:
        raise RecordParseError(f"Source file has no header row: {csv_path}") from e
    except pd.errors.ParserError as e:
        raise RecordParseError(f"Malformed CSV in {csv_path}: {e}") from e

    df = df.dropna(how="all")

    missing = [name for name in (columns.code, columns.name) if name not in df.columns]
    if missing:
        logger.warning(f"Columns missing from {csv_path.name}: {', '.join(missing)}")

    for column in (columns.weight, *columns.periods):
        if column in df.columns:
            df[column] = parse_numeric_column(df[column])

    # Empty text cells come back as NaN
    df = df.astype(object).where(df.notna(), None)

    records = parse_rows(df.to_dict(orient="records"), columns)
    logger.debug(f"Read {len(records)} records from {csv_path}")
    return records
