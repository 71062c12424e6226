"""
Row reassembly.

Maps rows through a completed translation lookup. Only fields that were
eligible for translation are ever replaced; every other value is copied
verbatim.
"""

from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from assessment_translator.translation.models import Row


def normalize_columns(columns: Optional[Iterable[str]]) -> Optional[FrozenSet[str]]:
    """Lower-case an allow-list of column names; None means every column."""
    if columns is None:
        return None
    return frozenset(str(column).strip().lower() for column in columns)


def is_translatable_field(column: Any, value: Any, columns: Optional[FrozenSet[str]]) -> bool:
    """
    A field is sent for translation when it holds a non-blank string and its
    column is allowed (case-insensitively), or no allow-list is in effect.

    ``columns`` must already be normalised with normalize_columns().
    """
    if not isinstance(value, str) or not value.strip():
        return False
    if columns is None:
        return True
    return str(column).lower() in columns


def apply_lookup(
    rows: List[Row],
    lookup: Dict[str, str],
    translatable_columns: Optional[Iterable[str]] = None,
) -> List[Row]:
    """
    Build translated copies of rows.

    The input rows are not modified. Row count, keys and every non-eligible
    value are preserved; an eligible value missing from the lookup is kept
    as is.
    """
    columns = normalize_columns(translatable_columns)
    translated_rows: List[Row] = []

    for row in rows:
        translated_row: Row = {}
        for column, value in row.items():
            if is_translatable_field(column, value, columns) and value in lookup:
                translated_row[column] = lookup[value]
            else:
                translated_row[column] = value
        translated_rows.append(translated_row)

    return translated_rows
