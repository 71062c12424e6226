"""
Workbook Data Model

Sheets arrive already parsed (by the upload layer) as headers plus rows.
A row is a plain dict keyed by header name; headers are positional and
define the row shape.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

Row = Dict[str, Any]

DEFAULT_SHEET_NAME = "Sheet1"


def normalize_headers(raw_headers: Iterable[Any]) -> List[str]:
    """
    Clean a header row.

    Blank or missing headers become ``column_<index>``; repeated names get a
    numeric suffix so every header is unique.

    Examples:
        >>> normalize_headers(['question', None, ' question ', ''])
        ['question', 'column_1', 'question_2', 'column_3']
    """
    headers: List[str] = []
    used = set()
    for index, header in enumerate(raw_headers):
        if header is None or not str(header).strip():
            name = f"column_{index}"
        else:
            name = str(header).strip()

        base, suffix = name, 1
        while name in used:
            suffix += 1
            name = f"{base}_{suffix}"
        used.add(name)
        headers.append(name)
    return headers


@dataclass
class Sheet:
    """One worksheet: ordered headers and rows keyed by header."""
    name: str
    headers: List[str] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)

    @classmethod
    def from_records(cls, name: str, headers: Optional[Iterable[Any]], rows: Iterable[Any]) -> "Sheet":
        """
        Build a sheet from parsed records.

        Rows may be dicts (keyed by header) or positional sequences. When no
        headers are given they are taken from the keys of dict rows in
        first-seen order. Missing cells become empty strings.
        """
        rows = list(rows or [])
        if headers is None:
            raw_headers: List[Any] = []
            for row in rows:
                if isinstance(row, dict):
                    for key in row:
                        if key not in raw_headers:
                            raw_headers.append(key)
        else:
            raw_headers = list(headers)

        clean_headers = normalize_headers(raw_headers)

        shaped_rows: List[Row] = []
        for row in rows:
            shaped: Row = {}
            for index, header in enumerate(clean_headers):
                if isinstance(row, dict):
                    raw_key = raw_headers[index]
                    value = row[raw_key] if raw_key in row else row.get(header)
                elif isinstance(row, (list, tuple)):
                    value = row[index] if index < len(row) else None
                else:
                    value = None
                shaped[header] = "" if value is None else value
            shaped_rows.append(shaped)

        return cls(name=name, headers=clean_headers, rows=shaped_rows)

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "Sheet":
        return cls.from_records(name, data.get("headers"), data.get("rows") or [])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "headers": list(self.headers),
            "rows": [dict(row) for row in self.rows],
        }


# Ordered sheet name -> Sheet. A TranslatedResult has the same shape.
Workbook = Dict[str, Sheet]
TranslatedResult = Dict[str, Sheet]


def workbook_from_dict(data: Dict[str, Any]) -> Workbook:
    """Build a workbook from ``{sheet_name: {"headers": [...], "rows": [...]}}``."""
    return {str(name): Sheet.from_dict(str(name), sheet or {}) for name, sheet in data.items()}


def single_sheet_workbook(
    rows: Iterable[Any],
    headers: Optional[Iterable[Any]] = None,
    name: str = DEFAULT_SHEET_NAME,
) -> Workbook:
    """Wrap the rows of a single-sheet upload into a workbook."""
    return {name: Sheet.from_records(name, headers, rows)}


def results_to_dict(results: Dict[str, TranslatedResult]) -> Dict[str, Dict[str, Any]]:
    """JSON form of ``{lang: {sheet: Sheet}}``."""
    return {
        lang: {sheet_name: sheet.to_dict() for sheet_name, sheet in sheets.items()}
        for lang, sheets in results.items()
    }


def count_rows(workbook: Workbook) -> int:
    return sum(len(sheet.rows) for sheet in workbook.values())
