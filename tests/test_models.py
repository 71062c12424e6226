"""Tests for the workbook data model."""

from __future__ import annotations

from assessment_translator.translation.models import (
    Sheet,
    count_rows,
    normalize_headers,
    results_to_dict,
    single_sheet_workbook,
    workbook_from_dict,
)


def test_normalize_headers_fills_blanks_and_dedupes():
    assert normalize_headers(["question", None, " question ", "", 7]) == [
        "question",
        "column_1",
        "question_2",
        "column_3",
        "7",
    ]


def test_from_records_positional_rows():
    sheet = Sheet.from_records("S", ["a", None, "c"], [["x", "y"], ["1", None, 3]])

    assert sheet.headers == ["a", "column_1", "c"]
    assert sheet.rows == [
        {"a": "x", "column_1": "y", "c": ""},
        {"a": "1", "column_1": "", "c": 3},
    ]


def test_from_records_dict_rows_infers_headers():
    sheet = Sheet.from_records("S", None, [{"q": "Cat"}, {"q": "Dog", "id": 2}])

    assert sheet.headers == ["q", "id"]
    assert sheet.rows == [{"q": "Cat", "id": ""}, {"q": "Dog", "id": 2}]


def test_from_records_colliding_keys_keep_their_own_values():
    sheet = Sheet.from_records("S", None, [{" question": "A", "question": "B"}])

    assert sheet.headers == ["question", "question_2"]
    assert sheet.rows == [{"question": "A", "question_2": "B"}]


def test_from_records_cleaned_header_reads_matching_key():
    sheet = Sheet.from_records("S", [" question "], [{"question": "Cat"}])

    assert sheet.rows == [{"question": "Cat"}]


def test_workbook_round_trip_through_dict():
    workbook = workbook_from_dict({
        "Quiz": {"headers": ["question"], "rows": [{"question": "Cat"}]},
        "Empty": {"headers": ["question"], "rows": []},
    })

    assert list(workbook) == ["Quiz", "Empty"]
    assert count_rows(workbook) == 1
    assert results_to_dict({"hi": workbook}) == {
        "hi": {
            "Quiz": {"headers": ["question"], "rows": [{"question": "Cat"}]},
            "Empty": {"headers": ["question"], "rows": []},
        }
    }


def test_single_sheet_workbook_default_name():
    workbook = single_sheet_workbook([{"question": "Cat"}])
    assert list(workbook) == ["Sheet1"]
    assert workbook["Sheet1"].name == "Sheet1"
