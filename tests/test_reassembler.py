"""Tests for row reassembly."""

from __future__ import annotations

from assessment_translator.translation.reassembler import apply_lookup, is_translatable_field, normalize_columns


def test_substitutes_translated_values():
    rows = [{"question": "Cat"}, {"question": "Dog"}, {"question": "Cat"}]
    lookup = {"Cat": "[HI] Cat", "Dog": "[HI] Dog"}

    assert apply_lookup(rows, lookup) == [
        {"question": "[HI] Cat"},
        {"question": "[HI] Dog"},
        {"question": "[HI] Cat"},
    ]


def test_shape_and_untouched_fields_preserved():
    rows = [
        {"question": "Pick one", "explanation_id": "42", "score": 3, "notes": ""},
        {"question": "Pick two", "explanation_id": "43", "score": 0.5, "notes": None},
    ]
    lookup = {"Pick one": "X", "Pick two": "Y", "42": "SHOULD NOT APPEAR"}

    result = apply_lookup(rows, lookup, ["question"])

    assert len(result) == len(rows)
    for original, translated in zip(rows, result):
        assert list(translated.keys()) == list(original.keys())
        assert translated["explanation_id"] == original["explanation_id"]
        assert translated["score"] == original["score"]
        assert translated["notes"] == original["notes"]
    assert [row["question"] for row in result] == ["X", "Y"]


def test_lookup_miss_keeps_original():
    assert apply_lookup([{"question": "Unknown"}], {}) == [{"question": "Unknown"}]


def test_input_rows_not_mutated():
    rows = [{"question": "Cat"}]
    apply_lookup(rows, {"Cat": "Billi"})
    assert rows == [{"question": "Cat"}]


def test_is_translatable_field():
    columns = normalize_columns(["Question"])

    assert is_translatable_field("QUESTION", "Hi", columns)
    assert not is_translatable_field("answer_key", "Hi", columns)
    assert not is_translatable_field("question", "   ", columns)
    assert not is_translatable_field("question", 12, columns)
    assert is_translatable_field("anything", "Hi", None)
