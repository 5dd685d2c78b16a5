import pytest

from salesforce_reports.reports.operators import normalize_operator

TABLE = {
    "string": [
        {"name": "equals", "label": "Equals"},
        {"name": "notEqual", "label": "Does Not Equal"},
        {"name": "startsWith", "label": "Starts With"},
    ],
    "date": [],
}


@pytest.mark.parametrize("operator", ["does not equal", "DOES_NOT_EQUAL", "notequal", "notEqual", " Not_Equal "])
def test_names_and_labels_resolve_to_canonical_name(operator):
    assert normalize_operator(operator, "string", TABLE) == "notEqual"


def test_label_with_underscores_matches():
    assert normalize_operator("starts_with", "string", TABLE) == "startsWith"


def test_names_win_over_labels():
    table = {"string": [
        {"name": "contains", "label": "Equals"},
        {"name": "equals", "label": "Is"},
    ]}
    assert normalize_operator("equals", "string", table) == "equals"


def test_unrecognized_operator_falls_back_to_first_valid():
    assert normalize_operator("approximately", "string", TABLE) == "equals"


def test_unknown_data_type_passes_operator_through():
    assert normalize_operator("Whatever Op", None, TABLE) == "Whatever Op"
    assert normalize_operator("Whatever Op", "currency", TABLE) == "Whatever Op"


def test_empty_operator_list_passes_operator_through():
    assert normalize_operator("lessThan", "date", TABLE) == "lessThan"


def test_empty_operator_returns_empty_string():
    assert normalize_operator("", "string", TABLE) == ""
    assert normalize_operator(None, "string", TABLE) == ""
