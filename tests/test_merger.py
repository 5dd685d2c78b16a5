import pytest

from salesforce_reports.reports.field_index import ReportFieldIndex
from salesforce_reports.reports.merger import InputMerger
from salesforce_reports.reports.models import ReportRequest
from salesforce_reports.utils.validators import ValidationError


def merge(field_index, **arguments):
    request = ReportRequest.model_validate({"reportName": "Pipeline", **arguments})
    return InputMerger(field_index).merge(request)


def test_top_level_filters_beat_nested_metadata_filters(field_index):
    merged = merge(
        field_index,
        filters=[{"field": "Account Name", "operator": "equals", "value": "Acme"}],
        reportMetadata={"filters": [{"field": "Account Name", "operator": "notEqual", "value": "Other"}]},
    )

    assert merged.report_filters == [{"column": "AccountName", "operator": "equals", "value": "Acme"}]


def test_simple_filters_beat_raw_filters(field_index):
    merged = merge(
        field_index,
        filters=[{"field": "stage", "operator": "not equal to", "value": "Closed Won"}],
        reportFilters=[{"column": "AMOUNT", "operator": "greaterThan", "value": "100"}],
    )

    assert merged.report_filters == [{"column": "STAGE_NAME", "operator": "notEqual", "value": "Closed Won"}]


def test_raw_report_filters_beat_nested_report_filters(field_index):
    merged = merge(
        field_index,
        reportFilters=[{"column": "amount", "operator": "greater than", "value": "100"}],
        reportMetadata={
            "filters": [{"field": "Industry", "operator": "equals", "value": "Energy"}],
            "reportFilters": [{"column": "INDUSTRY", "operator": "equals", "value": "Retail"}],
        },
    )

    assert merged.report_filters == [{"column": "AMOUNT", "operator": "greaterThan", "value": "100"}]


def test_nested_simple_filters_beat_nested_report_filters(field_index):
    merged = merge(
        field_index,
        reportMetadata={
            "filters": [{"field": "Industry", "operator": "equals", "value": "Energy"}],
            "reportFilters": [{"column": "INDUSTRY", "operator": "equals", "value": "Retail"}],
        },
    )

    assert merged.report_filters == [{"column": "INDUSTRY", "operator": "equals", "value": "Energy"}]


def test_nested_report_filters_used_last(field_index):
    merged = merge(
        field_index,
        filters=[],
        reportMetadata={
            "reportFilters": [{"column": "users.name", "operator": "notEqual", "value": "SalesMaster",
                               "filterType": "fieldValue"}],
        },
    )

    assert merged.report_filters == [{"column": "USERS.NAME", "operator": "notEqual", "value": "SalesMaster"}]


def test_raw_filters_keep_extra_keys(field_index):
    merged = merge(
        field_index,
        reportFilters=[{"column": "Opportunity Owner", "filterType": "fieldValue", "isRunPageEditable": True,
                        "operator": "DOES_NOT_EQUAL", "value": "SalesMaster"}],
    )

    assert merged.report_filters == [{
        "column": "USERS.NAME",
        "filterType": "fieldValue",
        "isRunPageEditable": True,
        "operator": "notEqual",
        "value": "SalesMaster",
    }]


def test_numeric_filter_values_become_strings(field_index):
    merged = merge(field_index, filters=[{"field": "Amount", "operator": "lessThan", "value": 5000}])
    assert merged.report_filters[0]["value"] == "5000"


def test_checkbox_filter_values_become_lowercase_strings(field_index):
    merged = merge(
        field_index,
        reportFilters=[
            {"column": "Amount", "operator": "equals", "value": True},
            {"column": "Stage", "operator": "equals", "value": False},
        ],
    )
    assert [f["value"] for f in merged.report_filters] == ["true", "false"]


def test_unknown_filter_field_aborts(field_index):
    with pytest.raises(ValidationError) as excinfo:
        merge(field_index, filters=[
            {"field": "Amount", "operator": "equals", "value": "1"},
            {"field": "Nope", "operator": "equals", "value": "2"},
        ])

    assert "'Nope' is not a valid filter" in str(excinfo.value)


def test_only_winning_source_is_validated(field_index):
    merged = merge(
        field_index,
        columns=["Amount"],
        detailColumns=["BOGUS_FIELD"],
        filters=[{"field": "Amount", "operator": "equals", "value": "1"}],
        reportMetadata={"filters": [{"field": "BOGUS_FIELD", "operator": "equals", "value": "x"}]},
    )

    assert merged.detail_columns == ["AMOUNT"]


def test_columns_beat_detail_columns(field_index):
    merged = merge(field_index, columns=["account name", "Close Date"], detailColumns=["AMOUNT"])
    assert merged.detail_columns == ["AccountName", "CLOSE_DATE"]


def test_detail_columns_used_without_columns(field_index):
    merged = merge(field_index, detailColumns=["amount", "stage"])
    assert merged.detail_columns == ["AMOUNT", "STAGE_NAME"]


def test_unknown_column_aborts(field_index):
    with pytest.raises(ValidationError) as excinfo:
        merge(field_index, columns=["Amount", "BOGUS_FIELD"])

    assert "'BOGUS_FIELD' is not a valid column" in str(excinfo.value)


def test_grouping_defaults_and_canonical_names(field_index):
    merged = merge(
        field_index,
        groupingsDown=[
            {"name": "stage"},
            {"name": "Opportunity Owner", "sortOrder": "Desc", "sortAggregate": "amount",
             "dateGranularity": "Month"},
        ],
    )

    assert merged.groupings_down == [
        {"name": "STAGE_NAME", "sortOrder": "Asc", "sortAggregate": None, "dateGranularity": "None"},
        {"name": "USERS.NAME", "sortOrder": "Desc", "sortAggregate": "AMOUNT", "dateGranularity": "Month"},
    ]


def test_aggregate_sort_keys_pass_through(field_index):
    merged = merge(field_index, groupingsDown=[{"name": "Stage", "sortAggregate": "RowCount"}])
    assert merged.groupings_down[0]["sortAggregate"] == "RowCount"


def test_direct_groupings_beat_nested(field_index):
    merged = merge(
        field_index,
        groupingsAcross=[{"name": "Industry"}],
        reportMetadata={
            "groupingsAcross": [{"name": "Stage"}],
            "groupingsDown": [{"name": "Close Date", "dateGranularity": "Quarter"}],
        },
    )

    assert [g["name"] for g in merged.groupings_across] == ["INDUSTRY"]
    assert merged.groupings_down == [
        {"name": "CLOSE_DATE", "sortOrder": "Asc", "sortAggregate": None, "dateGranularity": "Quarter"},
    ]


def test_unknown_grouping_aborts(field_index):
    with pytest.raises(ValidationError) as excinfo:
        merge(field_index, reportMetadata={"groupingsDown": [{"name": "Region"}]})

    assert "'Region' is not a valid grouping" in str(excinfo.value)


def test_aggregates_direct_then_nested(field_index):
    assert merge(field_index, aggregates=["RowCount"],
                 reportMetadata={"aggregates": ["s!AMOUNT"]}).aggregates == ["RowCount"]
    assert merge(field_index, reportMetadata={"aggregates": ["s!AMOUNT"]}).aggregates == ["s!AMOUNT"]


def test_nothing_supplied_leaves_attributes_empty(field_index):
    merged = merge(field_index)
    assert merged.detail_columns is None
    assert merged.report_filters is None
    assert merged.groupings_down is None
    assert merged.groupings_across is None
    assert merged.aggregates is None


def test_inactive_index_passes_everything_through():
    merged = merge(
        ReportFieldIndex(),
        columns=["Whatever"],
        filters=[{"field": "Anything", "operator": "Is Like", "value": "x"}],
    )

    assert merged.detail_columns == ["Whatever"]
    assert merged.report_filters == [{"column": "Anything", "operator": "Is Like", "value": "x"}]
