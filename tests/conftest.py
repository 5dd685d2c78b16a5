import copy
from unittest.mock import MagicMock

import pytest

from salesforce_reports.reports.field_index import build_field_index
from salesforce_reports.reports.models import ReportTypeRef

OPPORTUNITY_DESCRIBE = {
    "reportExtendedMetadata": {
        "detailColumnInfo": {
            "AccountName": {"label": "Account Name", "dataType": "string"},
            "AMOUNT": {"label": "Amount", "dataType": "currency"},
            "CLOSE_DATE": {"label": "Close Date", "dataType": "date"},
            "USERS.NAME": {"label": "Opportunity Owner", "dataType": "string"},
        }
    },
    "reportTypeMetadata": {
        "categories": [
            {
                "label": "Opportunity Information",
                "columns": {
                    "AMOUNT": {"label": "Opportunity Amount", "dataType": "double"},
                    "STAGE_NAME": {"label": "Stage", "dataType": "picklist"},
                },
            },
            {
                "label": "Account Information",
                "columns": {
                    "INDUSTRY": {"label": "Industry", "dataType": "picklist"},
                },
            },
        ],
        "dataTypeFilterOperatorMap": {
            "string": [
                {"name": "equals", "label": "Equals"},
                {"name": "notEqual", "label": "Does Not Equal"},
                {"name": "contains", "label": "Contains"},
            ],
            "picklist": [
                {"name": "equals", "label": "equals"},
                {"name": "notEqual", "label": "not equal to"},
            ],
            "currency": [
                {"name": "equals", "label": "equals"},
                {"name": "lessThan", "label": "less than"},
                {"name": "greaterThan", "label": "greater than"},
            ],
            "date": [],
        },
    },
}

ALL_FIELDS = ["AccountName", "AMOUNT", "CLOSE_DATE", "USERS.NAME", "STAGE_NAME", "INDUSTRY"]


@pytest.fixture
def describe_payload():
    return copy.deepcopy(OPPORTUNITY_DESCRIBE)


@pytest.fixture
def fetch_describe(describe_payload):
    fetcher = MagicMock(return_value=describe_payload)
    return fetcher


@pytest.fixture
def field_index(fetch_describe):
    return build_field_index(ReportTypeRef(type="Opportunity", label="Opportunities"), fetch_describe)


def _folder_records(*ids):
    return {"totalSize": len(ids), "done": True, "records": [{"Id": i, "Name": f"Folder {i}"} for i in ids]}


@pytest.fixture
def folder_records():
    return _folder_records


@pytest.fixture
def sf():
    """Stand-in for a simple_salesforce.Salesforce session."""
    conn = MagicMock()
    conn.sf_instance = "example.my.salesforce.com"
    conn.session_id = "SESSION"
    conn.base_url = "https://example.my.salesforce.com/services/data/v59.0/"
    conn.query.return_value = _folder_records("00lFOLDER1")
    return conn
