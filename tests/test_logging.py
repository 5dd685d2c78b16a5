import json
import logging

import pytest

from salesforce_reports.reports.folders import resolve_folder
from salesforce_reports.reports.merger import InputMerger
from salesforce_reports.reports.models import ReportRequest
from salesforce_reports.utils.logging import (
    CorrelationIDFilter,
    JSONFormatter,
    ReportTrace,
    set_correlation_id,
)
from salesforce_reports.utils.validators import ValidationError


def events(caplog):
    return [getattr(record, "event", None) for record in caplog.records if hasattr(record, "event")]


def test_resolution_emits_trace_events(caplog, field_index, sf):
    caplog.set_level(logging.DEBUG, logger="salesforce_reports.reports")
    trace = ReportTrace()
    request = ReportRequest.model_validate({
        "reportName": "Traced",
        "columns": ["Amount"],
        "filters": [{"field": "Stage", "operator": "equals", "value": "Prospecting"}],
    })

    InputMerger(field_index, trace).merge(request)
    resolve_folder(sf, folder_name="Sales", trace=trace)

    seen = events(caplog)
    assert "field_resolved" in seen
    assert "operator_normalized" in seen
    assert "source_selected" in seen
    assert seen[-1] == "folder_resolved"


def test_rejected_field_logged_as_warning(caplog, field_index):
    caplog.set_level(logging.DEBUG, logger="salesforce_reports.reports")
    request = ReportRequest.model_validate({"reportName": "Traced", "columns": ["Nope"]})

    with pytest.raises(ValidationError):
        InputMerger(field_index).merge(request)

    rejected = [r for r in caplog.records if getattr(r, "event", None) == "field_rejected"]
    assert len(rejected) == 1
    assert rejected[0].levelno == logging.WARNING
    assert rejected[0].requested == "Nope"


def test_json_formatter_includes_structured_fields():
    set_correlation_id("cid-123")
    logger = logging.getLogger("salesforce_reports.test")
    record = logger.makeRecord(
        logger.name, logging.INFO, __file__, 1, "Report folder %s", ("00lX",), None,
        extra={"event": "folder_resolved", "folder_id": "00lX", "strategy": "name"},
    )
    CorrelationIDFilter().filter(record)

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "Report folder 00lX"
    assert payload["correlation_id"] == "cid-123"
    assert payload["event"] == "folder_resolved"
    assert payload["folder_id"] == "00lX"
    assert payload["strategy"] == "name"
