"""Fold resolved inputs into one Analytics API reportMetadata document"""
from typing import Any, Dict, Optional

from salesforce_reports.reports.merger import MergedReportInputs
from salesforce_reports.reports.models import ReportRequest, ReportTypeRef
from salesforce_reports.utils.logging import ReportTrace
from salesforce_reports.utils.validators import derive_developer_name

DEFAULT_SCOPE = "organization"

# Scalars copied as supplied, including an explicit null (attribute, document key)
_NULLABLE_SCALARS = (
    ("currency", "currency"),
    ("division", "division"),
    ("user_or_hierarchy_filter_id", "userOrHierarchyFilterId"),
    ("description", "description"),
)

_FLAGS = (
    ("show_grand_total", "showGrandTotal"),
    ("show_subtotals", "showSubtotals"),
    ("has_detail_rows", "hasDetailRows"),
    ("has_record_count", "hasRecordCount"),
    ("supports_role_hierarchy", "supportsRoleHierarchy"),
)


def derive_report_type(request: ReportRequest) -> Optional[ReportTypeRef]:
    """
    Work out the report type descriptor.

    An explicit {type, label} object has its blanks filled from the object
    name (``<object>List`` / ``<object>s``). A plain string is taken as the
    type name. Without either, the descriptor is derived from the object
    name alone, or there is none.
    """
    object_name = request.object_name
    report_type = request.report_type

    if isinstance(report_type, ReportTypeRef):
        return ReportTypeRef(
            type=report_type.type or (f"{object_name}List" if object_name else "ObjectList"),
            label=report_type.label or (f"{object_name}s" if object_name else "Objects"),
        )
    if isinstance(report_type, str) and report_type:
        return ReportTypeRef(type=report_type, label=f"{object_name}s" if object_name else report_type)
    if object_name:
        return ReportTypeRef(type=f"{object_name}List", label=f"{object_name}s")
    return None


def describe_report_type_ref(request: ReportRequest) -> Optional[ReportTypeRef]:
    """Descriptor whose describe validates the request's fields.

    A supplied {type, label} object is used as given, so one without a
    ``type`` yields no schema rather than a guessed ``<object>List``.
    """
    if isinstance(request.report_type, ReportTypeRef):
        return request.report_type
    return derive_report_type(request)


def assemble_report_document(
    request: ReportRequest,
    report_type: Optional[ReportTypeRef],
    merged: MergedReportInputs,
    folder_id: Optional[str],
    trace: Optional[ReportTrace] = None,
) -> Dict[str, Any]:
    """
    Build the reportMetadata document submitted to the Analytics API.

    Performs no remote calls; every column, filter and grouping in
    ``merged`` has already been validated.
    """
    trace = trace or ReportTrace()
    doc: Dict[str, Any] = {"name": request.report_name}

    if folder_id:
        doc["folderId"] = folder_id
    if report_type is not None:
        doc["reportType"] = report_type.model_dump(exclude_none=True)

    if merged.detail_columns:
        doc["detailColumns"] = merged.detail_columns
    if merged.report_filters:
        doc["reportFilters"] = merged.report_filters

    if request.report_format:
        doc["reportFormat"] = request.report_format.upper()
    if request.id:
        doc["id"] = request.id
    if request.report_boolean_filter is not None:
        doc["reportBooleanFilter"] = request.report_boolean_filter

    doc["developerName"] = request.developer_name or derive_developer_name(request.report_name)

    for attribute, key in _NULLABLE_SCALARS:
        if request.was_supplied(attribute):
            doc[key] = getattr(request, attribute)

    if merged.aggregates:
        doc["aggregates"] = merged.aggregates
    if merged.groupings_down:
        doc["groupingsDown"] = merged.groupings_down
    if merged.groupings_across:
        doc["groupingsAcross"] = merged.groupings_across

    doc["scope"] = request.scope or DEFAULT_SCOPE

    for attribute, key in _FLAGS:
        value = getattr(request, attribute)
        if value is not None:
            doc[key] = value

    if request.presentation_options is not None:
        doc["presentationOptions"] = request.presentation_options.dump()
    if request.chart is not None:
        doc["chart"] = request.chart.dump()
    if request.cross_filters:
        doc["crossFilters"] = [cross_filter.dump() for cross_filter in request.cross_filters]
    if request.standard_date_filter is not None:
        doc["standardDateFilter"] = request.standard_date_filter.dump()
    if request.standard_filters is not None:
        doc["standardFilters"] = request.standard_filters
    if request.dashboard_setting is not None:
        doc["dashboardSetting"] = request.dashboard_setting
    if request.historical_snapshot_dates:
        doc["historicalSnapshotDates"] = request.historical_snapshot_dates
    if request.sort_by:
        doc["sortBy"] = request.sort_by

    trace.document_assembled(doc)
    return doc
