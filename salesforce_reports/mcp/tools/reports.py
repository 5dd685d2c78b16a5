"""Report creation tools

Fields, filters and groupings are resolved against the report type's live
describe on every call, so labels and API names in any case are accepted.
"""
import json
import logging
from functools import partial
from typing import Any, Dict, Union

from salesforce_reports.mcp.server import register_tool
from salesforce_reports.services.salesforce import get_salesforce_connection
from salesforce_reports.reports.field_index import build_field_index, fetch_report_type_describe
from salesforce_reports.reports.models import ReportRequest, ReportTypeRef
from salesforce_reports.reports.pipeline import created_report_id, resolve_report_document, submit_report
from salesforce_reports.mcp.tools.utils import (
    format_error_response,
    format_success_response,
    ResponseSizeManager
)

logger = logging.getLogger(__name__)


def _parse_request(report_metadata: Union[Dict[str, Any], str]) -> ReportRequest:
    if isinstance(report_metadata, str):
        report_metadata = json.loads(report_metadata)
    return ReportRequest.model_validate(report_metadata)


@register_tool
def create_report(report_metadata: Union[Dict[str, Any], str]) -> str:
    """
    Create a Salesforce report from a reportMetadata object.

    Columns, filters and groupings may be given by API name or label in any
    case; they are checked against the report type before anything is
    created. Unknown fields fail the call and the error lists every allowed
    field. Filter operators may be names or labels ("does not equal",
    "notEqual"); an unrecognized operator falls back to the first operator
    valid for the field's type.

    Args:
        report_metadata: Report definition (dict or JSON string). Keys:
            - reportName (required): Display name
            - objectName: Object the report is based on (reportType = <object>List)
            - reportType: {"type": ..., "label": ...} or a report type name
            - folderId / folderName: Target folder (falls back to any report folder)
            - columns: ["Account Name", "AMOUNT"]
            - filters: [{"field": ..., "operator": ..., "value": ...}]
            - detailColumns / reportFilters: Analytics API shapes, used when
              columns / filters are absent
            - groupingsDown / groupingsAcross: [{"name", "sortOrder", "sortAggregate", "dateGranularity"}]
            - reportMetadata: Nested object carrying filters, reportFilters,
              groupings or aggregates, used when the top level has none
            - aggregates: ["RowCount", "s!AMOUNT"]
            - reportFormat, developerName, scope, reportBooleanFilter, currency,
              showGrandTotal, showSubtotals, hasDetailRows, hasRecordCount,
              chart, presentationOptions, crossFilters, standardDateFilter,
              standardFilters, division, dashboardSetting,
              userOrHierarchyFilterId, supportsRoleHierarchy,
              historicalSnapshotDates, sortBy, description

    Returns:
        JSON with the new report Id and the submitted metadata

    Example:
        create_report({
            "reportName": "Open Opportunities",
            "objectName": "Opportunity",
            "reportFormat": "SUMMARY",
            "columns": ["Opportunity Name", "AMOUNT"],
            "filters": [{"field": "Stage", "operator": "not equal to", "value": "Closed Won"}],
            "groupingsDown": [{"name": "Stage", "sortOrder": "Desc"}],
            "aggregates": ["RowCount", "s!AMOUNT"]
        })
    """
    try:
        request = _parse_request(report_metadata)
        sf = get_salesforce_connection()

        document = resolve_report_document(sf, request)
        response = submit_report(sf, document)

        report_id = created_report_id(response)
        if report_id is None:
            logger.error(f"Report creation not confirmed: {json.dumps(response, default=str)[:500]}")
            return json.dumps({
                "success": False,
                "error": f"Failed to create report '{request.report_name}'",
                "report_metadata": document
            }, indent=2)

        folder_id = document.get("folderId")
        return format_success_response({
            "message": f"Successfully created report '{request.report_name}' in folder '{folder_id}' (Id: {report_id})",
            "report_id": report_id,
            "folder_id": folder_id,
            "report_metadata": document
        })

    except Exception as e:
        logger.exception("create_report failed")
        return format_error_response(e, context="create_report")


@register_tool
def preview_report_metadata(report_metadata: Union[Dict[str, Any], str]) -> str:
    """
    Resolve a report definition without creating the report.

    Runs the same folder lookup, field validation and operator
    normalization as create_report and returns the document that would be
    submitted.

    Args:
        report_metadata: Same shape as for create_report

    Returns:
        JSON with the assembled reportMetadata document
    """
    try:
        request = _parse_request(report_metadata)
        sf = get_salesforce_connection()

        document = resolve_report_document(sf, request)

        return format_success_response({
            "report_metadata": document
        })

    except Exception as e:
        logger.exception("preview_report_metadata failed")
        return format_error_response(e, context="preview_report_metadata")


@register_tool
def describe_report_type(report_type: str, max_fields: int = 200, field_offset: int = 0) -> str:
    """
    List the fields and filter operators of a report type.

    Args:
        report_type: Report type name (e.g. "AccountList", "Opportunity")
        max_fields: Maximum number of fields to return (default: 200, use 0 for all)
        field_offset: Starting position for field pagination (default: 0)

    Returns:
        JSON with canonical field names, labels, data types and the
        operators valid for each data type
    """
    try:
        sf = get_salesforce_connection()
        index = build_field_index(
            ReportTypeRef(type=report_type),
            partial(fetch_report_type_describe, sf)
        )

        all_fields = [
            {
                "name": name,
                "label": index.labels.get(name),
                "dataType": index.data_type(name)
            }
            for name in index.allowed_fields()
        ]

        fields = all_fields[field_offset:]
        truncation = None
        if max_fields > 0:
            fields, _, truncation = ResponseSizeManager.truncate_if_needed(
                fields, max_fields, "Use field_offset to page through the remaining fields"
            )

        response = {
            "report_type": report_type,
            "total_fields": len(all_fields),
            "returned_fields": len(fields),
            "field_offset": field_offset,
            "fields": fields,
            "operators": {
                data_type: [op.get("name") for op in operators]
                for data_type, operators in index.operator_map.items()
            }
        }
        if truncation:
            response["truncation"] = truncation

        return format_success_response(response)

    except Exception as e:
        logger.exception("describe_report_type failed")
        return format_error_response(e, context="describe_report_type")
