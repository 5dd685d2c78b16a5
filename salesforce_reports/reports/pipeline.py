"""Report creation pipeline: folder, describe, merge, assemble, submit"""
import logging
from functools import partial
from typing import Any, Dict, Optional

import requests

from salesforce_reports.config import get_config
from salesforce_reports.reports.assembler import (
    assemble_report_document,
    derive_report_type,
    describe_report_type_ref,
)
from salesforce_reports.reports.field_index import (
    DescribeFetcher,
    build_field_index,
    fetch_report_type_describe,
)
from salesforce_reports.reports.folders import resolve_folder
from salesforce_reports.reports.merger import InputMerger
from salesforce_reports.reports.models import ReportRequest
from salesforce_reports.utils.logging import ReportTrace

logger = logging.getLogger(__name__)


def resolve_report_document(
    sf,
    request: ReportRequest,
    trace: Optional[ReportTrace] = None,
    fetch_describe: Optional[DescribeFetcher] = None,
) -> Dict[str, Any]:
    """
    Resolve every field and operator reference and assemble the document.

    Makes one folder lookup (up to two queries) and one report-type
    describe. A describe failure or an unknown field aborts with no
    document; a missing folder does not.

    Args:
        sf: Salesforce connection
        request: Parsed report request
        trace: Structured log hooks
        fetch_describe: Override for the describe call

    Returns:
        reportMetadata document ready for submission

    Raises:
        SchemaFetchError: If the report type describe fails
        ValidationError: If a column, filter or grouping field is unknown
    """
    trace = trace or ReportTrace()
    fetch_describe = fetch_describe or partial(fetch_report_type_describe, sf)

    folder = resolve_folder(sf, request.folder_id, request.folder_name, trace)
    report_type = derive_report_type(request)
    index = build_field_index(describe_report_type_ref(request), fetch_describe, trace)
    merged = InputMerger(index, trace).merge(request)

    return assemble_report_document(request, report_type, merged, folder.folder_id, trace)


def submit_report(sf, document: Dict[str, Any]) -> Dict[str, Any]:
    """POST the document to analytics/reports and return the parsed response."""
    config = get_config()
    endpoint = f"{sf.base_url}analytics/reports"
    headers = {
        "Authorization": f"Bearer {sf.session_id}",
        "Content-Type": "application/json",
    }

    logger.info(f"Creating report '{document.get('name')}'")
    resp = requests.post(
        endpoint,
        headers=headers,
        json={"reportMetadata": document},
        timeout=config.request_timeout_seconds,
    )
    resp.raise_for_status()
    return resp.json()


def created_report_id(response: Any) -> Optional[str]:
    """Id of the created report, or None if the response does not confirm creation."""
    if not isinstance(response, dict) or not response.get("reportExtendedMetadata"):
        return None
    metadata = response.get("reportMetadata") or {}
    return metadata.get("id") or response.get("id")
