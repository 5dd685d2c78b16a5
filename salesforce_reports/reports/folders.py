"""Report folder lookup with fallback to any report folder"""
import logging
from dataclasses import dataclass
from typing import Optional

import requests
from simple_salesforce.exceptions import SalesforceError

from salesforce_reports.utils.logging import ReportTrace
from salesforce_reports.utils.validators import escape_soql_literal

logger = logging.getLogger(__name__)

FOLDER_QUERY = "SELECT Id, Name FROM Folder WHERE {condition}Type = 'Report' LIMIT 1"


@dataclass(frozen=True)
class FolderResolution:
    folder_id: Optional[str]
    strategy: str


def _first_folder_id(sf, condition: str = "") -> Optional[str]:
    query = FOLDER_QUERY.format(condition=condition)
    try:
        result = sf.query(query)
    except (SalesforceError, requests.RequestException) as e:
        logger.warning(f"Folder lookup failed ({query}): {e}")
        return None

    records = (result or {}).get("records") or []
    return records[0].get("Id") if records else None


def resolve_folder(
    sf,
    folder_id: Optional[str] = None,
    folder_name: Optional[str] = None,
    trace: Optional[ReportTrace] = None,
) -> FolderResolution:
    """
    Find the report folder to file a new report under.

    Tries the folder id, else the folder name, then falls back to the first
    report folder in the org. Lookup failures never abort: the result may
    carry no folder id, and the create call decides what that means.

    Args:
        sf: Salesforce connection
        folder_id: Folder Id to look up
        folder_name: Folder name to look up (used only without folder_id)
        trace: Structured log hooks

    Returns:
        FolderResolution with the folder id and the strategy that found it
    """
    trace = trace or ReportTrace()
    resolution = FolderResolution(None, "none")

    if folder_id:
        found = _first_folder_id(sf, f"Id = '{escape_soql_literal(folder_id)}' AND ")
        if found:
            resolution = FolderResolution(found, "id")
    elif folder_name:
        found = _first_folder_id(sf, f"Name = '{escape_soql_literal(folder_name)}' AND ")
        if found:
            resolution = FolderResolution(found, "name")

    if resolution.folder_id is None:
        found = _first_folder_id(sf)
        if found:
            resolution = FolderResolution(found, "fallback")

    trace.folder_resolved(resolution.folder_id, resolution.strategy)
    return resolution
