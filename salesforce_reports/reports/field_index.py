"""Case-insensitive index of the fields a report type exposes

The index is rebuilt from a fresh describe on every call; nothing is cached
between invocations.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

import requests

from salesforce_reports.config import get_config
from salesforce_reports.reports.models import ReportTypeRef
from salesforce_reports.utils.logging import ReportTrace
from salesforce_reports.utils.validators import unknown_field_error

DescribeFetcher = Callable[[str], Dict[str, Any]]


class SchemaFetchError(Exception):
    """Report type describe failed; resolution cannot continue"""
    pass


@dataclass
class ReportFieldIndex:
    """Lookup from uppercased label or API name to canonical API name.

    ``field_types`` and ``field_map`` share the same uppercased keys.
    An index without a ``report_type`` is inactive: identifiers pass
    through unchanged and nothing is validated.
    """

    report_type: Optional[str] = None
    field_map: Dict[str, str] = field(default_factory=dict)
    field_types: Dict[str, str] = field(default_factory=dict)
    operator_map: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    labels: Dict[str, str] = field(default_factory=dict)
    canonical_names: List[str] = field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return self.report_type is not None

    def register(self, api_name: str, info: Dict[str, Any], detail: bool = False) -> None:
        """Index one column under its API name and its label.

        A detail column's API name replaces an earlier label key of the same
        spelling. A category column is skipped when its API name is already
        a key of any kind.
        """
        key = str(api_name).upper()
        if api_name in self.canonical_names:
            return
        if not detail and key in self.field_map:
            return
        data_type = info.get("dataType") or ""
        self.canonical_names.append(api_name)
        self.field_map[key] = api_name
        self.field_types[key] = data_type

        label = info.get("label")
        if isinstance(label, str) and label:
            self.labels[api_name] = label
            label_key = label.upper()
            self.field_map.setdefault(label_key, api_name)
            self.field_types.setdefault(label_key, data_type)

    def allowed_fields(self) -> List[str]:
        """Canonical API names in the order they were first indexed."""
        return list(self.canonical_names)

    def lookup(self, identifier: str) -> Optional[str]:
        """Canonical API name for an identifier, or None if it is unknown."""
        if not identifier:
            return None
        if identifier in self.field_map:
            return self.field_map[identifier]
        upper = identifier.upper()
        if upper in self.field_map:
            return self.field_map[upper]
        for key, canonical in self.field_map.items():
            if key.strip() == upper.strip():
                return canonical
        return None

    def resolve(self, identifier: str) -> str:
        if not identifier or not self.is_active:
            return identifier
        return self.lookup(identifier) or identifier.upper()

    def validate(self, identifiers: List[str], kind: str, trace: Optional[ReportTrace] = None) -> None:
        """Reject the whole batch if any identifier does not resolve."""
        if not self.is_active:
            return
        trace = trace or ReportTrace()
        allowed = set(self.canonical_names)
        for requested in identifiers:
            if not requested:
                continue
            canonical = self.resolve(requested)
            if canonical not in allowed:
                trace.field_rejected(kind, requested)
                raise unknown_field_error(requested, kind, self.allowed_fields())
            trace.field_resolved(kind, requested, canonical)

    def canonicalize(self, identifiers: List[str], kind: str, trace: Optional[ReportTrace] = None) -> List[str]:
        self.validate(identifiers, kind, trace)
        return [self.resolve(identifier) for identifier in identifiers]

    def data_type(self, column: str) -> Optional[str]:
        if not column:
            return None
        return self.field_types.get(column.upper()) or None


def _column_catalogs(describe: Any) -> Iterator[Tuple[str, Dict[str, Any], bool]]:
    """Yield (api_name, info, is_detail) from detail columns first, then category columns."""
    if not isinstance(describe, dict):
        return

    extended = describe.get("reportExtendedMetadata") or {}
    detail_columns = extended.get("detailColumnInfo") if isinstance(extended, dict) else None
    if isinstance(detail_columns, dict):
        for api_name, info in detail_columns.items():
            yield api_name, (info if isinstance(info, dict) else {}), True

    type_metadata = describe.get("reportTypeMetadata") or {}
    categories = type_metadata.get("categories") if isinstance(type_metadata, dict) else None
    if isinstance(categories, list):
        for category in categories:
            columns = category.get("columns") if isinstance(category, dict) else None
            if not isinstance(columns, dict):
                continue
            for api_name, info in columns.items():
                yield api_name, (info if isinstance(info, dict) else {}), False


def _operator_table(describe: Any) -> Dict[str, List[Dict[str, Any]]]:
    if not isinstance(describe, dict):
        return {}
    type_metadata = describe.get("reportTypeMetadata") or {}
    table = type_metadata.get("dataTypeFilterOperatorMap") if isinstance(type_metadata, dict) else None
    if not isinstance(table, dict):
        return {}
    return {
        data_type: [op for op in operators if isinstance(op, dict)]
        for data_type, operators in table.items()
        if isinstance(operators, list)
    }


def build_field_index(
    report_type: Optional[ReportTypeRef],
    fetch_describe: DescribeFetcher,
    trace: Optional[ReportTrace] = None,
) -> ReportFieldIndex:
    """
    Fetch the describe for a report type and index its fields.

    Args:
        report_type: Report type descriptor; no ``type`` means no index
        fetch_describe: Callable returning the describe payload for a type name
        trace: Structured log hooks

    Returns:
        ReportFieldIndex (inactive when no type was given)

    Raises:
        SchemaFetchError: If the describe call fails
    """
    trace = trace or ReportTrace()
    type_name = report_type.type if report_type else None
    if not type_name:
        return ReportFieldIndex()

    trace.schema_fetch_started(type_name)
    try:
        describe = fetch_describe(type_name)
    except Exception as e:
        trace.schema_fetch_failed(type_name, e)
        raise SchemaFetchError(
            f"Failed to fetch report type metadata for '{type_name}': {e}"
        ) from e

    index = ReportFieldIndex(report_type=type_name, operator_map=_operator_table(describe))
    for api_name, info, is_detail in _column_catalogs(describe):
        index.register(api_name, info, detail=is_detail)

    trace.schema_fetched(type_name, len(index.field_map), list(index.operator_map))
    return index


def fetch_report_type_describe(sf, type_name: str) -> Dict[str, Any]:
    """GET analytics/report-types/{type} with the session's bearer token."""
    config = get_config()
    endpoint = (
        f"https://{sf.sf_instance}/services/data/v{config.report_type_api_version}"
        f"/analytics/report-types/{type_name}"
    )
    headers = {
        "Authorization": f"Bearer {sf.session_id}",
        "Accept": "application/json",
    }

    resp = requests.get(endpoint, headers=headers, timeout=config.request_timeout_seconds)
    resp.raise_for_status()
    return resp.json()
