"""Typed request records for report creation

Argument names follow the Analytics REST API (camelCase); Python attributes
are snake_case and either spelling is accepted on input.
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class _PassThrough(BaseModel):
    """Section copied into the report document as supplied."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def dump(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


def _stringify(value: Any) -> Any:
    # Filter values are strings on the wire; checkboxes are "true"/"false"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


class ReportTypeRef(_Record):
    type: Optional[str] = None
    label: Optional[str] = None


class SimpleFilter(_Record):
    """Convenience filter shape: {field, operator, value}."""
    field: str = ""
    operator: str = ""
    value: Optional[str] = None

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, value: Any) -> Any:
        return _stringify(value)


class RawFilter(_PassThrough):
    """Analytics API filter shape; extra keys such as filterType are kept."""
    column: str = ""
    operator: str = ""
    value: Optional[str] = None

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, value: Any) -> Any:
        return _stringify(value)


class GroupingInput(_Record):
    name: str = ""
    sort_order: Optional[str] = Field(default=None, alias="sortOrder")
    sort_aggregate: Optional[str] = Field(default=None, alias="sortAggregate")
    date_granularity: Optional[str] = Field(default=None, alias="dateGranularity")


class ChartSettings(_PassThrough):
    chart_type: Optional[str] = Field(default=None, alias="chartType")
    groupings: Optional[List[Any]] = None
    summaries: Optional[List[Any]] = None
    title: Optional[Any] = None


class PresentationOptions(_PassThrough):
    has_stacked_summaries: Optional[bool] = Field(default=None, alias="hasStackedSummaries")


class StandardDateFilter(_PassThrough):
    column: Optional[str] = None
    duration_value: Optional[str] = Field(default=None, alias="durationValue")
    start_date: Optional[str] = Field(default=None, alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")


class CrossFilter(_PassThrough):
    related_entity: Optional[str] = Field(default=None, alias="relatedEntity")
    includes_object: Optional[bool] = Field(default=None, alias="includesObject")


class NestedReportMetadata(_Record):
    """A nested reportMetadata object carrying either filter shape again."""
    filters: Optional[List[SimpleFilter]] = None
    report_filters: Optional[List[RawFilter]] = Field(default=None, alias="reportFilters")
    groupings_down: Optional[List[GroupingInput]] = Field(default=None, alias="groupingsDown")
    groupings_across: Optional[List[GroupingInput]] = Field(default=None, alias="groupingsAcross")
    aggregates: Optional[List[str]] = None


# Pass-through keys and the JSON types they must have to be copied.
# Values of any other type are dropped before validation.
_PASS_THROUGH_TYPES = {
    "id": (str,),
    "reportFormat": (str,),
    "reportBooleanFilter": (str,),
    "developerName": (str,),
    "description": (str, type(None)),
    "currency": (str, type(None)),
    "division": (str, type(None)),
    "userOrHierarchyFilterId": (str, type(None)),
    "scope": (str,),
    "showGrandTotal": (bool,),
    "showSubtotals": (bool,),
    "hasDetailRows": (bool,),
    "hasRecordCount": (bool,),
    "supportsRoleHierarchy": (bool,),
    "presentationOptions": (dict,),
    "chart": (dict,),
    "standardDateFilter": (dict,),
    "standardFilters": (dict, list),
    "dashboardSetting": (dict,),
    "crossFilters": (list,),
    "historicalSnapshotDates": (list,),
    "sortBy": (list,),
    "aggregates": (list,),
    "reportMetadata": (dict,),
}


class ReportRequest(_Record):
    """Union of every argument shape accepted by report creation."""

    report_name: str = Field(alias="reportName")
    object_name: Optional[str] = Field(default=None, alias="objectName")
    report_type: Optional[Union[ReportTypeRef, str]] = Field(default=None, alias="reportType")
    folder_id: Optional[str] = Field(default=None, alias="folderId")
    folder_name: Optional[str] = Field(default=None, alias="folderName")

    # Simplified arguments
    columns: Optional[List[str]] = None
    filters: Optional[List[SimpleFilter]] = None

    # Raw API-shaped arguments
    detail_columns: Optional[List[str]] = Field(default=None, alias="detailColumns")
    report_filters: Optional[List[RawFilter]] = Field(default=None, alias="reportFilters")
    groupings_down: Optional[List[GroupingInput]] = Field(default=None, alias="groupingsDown")
    groupings_across: Optional[List[GroupingInput]] = Field(default=None, alias="groupingsAcross")
    aggregates: Optional[List[str]] = None

    report_metadata: Optional[NestedReportMetadata] = Field(default=None, alias="reportMetadata")

    # Pass-through attributes
    id: Optional[str] = None
    report_format: Optional[str] = Field(default=None, alias="reportFormat")
    report_boolean_filter: Optional[str] = Field(default=None, alias="reportBooleanFilter")
    developer_name: Optional[str] = Field(default=None, alias="developerName")
    description: Optional[str] = None
    currency: Optional[str] = None
    division: Optional[str] = None
    user_or_hierarchy_filter_id: Optional[str] = Field(default=None, alias="userOrHierarchyFilterId")
    scope: Optional[str] = None
    show_grand_total: Optional[bool] = Field(default=None, alias="showGrandTotal")
    show_subtotals: Optional[bool] = Field(default=None, alias="showSubtotals")
    has_detail_rows: Optional[bool] = Field(default=None, alias="hasDetailRows")
    has_record_count: Optional[bool] = Field(default=None, alias="hasRecordCount")
    supports_role_hierarchy: Optional[bool] = Field(default=None, alias="supportsRoleHierarchy")
    presentation_options: Optional[PresentationOptions] = Field(default=None, alias="presentationOptions")
    chart: Optional[ChartSettings] = None
    standard_date_filter: Optional[StandardDateFilter] = Field(default=None, alias="standardDateFilter")
    standard_filters: Optional[Any] = Field(default=None, alias="standardFilters")
    dashboard_setting: Optional[Dict[str, Any]] = Field(default=None, alias="dashboardSetting")
    cross_filters: Optional[List[CrossFilter]] = Field(default=None, alias="crossFilters")
    historical_snapshot_dates: Optional[List[str]] = Field(default=None, alias="historicalSnapshotDates")
    sort_by: Optional[List[Dict[str, Any]]] = Field(default=None, alias="sortBy")

    @model_validator(mode="before")
    @classmethod
    def _drop_mistyped_pass_through(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned = dict(data)
        for key, types in _PASS_THROUGH_TYPES.items():
            if key in cleaned and not isinstance(cleaned[key], types):
                del cleaned[key]
        return cleaned

    def was_supplied(self, attribute: str) -> bool:
        return attribute in self.model_fields_set
