"""Reconcile the parallel argument shapes for columns, filters and groupings

Each attribute has an ordered list of candidate sources. The first source
holding a non-empty list wins; only that source is validated and
canonicalized, the rest are ignored.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from salesforce_reports.reports.field_index import ReportFieldIndex
from salesforce_reports.reports.models import (
    GroupingInput,
    NestedReportMetadata,
    RawFilter,
    ReportRequest,
    SimpleFilter,
)
from salesforce_reports.reports.operators import normalize_operator
from salesforce_reports.utils.logging import ReportTrace

# (label, value, convert)
Source = Tuple[str, Optional[Sequence[Any]], Callable[[Sequence[Any]], List[Any]]]


@dataclass
class MergedReportInputs:
    detail_columns: Optional[List[str]] = None
    report_filters: Optional[List[Dict[str, Any]]] = None
    groupings_down: Optional[List[Dict[str, Any]]] = None
    groupings_across: Optional[List[Dict[str, Any]]] = None
    aggregates: Optional[List[str]] = None


def first_populated(attribute: str, sources: List[Source], trace: ReportTrace) -> Optional[List[Any]]:
    """Convert and return the first non-empty source, or None if all are empty."""
    for label, value, convert in sources:
        if value:
            trace.source_selected(attribute, label)
            return convert(value)
    trace.source_selected(attribute, None)
    return None


class InputMerger:
    """Validates and canonicalizes report inputs against one field index."""

    def __init__(self, index: ReportFieldIndex, trace: Optional[ReportTrace] = None):
        self.index = index
        self.trace = trace or ReportTrace()

    def merge(self, request: ReportRequest) -> MergedReportInputs:
        nested = request.report_metadata or NestedReportMetadata()

        return MergedReportInputs(
            detail_columns=first_populated("detailColumns", [
                ("columns", request.columns, self._columns),
                ("detailColumns", request.detail_columns, self._columns),
            ], self.trace),
            report_filters=first_populated("reportFilters", [
                ("filters", request.filters, self._simple_filters),
                ("reportFilters", request.report_filters, self._raw_filters),
                ("reportMetadata.filters", nested.filters, self._simple_filters),
                ("reportMetadata.reportFilters", nested.report_filters, self._nested_raw_filters),
            ], self.trace),
            groupings_down=first_populated("groupingsDown", [
                ("groupingsDown", request.groupings_down, self._groupings),
                ("reportMetadata.groupingsDown", nested.groupings_down, self._groupings),
            ], self.trace),
            groupings_across=first_populated("groupingsAcross", [
                ("groupingsAcross", request.groupings_across, self._groupings),
                ("reportMetadata.groupingsAcross", nested.groupings_across, self._groupings),
            ], self.trace),
            aggregates=first_populated("aggregates", [
                ("aggregates", request.aggregates, list),
                ("reportMetadata.aggregates", nested.aggregates, list),
            ], self.trace),
        )

    def _columns(self, columns: Sequence[str]) -> List[str]:
        return self.index.canonicalize(list(columns), "column", self.trace)

    def _filter_target(self, column: str, operator: str) -> Tuple[str, str]:
        canonical = self.index.resolve(column)
        resolved = normalize_operator(operator, self.index.data_type(canonical), self.index.operator_map)
        self.trace.operator_normalized(canonical, operator, resolved)
        return canonical, resolved

    def _simple_filters(self, filters: Sequence[SimpleFilter]) -> List[Dict[str, Any]]:
        self.index.validate([f.field for f in filters], "filter", self.trace)
        merged = []
        for f in filters:
            column, operator = self._filter_target(f.field, f.operator)
            merged.append({"column": column, "operator": operator, "value": f.value})
        return merged

    def _raw_filters(self, filters: Sequence[RawFilter]) -> List[Dict[str, Any]]:
        self.index.validate([f.column for f in filters], "filter", self.trace)
        merged = []
        for f in filters:
            entry = f.dump()
            entry["column"], entry["operator"] = self._filter_target(f.column, f.operator)
            merged.append(entry)
        return merged

    def _nested_raw_filters(self, filters: Sequence[RawFilter]) -> List[Dict[str, Any]]:
        self.index.validate([f.column for f in filters], "filter", self.trace)
        merged = []
        for f in filters:
            column, operator = self._filter_target(f.column, f.operator)
            merged.append({"column": column, "operator": operator, "value": f.value})
        return merged

    def _groupings(self, groupings: Sequence[GroupingInput]) -> List[Dict[str, Any]]:
        self.index.validate([g.name for g in groupings], "grouping", self.trace)
        merged = []
        for g in groupings:
            sort_aggregate = None
            if g.sort_aggregate:
                sort_aggregate = self.index.lookup(g.sort_aggregate) or g.sort_aggregate
            merged.append({
                "name": self.index.resolve(g.name) or g.name,
                "sortOrder": g.sort_order or "Asc",
                "sortAggregate": sort_aggregate,
                "dateGranularity": g.date_granularity or "None",
            })
        return merged
