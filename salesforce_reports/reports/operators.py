"""Filter operator normalization against a report type's operator table"""
import re
from typing import Any, Dict, List, Optional

_SEPARATORS = re.compile(r"[\s_]")


def _normalize(text: str) -> str:
    """Lower-case and drop whitespace and underscores ("Does_Not Equal" -> "doesnotequal")."""
    return _SEPARATORS.sub("", text.lower())


def normalize_operator(
    operator: str,
    data_type: Optional[str],
    operator_table: Dict[str, List[Dict[str, Any]]],
) -> str:
    """
    Map a caller-supplied operator to the canonical name for a field's data type.

    Names are tried before labels. An operator that matches neither falls
    back to the first valid operator for the type, so typos never fail the
    call. Without a known data type or operator list the input is returned
    unchanged.

    Args:
        operator: Operator as supplied ("does not equal", "notEqual", ...)
        data_type: Data type of the filtered column
        operator_table: dataType -> [{name, label}, ...] from the describe

    Returns:
        Canonical operator name
    """
    if not operator:
        return operator or ""
    if not data_type or not operator_table.get(data_type):
        return operator

    valid = operator_table[data_type]
    wanted = _normalize(operator)

    for candidate in valid:
        name = candidate.get("name") or ""
        if name and wanted == _normalize(name):
            return name

    for candidate in valid:
        label = candidate.get("label") or ""
        if label and wanted == _normalize(label):
            return candidate.get("name") or operator

    names = [candidate.get("name") for candidate in valid if candidate.get("name")]
    if operator in names:
        return operator
    return names[0] if names else operator
