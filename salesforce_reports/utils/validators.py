"""Input validation utilities for Salesforce report metadata

Created by Sameer
"""
import re
from typing import Iterable


class ValidationError(Exception):
    """Custom exception for validation errors

    Added by Sameer
    """
    pass


def unknown_field_error(requested: str, kind: str, allowed: Iterable[str]) -> ValidationError:
    """
    Build the error raised when a report field cannot be resolved.

    The message lists every allowed canonical name so the caller can retry
    with a valid one.

    Args:
        requested: Identifier the caller supplied
        kind: What the identifier was used as (column, filter, grouping)
        allowed: Canonical API names accepted by the report type

    Returns:
        ValidationError ready to raise
    """
    return ValidationError(
        f"Field '{requested}' is not a valid {kind} for this Salesforce report type. "
        f"Allowed: {', '.join(allowed)}"
    )


def derive_developer_name(name: str) -> str:
    """
    Derive a report developer name from its display name.

    Added by Sameer

    Every character outside [A-Za-z0-9_] becomes an underscore, so the
    result has the same length as the input.

    Args:
        name: Report display name

    Returns:
        Developer name safe for the Analytics API
    """
    return re.sub(r'[^A-Za-z0-9_]', '_', name)


def escape_soql_literal(value: str) -> str:
    """
    Escape a value for use inside a single-quoted SOQL string literal.

    Args:
        value: Raw value

    Returns:
        Escaped value (without surrounding quotes)
    """
    return value.replace('\\', '\\\\').replace("'", "\\'")
