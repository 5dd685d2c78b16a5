"""Utility functions for MCP tools - error handling and response management

Created by Sameer
"""
import json
import logging
from typing import Any, Dict, Optional

from salesforce_reports.utils.logging import get_correlation_id

logger = logging.getLogger(__name__)

# Token limits
TOKEN_LIMIT = 25000
TOKEN_WARNING_THRESHOLD = 20000  # 80% of limit


class MCPError:
    """Enhanced error handling with troubleshooting hints"""

    # Common error patterns and their solutions
    ERROR_PATTERNS = {
        "IS NOT A VALID": {
            "hint": "A column, filter or grouping field is not part of this report type.",
            "suggestions": [
                "Pick a field from the 'Allowed' list in the error message",
                "Use describe_report_type() to list fields and their labels",
                "Labels and API names are both accepted, in any case"
            ]
        },
        "FAILED TO FETCH REPORT TYPE METADATA": {
            "hint": "The report type could not be described.",
            "suggestions": [
                "Verify the report type name (e.g. 'AccountList', 'Opportunity')",
                "Pass reportType as {type, label} if objectName does not map to a report type",
                "Check that the user can run reports on this report type"
            ]
        },
        "NOT_FOUND": {
            "hint": "Requested resource not found.",
            "suggestions": [
                "Verify the ID or name is correct",
                "Check if the resource exists in this org",
                "Ensure you have access permissions"
            ]
        },
        "INSUFFICIENT_ACCESS": {
            "hint": "You don't have permission to perform this operation.",
            "suggestions": [
                "Contact your Salesforce administrator",
                "Check that the user has the 'Create and Customize Reports' permission",
                "Verify write access to the target report folder"
            ]
        },
        "INVALID_SESSION_ID": {
            "hint": "Your session has expired or is invalid.",
            "suggestions": [
                "Refresh SFMCP_SESSION_ID or switch to username/password credentials",
                "Check your .env configuration"
            ]
        },
        "NO SALESFORCE CREDENTIALS": {
            "hint": "The server has no Salesforce credentials.",
            "suggestions": [
                "Set SFMCP_INSTANCE_URL and SFMCP_SESSION_ID",
                "Or set SFMCP_USERNAME, SFMCP_PASSWORD and SFMCP_SECURITY_TOKEN"
            ]
        },
        "FIELD REQUIRED": {
            "hint": "A required argument is missing from report_metadata.",
            "suggestions": [
                "reportName is always required",
                "Provide objectName or reportType so fields can be validated"
            ]
        },
        "REQUEST_LIMIT_EXCEEDED": {
            "hint": "API request limit exceeded.",
            "suggestions": [
                "Wait and retry later",
                "Each report creation uses up to four API calls"
            ]
        },
        "BAD REQUEST": {
            "hint": "Salesforce rejected the report metadata.",
            "suggestions": [
                "Check that reportFormat matches the groupings (SUMMARY/MATRIX need groupingsDown)",
                "Verify aggregate names such as 's!AMOUNT' or 'RowCount'",
                "Confirm a report folder exists in the org"
            ]
        }
    }

    @classmethod
    def enhance_error(cls, error_msg: str, context: Optional[str] = None) -> Dict[str, Any]:
        """Enhance error message with troubleshooting hints

        Args:
            error_msg: Original error message
            context: Additional context (e.g., function name, object name)

        Returns:
            Enhanced error dict with hints and suggestions
        """
        enhanced = {
            "error": error_msg,
            "success": False
        }

        # Add context if provided
        if context:
            enhanced["context"] = context

        # Find matching error pattern
        for error_code, info in cls.ERROR_PATTERNS.items():
            if error_code.lower() in error_msg.lower():
                enhanced["hint"] = info["hint"]
                enhanced["suggestions"] = info["suggestions"]
                enhanced["error_type"] = error_code
                break

        # If no pattern matched, provide generic help
        if "hint" not in enhanced:
            enhanced["hint"] = "An unexpected error occurred."
            enhanced["suggestions"] = [
                "Check the error message for details",
                "Verify your Salesforce connection",
                "Consult the Salesforce Analytics REST API documentation"
            ]
            enhanced["error_type"] = "UNKNOWN"

        return enhanced


class ResponseSizeManager:
    """Manage response sizes and provide warnings"""

    @staticmethod
    def estimate_token_count(text: str) -> int:
        """Estimate token count for a string

        Rough estimation: 1 token ≈ 4 characters
        """
        return len(text) // 4

    @staticmethod
    def check_response_size(response_dict: Dict[str, Any]) -> Dict[str, Any]:
        """Check response size and add warnings if needed

        Args:
            response_dict: Response dictionary to check

        Returns:
            Response dict with size warnings if applicable
        """
        response_json = json.dumps(response_dict, indent=2)
        estimated_tokens = ResponseSizeManager.estimate_token_count(response_json)

        # Add size metadata
        response_dict["_metadata"] = response_dict.get("_metadata", {})
        response_dict["_metadata"]["estimated_tokens"] = estimated_tokens
        response_dict["_metadata"]["response_size_bytes"] = len(response_json)

        # Add warning if approaching limit
        if estimated_tokens > TOKEN_WARNING_THRESHOLD:
            response_dict["_metadata"]["size_warning"] = {
                "message": f"Response size ({estimated_tokens} tokens) is approaching the limit ({TOKEN_LIMIT} tokens)",
                "level": "warning" if estimated_tokens < TOKEN_LIMIT else "error",
                "recommendations": [
                    "Use max_fields/field_offset to page through report type fields",
                    "Request fewer detail columns"
                ]
            }

            logger.warning(
                f"Response size warning: {estimated_tokens} tokens "
                f"(threshold: {TOKEN_WARNING_THRESHOLD}, limit: {TOKEN_LIMIT})"
            )

        return response_dict

    @staticmethod
    def truncate_if_needed(
        data: list,
        max_items: int,
        message: str = "Results truncated due to size limit"
    ) -> tuple:
        """Truncate data if it exceeds max_items

        Args:
            data: List of items to potentially truncate
            max_items: Maximum number of items to return
            message: Message to include if truncated

        Returns:
            Tuple of (truncated_data, was_truncated, truncation_info)
        """
        if len(data) > max_items:
            return (
                data[:max_items],
                True,
                {
                    "truncated": True,
                    "message": message,
                    "original_count": len(data),
                    "returned_count": max_items,
                    "omitted_count": len(data) - max_items
                }
            )
        return data, False, None


def format_success_response(data: Any, check_size: bool = True) -> str:
    """Format a success response with optional size checking

    Args:
        data: Main data to return
        check_size: Whether to check response size and add warnings

    Returns:
        JSON string with formatted response
    """
    response = {
        "success": True,
        **data
    }

    # Check size if requested
    if check_size:
        response = ResponseSizeManager.check_response_size(response)

    return json.dumps(response, indent=2)


def format_error_response(error: Exception, context: Optional[str] = None) -> str:
    """Format an error response with troubleshooting hints

    The correlation ID of the failing call is included so the envelope can
    be matched against the server log.

    Args:
        error: Exception object
        context: Additional context about the operation

    Returns:
        JSON string with formatted error response
    """
    response = MCPError.enhance_error(str(error), context)
    response["correlation_id"] = get_correlation_id()

    return json.dumps(response, indent=2)
