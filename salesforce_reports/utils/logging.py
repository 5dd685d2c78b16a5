"""Structured logging with correlation IDs for request tracking

Created by Sameer
"""
import logging
import json
import uuid
import contextvars
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

# Context variable for correlation ID
correlation_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    'correlation_id', default=None
)

# Extra record attributes copied into JSON output when present
STRUCTURED_FIELDS = (
    'tool_name',
    'user_id',
    'duration_ms',
    'success',
    'error',
    'event',
    'report_type',
    'kind',
    'requested',
    'canonical',
    'column',
    'operator',
    'attribute',
    'source',
    'folder_id',
    'strategy',
    'field_count',
)


class CorrelationIDFilter(logging.Filter):
    """Add correlation ID to log records

    Added by Sameer
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get() or 'no-correlation-id'
        return True


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging

    Added by Sameer
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'correlation_id': getattr(record, 'correlation_id', 'unknown'),
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        # Add extra fields
        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        return json.dumps(log_data, default=str)


def get_correlation_id() -> str:
    """Get current correlation ID or generate new one

    Added by Sameer
    """
    cid = correlation_id_var.get()
    if cid is None:
        cid = str(uuid.uuid4())
        correlation_id_var.set(cid)
    return cid


def set_correlation_id(correlation_id: str) -> None:
    """Set correlation ID for current context

    Added by Sameer
    """
    correlation_id_var.set(correlation_id)


def new_correlation_id() -> str:
    """Generate and set new correlation ID

    Added by Sameer
    """
    cid = str(uuid.uuid4())
    correlation_id_var.set(cid)
    return cid


def setup_structured_logging(
    level: str = "INFO",
    use_json: bool = False,
    add_correlation_id: bool = True
) -> None:
    """
    Setup structured logging for the application.

    Added by Sameer

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        use_json: Use JSON formatter for structured logs
        add_correlation_id: Add correlation ID filter
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    root_logger.handlers.clear()

    # MCP stdio transport owns stdout, so logs always go to stderr
    handler = logging.StreamHandler()

    if use_json:
        formatter = JSONFormatter()
    else:
        # Human-readable format with correlation ID
        if add_correlation_id:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - [%(correlation_id)s] - %(levelname)s - %(message)s'
            )
        else:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )

    handler.setFormatter(formatter)

    # Add correlation ID filter
    if add_correlation_id:
        handler.addFilter(CorrelationIDFilter())

    root_logger.addHandler(handler)


def log_tool_execution(
    logger: logging.Logger,
    tool_name: str,
    duration_ms: float,
    success: bool,
    user_id: Optional[str] = None,
    error: Optional[str] = None
) -> None:
    """
    Log tool execution with structured data.

    Added by Sameer

    Args:
        logger: Logger instance
        tool_name: Name of the tool
        duration_ms: Execution duration in milliseconds
        success: Whether execution succeeded
        user_id: User ID who triggered the tool
        error: Error message if failed
    """
    extra = {
        'tool_name': tool_name,
        'duration_ms': round(duration_ms, 2),
        'success': success,
    }

    if user_id:
        extra['user_id'] = user_id
    if error:
        extra['error'] = error

    message = f"Tool '{tool_name}' {'succeeded' if success else 'failed'} in {duration_ms:.2f}ms"

    if success:
        logger.info(message, extra=extra)
    else:
        logger.error(message, extra=extra)


class ReportTrace:
    """Structured log hooks for report metadata resolution.

    One instance is handed to each resolution step; every hook emits a
    single record tagged with an ``event`` name so the sequence of a call
    can be followed by correlation id.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("salesforce_reports.reports")

    def _emit(self, level: int, event: str, message: str, *args: Any, **fields: Any) -> None:
        fields['event'] = event
        self.logger.log(level, message, *args, extra=fields)

    def schema_fetch_started(self, report_type: str) -> None:
        self._emit(logging.INFO, "schema_fetch_started",
                   "Fetching report type metadata for %s", report_type,
                   report_type=report_type)

    def schema_fetched(self, report_type: str, field_count: int, operator_types: List[str]) -> None:
        self._emit(logging.INFO, "schema_fetched",
                   "Indexed %d field keys for %s (operator types: %s)",
                   field_count, report_type, ", ".join(operator_types) or "none",
                   report_type=report_type, field_count=field_count)

    def schema_fetch_failed(self, report_type: str, error: Exception) -> None:
        self._emit(logging.ERROR, "schema_fetch_failed",
                   "Report type metadata fetch failed for %s: %s", report_type, error,
                   report_type=report_type, error=str(error))

    def field_resolved(self, kind: str, requested: str, canonical: str) -> None:
        self._emit(logging.DEBUG, "field_resolved",
                   "Resolved %s '%s' -> '%s'", kind, requested, canonical,
                   kind=kind, requested=requested, canonical=canonical)

    def field_rejected(self, kind: str, requested: str) -> None:
        self._emit(logging.WARNING, "field_rejected",
                   "Rejected unknown %s '%s'", kind, requested,
                   kind=kind, requested=requested)

    def operator_normalized(self, column: str, requested: str, resolved: str) -> None:
        self._emit(logging.DEBUG, "operator_normalized",
                   "Operator '%s' on %s -> '%s'", requested, column, resolved,
                   column=column, requested=requested, operator=resolved)

    def source_selected(self, attribute: str, source: Optional[str]) -> None:
        self._emit(logging.DEBUG, "source_selected",
                   "%s taken from %s", attribute, source or "(no source)",
                   attribute=attribute, source=source)

    def folder_resolved(self, folder_id: Optional[str], strategy: str) -> None:
        level = logging.INFO if folder_id else logging.WARNING
        self._emit(level, "folder_resolved",
                   "Report folder %s (via %s)", folder_id or "not found", strategy,
                   folder_id=folder_id, strategy=strategy)

    def document_assembled(self, document: Dict[str, Any]) -> None:
        self._emit(logging.INFO, "document_assembled",
                   "Assembled report metadata for '%s'", document.get("name"))
        self.logger.debug("Report metadata body: %s", json.dumps(document, default=str))
