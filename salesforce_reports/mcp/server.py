"""FastMCP server instance and tool registration"""
import json
import logging
import time
from functools import wraps
from typing import Callable, Dict

from fastmcp import FastMCP

from salesforce_reports.config import get_config
from salesforce_reports.utils.logging import log_tool_execution, new_correlation_id

logger = logging.getLogger(__name__)

mcp_server = FastMCP(get_config().mcp_server_name)

# Tool name -> wrapped callable, for startup logging and direct invocation
tool_registry: Dict[str, Callable[..., str]] = {}


def register_tool(func: Callable[..., str]) -> Callable[..., str]:
    """Register a tool with the MCP server.

    Each call gets a fresh correlation id and a timing log line. Tools
    return a JSON envelope whose "success" key reports the outcome.
    """

    @wraps(func)
    def wrapper(*args, **kwargs) -> str:
        new_correlation_id()
        start = time.perf_counter()
        result = func(*args, **kwargs)
        envelope = json.loads(result)
        log_tool_execution(
            logger,
            func.__name__,
            (time.perf_counter() - start) * 1000,
            bool(envelope.get("success")),
            error=envelope.get("error"),
        )
        return result

    tool_registry[func.__name__] = wrapper
    mcp_server.tool()(wrapper)
    return wrapper
