# salesforce_reports/main.py
import sys
import logging
from salesforce_reports.config import get_config
from salesforce_reports.utils.logging import setup_structured_logging
from salesforce_reports.mcp.server import mcp_server, tool_registry

# IMPORTANT: import tool modules so @register_tool executes.
from salesforce_reports.mcp.tools import reports as _reports  # noqa: F401


def main() -> None:
    config = get_config()
    setup_structured_logging(level=config.log_level, use_json=config.log_json)

    if "--http" in sys.argv or "--sse" in sys.argv:
        logging.info("MCP starting (HTTP/SSE)")
        logging.info("Host: %s", config.http_host)
        logging.info("Port: %s", config.http_port)
        logging.info("Tools: %s", ", ".join(tool_registry.keys()) or "(none)")
        mcp_server.run(transport="sse", host=config.http_host, port=config.http_port)
    else:
        logging.info("MCP starting (stdio)")
        logging.info("Tools: %s", ", ".join(tool_registry.keys()) or "(none)")
        mcp_server.run(transport="stdio")


if __name__ == "__main__":
    main()
