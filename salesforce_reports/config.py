"""
Configuration management for the Salesforce Reports MCP Server
Supports environment variables and .env files

Created by Sameer
"""
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class SalesforceConfig(BaseSettings):
    """Salesforce Reports MCP Server configuration

    Added by Sameer
    """

    # Server Configuration
    mcp_server_name: str = Field(default="salesforce-reports-mcp", description="MCP server name")
    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_json: bool = Field(default=False, description="Emit logs as JSON lines")

    # API Configuration
    salesforce_api_version: str = Field(default="59.0", description="Salesforce API version")
    report_type_api_version: str = Field(
        default="39.0", description="API version used for the report-type describe endpoint"
    )
    request_timeout_seconds: int = Field(default=120, description="Default request timeout")

    # Credentials (session id takes precedence over username/password)
    instance_url: Optional[str] = Field(default=None, description="Salesforce instance URL")
    session_id: Optional[str] = Field(default=None, description="Existing session id / access token")
    username: Optional[str] = Field(default=None, description="Salesforce username")
    password: Optional[str] = Field(default=None, description="Salesforce password")
    security_token: Optional[str] = Field(default=None, description="Salesforce security token")
    domain: str = Field(default="login", description="Login domain (login, test, or My Domain)")

    # HTTP/SSE Server Configuration
    http_host: str = Field(default="0.0.0.0", description="HTTP server host (0.0.0.0 for network access)")
    http_port: int = Field(default=8000, description="HTTP server port")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        env_prefix = "SFMCP_"


# Global configuration instance
_config: Optional[SalesforceConfig] = None


def get_config() -> SalesforceConfig:
    """Get global configuration instance (singleton pattern)

    Added by Sameer
    """
    global _config
    if _config is None:
        _config = SalesforceConfig()
    return _config


def reload_config() -> SalesforceConfig:
    """Reload configuration from environment/file

    Added by Sameer
    """
    global _config
    _config = SalesforceConfig()
    return _config
