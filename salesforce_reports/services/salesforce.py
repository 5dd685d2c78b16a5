"""Salesforce connection management"""
from simple_salesforce import Salesforce
import threading
import logging

from salesforce_reports.config import get_config

logger = logging.getLogger(__name__)

# Thread-local storage
local = threading.local()


class SalesforceConnectionError(Exception):
    """Raised when no usable Salesforce credentials are configured"""
    pass


def get_salesforce_connection():
    """
    Get a Salesforce connection built from configuration.

    A configured session id (with its instance URL) is used as-is; otherwise
    a username/password login is performed. The connection is cached per
    thread.

    Returns:
        Salesforce connection instance
    """
    if not hasattr(local, 'sf_connection') or local.sf_connection is None:
        logger.info("🔗 Creating Salesforce connection...")
        config = get_config()

        if config.session_id and config.instance_url:
            local.sf_connection = Salesforce(
                instance_url=config.instance_url,
                session_id=config.session_id,
                version=config.salesforce_api_version,
            )
        elif config.username and config.password:
            local.sf_connection = Salesforce(
                username=config.username,
                password=config.password,
                security_token=config.security_token or "",
                domain=config.domain,
                version=config.salesforce_api_version,
            )
        else:
            raise SalesforceConnectionError(
                "❌ No Salesforce credentials configured.\n"
                "Set one of these in the environment or .env file:\n"
                "- SFMCP_INSTANCE_URL and SFMCP_SESSION_ID\n"
                "- SFMCP_USERNAME, SFMCP_PASSWORD and SFMCP_SECURITY_TOKEN"
            )

        logger.info(f"✅ Connected to {local.sf_connection.sf_instance}")

    return local.sf_connection


def clear_connection_cache():
    """Clear connection cache to force new connection"""
    if hasattr(local, 'sf_connection'):
        local.sf_connection = None
