"""
Client modules for external service integrations.
"""

from openimmo_sync_service.clients.ftp_feed_client import FtpFeedClient
from openimmo_sync_service.clients.webflow_api_client import WebflowApiClient

__all__ = ["FtpFeedClient", "WebflowApiClient"]
