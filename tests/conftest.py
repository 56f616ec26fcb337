"""
Test configuration for openimmo_sync_service.

Sets the service environment before any module reads the settings and exposes
shared fixtures for the feed and the collection.
"""

import os

import pytest

# Settings are read at import time; configure them before importing the service
os.environ.setdefault("OPENIMMO_SYNC_SERVICE_ENVIRONMENT", "testing")
os.environ.setdefault("OPENIMMO_SYNC_SERVICE_FTP_HOST", "ftp.test.local")
os.environ.setdefault("OPENIMMO_SYNC_SERVICE_FTP_USER", "feed")
os.environ.setdefault("OPENIMMO_SYNC_SERVICE_FTP_PASSWORD", "secret")
os.environ.setdefault("OPENIMMO_SYNC_SERVICE_REMOTE_FOLDER", "/openimmo")
os.environ.setdefault("OPENIMMO_SYNC_SERVICE_WEBFLOW_TOKEN", "test-token-123456")
os.environ.setdefault("OPENIMMO_SYNC_SERVICE_COLLECTION_ID", "collection-1")
os.environ.setdefault("OPENIMMO_SYNC_SERVICE_SITE_ID", "site-1")
os.environ.setdefault("OPENIMMO_SYNC_SERVICE_PUBLISH_RETRY_DELAY_SECONDS", "0")

from tests.fixtures.mocks import MockCollection, MockFeedClient  # noqa: E402


@pytest.fixture
def collection():
    """Empty in-memory Webflow collection."""
    return MockCollection()


@pytest.fixture
def feed_client():
    """Factory for in-memory FTP feeds."""

    def _feed_client(files=None, **kwargs):
        return MockFeedClient(files=files, **kwargs)

    return _feed_client
