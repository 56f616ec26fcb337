"""
Utility modules for the OpenImmo Sync Service.

Exports logging configuration and listing identity helpers.
"""

from openimmo_sync_service.utils.identity import (
    derive_name,
    derive_slug,
    extract_name_for_link,
    resolve_obid,
    slugify,
)
from openimmo_sync_service.utils.logging_config import configure_logging, logger

__all__ = [
    "configure_logging",
    "derive_name",
    "derive_slug",
    "extract_name_for_link",
    "logger",
    "resolve_obid",
    "slugify",
]
