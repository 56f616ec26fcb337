"""
OpenImmo feed parsing.
"""

from openimmo_sync_service.parsing.openimmo_parser import (
    DELETE_SENTINEL,
    MAX_ATTACHMENT_IMAGES,
    extract_property_record,
    parse_property_document,
    parse_xml,
)

__all__ = [
    "DELETE_SENTINEL",
    "MAX_ATTACHMENT_IMAGES",
    "extract_property_record",
    "parse_property_document",
    "parse_xml",
]
