"""
Tests for OpenImmo parsing and field extraction.
"""
import pydantic
import pytest

from openimmo_sync_service.exceptions import OpenImmoParseError
from openimmo_sync_service.parsing.openimmo_parser import (
    MAX_ATTACHMENT_IMAGES,
    extract_property_record,
    parse_property_document,
    parse_xml,
)
from tests.fixtures.helpers import build_openimmo_xml


def test_extracts_all_fields():
    content = build_openimmo_xml(
        obid="OBID-9",
        images=["https://cdn.example.com/1.jpg"],
        contact_photo="https://cdn.example.com/agent.jpg",
    )

    record = parse_property_document(content, "feed_42+extra.xml")

    assert record is not None
    assert record.obid == "OBID-9"
    assert record.name == "Nice Flat"
    assert record.slug == "nice-flat-obid-9"
    assert record.name_for_link == "42"
    assert record.source_name == "feed_42+extra.xml"
    assert record.is_delete is False
    assert record.provider_company == "Muster Immobilien GmbH"
    assert record.location_description == "Central location"
    assert record.description == "Bright and quiet"
    assert record.amenities == "Balcony, fitted kitchen"
    assert record.other_info == "Available now"
    assert (record.postal_code, record.city) == ("10115", "Berlin")
    assert (record.street, record.house_number) == ("Hauptstrasse", "5")
    assert (record.cold_rent, record.warm_rent) == ("950.00", "1200.00")
    assert (record.service_charges, record.deposit) == ("250.00", "2850.00")
    assert record.living_area == "72.5"
    assert (record.rooms, record.bedrooms, record.bathrooms) == ("3", "2", "1")
    assert record.construction_year == "1998"
    assert record.contact_photo == "https://cdn.example.com/agent.jpg"
    assert record.attachment_images[0].path == "https://cdn.example.com/1.jpg"
    assert record.attachment_images[0].title == "Bild 1"


def test_missing_listing_node_returns_none():
    content = build_openimmo_xml(with_listing=False)
    assert parse_property_document(content, "empty.xml") is None


def test_missing_openimmo_root_returns_none():
    assert parse_property_document(b"<feed><anbieter/></feed>", "other.xml") is None


def test_extractor_accepts_none_root():
    assert extract_property_record(None, "none.xml") is None


def test_malformed_xml_raises_parse_error():
    with pytest.raises(OpenImmoParseError) as exc_info:
        parse_xml(b"<openimmo><anbieter>", "broken.xml")
    assert exc_info.value.source == "broken.xml"


def test_missing_optional_nodes_default_to_empty_strings():
    content = (
        b"<openimmo><anbieter><immobilie>"
        b"<verwaltung_techn><openimmo_obid>X1</openimmo_obid></verwaltung_techn>"
        b"</immobilie></anbieter></openimmo>"
    )
    record = parse_property_document(content, "bare.xml")

    assert record.obid == "X1"
    assert record.title == ""
    assert record.city == ""
    assert record.contact_photo == ""
    assert record.attachment_images == ()
    assert record.name == "Listing X1"
    assert record.slug == "x1"


@pytest.mark.parametrize(
    "kwargs,expected",
    [
        ({"obid": "OBID", "objektnr_extern": "EXT", "objektnr_intern": "INT"}, "OBID"),
        ({"obid": None, "objektnr_extern": "EXT", "objektnr_intern": "INT"}, "EXT"),
        ({"obid": None, "objektnr_extern": None, "objektnr_intern": "INT"}, "INT"),
        ({"obid": None, "objektnr_extern": None, "objektnr_intern": None}, ""),
    ],
)
def test_obid_resolution_order(kwargs, expected):
    record = parse_property_document(build_openimmo_xml(**kwargs), "f.xml")
    assert record.obid == expected


def test_delete_flag_at_document_level():
    record = parse_property_document(build_openimmo_xml(obid="D1", delete_root=True), "d.xml")
    assert record.is_delete is True
    assert record.name == "Hauptstrasse 5"
    assert record.slug == "hauptstrasse-5"


def test_delete_flag_in_verwaltung_techn():
    record = parse_property_document(build_openimmo_xml(obid="D1", delete_verwaltung=True), "d.xml")
    assert record.is_delete is True


def test_other_action_is_not_a_delete():
    content = build_openimmo_xml().replace(b"<anbieter>", b'<aktion aktionart="CHANGE"/><anbieter>', 1)
    record = parse_property_document(content, "c.xml")
    assert record.is_delete is False


def test_attachment_images_capped():
    images = [f"https://cdn.example.com/{idx}.jpg" for idx in range(8)]
    record = parse_property_document(build_openimmo_xml(images=images), "f.xml")

    assert len(record.attachment_images) == MAX_ATTACHMENT_IMAGES
    assert [image.path for image in record.attachment_images] == images[:5]


def test_namespaced_document_is_extracted():
    content = build_openimmo_xml(obid="NS1", namespace="http://www.openimmo.de")
    record = parse_property_document(content, "ns.xml")
    assert record.obid == "NS1"
    assert record.title == "Nice Flat"


def test_record_is_immutable():
    record = parse_property_document(build_openimmo_xml(), "f.xml")
    with pytest.raises(pydantic.ValidationError):
        record.obid = "changed"
