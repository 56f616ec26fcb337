"""
OpenImmo XML parsing and field extraction.

Parsing is delegated to lxml. Extraction walks the fixed OpenImmo layout
(openimmo -> anbieter -> immobilie -> sections) and maps every missing node to
an empty string, so only the absence of the listing itself yields no record.
"""

import logging
from typing import Iterator, List, Optional, Union

from lxml import etree

from openimmo_sync_service.exceptions import OpenImmoParseError
from openimmo_sync_service.schemas.property_record import AttachmentImage, PropertyRecord
from openimmo_sync_service.utils.identity import (
    derive_name,
    derive_slug,
    extract_name_for_link,
    resolve_obid,
)

logger = logging.getLogger(__name__)

DELETE_SENTINEL = "DELETE"
MAX_ATTACHMENT_IMAGES = 5

# Entities and network lookups stay disabled for feed input
_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)


def _local_name(element) -> str:
    if not isinstance(element.tag, str):
        return ""
    return etree.QName(element).localname


def _children(element, tag: str) -> Iterator:
    if element is None:
        return iter(())
    return (child for child in element if _local_name(child) == tag)


def _child(element, tag: str):
    return next(_children(element, tag), None)


def _text(element, tag: str) -> str:
    node = _child(element, tag)
    if node is None or node.text is None:
        return ""
    return node.text.strip()


def _has_delete_action(element) -> bool:
    aktion = _child(element, "aktion")
    if aktion is None:
        return False
    return aktion.get("aktionart", "") == DELETE_SENTINEL


def parse_xml(content: Union[bytes, str], source: str = ""):
    """
    Parse raw feed content into an lxml root element.

    Raises:
        OpenImmoParseError: If the content is not well-formed XML
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    try:
        return etree.fromstring(content, parser=_PARSER)
    except etree.XMLSyntaxError as e:
        raise OpenImmoParseError(f"Malformed XML in {source or 'document'}: {e}", source)


def _extract_images(immobilie) -> List[AttachmentImage]:
    images = []
    anhaenge = _child(immobilie, "anhaenge")
    for anhang in list(_children(anhaenge, "anhang"))[:MAX_ATTACHMENT_IMAGES]:
        path = _text(_child(anhang, "daten"), "pfad")
        if path:
            images.append(AttachmentImage(path=path, title=_text(anhang, "anhangtitel")))
    return images


def _extract_contact_photo(immobilie) -> str:
    kontaktperson = _child(immobilie, "kontaktperson")
    foto = _child(kontaktperson, "foto")
    return _text(_child(foto, "daten"), "pfad")


def extract_property_record(root, source: str = "") -> Optional[PropertyRecord]:
    """
    Map a parsed OpenImmo document to a PropertyRecord.

    Args:
        root: lxml root element of the document
        source: filename the document came from, used for name_for_link and logs

    Returns:
        PropertyRecord, or None when the <openimmo> root or the <immobilie>
        listing node is missing
    """
    if root is None or _local_name(root) != "openimmo":
        logger.error(f"Invalid XML format (missing <openimmo> root): {source}")
        return None

    anbieter = _child(root, "anbieter")
    immobilie = _child(anbieter, "immobilie")
    if immobilie is None:
        logger.error(f"Invalid XML format (no <immobilie>): {source}")
        return None

    verwaltung_techn = _child(immobilie, "verwaltung_techn")
    is_delete = _has_delete_action(root) or _has_delete_action(verwaltung_techn)

    freitexte = _child(immobilie, "freitexte")
    geo = _child(immobilie, "geo")
    preise = _child(immobilie, "preise")
    flaechen = _child(immobilie, "flaechen")
    zustand = _child(immobilie, "zustand_angaben")

    title = _text(freitexte, "objekttitel")
    street = _text(geo, "strasse")
    house_number = _text(geo, "hausnummer")

    obid = resolve_obid(
        [
            _text(verwaltung_techn, "openimmo_obid"),
            _text(verwaltung_techn, "objektnr_extern"),
            _text(verwaltung_techn, "objektnr_intern") or _text(immobilie, "objektnr_intern"),
        ]
    )

    name = derive_name(title, obid, street, house_number, is_delete)
    record = PropertyRecord(
        obid=obid,
        name=name,
        slug=derive_slug(title, obid, street, house_number, is_delete, name=name),
        name_for_link=extract_name_for_link(source),
        source_name=source,
        is_delete=is_delete,
        provider_company=_text(anbieter, "firma"),
        title=title,
        location_description=_text(freitexte, "lage"),
        description=_text(freitexte, "objektbeschreibung"),
        amenities=_text(freitexte, "ausstatt_beschr"),
        other_info=_text(freitexte, "sonstige_angaben"),
        postal_code=_text(geo, "plz"),
        city=_text(geo, "ort"),
        street=street,
        house_number=house_number,
        cold_rent=_text(preise, "kaltmiete"),
        warm_rent=_text(preise, "warmmiete"),
        service_charges=_text(preise, "nebenkosten"),
        deposit=_text(preise, "kaution"),
        living_area=_text(flaechen, "wohnflaeche"),
        rooms=_text(flaechen, "anzahl_zimmer"),
        bedrooms=_text(flaechen, "anzahl_schlafzimmer"),
        bathrooms=_text(flaechen, "anzahl_badezimmer"),
        construction_year=_text(zustand, "baujahr"),
        contact_photo=_extract_contact_photo(immobilie),
        attachment_images=tuple(_extract_images(immobilie)),
    )

    logger.info(f"DELETE={record.is_delete} | OBID={record.obid} | Parsed: {source}")
    return record


def parse_property_document(content: Union[bytes, str], source: str = "") -> Optional[PropertyRecord]:
    """
    Parse raw feed content and extract its PropertyRecord.

    Raises:
        OpenImmoParseError: If the content is not well-formed XML
    """
    return extract_property_record(parse_xml(content, source), source)
