"""
Helper functions for building OpenImmo documents and records in tests.
"""
from typing import List, Optional

from openimmo_sync_service.schemas.property_record import (
    AttachmentImage,
    FileBatchEntry,
    PropertyRecord,
)


def _node(tag: str, value: Optional[str]) -> str:
    if value is None:
        return ""
    return f"<{tag}>{value}</{tag}>"


def build_openimmo_xml(
    obid: Optional[str] = "OBID-1",
    objektnr_extern: Optional[str] = None,
    objektnr_intern: Optional[str] = None,
    title: Optional[str] = "Nice Flat",
    street: Optional[str] = "Hauptstrasse",
    house_number: Optional[str] = "5",
    delete_root: bool = False,
    delete_verwaltung: bool = False,
    images: Optional[List[str]] = None,
    contact_photo: Optional[str] = None,
    with_listing: bool = True,
    namespace: Optional[str] = None,
) -> bytes:
    """Build a minimal but realistic OpenImmo document."""
    root_aktion = '<aktion aktionart="DELETE"/>' if delete_root else ""
    verw_aktion = '<aktion aktionart="DELETE"/>' if delete_verwaltung else ""

    anhaenge = ""
    if images:
        anhaenge = "<anhaenge>" + "".join(
            f'<anhang location="REMOTE" gruppe="BILD">'
            f"<anhangtitel>Bild {idx + 1}</anhangtitel>"
            f"<daten><pfad>{path}</pfad></daten></anhang>"
            for idx, path in enumerate(images)
        ) + "</anhaenge>"

    kontakt = ""
    if contact_photo:
        kontakt = (
            "<kontaktperson><name>Muster</name>"
            f'<foto location="REMOTE"><daten><pfad>{contact_photo}</pfad></daten></foto>'
            "</kontaktperson>"
        )

    listing = ""
    if with_listing:
        listing = (
            "<immobilie>"
            "<freitexte>"
            f"{_node('objekttitel', title)}"
            "<lage>Central location</lage>"
            "<objektbeschreibung>Bright and quiet</objektbeschreibung>"
            "<ausstatt_beschr>Balcony, fitted kitchen</ausstatt_beschr>"
            "<sonstige_angaben>Available now</sonstige_angaben>"
            "</freitexte>"
            "<geo>"
            "<plz>10115</plz><ort>Berlin</ort>"
            f"{_node('strasse', street)}{_node('hausnummer', house_number)}"
            "</geo>"
            "<preise><kaltmiete>950.00</kaltmiete><warmmiete>1200.00</warmmiete>"
            "<nebenkosten>250.00</nebenkosten><kaution>2850.00</kaution></preise>"
            "<flaechen><wohnflaeche>72.5</wohnflaeche><anzahl_zimmer>3</anzahl_zimmer>"
            "<anzahl_schlafzimmer>2</anzahl_schlafzimmer>"
            "<anzahl_badezimmer>1</anzahl_badezimmer></flaechen>"
            "<zustand_angaben><baujahr>1998</baujahr></zustand_angaben>"
            f"{kontakt}{anhaenge}"
            "<verwaltung_techn>"
            f"{_node('objektnr_intern', objektnr_intern)}"
            f"{_node('objektnr_extern', objektnr_extern)}"
            f"{verw_aktion}"
            f"{_node('openimmo_obid', obid)}"
            "</verwaltung_techn>"
            "</immobilie>"
        )

    xmlns = f' xmlns="{namespace}"' if namespace else ""
    document = (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f"<openimmo{xmlns}>"
        '<uebertragung art="OFFLINE" umfang="TEIL"/>'
        f"{root_aktion}"
        "<anbieter><anbieternr>A1</anbieternr><firma>Muster Immobilien GmbH</firma>"
        f"{listing}"
        "</anbieter>"
        "</openimmo>"
    )
    return document.encode("utf-8")


def make_record(
    obid: str = "OBID-1",
    title: str = "Nice Flat",
    is_delete: bool = False,
    source_name: str = "feed_42+extra.xml",
    images: Optional[List[str]] = None,
    contact_photo: str = "",
) -> PropertyRecord:
    """Build a PropertyRecord without going through XML."""
    return PropertyRecord(
        obid=obid,
        name=title or f"Listing {obid or 'unknown'}",
        slug=f"{title.lower().replace(' ', '-')}-{obid.lower()}" if obid else "",
        name_for_link="42",
        source_name=source_name,
        is_delete=is_delete,
        title=title,
        street="Hauptstrasse",
        house_number="5",
        cold_rent="950.00",
        contact_photo=contact_photo,
        attachment_images=tuple(AttachmentImage(path=path, title="") for path in images or []),
    )


def make_entry(filename: str, obid: str = "OBID-1", is_delete: bool = False, **kwargs) -> FileBatchEntry:
    return FileBatchEntry(
        filename=filename,
        record=make_record(obid=obid, is_delete=is_delete, source_name=filename, **kwargs),
    )
