"""
Schemas for listings extracted from OpenImmo feed files.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class AttachmentImage(BaseModel):
    """One image attachment (`anhaenge/anhang`) of a listing."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Value of anhang/daten/pfad")
    title: str = Field("", description="Value of anhang/anhangtitel")


class PropertyRecord(BaseModel):
    """
    Canonical, immutable representation of one OpenImmo XML document.

    Built exactly once per parsed file; re-deriving a record produces a new
    instance rather than mutating an existing one.
    """

    model_config = ConfigDict(frozen=True)

    # Identity
    obid: str = Field("", description="OpenImmo object id, the deduplication key")
    slug: str = Field("", description="URL slug derived from title/obid or address")
    name: str = Field(..., description="Display name of the listing")
    name_for_link: str = Field("", description="Filename segment between '_' and '+'")
    source_name: str = Field("", description="Name of the file the record came from")
    is_delete: bool = Field(False, description="Document carries the DELETE action")

    # Provider
    provider_company: str = ""

    # Free text
    title: str = ""
    location_description: str = ""
    description: str = ""
    amenities: str = ""
    other_info: str = ""

    # Address
    postal_code: str = ""
    city: str = ""
    street: str = ""
    house_number: str = ""

    # Prices
    cold_rent: str = ""
    warm_rent: str = ""
    service_charges: str = ""
    deposit: str = ""

    # Areas and counts
    living_area: str = ""
    rooms: str = ""
    bedrooms: str = ""
    bathrooms: str = ""

    # Condition
    construction_year: str = ""

    # Media
    contact_photo: str = ""
    attachment_images: Tuple[AttachmentImage, ...] = ()


class FileBatchEntry(BaseModel):
    """
    A PropertyRecord together with its provenance inside one batch run.

    `skip` is set once the entry has been redirected into a group deletion.
    """

    filename: str
    record: PropertyRecord
    skip: bool = False

    @property
    def obid(self) -> str:
        return self.record.obid

    @property
    def is_delete(self) -> bool:
        return self.record.is_delete


class SyncReport(BaseModel):
    """Outcome counters of one batch run."""

    files_found: int = 0
    records_parsed: int = 0
    parse_failures: int = 0
    deleted_obids: List[str] = Field(default_factory=list)
    feed_files_deleted: int = 0
    imports_succeeded: int = 0
    imports_failed: int = 0
    imports_skipped_existing: int = 0
    published: Optional[bool] = Field(
        None, description="None when no publish was attempted"
    )

    @property
    def has_changes(self) -> bool:
        return self.imports_succeeded > 0 or len(self.deleted_obids) > 0
