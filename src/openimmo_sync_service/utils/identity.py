"""
Utility functions for deriving listing identity: OBID, slug, display name and
the link name taken from the feed filename.
"""

import re
from typing import Iterable

UNKNOWN_OBID_LABEL = "unknown"
NAME_PREFIX = "Listing"

_WHITESPACE_RUN = re.compile(r"\s+")
_INVALID_SLUG_CHARS = re.compile(r"[^a-z0-9\-]")
_HYPHEN_RUN = re.compile(r"-{2,}")


def slugify(text: str) -> str:
    """
    Turn arbitrary text into a URL slug.

    Lower-cases the text, replaces whitespace runs with a single hyphen, drops
    every character outside ``[a-z0-9-]``, collapses repeated hyphens and trims
    hyphens from both ends.

    Examples:
        >>> slugify("Nice Flat-OBID-9")
        'nice-flat-obid-9'
        >>> slugify("Grand Ävenue !!")
        'grand-venue'
    """
    if not text:
        return ""
    slug = _WHITESPACE_RUN.sub("-", text.lower().strip())
    slug = _INVALID_SLUG_CHARS.sub("", slug)
    slug = _HYPHEN_RUN.sub("-", slug)
    return slug.strip("-")


def resolve_obid(candidates: Iterable[str]) -> str:
    """
    Return the first non-empty identifier from candidates given in priority order.

    The feed provides openimmo_obid, objektnr_extern and objektnr_intern; callers
    pass them in that order.
    """
    for candidate in candidates:
        if candidate:
            return candidate
    return ""


def derive_name(title: str, obid: str, street: str, house_number: str, is_delete: bool) -> str:
    """
    Display name of a listing.

    Deletions are named after their address. Other listings use the title, or a
    generic label built from the OBID when the title is empty.
    """
    if is_delete:
        return f"{street} {house_number}".strip()
    if title:
        return title
    return f"{NAME_PREFIX} {obid or UNKNOWN_OBID_LABEL}"


def derive_slug(
    title: str, obid: str, street: str, house_number: str, is_delete: bool, name: str = ""
) -> str:
    """
    URL slug of a listing.

    Args:
        title: objekttitel of the listing
        obid: resolved OBID, may be empty
        street: strasse from the geo section
        house_number: hausnummer from the geo section
        is_delete: whether the document is a deletion
        name: display name used when the derived slug comes out empty

    Returns:
        str: ``slugify(title-obid)``, ``slugify(title)`` without an OBID, or
        ``slugify(street house_number)`` for deletions
    """
    if is_delete:
        slug = slugify(f"{street} {house_number}".strip())
    elif obid:
        slug = slugify(f"{title}-{obid}")
    else:
        slug = slugify(title)
    return slug or slugify(name)


def extract_name_for_link(filename: str) -> str:
    """
    Extract the link name embedded in a feed filename.

    The link name is the text strictly between the first ``_`` and the first
    ``+`` that follows it.

    Examples:
        >>> extract_name_for_link("feed_42+extra.xml")
        '42'
        >>> extract_name_for_link("feed.xml")
        ''
    """
    if not filename:
        return ""
    start = filename.find("_")
    if start == -1:
        return ""
    end = filename.find("+", start + 1)
    if end == -1:
        return ""
    return filename[start + 1 : end]
