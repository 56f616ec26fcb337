"""
CMS Gateway: the listing-level operations the sync performs against Webflow.

Each logical operation is backed by an ordered list of call strategies. The
strategies all perform the same operation through different Webflow entry
points and are tried until one succeeds; callers only see success or failure.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from openimmo_sync_service.clients.webflow_api_client import WebflowApiClient
from openimmo_sync_service.config import settings
from openimmo_sync_service.exceptions import CmsApiError, CmsOperationError
from openimmo_sync_service.schemas.property_record import PropertyRecord
from openimmo_sync_service.utils.obid_matching import item_id, item_matches_obid

logger = logging.getLogger(__name__)

Strategy = Tuple[str, Callable[..., Awaitable[Any]]]

MAX_NAME_LENGTH = 256
IMAGE_FIELDS = ("kontaktfoto", "multi-images", "anhang_image_1")
IDENTITY_FIELDS = ("name", "slug", "openimmo-obid")


def rich_text(value: str) -> str:
    return f"<p>{value or ''}</p>"


def image_field(url: str, alt: str = "") -> Optional[Dict[str, str]]:
    """Format an image for a Webflow image field; None for non-URL paths."""
    if not url:
        return None
    if not url.startswith(("http://", "https://")):
        logger.warning(f"Invalid image URL format: {url}")
        return None
    return {"url": url, "alt": alt}


def build_image_fields(record: PropertyRecord) -> Dict[str, Any]:
    """Contact photo, the multi-images gallery and the first image as thumbnail."""
    fields: Dict[str, Any] = {}
    contact_photo = image_field(record.contact_photo, alt=record.name)
    if contact_photo:
        fields["kontaktfoto"] = contact_photo

    gallery = []
    for image in record.attachment_images:
        formatted = image_field(image.path, alt=image.title or record.name)
        if formatted:
            gallery.append(formatted)
    if gallery:
        fields["multi-images"] = gallery
        fields["anhang_image_1"] = gallery[0]
    return fields


def build_field_data(record: PropertyRecord, slug: str) -> Dict[str, Any]:
    """
    Map a PropertyRecord onto the collection's field schema.

    Args:
        record: The listing to send
        slug: Slug to use; the gateway always passes a fresh timestamp slug

    Returns:
        Dict[str, Any]: Webflow fieldData
    """
    field_data = {
        # Identity
        "name": record.name[:MAX_NAME_LENGTH],
        "slug": slug,
        "openimmo-obid": record.obid,
        "name-for-link": record.name_for_link,
        # Plain text
        "firma": record.provider_company,
        "objekttitel": record.title,
        "plz": record.postal_code,
        "ort": record.city,
        "strasse": record.street,
        "hausnummer": record.house_number,
        # Numbers, sent as strings
        "kaltmiete": str(record.cold_rent),
        "warmmiete": str(record.warm_rent),
        "nebenkosten": str(record.service_charges),
        "kaution": str(record.deposit),
        "wohnflaeche": str(record.living_area),
        "anzahl-zimmer": str(record.rooms),
        "anzahl-schlafzimmer": str(record.bedrooms),
        "anzahl-badezimmer": str(record.bathrooms),
        "baujahr": str(record.construction_year),
        # Rich text
        "lage": rich_text(record.location_description),
        "objektbeschreibung": rich_text(record.description),
        "ausstatt-beschr": rich_text(record.amenities),
        "sonstige-angaben": rich_text(record.other_info),
    }
    field_data.update(build_image_fields(record))
    return field_data


def without_images(field_data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in field_data.items() if key not in IMAGE_FIELDS}


def identity_only(field_data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: field_data[key] for key in IDENTITY_FIELDS if key in field_data}


def timestamp_slug() -> str:
    return f"property-{int(time.time() * 1000)}"


class CmsGateway:
    """
    Listing operations against one Webflow collection and its site.
    """

    def __init__(
        self,
        api_client: WebflowApiClient = None,
        collection_id: str = None,
        site_id: str = None,
    ):
        self.api = api_client or WebflowApiClient()
        self.collection_id = collection_id or settings.COLLECTION_ID
        self.site_id = site_id or settings.SITE_ID

        self.list_strategies: List[Strategy] = [
            ("v2 paginated items", self._list_v2),
            ("legacy v1 items", self._list_legacy),
        ]
        self.delete_strategies: List[Strategy] = [
            ("v2 delete staged item", self._delete_v2),
            ("v2 delete live item", self._delete_live),
            ("legacy v1 delete", self._delete_legacy),
        ]
        self.create_payloads: List[Tuple[str, Callable[[Dict[str, Any]], Dict[str, Any]]]] = [
            ("full field data", dict),
            ("without image fields", without_images),
            ("identity fields only", identity_only),
        ]

    # Strategy executors

    async def _list_v2(self) -> List[Dict[str, Any]]:
        return await self.api.list_all_items(self.collection_id)

    async def _list_legacy(self) -> List[Dict[str, Any]]:
        return await self.api.list_items_legacy(self.collection_id)

    async def _delete_v2(self, target_id: str) -> Any:
        return await self.api.delete_item(self.collection_id, target_id)

    async def _delete_live(self, target_id: str) -> Any:
        return await self.api.delete_live_item(self.collection_id, target_id)

    async def _delete_legacy(self, target_id: str) -> Any:
        return await self.api.delete_item_legacy(self.collection_id, target_id)

    async def _run_strategies(self, operation: str, strategies: List[Strategy], *args) -> Any:
        """
        Try each strategy in order and return the first successful result.

        Raises:
            CmsOperationError: If every strategy failed
        """
        errors = []
        for name, strategy in strategies:
            try:
                logger.info(f"{operation}: using {name}")
                return await strategy(*args)
            except CmsApiError as e:
                logger.error(f"{operation}: {name} failed: {e.message}")
                errors.append((name, e.message))
        raise CmsOperationError(operation, errors)

    # Operations

    async def list_items(self) -> List[Dict[str, Any]]:
        """All items of the collection; an empty list when no strategy works."""
        logger.info(f"Fetching items from collection: {self.collection_id}")
        try:
            items = await self._run_strategies("list items", self.list_strategies)
        except CmsOperationError as e:
            logger.warning(f"Could not get items using any available method: {e}")
            return []
        logger.info(f"Found {len(items)} item(s) in collection")
        return items

    async def find_all_by_obid(self, obid: str) -> List[Dict[str, Any]]:
        items = await self.list_items()
        return [item for item in items if item_matches_obid(item, obid)]

    async def find_by_obid(self, obid: str) -> Optional[Dict[str, Any]]:
        """First item carrying the OBID, or None."""
        if not obid:
            return None
        for item in await self.list_items():
            if item_matches_obid(item, obid):
                return item
        return None

    async def item_exists(self, obid: str) -> bool:
        return await self.find_by_obid(obid) is not None

    async def delete_matching(self, obid: str) -> bool:
        """
        Delete every item carrying the OBID.

        Each match is deleted independently and a failed deletion does not stop
        the others.

        Returns:
            bool: True if at least one deletion succeeded or nothing matched
        """
        matching_items = await self.find_all_by_obid(obid)
        logger.info(
            f"Found {len(matching_items)} matching item(s) for OBID: {obid}. Proceeding with deletion."
        )
        if not matching_items:
            logger.info(f"No items found in Webflow with OBID: {obid}")
            return True

        success_count = 0
        for item in matching_items:
            target_id = item_id(item)
            if not target_id:
                logger.warning(f"Matching item missing id; skipping deletion. Item: {item}")
                continue
            try:
                await self._run_strategies(f"delete item {target_id}", self.delete_strategies, target_id)
            except CmsOperationError as e:
                logger.error(f"Failed to delete item {target_id} after trying all methods: {e}")
                continue
            logger.info(f"Successfully deleted item {target_id}")
            success_count += 1

        logger.info(
            f"Successfully deleted {success_count} of {len(matching_items)} items for OBID: {obid}"
        )
        return success_count > 0

    async def create_item(self, record: PropertyRecord) -> bool:
        """
        Create a collection item for the record.

        A fresh timestamp slug is always used instead of the record's slug.
        On failure the payload is retried without image fields, then with the
        identity fields only.
        """
        if not record.name:
            logger.error(f"Missing required name field for Webflow import: name={record.name}")
            return False

        slug = timestamp_slug()
        logger.info(f"Attempting to import item: {record.name} with unique slug: {slug}")
        field_data = build_field_data(record, slug)

        attempted: List[Dict[str, Any]] = []
        for name, shape in self.create_payloads:
            payload = shape(field_data)
            if payload in attempted:
                logger.info(f"Skipping create with {name}: payload unchanged")
                continue
            attempted.append(payload)
            try:
                logger.info(f"Creating item with {name}: {', '.join(payload.keys())}")
                response = await self.api.create_item(self.collection_id, payload)
            except CmsApiError as e:
                logger.error(f"Create with {name} failed: {e.message}")
                continue
            logger.info(f"Success ({name}): Imported item. ID: {response.get('id')}")
            return True

        logger.error(f"Import failed for OBID {record.obid} after all fallbacks")
        return False

    async def get_collection_info(self) -> Dict[str, Any]:
        return await self.api.get_collection(self.collection_id)

    async def publish(self, max_retries: int = None, retry_delay: float = None) -> bool:
        """
        Publish the site, retrying only on rate limit responses.

        Args:
            max_retries: Retries after a rate limit, defaults to the value in settings
            retry_delay: Fixed delay in seconds between retries, defaults to the value in settings

        Returns:
            bool: True when the site was published
        """
        if max_retries is None:
            max_retries = settings.PUBLISH_MAX_RETRIES
        if retry_delay is None:
            retry_delay = settings.PUBLISH_RETRY_DELAY_SECONDS

        retries = 0
        while retries <= max_retries:
            if retries > 0:
                logger.info(f"Retry attempt {retries}/{max_retries} for publishing site...")
            else:
                logger.info(f"Attempting to publish site with ID: {self.site_id}")
            try:
                response = await self.api.publish_site(self.site_id)
                logger.info(f"Publish response: {response}")
                return True
            except CmsApiError as e:
                logger.error(f"Error publishing site: {e.message}")
                if not e.is_rate_limited:
                    return False
                retries += 1
                if retries > max_retries:
                    logger.error(f"Maximum retries ({max_retries}) reached for rate limit. Giving up.")
                    return False
                logger.warning(
                    f"Rate limit hit. Waiting for {retry_delay} seconds before retry {retries}/{max_retries}..."
                )
                await asyncio.sleep(retry_delay)
        return False
