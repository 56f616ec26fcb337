"""
Webflow API Client for collection items and site publishing.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from openimmo_sync_service.config import settings
from openimmo_sync_service.exceptions import CmsApiError

logger = logging.getLogger(__name__)

LEGACY_API_VERSION = "1.0.0"
PAGE_SIZE = 100

_STATUS_HINTS = {
    400: "Bad Request (400) - check the collection/site id and the field payload.",
    401: "Unauthorized (401) means your API token is invalid or expired.",
    403: "Forbidden (403) means your API token lacks CMS or publish permissions.",
    404: "Not Found (404) means the collection, item or site id is invalid.",
}


class WebflowApiClient:
    """
    Thin client for the Webflow REST API.

    Exposes the v2 endpoints used by the sync and the legacy v1 endpoints
    kept as fallbacks. Every failure is raised as CmsApiError.
    """

    def __init__(
        self,
        token: str = None,
        base_url: str = None,
        timeout: float = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the Webflow API Client.

        Args:
            token: API token, defaults to the value in settings
            base_url: API root, defaults to the value in settings
            timeout: Request timeout in seconds, defaults to the value in settings
            transport: Optional httpx transport, used by tests
        """
        self.token = token or settings.WEBFLOW_TOKEN
        self.base_url = (base_url or settings.WEBFLOW_API_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.WEBFLOW_REQUEST_TIMEOUT_SECONDS
        self._transport = transport

        masked_token = "*****" + self.token[-6:] if self.token else "None"
        logger.info(f"WebflowApiClient initialized with token ending in: {masked_token}")

        self._default_headers = {
            "Accept": "application/json",
            "Authorization": f"Bearer {self.token}",
        }

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Make a request to the Webflow API.

        Returns:
            Dict[str, Any]: Parsed JSON body, empty for bodiless responses

        Raises:
            CmsApiError: On transport errors and non-2xx responses
        """
        url = f"{self.base_url}{path}"
        request_headers = dict(self._default_headers)
        if headers:
            request_headers.update(headers)

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.request(
                    method,
                    url,
                    json=json,
                    params=params,
                    headers=request_headers,
                    timeout=self.timeout,
                )
        except httpx.HTTPError as e:
            logger.error(f"HTTP error when calling Webflow API: {str(e)}")
            raise CmsApiError(f"Webflow API unavailable: {str(e)}")

        if response.is_error:
            payload = _safe_json(response)
            code = payload.get("code") if isinstance(payload, dict) else None
            message = payload.get("message") if isinstance(payload, dict) else None
            status_code = response.status_code
            logger.error(f"Webflow API {method} {path} failed. Status: {status_code}")
            logger.error(f"Error data: {payload}")
            if status_code in _STATUS_HINTS:
                logger.error(_STATUS_HINTS[status_code])
            if status_code == 429:
                message = f"TooManyRequestsError: {message or response.reason_phrase}"
            raise CmsApiError(
                message or f"Webflow API error {status_code}: {response.reason_phrase}",
                status_code=status_code,
                code=code,
                payload=payload,
            )

        if not response.content:
            return {}
        body = _safe_json(response)
        return body if isinstance(body, dict) else {"items": body}

    # Collections

    async def get_collection(self, collection_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/v2/collections/{collection_id}")

    async def list_items_page(
        self, collection_id: str, offset: int = 0, limit: int = PAGE_SIZE
    ) -> Dict[str, Any]:
        return await self._request(
            "GET",
            f"/v2/collections/{collection_id}/items",
            params={"offset": offset, "limit": limit},
        )

    async def list_all_items(self, collection_id: str) -> List[Dict[str, Any]]:
        """Load every item of a collection by paging through the v2 API."""
        items: List[Dict[str, Any]] = []
        offset = 0
        while True:
            page = await self.list_items_page(collection_id, offset=offset)
            page_items = page.get("items")
            if not isinstance(page_items, list):
                raise CmsApiError("Unexpected list response: no items array", payload=page)
            items.extend(page_items)

            total = (page.get("pagination") or {}).get("total")
            offset += len(page_items)
            if not page_items or total is None or offset >= total:
                return items

    async def list_items_legacy(self, collection_id: str) -> List[Dict[str, Any]]:
        page = await self._request(
            "GET",
            f"/collections/{collection_id}/items",
            headers={"accept-version": LEGACY_API_VERSION},
        )
        items = page.get("items")
        if not isinstance(items, list):
            raise CmsApiError("Unexpected legacy list response: no items array", payload=page)
        return items

    async def create_item(
        self,
        collection_id: str,
        field_data: Dict[str, Any],
        is_draft: bool = False,
        is_archived: bool = False,
    ) -> Dict[str, Any]:
        return await self._request(
            "POST",
            f"/v2/collections/{collection_id}/items",
            json={"isArchived": is_archived, "isDraft": is_draft, "fieldData": field_data},
        )

    async def delete_item(self, collection_id: str, item_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/v2/collections/{collection_id}/items/{item_id}")

    async def delete_live_item(self, collection_id: str, item_id: str) -> Dict[str, Any]:
        return await self._request(
            "DELETE", f"/v2/collections/{collection_id}/items/{item_id}/live"
        )

    async def delete_item_legacy(self, collection_id: str, item_id: str) -> Dict[str, Any]:
        return await self._request(
            "DELETE",
            f"/collections/{collection_id}/items/{item_id}",
            headers={"accept-version": LEGACY_API_VERSION},
        )

    # Sites

    async def publish_site(
        self, site_id: str, publish_to_webflow_subdomain: bool = True
    ) -> Dict[str, Any]:
        return await self._request(
            "POST",
            f"/v2/sites/{site_id}/publish",
            json={"publishToWebflowSubdomain": publish_to_webflow_subdomain},
        )


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {"message": response.text}
