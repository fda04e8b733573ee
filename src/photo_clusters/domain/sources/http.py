from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from photo_clusters.core.exceptions import AssetSourceError, PermissionDeniedError
from photo_clusters.domain.sources.base import AssetSource, SourceCapabilities
from photo_clusters.schemas.asset import AssetPage, CoarseGroup
from photo_clusters.schemas.enum import PermissionStatus

logger = logging.getLogger(__name__)


class HttpAssetSource(AssetSource):
    """
    Client for a remote media service.

    Endpoints (all JSON):
      GET  /assets?limit=&cursor=&created_after=&created_before=
      GET  /albums/{album_id}/assets?limit=&cursor=
      GET  /moments
      GET  /permission
      POST /permission
      POST /permission/picker
    Asset pages use the ``AssetPage`` shape.
    """

    capabilities = SourceCapabilities(
        coarse_groups=True,
        range_queries=True,
        album_queries=True,
        limited_picker=True,
    )

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"x-api-key": api_key} if api_key else {}
        self.client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        logger.debug(f"HttpAssetSource initialized for {base_url}")

    async def _request(self, method: str, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            resp = await self.client.request(method, url, params=params)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            if e.response.status_code in (401, 403):
                logger.warning(f"Media service refused {method} {url}: {e.response.status_code}")
                raise PermissionDeniedError(f"Media service denied access to {url}") from e
            logger.error(f"Media service returned {e.response.status_code} for {method} {url}")
            raise AssetSourceError(f"Media service error {e.response.status_code} on {url}") from e
        except httpx.HTTPError as e:
            logger.error(f"Media service request {method} {url} failed: {e}")
            raise AssetSourceError(f"Media service unreachable: {e}") from e
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise AssetSourceError(f"Media service sent invalid JSON for {method} {url}") from e

    async def _page(self, url: str, params: Dict[str, Any]) -> AssetPage:
        data = await self._request("GET", url, params=params)
        return AssetPage.model_validate(data or {})

    async def list_recent_photos(self, page_size: int, cursor: Optional[str] = None) -> AssetPage:
        return await self._page("/assets", {"limit": page_size, "cursor": cursor})

    async def list_photos_in_range(
        self, start_ms: float, end_ms: float, page_size: int, cursor: Optional[str] = None
    ) -> AssetPage:
        return await self._page(
            "/assets",
            {
                "limit": page_size,
                "cursor": cursor,
                "created_after": int(start_ms),
                "created_before": int(end_ms),
            },
        )

    async def list_photos_in_album(self, album_id: str, page_size: int, cursor: Optional[str] = None) -> AssetPage:
        return await self._page(f"/albums/{album_id}/assets", {"limit": page_size, "cursor": cursor})

    async def list_coarse_groups(self) -> List[CoarseGroup]:
        data = await self._request("GET", "/moments")
        return [CoarseGroup.model_validate(item) for item in data or []]

    async def _permission(self, method: str) -> PermissionStatus:
        data = await self._request(method, "/permission")
        try:
            return PermissionStatus(data["status"])
        except (TypeError, KeyError, ValueError) as e:
            logger.error(f"Media service sent an unreadable permission payload: {data!r}")
            raise AssetSourceError(f"Unreadable permission status from media service: {data!r}") from e

    async def get_permission(self) -> PermissionStatus:
        return await self._permission("GET")

    async def request_permission(self) -> PermissionStatus:
        return await self._permission("POST")

    async def present_permissions_picker(self) -> None:
        await self._request("POST", "/permission/picker")

    async def aclose(self) -> None:
        await self.client.aclose()
