"""Figma REST API client."""

import asyncio
import re
from typing import Any, Dict, List, Optional, Pattern, Sequence, Union

import httpx
from loguru import logger

from figma_icon_sync.exceptions import FigmaAPIError
from figma_icon_sync.models import RawAsset

FIGMA_API_URL = "https://api.figma.com/v1"

FigmaNode = Dict[str, Any]


class FigmaClient:
    """
    Reads icon components from a Figma file and exports them as SVG.

    Use as an async context manager, or call close() when done.
    """

    def __init__(
        self,
        access_token: str,
        file_key: str,
        *,
        base_url: str = FIGMA_API_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.file_key = file_key
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"X-Figma-Token": access_token},
            timeout=timeout,
            transport=transport,
        )
        # Exported images live on a third-party host and must not see the token
        self._downloads = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self) -> "FigmaClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()
        await self._downloads.aclose()

    async def _get(
        self,
        url: str,
        params: Optional[Dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> httpx.Response:
        client = client or self._client
        try:
            response = await client.get(url, params=params)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            raise FigmaAPIError(
                f"Figma API request failed ({e.response.status_code}): {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise FigmaAPIError(f"Figma API request failed: {e}") from e

    async def get_file(self) -> Dict[str, Any]:
        """Fetch the whole file document."""
        response = await self._get(f"/files/{self.file_key}")
        return response.json()

    async def get_node(self, node_id: str) -> Optional[FigmaNode]:
        """Fetch a single node (frame or page) by id."""
        response = await self._get(f"/files/{self.file_key}/nodes", params={"ids": node_id})
        node = (response.json().get("nodes") or {}).get(node_id)
        return node.get("document") if node else None

    async def find_icon_nodes(self, node_id: Optional[str] = None) -> List[FigmaNode]:
        """Find every component under node_id, or under the whole file."""
        if node_id:
            root = await self.get_node(node_id)
            if root is None:
                raise FigmaAPIError(f"Node {node_id} not found in file {self.file_key}")
        else:
            root = (await self.get_file())["document"]
        return list(traverse_components(root))

    async def export_svgs(self, node_ids: Sequence[str]) -> Dict[str, str]:
        """Render nodes as SVG and download the results, keyed by node id."""
        if not node_ids:
            return {}

        response = await self._get(
            f"/images/{self.file_key}", params={"ids": ",".join(node_ids), "format": "svg"}
        )
        payload = response.json()
        if payload.get("err"):
            raise FigmaAPIError(f"Figma could not export SVGs: {payload['err']}")
        image_urls: Dict[str, Optional[str]] = payload.get("images") or {}

        async def download(node_id: str, url: str) -> tuple[str, str]:
            # Image URLs are absolute, pre-signed S3 links
            svg = await self._get(url, client=self._downloads)
            return node_id, svg.text

        downloads = await asyncio.gather(
            *(download(node_id, url) for node_id, url in image_urls.items() if url)
        )
        return dict(downloads)

    async def get_icons(
        self,
        node_id: Optional[str] = None,
        name_filter: Optional[Union[str, Pattern[str]]] = None,
    ) -> List[RawAsset]:
        """Fetch every icon component with its SVG content."""
        nodes = await self.find_icon_nodes(node_id)
        logger.debug(f"Found {len(nodes)} component(s) in Figma")

        if name_filter is not None:
            pattern = re.compile(name_filter) if isinstance(name_filter, str) else name_filter
            nodes = [node for node in nodes if pattern.search(node["name"])]

        if not nodes:
            return []

        svgs = await self.export_svgs([node["id"] for node in nodes])
        return [
            RawAsset(
                name=node["name"],
                original_name=node["name"],
                content=svgs[node["id"]],
                remote_id=node["id"],
            )
            for node in nodes
            if svgs.get(node["id"])
        ]


def traverse_components(node: FigmaNode):
    """Yield component nodes depth-first; components are not descended into."""
    if node.get("type") == "COMPONENT":
        yield node
        return

    for child in node.get("children") or []:
        yield from traverse_components(child)
