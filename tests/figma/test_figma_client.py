"""Tests for the Figma API client."""

import json

import httpx
import pytest

from figma_icon_sync.exceptions import FigmaAPIError
from figma_icon_sync.figma import FigmaClient
from figma_icon_sync.figma.client import traverse_components

DOCUMENT = {
    "id": "0:0",
    "type": "DOCUMENT",
    "children": [
        {
            "id": "0:1",
            "type": "CANVAS",
            "name": "Icons",
            "children": [
                {"id": "1:1", "type": "COMPONENT", "name": "icon/arrow"},
                {
                    "id": "1:2",
                    "type": "FRAME",
                    "name": "Group",
                    "children": [
                        {"id": "1:3", "type": "COMPONENT", "name": "icon/circle"},
                        {"id": "1:4", "type": "TEXT", "name": "label"},
                    ],
                },
                {
                    "id": "1:5",
                    "type": "COMPONENT",
                    "name": "logo/brand",
                    "children": [{"id": "1:6", "type": "COMPONENT", "name": "nested"}],
                },
            ],
        }
    ],
}

SVGS = {
    "1:1": '<svg viewBox="0 0 24 24"><path d="M0 0"/></svg>',
    "1:3": '<svg viewBox="0 0 16 16"><circle r="6"/></svg>',
    "1:5": '<svg viewBox="0 0 32 32"><rect/></svg>',
}


def figma_handler(requests=None, images_error=None, missing=()):
    """Fake Figma API plus its S3 image host."""

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        path = request.url.path

        if request.url.host == "s3.example.com":
            return httpx.Response(200, text=SVGS[path.lstrip("/")])
        if path == "/v1/files/KEY":
            return httpx.Response(200, json={"name": "Icons", "document": DOCUMENT})
        if path == "/v1/files/KEY/nodes":
            node_id = request.url.params["ids"]
            if node_id == "0:1":
                return httpx.Response(
                    200, json={"nodes": {"0:1": {"document": DOCUMENT["children"][0]}}}
                )
            return httpx.Response(200, json={"nodes": {node_id: None}})
        if path == "/v1/images/KEY":
            if images_error:
                return httpx.Response(200, json={"err": images_error, "images": {}})
            ids = request.url.params["ids"].split(",")
            images = {
                node_id: None if node_id in missing else f"https://s3.example.com/{node_id}"
                for node_id in ids
            }
            return httpx.Response(200, json={"err": None, "images": images})
        return httpx.Response(404, json={"status": 404, "err": "Not found"})

    return handler


def make_client(handler, token: str = "secret") -> FigmaClient:
    return FigmaClient(token, "KEY", transport=httpx.MockTransport(handler))


def test_traverse_components():
    names = [node["name"] for node in traverse_components(DOCUMENT)]
    assert names == ["icon/arrow", "icon/circle", "logo/brand"]


def test_traverse_components_of_component():
    node = {"id": "1", "type": "COMPONENT", "name": "solo"}
    assert list(traverse_components(node)) == [node]


@pytest.mark.asyncio
async def test_get_icons_whole_file():
    requests = []
    async with make_client(figma_handler(requests)) as client:
        icons = await client.get_icons()

    assert [icon.name for icon in icons] == ["icon/arrow", "icon/circle", "logo/brand"]
    assert [icon.remote_id for icon in icons] == ["1:1", "1:3", "1:5"]
    assert icons[0].original_name == "icon/arrow"
    assert icons[1].content == SVGS["1:3"]
    api_requests = [r for r in requests if r.url.host == "api.figma.com"]
    assert all(request.headers["X-Figma-Token"] == "secret" for request in api_requests)

    export = next(r for r in requests if r.url.path == "/v1/images/KEY")
    assert export.url.params["format"] == "svg"
    assert export.url.params["ids"] == "1:1,1:3,1:5"


@pytest.mark.asyncio
async def test_image_downloads_do_not_send_token():
    requests = []
    async with make_client(figma_handler(requests)) as client:
        svgs = await client.export_svgs(["1:1", "1:3"])

    assert svgs == {"1:1": SVGS["1:1"], "1:3": SVGS["1:3"]}
    downloads = [r for r in requests if r.url.host == "s3.example.com"]
    assert len(downloads) == 2
    assert all("x-figma-token" not in request.headers for request in downloads)


@pytest.mark.asyncio
async def test_image_download_error():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "s3.example.com":
            return httpx.Response(403, text="expired")
        return figma_handler()(request)

    async with make_client(handler) as client:
        with pytest.raises(FigmaAPIError, match="403"):
            await client.export_svgs(["1:1"])


@pytest.mark.asyncio
async def test_get_icons_under_node():
    async with make_client(figma_handler()) as client:
        icons = await client.get_icons(node_id="0:1")
    assert len(icons) == 3


@pytest.mark.asyncio
async def test_get_icons_with_name_filter():
    async with make_client(figma_handler()) as client:
        icons = await client.get_icons(name_filter="^icon/")
    assert [icon.name for icon in icons] == ["icon/arrow", "icon/circle"]


@pytest.mark.asyncio
async def test_get_icons_none_match():
    requests = []
    async with make_client(figma_handler(requests)) as client:
        icons = await client.get_icons(name_filter="^nothing")

    assert icons == []
    assert not any(r.url.path.startswith("/v1/images") for r in requests)


@pytest.mark.asyncio
async def test_icons_without_export_url_are_skipped():
    async with make_client(figma_handler(missing={"1:3"})) as client:
        icons = await client.get_icons()
    assert [icon.remote_id for icon in icons] == ["1:1", "1:5"]


@pytest.mark.asyncio
async def test_unknown_node():
    async with make_client(figma_handler()) as client:
        with pytest.raises(FigmaAPIError, match="not found"):
            await client.find_icon_nodes("9:9")


@pytest.mark.asyncio
async def test_export_error_reported_by_figma():
    async with make_client(figma_handler(images_error="Render timeout")) as client:
        with pytest.raises(FigmaAPIError, match="Render timeout"):
            await client.export_svgs(["1:1"])


@pytest.mark.asyncio
async def test_export_nothing():
    async with make_client(figma_handler()) as client:
        assert await client.export_svgs([]) == {}


@pytest.mark.asyncio
async def test_http_error_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, text=json.dumps({"status": 403, "err": "Invalid token"}))

    async with make_client(handler) as client:
        with pytest.raises(FigmaAPIError, match="403"):
            await client.get_file()


@pytest.mark.asyncio
async def test_connection_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with make_client(handler) as client:
        with pytest.raises(FigmaAPIError, match="connection refused"):
            await client.get_file()
