import io
import zipfile

import httpx
import pytest

from rankradar.errors import ConfigError, SourceError, StructuralError
from rankradar.sources import fetch_ahrefs, fetch_radar, fetch_tranco, parse_tranco_csv


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)


def _zip(name: str, text: str) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr(name, text)
    return buf.getvalue()


def test_parse_tranco_csv_filters_suffix_and_bad_lines():
    text = "1,google.com\r\n2,google.com.tw\n\nbad line\nx,yahoo.tw\n3, www.gov.tw \n4,tw.example.com\n"
    sites = parse_tranco_csv(text, ".tw")
    assert [s.model_dump() for s in sites] == [
        {"rank": 2, "domain": "google.com.tw", "url": "https://google.com.tw"},
        {"rank": 3, "domain": "www.gov.tw", "url": "https://www.gov.tw"},
    ]


@pytest.mark.asyncio
async def test_fetch_ahrefs_follows_redirect(make_page, make_row):
    page = make_page(make_row("1", "google.com.tw", "Search", "80.4M"))

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/websites/taiwan":
            return httpx.Response(301, headers={"Location": "/en/websites/taiwan"})
        return httpx.Response(200, text=page)

    async with _client(handler) as client:
        sites = await fetch_ahrefs(client, "https://ahrefstop.test/websites/taiwan")
    assert sites[0].search_traffic_K == 80400


@pytest.mark.asyncio
async def test_fetch_ahrefs_empty_table_is_source_error(make_page):
    async with _client(lambda r: httpx.Response(200, text=make_page())) as client:
        with pytest.raises(SourceError):
            await fetch_ahrefs(client, "https://ahrefstop.test/websites/taiwan")


@pytest.mark.asyncio
async def test_fetch_ahrefs_layout_change_is_structural_error():
    async with _client(lambda r: httpx.Response(200, text="<div>maintenance</div>")) as client:
        with pytest.raises(StructuralError):
            await fetch_ahrefs(client, "https://ahrefstop.test/websites/taiwan")


@pytest.mark.asyncio
async def test_fetch_http_error_status_is_source_error():
    async with _client(lambda r: httpx.Response(503)) as client:
        with pytest.raises(SourceError, match="503"):
            await fetch_ahrefs(client, "https://ahrefstop.test/websites/taiwan")


@pytest.mark.asyncio
async def test_fetch_tranco_reads_zip_member():
    payload = _zip("top-1m.csv", "1,google.com\n2,shopee.tw\n3,www.shopee.tw\n")
    async with _client(lambda r: httpx.Response(200, content=payload)) as client:
        sites = await fetch_tranco(client, "https://tranco.test/top-1m.csv.zip", suffix=".tw")
    assert [s.domain for s in sites] == ["shopee.tw", "www.shopee.tw"]


@pytest.mark.asyncio
async def test_fetch_tranco_missing_member():
    payload = _zip("other.csv", "1,a.tw\n")
    async with _client(lambda r: httpx.Response(200, content=payload)) as client:
        with pytest.raises(SourceError, match="top-1m.csv"):
            await fetch_tranco(client, "https://tranco.test/top-1m.csv.zip")


@pytest.mark.asyncio
async def test_fetch_tranco_not_a_zip():
    async with _client(lambda r: httpx.Response(200, content=b"<html>")) as client:
        with pytest.raises(SourceError):
            await fetch_tranco(client, "https://tranco.test/top-1m.csv.zip")


@pytest.mark.asyncio
async def test_fetch_radar_sends_token_and_maps_entries():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("authorization")
        seen["params"] = dict(request.url.params)
        return httpx.Response(
            200,
            json={
                "success": True,
                "result": {
                    "top_0": [
                        {"rank": 1, "domain": "google.com", "categories": [{"id": 1, "name": "Search"}]},
                        {"rank": 2, "domain": "line.me"},
                    ]
                },
            },
        )

    async with _client(handler) as client:
        entries = await fetch_radar(client, location="TW", limit=2, token="t0k")
    assert seen["auth"] == "Bearer t0k"
    assert seen["params"] == {"location": "TW", "limit": "2", "format": "json"}
    assert [e.model_dump() for e in entries] == [
        {"rank": 1, "domain": "google.com", "categories": [{"id": 1, "name": "Search"}]},
        {"rank": 2, "domain": "line.me", "categories": []},
    ]


@pytest.mark.asyncio
async def test_fetch_radar_api_failure():
    body = {"success": False, "errors": [{"code": 10000, "message": "Authentication error"}]}
    async with _client(lambda r: httpx.Response(200, json=body)) as client:
        with pytest.raises(SourceError, match="Authentication error"):
            await fetch_radar(client, token="bad")


@pytest.mark.asyncio
@pytest.mark.parametrize("token", ["", "YOUR_API_TOKEN_HERE"])
async def test_fetch_radar_requires_token(token):
    async with _client(lambda r: httpx.Response(500)) as client:
        with pytest.raises(ConfigError):
            await fetch_radar(client, token=token)


@pytest.mark.asyncio
@pytest.mark.parametrize("item", [{"rank": 1}, {"rank": "first", "domain": "a.tw"}, "google.com"])
async def test_fetch_radar_malformed_entry_is_source_error(item):
    body = {"success": True, "result": {"top_0": [item]}}
    async with _client(lambda r: httpx.Response(200, json=body)) as client:
        with pytest.raises(SourceError, match="malformed entry"):
            await fetch_radar(client, token="t0k")
