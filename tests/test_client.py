import httpx
import pytest

from conftest import Recorder
from space_explorer import client
from space_explorer.errors import UpstreamError


@pytest.mark.asyncio
async def test_apod_sends_key_and_only_given_params(settings):
    recorder = Recorder(lambda request: httpx.Response(200, json={"title": "Test Astronomy Picture"}))
    async with recorder.client() as http:
        data = await client.fetch_apod(settings, count=5, date="2025-06-17", http=http)

    assert data == {"title": "Test Astronomy Picture"}
    (request,) = recorder.requests
    assert request.url.path == "/planetary/apod"
    assert dict(request.url.params) == {
        "api_key": "test-api-key",
        "date": "2025-06-17",
        "count": "5",
    }


@pytest.mark.asyncio
async def test_neo_lookup_path(settings):
    recorder = Recorder(lambda request: httpx.Response(200, json={"id": "3542519"}))
    async with recorder.client() as http:
        await client.fetch_neo(settings, "3542519", http=http)
    assert recorder.requests[0].url.path == "/neo/rest/v1/neo/3542519"


@pytest.mark.asyncio
async def test_neo_feed_dates(settings):
    recorder = Recorder(lambda request: httpx.Response(200, json={"element_count": 0}))
    async with recorder.client() as http:
        await client.fetch_neo_feed(settings, start_date="2025-01-01", http=http)
    params = recorder.requests[0].url.params
    assert params["start_date"] == "2025-01-01"
    assert "end_date" not in params


@pytest.mark.asyncio
async def test_image_search_params(settings):
    recorder = Recorder(lambda request: httpx.Response(200, json={"collection": {"items": []}}))
    async with recorder.client() as http:
        await client.search_images(settings, "asteroid Bennu", http=http)
    request = recorder.requests[0]
    assert str(request.url).startswith("https://images.test/search")
    assert request.url.params["q"] == "asteroid Bennu"
    assert request.url.params["media_type"] == "image"
    assert "api_key" not in request.url.params


@pytest.mark.asyncio
async def test_http_error_status_is_wrapped(settings):
    recorder = Recorder(lambda request: httpx.Response(500, text="boom"))
    async with recorder.client() as http:
        with pytest.raises(UpstreamError) as exc:
            await client.fetch_iss_position(settings, http=http)
    assert exc.value.status_code == 500
    assert exc.value.service == "Open Notify"


@pytest.mark.asyncio
async def test_network_error_is_wrapped(settings, offline):
    async with offline.client() as http:
        with pytest.raises(UpstreamError) as exc:
            await client.fetch_apod(settings, http=http)
    assert exc.value.status_code is None


@pytest.mark.asyncio
async def test_non_json_body_is_wrapped(settings):
    recorder = Recorder(lambda request: httpx.Response(200, text="<html>"))
    async with recorder.client() as http:
        with pytest.raises(UpstreamError, match="not valid JSON"):
            await client.fetch_neo_feed(settings, http=http)


@pytest.mark.asyncio
async def test_mars_photos_by_earth_date(settings):
    recorder = Recorder(lambda request: httpx.Response(200, json={"photos": []}))
    async with recorder.client() as http:
        await client.fetch_mars_photos(settings, "perseverance", earth_date="2024-02-19", http=http)
    request = recorder.requests[0]
    assert request.url.path == "/mars-photos/api/v1/rovers/perseverance/photos"
    assert dict(request.url.params) == {"api_key": "test-api-key", "earth_date": "2024-02-19"}


@pytest.mark.asyncio
async def test_launch_kind_selects_endpoint(settings):
    recorder = Recorder(lambda request: httpx.Response(200, json={"name": "Starlink"}))
    async with recorder.client() as http:
        data = await client.fetch_launches(settings, kind="latest", http=http)
    assert data == {"name": "Starlink"}
    request = recorder.requests[0]
    assert request.url.host == "spacex.test"
    assert request.url.path == "/v4/launches/latest"
    assert "api_key" not in request.url.params
