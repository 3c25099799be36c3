import httpx
import structlog
from typing import Any, Dict, Optional

from .errors import UpstreamError
from .settings import Settings

log = structlog.get_logger(__name__)

USER_AGENT = "space-explorer/1.0 (+local)"


async def _get_json(
    settings: Settings,
    service: str,
    url: str,
    params: Optional[Dict[str, Any]] = None,
    http: Optional[httpx.AsyncClient] = None,
) -> Any:
    params = {k: v for k, v in (params or {}).items() if v is not None}

    owns_client = http is None
    http = http or httpx.AsyncClient(
        timeout=settings.request_timeout_s,
        headers={"User-Agent": USER_AGENT},
        follow_redirects=True,
    )
    try:
        r = await http.get(url, params=params, timeout=settings.request_timeout_s)
        r.raise_for_status()
        return r.json()
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        log.warning("upstream_error", service=service, url=url, status=status)
        raise UpstreamError(service, f"HTTP {status}", status_code=status) from e
    except httpx.HTTPError as e:
        log.warning("upstream_unreachable", service=service, url=url, error=repr(e))
        raise UpstreamError(service, str(e) or type(e).__name__) from e
    except ValueError as e:
        log.warning("upstream_bad_body", service=service, url=url)
        raise UpstreamError(service, "response body is not valid JSON") from e
    finally:
        if owns_client:
            await http.aclose()


def _nasa_url(settings: Settings, path: str) -> str:
    return f"{settings.nasa_base_url.rstrip('/')}{path}"


async def fetch_apod(
    settings: Settings,
    date: Optional[str] = None,
    count: Optional[int] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    http: Optional[httpx.AsyncClient] = None,
) -> Any:
    params = {
        "api_key": settings.nasa_api_key,
        "date": date,
        "count": count,
        "start_date": start_date,
        "end_date": end_date,
    }
    return await _get_json(
        settings, "NASA APOD", _nasa_url(settings, "/planetary/apod"), params, http
    )


async def fetch_neo_feed(
    settings: Settings,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    http: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    params = {
        "api_key": settings.nasa_api_key,
        "start_date": start_date,
        "end_date": end_date,
    }
    return await _get_json(
        settings, "NASA NeoWs", _nasa_url(settings, "/neo/rest/v1/feed"), params, http
    )


async def fetch_neo(
    settings: Settings, neo_id: str, http: Optional[httpx.AsyncClient] = None
) -> Dict[str, Any]:
    return await _get_json(
        settings,
        "NASA NeoWs",
        _nasa_url(settings, f"/neo/rest/v1/neo/{neo_id}"),
        {"api_key": settings.nasa_api_key},
        http,
    )


async def fetch_mars_photos(
    settings: Settings,
    rover: str,
    sol: Optional[int] = None,
    earth_date: Optional[str] = None,
    camera: Optional[str] = None,
    page: Optional[int] = None,
    http: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    params = {
        "api_key": settings.nasa_api_key,
        "sol": sol,
        "earth_date": earth_date,
        "camera": camera,
        "page": page,
    }
    return await _get_json(
        settings,
        "NASA Mars Rover Photos",
        _nasa_url(settings, f"/mars-photos/api/v1/rovers/{rover}/photos"),
        params,
        http,
    )


async def fetch_iss_position(
    settings: Settings, http: Optional[httpx.AsyncClient] = None
) -> Dict[str, Any]:
    return await _get_json(settings, "Open Notify", settings.iss_position_url, http=http)


async def search_images(
    settings: Settings,
    q: str,
    media_type: str = "image",
    http: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    """NASA Image and Video Library search; returns the raw `collection` envelope."""
    return await _get_json(
        settings,
        "NASA Image Library",
        settings.image_search_url,
        {"q": q, "media_type": media_type},
        http,
    )


async def fetch_launches(
    settings: Settings,
    kind: Optional[str] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    sort: Optional[str] = None,
    order: Optional[str] = None,
    http: Optional[httpx.AsyncClient] = None,
) -> Any:
    """SpaceX launches; `kind` selects upcoming/past/latest/next, None lists all."""
    path = "/launches" if kind is None else f"/launches/{kind}"
    params = {"limit": limit, "offset": offset, "sort": sort, "order": order}
    return await _get_json(
        settings,
        "SpaceX",
        f"{settings.spacex_base_url.rstrip('/')}{path}",
        params,
        http,
    )
