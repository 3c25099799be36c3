"""Shared fixtures: explicit settings, NeoWs payload builder and httpx mock transports."""

import os
import sys
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

# Ensure project root is on sys.path so that `space_explorer` resolves without install.
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from space_explorer.settings import Settings  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        nasa_api_key="test-api-key",
        nasa_base_url="https://nasa.test",
        image_search_url="https://images.test/search",
        iss_position_url="https://iss.test/iss-now.json",
        spacex_base_url="https://spacex.test/v4",
        request_timeout_s=1.0,
        log_level="WARNING",
    )


def make_neo(
    name: str = "(2000) LF3",
    hazardous: Optional[bool] = False,
    miss_km: Any = "750000",
    velocity_kmh: Any = "28500",
    diameter_max: Optional[float] = 0.05,
    approaches: bool = True,
) -> Dict[str, Any]:
    neo: Dict[str, Any] = {"name": name, "is_potentially_hazardous_asteroid": hazardous}
    if approaches:
        neo["close_approach_data"] = [
            {
                "miss_distance": {"kilometers": miss_km},
                "relative_velocity": {"kilometers_per_hour": velocity_kmh},
            }
        ]
    if diameter_max is not None:
        neo["estimated_diameter"] = {"kilometers": {"estimated_diameter_max": diameter_max}}
    return neo


@pytest.fixture
def neo_factory() -> Callable[..., Dict[str, Any]]:
    return make_neo


class Recorder:
    """Handler for httpx.MockTransport that records every request it sees."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]):
        self.respond = respond
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    @property
    def queries(self) -> List[str]:
        return [r.url.params.get("q") for r in self.requests]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


def _connect_error(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("network down", request=request)


@pytest.fixture
def offline() -> Recorder:
    return Recorder(_connect_error)


def image_item(title: str, description: str = "", href: str = "https://images.test/a.jpg") -> Dict[str, Any]:
    return {
        "data": [{"title": title, "description": description}],
        "links": [{"href": href}],
    }


def image_collection(*items: Dict[str, Any]) -> Dict[str, Any]:
    return {"collection": {"items": list(items)}}
