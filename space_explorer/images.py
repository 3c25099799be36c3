import asyncio
import contextlib
import hashlib
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx
import structlog

from . import client
from .catalog import ASTEROID_CATALOG, KNOWN_TYPES, TYPE_IMAGES, CatalogImage
from .errors import SearchAborted, UpstreamError
from .schemas import AsteroidImageResult, AsteroidType, ImageMatch
from .settings import Settings

log = structlog.get_logger(__name__)

_LEADING_NUMBER = re.compile(r"^\((\d+)\)")
_LEADING_NUMBER_PREFIX = re.compile(r"^\(\d+\)\s*")
_TRAILING_DESIGNATION = re.compile(r"\s*\(\d+.*?\)")

SEARCH_TEMPLATES = (
    "asteroid {name}",
    "{name} asteroid",
    "near earth object {name}",
    "NEO {name}",
)
INCLUDE_KEYWORDS = ("asteroid", "neo", "near earth")
# whole words with an optional plural, so "neon" or "phenomenon" do not count
_INCLUDE_PATTERN = re.compile(
    r"\b(?:%s)s?\b" % "|".join(re.escape(k) for k in INCLUDE_KEYWORDS)
)
EXCLUDE_KEYWORDS = ("truck", "vehicle", "building", "facility", "launch", "rocket")
SEARCH_SOURCE = "NASA Image Library"


@dataclass(frozen=True)
class AsteroidQuery:
    raw: str
    name: str
    number: Optional[str] = None


def normalize_asteroid_name(raw: str) -> AsteroidQuery:
    """
    "(2000) LF3"        -> name "LF3", number "2000"
    "Eros (433)"        -> name "Eros"
    "433 Eros (A898 PA)" is left as is; only all-digit parentheticals are cut.
    """
    raw = raw or ""
    m = _LEADING_NUMBER.match(raw)
    name = _LEADING_NUMBER_PREFIX.sub("", raw, count=1)
    name = _TRAILING_DESIGNATION.sub("", name, count=1).strip()
    if not name:
        name = raw.strip()
    return AsteroidQuery(raw=raw, name=name, number=m.group(1) if m else None)


def _stable_fraction(number: int) -> float:
    digest = hashlib.sha256(str(number).encode("ascii")).digest()
    return int.from_bytes(digest[:8], "big") / 2**64


def classify_asteroid_type(name: str, number: Optional[str] = None) -> AsteroidType:
    """Composition class from the known-body table, else from the catalog number range.

    The number-range split mirrors rough main-belt statistics; the draw is a
    hash of the number so the same asteroid always gets the same class.
    """
    upper = (name or "").upper()
    for key, kind in KNOWN_TYPES.items():
        if key in upper:
            return kind

    num = int(number) if number and number.isdigit() else 0
    if num > 0:
        p = _stable_fraction(num)
        if num < 100:
            return AsteroidType.C if p < 0.4 else AsteroidType.S
        if num < 1000:
            return AsteroidType.S if p < 0.6 else AsteroidType.C
        if num > 100000:
            return AsteroidType.S if p < 0.7 else AsteroidType.C
    return AsteroidType.S


def _result(entry: CatalogImage, title: str, match: ImageMatch) -> AsteroidImageResult:
    return AsteroidImageResult(
        url=entry.url,
        title=title,
        description=entry.description,
        source=entry.source,
        match=match,
    )


class ImageStrategy:
    network = False

    async def attempt(
        self, query: AsteroidQuery, abort: Optional[asyncio.Event] = None
    ) -> Optional[AsteroidImageResult]:
        raise NotImplementedError


class ExactCatalogMatch(ImageStrategy):
    async def attempt(self, query, abort=None):
        entry = ASTEROID_CATALOG.get(query.name)
        if entry is None:
            return None
        return _result(entry, query.name, ImageMatch.EXACT)


class NumericCatalogMatch(ImageStrategy):
    async def attempt(self, query, abort=None):
        if not query.number:
            return None
        for key, entry in ASTEROID_CATALOG.items():
            if query.number in key or query.number in entry.description:
                return _result(entry, query.name, ImageMatch.NUMERIC)
        return None


def _looks_like_asteroid(title: str, description: str) -> bool:
    text = (title.lower(), description.lower())
    if not any(_INCLUDE_PATTERN.search(t) for t in text):
        return False
    return not any(k in t for k in EXCLUDE_KEYWORDS for t in text)


def _first(value: Any) -> Dict[str, Any]:
    if isinstance(value, list) and value and isinstance(value[0], dict):
        return value[0]
    return {}


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def pick_search_result(payload: Any) -> Optional[AsteroidImageResult]:
    """First asteroid-looking item of an Image Library response, in API order.

    Items of an unexpected shape are skipped, and a body that is not a
    `collection` envelope at all yields no result.
    """
    if not isinstance(payload, dict):
        return None
    collection = payload.get("collection")
    items = collection.get("items") if isinstance(collection, dict) else None
    if not isinstance(items, list):
        return None
    for item in items:
        if not isinstance(item, dict):
            continue
        data = _first(item.get("data"))
        href = _text(_first(item.get("links")).get("href"))
        if not href:
            continue
        title = _text(data.get("title"))
        description = _text(data.get("description"))
        if _looks_like_asteroid(title, description):
            return AsteroidImageResult(
                url=href,
                title=title,
                description=description,
                source=SEARCH_SOURCE,
                match=ImageMatch.SEARCH,
            )
    return None


class ImageLibrarySearch(ImageStrategy):
    network = True

    def __init__(self, settings: Settings, http: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self.http = http

    async def _search(self, q: str, abort: Optional[asyncio.Event]) -> Dict[str, Any]:
        call = asyncio.ensure_future(client.search_images(self.settings, q, http=self.http))
        if abort is None:
            return await call

        stop = asyncio.ensure_future(abort.wait())
        try:
            done, _ = await asyncio.wait({call, stop}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            call.cancel()
            raise
        finally:
            stop.cancel()

        if call in done:
            return call.result()
        call.cancel()
        with contextlib.suppress(asyncio.CancelledError, UpstreamError):
            await call
        raise SearchAborted(f"image search for {q!r} aborted")

    async def attempt(self, query, abort=None):
        if not query.name:
            return None
        # Variants run one after another; an earlier match always wins.
        for template in SEARCH_TEMPLATES:
            q = template.format(name=query.name)
            try:
                payload = await self._search(q, abort)
            except UpstreamError as e:
                log.warning("image_search_failed", query=q, error=str(e))
                continue
            found = pick_search_result(payload)
            if found is not None:
                return found
        return None


class RepresentativeImage:
    def pick(self, query: AsteroidQuery) -> AsteroidImageResult:
        kind = classify_asteroid_type(query.name, query.number)
        return _result(TYPE_IMAGES[kind], query.name, ImageMatch.REPRESENTATIVE)


class AsteroidImageResolver:
    """
    Resolves an asteroid name to an image, trying in order:
      1. exact name in the static catalog
      2. catalog number found in a catalog entry
      3. NASA Image Library search (4 query variants, sequential)
      4. representative image for the asteroid's composition class

    Never raises; upstream failures fall through to the next step. Setting
    `abort` cancels the in-flight search and skips straight to step 4.
    """

    def __init__(self, settings: Settings, http: Optional[httpx.AsyncClient] = None):
        self.strategies: List[ImageStrategy] = [
            ExactCatalogMatch(),
            NumericCatalogMatch(),
            ImageLibrarySearch(settings, http),
        ]
        self.fallback = RepresentativeImage()

    async def resolve(
        self, name: str, abort: Optional[asyncio.Event] = None
    ) -> AsteroidImageResult:
        query = normalize_asteroid_name(name)
        for strategy in self.strategies:
            if strategy.network and abort is not None and abort.is_set():
                break
            try:
                result = await strategy.attempt(query, abort)
            except SearchAborted:
                log.info("image_search_aborted", name=query.name)
                break
            if result is not None:
                log.debug("asteroid_image_resolved", name=query.name, match=result.match.value)
                return result
        result = self.fallback.pick(query)
        log.debug("asteroid_image_resolved", name=query.name, match=result.match.value)
        return result


async def resolve_asteroid_image(
    name: str,
    settings: Optional[Settings] = None,
    http: Optional[httpx.AsyncClient] = None,
    abort: Optional[asyncio.Event] = None,
) -> AsteroidImageResult:
    resolver = AsteroidImageResolver(settings or Settings(), http=http)
    return await resolver.resolve(name, abort=abort)
