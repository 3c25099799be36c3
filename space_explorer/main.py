import asyncio
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
import structlog
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware

from . import client
from .client import USER_AGENT
from .errors import InvalidPayloadError, UpstreamError
from .images import AsteroidImageResolver
from .insights import analyze_mars_conditions, generate_mission_insights, summarize_news
from .log import setup_logging
from .risk import classify_asteroid_risk, classify_space_object, classify_space_weather
from .schemas import (
    AsteroidAnalysisRequest,
    AsteroidAnalysisResponse,
    AsteroidImageResult,
    HealthResponse,
    LaunchKind,
    MarsMissionRequest,
    MarsMissionResponse,
    MissionInsightsRequest,
    MissionInsightsResponse,
    NewsSummaryRequest,
    NewsSummaryResponse,
    SpaceObjectRequest,
    SpaceObjectResponse,
    SpaceWeatherRequest,
    SpaceWeatherResponse,
)
from .settings import Settings, get_settings

log = structlog.get_logger(__name__)

STARTED_AT = time.monotonic()
DISCONNECT_POLL_S = 0.25

router = APIRouter()


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_http(request: Request) -> Optional[httpx.AsyncClient]:
    return request.app.state.http


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _bad_gateway(e: UpstreamError) -> HTTPException:
    return HTTPException(status_code=502, detail=f"Upstream API error: {e}")


@router.get("/api/health", response_model=HealthResponse)
def health():
    return HealthResponse(
        status="OK",
        message="Space Explorer backend is running",
        timestamp=_now(),
        uptime_s=round(time.monotonic() - STARTED_AT, 3),
    )


@router.get("/api/nasa/apod")
async def get_apod(
    date: Optional[str] = None,
    count: Optional[int] = Query(None, ge=1, le=100),
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    settings: Settings = Depends(get_app_settings),
    http: Optional[httpx.AsyncClient] = Depends(get_http),
) -> Any:
    try:
        return await client.fetch_apod(
            settings, date=date, count=count, start_date=start_date, end_date=end_date, http=http
        )
    except UpstreamError as e:
        raise _bad_gateway(e)


@router.get("/api/nasa/mars-photos/{rover}")
async def get_mars_photos(
    rover: str,
    sol: Optional[int] = Query(None, ge=0),
    earth_date: Optional[str] = None,
    camera: Optional[str] = None,
    page: Optional[int] = Query(None, ge=1),
    settings: Settings = Depends(get_app_settings),
    http: Optional[httpx.AsyncClient] = Depends(get_http),
) -> Any:
    try:
        return await client.fetch_mars_photos(
            settings, rover, sol=sol, earth_date=earth_date, camera=camera, page=page, http=http
        )
    except UpstreamError as e:
        raise _bad_gateway(e)


@router.get("/api/nasa/neo/feed")
async def get_neo_feed(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    settings: Settings = Depends(get_app_settings),
    http: Optional[httpx.AsyncClient] = Depends(get_http),
) -> Any:
    try:
        return await client.fetch_neo_feed(
            settings, start_date=start_date, end_date=end_date, http=http
        )
    except UpstreamError as e:
        raise _bad_gateway(e)


async def _abort_on_disconnect(request: Request, abort: asyncio.Event) -> None:
    while not await request.is_disconnected():
        await asyncio.sleep(DISCONNECT_POLL_S)
    log.info("client_disconnected", path=request.url.path)
    abort.set()


@router.get("/api/nasa/neo/image/{name}", response_model=AsteroidImageResult)
async def get_neo_image(
    name: str,
    request: Request,
    settings: Settings = Depends(get_app_settings),
    http: Optional[httpx.AsyncClient] = Depends(get_http),
):
    abort = asyncio.Event()
    watcher = asyncio.ensure_future(_abort_on_disconnect(request, abort))
    try:
        return await AsteroidImageResolver(settings, http=http).resolve(name, abort=abort)
    finally:
        watcher.cancel()


@router.get("/api/nasa/neo/{neo_id}")
async def get_neo(
    neo_id: str,
    settings: Settings = Depends(get_app_settings),
    http: Optional[httpx.AsyncClient] = Depends(get_http),
) -> Any:
    try:
        return await client.fetch_neo(settings, neo_id, http=http)
    except UpstreamError as e:
        if e.status_code == 404:
            raise HTTPException(status_code=404, detail=f"No near-Earth object with id {neo_id}")
        raise _bad_gateway(e)


@router.get("/api/iss/position")
async def get_iss_position(
    settings: Settings = Depends(get_app_settings),
    http: Optional[httpx.AsyncClient] = Depends(get_http),
) -> Any:
    try:
        return await client.fetch_iss_position(settings, http=http)
    except UpstreamError as e:
        raise _bad_gateway(e)


@router.get("/api/spacex/launches")
async def get_launches(
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
    sort: Optional[str] = None,
    order: Optional[str] = None,
    settings: Settings = Depends(get_app_settings),
    http: Optional[httpx.AsyncClient] = Depends(get_http),
) -> Any:
    try:
        return await client.fetch_launches(
            settings, limit=limit, offset=offset, sort=sort, order=order, http=http
        )
    except UpstreamError as e:
        raise _bad_gateway(e)


@router.get("/api/spacex/launches/{kind}")
async def get_launches_by_kind(
    kind: LaunchKind,
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
    settings: Settings = Depends(get_app_settings),
    http: Optional[httpx.AsyncClient] = Depends(get_http),
) -> Any:
    try:
        return await client.fetch_launches(
            settings, kind=kind.value, limit=limit, offset=offset, http=http
        )
    except UpstreamError as e:
        raise _bad_gateway(e)


@router.post("/api/ai/analyze-asteroid", response_model=AsteroidAnalysisResponse)
def post_analyze_asteroid(req: AsteroidAnalysisRequest):
    if req.asteroid is None:
        raise HTTPException(status_code=400, detail="Asteroid data is required")
    try:
        analysis = classify_asteroid_risk(req.asteroid)
    except InvalidPayloadError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AsteroidAnalysisResponse(
        analysis=analysis, timestamp=_now(), ai_model="SpaceAI Rule-Based Analyzer v1.0"
    )


@router.post("/api/ai/analyze-space-weather", response_model=SpaceWeatherResponse)
def post_analyze_space_weather(req: SpaceWeatherRequest):
    if req.iss_position is None:
        raise HTTPException(status_code=400, detail="ISS position data is required")
    try:
        analysis = classify_space_weather(req.iss_position)
    except InvalidPayloadError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SpaceWeatherResponse(
        analysis=analysis, timestamp=_now(), ai_model="SpaceAI Weather Analyzer v1.0"
    )


@router.post("/api/ai/classify-space-object", response_model=SpaceObjectResponse)
def post_classify_space_object(req: SpaceObjectRequest):
    if req.object_data is None:
        raise HTTPException(status_code=400, detail="Space object data is required")
    try:
        classification = classify_space_object(req.object_data)
    except InvalidPayloadError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SpaceObjectResponse(
        classification=classification,
        timestamp=_now(),
        ai_model="SpaceAI Object Classifier v1.0",
    )


@router.post("/api/ai/analyze-mars-mission", response_model=MarsMissionResponse)
def post_analyze_mars_mission(req: MarsMissionRequest):
    try:
        analysis = analyze_mars_conditions(req.mars_photos)
    except InvalidPayloadError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return MarsMissionResponse(
        analysis=analysis, timestamp=_now(), ai_model="SpaceAI Mars Analyzer v1.0"
    )


@router.post("/api/ai/mission-insights", response_model=MissionInsightsResponse)
def post_mission_insights(req: MissionInsightsRequest):
    try:
        insights = generate_mission_insights(req.launch_data)
    except InvalidPayloadError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return MissionInsightsResponse(
        insights=insights, timestamp=_now(), ai_model="SpaceAI Mission Analyzer v1.0"
    )


@router.post("/api/ai/summarize-news", response_model=NewsSummaryResponse)
def post_summarize_news(req: NewsSummaryRequest):
    try:
        summary = summarize_news(req.articles)
    except InvalidPayloadError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return NewsSummaryResponse(
        summary=summary, timestamp=_now(), ai_model="SpaceAI News Analyzer v1.0"
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.http = httpx.AsyncClient(
            timeout=settings.request_timeout_s,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
        )
        log.info("app_started", nasa_base_url=settings.nasa_base_url)
        try:
            yield
        finally:
            await app.state.http.aclose()

    app = FastAPI(title="Space Explorer API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.http = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    app.include_router(router)
    return app


app = create_app()
