from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    model_validator,
)

from .errors import InvalidPayloadError

M = TypeVar("M", bound=BaseModel)


def parse_payload(model: Type[M], payload: Union[M, Dict[str, Any]], what: str) -> M:
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise InvalidPayloadError.from_validation(what, e) from e


# NeoWs payload (https://api.nasa.gov/neo/rest/v1)


class _NullAsDefault(BaseModel):
    """NeoWs sends `null` for absent sub-objects; treat it as the field default."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class MissDistance(_NullAsDefault):
    model_config = ConfigDict(extra="ignore")

    kilometers: float = Field(default=0.0, ge=0)


class RelativeVelocity(_NullAsDefault):
    model_config = ConfigDict(extra="ignore")

    kilometers_per_hour: float = Field(default=0.0, ge=0)


class CloseApproach(_NullAsDefault):
    model_config = ConfigDict(extra="ignore")

    close_approach_date: Optional[str] = None
    orbiting_body: Optional[str] = None
    miss_distance: MissDistance = Field(default_factory=MissDistance)
    relative_velocity: RelativeVelocity = Field(default_factory=RelativeVelocity)


class DiameterRange(_NullAsDefault):
    model_config = ConfigDict(extra="ignore")

    estimated_diameter_min: float = Field(default=0.0, ge=0)
    estimated_diameter_max: float = Field(default=0.0, ge=0)

    @model_validator(mode="after")
    def _max_not_below_min(self):
        if self.estimated_diameter_max < self.estimated_diameter_min:
            raise ValueError("estimated_diameter_max is smaller than estimated_diameter_min")
        return self


class EstimatedDiameter(_NullAsDefault):
    model_config = ConfigDict(extra="ignore")

    kilometers: DiameterRange = Field(default_factory=DiameterRange)


class NearEarthObject(_NullAsDefault):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    name: str = Field(min_length=1)
    is_potentially_hazardous_asteroid: bool = False
    close_approach_data: List[CloseApproach] = []
    estimated_diameter: EstimatedDiameter = Field(default_factory=EstimatedDiameter)

    @property
    def miss_distance_km(self) -> float:
        if not self.close_approach_data:
            return 0.0
        return self.close_approach_data[0].miss_distance.kilometers

    @property
    def velocity_kmh(self) -> float:
        if not self.close_approach_data:
            return 0.0
        return self.close_approach_data[0].relative_velocity.kilometers_per_hour

    @property
    def max_diameter_km(self) -> float:
        return self.estimated_diameter.kilometers.estimated_diameter_max


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class RiskFactors(BaseModel):
    miss_distance: str
    diameter: str
    hazardous: bool
    velocity: str


class RiskAssessment(BaseModel):
    name: str
    risk_level: RiskLevel
    confidence: float = Field(ge=0, le=1)
    analysis: str
    recommendations: List[str]
    summary: str
    factors: RiskFactors


# Space weather (Open Notify iss-now payload)


class IssPosition(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class SpaceWeatherObservation(BaseModel):
    model_config = ConfigDict(extra="ignore")

    iss_position: IssPosition


class Region(str, Enum):
    ARCTIC = "Arctic"
    ANTARCTIC = "Antarctic"
    HIGH_LATITUDE = "High Latitude"
    MID_LOW = "Mid to Low Latitude"
    UNKNOWN = "Unknown"


class AuroraChance(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class SpaceWeatherAssessment(BaseModel):
    region: Region
    aurora_chance: AuroraChance
    visibility: str
    analysis: str
    recommendations: List[str]


# Generic space object


class SpaceObject(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    estimated_diameter: Optional[EstimatedDiameter] = None


class SpaceObjectClassification(BaseModel):
    type: str
    confidence: float
    characteristics: List[str]
    analysis: str


# Asteroid images


class ImageMatch(str, Enum):
    """How the image was found, most trustworthy first."""

    EXACT = "exact"
    NUMERIC = "numeric"
    SEARCH = "search"
    REPRESENTATIVE = "representative"

    @property
    def verified(self) -> bool:
        return self in (ImageMatch.EXACT, ImageMatch.NUMERIC)


class AsteroidType(str, Enum):
    C = "C-type"
    S = "S-type"
    M = "M-type"
    V = "V-type"
    X = "X-type"


class AsteroidImageResult(BaseModel):
    url: str
    title: str
    description: str = ""
    source: str
    match: ImageMatch


# Mission analyzers


class NamedRef(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = "Unknown"


class MarsPhoto(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sol: int = 0
    camera: NamedRef = Field(default_factory=NamedRef)
    rover: NamedRef = Field(default_factory=NamedRef)
    img_src: Optional[str] = None
    earth_date: Optional[str] = None


class MarsConditions(BaseModel):
    conditions: str
    analysis: str
    sol: Optional[int] = None
    rover: Optional[str] = None
    camera: Optional[str] = None
    recommendations: List[str] = []


class Launch(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    upcoming: bool = False
    success: Optional[bool] = None


class LaunchKind(str, Enum):
    UPCOMING = "upcoming"
    PAST = "past"
    LATEST = "latest"
    NEXT = "next"


class MissionInsights(BaseModel):
    insights: str
    trends: List[str]
    upcoming_count: int = 0
    recent_success_rate: str = "N/A"


class NewsArticle(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None


class TrendingTopic(BaseModel):
    topic: str
    mentions: int


class NewsSummary(BaseModel):
    text: str
    trending_topics: List[TrendingTopic]
    articles_analyzed: int
    key_insights: List[str]


# HTTP envelopes


class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AsteroidAnalysisRequest(_Request):
    asteroid: Optional[Dict[str, Any]] = None


class SpaceWeatherRequest(_Request):
    iss_position: Optional[Dict[str, Any]] = Field(default=None, alias="issPosition")


class SpaceObjectRequest(_Request):
    object_data: Optional[Dict[str, Any]] = Field(default=None, alias="objectData")


class MarsMissionRequest(_Request):
    mars_photos: Optional[List[Dict[str, Any]]] = Field(default=None, alias="marsPhotos")


class MissionInsightsRequest(_Request):
    launch_data: Optional[List[Dict[str, Any]]] = Field(default=None, alias="launchData")


class NewsSummaryRequest(_Request):
    articles: Optional[List[Dict[str, Any]]] = None


class AnalysisResponse(BaseModel):
    success: bool = True
    timestamp: datetime
    ai_model: str


class AsteroidAnalysisResponse(AnalysisResponse):
    analysis: RiskAssessment


class SpaceWeatherResponse(AnalysisResponse):
    analysis: SpaceWeatherAssessment


class SpaceObjectResponse(AnalysisResponse):
    classification: SpaceObjectClassification


class MarsMissionResponse(AnalysisResponse):
    analysis: MarsConditions


class MissionInsightsResponse(AnalysisResponse):
    insights: MissionInsights


class NewsSummaryResponse(AnalysisResponse):
    summary: NewsSummary


class HealthResponse(BaseModel):
    status: str
    message: str
    timestamp: datetime
    uptime_s: float
