from typing import Any, Dict, List, Union

from .schemas import (
    AuroraChance,
    NearEarthObject,
    Region,
    RiskAssessment,
    RiskFactors,
    RiskLevel,
    SpaceObject,
    SpaceObjectClassification,
    SpaceWeatherAssessment,
    SpaceWeatherObservation,
    parse_payload,
)

CLOSE_APPROACH_KM = 1_000_000.0
WATCH_DISTANCE_KM = 5_000_000.0
LARGE_DIAMETER_KM = 1.0
REGIONAL_DIAMETER_KM = 0.1

SIZE_BONUS = 0.05
MAX_CONFIDENCE = 0.99

POLAR_LATITUDE = 60.0
HIGH_LATITUDE = 45.0

_TIERS = {
    RiskLevel.HIGH: (
        0.95,
        [
            "Continuous monitoring required",
            "Alert space agencies immediately",
            "Calculate precise trajectory",
        ],
    ),
    RiskLevel.MEDIUM: (0.90, ["Regular monitoring advised", "Track orbital changes"]),
    RiskLevel.LOW: (0.85, ["Standard monitoring sufficient"]),
}


def _risk_tier(hazardous: bool, miss_km: float) -> RiskLevel:
    if hazardous and miss_km < CLOSE_APPROACH_KM:
        return RiskLevel.HIGH
    if hazardous or miss_km < WATCH_DISTANCE_KM:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def _risk_narrative(neo: NearEarthObject, level: RiskLevel) -> str:
    miss = neo.miss_distance_km
    if level is RiskLevel.HIGH:
        text = (
            f"{neo.name} poses a significant threat due to its potentially hazardous "
            f"classification and close approach distance of {miss:,.0f} km."
        )
    elif level is RiskLevel.MEDIUM:
        reason = (
            "hazardous classification"
            if neo.is_potentially_hazardous_asteroid
            else "close approach"
        )
        text = (
            f"{neo.name} requires attention. While not immediately dangerous, "
            f"its {reason} warrants monitoring."
        )
    else:
        text = f"{neo.name} poses minimal risk with a safe miss distance of {miss:,.0f} km."

    d = neo.max_diameter_km
    if d > LARGE_DIAMETER_KM:
        text += f" Its estimated diameter of up to {d:.2f} km makes it a significant object."
    elif d > REGIONAL_DIAMETER_KM:
        text += f" With an estimated diameter of {d:.3f} km, it's a medium-sized asteroid."
    else:
        text += " This is a relatively small asteroid with diameter under 100 meters."
    return text


def classify_asteroid_risk(
    neo: Union[NearEarthObject, Dict[str, Any]],
) -> RiskAssessment:
    """
    Rule-based risk tier for a NeoWs object:
      HIGH    hazardous and miss distance < 1e6 km        (confidence 0.95)
      MEDIUM  hazardous or miss distance < 5e6 km         (confidence 0.90)
      LOW     otherwise                                   (confidence 0.85)

    Objects larger than 1 km get +0.05 confidence (capped at 0.99). Only the
    first close-approach record is considered; a missing record counts as a
    miss distance of 0 km.
    """
    neo = parse_payload(NearEarthObject, neo, "near-Earth object")
    hazardous = neo.is_potentially_hazardous_asteroid
    level = _risk_tier(hazardous, neo.miss_distance_km)

    confidence, recommendations = _TIERS[level]
    recommendations = list(recommendations)

    d = neo.max_diameter_km
    if d > LARGE_DIAMETER_KM:
        recommendations.append("Large object - potential global impact")
        confidence = round(min(confidence + SIZE_BONUS, MAX_CONFIDENCE), 2)
    elif d > REGIONAL_DIAMETER_KM:
        recommendations.append("Regional impact potential")

    return RiskAssessment(
        name=neo.name,
        risk_level=level,
        confidence=confidence,
        analysis=_risk_narrative(neo, level),
        recommendations=recommendations,
        summary=f"{neo.name} classified as {level.value} risk with {confidence:.0%} confidence",
        factors=RiskFactors(
            miss_distance=f"{neo.miss_distance_km:,.0f} km",
            diameter=f"{d:.3f} km",
            hazardous=hazardous,
            velocity=f"{neo.velocity_kmh:,.0f} km/h",
        ),
    )


def _hemisphere(value: float, positive: str, negative: str) -> str:
    return f"{abs(value):.1f}°{positive if value >= 0 else negative}"


def classify_space_weather(
    observation: Union[SpaceWeatherObservation, Dict[str, Any]],
) -> SpaceWeatherAssessment:
    obs = parse_payload(SpaceWeatherObservation, observation, "ISS position")
    lat = obs.iss_position.latitude
    lon = obs.iss_position.longitude

    if abs(lat) > POLAR_LATITUDE:
        region = Region.ARCTIC if lat > 0 else Region.ANTARCTIC
        aurora = AuroraChance.HIGH
        visibility = "Excellent for aurora viewing"
    elif abs(lat) > HIGH_LATITUDE:
        region = Region.HIGH_LATITUDE
        aurora = AuroraChance.MEDIUM
        visibility = "Possible aurora activity"
    else:
        region = Region.MID_LOW
        aurora = AuroraChance.LOW
        visibility = "Clear space observations"

    recommendations: List[str] = [
        "Excellent time for aurora photography"
        if aurora is AuroraChance.HIGH
        else "Good conditions for space observations",
        "Minimal atmospheric interference expected",
        "Optimal viewing conditions for Earth observation",
    ]
    return SpaceWeatherAssessment(
        region=region,
        aurora_chance=aurora,
        visibility=visibility,
        analysis=(
            f"ISS is currently over {region.value} region at "
            f"{_hemisphere(lat, 'N', 'S')}, {_hemisphere(lon, 'E', 'W')}. "
            f"{visibility} expected."
        ),
        recommendations=recommendations,
    )


# (type, confidence, characteristics); diameter thresholds in km
_SIZE_CLASSES = [
    (100.0, "Large Asteroid", 0.85, ["Significant size", "Potential impact risk", "Trackable orbit"]),
    (1.0, "Medium Asteroid", 0.8, ["Moderate size", "Regular monitoring", "Stable orbit"]),
    (0.0, "Small Asteroid", 0.75, ["Small size", "Low impact risk", "Frequent occurrence"]),
]


def classify_space_object(
    obj: Union[SpaceObject, Dict[str, Any]],
) -> SpaceObjectClassification:
    obj = parse_payload(SpaceObject, obj, "space object")

    kind, confidence, characteristics = "Unknown", 0.5, []
    if obj.name and "asteroid" in obj.name.lower():
        kind, confidence = "Asteroid", 0.9
        characteristics = ["Rocky composition", "Irregular shape", "Orbits Sun"]
    elif obj.estimated_diameter is not None:
        d = obj.estimated_diameter.kilometers.estimated_diameter_max
        for threshold, kind, confidence, characteristics in _SIZE_CLASSES:
            if d > threshold:
                break
        else:
            _, kind, confidence, characteristics = _SIZE_CLASSES[-1]

    return SpaceObjectClassification(
        type=kind,
        confidence=confidence,
        characteristics=list(characteristics),
        analysis=(
            f"Based on available data, this object is classified as a {kind} "
            f"with {confidence:.0%} confidence."
        ),
    )
