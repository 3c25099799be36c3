from typing import Any, Dict, Iterable, List, Optional, Union

from .errors import InvalidPayloadError
from .schemas import (
    Launch,
    MarsConditions,
    MarsPhoto,
    MissionInsights,
    NewsArticle,
    NewsSummary,
    TrendingTopic,
    parse_payload,
)

CAMERA_INSIGHTS = {
    "MAST": "High-resolution imaging and terrain analysis",
    "NAVCAM": "Navigation and path planning operations",
    "FHAZ": "Front hazard avoidance and safety checks",
    "RHAZ": "Rear hazard avoidance and maneuvering",
    "MAHLI": "Close-up scientific analysis",
    "MARDI": "Descent and landing documentation",
}

NEWS_KEYWORDS = (
    "Mars",
    "SpaceX",
    "NASA",
    "ISS",
    "asteroid",
    "launch",
    "mission",
    "space",
    "rocket",
    "satellite",
)

RECENT_LAUNCH_WINDOW = 5
TOP_TOPICS = 5


def analyze_mars_conditions(
    photos: Optional[Iterable[Union[MarsPhoto, Dict[str, Any]]]],
) -> MarsConditions:
    photos = list(photos or [])
    if not photos:
        return MarsConditions(conditions="Unknown", analysis="No recent Mars data available")

    latest = parse_payload(MarsPhoto, photos[0], "Mars photo")
    sol, rover, camera = latest.sol, latest.rover.name, latest.camera.name

    if sol > 3000:
        conditions = "Extended Mission"
        analysis = f"{rover} has been operating for {sol} sols, well beyond its planned mission duration. "
    elif sol > 1000:
        conditions = "Long-term Operations"
        analysis = f"{rover} is in long-term operational phase at sol {sol}. "
    else:
        conditions = "Primary Mission"
        analysis = f"{rover} is in its primary mission phase at sol {sol}. "

    insight = CAMERA_INSIGHTS.get(camera, "scientific operations")
    analysis += f"Recent {camera} imagery suggests {insight} are ongoing."

    return MarsConditions(
        conditions=conditions,
        analysis=analysis,
        sol=sol,
        rover=rover,
        camera=camera,
        recommendations=[
            "Rover systems operating nominally",
            "Continued scientific data collection",
            "Regular health monitoring maintained",
        ],
    )


def generate_mission_insights(
    launches: Optional[Iterable[Union[Launch, Dict[str, Any]]]],
) -> MissionInsights:
    launches = [parse_payload(Launch, item, "launch") for item in (launches or [])]
    if not launches:
        return MissionInsights(insights="No recent launch data available", trends=[])

    upcoming = [l for l in launches if l.upcoming]
    recent = [l for l in launches if not l.upcoming][:RECENT_LAUNCH_WINDOW]

    insights = ""
    trends: List[str] = []
    if upcoming:
        insights += f"{len(upcoming)} upcoming missions scheduled. "
        trends.append("Active launch schedule")

    rate_text = "N/A"
    if recent:
        rate = sum(1 for l in recent if l.success) / len(recent)
        rate_text = f"{rate * 100:.0f}%"
        insights += f"Recent mission success rate: {rate_text}. "
        if rate > 0.8:
            trends.append("High reliability")
        elif rate > 0.6:
            trends.append("Moderate reliability")
        else:
            trends.append("Reliability concerns")

    return MissionInsights(
        insights=insights,
        trends=trends,
        upcoming_count=len(upcoming),
        recent_success_rate=rate_text,
    )


def summarize_news(
    articles: Optional[Iterable[Union[NewsArticle, Dict[str, Any]]]],
) -> NewsSummary:
    articles = [parse_payload(NewsArticle, a, "news article") for a in (articles or [])]
    if not articles:
        raise InvalidPayloadError("News articles are required")

    counts = {word: 0 for word in NEWS_KEYWORDS}
    for article in articles:
        text = f"{article.title or ''} {article.description or ''}".lower()
        for word in NEWS_KEYWORDS:
            counts[word] += text.count(word.lower())

    # sorted() is stable, so ties keep keyword order
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:TOP_TOPICS]
    topics = [TrendingTopic(topic=word, mentions=n) for word, n in ranked]

    top = topics[0]
    text = (
        f"Recent space news highlights {len(topics)} key topics. "
        f"{top.topic[:1].upper() + top.topic[1:]} appears to be trending with "
        f"{top.mentions} mentions across {len(articles)} articles."
    )
    return NewsSummary(
        text=text,
        trending_topics=topics,
        articles_analyzed=len(articles),
        key_insights=[
            f"{top.topic} is the most discussed topic",
            f"{len(articles)} articles analyzed",
            f"{len(topics)} trending topics identified",
        ],
    )
