import pytest

from conftest import make_neo
from space_explorer.errors import InvalidPayloadError
from space_explorer.risk import classify_asteroid_risk
from space_explorer.schemas import NearEarthObject, RiskLevel


def test_close_hazardous_object_is_high_risk():
    neo = make_neo(hazardous=True, miss_km="750000", velocity_kmh="28500", diameter_max=0.8)
    result = classify_asteroid_risk(neo)

    assert result.risk_level is RiskLevel.HIGH
    assert result.confidence == 0.95
    assert "Continuous monitoring required" in result.recommendations
    assert result.recommendations[-1] == "Regional impact potential"
    assert result.summary == "(2000) LF3 classified as HIGH risk with 95% confidence"
    assert result.factors.miss_distance == "750,000 km"
    assert result.factors.velocity == "28,500 km/h"
    assert result.factors.diameter == "0.800 km"
    assert result.factors.hazardous is True
    assert "750,000 km" in result.analysis
    assert "medium-sized asteroid" in result.analysis


@pytest.mark.parametrize("miss_km", [0, 1, "999999.9"])
def test_hazardous_within_a_million_km_is_high(miss_km):
    result = classify_asteroid_risk(make_neo(hazardous=True, miss_km=miss_km))
    assert result.risk_level is RiskLevel.HIGH
    assert result.confidence >= 0.95


@pytest.mark.parametrize("miss_km", ["5000000", 5_000_001, 7.5e7])
def test_harmless_far_object_is_low(miss_km):
    result = classify_asteroid_risk(make_neo(hazardous=False, miss_km=miss_km))
    assert result.risk_level is RiskLevel.LOW
    assert result.confidence == 0.85
    assert result.recommendations == ["Standard monitoring sufficient"]
    assert "minimal risk" in result.analysis


def test_hazardous_but_distant_is_medium():
    result = classify_asteroid_risk(make_neo(hazardous=True, miss_km="20000000"))
    assert result.risk_level is RiskLevel.MEDIUM
    assert result.confidence == 0.90
    assert "hazardous classification" in result.analysis
    assert result.recommendations == ["Regular monitoring advised", "Track orbital changes"]


def test_close_but_not_hazardous_is_medium():
    result = classify_asteroid_risk(make_neo(hazardous=False, miss_km="4000000"))
    assert result.risk_level is RiskLevel.MEDIUM
    assert "close approach" in result.analysis


@pytest.mark.parametrize(
    "hazardous,miss_km,expected",
    [
        (True, "500000", 0.99),
        (True, "9000000", 0.95),
        (False, "9000000", 0.90),
    ],
)
def test_large_objects_gain_capped_confidence(hazardous, miss_km, expected):
    small = classify_asteroid_risk(make_neo(hazardous=hazardous, miss_km=miss_km, diameter_max=0.05))
    large = classify_asteroid_risk(make_neo(hazardous=hazardous, miss_km=miss_km, diameter_max=2.4))

    assert large.risk_level is small.risk_level
    assert large.confidence == expected
    assert small.confidence <= large.confidence <= 0.99
    assert large.recommendations[-1] == "Large object - potential global impact"
    assert "2.40 km" in large.analysis


def test_regional_size_does_not_change_confidence():
    base = classify_asteroid_risk(make_neo(diameter_max=0.05))
    regional = classify_asteroid_risk(make_neo(diameter_max=0.5))
    assert regional.confidence == base.confidence
    assert "Regional impact potential" in regional.recommendations
    assert "under 100 meters" in base.analysis


@pytest.mark.parametrize("hazardous,expected", [(True, RiskLevel.HIGH), (False, RiskLevel.MEDIUM)])
def test_missing_close_approach_counts_as_zero_distance(hazardous, expected):
    result = classify_asteroid_risk(make_neo(hazardous=hazardous, approaches=False))
    assert result.risk_level is expected
    assert result.factors.miss_distance == "0 km"
    assert result.factors.velocity == "0 km/h"


def test_sparse_payload_defaults_to_zero():
    result = classify_asteroid_risk({"name": "2024 AB", "close_approach_data": [{}]})
    assert result.risk_level is RiskLevel.MEDIUM
    assert result.factors.hazardous is False
    assert result.factors.diameter == "0.000 km"


def test_null_hazard_flag_is_false():
    result = classify_asteroid_risk(make_neo(hazardous=None, miss_km="9000000"))
    assert result.risk_level is RiskLevel.LOW


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "2024 AB", "close_approach_data": None},
        {"name": "2024 AB", "close_approach_data": [{"miss_distance": None}]},
        {"name": "2024 AB", "close_approach_data": [{"miss_distance": {"kilometers": None}}]},
        {"name": "2024 AB", "estimated_diameter": None},
        {"name": "2024 AB", "estimated_diameter": {"kilometers": None}},
    ],
)
def test_null_sub_fields_read_as_zero(payload):
    result = classify_asteroid_risk(payload)
    assert result.risk_level is RiskLevel.MEDIUM
    assert result.factors.miss_distance == "0 km"
    assert result.factors.diameter == "0.000 km"


def test_null_name_is_still_invalid():
    with pytest.raises(InvalidPayloadError, match="name"):
        classify_asteroid_risk({"name": None})


def test_accepts_parsed_model():
    neo = NearEarthObject.model_validate(make_neo(hazardous=True, miss_km="100"))
    assert classify_asteroid_risk(neo).risk_level is RiskLevel.HIGH


def test_is_deterministic():
    neo = make_neo(hazardous=True, miss_km="4200000", diameter_max=1.7)
    assert classify_asteroid_risk(neo) == classify_asteroid_risk(neo)


@pytest.mark.parametrize(
    "payload",
    [
        {"is_potentially_hazardous_asteroid": True},
        make_neo(name=""),
        make_neo(miss_km="far away"),
        make_neo(miss_km="-10"),
        make_neo(diameter_max=-1.0),
        {
            "name": "Inverted",
            "estimated_diameter": {
                "kilometers": {"estimated_diameter_min": 2.0, "estimated_diameter_max": 1.0}
            },
        },
        "not an object",
    ],
)
def test_structurally_invalid_payloads_are_reported(payload):
    with pytest.raises(InvalidPayloadError) as exc:
        classify_asteroid_risk(payload)
    assert isinstance(exc.value, ValueError)
    assert "near-Earth object" in str(exc.value)
