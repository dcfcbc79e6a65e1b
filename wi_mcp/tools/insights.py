"""Wildlife management heuristics used by the analytics tools.

These are rule-of-thumb rankings and advice strings, not statistics. Keep the
thresholds here so the analytics projections stay declarative.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping, Sequence


TEXAS_SPECIES_STATUS = {
    "Odocoileus virginianus": "White-tailed Deer - Major game species",
    "Cervus canadensis": "Elk - Game species",
    "Sus scrofa": "Feral Hog - Invasive, no closed season",
    "Pecari tajacu": "Collared Peccary - Game species",
    "Ovis canadensis": "Bighorn Sheep - Game species",
    "Antilocapra americana": "Pronghorn - Game species",
    "Canis latrans": "Coyote - Predator, no closed season",
    "Vulpes vulpes": "Red Fox - Furbearer",
    "Procyon lotor": "Raccoon - Furbearer",
    "Mephitis mephitis": "Striped Skunk - Furbearer",
    "Spilogale gracilis": "Western Spotted Skunk - Furbearer",
    "Conepatus leuconotus": "Hog-nosed Skunk - Furbearer",
    "Taxidea taxus": "American Badger - Furbearer",
    "Lontra canadensis": "River Otter - Furbearer",
    "Castor canadensis": "Beaver - Furbearer",
    "Sciurus niger": "Fox Squirrel - Small game",
    "Sciurus carolinensis": "Gray Squirrel - Small game",
    "Geomys bursarius": "Plains Pocket Gopher - Non-game",
    "Cynomys ludovicianus": "Black-tailed Prairie Dog - Non-game",
}

BIODIVERSITY_TARGET = 15


def texas_species_status(scientific_name: str | None) -> str:
    return TEXAS_SPECIES_STATUS.get(scientific_name or "", "Species not in Texas game classification")


def percentage(count: float, total: float | None) -> str:
    """``count`` as a share of ``total`` with one decimal, e.g. ``'12.5%'``."""
    return f"{count / (total or 1) * 100:.1f}%"


def biodiversity_assessment(species_count: int) -> str:
    if species_count > 10:
        return "High biodiversity"
    if species_count > 5:
        return "Moderate biodiversity"
    return "Low biodiversity"


def coverage_assessment(sampling_days: int) -> str:
    if sampling_days > 300:
        return "Excellent coverage"
    if sampling_days > 180:
        return "Good coverage"
    return "Limited coverage"


def location_activity(image_count: int) -> str:
    if image_count > 50:
        return "High activity"
    if image_count > 20:
        return "Moderate activity"
    return "Low activity"


def population_trend(image_count: int) -> str:
    if image_count > 50:
        return "Abundant"
    if image_count > 20:
        return "Common"
    return "Present"


def habitat_recommendation(image_count: int) -> str:
    if image_count > 100:
        return "High-value habitat - maintain"
    if image_count > 50:
        return "Good habitat - consider enhancement"
    return "Low activity - evaluate placement"


def management_priority(rank: int) -> str:
    """Priority for the species at zero-based ``rank``."""
    if rank == 0:
        return "Highest"
    if rank < 3:
        return "High"
    return "Medium"


def find_species(species: Iterable[Mapping[str, Any]], genus: str) -> Mapping[str, Any] | None:
    return next((s for s in species if genus in (s.get("scientificName") or "")), None)


def species_recommendations(species: Sequence[Mapping[str, Any]], ranch_goals: str) -> list[str]:
    if not species:
        return ["No species data available for recommendations"]

    top_name = species[0].get("scientificName") or ""
    recommendations: list[str] = []

    if ranch_goals == "hunting":
        if "Odocoileus" in top_name:
            recommendations.append("White-tailed deer population looks good for hunting opportunities")
            recommendations.append("Monitor deer health and age structure for sustainable harvest")
        if "Sus" in top_name:
            recommendations.append("Feral hog control recommended before hunting season")
        recommendations.append("Consider dove field management for bird hunting")
    elif ranch_goals == "conservation":
        recommendations.append(f"Focus conservation on {top_name} as keystone species")
        recommendations.append("Maintain habitat diversity to support all detected species")
        if len(species) < 10:
            recommendations.append("Consider habitat restoration to increase biodiversity")
    elif ranch_goals == "ecotourism":
        recommendations.append("Highlight diverse wildlife for ecotourism marketing")
        recommendations.append("Develop wildlife viewing areas based on high-activity locations")
        recommendations.append("Consider seasonal tours based on species activity patterns")
    else:
        recommendations.append("Balanced approach: maintain healthy populations of all species")
        recommendations.append("Monitor for invasive species that may impact native wildlife")
        recommendations.append("Consider sustainable harvest opportunities")

    return recommendations


def parse_datetime(value: Any) -> datetime | None:
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def deployment_days(deployment: Mapping[str, Any]) -> float | None:
    start = parse_datetime(deployment.get("startDatetime"))
    end = parse_datetime(deployment.get("endDatetime"))
    if start is None or end is None:
        return None
    if (start.tzinfo is None) != (end.tzinfo is None):
        start, end = start.replace(tzinfo=None), end.replace(tzinfo=None)
    return (end - start).total_seconds() / 86400


def average_duration_days(deployments: Iterable[Mapping[str, Any]]) -> float:
    durations = [d for d in (deployment_days(dep) for dep in deployments) if d is not None]
    if not durations:
        return 0
    return sum(durations) / len(durations)
