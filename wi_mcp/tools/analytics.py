"""Wildlife management analytics.

Each tool runs one analytics query and reshapes it into a management-oriented
projection. The rankings and advice come from :mod:`.insights`.
"""

from __future__ import annotations

import math
from typing import Any, Mapping

from . import insights, queries
from .base import ToolInvocation, ToolResponse, ToolSpec
from .schemas import (
    DeploymentAnalyticsInput,
    ProjectAnalyticsInput,
    RanchInsightsInput,
    SpeciesAnalyticsInput,
)


def _project_recommendations(
    analytics: Mapping[str, Any],
    top_species: list[Mapping[str, Any]],
    top_locations: list[Mapping[str, Any]],
) -> list[str]:
    recommendations = []
    if top_species:
        recommendations.append(
            f"Focus management on {top_species[0].get('scientificName')} (most abundant species)"
        )
    if (analytics.get("numIdentifyImages") or 0) > 100:
        recommendations.append("Prioritize image identification to improve data quality")
    if analytics.get("uniqueLocations") is not None and analytics["uniqueLocations"] < 3:
        recommendations.append("Consider expanding camera deployment to increase spatial coverage")
    if analytics.get("samplingDaysCount") is not None and analytics["samplingDaysCount"] < 180:
        recommendations.append("Extend monitoring period for more robust seasonal data")
    if top_locations and (top_locations[0].get("count") or 0) > (top_locations[-1].get("count") or 0) * 3:
        recommendations.append("Redistribute cameras to balance coverage across locations")
    return recommendations


def project_insights(project_id: int, analytics: Mapping[str, Any]) -> dict[str, Any]:
    top_species = list(analytics.get("imagesPerSpecies") or [])[:10]
    top_locations = list(analytics.get("imagesPerLocation") or [])[:10]
    wildlife = analytics.get("wildlifeImagesCount") or 0
    species_count = analytics.get("numSpecies") or 0
    sampling_days = analytics.get("samplingDaysCount") or 0

    return {
        "projectOverview": {
            "projectId": project_id,
            "totalImages": analytics.get("numImages") or 0,
            "identifiedImages": wildlife,
            "unidentifiedImages": analytics.get("numIdentifyImages") or 0,
            "speciesCount": species_count,
            "samplingDays": sampling_days,
            "locations": analytics.get("uniqueLocations") or 0,
            "dateRange": {
                "firstSurvey": analytics.get("firstSurveyDate"),
                "lastSurvey": analytics.get("lastSurveyDate"),
            },
        },
        "speciesAnalysis": {
            "topSpecies": [
                {
                    "name": s.get("scientificName"),
                    "imageCount": s.get("count"),
                    "percentage": insights.percentage(s.get("count") or 0, wildlife),
                }
                for s in top_species
            ],
            "diversity": {
                "totalSpecies": species_count,
                "assessment": insights.biodiversity_assessment(species_count),
            },
        },
        "temporalPatterns": {
            "samplingDays": sampling_days,
            "averageImagesPerDay": f"{wildlife / (sampling_days or 1):.2f}",
            "surveyConsistency": insights.coverage_assessment(sampling_days),
        },
        "locationAnalysis": {
            "uniqueLocations": analytics.get("uniqueLocations") or 0,
            "topLocations": [
                {
                    "name": loc.get("placename"),
                    "imageCount": loc.get("count"),
                    "activityLevel": insights.location_activity(loc.get("count") or 0),
                }
                for loc in top_locations
            ],
        },
        "managementRecommendations": _project_recommendations(analytics, top_species, top_locations),
    }


def species_insights(analytics: Mapping[str, Any]) -> dict[str, Any]:
    species = list(analytics.get("imagesPerSpecies") or [])
    wildlife = analytics.get("wildlifeImagesCount") or 0
    unknown = analytics.get("unknownImagesCount") or 0
    dominant_share = (species[0].get("count") or 0) if species else 0

    return {
        "speciesSummary": {
            "totalSpecies": analytics.get("numSpecies") or 0,
            "totalImages": wildlife,
            "averageImagesPerSpecies": f"{wildlife / (analytics.get('numSpecies') or 1):.1f}",
        },
        "dominantSpecies": [
            {
                "rank": rank + 1,
                "scientificName": s.get("scientificName"),
                "commonName": s.get("commonNameEnglish"),
                "imageCount": s.get("count"),
                "percentage": insights.percentage(s.get("count") or 0, wildlife),
                "managementPriority": insights.management_priority(rank),
            }
            for rank, s in enumerate(species[:5])
        ],
        "rareSpecies": [
            {
                "scientificName": s.get("scientificName"),
                "commonName": s.get("commonNameEnglish"),
                "imageCount": s.get("count"),
                "conservationConcern": "Monitor closely" if (s.get("count") or 0) < 5 else "Continue monitoring",
            }
            for s in species[-3:]
        ],
        "managementImplications": [
            "High biodiversity - consider habitat preservation"
            if len(species) > 10
            else "Lower biodiversity - may need habitat enhancement",
            "Dominant species may indicate ecosystem imbalance"
            if dominant_share > wildlife * 0.5
            else "Balanced species distribution",
            "High unknown rate - improve identification process"
            if unknown > wildlife * 0.2
            else "Good identification rate",
        ],
    }


def _population(species: list[Mapping[str, Any]], genus: str, management: str) -> dict[str, Any] | None:
    found = insights.find_species(species, genus)
    if found is None:
        return None
    return {"population": found.get("count") or 0, "management": management}


def ranch_insights(project_id: int, analytics: Mapping[str, Any], ranch_goals: str) -> dict[str, Any]:
    species = list(analytics.get("imagesPerSpecies") or [])
    locations = list(analytics.get("imagesPerLocation") or [])
    species_count = analytics.get("numSpecies") or 0
    unique_locations = analytics.get("uniqueLocations") or 0
    sampling_days = analytics.get("samplingDaysCount") or 0
    wildlife = analytics.get("wildlifeImagesCount") or 0

    return {
        "currentStatus": {
            "projectId": project_id,
            "monitoringDays": sampling_days,
            "locationsMonitored": unique_locations,
            "speciesDetected": species_count,
            "totalImages": analytics.get("numImages") or 0,
            "identificationProgress": {
                "identified": wildlife,
                "pending": analytics.get("numIdentifyImages") or 0,
                "completionRate": insights.percentage(wildlife, analytics.get("numImages")),
            },
        },
        "speciesManagement": {
            "keySpecies": [
                {
                    "name": s.get("scientificName"),
                    "commonName": s.get("commonNameEnglish"),
                    "population": s.get("count"),
                    "trend": insights.population_trend(s.get("count") or 0),
                    "texasStatus": insights.texas_species_status(s.get("scientificName")),
                }
                for s in species[:5]
            ],
            "managementActions": insights.species_recommendations(species, ranch_goals),
        },
        "habitatManagement": {
            "locationEffectiveness": [
                {
                    "name": loc.get("placename"),
                    "activity": loc.get("count"),
                    "coordinates": {"lat": loc.get("latitude"), "lng": loc.get("longitude")},
                    "recommendation": insights.habitat_recommendation(loc.get("count") or 0),
                }
                for loc in locations
            ],
            "coverageAssessment": {
                "currentLocations": unique_locations,
                "recommendedLocations": max(3, unique_locations * 2),
                "coverageQuality": "Good" if unique_locations > 3 else "Needs improvement",
            },
        },
        "seasonalPatterns": {
            "monitoringPeriod": {
                "start": analytics.get("firstSurveyDate"),
                "end": analytics.get("lastSurveyDate"),
                "duration": sampling_days,
            },
            "recommendations": [
                "Extend monitoring to capture full seasonal cycles"
                if sampling_days < 180
                else "Good seasonal coverage",
                "Consider winter monitoring for deer movement patterns",
                "Spring monitoring important for fawn recruitment",
                "Summer monitoring for heat stress impacts",
            ],
        },
        "texasRanchRecommendations": {
            "whiteTailedDeer": _population(
                species,
                "Odocoileus",
                "Monitor for CWD, maintain habitat quality, consider supplemental feeding during drought",
            ),
            "feralHogs": _population(
                species,
                "Sus",
                "Control population, protect water sources, monitor for disease transmission",
            ),
            "biodiversity": {
                "currentLevel": species_count,
                "targetLevel": insights.BIODIVERSITY_TARGET,
                "action": "Enhance habitat diversity" if species_count < 10 else "Maintain current diversity",
            },
        },
    }


def _duration_days(deployment: Mapping[str, Any]) -> int | None:
    days = insights.deployment_days(deployment)
    return None if days is None else math.ceil(days)


def deployment_insights(deployments: list[Mapping[str, Any]]) -> dict[str, Any]:
    return {
        "deploymentSummary": {
            "totalDeployments": len(deployments),
            "activeDeployments": sum(1 for d in deployments if not d.get("endDatetime")),
            "averageDuration": insights.average_duration_days(deployments),
            "uniqueLocations": len({(d.get("location") or {}).get("id") for d in deployments}),
        },
        "locationEffectiveness": [
            {
                "name": d.get("deploymentName"),
                "location": (d.get("location") or {}).get("placename") or "Unknown",
                "coordinates": (
                    {"lat": d["location"].get("latitude"), "lng": d["location"].get("longitude")}
                    if d.get("location")
                    else None
                ),
                "duration": _duration_days(d),
                "setup": {
                    "cameraHeight": d.get("sensorHeight"),
                    "orientation": d.get("sensorOrientation"),
                    "baitType": (d.get("baitType") or {}).get("typeName"),
                },
                # Per-deployment image counts need a separate query.
                "effectiveness": "Needs image count data",
            }
            for d in deployments
        ],
        "optimizationRecommendations": [
            "Increase number of camera deployments for better coverage"
            if len(deployments) < 3
            else "Good deployment density",
            "Consider seasonal bait strategies for target species",
            "Monitor camera heights - optimal range typically 3-4 feet for deer",
            "Evaluate camera angles for maximum detection coverage",
        ],
    }


async def get_project_analytics(ctx: ToolInvocation, args: ProjectAnalyticsInput) -> ToolResponse:
    variables: dict[str, Any] = {"projectId": args.project_id}
    if args.organization_id:
        variables["organizationId"] = args.organization_id
    if args.initiative_id:
        variables["initiativeId"] = args.initiative_id

    data = await ctx.execute(queries.PROJECT_ANALYTICS, variables, "GetProjectAnalytics")
    analytics = data.get("getAnalytics") or {}
    return ToolResponse.with_resource(
        f"Analytics for Project {args.project_id}: {analytics.get('numSpecies') or 0} species, "
        f"{analytics.get('wildlifeImagesCount') or 0} wildlife images, "
        f"{analytics.get('uniqueLocations') or 0} locations",
        project_insights(args.project_id, analytics),
        "project-analytics.json",
    )


async def get_species_analytics(ctx: ToolInvocation, args: SpeciesAnalyticsInput) -> ToolResponse:
    variables = {
        "projectId": args.project_id,
        "parameterKey": "species",
        "filters": args.filters.to_variables() if args.filters else {},
    }
    data = await ctx.execute(queries.SPECIES_ANALYTICS, variables, "GetSpeciesAnalytics")
    analytics = data.get("getAnalyticsByParameter") or {}
    species = analytics.get("imagesPerSpecies") or []
    return ToolResponse.with_resource(
        f"Species Analysis for Project {args.project_id}: {len(species)} species identified from "
        f"{analytics.get('wildlifeImagesCount') or 0} wildlife images",
        species_insights(analytics),
        "species-analytics.json",
    )


async def get_ranch_management_insights(ctx: ToolInvocation, args: RanchInsightsInput) -> ToolResponse:
    data = await ctx.execute(queries.RANCH_ANALYTICS, {"projectId": args.project_id}, "GetRanchAnalytics")
    analytics = data.get("getAnalytics") or {}
    return ToolResponse.with_resource(
        f"Ranch Management Insights for Project {args.project_id}: "
        f"{analytics.get('numSpecies') or 0} species across {analytics.get('uniqueLocations') or 0} locations",
        ranch_insights(args.project_id, analytics, args.ranch_goals),
        "ranch-management-insights.json",
    )


async def get_deployment_analytics(ctx: ToolInvocation, args: DeploymentAnalyticsInput) -> ToolResponse:
    variables = {
        "projectId": args.project_id,
        "filters": args.filters.to_variables() if args.filters else {},
    }
    data = await ctx.execute(queries.DEPLOYMENT_ANALYTICS, variables, "GetDeploymentAnalytics")
    deployments = list((data.get("getDeploymentsByProject") or {}).get("data") or [])
    analysis = deployment_insights(deployments)
    return ToolResponse.with_resource(
        f"Deployment Analysis for Project {args.project_id}: {len(deployments)} deployments across "
        f"{analysis['deploymentSummary']['uniqueLocations']} locations",
        analysis,
        "deployment-analytics.json",
    )


TOOLS = [
    ToolSpec(
        name="getProjectAnalytics",
        title="Get Project Analytics",
        description="Get comprehensive analytics for wildlife management planning",
        input_model=ProjectAnalyticsInput,
        handler=get_project_analytics,
    ),
    ToolSpec(
        name="getSpeciesAnalytics",
        title="Get Species Analytics",
        description="Get detailed species analysis for wildlife management",
        input_model=SpeciesAnalyticsInput,
        handler=get_species_analytics,
    ),
    ToolSpec(
        name="getRanchManagementInsights",
        title="Get Ranch Management Insights",
        description="Generate wildlife management recommendations for your Texas ranch",
        input_model=RanchInsightsInput,
        handler=get_ranch_management_insights,
    ),
    ToolSpec(
        name="getDeploymentAnalytics",
        title="Get Deployment Analytics",
        description="Analyze camera deployment effectiveness for optimal placement",
        input_model=DeploymentAnalyticsInput,
        handler=get_deployment_analytics,
    ),
]
