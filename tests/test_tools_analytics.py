from __future__ import annotations

import pytest

from wi_mcp.tools import insights


ANALYTICS = {
    "numSpecies": 12,
    "numImages": 1000,
    "wildlifeImagesCount": 800,
    "numIdentifyImages": 150,
    "unknownImagesCount": 10,
    "samplingDaysCount": 200,
    "uniqueLocations": 2,
    "firstSurveyDate": "2023-01-01",
    "lastSurveyDate": "2023-07-20",
    "imagesPerSpecies": [
        {"scientificName": "Odocoileus virginianus", "commonNameEnglish": "White-tailed Deer", "count": 500},
        {"scientificName": "Sus scrofa", "commonNameEnglish": "Wild Boar", "count": 200},
        {"scientificName": "Canis latrans", "commonNameEnglish": "Coyote", "count": 60},
        {"scientificName": "Procyon lotor", "commonNameEnglish": "Raccoon", "count": 30},
        {"scientificName": "Lynx rufus", "commonNameEnglish": "Bobcat", "count": 6},
        {"scientificName": "Taxidea taxus", "commonNameEnglish": "American Badger", "count": 4},
    ],
    "imagesPerLocation": [
        {"placename": "Feeder", "latitude": 30.0, "longitude": -99.0, "count": 600},
        {"placename": "Creek", "latitude": 30.1, "longitude": -99.1, "count": 30},
        {"placename": "Ridge", "latitude": 30.2, "longitude": -99.2, "count": 10},
    ],
}


@pytest.mark.asyncio
async def test_project_analytics(registry, upstream) -> None:
    upstream.on("GetProjectAnalytics", {"data": {"getAnalytics": ANALYTICS}})

    response = await registry.call("getProjectAnalytics", {"projectId": 9, "organizationId": 2})

    assert upstream.graphql_bodies("GetProjectAnalytics")[0]["variables"] == {"projectId": 9, "organizationId": 2}
    assert response.texts() == ["Analytics for Project 9: 12 species, 800 wildlife images, 2 locations"]
    report = response.resources()["project-analytics.json"]
    assert report["projectOverview"]["unidentifiedImages"] == 150
    assert report["speciesAnalysis"]["topSpecies"][0] == {
        "name": "Odocoileus virginianus",
        "imageCount": 500,
        "percentage": "62.5%",
    }
    assert report["speciesAnalysis"]["diversity"]["assessment"] == "High biodiversity"
    assert report["temporalPatterns"] == {
        "samplingDays": 200,
        "averageImagesPerDay": "4.00",
        "surveyConsistency": "Good coverage",
    }
    assert [loc["activityLevel"] for loc in report["locationAnalysis"]["topLocations"]] == [
        "High activity",
        "Moderate activity",
        "Low activity",
    ]
    assert report["managementRecommendations"] == [
        "Focus management on Odocoileus virginianus (most abundant species)",
        "Prioritize image identification to improve data quality",
        "Consider expanding camera deployment to increase spatial coverage",
        "Redistribute cameras to balance coverage across locations",
    ]


@pytest.mark.asyncio
async def test_project_analytics_with_empty_response(registry, upstream) -> None:
    upstream.on("GetProjectAnalytics", {"data": {"getAnalytics": None}})

    response = await registry.call("getProjectAnalytics", {"projectId": 9})

    assert response.texts() == ["Analytics for Project 9: 0 species, 0 wildlife images, 0 locations"]
    report = response.resources()["project-analytics.json"]
    assert report["managementRecommendations"] == []
    assert report["temporalPatterns"]["averageImagesPerDay"] == "0.00"


@pytest.mark.asyncio
async def test_species_analytics(registry, upstream) -> None:
    upstream.on("GetSpeciesAnalytics", {"data": {"getAnalyticsByParameter": ANALYTICS}})

    response = await registry.call(
        "getSpeciesAnalytics", {"projectId": 9, "filters": {"taxonomyUUIDs": ["u-1"], "isSequence": False}}
    )

    variables = upstream.graphql_bodies("GetSpeciesAnalytics")[0]["variables"]
    assert variables == {
        "projectId": 9,
        "parameterKey": "species",
        "filters": {"taxonomyUUIDs": ["u-1"], "isSequence": False},
    }
    assert response.texts() == ["Species Analysis for Project 9: 6 species identified from 800 wildlife images"]
    report = response.resources()["species-analytics.json"]
    assert report["speciesSummary"]["averageImagesPerSpecies"] == "66.7"
    assert [s["managementPriority"] for s in report["dominantSpecies"]] == [
        "Highest",
        "High",
        "High",
        "Medium",
        "Medium",
    ]
    assert [s["conservationConcern"] for s in report["rareSpecies"]] == [
        "Continue monitoring",
        "Continue monitoring",
        "Monitor closely",
    ]
    assert report["managementImplications"] == [
        "Lower biodiversity - may need habitat enhancement",
        "Dominant species may indicate ecosystem imbalance",
        "Good identification rate",
    ]


@pytest.mark.asyncio
async def test_species_analytics_defaults_to_empty_filters(registry, upstream) -> None:
    await registry.call("getSpeciesAnalytics", {"projectId": 9})
    assert upstream.graphql_bodies("GetSpeciesAnalytics")[0]["variables"]["filters"] == {}


@pytest.mark.asyncio
async def test_ranch_management_insights(registry, upstream) -> None:
    upstream.on("GetRanchAnalytics", {"data": {"getAnalytics": ANALYTICS}})

    response = await registry.call("getRanchManagementInsights", {"projectId": 9, "ranchGoals": "hunting"})

    assert response.texts() == ["Ranch Management Insights for Project 9: 12 species across 2 locations"]
    report = response.resources()["ranch-management-insights.json"]
    assert report["currentStatus"]["identificationProgress"]["completionRate"] == "80.0%"
    key = report["speciesManagement"]["keySpecies"]
    assert key[0]["trend"] == "Abundant"
    assert key[0]["texasStatus"] == "White-tailed Deer - Major game species"
    assert key[4]["texasStatus"] == "Species not in Texas game classification"
    assert report["speciesManagement"]["managementActions"][0].startswith("White-tailed deer population")
    assert report["habitatManagement"]["coverageAssessment"] == {
        "currentLocations": 2,
        "recommendedLocations": 4,
        "coverageQuality": "Needs improvement",
    }
    texas = report["texasRanchRecommendations"]
    assert texas["whiteTailedDeer"]["population"] == 500
    assert texas["feralHogs"]["population"] == 200
    assert texas["biodiversity"] == {
        "currentLevel": 12,
        "targetLevel": 15,
        "action": "Maintain current diversity",
    }


@pytest.mark.asyncio
async def test_ranch_insights_without_target_species(registry, upstream) -> None:
    upstream.on("GetRanchAnalytics", {"data": {"getAnalytics": {"numSpecies": 3, "imagesPerSpecies": []}}})

    response = await registry.call("getRanchManagementInsights", {"projectId": 9})

    report = response.resources()["ranch-management-insights.json"]
    assert report["texasRanchRecommendations"]["whiteTailedDeer"] is None
    assert report["texasRanchRecommendations"]["feralHogs"] is None
    assert report["texasRanchRecommendations"]["biodiversity"]["action"] == "Enhance habitat diversity"
    assert report["speciesManagement"]["managementActions"] == ["No species data available for recommendations"]


@pytest.mark.asyncio
async def test_ranch_goals_are_validated(registry) -> None:
    response = await registry.call("getRanchManagementInsights", {"projectId": 9, "ranchGoals": "fishing"})
    assert response.is_error is True


@pytest.mark.asyncio
async def test_deployment_analytics(registry, upstream) -> None:
    deployments = [
        {
            "deploymentName": "Feeder A",
            "startDatetime": "2024-01-01T00:00:00Z",
            "endDatetime": "2024-01-10T12:00:00Z",
            "location": {"id": 1, "placename": "Feeder", "latitude": 30.0, "longitude": -99.0},
            "baitType": {"typeName": "Corn"},
            "sensorHeight": "Knee height",
        },
        {
            "deploymentName": "Feeder B",
            "startDatetime": "2024-02-01T00:00:00Z",
            "endDatetime": None,
            "location": {"id": 1, "placename": "Feeder"},
        },
        {"deploymentName": "Loose", "location": None},
    ]
    upstream.on("GetDeploymentAnalytics", {"data": {"getDeploymentsByProject": {"data": deployments}}})

    response = await registry.call(
        "getDeploymentAnalytics", {"projectId": 9, "filters": {"rotation_angle": 90, "deploymentIds": [1]}}
    )

    variables = upstream.graphql_bodies("GetDeploymentAnalytics")[0]["variables"]
    assert variables["filters"] == {"rotation_angle": 90.0, "deploymentIds": [1]}
    assert response.texts() == ["Deployment Analysis for Project 9: 3 deployments across 2 locations"]
    report = response.resources()["deployment-analytics.json"]
    assert report["deploymentSummary"] == {
        "totalDeployments": 3,
        "activeDeployments": 2,
        "averageDuration": 9.5,
        "uniqueLocations": 2,
    }
    first, second, third = report["locationEffectiveness"]
    assert first["duration"] == 10
    assert first["setup"] == {"cameraHeight": "Knee height", "orientation": None, "baitType": "Corn"}
    assert second["duration"] is None
    assert third["location"] == "Unknown"
    assert third["coordinates"] is None
    assert report["optimizationRecommendations"][0] == "Good deployment density"


def test_percentage_guards_zero_total() -> None:
    assert insights.percentage(5, 0) == "500.0%"
    assert insights.percentage(1, 8) == "12.5%"


def test_species_recommendations_by_goal() -> None:
    species = [{"scientificName": "Canis latrans", "count": 3}]
    assert insights.species_recommendations(species, "conservation") == [
        "Focus conservation on Canis latrans as keystone species",
        "Maintain habitat diversity to support all detected species",
        "Consider habitat restoration to increase biodiversity",
    ]
    assert len(insights.species_recommendations(species, "ecotourism")) == 3
    assert insights.species_recommendations(species, "hunting") == [
        "Consider dove field management for bird hunting"
    ]


def test_average_duration_ignores_open_deployments() -> None:
    deployments = [
        {"startDatetime": "2024-01-01T00:00:00Z", "endDatetime": "2024-01-03T00:00:00Z"},
        {"startDatetime": "2024-01-01T00:00:00Z", "endDatetime": None},
        {"startDatetime": "garbage", "endDatetime": "2024-01-03T00:00:00Z"},
    ]
    assert insights.average_duration_days(deployments) == 2
    assert insights.average_duration_days([]) == 0
