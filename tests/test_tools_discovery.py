from __future__ import annotations

import pytest


@pytest.mark.asyncio
async def test_discover_observations_sends_wire_filters(registry, upstream) -> None:
    payload = {"getDiscoverData": {"data": [{"projectId": 1}]}}
    upstream.on("DiscoverObservations", {"data": payload})

    response = await registry.call(
        "discoverObservations",
        {
            "filters": {
                "countries": ["USA"],
                "timespan": {"start": "2023-01-01", "end": "2023-12-31"},
                "boundingBox": {"sw": {"lng": -100, "lat": 30}, "ne": {"lng": -99, "lat": 31}},
                "taxonomyGenus": ["Odocoileus"],
            }
        },
    )

    assert response.resources() == {"observations.json": payload}
    filters = upstream.graphql_bodies("DiscoverObservations")[0]["variables"]["filters"]
    assert filters == {
        "countries": ["USA"],
        "timespan": {"start": "2023-01-01", "end": "2023-12-31"},
        "boundingBox": {"sw": {"lng": -100.0, "lat": 30.0}, "ne": {"lng": -99.0, "lat": 31.0}},
        "taxonomyGenus": ["Odocoileus"],
    }


@pytest.mark.asyncio
async def test_get_projects_defaults(registry, upstream) -> None:
    await registry.call("getProjects", {})
    assert upstream.graphql_bodies("GetProjects")[0]["variables"] == {"pagination": {"limit": 50, "offset": 0}}


@pytest.mark.asyncio
async def test_get_deployments_sorts_by_name(registry, upstream) -> None:
    await registry.call("getDeployments", {"projectId": 12, "limit": 10})

    variables = upstream.graphql_bodies("GetDeployments")[0]["variables"]
    assert variables == {
        "projectId": 12,
        "pagination": {"pageSize": 10, "sort": [{"column": "deploymentName", "order": "ASC"}]},
        "filters": {},
    }


@pytest.mark.asyncio
async def test_execute_graphql_passes_document_through(registry, upstream) -> None:
    upstream.on("Custom", {"data": {"custom": True}})

    response = await registry.call(
        "executeGraphQL",
        {"query": "query Custom($id: Int!) { custom(id: $id) }", "variables": {"id": 3}, "operationName": "Custom"},
    )

    assert response.resources() == {"graphql-result.json": {"custom": True}}
    assert upstream.graphql_bodies("Custom")[0]["variables"] == {"id": 3}


@pytest.mark.asyncio
async def test_refresh_token_reports_holder_state(registry, client) -> None:
    response = await registry.call("auth.refreshToken", {})
    assert response.texts() == ["Token available"]

    client.set_token(None)
    response = await registry.call("auth.refreshToken", {})
    assert response.texts() == ["No token found"]


ORG_DATA = {
    "getParticipantData": {
        "user": {"id": 5, "email": "ranger@example.org"},
        "organizationRoles": [
            {
                "organization": {
                    "id": 10,
                    "name": "Hill Country Ranch",
                    "city": "Kerrville",
                    "state": "TX",
                    "countryCode": None,
                    "imageProjectCount": 2,
                    "sequenceProjectCount": 1,
                },
                "role": {"name": "Owner", "slug": "ORGANIZATION_OWNER"},
            },
            {
                "organization": {"id": 11, "name": "Coastal Survey", "imageProjectCount": None},
                "role": {"name": "Member", "slug": "ORGANIZATION_MEMBER"},
            },
        ],
    }
}


@pytest.mark.asyncio
async def test_get_my_organizations_projection(registry, upstream) -> None:
    upstream.on("GetMyOrganizations", {"data": ORG_DATA})

    response = await registry.call("getMyOrganizations", {})

    assert response.texts() == ["Found 2 organization(s) you have access to:"]
    orgs = response.resources()["my-organizations.json"]["organizations"]
    assert orgs[0] == {
        "id": 10,
        "name": "Hill Country Ranch",
        "role": "Owner",
        "isOwner": True,
        "projectCount": 2,
        "location": "Kerrville, TX",
    }
    assert orgs[1]["location"] == "Not specified"
    assert orgs[1]["projectCount"] == 0


@pytest.mark.asyncio
async def test_get_my_projects_resolves_first_organization(registry, upstream) -> None:
    upstream.on("GetMyOrganizations", {"data": ORG_DATA})
    upstream.on(
        "GetProjectsByOrganization",
        {
            "data": {
                "getProjects": {
                    "data": [
                        {
                            "id": 200,
                            "name": "North Pasture",
                            "startDate": "2023-01-01",
                            "endDate": None,
                            "catalogueImageCount": None,
                            "organization": {"name": "Hill Country Ranch"},
                        }
                    ],
                    "meta": {"totalItems": 1},
                }
            }
        },
    )

    response = await registry.call("getMyProjects", {})

    assert upstream.graphql_bodies("GetProjectsByOrganization")[0]["variables"]["organizationId"] == 10
    project = response.resources()["my-projects.json"]["projects"][0]
    assert project["dateRange"] == "2023-01-01"
    assert project["imageCount"] == 0
    assert project["organization"] == "Hill Country Ranch"


@pytest.mark.asyncio
async def test_get_my_projects_matches_organization_name(registry, upstream) -> None:
    upstream.on("GetMyOrganizations", {"data": ORG_DATA})

    await registry.call("getMyProjects", {"organizationName": "coastal"})

    assert upstream.graphql_bodies("GetProjectsByOrganization")[0]["variables"]["organizationId"] == 11


@pytest.mark.asyncio
async def test_get_my_projects_without_organizations(registry, upstream) -> None:
    upstream.on("GetMyOrganizations", {"data": {"getParticipantData": {"organizationRoles": []}}})

    response = await registry.call("getMyProjects", {})

    assert response.is_error is False
    assert response.texts() == ["No organization found. Please specify organizationId or organizationName."]
    assert upstream.calls("GetProjectsByOrganization") == 0


@pytest.mark.asyncio
async def test_explore_my_data_steps(registry, upstream) -> None:
    upstream.on("GetMyOrganizations", {"data": ORG_DATA})

    response = await registry.call("exploreMyData", {})
    orgs = response.resources()["my-organizations.json"]["organizations"]
    assert orgs[0]["projectCount"] == 3
    assert orgs[0]["type"] == "Not specified"

    response = await registry.call("exploreMyData", {"step": "projects"})
    assert response.texts() == ["Please specify organizationId to explore projects."]

    response = await registry.call("exploreMyData", {"step": "deployments"})
    assert response.texts() == ["Please specify projectId to explore deployments."]

    upstream.on("GetDeploymentsByProject", {"data": {"getDeploymentsByProject": {"data": [{"id": 1}], "meta": None}}})
    response = await registry.call("exploreMyData", {"step": "deployments", "projectId": 4})
    assert response.texts() == ["Found 1 deployment(s) in this project:"]
    assert response.resources()["project-deployments.json"]["deployments"] == [{"id": 1}]


@pytest.mark.asyncio
async def test_explore_my_data_rejects_unknown_step(registry) -> None:
    response = await registry.call("exploreMyData", {"step": "sites"})
    assert response.is_error is True
