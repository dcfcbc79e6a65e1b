from __future__ import annotations

from typing import Any, Mapping

from . import queries
from .base import ToolInvocation, ToolResponse, ToolSpec
from .schemas import ExploreMyDataInput, MyOrganizationsInput, MyProjectsInput


PROJECTS_PAGE = {"pageSize": 50, "pageNumber": 1, "sort": []}


def _location(org: Mapping[str, Any]) -> str:
    parts = [org.get("city"), org.get("state"), org.get("countryCode")]
    return ", ".join(p for p in parts if p) or "Not specified"


def summarize_organizations(data: Mapping[str, Any]) -> dict[str, Any]:
    participant = data.get("getParticipantData") or {}
    organizations = []
    for role in participant.get("organizationRoles") or []:
        org = role.get("organization") or {}
        role_info = role.get("role") or {}
        organizations.append({
            "id": org.get("id"),
            "name": org.get("name"),
            "role": role_info.get("name"),
            "isOwner": role_info.get("slug") == "ORGANIZATION_OWNER",
            "projectCount": org.get("imageProjectCount") or 0,
            "location": _location(org),
        })
    return {"organizations": organizations, "user": participant.get("user")}


def summarize_explored_organizations(data: Mapping[str, Any]) -> dict[str, Any]:
    participant = data.get("getParticipantData") or {}
    organizations = []
    for role in participant.get("organizationRoles") or []:
        org = role.get("organization") or {}
        organizations.append({
            "id": org.get("id"),
            "name": org.get("name"),
            "role": (role.get("role") or {}).get("name"),
            "projectCount": (org.get("imageProjectCount") or 0) + (org.get("sequenceProjectCount") or 0),
            "type": org.get("projectType") or "Not specified",
        })
    return {"organizations": organizations, "user": participant.get("user")}


def _date_range(project: Mapping[str, Any]) -> str:
    start, end = project.get("startDate"), project.get("endDate")
    if start and end:
        return f"{start} to {end}"
    return start or "Not specified"


def summarize_projects(data: Mapping[str, Any]) -> dict[str, Any]:
    result = data.get("getProjects") or {}
    projects = [
        {
            "id": p.get("id"),
            "name": p.get("name"),
            "shortName": p.get("shortName"),
            "type": p.get("projectType"),
            "status": p.get("status"),
            "country": p.get("primaryCountry"),
            "dateRange": _date_range(p),
            "imageCount": p.get("catalogueImageCount") or 0,
            "organization": (p.get("organization") or {}).get("name"),
        }
        for p in result.get("data") or []
    ]
    return {"projects": projects, "metadata": result.get("meta")}


async def get_my_organizations(ctx: ToolInvocation, args: MyOrganizationsInput) -> ToolResponse:
    data = await ctx.execute(queries.MY_ORGANIZATIONS, {}, "GetMyOrganizations")
    summary = summarize_organizations(data)
    return ToolResponse.with_resource(
        f"Found {len(summary['organizations'])} organization(s) you have access to:",
        summary,
        "my-organizations.json",
    )


async def _resolve_organization_id(ctx: ToolInvocation, name: str | None) -> int | None:
    """First accessible organization, or the first whose name contains ``name``."""
    data = await ctx.execute(queries.MY_ORGANIZATION_IDS, {}, "GetMyOrganizations")
    roles = (data.get("getParticipantData") or {}).get("organizationRoles") or []
    organizations = [role.get("organization") or {} for role in roles]
    if name:
        needle = name.casefold()
        organizations = [org for org in organizations if needle in (org.get("name") or "").casefold()]
    if not organizations:
        return None
    return organizations[0].get("id")


async def get_my_projects(ctx: ToolInvocation, args: MyProjectsInput) -> ToolResponse:
    organization_id = args.organization_id
    if organization_id is None:
        organization_id = await _resolve_organization_id(ctx, args.organization_name)

    if organization_id is None:
        return ToolResponse.text("No organization found. Please specify organizationId or organizationName.")

    data = await ctx.execute(
        queries.PROJECTS_BY_ORGANIZATION,
        {"organizationId": int(organization_id), "pagination": PROJECTS_PAGE},
        "GetProjectsByOrganization",
    )
    summary = summarize_projects(data)
    return ToolResponse.with_resource(
        f"Found {len(summary['projects'])} project(s) in organization:",
        summary,
        "my-projects.json",
    )


async def explore_my_data(ctx: ToolInvocation, args: ExploreMyDataInput) -> ToolResponse:
    if args.step == "organizations":
        data = await ctx.execute(queries.EXPLORE_ORGANIZATIONS, {}, "GetMyOrganizations")
        summary = summarize_explored_organizations(data)
        return ToolResponse.with_resource(
            f"You have access to {len(summary['organizations'])} organization(s):",
            summary,
            "my-organizations.json",
        )

    if args.step == "projects":
        if args.organization_id is None:
            return ToolResponse.text("Please specify organizationId to explore projects.")
        data = await ctx.execute(
            queries.PROJECTS_BY_ORGANIZATION,
            {"organizationId": args.organization_id, "pagination": PROJECTS_PAGE},
            "GetProjectsByOrganization",
        )
        result = data.get("getProjects") or {}
        projects = result.get("data") or []
        return ToolResponse.with_resource(
            f"Found {len(projects)} project(s) in this organization:",
            {"projects": projects, "metadata": result.get("meta")},
            "organization-projects.json",
        )

    if args.project_id is None:
        return ToolResponse.text("Please specify projectId to explore deployments.")
    data = await ctx.execute(
        queries.EXPLORE_DEPLOYMENTS,
        {"projectId": args.project_id},
        "GetDeploymentsByProject",
    )
    result = data.get("getDeploymentsByProject") or {}
    deployments = result.get("data") or []
    return ToolResponse.with_resource(
        f"Found {len(deployments)} deployment(s) in this project:",
        {"deployments": deployments, "metadata": result.get("meta")},
        "project-deployments.json",
    )


TOOLS = [
    ToolSpec(
        name="getMyOrganizations",
        title="Get My Organizations",
        description="Get organizations I have access to based on my credentials",
        input_model=MyOrganizationsInput,
        handler=get_my_organizations,
    ),
    ToolSpec(
        name="getMyProjects",
        title="Get My Projects",
        description="Get projects within an organization I have access to",
        input_model=MyProjectsInput,
        handler=get_my_projects,
    ),
    ToolSpec(
        name="exploreMyData",
        title="Explore My Wildlife Data",
        description="Navigate through my Wildlife Insights data hierarchy using natural language",
        input_model=ExploreMyDataInput,
        handler=explore_my_data,
    ),
]
