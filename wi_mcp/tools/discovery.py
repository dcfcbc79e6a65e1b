from __future__ import annotations

from . import queries
from .base import ToolInvocation, ToolResponse, ToolSpec
from .schemas import DiscoverObservationsInput, ExecuteGraphQLInput, GetDeploymentsInput, GetProjectsInput


async def discover_observations(ctx: ToolInvocation, args: DiscoverObservationsInput) -> ToolResponse:
    data = await ctx.execute(
        queries.DISCOVER_OBSERVATIONS,
        {"filters": args.filters.to_variables()},
        "DiscoverObservations",
    )
    return ToolResponse.resource(data, "observations.json")


async def get_projects(ctx: ToolInvocation, args: GetProjectsInput) -> ToolResponse:
    variables = {"pagination": {"limit": args.limit, "offset": args.offset}}
    data = await ctx.execute(queries.GET_PROJECTS, variables, "GetProjects")
    return ToolResponse.resource(data, "projects.json")


async def get_deployments(ctx: ToolInvocation, args: GetDeploymentsInput) -> ToolResponse:
    variables = {
        "projectId": args.project_id,
        "pagination": {
            "pageSize": args.limit,
            "sort": [{"column": "deploymentName", "order": "ASC"}],
        },
        "filters": {},
    }
    data = await ctx.execute(queries.GET_DEPLOYMENTS, variables, "GetDeployments")
    return ToolResponse.resource(data, "deployments.json")


async def execute_graphql(ctx: ToolInvocation, args: ExecuteGraphQLInput) -> ToolResponse:
    data = await ctx.execute(args.query, args.variables, args.operation_name)
    return ToolResponse.resource(data, "graphql-result.json")


TOOLS = [
    ToolSpec(
        name="discoverObservations",
        title="Discover Wildlife Observations",
        description="Search for wildlife observations using filters",
        input_model=DiscoverObservationsInput,
        handler=discover_observations,
    ),
    ToolSpec(
        name="getProjects",
        title="List Projects",
        description="Get a list of available projects",
        input_model=GetProjectsInput,
        handler=get_projects,
    ),
    ToolSpec(
        name="getDeployments",
        title="List Project Deployments",
        description="Get deployments for a specific project",
        input_model=GetDeploymentsInput,
        handler=get_deployments,
    ),
    # Not retried: the document may be a mutation.
    ToolSpec(
        name="executeGraphQL",
        title="Execute Custom GraphQL Query",
        description="Execute a custom GraphQL query or mutation",
        input_model=ExecuteGraphQLInput,
        handler=execute_graphql,
        retry=False,
    ),
]
