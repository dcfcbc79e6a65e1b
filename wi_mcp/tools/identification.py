from __future__ import annotations

from typing import Any, Mapping

import structlog

from ..core.errors import classify_error
from . import queries
from .base import ToolInvocation, ToolResponse, ToolSpec
from .schemas import (
    BulkIdentifyInput,
    ImagesForIdentificationInput,
    ProjectInput,
    SubmitIdentificationInput,
)


logger = structlog.get_logger(__name__)

NEXT_STEPS = [
    "Use getImagesForIdentification to get more images",
    "Use submitIdentification to identify individual images",
    "Use bulkIdentifyImages to process multiple images at once",
]


def identify_count(data: Mapping[str, Any]) -> int:
    return ((data.get("getCountInIdentifyForProject") or {}).get("meta") or {}).get("totalItems") or 0


def summarize_identify_image(image: Mapping[str, Any]) -> dict[str, Any]:
    deployment = image.get("deployment") or {}
    location = deployment.get("location")
    outputs = image.get("identificationOutputs") or []
    return {
        "id": image.get("id"),
        "filename": image.get("filename"),
        "thumbnailUrl": image.get("thumbnailUrl"),
        "timestamp": image.get("timestamp"),
        "deployment": deployment.get("deploymentName") or "Unknown",
        "location": (location or {}).get("placename") or "Unknown",
        "coordinates": (
            {"lat": location.get("latitude"), "lng": location.get("longitude")} if location else None
        ),
        "currentIdentifications": [
            {
                "isBlank": output.get("blankYn"),
                "confidence": output.get("confidence"),
                "species": [
                    name
                    for name in (
                        (obj.get("taxonomy") or {}).get("scientificName")
                        or (obj.get("taxonomy") or {}).get("commonNameEnglish")
                        for obj in output.get("identifiedObjects") or []
                    )
                    if name
                ],
                "count": ((output.get("identifiedObjects") or [{}])[0] or {}).get("count") or 0,
            }
            for output in outputs
        ],
    }


def summarize_workflow_image(image: Mapping[str, Any]) -> dict[str, Any]:
    deployment = image.get("deployment") or {}
    outputs = image.get("identificationOutputs") or []
    return {
        "id": image.get("id"),
        "filename": image.get("filename"),
        "thumbnailUrl": image.get("thumbnailUrl"),
        "deployment": deployment.get("deploymentName"),
        "location": (deployment.get("location") or {}).get("placename"),
        "hasIdentifications": len(outputs) > 0,
        "identificationCount": len(outputs),
    }


async def get_identify_photos_count(ctx: ToolInvocation, args: ProjectInput) -> ToolResponse:
    data = await ctx.execute(queries.IDENTIFY_COUNT, {"projectId": args.project_id}, "getIdentifyPhotosCount")
    count = identify_count(data)
    return ToolResponse.with_resource(
        f"Found {count} image(s) needing identification in project {args.project_id}",
        data,
        "identify-count.json",
    )


async def get_images_for_identification(ctx: ToolInvocation, args: ImagesForIdentificationInput) -> ToolResponse:
    # Upstream pages by number; offset is accepted but the first page is always returned.
    variables = {
        "projectId": args.project_id,
        "pagination": {"pageSize": args.limit, "pageNumber": 1, "sort": []},
    }
    data = await ctx.execute(queries.IDENTIFY_IMAGES, variables, "getDataFilesForIdentifyForProject")
    result = data.get("getDataFilesForIdentifyForProject") or {}
    images = result.get("data") or []
    return ToolResponse.with_resource(
        f"Retrieved {len(images)} image(s) for identification from project {args.project_id}",
        {"images": [summarize_identify_image(img) for img in images], "metadata": result.get("meta")},
        "identify-images.json",
    )


def _identification_variables(project_id: int, deployment_id: int, data_file_id: int, identification: Any) -> dict:
    return {
        "projectId": project_id,
        "deploymentId": deployment_id,
        "dataFileId": data_file_id,
        "identification": identification.to_variables(),
    }


async def submit_identification(ctx: ToolInvocation, args: SubmitIdentificationInput) -> ToolResponse:
    data = await ctx.execute(
        queries.CREATE_IDENTIFICATION,
        _identification_variables(args.project_id, args.deployment_id, args.data_file_id, args.identification),
        "createIdentificationOutput",
    )
    return ToolResponse.with_resource(
        f"Successfully submitted identification for image {args.data_file_id}",
        data,
        "identification-result.json",
    )


async def bulk_identify_images(ctx: ToolInvocation, args: BulkIdentifyInput) -> ToolResponse:
    """Submit each identification in turn; one failure does not stop the batch."""
    results: list[dict[str, Any]] = []
    for item in args.identifications:
        try:
            data = await ctx.execute(
                queries.CREATE_IDENTIFICATION,
                _identification_variables(args.project_id, item.deployment_id, item.data_file_id, item.identification),
                "createIdentificationOutput",
            )
        except Exception as exc:  # noqa: BLE001 - recorded per item
            error = classify_error(exc, ctx.tool_name, "createIdentificationOutput")
            logger.warning(
                "bulk_identification_item_failed",
                data_file_id=item.data_file_id,
                code=error.code.value,
                error=error.message,
            )
            results.append({
                "dataFileId": item.data_file_id,
                "success": False,
                "error": error.message,
                "code": error.code.value,
            })
            continue
        results.append({
            "dataFileId": item.data_file_id,
            "success": True,
            "result": data.get("createIdentificationOutput"),
        })

    success_count = sum(1 for r in results if r["success"])
    failure_count = len(results) - success_count
    return ToolResponse.with_resource(
        f"Bulk identification completed: {success_count} successful, {failure_count} failed",
        {"results": results, "summary": {"successCount": success_count, "failureCount": failure_count}},
        "bulk-identification-results.json",
    )


async def get_identification_workflow(ctx: ToolInvocation, args: ProjectInput) -> ToolResponse:
    count_data = await ctx.execute(
        queries.IDENTIFY_COUNT, {"projectId": args.project_id}, "getIdentifyPhotosCount"
    )
    images_data = await ctx.execute(
        queries.IDENTIFY_IMAGES,
        {"projectId": args.project_id, "pagination": {"pageSize": 5, "pageNumber": 1, "sort": []}},
        "getDataFilesForIdentifyForProject",
    )
    images = images_data.get("getDataFilesForIdentifyForProject") or {}
    status = {
        "projectId": args.project_id,
        "imagesNeedingIdentification": identify_count(count_data),
        "sampleImages": [summarize_workflow_image(img) for img in images.get("data") or []],
        "totalImagesAvailable": (images.get("meta") or {}).get("totalItems") or 0,
        "nextSteps": NEXT_STEPS,
    }
    return ToolResponse.with_resource(
        f"Identification Workflow Status for Project {args.project_id}: "
        f"{status['imagesNeedingIdentification']} images need identification",
        status,
        "identification-workflow.json",
    )


TOOLS = [
    ToolSpec(
        name="getIdentifyPhotosCount",
        title="Get Images Needing Identification",
        description="Get count of images that need identification in a project",
        input_model=ProjectInput,
        handler=get_identify_photos_count,
    ),
    ToolSpec(
        name="getImagesForIdentification",
        title="Get Images for Identification",
        description="Get images that need identification with pagination",
        input_model=ImagesForIdentificationInput,
        handler=get_images_for_identification,
    ),
    ToolSpec(
        name="submitIdentification",
        title="Submit Image Identification",
        description="Submit identification for an image",
        input_model=SubmitIdentificationInput,
        handler=submit_identification,
        retry=False,
    ),
    ToolSpec(
        name="bulkIdentifyImages",
        title="Bulk Identify Images",
        description="Submit identifications for multiple images at once",
        input_model=BulkIdentifyInput,
        handler=bulk_identify_images,
        retry=False,
    ),
    ToolSpec(
        name="getIdentificationWorkflow",
        title="Get Identification Workflow Status",
        description="Get complete workflow status for identification process",
        input_model=ProjectInput,
        handler=get_identification_workflow,
    ),
]
