from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import Any, Mapping

import structlog

from ..core.errors import ErrorCode, WIError
from . import queries
from .base import ToolInvocation, ToolResponse, ToolSpec
from .schemas import (
    CompleteUploadInput,
    CreateUploadInput,
    UploadImageFileInput,
    UploadImageWorkflowInput,
    UploadUrlInput,
    ValidateDeploymentInput,
    ValidateFileInput,
)


logger = structlog.get_logger(__name__)

UPLOAD_FINISHED = "UPLOAD_FINISHED"

UPLOAD_NEXT_STEPS = [
    "File has been uploaded and session completed",
    "Monitor processing status in Wildlife Insights interface",
    "Check upload report for processing results",
    "File should appear in identification workflow once processed",
]

UPLOAD_TROUBLESHOOTING = {
    "If file doesn't appear": "Wait a few minutes for processing, then check upload report",
    "If processing fails": "Use 'Retry unprocessed images' in Wildlife Insights interface",
    "If session shows errors": "Check the upload report URL for detailed error information",
}


def client_id() -> str:
    return f"mcp-{int(time.time() * 1000)}"


def formatted_file_name(file_name: str, file_size: str) -> str:
    """Upstream dedupe key: ``name||size``."""
    return f"{file_name}||{file_size}"


def is_ready_for_upload(deployment: Mapping[str, Any]) -> bool:
    return bool(deployment.get("startDatetime") and deployment.get("endDatetime") and deployment.get("locationId"))


def deployment_issues(deployment: Mapping[str, Any]) -> list[str]:
    issues = []
    if not deployment.get("startDatetime"):
        issues.append("Missing start date")
    if not deployment.get("endDatetime"):
        issues.append("Missing end date")
    if not deployment.get("locationId"):
        issues.append("Missing location")
    return issues


async def _create_session(ctx: ToolInvocation, project_id: int, deployment_id: int, **request: Any) -> dict:
    variables = {
        "uiUploadCreateRequest": {
            "projectId": project_id,
            "deploymentId": deployment_id,
            "noOfImages": request.get("no_of_images", 1),
            "noOfDuplicateImages": request.get("no_of_duplicate_images", 0),
            "duplicateFlagOnUpload": request.get("duplicate_flag_on_upload", True),
        }
    }
    return await ctx.execute(queries.CREATE_UPLOAD, variables, "createUIUpload")


async def _upload_url(
    ctx: ToolInvocation,
    project_id: int,
    deployment_id: int,
    upload_id: int,
    file_name: str,
    file_size: str,
    content_type: str,
    cid: str | None = None,
) -> dict:
    variables = {
        "projectId": project_id,
        "deploymentId": deployment_id,
        "uploadId": upload_id,
        "fileName": file_name,
        "fileSize": file_size,
        "contentType": content_type,
        "clientId": cid or client_id(),
    }
    return await ctx.execute(queries.UPLOAD_URL, variables, "getUploadUrlByFilenameAndSize")


async def _complete(ctx: ToolInvocation, upload_id: int, status: str) -> dict:
    variables = {"uploadId": upload_id, "updateUIUplaodRequest": {"status": status}}
    return await ctx.execute(queries.COMPLETE_UPLOAD, variables, "updateUIUpload")


async def _file_exists(ctx: ToolInvocation, project_id: int, deployment_id: int, name: str) -> bool:
    data = await ctx.execute(
        queries.FILES_BY_NAME_AND_SIZE,
        {"projectId": project_id, "deploymentId": deployment_id, "fileNameList": [name]},
        "getDataFilesByFileNameAndSize",
    )
    exists = (data.get("getDataFilesByFileNameAndSize") or {}).get("exists") or []
    return bool(exists[0]) if exists else False


async def create_upload(ctx: ToolInvocation, args: CreateUploadInput) -> ToolResponse:
    data = await _create_session(
        ctx,
        args.project_id,
        args.deployment_id,
        no_of_images=args.no_of_images,
        no_of_duplicate_images=args.no_of_duplicate_images,
        duplicate_flag_on_upload=args.duplicate_flag_on_upload,
    )
    upload_id = (data.get("createUIUpload") or {}).get("id")
    return ToolResponse.with_resource(
        f"Upload session created successfully! Upload ID: {upload_id}",
        data,
        "upload-session.json",
    )


async def get_upload_url(ctx: ToolInvocation, args: UploadUrlInput) -> ToolResponse:
    data = await _upload_url(
        ctx,
        args.project_id,
        args.deployment_id,
        args.upload_id,
        args.file_name,
        args.file_size,
        args.content_type,
        args.client_id,
    )
    if not data.get("getUploadUrlByFilenameAndSize"):
        return ToolResponse.text("Failed to get upload URL. Make sure the upload session exists.")
    return ToolResponse.with_resource(
        f"Upload URL generated for {args.file_name} ({args.file_size} bytes)",
        data,
        "upload-url.json",
    )


async def complete_upload(ctx: ToolInvocation, args: CompleteUploadInput) -> ToolResponse:
    data = await _complete(ctx, args.upload_id, args.status)
    return ToolResponse.with_resource(
        f"Upload session {args.upload_id} marked as {args.status}",
        data,
        "upload-completion.json",
    )


async def validate_deployment_for_upload(ctx: ToolInvocation, args: ValidateDeploymentInput) -> ToolResponse:
    if args.deployment_id is None:
        data = await ctx.execute(
            queries.PROJECT_DEPLOYMENTS_FOR_UPLOAD, {"projectId": args.project_id}, "getDeploymentsByProject"
        )
        deployments = (data.get("getDeploymentsByProject") or {}).get("data") or []
        valid = [d for d in deployments if is_ready_for_upload(d)]
        invalid = [d for d in deployments if not is_ready_for_upload(d)]
        return ToolResponse.with_resource(
            f"Found {len(deployments)} deployment(s). {len(valid)} ready for uploads.",
            {"allDeployments": deployments, "validDeployments": valid, "invalidDeployments": invalid},
            "deployment-validation.json",
        )

    data = await ctx.execute(queries.DEPLOYMENT, {"deploymentId": args.deployment_id}, "getDeployment")
    deployment = data.get("getDeployment")
    if not deployment:
        raise WIError(
            code=ErrorCode.API_RESPONSE_INVALID,
            message=f"Deployment {args.deployment_id} not found",
            user_message=f"❌ Deployment {args.deployment_id} was not found or is not accessible.",
            context={"tool": ctx.tool_name, "operation": "getDeployment"},
        )

    issues = deployment_issues(deployment)
    is_valid = not issues
    detail = "Ready for uploads!" if is_valid else f"Issues: {', '.join(issues)}"
    next_steps = (
        ["Use uploadImageFile tool"]
        if is_valid
        else [
            "Configure deployment in Wildlife Insights web interface",
            "Set start/end dates",
            "Add location information",
        ]
    )
    return ToolResponse.with_resource(
        f'Deployment "{deployment.get("deploymentName")}" is {"VALID" if is_valid else "INVALID"} for uploads. {detail}',
        {"deployment": deployment, "isValidForUpload": is_valid, "issues": issues, "nextSteps": next_steps},
        "deployment-status.json",
    )


async def validate_file_for_upload(ctx: ToolInvocation, args: ValidateFileInput) -> ToolResponse:
    name = formatted_file_name(args.file_name, args.file_size)
    exists = await _file_exists(ctx, args.project_id, args.deployment_id, name)
    next_steps = (
        ["File already exists - consider renaming or check if re-upload is needed"]
        if exists
        else ["File is new and can be uploaded", "Use uploadImageFile to proceed with upload"]
    )
    return ToolResponse.with_resource(
        f"File validation for {args.file_name}: {'EXISTS' if exists else 'NEW FILE'}",
        {
            "fileName": args.file_name,
            "fileSize": args.file_size,
            "formattedFileName": name,
            "exists": exists,
            "canUpload": not exists,
            "nextSteps": next_steps,
        },
        "file-validation.json",
    )


async def upload_image_file(ctx: ToolInvocation, args: UploadImageFileInput) -> ToolResponse:
    """Validate, open a session, fetch a signed URL, PUT the bytes and complete.

    Steps run strictly in order; the first failing step raises and the rest
    are skipped.
    """
    path = Path(args.local_file_path)
    if not path.is_file():
        raise WIError(
            code=ErrorCode.UPLOAD_FILE_NOT_FOUND,
            message=f"File not found: {args.local_file_path}",
            user_message=f"❌ File not found: {args.local_file_path}",
            context={"tool": ctx.tool_name, "operation": "stat"},
        )

    file_name = path.name
    file_size = str(path.stat().st_size)
    log = logger.bind(tool=ctx.tool_name, file_name=file_name, file_size=file_size)
    log.debug("upload_processing_file")

    if args.validate_file:
        if await _file_exists(ctx, args.project_id, args.deployment_id, formatted_file_name(file_name, file_size)):
            return ToolResponse.text(
                f'⚠️ File "{file_name}" already exists in this project/deployment.',
                f"📁 File path: {args.local_file_path}",
            )

    session = await _create_session(ctx, args.project_id, args.deployment_id)
    upload_id = (session.get("createUIUpload") or {}).get("id")
    if not upload_id:
        raise WIError(
            code=ErrorCode.UPLOAD_SESSION_FAILED,
            message="createUIUpload returned no upload id",
            user_message="❌ Failed to create upload session.",
            context={"tool": ctx.tool_name, "operation": "createUIUpload"},
        )

    url_data = await _upload_url(
        ctx, args.project_id, args.deployment_id, upload_id, file_name, file_size, args.content_type
    )
    upload_info = url_data.get("getUploadUrlByFilenameAndSize")
    if not upload_info or not upload_info.get("mainUrl"):
        raise WIError(
            code=ErrorCode.UPLOAD_URL_GENERATION_FAILED,
            message=f"No signed upload URL for upload {upload_id}",
            user_message="❌ Failed to get upload URL.",
            context={"tool": ctx.tool_name, "operation": "getUploadUrlByFilenameAndSize"},
        )

    content = await asyncio.to_thread(path.read_bytes)
    status_code = await ctx.uploader.put(upload_info["mainUrl"], content, args.content_type)
    log.info("upload_stored", upload_id=upload_id, status_code=status_code)

    completion = await _complete(ctx, upload_id, UPLOAD_FINISHED)

    result = {
        "uploadSession": {
            "id": upload_id,
            "projectId": args.project_id,
            "deploymentId": args.deployment_id,
            "status": "UPLOAD_COMPLETED",
        },
        "fileInfo": {
            "fileName": file_name,
            "fileSize": file_size,
            "localFilePath": args.local_file_path,
            "contentType": args.content_type,
        },
        "uploadDetails": {
            "uploadUrl": upload_info["mainUrl"],
            "uploadResponse": status_code,
            "sessionCompletion": completion.get("updateUIUpload"),
        },
        "nextSteps": UPLOAD_NEXT_STEPS,
        "troubleshooting": UPLOAD_TROUBLESHOOTING,
    }
    return ToolResponse.with_resource(
        f'✅ File "{file_name}" uploaded successfully! Session {upload_id} completed.',
        result,
        "upload-result.json",
    )


async def upload_image_workflow(ctx: ToolInvocation, args: UploadImageWorkflowInput) -> ToolResponse:
    return ToolResponse.text(
        "⚠️ This tool has been replaced by 'uploadImageFile' which handles the complete upload process automatically.",
        "📋 Use 'uploadImageFile' instead - it uploads the file directly without requiring manual curl commands.",
    )


TOOLS = [
    ToolSpec(
        name="createUpload",
        title="Create Image Upload Session",
        description="Create a new upload session for camera trap images",
        input_model=CreateUploadInput,
        handler=create_upload,
        retry=False,
    ),
    ToolSpec(
        name="getUploadUrl",
        title="Get File Upload URL",
        description="Get signed URL for uploading camera trap images",
        input_model=UploadUrlInput,
        handler=get_upload_url,
    ),
    ToolSpec(
        name="completeUpload",
        title="Complete Upload Session",
        description="Mark an upload session as finished",
        input_model=CompleteUploadInput,
        handler=complete_upload,
        retry=False,
    ),
    ToolSpec(
        name="validateDeploymentForUpload",
        title="Validate Deployment for Upload",
        description="Check if a deployment is properly configured for image uploads",
        input_model=ValidateDeploymentInput,
        handler=validate_deployment_for_upload,
    ),
    ToolSpec(
        name="validateFileForUpload",
        title="Validate File for Upload",
        description="Check if a file can be uploaded by validating against existing files",
        input_model=ValidateFileInput,
        handler=validate_file_for_upload,
    ),
    ToolSpec(
        name="uploadImageFile",
        title="Upload Image File to Wildlife Insights",
        description="Upload a local image file directly to Wildlife Insights (handles the complete workflow)",
        input_model=UploadImageFileInput,
        handler=upload_image_file,
        retry=False,
    ),
    ToolSpec(
        name="uploadImageWorkflow",
        title="Complete Image Upload Workflow",
        description="Deprecated upload workflow; use uploadImageFile instead",
        input_model=UploadImageWorkflowInput,
        handler=upload_image_workflow,
        retry=False,
    ),
]
