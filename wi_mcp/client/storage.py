from __future__ import annotations

import httpx
import structlog

from ..core.errors import ErrorCode, WIError
from .metrics import WI_STORAGE_UPLOADS


logger = structlog.get_logger(__name__)


class SignedUrlUploader:
    """PUTs file bytes to a pre-signed object storage URL."""

    def __init__(self, timeout_ms: int = 60000, http_client: httpx.AsyncClient | None = None) -> None:
        self._timeout = httpx.Timeout(timeout_ms / 1000.0)
        self._http_client = http_client

    async def put(self, url: str, content: bytes, content_type: str = "image/jpeg") -> int:
        """Upload ``content`` and return the storage status code."""
        headers = {"Content-Type": content_type, "Content-Length": str(len(content))}
        logger.debug("storage_upload_start", size=len(content), content_type=content_type)

        try:
            if self._http_client is not None:
                response = await self._http_client.put(url, content=content, headers=headers, timeout=self._timeout)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.put(url, content=content, headers=headers)
        except httpx.HTTPError as exc:
            WI_STORAGE_UPLOADS.labels("transport_error").inc()
            raise WIError(
                code=ErrorCode.UPLOAD_NETWORK_ERROR,
                message=f"Upload failed: {exc}",
                user_message="🌐 File upload failed. Please check your connection and try again.",
                retryable=True,
                context={"operation": "storage.put"},
                cause=exc,
            ) from exc

        if response.status_code >= 400:
            WI_STORAGE_UPLOADS.labels("error").inc()
            logger.error(
                "storage_upload_failed",
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise WIError(
                code=ErrorCode.UPLOAD_NETWORK_ERROR,
                message=f"Upload failed: {response.status_code} {response.reason_phrase} - {response.text}",
                user_message="❌ File upload to storage failed. Please try again.",
                retryable=response.status_code >= 500,
                context={"operation": "storage.put", "status_code": response.status_code},
            )

        WI_STORAGE_UPLOADS.labels("ok").inc()
        logger.info("storage_upload_complete", status_code=response.status_code, size=len(content))
        return response.status_code
