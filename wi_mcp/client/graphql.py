from __future__ import annotations

import json
import time
from typing import Any, Mapping, Sequence

import httpx
import structlog

from ..core.logging_config import log_api_request, log_api_response
from .credentials import CredentialHolder
from .metrics import WI_API_LATENCY, WI_API_REQUESTS


logger = structlog.get_logger(__name__)


class GraphQLRequestError(Exception):
    """Upstream answered with a non-2xx status or a GraphQL ``errors`` list.

    Carries the status and the raw error entries so the classifier can read
    them. ``from_status`` is set when the body had no ``errors`` and the single
    entry was built from the HTTP status line. Classification happens in the
    caller.
    """

    def __init__(
        self,
        status_code: int,
        errors: Sequence[Mapping[str, Any]],
        operation_name: str | None = None,
        data: Any = None,
        from_status: bool = False,
    ) -> None:
        self.status_code = status_code
        self.from_status = from_status
        self.errors = list(errors)
        self.operation_name = operation_name
        self.data = data
        super().__init__(f"GraphQL error: {status_code} {json.dumps(self.errors, ensure_ascii=False)}")


class WiClient:
    """Single-request GraphQL executor for the Wildlife Insights API.

    The default token lives in a :class:`CredentialHolder`. A per-call token
    overrides it for that request only and never touches the holder.
    """

    def __init__(
        self,
        endpoint: str,
        credentials: CredentialHolder | None = None,
        user_agent: str = "wi-mcp/0.2.1",
        timeout_ms: int = 60000,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._credentials = credentials or CredentialHolder()
        self._user_agent = user_agent
        self._timeout = httpx.Timeout(timeout_ms / 1000.0)
        self._http_client = http_client
        self._owns_client = http_client is None

    @classmethod
    def from_settings(cls, settings: Any, http_client: httpx.AsyncClient | None = None) -> "WiClient":
        return cls(
            endpoint=settings.graphql_endpoint,
            credentials=CredentialHolder(settings.bearer_token),
            user_agent=settings.user_agent,
            timeout_ms=settings.timeout_ms,
            http_client=http_client,
        )

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def credentials(self) -> CredentialHolder:
        return self._credentials

    def set_token(self, token: str | None) -> None:
        self._credentials.set(token)
        logger.info("default_token_updated", has_token=bool(token))

    def resolve_token(self, per_call_token: str | None = None) -> str | None:
        if per_call_token:
            return per_call_token
        return self._credentials.get()

    def _headers(self, operation_name: str | None, token: str | None) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "User-Agent": self._user_agent,
            "x-operation-name": operation_name or "",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
            )
        return self._http_client

    async def aclose(self) -> None:
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def execute(
        self,
        query: str,
        variables: Mapping[str, Any] | None = None,
        operation_name: str | None = None,
        per_call_token: str | None = None,
    ) -> dict[str, Any]:
        """POST one GraphQL document and return its ``data`` object."""
        return await self.execute_with_token(query, variables, operation_name, self.resolve_token(per_call_token))

    async def execute_with_token(
        self,
        query: str,
        variables: Mapping[str, Any] | None,
        operation_name: str | None,
        token: str | None,
    ) -> dict[str, Any]:
        """Like :meth:`execute` but with an already resolved token; ``None`` sends no Authorization."""
        body = {
            "query": query,
            "variables": dict(variables or {}),
            "operationName": operation_name,
        }
        op_label = operation_name or "anonymous"

        log_api_request("POST", self._endpoint, operation_name)
        started = time.perf_counter()
        with WI_API_LATENCY.labels(op_label).time():
            try:
                response = await self._client().post(
                    self._endpoint,
                    json=body,
                    headers=self._headers(operation_name, token),
                    timeout=self._timeout,
                )
            except httpx.HTTPError as exc:
                WI_API_REQUESTS.labels(op_label, type(exc).__name__).inc()
                logger.warning(
                    "api_transport_error",
                    operation=operation_name,
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
                raise

        log_api_response(
            "POST",
            self._endpoint,
            response.status_code,
            (time.perf_counter() - started) * 1000,
            operation_name,
        )

        payload = self._decode(response)
        errors = payload.get("errors") if isinstance(payload, dict) else None

        if errors and not isinstance(errors, list):
            errors = [errors]

        if response.status_code >= 400 or errors:
            from_status = not errors
            if from_status:
                errors = [{"message": f"HTTP {response.status_code} {response.reason_phrase}".strip()}]
            WI_API_REQUESTS.labels(op_label, "error").inc()
            raise GraphQLRequestError(
                response.status_code,
                errors,
                operation_name,
                data=payload.get("data") if isinstance(payload, dict) else None,
                from_status=from_status,
            )

        WI_API_REQUESTS.labels(op_label, "ok").inc()
        data = payload.get("data") if isinstance(payload, dict) else None
        return data or {}

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return {}
        if response.status_code >= 400:
            try:
                return response.json()
            except ValueError:
                return {}
        return response.json()
