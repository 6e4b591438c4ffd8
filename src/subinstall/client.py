"""
Remote resource protocol.

The install flow only needs two calls against the target org:

    create(resource_type, payload)  -> {"id": ...}
    retrieve(resource_type, id)     -> record

``ResourceClient`` is that narrow interface. ``ToolingClient`` implements
it over the REST tooling API with ``requests``; each blocking call runs
in a worker thread via ``asyncio.to_thread`` so the event loop only ever
has one outstanding query per install.

Authentication is somebody else's job: the client takes an instance URL
and a ready-made access token.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Iterable, Optional

import requests

logger = logging.getLogger(__name__)


class ApiError(RuntimeError):
    """Raised when the remote API rejects a call."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ResourceNotFoundError(ApiError):
    """Raised when a retrieved resource does not exist (yet)."""


class ResourceClient:
    """Abstract base for remote resource access."""

    async def create(self, resource_type: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create a resource and return the server response (carries ``id``)."""
        raise NotImplementedError

    async def retrieve(
        self,
        resource_type: str,
        resource_id: str,
        *,
        fields: Optional[Iterable[str]] = None,
        criteria: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Fetch one resource by id.

        Args:
            resource_type: Remote object name (e.g. 'PackageInstallRequest').
            resource_id: Record id.
            fields: Restrict the returned fields.
            criteria: Extra equality filters the server must match
                (e.g. an installation key).

        Raises:
            ResourceNotFoundError: If no record matches.
        """
        raise NotImplementedError


def _soql_literal(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


class ToolingClient(ResourceClient):
    """ResourceClient over the tooling REST API.

    Args:
        instance_url: Base URL of the target instance.
        access_token: Bearer token for the session.
        api_version: REST API version (e.g. '59.0').
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        instance_url: str,
        access_token: str,
        api_version: str = "59.0",
        timeout: int = 30,
    ) -> None:
        self._instance_url = instance_url.rstrip("/")
        self._access_token = access_token
        self._api_version = api_version
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return f"{self._instance_url}/services/data/v{self._api_version}/tooling"

    def _api_call(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict] = None,
        params: Optional[Dict] = None,
    ) -> Dict[str, Any]:
        """Make an authenticated tooling API call.

        Args:
            method: HTTP method.
            endpoint: Path below the tooling base URL.
            data: JSON request body.
            params: Query string parameters.

        Returns:
            Parsed JSON response.

        Raises:
            ResourceNotFoundError: On HTTP 404.
            ApiError: On any other HTTP error.
        """
        if not self._instance_url or not self._access_token:
            raise ApiError(
                "Target org not configured. Set SUBINSTALL_INSTANCE_URL and "
                "SUBINSTALL_ACCESS_TOKEN."
            )

        url = f"{self.base_url}{endpoint}"
        headers = {
            "Authorization": f"Bearer {self._access_token}",
            "Content-Type": "application/json",
        }
        logger.debug("%s %s", method, endpoint)

        resp = requests.request(
            method, url, headers=headers, json=data, params=params, timeout=self._timeout,
        )

        if resp.status_code == 404:
            raise ResourceNotFoundError(
                f"Tooling API {method} {endpoint} not found: {resp.text}", 404,
            )
        if resp.status_code >= 400:
            raise ApiError(
                f"Tooling API {method} {endpoint} failed: "
                f"{resp.status_code} {resp.text}",
                resp.status_code,
            )

        return resp.json() if resp.content else {}

    def _query_one(
        self,
        resource_type: str,
        resource_id: str,
        fields: Iterable[str],
        criteria: Dict[str, str],
    ) -> Dict[str, Any]:
        where = [f"Id = {_soql_literal(resource_id)}"]
        where += [f"{k} = {_soql_literal(v)}" for k, v in criteria.items()]
        soql = (
            f"SELECT {', '.join(fields) or 'Id'} FROM {resource_type} "
            f"WHERE {' AND '.join(where)}"
        )
        result = self._api_call("GET", "/query/", params={"q": soql})
        records = result.get("records") or []
        if not records:
            raise ResourceNotFoundError(f"No {resource_type} found for {resource_id}", 404)
        return records[0]

    async def create(self, resource_type: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await asyncio.to_thread(
            self._api_call, "POST", f"/sobjects/{resource_type}/", payload,
        )

    async def retrieve(
        self,
        resource_type: str,
        resource_id: str,
        *,
        fields: Optional[Iterable[str]] = None,
        criteria: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        if fields is None and not criteria:
            return await asyncio.to_thread(
                self._api_call, "GET", f"/sobjects/{resource_type}/{resource_id}",
            )
        return await asyncio.to_thread(
            self._query_one, resource_type, resource_id, list(fields or []), dict(criteria or {}),
        )
