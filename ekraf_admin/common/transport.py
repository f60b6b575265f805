"""
HTTP transport for the backend.

Two logical clients share one base URL: ``public`` never sends credentials,
``private`` attaches the bearer token from the injected session on every
request. Each call is a single attempt; there is no retry.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from ekraf_admin import config
from ekraf_admin.common.errors import normalize_error
from ekraf_admin.common.scope import RequestScope
from ekraf_admin.common.session import SessionStore

logger = logging.getLogger(__name__)


class ApiClient:
    """
    One configured httpx client plus the request/normalize cycle around it.
    """

    def __init__(self, http: httpx.AsyncClient, name: str):
        self.http = http
        self.name = name

    async def request(
        self,
        method: str,
        path: str,
        *,
        context: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        scope: Optional[RequestScope] = None,
    ) -> Any:
        """
        Send one request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path relative to the base URL, e.g. "/products/42"
            context: Description of the operation for error messages
            params: Query parameters; None values are dropped
            json: JSON request body
            scope: Cancellation scope owning this request

        Returns:
            The decoded JSON body, or an empty dict for an empty body

        Raises:
            ApiError: Normalized failure of any kind
        """
        if params:
            params = {key: value for key, value in params.items() if value is not None}

        call = self._send(method, path, params=params, json=json)
        try:
            if scope is not None:
                return await scope.run(call, context)
            return await call
        except (httpx.HTTPError, ValueError) as exc:
            raise normalize_error(exc, context) from exc

    async def _send(self, method: str, path: str, **kwargs) -> Any:
        logger.debug("%s %s %s (%s)", self.name, method, path, kwargs.get("params") or "")
        response = await self.http.request(method, path, **kwargs)
        response.raise_for_status()
        if not response.content:
            return {}
        return response.json()

    async def get(self, path: str, **kwargs) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs) -> Any:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs) -> Any:
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs) -> Any:
        return await self.request("DELETE", path, **kwargs)


class Transport:
    """
    Owns the public and the authenticated client for one base URL.

    Args:
        session: Session the authenticated client reads its token from
        base_url: Backend API root
        http_transport: Optional httpx transport, used to plug in fakes
    """

    def __init__(
        self,
        session: SessionStore,
        base_url: str = config.API_BASE_URL,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session = session
        self.base_url = base_url
        headers = {"Accept": "application/json"}
        self.public = ApiClient(
            httpx.AsyncClient(base_url=base_url, headers=headers, transport=http_transport),
            name="public",
        )
        self.private = ApiClient(
            httpx.AsyncClient(
                base_url=base_url,
                headers=headers,
                transport=http_transport,
                event_hooks={"request": [self._attach_token]},
            ),
            name="private",
        )

    async def _attach_token(self, request: httpx.Request) -> None:
        token = self.session.get()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        else:
            # The server rejects the call with an authorization error
            request.headers.pop("Authorization", None)

    async def aclose(self) -> None:
        await self.public.http.aclose()
        await self.private.http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()
