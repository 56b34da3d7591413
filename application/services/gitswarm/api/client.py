"""
GitHub API client for making requests authenticated with installation tokens.

The client never obtains tokens itself: every call is given the bearer token
to use, so one client instance can serve any number of organizations.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from common.config.config import (
    GITHUB_API_URL,
    GITHUB_API_VERSION,
    GITSWARM_HTTP_TIMEOUT_SECONDS,
)
from common.exception import UpstreamError

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})


def quote_path(path: str) -> str:
    """URL-quote a repository path, keeping the slashes between segments."""
    return quote(path.strip("/"), safe="/")


class GitHubAPIClient:
    """Base client for GitHub REST API interactions."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_version: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize GitHub API client.

        Args:
            base_url: GitHub API base URL (defaults to config)
            api_version: Value of the X-GitHub-Api-Version header (defaults to config)
            timeout: Request timeout in seconds (defaults to config)
            http_client: Shared httpx client for connection pooling; a
                short-lived client is opened per request when omitted
        """
        self.base_url = (base_url or GITHUB_API_URL).rstrip("/")
        self.api_version = api_version or GITHUB_API_VERSION
        self.timeout = timeout if timeout is not None else GITSWARM_HTTP_TIMEOUT_SECONDS
        self._http_client = http_client

    def _get_headers(self, token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.api_version,
        }

    async def request(
        self,
        method: str,
        path: str,
        token: str,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Make a GitHub API request.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE)
            path: API path (without base URL)
            token: Installation access token
            data: JSON request body
            params: Query parameters; None values are dropped

        Returns:
            Decoded JSON response, or an empty dict for empty responses

        Raises:
            ValueError: If the HTTP method is unsupported
            UpstreamError: If GitHub answers non-2xx or cannot be reached
        """
        method_upper = method.upper()
        if method_upper not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        url = f"{self.base_url}/{path.lstrip('/')}"
        if params:
            params = {key: value for key, value in params.items() if value is not None}

        try:
            response = await self._execute_http_request(
                method_upper, url, self._get_headers(token), data, params
            )
        except httpx.RequestError as e:
            logger.error(f"GitHub API {method_upper} request to {url} failed: {e}")
            raise UpstreamError(None, str(e)) from e

        return self._process_response(response, method_upper, url)

    async def _execute_http_request(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        data: Optional[Dict[str, Any]],
        params: Optional[Dict[str, Any]],
    ) -> httpx.Response:
        timeout_config = httpx.Timeout(self.timeout, connect=10.0)
        if self._http_client is not None:
            return await self._http_client.request(
                method,
                url,
                headers=headers,
                json=data,
                params=params,
                timeout=timeout_config,
            )

        async with httpx.AsyncClient(timeout=timeout_config, trust_env=False) as client:
            return await client.request(
                method, url, headers=headers, json=data, params=params
            )

    def _process_response(self, response: httpx.Response, method: str, url: str) -> Any:
        """Process HTTP response and extract data.

        Raises:
            UpstreamError: If response status indicates failure or a success body is not JSON
        """
        if response.is_success:
            logger.debug(
                f"GitHub API {method} request to {url} "
                f"successful (status: {response.status_code})"
            )
            if response.status_code == 204 or not response.content:
                return {}
            try:
                return response.json()
            except ValueError as e:
                logger.error(
                    f"GitHub API {method} request to {url} returned a non-JSON body "
                    f"(status {response.status_code})"
                )
                raise UpstreamError(response.status_code, response.text) from e

        message = self._extract_error_message(response)
        if response.status_code == 404:
            logger.warning(f"GitHub API {method} {url} returned 404: {message}")
        else:
            logger.error(
                f"GitHub API {method} request to {url} failed "
                f"(status {response.status_code}): {message}"
            )
        raise UpstreamError(response.status_code, message)

    @staticmethod
    def _extract_error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return response.text

    async def get(
        self, path: str, token: str, params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Make a GET request."""
        return await self.request("GET", path, token, params=params)

    async def post(
        self, path: str, token: str, data: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Make a POST request."""
        return await self.request("POST", path, token, data=data)

    async def put(
        self, path: str, token: str, data: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Make a PUT request."""
        return await self.request("PUT", path, token, data=data)

    async def patch(
        self, path: str, token: str, data: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Make a PATCH request."""
        return await self.request("PATCH", path, token, data=data)

    async def delete(
        self, path: str, token: str, data: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Make a DELETE request."""
        return await self.request("DELETE", path, token, data=data)
