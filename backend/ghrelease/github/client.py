"""
ghrelease — GitHub REST API client.

Thin async wrapper: every call returns the status code and the fully read
body, and the underlying response is closed before the call returns.
Status interpretation is left to the caller.

Endpoints used:
  GET    /repos/{owner}/{repo}/releases/tags/{tag}  — release by tag
  GET    /repos/{owner}/{repo}/releases             — release list (newest first)
  POST   /repos/{owner}/{repo}/releases             — create release
  DELETE {release.url}                              — delete release
  GET    /repos/{owner}/{repo}/git/ref/tags/{tag}   — tag reference
  GET    /repos/{owner}/{repo}/git/tags/{sha}       — annotated tag object
  POST   {release.upload_url}?name=...              — upload asset (uploads.github.com)
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from ghrelease.github.auth import GitHubCredentials
from ghrelease.models.release import ReleaseDraft, ReleaseTarget, RemoteRelease
from ghrelease.utils.logging import logger

DEFAULT_BASE_URL = "https://api.github.com"
JSON_CONTENT_TYPE = "application/json; charset=utf-8"


@dataclass(frozen=True)
class ApiResponse:
    status_code: int
    content: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        if not self.content:
            return None
        return json.loads(self.content)


class GitHubClient:
    """
    Authenticated GitHub client, one per publish operation.

    Use as an async context manager so the connection pool is closed
    when the operation finishes.
    """

    def __init__(
        self,
        credentials: GitHubCredentials,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.credentials = credentials
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> GitHubClient:
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.credentials.as_headers(),
            timeout=self.timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        url: str,
        *,
        json_body: Any = None,
        content: bytes | None = None,
        content_type: str | None = None,
    ) -> ApiResponse:
        """Send one request and return (status, body). Absolute URLs bypass base_url."""
        if self._client is None:
            raise RuntimeError("GitHubClient must be used inside 'async with'")

        headers: dict[str, str] = {}
        if json_body is not None:
            content = json.dumps(json_body).encode("utf-8")
            headers["Content-Type"] = JSON_CONTENT_TYPE
        elif content_type:
            headers["Content-Type"] = content_type

        async with self._client.stream(method, url, headers=headers, content=content) as resp:
            body = await resp.aread()
        logger.debug("  %s %s → %d (%d bytes)", method, url, resp.status_code, len(body))
        return ApiResponse(status_code=resp.status_code, content=body)

    async def get(self, url: str) -> ApiResponse:
        return await self.request("GET", url)

    async def post(
        self,
        url: str,
        json_body: Any = None,
        content: bytes | None = None,
        content_type: str | None = None,
    ) -> ApiResponse:
        return await self.request(
            "POST", url, json_body=json_body, content=content, content_type=content_type
        )

    async def delete(self, url: str) -> ApiResponse:
        return await self.request("DELETE", url)

    # ---- Endpoint helpers ----

    async def get_release_by_tag(self, target: ReleaseTarget) -> ApiResponse:
        return await self.get(f"{target.repo_path}/releases/tags/{quote(target.tag)}")

    async def list_releases(self, target: ReleaseTarget) -> ApiResponse:
        return await self.get(f"{target.repo_path}/releases?per_page=100")

    async def create_release(self, target: ReleaseTarget, draft: ReleaseDraft) -> ApiResponse:
        return await self.post(f"{target.repo_path}/releases", json_body=draft.to_payload(target))

    async def delete_release(self, release: RemoteRelease) -> ApiResponse:
        return await self.delete(release.url)

    async def get_tag_reference(self, target: ReleaseTarget, tag: str) -> ApiResponse:
        return await self.get(f"{target.repo_path}/git/ref/tags/{quote(tag)}")

    async def get_tag_object(self, target: ReleaseTarget, sha: str) -> ApiResponse:
        return await self.get(f"{target.repo_path}/git/tags/{sha}")

    async def upload_asset(self, url: str, data: bytes, content_type: str) -> ApiResponse:
        return await self.post(url, content=data, content_type=content_type)
