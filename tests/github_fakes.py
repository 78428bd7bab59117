"""In-memory stand-ins for the GitHub API and git, shared by the test suite."""

from typing import Any

import httpx

from ghrelease.changelog.git import GitRunner


OWNER = "octo"
REPO = "demo"
REPO_PATH = f"/repos/{OWNER}/{REPO}"


def release_json(release_id: int = 1, tag: str = "v1.0.0", **extra: Any) -> dict[str, Any]:
    data = {
        "id": release_id,
        "url": f"https://api.github.com{REPO_PATH}/releases/{release_id}",
        "upload_url": f"https://uploads.github.com{REPO_PATH}/releases/{release_id}/assets{{?name,label}}",
        "html_url": f"https://github.com/{OWNER}/{REPO}/releases/tag/{tag}",
        "tag_name": tag,
        "name": tag,
        "draft": False,
        "prerelease": False,
        "assets": [],
    }
    data.update(extra)
    return data


def upload_path(release_id: int = 1) -> str:
    return f"{REPO_PATH}/releases/{release_id}/assets"


class FakeGitHub:
    """Route table over httpx.MockTransport that records every request."""

    def __init__(self):
        self.routes: dict[tuple[str, str], httpx.Response] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, status: int, json: Any = None, text: str = "") -> None:
        if json is not None:
            self.routes[(method, path)] = httpx.Response(status, json=json)
        else:
            self.routes[(method, path)] = httpx.Response(status, text=text)

    def handler(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(500, text=f"no route for {request.method} {request.url.path}")
        return httpx.Response(route.status_code, content=route.content, headers=route.headers)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def calls(self) -> list[tuple[str, str]]:
        return [(r.method, r.url.path) for r in self.requests]

    def calls_to(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method]


class FakeGit(GitRunner):
    """GitRunner that answers from memory instead of spawning git."""

    def __init__(self, root_sha: str = "r00tc0mmit", log: str = "abc1234 Add feature\n"):
        super().__init__("git")
        self.root_sha = root_sha
        self.log = log
        self.calls: list[list[str]] = []

    async def run(self, args: list[str]) -> str:
        self.calls.append(list(args))
        if "--max-parents=0" in args:
            return self.root_sha + "\n"
        return self.log


