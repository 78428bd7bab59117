"""
ghrelease — Release publisher.

Runs the publish workflow as a state machine:

  CHECKING → NOT_FOUND_CREATE                  → create → upload → DONE
  CHECKING → FOUND_OVERWRITE → delete → create → upload → DONE
  CHECKING → FOUND_APPEND                               → upload → DONE
  CHECKING → FOUND_FAIL                                          → ERROR

A generated release body is built only on the two create paths, before
the delete when overwriting.

Any error moves the machine to ERROR and propagates. Nothing already
done on GitHub is rolled back: a release created earlier in the run
stays, and failed uploads are reported in the result.
"""

from __future__ import annotations

import time
from typing import Awaitable, Callable, Sequence

import httpx

from ghrelease.changelog.resolver import resolve_body
from ghrelease.core.config import PublishConfig
from ghrelease.errors import (
    ReleaseAlreadyExistsError,
    RepositoryNotFoundError,
    UnexpectedResponseError,
)
from ghrelease.github.auth import GitHubCredentials
from ghrelease.github.client import ApiResponse, GitHubClient
from ghrelease.models.job import PublishResult, PublishState, StepTiming, UploadOutcome
from ghrelease.models.release import (
    Asset,
    ReleaseDraft,
    ReleaseTarget,
    RemoteRelease,
    UpdatePolicy,
)
from ghrelease.pipeline.resolve_assets import resolve_assets
from ghrelease.pipeline.upload import AssetUploader
from ghrelease.utils.logging import logger


class ReleasePublisher:
    """
    State-machine publisher for one release.

    Tracks every step's timing and status and returns a PublishResult
    with the release reference and one outcome per asset.
    """

    def __init__(self, client: GitHubClient, uploader: AssetUploader | None = None):
        self.client = client
        self.uploader = uploader or AssetUploader(client)
        self.state = PublishState.CHECKING
        self.timings: list[StepTiming] = []

    def _record_step(self, name: str, start: float, status: str = "ok", detail: str = ""):
        ms = int((time.perf_counter() - start) * 1000)
        self.timings.append(StepTiming(step=name, duration_ms=ms, status=status, detail=detail))
        symbol = "✓" if status == "ok" else ("⊘" if status == "skipped" else "✗")
        logger.info("  %s %s — %dms %s", symbol, name, ms, detail)

    async def publish(
        self,
        target: ReleaseTarget,
        draft: ReleaseDraft,
        policy: UpdatePolicy,
        assets: Sequence[Asset],
        body_source: Callable[[], Awaitable[str]] | None = None,
    ) -> PublishResult:
        """
        Create, replace or extend the release for `target.tag`, then upload assets.

        `body_source` is awaited for the release body only when a release is
        about to be created; appending or failing on an existing release never
        calls it.
        """
        logger.info("=" * 60)
        logger.info(
            "Publishing %s/%s %s (policy=%s, %d assets)",
            target.owner, target.repository, target.tag, policy.value, len(assets),
        )
        logger.info("=" * 60)
        self.state = PublishState.CHECKING
        self.timings = []
        self.uploader.warnings.clear()
        created = deleted = False

        try:
            existing = await self._step_check(target)

            if existing is None:
                self.state = PublishState.NOT_FOUND_CREATE
                draft = await self._step_body(draft, body_source)
                release = await self._step_create(target, draft)
                created = True
            elif policy is UpdatePolicy.FAIL_ON_EXISTING:
                self.state = PublishState.FOUND_FAIL
                raise ReleaseAlreadyExistsError(target.tag)
            elif policy is UpdatePolicy.OVERWRITE:
                self.state = PublishState.FOUND_OVERWRITE
                draft = await self._step_body(draft, body_source)
                await self._step_delete(target, existing)
                deleted = True
                release = await self._step_create(target, draft)
                created = True
            else:
                self.state = PublishState.FOUND_APPEND
                logger.info("  Assets will be added to the existing release.")
                release = existing

            outcomes = await self._step_upload(release, assets)
            self.state = PublishState.DONE

        except Exception:
            self.state = PublishState.ERROR
            raise

        logger.info("=" * 60)
        logger.info("Published %s → %s", release.tag_name, release.html_url or release.url)
        logger.info("=" * 60)

        return PublishResult(
            release=release,
            state=self.state,
            created=created,
            deleted_previous=deleted,
            outcomes=outcomes,
            timings=self.timings,
            warnings=list(self.uploader.warnings),
        )

    @staticmethod
    def _parse_release(resp: ApiResponse, operation: str) -> RemoteRelease:
        # JSONDecodeError and pydantic ValidationError are both ValueErrors
        try:
            return RemoteRelease.model_validate(resp.json())
        except ValueError:
            raise UnexpectedResponseError(resp.status_code, resp.text, operation) from None

    async def _step_body(
        self,
        draft: ReleaseDraft,
        body_source: Callable[[], Awaitable[str]] | None,
    ) -> ReleaseDraft:
        if body_source is None:
            return draft
        t = time.perf_counter()
        body = await body_source()
        self._record_step("changelog", t, detail=f"{len(body.splitlines())} lines")
        return draft.model_copy(update={"body": body})

    async def _step_check(self, target: ReleaseTarget) -> RemoteRelease | None:
        t = time.perf_counter()
        resp = await self.client.get_release_by_tag(target)
        if resp.status_code == 200:
            release = self._parse_release(resp, "release lookup")
            self._record_step("check", t, detail=f"found release {release.id}")
            return release
        if resp.status_code == 404:
            self._record_step("check", t, detail="no release for tag")
            return None
        self._record_step("check", t, "failed", f"HTTP {resp.status_code}")
        raise UnexpectedResponseError(resp.status_code, resp.text, "release lookup")

    async def _step_delete(self, target: ReleaseTarget, release: RemoteRelease) -> None:
        t = time.perf_counter()
        logger.info("  Deleting existing release %s.", release.url)
        resp = await self.client.delete_release(release)
        if resp.status_code == 204:
            self._record_step("delete", t)
            return
        self._record_step("delete", t, "failed", f"HTTP {resp.status_code}")
        if resp.status_code == 404:
            raise RepositoryNotFoundError(target.owner, target.repository)
        raise UnexpectedResponseError(resp.status_code, resp.text, "release delete")

    async def _step_create(self, target: ReleaseTarget, draft: ReleaseDraft) -> RemoteRelease:
        t = time.perf_counter()
        resp = await self.client.create_release(target, draft)
        if resp.status_code == 201:
            release = self._parse_release(resp, "release create")
            self._record_step("create", t, detail=f"release {release.id}")
            return release
        self._record_step("create", t, "failed", f"HTTP {resp.status_code}")
        if resp.status_code == 404:
            raise RepositoryNotFoundError(target.owner, target.repository)
        raise UnexpectedResponseError(resp.status_code, resp.text, "release create")

    async def _step_upload(self, release: RemoteRelease, assets: Sequence[Asset]) -> list[UploadOutcome]:
        t = time.perf_counter()
        if not assets:
            self._record_step("upload", t, "skipped", "no assets")
            return []
        outcomes = await self.uploader.upload_all(release, assets)
        failed = sum(1 for o in outcomes if not o.ok)
        self._record_step(
            "upload", t,
            "failed" if failed else "ok",
            f"{len(outcomes) - failed}/{len(outcomes)} uploaded",
        )
        return outcomes


def build_target(config: PublishConfig) -> ReleaseTarget:
    return ReleaseTarget(
        owner=config.owner,
        repository=config.repository,
        tag=config.tag,
        target_commitish=config.target_commitish,
    )


async def generate_changelog(
    config: PublishConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Resolve only the changelog body for the configured release."""
    async with GitHubClient(
        GitHubCredentials(config.token), config.api_base_url, config.timeout, transport
    ) as client:
        return await resolve_body(client, build_target(config), config.changelog, config.project_dir)


async def publish_from_config(
    config: PublishConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> PublishResult:
    """
    Run a full publish from configuration.

    Assets are resolved locally before the first request. When no body is
    configured it is generated from the commit history, and only if a
    release is going to be created.
    """
    assets = resolve_assets(config.assets, config.project_dir)
    target = build_target(config)

    async with GitHubClient(
        GitHubCredentials(config.token), config.api_base_url, config.timeout, transport
    ) as client:
        async def generated_body() -> str:
            return await resolve_body(client, target, config.changelog, config.project_dir)

        body_source = generated_body if config.body is None else None

        draft = ReleaseDraft(
            title=config.release_title,
            body=config.body or "",
            draft=config.draft,
            prerelease=config.prerelease,
        )
        publisher = ReleasePublisher(client)
        return await publisher.publish(target, draft, config.update_policy, assets, body_source)
