"""
ghrelease — Changelog resolver.

Builds the release body from the commit history between the previous
release and the current commit:

  1. list the repository's releases (GitHub returns them newest first)
  2. find the release just older than the one being published
  3. resolve its tag to a commit sha (root commit when there is none)
  4. `git rev-list <options> <previous>..<current> --`

The "previous release" is picked by list position. When every entry
carries `created_at` the list is re-sorted newest first before indexing,
otherwise the API order is trusted as-is.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from ghrelease.changelog.git import GitRunner
from ghrelease.core.config import ChangelogConfig, DEFAULT_GIT_OPTIONS
from ghrelease.github.client import GitHubClient
from ghrelease.models.release import CommitRange, ReleaseSummary, ReleaseTarget, TagReference
from ghrelease.utils.logging import logger, step_timer


def _newest_first(releases: list[ReleaseSummary]) -> list[ReleaseSummary]:
    if releases and all(r.created_at for r in releases):
        return sorted(releases, key=lambda r: r.created_at, reverse=True)
    return releases


class ChangelogResolver:
    def __init__(self, client: GitHubClient, git: GitRunner):
        self.client = client
        self.git = git

    async def _resolve_tag(self, target: ReleaseTarget, tag: str) -> str:
        """Return the commit sha a tag points at, or "" if GitHub cannot resolve it."""
        resp = await self.client.get_tag_reference(target, tag)
        if resp.status_code != 200:
            logger.warning("  Could not resolve tag %s (HTTP %d)", tag, resp.status_code)
            return ""
        ref = TagReference.model_validate(resp.json())
        if ref.object.type != "tag":
            return ref.object.sha

        # annotated tag: the ref points at a tag object, which points at the commit
        tag_resp = await self.client.get_tag_object(target, ref.object.sha)
        if tag_resp.status_code != 200:
            logger.warning("  Could not read tag object %s (HTTP %d)", ref.object.sha, tag_resp.status_code)
            return ref.object.sha
        return TagReference.model_validate(tag_resp.json()).object.sha

    async def previous_release_commit(self, target: ReleaseTarget) -> str:
        """Looks for the commit of the release published before `target.tag`."""
        resp = await self.client.list_releases(target)
        if resp.status_code != 200:
            logger.warning("  Listing releases returned HTTP %d; changelog has no lower bound", resp.status_code)
            return ""

        releases = _newest_first(
            [ReleaseSummary.model_validate(item) for item in resp.json() or []]
        )
        if not releases:
            logger.info("  No previous releases; starting from the root commit")
            return await self.git.root_commit()

        # an unpublished tag behaves as if it were inserted at the head of the list
        index = next((i for i, r in enumerate(releases) if r.tag_name == target.tag), -1)
        previous = index + 1
        if previous >= len(releases):
            logger.info("  %s is the oldest release; starting from the root commit", target.tag)
            return await self.git.root_commit()

        last_tag = releases[previous].tag_name
        logger.info("  Previous release: %s", last_tag)
        return await self._resolve_tag(target, last_tag)

    async def resolve_range(
        self,
        target: ReleaseTarget,
        current_commit: str = "HEAD",
        last_commit: str | None = None,
    ) -> CommitRange:
        if last_commit is None:
            last_commit = await self.previous_release_commit(target)
        return CommitRange(from_commit=last_commit, to_commit=current_commit)

    async def resolve_body(
        self,
        target: ReleaseTarget,
        current_commit: str = "HEAD",
        last_commit: str | None = None,
        git_options: Sequence[str] = DEFAULT_GIT_OPTIONS,
    ) -> str:
        """Generate the release body from commit history."""
        with step_timer("Generate changelog"):
            commit_range = await self.resolve_range(target, current_commit, last_commit)
            logger.info("  Commit range: %s", commit_range.revision_spec)
            return await self.git.rev_list(list(git_options), commit_range.revision_spec)


async def resolve_body(
    client: GitHubClient,
    target: ReleaseTarget,
    options: ChangelogConfig,
    working_dir: Path | None = None,
) -> str:
    """Resolve a changelog body using the git executable and options from configuration."""
    git = GitRunner(options.git_executable, working_dir=working_dir, timeout=options.git_timeout)
    resolver = ChangelogResolver(client, git)
    return await resolver.resolve_body(
        target,
        current_commit=options.current_commit,
        last_commit=options.last_commit,
        git_options=options.git_options,
    )
