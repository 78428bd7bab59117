"""
ghrelease — command-line entry point.

  ghrelease publish   --owner O --repo R --tag T --assets f1,f2 --token ...
  ghrelease changelog --owner O --repo R --tag T --token ...

Every flag falls back to its GHRELEASE_* environment variable (or .env).
Exit codes: 0 success, 1 error, 2 published with failed uploads.
"""

from __future__ import annotations

import argparse
import asyncio
import shlex
import sys
from pathlib import Path
from typing import Any, Iterable

import httpx

from ghrelease import __version__
from ghrelease.core.config import load_config
from ghrelease.errors import GhReleaseError, InvalidSettingError
from ghrelease.models.release import UpdatePolicy
from ghrelease.publisher import generate_changelog, publish_from_config
from ghrelease.utils.logging import configure_logging, logger


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--owner", help="Repository owner (GHRELEASE_OWNER).")
    parser.add_argument("--repo", dest="repository", help="Repository name (GHRELEASE_REPOSITORY).")
    parser.add_argument("--tag", help="Release tag, e.g. v1.2.0 (GHRELEASE_TAG).")
    parser.add_argument("--token", help="GitHub token (GHRELEASE_TOKEN or GITHUB_TOKEN).")
    parser.add_argument("--api-url", dest="api_base_url", help="GitHub API base URL.")
    parser.add_argument("--timeout", type=float, help="HTTP timeout in seconds.")
    parser.add_argument("--env-file", type=Path, help="Read settings from this .env file.")
    parser.add_argument("--project-dir", type=Path, help="Git working tree and base for asset paths.")
    parser.add_argument("--git", dest="git_executable", help="Path to the git executable.")
    parser.add_argument("--current-commit", help="Upper commit of the changelog (default HEAD).")
    parser.add_argument("--last-commit", help="Lower commit of the changelog (default: previous release).")
    parser.add_argument("--git-options", help="Options for git rev-list, as one quoted string.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ghrelease",
        description="Publish a GitHub release with a changelog body and binary assets.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    publish = sub.add_parser("publish", help="Create or update the release and upload assets.")
    _add_common_arguments(publish)
    publish.add_argument("--target", dest="target_commitish", help="Branch or commit the tag is created from.")
    publish.add_argument("--title", help="Release title (default: the tag).")
    body = publish.add_mutually_exclusive_group()
    body.add_argument("--body", help="Release body (default: generated changelog).")
    body.add_argument("--body-file", type=Path, help="Read the release body from a file.")
    publish.add_argument("--assets", help="Comma-separated files to attach.")
    publish.add_argument("--draft", action="store_true", default=None, help="Mark the release as a draft.")
    publish.add_argument("--prerelease", action="store_true", default=None, help="Mark as prerelease.")
    policy = publish.add_mutually_exclusive_group()
    policy.add_argument(
        "--overwrite", dest="update_policy", action="store_const", const=UpdatePolicy.OVERWRITE,
        help="Delete and recreate an existing release with the same tag.",
    )
    policy.add_argument(
        "--append", dest="update_policy", action="store_const", const=UpdatePolicy.APPEND_ASSETS,
        help="Upload assets to an existing release with the same tag.",
    )
    policy.add_argument(
        "--fail", dest="update_policy", action="store_const", const=UpdatePolicy.FAIL_ON_EXISTING,
        help="Abort when the release already exists (default).",
    )

    changelog = sub.add_parser("changelog", help="Print the generated release body.")
    _add_common_arguments(changelog)
    return parser


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    keys = (
        "owner", "repository", "tag", "token", "api_base_url", "timeout", "project_dir",
        "git_executable", "current_commit", "last_commit",
        "target_commitish", "title", "body", "draft", "prerelease", "update_policy",
    )
    overrides = {k: getattr(args, k, None) for k in keys}
    if getattr(args, "body_file", None):
        try:
            overrides["body"] = args.body_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            raise InvalidSettingError("--body-file", str(args.body_file), "a readable UTF-8 text file") from None
    if getattr(args, "assets", None):
        overrides["assets"] = tuple(p.strip() for p in args.assets.split(",") if p.strip())
    if args.git_options:
        overrides["git_options"] = tuple(shlex.split(args.git_options))
    return overrides


async def _run(args: argparse.Namespace) -> int:
    config = load_config(env_file=args.env_file, **_overrides(args))

    if args.command == "changelog":
        sys.stdout.write(await generate_changelog(config))
        return 0

    result = await publish_from_config(config)
    for outcome in result.outcomes:
        mark = "✓" if outcome.ok else "✗"
        logger.info("  %s %s (HTTP %d)", mark, outcome.name, outcome.status_code)
    if result.failed_uploads:
        logger.error("%d asset uploads failed", len(result.failed_uploads))
        return 2
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    configure_logging(args.verbose)

    try:
        return asyncio.run(_run(args))
    except GhReleaseError as exc:
        logger.error("%s: %s", exc.code, exc.message)
        if exc.suggestion:
            logger.error("  → %s", exc.suggestion)
        if exc.detail:
            logger.error("  detail: %s", exc.detail)
        return 1
    except httpx.TransportError as exc:
        logger.error("Network error talking to GitHub: %s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
