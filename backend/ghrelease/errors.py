"""
ghrelease — Structured error catalog.

Every error has a code, human message, and suggested fix.
The CLI prints these verbatim; nothing is swallowed.
"""

from __future__ import annotations

from typing import Any


class GhReleaseError(Exception):
    """Base error with structured code + suggestion."""

    def __init__(self, code: str, message: str, suggestion: str = "", detail: Any = None):
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.detail = detail
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "error_code": self.code,
            "message": self.message,
        }
        if self.suggestion:
            d["suggestion"] = self.suggestion
        if self.detail:
            d["detail"] = self.detail
        return d


class ConfigurationError(GhReleaseError):
    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            code="CONFIG_MISSING",
            message=f"Missing required settings: {', '.join(missing)}",
            suggestion="Pass them on the command line or set them in the environment / .env file.",
            detail=missing,
        )


class InvalidSettingError(GhReleaseError):
    def __init__(self, key: str, value: str, expected: str):
        self.key = key
        self.value = value
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Invalid value for {key}: {value!r}",
            suggestion=f"Expected {expected}.",
        )


class RepositoryNotFoundError(GhReleaseError):
    def __init__(self, owner: str, repository: str):
        self.owner = owner
        self.repository = repository
        super().__init__(
            code="REPOSITORY_NOT_FOUND",
            message=f"Repository not found: {owner}/{repository}",
            suggestion="Check the owner and repository names, and that the token can access the repository.",
        )


class UnexpectedResponseError(GhReleaseError):
    def __init__(self, status: int, body: str = "", operation: str = ""):
        self.status = status
        self.body = body
        prefix = f"{operation} " if operation else ""
        super().__init__(
            code="UNEXPECTED_RESPONSE",
            message=f"GitHub {prefix}returned unexpected HTTP {status}",
            suggestion="Check the token scopes and the GitHub status page, then retry.",
            detail=body[:500] if body else None,
        )


class ReleaseAlreadyExistsError(GhReleaseError):
    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(
            code="RELEASE_EXISTS",
            message=f"Release already exists for tag {tag}",
            suggestion="Use --overwrite to replace the release or --append to add assets to it.",
        )


class ExecutableNotFoundError(GhReleaseError):
    def __init__(self, executable: str):
        self.executable = executable
        super().__init__(
            code="EXECUTABLE_NOT_FOUND",
            message=f"Failed to run '{executable}' to read the commit history",
            suggestion="Install git or specify the path to the git executable with --git / GHRELEASE_GIT.",
        )


class ExternalToolError(GhReleaseError):
    def __init__(self, exit_code: int, stderr: str = "", command: list[str] | None = None):
        self.exit_code = exit_code
        self.stderr = stderr
        self.command = command or []
        shown = " ".join(self.command[:3])
        super().__init__(
            code="EXTERNAL_TOOL_FAILED",
            message=f"'{shown}' exited with code {exit_code}",
            suggestion="Run the command in the project directory to see the full error.",
            detail=stderr[:500] if stderr else None,
        )


class ExternalToolTimeoutError(GhReleaseError):
    def __init__(self, command: list[str], timeout_s: float):
        self.command = command
        super().__init__(
            code="EXTERNAL_TOOL_TIMEOUT",
            message=f"'{' '.join(command[:3])}' timed out after {timeout_s:.0f}s",
            suggestion="Raise GHRELEASE_GIT_TIMEOUT or check the repository for lock files.",
        )


class AssetNotFoundError(GhReleaseError):
    def __init__(self, path: str):
        super().__init__(
            code="ASSET_NOT_FOUND",
            message=f"Asset file not found: {path}",
            suggestion="Check the --assets list. Paths are relative to the project directory.",
        )
