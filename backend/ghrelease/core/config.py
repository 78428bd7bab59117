"""
ghrelease — Configuration
Loads .env automatically, then reads all settings from environment variables.
Command-line values override the environment.
"""

import os
import shlex
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from ghrelease.errors import ConfigurationError, InvalidSettingError
from ghrelease.models.release import UpdatePolicy

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_GIT_OPTIONS = ("--format=oneline", "--abbrev-commit", "--max-count=50")


@dataclass(frozen=True)
class ChangelogConfig:
    """How the release body is derived from commit history."""
    git_executable: str = "git"
    current_commit: str = "HEAD"
    last_commit: str | None = None
    git_options: tuple[str, ...] = DEFAULT_GIT_OPTIONS
    git_timeout: float = 120.0


@dataclass(frozen=True)
class PublishConfig:
    """Everything one publish run needs. Immutable once the run starts."""
    owner: str
    repository: str
    tag: str
    token: str
    target_commitish: str = "master"
    title: str | None = None
    body: str | None = None
    draft: bool = False
    prerelease: bool = False
    update_policy: UpdatePolicy = UpdatePolicy.FAIL_ON_EXISTING
    assets: tuple[str, ...] = ()
    api_base_url: str = DEFAULT_API_URL
    timeout: float = 60.0
    project_dir: Path = field(default_factory=Path.cwd)
    changelog: ChangelogConfig = field(default_factory=ChangelogConfig)

    @property
    def release_title(self) -> str:
        return self.title or self.tag


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, sep: str = ",") -> tuple[str, ...]:
    raw = os.getenv(name, "")
    return tuple(part.strip() for part in raw.split(sep) if part.strip())


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise InvalidSettingError(name, raw, "a number of seconds") from None


def _env_policy(name: str) -> UpdatePolicy:
    raw = os.getenv(name) or UpdatePolicy.FAIL_ON_EXISTING.value
    try:
        return UpdatePolicy(raw.strip().lower())
    except ValueError:
        choices = ", ".join(p.value for p in UpdatePolicy)
        raise InvalidSettingError(name, raw, f"one of: {choices}") from None


def _load_config() -> PublishConfig:
    git_options = os.getenv("GHRELEASE_GIT_OPTIONS")
    return PublishConfig(
        owner=os.getenv("GHRELEASE_OWNER", ""),
        repository=os.getenv("GHRELEASE_REPOSITORY", ""),
        tag=os.getenv("GHRELEASE_TAG", ""),
        token=os.getenv("GHRELEASE_TOKEN") or os.getenv("GITHUB_TOKEN", ""),
        target_commitish=os.getenv("GHRELEASE_TARGET", "master"),
        title=os.getenv("GHRELEASE_TITLE") or None,
        body=os.getenv("GHRELEASE_BODY"),
        draft=_env_bool("GHRELEASE_DRAFT"),
        prerelease=_env_bool("GHRELEASE_PRERELEASE"),
        update_policy=_env_policy("GHRELEASE_UPDATE_POLICY"),
        assets=_env_list("GHRELEASE_ASSETS"),
        api_base_url=os.getenv("GHRELEASE_API_URL", DEFAULT_API_URL),
        timeout=_env_float("GHRELEASE_TIMEOUT", 60.0),
        project_dir=Path(os.getenv("GHRELEASE_PROJECT_DIR") or Path.cwd()),
        changelog=ChangelogConfig(
            git_executable=os.getenv("GHRELEASE_GIT", "git"),
            current_commit=os.getenv("GHRELEASE_CURRENT_COMMIT", "HEAD"),
            last_commit=os.getenv("GHRELEASE_LAST_COMMIT") or None,
            git_options=tuple(shlex.split(git_options)) if git_options else DEFAULT_GIT_OPTIONS,
            git_timeout=_env_float("GHRELEASE_GIT_TIMEOUT", 120.0),
        ),
    )


def validate_config(cfg: PublishConfig) -> None:
    """Fail fast if required settings are missing."""
    missing: list[str] = []
    if not cfg.owner:
        missing.append("owner (GHRELEASE_OWNER)")
    if not cfg.repository:
        missing.append("repository (GHRELEASE_REPOSITORY)")
    if not cfg.tag:
        missing.append("tag (GHRELEASE_TAG)")
    if not cfg.token:
        missing.append("token (GHRELEASE_TOKEN or GITHUB_TOKEN)")
    if missing:
        raise ConfigurationError(missing)


def load_config(env_file: str | Path | None = None, **overrides: Any) -> PublishConfig:
    """
    Build a validated PublishConfig.

    `env_file` defaults to `.env` in the working directory. Overrides whose
    value is None are ignored so unset CLI flags fall through to the
    environment. Keys of ChangelogConfig are routed to the nested config.
    """
    load_dotenv(env_file or Path.cwd() / ".env")
    cfg = _load_config()

    changelog_keys = set(ChangelogConfig.__dataclass_fields__)
    top = {k: v for k, v in overrides.items() if v is not None and k not in changelog_keys}
    nested = {k: v for k, v in overrides.items() if v is not None and k in changelog_keys}

    if nested:
        cfg = replace(cfg, changelog=replace(cfg.changelog, **nested))
    if top:
        cfg = replace(cfg, **top)

    validate_config(cfg)
    return cfg
