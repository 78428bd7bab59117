"""Unit tests for environment / .env configuration loading."""

import os
from pathlib import Path

import pytest

from ghrelease.core.config import DEFAULT_GIT_OPTIONS, load_config, validate_config, PublishConfig
from ghrelease.errors import ConfigurationError, InvalidSettingError
from ghrelease.models.release import UpdatePolicy

ENV_KEYS = [
    "GHRELEASE_OWNER", "GHRELEASE_REPOSITORY", "GHRELEASE_TAG", "GHRELEASE_TOKEN", "GITHUB_TOKEN",
    "GHRELEASE_TARGET", "GHRELEASE_TITLE", "GHRELEASE_BODY", "GHRELEASE_DRAFT", "GHRELEASE_PRERELEASE",
    "GHRELEASE_UPDATE_POLICY", "GHRELEASE_ASSETS", "GHRELEASE_API_URL", "GHRELEASE_TIMEOUT",
    "GHRELEASE_PROJECT_DIR", "GHRELEASE_GIT", "GHRELEASE_CURRENT_COMMIT", "GHRELEASE_LAST_COMMIT",
    "GHRELEASE_GIT_OPTIONS", "GHRELEASE_GIT_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    # load_dotenv writes to os.environ; keep each test on a private copy
    monkeypatch.setattr(os, "environ", os.environ.copy())
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def required_env(monkeypatch):
    monkeypatch.setenv("GHRELEASE_OWNER", "octo")
    monkeypatch.setenv("GHRELEASE_REPOSITORY", "demo")
    monkeypatch.setenv("GHRELEASE_TAG", "v1.0.0")
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_env")


class TestLoadConfig:
    def test_defaults(self, required_env):
        cfg = load_config()
        assert cfg.owner == "octo"
        assert cfg.token == "ghp_env"
        assert cfg.target_commitish == "master"
        assert cfg.update_policy is UpdatePolicy.FAIL_ON_EXISTING
        assert cfg.body is None
        assert cfg.release_title == "v1.0.0"
        assert cfg.assets == ()
        assert cfg.timeout == 60.0
        assert cfg.changelog.git_executable == "git"
        assert cfg.changelog.current_commit == "HEAD"
        assert cfg.changelog.last_commit is None
        assert cfg.changelog.git_options == DEFAULT_GIT_OPTIONS

    def test_env_values(self, required_env, monkeypatch):
        monkeypatch.setenv("GHRELEASE_TOKEN", "ghp_specific")
        monkeypatch.setenv("GHRELEASE_DRAFT", "true")
        monkeypatch.setenv("GHRELEASE_UPDATE_POLICY", "Append")
        monkeypatch.setenv("GHRELEASE_ASSETS", "dist/a.zip, dist/b.tar.gz,")
        monkeypatch.setenv("GHRELEASE_GIT_OPTIONS", "--format=%h\\ %s --max-count=10")
        cfg = load_config()
        assert cfg.token == "ghp_specific"
        assert cfg.draft is True
        assert cfg.prerelease is False
        assert cfg.update_policy is UpdatePolicy.APPEND_ASSETS
        assert cfg.assets == ("dist/a.zip", "dist/b.tar.gz")
        assert cfg.changelog.git_options == ("--format=%h %s", "--max-count=10")

    def test_overrides_win_and_none_falls_through(self, required_env):
        cfg = load_config(
            tag="v2.0.0",
            owner=None,
            update_policy=UpdatePolicy.OVERWRITE,
            git_executable="/usr/local/bin/git",
            last_commit="abc123",
        )
        assert cfg.tag == "v2.0.0"
        assert cfg.owner == "octo"
        assert cfg.update_policy is UpdatePolicy.OVERWRITE
        assert cfg.changelog.git_executable == "/usr/local/bin/git"
        assert cfg.changelog.last_commit == "abc123"

    def test_reads_env_file(self, tmp_path):
        env_file = tmp_path / "release.env"
        env_file.write_text(
            "GHRELEASE_OWNER=octo\nGHRELEASE_REPOSITORY=demo\nGHRELEASE_TAG=v3\nGHRELEASE_TOKEN=ghp_file\n"
        )
        cfg = load_config(env_file=env_file)
        assert cfg.tag == "v3"
        assert cfg.token == "ghp_file"

    def test_missing_required_settings(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(owner="octo")
        missing = " ".join(exc_info.value.missing)
        assert "repository" in missing
        assert "tag" in missing
        assert "token" in missing
        assert "owner" not in missing

    def test_invalid_update_policy(self, required_env, monkeypatch):
        monkeypatch.setenv("GHRELEASE_UPDATE_POLICY", "replace")
        with pytest.raises(InvalidSettingError) as exc_info:
            load_config()
        assert exc_info.value.key == "GHRELEASE_UPDATE_POLICY"
        assert exc_info.value.code == "CONFIG_INVALID"
        assert "overwrite" in exc_info.value.suggestion

    @pytest.mark.parametrize("key", ["GHRELEASE_TIMEOUT", "GHRELEASE_GIT_TIMEOUT"])
    def test_invalid_timeout(self, required_env, monkeypatch, key):
        monkeypatch.setenv(key, "60s")
        with pytest.raises(InvalidSettingError) as exc_info:
            load_config()
        assert exc_info.value.key == key
        assert exc_info.value.value == "60s"

    def test_blank_timeout_uses_default(self, required_env, monkeypatch):
        monkeypatch.setenv("GHRELEASE_TIMEOUT", "")
        assert load_config().timeout == 60.0


def test_validate_config_accepts_complete():
    validate_config(PublishConfig(owner="o", repository="r", tag="t", token="x", project_dir=Path(".")))
