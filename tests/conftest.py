"""Shared test configuration and fixtures for the ghrelease test suite."""

import sys
from pathlib import Path

import pytest

# Add backend to Python path so imports work without installing
backend_dir = str(Path(__file__).parent.parent / "backend")
if backend_dir not in sys.path:
    sys.path.insert(0, backend_dir)

from ghrelease.github.auth import GitHubCredentials  # noqa: E402
from ghrelease.github.client import GitHubClient  # noqa: E402

from github_fakes import FakeGit, FakeGitHub  # noqa: E402


@pytest.fixture
def github():
    return FakeGitHub()


@pytest.fixture
def fake_git():
    return FakeGit()


@pytest.fixture
def credentials():
    return GitHubCredentials(token="ghp_test")


@pytest.fixture
async def client(github, credentials):
    async with GitHubClient(credentials, transport=github.transport) as c:
        yield c


@pytest.fixture
def asset_dir(tmp_path):
    (tmp_path / "app.zip").write_bytes(b"PK\x03\x04" + b"\0" * 100)
    (tmp_path / "notes.pdf").write_bytes(b"%PDF-1.7" + b"\0" * 100)
    (tmp_path / "blob.bin").write_bytes(b"\x00\x01\x02\x03\xfe\xff")
    return tmp_path
