"""
ghrelease — GitHub API authentication helpers.

The REST API authenticates with a bearer token on every request and
rejects calls without a User-Agent header.
"""

from dataclasses import dataclass

from ghrelease import __version__

API_VERSION = "2022-11-28"


@dataclass(frozen=True)
class GitHubCredentials:
    token: str
    user_agent: str = f"ghrelease/{__version__}"

    def as_headers(self) -> dict[str, str]:
        """Return the fixed headers sent with every GitHub request."""
        return {
            "Authorization": f"Bearer {self.token}",
            "User-Agent": self.user_agent,
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        }

    def __repr__(self) -> str:
        return f"GitHubCredentials(token='***', user_agent={self.user_agent!r})"
