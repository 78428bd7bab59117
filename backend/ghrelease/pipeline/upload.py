"""
ghrelease — Asset upload pipeline.

Uploads assets one at a time, in the configured order, to a release's
upload URL. A non-2xx upload is recorded in its outcome and the batch
moves on; transport errors (DNS, TLS, timeouts) abort the batch.
"""

from __future__ import annotations

import re
from typing import Sequence
from urllib.parse import quote

from ghrelease.github.client import GitHubClient
from ghrelease.models.job import UploadOutcome
from ghrelease.models.release import Asset, RemoteRelease
from ghrelease.pipeline.sniff import sniff_file
from ghrelease.utils.logging import logger, step_timer

DEFAULT_MEDIA_TYPE = "application/octet-stream"

_QUERY_TEMPLATE = re.compile(r"\{\?([^}]*)\}")


def expand_upload_url(template: str, name: str, label: str | None = None) -> str:
    """
    Expand the `{?name,label}` form-style query of an upload_url template.

    Only variables with a value are emitted, so the label is left out
    unless one is given.
    """
    values = {"name": name, "label": label}

    def _expand(match: re.Match) -> str:
        pairs = []
        for var in match.group(1).split(","):
            var = var.strip()
            if values.get(var) is not None:
                pairs.append(f"{var}={quote(values[var], safe='')}")
        return "?" + "&".join(pairs) if pairs else ""

    return _QUERY_TEMPLATE.sub(_expand, template)


class AssetUploader:
    """Uploads assets to one release. Holds no state between batches except warnings."""

    def __init__(self, client: GitHubClient):
        self.client = client
        self.warnings: list[str] = []

    def _media_type(self, asset: Asset) -> str:
        if asset.media_type:
            return asset.media_type
        try:
            media_type = sniff_file(asset.path)
        except OSError as exc:
            media_type = None
            logger.debug("  Sniffing %s failed: %s", asset.path, exc)
        if media_type is None:
            msg = f"Could not guess media type for file '{asset.name}', using {DEFAULT_MEDIA_TYPE}"
            logger.warning("  %s", msg)
            self.warnings.append(msg)
            return DEFAULT_MEDIA_TYPE
        return media_type

    async def upload(self, release: RemoteRelease, asset: Asset) -> UploadOutcome:
        media_type = self._media_type(asset)
        url = expand_upload_url(release.upload_url, asset.name)
        data = asset.path.read_bytes()

        logger.info("  Uploading %s (%d bytes, %s)", asset.name, len(data), media_type)
        resp = await self.client.upload_asset(url, data, media_type)

        if not resp.ok:
            logger.error("  Upload of %s failed with HTTP %d: %s", asset.name, resp.status_code, resp.text[:200])
            return UploadOutcome(
                name=asset.name,
                status_code=resp.status_code,
                media_type=media_type,
                ok=False,
                error=resp.text[:500],
            )

        payload = resp.json() or {}
        return UploadOutcome(
            name=asset.name,
            status_code=resp.status_code,
            media_type=media_type,
            ok=True,
            browser_download_url=payload.get("browser_download_url"),
        )

    async def upload_all(self, release: RemoteRelease, assets: Sequence[Asset]) -> list[UploadOutcome]:
        """Upload every asset sequentially. Zero assets means zero requests."""
        if not assets:
            logger.debug("  Skip uploading release assets, no assets found.")
            return []

        outcomes: list[UploadOutcome] = []
        with step_timer(f"Upload {len(assets)} assets to {release.tag_name}"):
            for asset in assets:
                outcomes.append(await self.upload(release, asset))

        failed = sum(1 for o in outcomes if not o.ok)
        if failed:
            logger.warning("  %d of %d uploads failed", failed, len(outcomes))
        return outcomes
