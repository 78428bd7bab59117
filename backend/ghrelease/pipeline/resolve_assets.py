"""
ghrelease — Asset resolution step.

Turns the configured file list into Asset models. Fails fast on
missing files so nothing is created on GitHub for a broken asset list.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from ghrelease.errors import AssetNotFoundError
from ghrelease.models.release import Asset
from ghrelease.utils.logging import logger


def _validate_path(path: str, base_dir: Path) -> Path:
    """Resolve a configured path against base_dir and check it is a readable file."""
    resolved = (base_dir / path).resolve()
    if not resolved.is_file():
        raise AssetNotFoundError(path)
    return resolved


def resolve_assets(paths: Iterable[str], base_dir: Path) -> list[Asset]:
    """
    Resolve asset paths in configuration order.

    Absolute paths are used as-is; relative ones are taken from base_dir.
    The asset name is the file name, which GitHub uses as the download name.
    """
    assets: list[Asset] = []
    for path in paths:
        resolved = _validate_path(path, base_dir)
        assets.append(Asset(name=resolved.name, path=resolved))
        logger.debug("  Resolved asset: %s (%d bytes)", resolved, resolved.stat().st_size)
    if assets:
        logger.info("  Resolved %d assets", len(assets))
    return assets
