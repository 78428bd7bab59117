"""
ghrelease — git command runner.

Runs the version-control tool as a subprocess in the project directory
and returns its standard output as UTF-8 text.
"""

from __future__ import annotations

import asyncio
import subprocess
from pathlib import Path

from ghrelease.errors import ExecutableNotFoundError, ExternalToolError, ExternalToolTimeoutError
from ghrelease.utils.logging import logger


class GitRunner:
    def __init__(self, executable: str = "git", working_dir: Path | None = None, timeout: float = 120.0):
        self.executable = executable
        self.working_dir = working_dir
        self.timeout = timeout

    def run_sync(self, args: list[str]) -> str:
        cmd = [self.executable, *args]
        logger.debug("  $ %s", " ".join(cmd))
        try:
            cp = subprocess.run(
                cmd,
                cwd=self.working_dir,
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except (FileNotFoundError, PermissionError) as exc:
            raise ExecutableNotFoundError(self.executable) from exc
        except subprocess.TimeoutExpired as exc:
            raise ExternalToolTimeoutError(cmd, self.timeout) from exc

        if cp.returncode != 0:
            stderr = cp.stderr.decode("utf-8", errors="replace").strip()
            raise ExternalToolError(cp.returncode, stderr, cmd)
        return cp.stdout.decode("utf-8", errors="replace")

    async def run(self, args: list[str]) -> str:
        """Run off the event loop so a slow git does not stall pending I/O."""
        return await asyncio.to_thread(self.run_sync, args)

    async def root_commit(self) -> str:
        out = await self.run(["rev-list", "--max-parents=0", "--max-count=1", "HEAD"])
        return out.strip()

    async def rev_list(self, options: list[str], revision_spec: str) -> str:
        return await self.run(["rev-list", *options, revision_spec, "--"])
