"""Thin wrapper around the ``rclone`` command-line tool."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Callable

from loguru import logger

RCLONE = "rclone"
# rclone sync of a large save folder can take a while on slow remotes.
SYNC_TIMEOUT = 300


@dataclass
class CommandResult:
    """Outcome of one rclone invocation."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


Runner = Callable[[list[str], int | None], CommandResult]


def run_command(args: list[str], timeout: int | None = None) -> CommandResult:
    """Run *args* and capture its output; a missing binary yields return code 127."""
    try:
        proc = subprocess.run(  # noqa: S603
            args,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as e:
        return CommandResult(127, "", str(e))
    except subprocess.TimeoutExpired as e:
        return CommandResult(124, "", f"Timed out after {e.timeout}s")
    return CommandResult(proc.returncode, proc.stdout or "", proc.stderr or "")


class RcloneManager:
    """Runs rclone commands; failures are reported, never raised."""

    def __init__(self, runner: Runner | None = None, binary: str = RCLONE) -> None:
        self._run = runner or run_command
        self._binary = binary

    def is_installed(self) -> bool:
        return self._run([self._binary, "version"], 30).ok

    def list_remotes(self) -> list[str]:
        """Names of the configured remotes, without the trailing colon."""
        result = self._run([self._binary, "listremotes"], 30)
        if not result.ok:
            logger.error("Failed to list rclone remotes: {}", result.stderr.strip())
            return []
        return [
            line.strip().rstrip(":")
            for line in result.stdout.splitlines()
            if line.strip()
        ]

    def test_remote(self, remote: str) -> bool:
        result = self._run([self._binary, "lsd", f"{remote}:"], 60)
        if not result.ok:
            logger.error("Failed to test remote {}: {}", remote, result.stderr.strip())
        return result.ok

    def build_sync_args(
        self,
        source: str,
        destination: str,
        dry_run: bool = False,
        verbose: bool = False,
        log_file: str | None = None,
    ) -> list[str]:
        args = [self._binary, "sync", source, destination]
        if dry_run:
            args.append("--dry-run")
        if verbose:
            args.append("--verbose")
        if log_file:
            args.append(f"--log-file={log_file}")
        return args

    def sync(
        self,
        source: str,
        destination: str,
        dry_run: bool = False,
        verbose: bool = False,
        log_file: str | None = None,
    ) -> bool:
        """Make *destination* match *source*; returns False on any rclone error."""
        args = self.build_sync_args(source, destination, dry_run, verbose, log_file)
        logger.debug("Running rclone command: {}", " ".join(args))
        result = self._run(args, SYNC_TIMEOUT)
        if not result.ok:
            logger.error("rclone sync failed ({}): {}", result.returncode, result.stderr.strip())
            return False
        if "ERROR" in result.stderr:
            logger.error("rclone sync error: {}", result.stderr.strip())
            return False
        if result.stdout:
            logger.debug("rclone sync output: {}", result.stdout.strip())
        return True
