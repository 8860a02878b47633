# errors.py
from __future__ import annotations

from dataclasses import dataclass


class DeployError(Exception):
    """Base class for every error raised by docdeploy."""
    pass


class AuthorizationError(DeployError):
    """Raised when a branch is not configured for production publish."""
    pass


class InvalidJobError(DeployError):
    """Raised when a job payload is missing fields a deploy needs."""
    pass


class CDNError(DeployError):
    """Raised when a purge or purge-all request fails."""
    pass


@dataclass
class CommandExecutionError(DeployError):
    """
    Shell commands exited non-zero.

    Carries the captured output so callers can log stderr without
    re-running anything.
    """
    command: str
    exit_code: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        return f"command failed (exit={self.exit_code}): {self.command}"


@dataclass
class PublishError(DeployError):
    """The deploy ran but the publish step reported an error."""
    target: str
    stderr: str

    def __str__(self) -> str:
        return f"Failed pushing to {self.target}: {self.stderr}"
