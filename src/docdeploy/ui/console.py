"""Console output formatting utilities for docdeploy."""

from __future__ import annotations

import sys
from typing import Iterable, Optional


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.

        Args:
            debug: If True, show detailed output including stack traces
        """
        self.debug = debug

    def print_header(self, title: str) -> None:
        """Print a section header."""
        print(f"\n{title}")
        print("-" * len(title))

    def print_deploy_started(
        self,
        job_id: str,
        repository: str,
        branch: str,
        target: str,
    ) -> None:
        """Print deploy start information."""
        print("\nDEPLOY STARTED")
        print(f"Job: {job_id}")
        print(f"Repository: {repository}")
        print(f"Branch: {branch}")
        print(f"Target: {target}")
        print()

    def print_commands(self, title: str, commands: Iterable[str]) -> None:
        """Print a command list, one per line."""
        self.print_header(title)
        for cmd in commands:
            print(f"  {cmd}")

    def print_job_log(self, job_id: str, message: str) -> None:
        """Print an entry from the job log."""
        print(f"[{job_id}] {message}")

    def print_job_error(self, job_id: str, message: str) -> None:
        """Print a job-level error entry."""
        print(f"[{job_id}] ERROR: {message}", file=sys.stderr)

    def print_deploy_complete(
        self,
        status: str,
        purge_status: Optional[str] = None,
        duration: Optional[float] = None,
    ) -> None:
        """Print deploy completion message."""
        print("\nDEPLOY COMPLETE")
        print(f"Status: {status}")
        if purge_status is not None:
            print(f"CDN: {purge_status}")
        if duration is not None:
            print(f"Duration: {duration:.1f}s")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        print(f"WARNING: {message}", file=sys.stderr)

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_exception(self, exc: Exception) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exc()
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_info(self, message: str) -> None:
        """Print informational message."""
        print(message)

    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console
