# logger.py
from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Optional

from .ui.console import Console, get_console


def tag(label: str) -> str:
    """Pad a log tag like "(prod)" to the fixed column width used in job logs."""
    return f"({label})".ljust(15)


class JobLogger:
    """
    Per-job log sink.

    `save` records informational / audit lines, `error` records failures.
    Both are fire-and-forget: they print through the console and keep the
    entries in memory so the caller can attach them to the job afterwards.
    """

    def __init__(self, console: Optional[Console] = None):
        self._console = console
        self._entries: Dict[str, List[str]] = defaultdict(list)

    @property
    def console(self) -> Console:
        return self._console or get_console()

    def save(self, job_id: str, message: object) -> None:
        text = str(message)
        self._entries[job_id].append(text)
        self.console.print_job_log(job_id, text)

    def error(self, job_id: str, error: object) -> None:
        text = str(error) or type(error).__name__
        self._entries[job_id].append(f"ERROR: {text}")
        self.console.print_job_error(job_id, text)

    def entries(self, job_id: str) -> List[str]:
        return list(self._entries.get(job_id, []))
