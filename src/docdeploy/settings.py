from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

_TRUTHY = {"1", "true", "yes", "on"}


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Settings:
    should_purge_all: bool = False
    database_url: str = "sqlite+aiosqlite:///docdeploy.db"
    fastly_service_id: Optional[str] = None
    fastly_token: Optional[str] = None
    fastly_api_url: str = "https://api.fastly.com"
    work_dir: str = "."
    command_timeout: Optional[int] = None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    timeout = env.get("DOCDEPLOY_COMMAND_TIMEOUT")
    return Settings(
        should_purge_all=_flag(env.get("SHOULD_PURGE_ALL")),
        database_url=env.get("DATABASE_URL", Settings.database_url),
        fastly_service_id=env.get("FASTLY_SERVICE_ID"),
        fastly_token=env.get("FASTLY_TOKEN"),
        fastly_api_url=env.get("FASTLY_API_URL", Settings.fastly_api_url),
        work_dir=env.get("DOCDEPLOY_WORKDIR", Settings.work_dir),
        command_timeout=int(timeout) if timeout else None,
    )
