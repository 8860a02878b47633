from __future__ import annotations

from typing import Any, Dict
from unittest.mock import AsyncMock

import pytest

from docdeploy.logger import JobLogger
from docdeploy.model import CommandExecutorResponse, Job
from docdeploy.orchestrator import DeployContext
from docdeploy.settings import Settings
from docdeploy.ui.console import Console

DEPLOY_OUTPUT = "\n".join(
    [
        "Uploading build to s3",
        "Summary: 2 files changed",
        '{"urls":["https://docs.example.com/a","https://docs.example.com/b"]}',
        "done",
    ]
)


def job_data(**payload_overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "repoName": "docs-guides",
        "branchName": "master",
        "publishedBranches": {
            "prefix": "guides",
            "version": {"active": ["master"]},
            "git": {"branches": {"published": ["master", "v1.0"]}},
            "content": {"prefix": "guides", "version": {"stable": "master"}},
        },
    }
    payload.update(payload_overrides)
    return {"_id": "job-1", "payload": payload}


@pytest.fixture
def make_job():
    def _make(**payload_overrides: Any) -> Job:
        return Job.from_dict(job_data(**payload_overrides))
    return _make


@pytest.fixture
def logger() -> JobLogger:
    return JobLogger(Console())


@pytest.fixture
def executor():
    mock = AsyncMock()
    mock.execute.return_value = CommandExecutorResponse(output=DEPLOY_OUTPUT, stdout=DEPLOY_OUTPUT)
    mock.get_snooty_project_name.return_value = "guides"
    return mock


@pytest.fixture
def cdn():
    return AsyncMock()


@pytest.fixture
def repository():
    return AsyncMock()


@pytest.fixture
def context(executor, cdn, repository, logger) -> DeployContext:
    return DeployContext(
        executor=executor,
        cdn=cdn,
        repository=repository,
        logger=logger,
        settings=Settings(should_purge_all=False),
    )
