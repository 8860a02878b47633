# gate.py
from __future__ import annotations

from typing import List, Optional

from .errors import AuthorizationError, InvalidJobError
from .logger import JobLogger, tag
from .model import Job, PublishedBranches

GLOBAL_SEARCH_FLAG = "-g"


def _published(branches: Optional[PublishedBranches]) -> Optional[List[str]]:
    if branches is None or branches.git is None or branches.git.branches is None:
        return None
    return branches.git.branches.published


def _stable(branches: Optional[PublishedBranches]) -> Optional[str]:
    if branches is None or branches.content is None or branches.content.version is None:
        return None
    return branches.content.version.stable


def stable_flag(job: Job) -> str:
    """
    Global search flag for the job's branch.

    "-g" only when the branch is the stable one and it is either the primary
    alias or not aliased at all; "" otherwise.
    """
    payload = job.payload
    is_stable = _stable(payload.published_branches) == payload.branch_name and (
        payload.primary_alias or not payload.aliased
    )
    return GLOBAL_SEARCH_FLAG if is_stable else ""


def check_publishable(job: Job, logger: JobLogger) -> str:
    """
    Gate for production deploys.

    Returns:
      the global search flag (see stable_flag)

    Raises:
      AuthorizationError: the branch is not in the published branches list
      InvalidJobError: the payload carries no published branches list
    """
    published = _published(job.payload.published_branches)
    if published is None:
        raise InvalidJobError(f"job {job.id} has no publishedBranches.git.branches.published list")

    flag = stable_flag(job)
    if job.payload.branch_name not in published:
        logger.save(
            job.id,
            f"{tag('BUILD')} You are trying to run in production a branch that is not configured for publishing",
        )
        raise AuthorizationError(f"{job.payload.branch_name} is not configured for publish")
    return flag


def open_gate(job: Job, logger: JobLogger) -> str:
    """Gate for targets that accept any branch (staging)."""
    return ""
