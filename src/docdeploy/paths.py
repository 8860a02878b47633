# paths.py
from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import InvalidJobError
from .logger import JobLogger
from .model import Job

if TYPE_CHECKING:
    from .executor import CommandExecutor


async def construct_manifest_index_path(job: Job, executor: CommandExecutor, logger: JobLogger) -> str:
    """
    Manifest index name: "<project>-<alias or branch>".

    The project name comes from the repo's build system. Lookup errors are
    logged against the job and re-raised as they are.
    """
    try:
        project_name = await executor.get_snooty_project_name(job.payload.repo_name)
    except Exception as e:
        logger.save(job.id, e)
        raise
    return f"{project_name}-{job.payload.alias_or_branch}"


def get_path_prefix(job: Job, logger: JobLogger) -> str:
    """
    Path prefix under which the job's output is published.

    With more than one active version the prefix is
    "<publishedBranches.prefix>/<alias or branch>"; otherwise it is the alias
    when there is one, else the content prefix.

    Raises:
      InvalidJobError: the payload is missing the fields needed here
    """
    payload = job.payload
    try:
        branches = payload.published_branches
        if branches is not None and len(branches.version.active) > 1:
            if branches.prefix is None:
                raise ValueError("publishedBranches.prefix is not set")
            return f"{branches.prefix}/{payload.alias_or_branch}"
        if payload.alias:
            return payload.alias
        prefix = branches.content.prefix
        if prefix is None:
            raise ValueError("publishedBranches.content.prefix is not set")
        return prefix
    except Exception as e:
        logger.save(job.id, e)
        raise InvalidJobError(str(e)) from e
