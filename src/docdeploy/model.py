# model.py
from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import InvalidJobError


# ----------------------------------------------------------------------
# Published branches metadata (read-only, shipped inside the payload)
# ----------------------------------------------------------------------

class _PayloadModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")


class BranchVersions(_PayloadModel):
    active: List[str] = Field(default_factory=list)


class GitBranches(_PayloadModel):
    published: Optional[List[str]] = None


class GitInfo(_PayloadModel):
    branches: Optional[GitBranches] = None


class ContentVersion(_PayloadModel):
    stable: Optional[str] = None


class ContentInfo(_PayloadModel):
    prefix: Optional[str] = None
    version: Optional[ContentVersion] = None


class PublishedBranches(_PayloadModel):
    """
    Which branches may be published, which one is stable, and the prefixes
    used to address published output.

    Every section is optional so a partial document still loads; code that
    needs a missing section reports the job as invalid.
    """
    prefix: Optional[str] = None
    version: Optional[BranchVersions] = None
    git: Optional[GitInfo] = None
    content: Optional[ContentInfo] = None


class JobPayload(_PayloadModel):
    repo_name: str = Field(alias="repoName")
    branch_name: str = Field(alias="branchName")
    alias: Optional[str] = None
    primary_alias: bool = Field(default=False, alias="primaryAlias")
    aliased: bool = False
    is_next_gen: bool = Field(default=False, alias="isNextGen")
    mut_prefix: Optional[str] = Field(default=None, alias="mutPrefix")
    manifest_prefix: Optional[str] = Field(default=None, alias="manifestPrefix")
    path_prefix: Optional[str] = Field(default=None, alias="pathPrefix")
    published_branches: Optional[PublishedBranches] = Field(default=None, alias="publishedBranches")

    @property
    def alias_or_branch(self) -> str:
        return self.alias if self.alias else self.branch_name

    def with_manifest_prefix(self, manifest_prefix: str) -> JobPayload:
        return self.model_copy(update={"manifest_prefix": manifest_prefix})


# ----------------------------------------------------------------------
# Job
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class Job:
    """
    A deploy job: identity + payload + the commands derived for it.

    Jobs are immutable; every stage that derives something returns a new
    Job via dataclasses.replace, so commands never leak from one job to
    another.
    """
    id: str
    payload: JobPayload
    deploy_commands: tuple[str, ...] = ()
    build_commands: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Job:
        """Create a Job from its stored JSON form (`_id` or `id` + `payload`)."""
        job_id = data.get("_id", data.get("id"))
        if job_id is None:
            raise InvalidJobError("job has no id")
        try:
            payload = JobPayload.model_validate(data.get("payload") or {})
        except ValidationError as e:
            raise InvalidJobError(f"job {job_id} has an invalid payload: {e}") from e
        return cls(id=str(job_id), payload=payload)

    def with_payload(self, payload: JobPayload) -> Job:
        return replace(self, payload=payload)


def load_job(path: str | Path) -> Job:
    """
    Load a job from a JSON file.

    Raises:
      FileNotFoundError: the file does not exist
      InvalidJobError: the file is not valid JSON or the payload is malformed
    """
    job_path = Path(path).expanduser().resolve()
    if not job_path.exists():
        raise FileNotFoundError(f"Job file not found: {job_path}")
    try:
        data = json.loads(job_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InvalidJobError(f"{job_path.name} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise InvalidJobError(f"{job_path.name} must contain a JSON object")
    return Job.from_dict(data)


# ----------------------------------------------------------------------
# Results
# ----------------------------------------------------------------------

@dataclass
class CommandExecutorResponse:
    """Result of running deploy commands."""
    output: str
    stdout: str = ""
    stderr: str = ""
    status: str = "success"  # "success" | "failed"
    error: Optional[str] = None


@dataclass(frozen=True)
class ReconcileResult:
    status: str  # "purged" | "purged_all" | "failed"
    urls: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status != "failed"


@dataclass(frozen=True)
class DeployOutcome:
    """
    What a deploy produced.

    `result` is the deploy output. `reconciliation` is None for targets that
    never touch the CDN; otherwise it says whether the purge went through.
    A failed reconciliation never turns a successful deploy into a failure.
    """
    result: CommandExecutorResponse
    commands: tuple[str, ...]
    reconciliation: Optional[ReconcileResult] = None

    @property
    def reconciled(self) -> bool:
        return self.reconciliation is None or self.reconciliation.ok
