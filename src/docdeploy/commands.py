# commands.py
from __future__ import annotations

from dataclasses import replace

from .errors import InvalidJobError
from .model import Job, JobPayload
from .variants import DeployVariant

# Commands are plain shell strings; the executor decides how to chain them.

ACTIVATE_VENV = ". /venv/bin/activate"


def _cd_repo(payload: JobPayload) -> str:
    return f"cd repos/{payload.repo_name}"


def build_commands(payload: JobPayload) -> tuple[str, ...]:
    """Generic build: activate the venv, enter the repo, render html."""
    return (
        ACTIVATE_VENV,
        _cd_repo(payload),
        "rm -f makefile",
        "make html",
    )


def stage_specific_next_gen_commands(payload: JobPayload) -> tuple[str, ...]:
    """
    Next-gen build commands.

    Same as build_commands, except the render step becomes a dependency
    fetch and static site generation runs after it.
    """
    base = build_commands(payload)
    return base[:-1] + ("make get-build-dependencies", "make next-gen-html")


def next_gen_deploy_command(payload: JobPayload, variant: DeployVariant, stable_flag: str) -> str:
    if not payload.mut_prefix:
        raise InvalidJobError("next-gen deploy requires mutPrefix")
    cmd = f"make {variant.next_gen_target} MUT_PREFIX={payload.mut_prefix}"
    if payload.manifest_prefix:
        cmd += f" MANIFEST_PREFIX={payload.manifest_prefix} GLOBAL_SEARCH_FLAG={stable_flag}"
    return cmd


def deploy_commands(payload: JobPayload, variant: DeployVariant, stable_flag: str = "") -> tuple[str, ...]:
    """
    Ordered deploy commands for a job.

    Args:
      payload: job payload
      variant: deploy target (production, staging)
      stable_flag: global search flag from the gate ("-g" or "")

    Returns:
      A new tuple; the same inputs always give the same commands.
    """
    last = variant.deploy_target
    if payload.is_next_gen:
        last = next_gen_deploy_command(payload, variant, stable_flag)
    return (ACTIVATE_VENV, _cd_repo(payload), last)


def prepare_commands(job: Job, variant: DeployVariant, stable_flag: str = "") -> Job:
    """Return a copy of the job with freshly built deploy commands."""
    return replace(job, deploy_commands=deploy_commands(job.payload, variant, stable_flag))


def prepare_build_commands(job: Job) -> Job:
    """Return a copy of the job with build commands for its build flavor."""
    if job.payload.is_next_gen:
        cmds = stage_specific_next_gen_commands(job.payload)
    else:
        cmds = build_commands(job.payload)
    return replace(job, build_commands=cmds)
