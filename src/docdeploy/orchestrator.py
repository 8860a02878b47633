# orchestrator.py
from __future__ import annotations

from dataclasses import dataclass, field

from .cdn import CDNConnector
from .commands import prepare_commands
from .executor import CommandExecutor, deploy_generic
from .logger import JobLogger, tag
from .model import DeployOutcome, Job
from .paths import construct_manifest_index_path, get_path_prefix
from .reconcile import purge_published_content, split_output
from .repository import JobRepository
from .settings import Settings
from .variants import PRODUCTION, DeployVariant


@dataclass
class DeployContext:
    """Collaborators a deploy talks to. One context per job in flight."""
    executor: CommandExecutor
    cdn: CDNConnector
    repository: JobRepository
    logger: JobLogger
    settings: Settings = field(default_factory=Settings)


async def prepare_next_gen(job: Job, context: DeployContext) -> Job:
    """
    Fill in what a next-gen deploy derives from the payload.

    Returns a new Job with the path prefix set, `mutPrefix` defaulted to it,
    and the manifest prefix resolved when the payload does not carry one.
    Classic jobs come back unchanged.
    """
    if not job.payload.is_next_gen:
        return job

    updates = {}
    path_prefix = job.payload.path_prefix or get_path_prefix(job, context.logger)
    updates["path_prefix"] = path_prefix
    if not job.payload.mut_prefix:
        updates["mut_prefix"] = path_prefix
    if not job.payload.manifest_prefix:
        updates["manifest_prefix"] = await construct_manifest_index_path(job, context.executor, context.logger)
    return job.with_payload(job.payload.model_copy(update=updates))


async def deploy(job: Job, context: DeployContext, variant: DeployVariant = PRODUCTION) -> DeployOutcome:
    """
    Gate, build commands, run them, then reconcile the CDN.

    Raises:
      AuthorizationError: the branch may not be deployed to this target
      InvalidJobError: the payload cannot produce deploy commands
      Any error from the deploy run itself, unchanged, after its stderr is logged
    """
    flag = variant.gate(job, context.logger)
    job = prepare_commands(job, variant, flag)

    try:
        resp = await deploy_generic(job, context.executor, context.logger, variant)
    except Exception as err:
        context.logger.save(job.id, f"{tag(variant.log_tag)}stdErr: {getattr(err, 'stderr', err)}")
        raise

    reconciliation = None
    if variant.purges_cdn:
        reconciliation = await purge_published_content(
            job.id,
            split_output(resp.output),
            context.cdn,
            context.repository,
            context.logger,
            context.settings.should_purge_all,
        )
        if not reconciliation.ok:
            context.logger.console.print_warning(f"[{job.id}] CDN purge skipped: {reconciliation.error}")

    context.logger.save(job.id, f"{tag(variant.log_tag)}Finished pushing to {variant.name}")
    context.logger.save(job.id, f"{tag(variant.log_tag)}Deploy details:\n\n{resp.output}")
    return DeployOutcome(result=resp, commands=job.deploy_commands, reconciliation=reconciliation)
