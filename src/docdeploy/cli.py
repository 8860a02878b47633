# cli.py
from __future__ import annotations

import asyncio
import sys
import time

import click

from docdeploy.cdn import FastlyConnector
from docdeploy.commands import prepare_build_commands, prepare_commands
from docdeploy.errors import AuthorizationError, DeployError, InvalidJobError
from docdeploy.executor import ShellCommandExecutor
from docdeploy.logger import JobLogger
from docdeploy.model import Job, load_job
from docdeploy.orchestrator import DeployContext, deploy, prepare_next_gen
from docdeploy.paths import get_path_prefix
from docdeploy.repository import SqlJobRepository
from docdeploy.settings import Settings, load_settings
from docdeploy.ui.console import Console, get_console, set_console
from docdeploy.variants import Environment, get_variant

ENVIRONMENTS = [e.value for e in Environment]


def _load_job_or_exit(job_file: str) -> Job:
    console = get_console()
    try:
        return load_job(job_file)
    except FileNotFoundError as e:
        console.print_error("Job file not found", str(e))
        sys.exit(1)
    except InvalidJobError as e:
        console.print_error(
            "Invalid job",
            f"Could not load job from {job_file}",
            details=[str(e)],
        )
        sys.exit(1)


def _build_context(settings: Settings, console: Console) -> DeployContext:
    if not settings.fastly_service_id or not settings.fastly_token:
        console.print_error(
            "CDN not configured",
            "FASTLY_SERVICE_ID and FASTLY_TOKEN must be set to deploy.",
        )
        sys.exit(1)
    return DeployContext(
        executor=ShellCommandExecutor(settings.work_dir, timeout=settings.command_timeout),
        cdn=FastlyConnector(settings.fastly_service_id, settings.fastly_token, api_url=settings.fastly_api_url),
        repository=SqlJobRepository.from_url(settings.database_url),
        logger=JobLogger(console),
        settings=settings,
    )


async def _run_deploy(job: Job, context: DeployContext, environment: str):
    repository = context.repository
    if isinstance(repository, SqlJobRepository):
        await repository.create_schema()
    try:
        job = await prepare_next_gen(job, context)
        return await deploy(job, context, get_variant(environment))
    finally:
        if isinstance(repository, SqlJobRepository):
            await repository.close()


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """docdeploy — gate, deploy and purge documentation builds."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command(name="deploy")
@click.argument("job_file", type=click.Path(dir_okay=False))
@click.option("--env", "environment", type=click.Choice(ENVIRONMENTS), default="production", show_default=True)
@click.pass_context
def deploy_cmd(ctx, job_file, environment):
    """Deploy the job described in JOB_FILE."""
    console = get_console()
    job = _load_job_or_exit(job_file)
    context = _build_context(load_settings(), console)

    console.print_deploy_started(
        job_id=job.id,
        repository=job.payload.repo_name,
        branch=job.payload.branch_name,
        target=environment,
    )
    start_time = time.time()

    try:
        outcome = asyncio.run(_run_deploy(job, context, environment))
    except AuthorizationError as e:
        console.print_error(
            "Branch not publishable",
            str(e),
            suggestion="Add the branch to publishedBranches.git.branches.published to deploy it.",
        )
        sys.exit(1)
    except DeployError as e:
        console.print_deploy_complete(status="failed", duration=time.time() - start_time)
        console.print_exception(e)
        sys.exit(1)
    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)

    for cmd in outcome.commands:
        console.print_debug(f"ran: {cmd}")
    purge_status = outcome.reconciliation.status if outcome.reconciliation else None
    console.print_deploy_complete(
        status="success",
        purge_status=purge_status,
        duration=time.time() - start_time,
    )
    if not outcome.reconciled:
        console.print_warning("Deploy succeeded but the CDN was not purged.")


@cli.command()
@click.argument("job_file", type=click.Path(dir_okay=False))
@click.option("--env", "environment", type=click.Choice(ENVIRONMENTS), default="production", show_default=True)
@click.pass_context
def commands(ctx, job_file, environment):
    """Print the build and deploy commands for JOB_FILE without running them."""
    console = get_console()
    job = _load_job_or_exit(job_file)
    variant = get_variant(environment)
    logger = JobLogger(console)

    try:
        flag = variant.gate(job, logger)
        job = prepare_build_commands(prepare_commands(job, variant, flag))
    except DeployError as e:
        console.print_error("Cannot build commands", str(e))
        sys.exit(1)

    console.print_commands("BUILD", job.build_commands)
    console.print_commands("DEPLOY", job.deploy_commands)


@cli.command(name="path-prefix")
@click.argument("job_file", type=click.Path(dir_okay=False))
def path_prefix(job_file):
    """Print the publish path prefix for JOB_FILE."""
    console = get_console()
    job = _load_job_or_exit(job_file)
    try:
        prefix = get_path_prefix(job, JobLogger(console))
    except InvalidJobError as e:
        console.print_error("Invalid job", str(e))
        sys.exit(1)
    click.echo(prefix)


if __name__ == "__main__":
    cli()
