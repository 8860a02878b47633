# executor.py
from __future__ import annotations

import asyncio
import os
import signal
from pathlib import Path
from typing import Optional, Protocol, Sequence

from .errors import CommandExecutionError, PublishError
from .logger import JobLogger, tag
from .model import CommandExecutorResponse, Job
from .variants import DeployVariant

# Keep the tail of long build logs only
_OUTPUT_TAIL_CHARS = 4000


class CommandExecutor(Protocol):
    async def get_snooty_project_name(self, repo_name: str) -> str: ...

    async def execute(self, commands: Sequence[str]) -> CommandExecutorResponse: ...


class ShellCommandExecutor:
    """Runs command lists through the shell, chained with `&&`."""

    def __init__(self, work_dir: str | Path = ".", timeout: Optional[float] = None):
        """
        Args:
            work_dir: Directory the commands start in (holds `repos/`)
            timeout: Seconds before a command list is killed; None waits forever
        """
        self.work_dir = Path(work_dir)
        self.timeout = timeout

    async def execute(self, commands: Sequence[str]) -> CommandExecutorResponse:
        script = " && ".join(commands)
        proc = await asyncio.create_subprocess_shell(
            script,
            cwd=str(self.work_dir),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,  # own process group; a timeout kills the whole group
        )
        try:
            out, err = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            try:
                os.killpg(proc.pid, signal.SIGKILL)
            except ProcessLookupError:
                pass
            await proc.wait()
            raise CommandExecutionError(
                command=script,
                exit_code=-1,
                stdout="",
                stderr=f"timed out after {self.timeout}s",
            )

        stdout = out.decode("utf-8", errors="replace")
        stderr = err.decode("utf-8", errors="replace")
        if proc.returncode != 0:
            raise CommandExecutionError(
                command=script,
                exit_code=proc.returncode,
                stdout=stdout[-_OUTPUT_TAIL_CHARS:],
                stderr=stderr[-_OUTPUT_TAIL_CHARS:],
            )
        return CommandExecutorResponse(
            output=stdout,
            stdout=stdout,
            stderr=stderr,
            status="success",
            error=stderr or None,
        )

    async def get_snooty_project_name(self, repo_name: str) -> str:
        resp = await self.execute([f"cd repos/{repo_name}", "make get-project-name"])
        return resp.stdout.strip()


async def deploy_generic(
    job: Job,
    executor: CommandExecutor,
    logger: JobLogger,
    variant: DeployVariant,
) -> CommandExecutorResponse:
    """
    Run the job's deploy commands.

    Returns:
      the executor response (an empty successful one if there is nothing to run)

    Raises:
      PublishError: the commands ran but reported ERROR on stderr
      CommandExecutionError: the commands exited non-zero
    """
    label = tag(variant.log_tag)
    target = variant.name
    logger.save(job.id, f"{label}Pushing to {target}")
    if not job.deploy_commands:
        logger.save(job.id, f"{label}No commands to execute")
        return CommandExecutorResponse(output="")

    resp = await executor.execute(job.deploy_commands)
    if resp.error and "ERROR" in resp.error:
        logger.save(job.id, f"{label}Failed to push to {target}")
        raise PublishError(target=target, stderr=resp.error)
    logger.save(job.id, f"{label}Finished pushing to {target}")
    return resp
