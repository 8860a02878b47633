# reconcile.py
from __future__ import annotations

import json
from typing import List, Sequence

from .cdn import CDNConnector
from .logger import JobLogger
from .model import ReconcileResult
from .repository import JobRepository

# The publish step prints a JSON record with the updated URLs on its third
# output line. Positional: if the publish step ever prints more before it,
# parsing fails and the purge is skipped.
URLS_RECORD_LINE = 2


def split_output(output: str) -> List[str]:
    return output.replace("\r", "").split("\n")


def parse_updated_urls(output_lines: Sequence[str]) -> List[str]:
    record = json.loads(output_lines[URLS_RECORD_LINE])
    urls = record["urls"]
    if not isinstance(urls, list):
        raise TypeError(f"expected a list of urls, got {type(urls).__name__}")
    return urls


async def purge_published_content(
    job_id: str,
    output_lines: Sequence[str],
    cdn: CDNConnector,
    repository: JobRepository,
    logger: JobLogger,
    should_purge_all: bool,
) -> ReconcileResult:
    """
    Invalidate (and re-warm) the CDN for what this deploy pushed.

    Never raises: a bad output record or a failed purge is logged against
    the job and returned as a "failed" result, because the content is
    already published at this point.
    """
    urls: List[str] = []
    try:
        urls = parse_updated_urls(output_lines)
        logger.save(job_id, json.dumps(urls))
        if should_purge_all:
            await cdn.purge_all(job_id)
            return ReconcileResult(status="purged_all", urls=urls)
        await cdn.purge(job_id, urls)
        await repository.insert_purged_urls(job_id, urls)
        return ReconcileResult(status="purged", urls=urls)
    except Exception as e:
        logger.error(job_id, e)
        return ReconcileResult(status="failed", urls=urls, error=str(e) or type(e).__name__)
