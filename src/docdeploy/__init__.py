from .model import Job, JobPayload, DeployOutcome, ReconcileResult
from .orchestrator import DeployContext, deploy, prepare_next_gen
from .variants import Environment, PRODUCTION, STAGING, get_variant

__all__ = [
    "Job",
    "JobPayload",
    "DeployOutcome",
    "ReconcileResult",
    "DeployContext",
    "deploy",
    "prepare_next_gen",
    "Environment",
    "PRODUCTION",
    "STAGING",
    "get_variant",
]
