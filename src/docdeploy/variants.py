"""Deploy targets as plain data: gate policy + make targets per environment."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict

from .gate import check_publishable, open_gate
from .logger import JobLogger
from .model import Job


class Environment(str, Enum):
    PRODUCTION = "production"
    STAGING = "staging"


@dataclass(frozen=True)
class DeployVariant:
    environment: Environment
    log_tag: str                        # short label used in job log lines
    gate: Callable[[Job, JobLogger], str]
    deploy_target: str                  # final command for classic builds
    next_gen_target: str                # make target for next-gen builds
    purges_cdn: bool

    @property
    def name(self) -> str:
        return self.environment.value


PRODUCTION = DeployVariant(
    environment=Environment.PRODUCTION,
    log_tag="prod",
    gate=check_publishable,
    deploy_target="make publish && make deploy",
    next_gen_target="next-gen-deploy",
    purges_cdn=True,
)

STAGING = DeployVariant(
    environment=Environment.STAGING,
    log_tag="stage",
    gate=open_gate,
    deploy_target="make stage",
    next_gen_target="next-gen-stage",
    purges_cdn=False,
)

VARIANTS: Dict[Environment, DeployVariant] = {
    Environment.PRODUCTION: PRODUCTION,
    Environment.STAGING: STAGING,
}


def get_variant(environment: str | Environment) -> DeployVariant:
    try:
        return VARIANTS[Environment(environment)]
    except ValueError:
        known = ", ".join(e.value for e in Environment)
        raise ValueError(f"Unknown environment {environment!r} (expected one of: {known})") from None
