from __future__ import annotations

import logging
from typing import Dict

from ..lib.docker import ContainerSpec, ensure_container, volume_create
from ..lib.net import wait_for_http
from ..outcome import AdvancePolicy, Outcome, StageContext

logger = logging.getLogger(__name__)

CONTAINER = "n8n"
VOLUME = "n8n_data"


def n8n_environment(*, timezone: str, restrict_path: str) -> Dict[str, str]:
    return {
        "GENERIC_TIMEZONE": timezone,
        "TZ": timezone,
        "N8N_HIDE_USAGE_PAGE": "false",
        "N8N_ONBOARDING_FLOW_DISABLED": "true",
        "N8N_ENFORCE_SETTINGS_FILE_PERMISSIONS": "true",
        "N8N_DIAGNOSTICS_ENABLED": "false",
        "N8N_DEFAULT_LOCALE": "en",
        "N8N_SECURE_COOKIE": "false",
        "N8N_RUNNERS_ENABLED": "true",
        "NODES_EXCLUDE": "[]",
        "N8N_GIT_NODE_DISABLE_BARE_REPOS": "false",
        "N8N_RESTRICT_FILE_ACCESS_TO": restrict_path,
    }


class N8nStage:
    name = "N8N Installation"
    advance_policy = AdvancePolicy.AUTO_ADVANCE_AND_CONTINUE

    def container(self, ctx: StageContext) -> ContainerSpec:
        cfg = ctx.config
        return ContainerSpec(
            name=CONTAINER,
            image=cfg.n8n_image,
            ports=(f"{cfg.n8n_port}:5678",),
            volumes=(f"{VOLUME}:/home/node/.n8n",),
            env=n8n_environment(timezone=cfg.timezone, restrict_path=cfg.n8n_restrict_path),
            restart="unless-stopped",
        )

    def run(self, ctx: StageContext) -> Outcome:
        cfg = ctx.config

        logger.info("Creating N8N volume...")
        volume_create(ctx.run, VOLUME)

        logger.info("Starting N8N (timezone=%s)...", cfg.timezone)
        ensure_container(ctx.run, self.container(ctx))

        logger.info("Waiting for N8N to start...")
        healthy = ctx.dry_run or wait_for_http(
            ctx.run,
            cfg.n8n_health_url,
            attempts=cfg.n8n_health_attempts,
            interval=cfg.n8n_health_interval,
            sleep=ctx.sleep,
        )
        if not healthy:
            return Outcome.failure(
                f"N8N failed to start: {cfg.n8n_health_url} not healthy after {cfg.n8n_health_attempts} attempts.",
                f"Check docker logs for '{CONTAINER}' container: docker logs {CONTAINER}",
                "Then re-run this script and select stage 8.",
            )

        logger.info("N8N is up and running!")
        return Outcome.success()
