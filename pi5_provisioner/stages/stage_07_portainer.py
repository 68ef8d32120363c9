from __future__ import annotations

import logging

from ..lib.docker import ContainerSpec, docker_usable_without_sudo, ensure_container, volume_create
from ..lib.net import primary_ip
from ..outcome import AdvancePolicy, Outcome, Readiness, StageContext

logger = logging.getLogger(__name__)

VOLUME = "portainer_data"


class PortainerStage:
    name = "Portainer Installation"
    advance_policy = AdvancePolicy.AUTO_ADVANCE_AND_CONTINUE

    def check_ready(self, ctx: StageContext) -> Readiness:
        if docker_usable_without_sudo(ctx.run):
            return Readiness.ok()
        return Readiness.blocked(
            "Docker group permissions not active. Please log out and back in.",
            "Run this script again and re-select stage 7 after logging in.",
        )

    def container(self, ctx: StageContext) -> ContainerSpec:
        return ContainerSpec(
            name="portainer",
            image=ctx.config.portainer_image,
            ports=("8000:8000", "9443:9443"),
            volumes=("/var/run/docker.sock:/var/run/docker.sock", f"{VOLUME}:/data"),
            restart="always",
        )

    def run(self, ctx: StageContext) -> Outcome:
        logger.info("Creating Portainer volume...")
        volume_create(ctx.run, VOLUME)

        logger.info("Starting Portainer...")
        ensure_container(ctx.run, self.container(ctx))

        logger.info("Portainer installed. Access it at https://%s:9443", primary_ip(ctx.run))
        return Outcome.success()
