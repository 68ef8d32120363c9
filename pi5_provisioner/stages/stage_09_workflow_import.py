from __future__ import annotations

import logging

from ..lib.command import CommandError, best_effort
from ..lib.docker import container_running, exec_sh, exec_sh_command
from ..lib.net import primary_ip
from ..outcome import AdvancePolicy, Outcome, Readiness, StageContext
from .stage_08_n8n import CONTAINER

logger = logging.getLogger(__name__)

CONTAINER_HOME = "/home/node"


class WorkflowImportStage:
    name = "N8N Workflow Import"
    advance_policy = AdvancePolicy.AUTO_ADVANCE_AND_CONTINUE

    def check_ready(self, ctx: StageContext) -> Readiness:
        if container_running(ctx.run, CONTAINER):
            return Readiness.ok()
        return Readiness.blocked(
            "N8N container is not running.",
            f"Check the container with: docker logs {CONTAINER}",
            "Re-run stage 8 if the container does not exist.",
        )

    def _sync_repo(self, ctx: StageContext, repo_dir: str) -> None:
        url = ctx.config.url("workflow_repo")
        logger.info("Cloning %s into N8N container...", url)
        try:
            exec_sh(ctx.run, CONTAINER, f"cd {CONTAINER_HOME} && git clone {url}")
        except CommandError:
            # Heuristic: assumes the clone failed because a checkout is already
            # there. A pull cannot repair any other cause, so it stays best-effort.
            logger.warning("Repository might already exist or git not available in container. Attempting pull...")
            best_effort(
                "git pull inside n8n container",
                exec_sh,
                ctx.run,
                CONTAINER,
                f"cd {repo_dir} && git pull",
            )

    def run(self, ctx: StageContext) -> Outcome:
        repo_dir = f"{CONTAINER_HOME}/{ctx.config.workflow_repo_name}"
        self._sync_repo(ctx, repo_dir)

        logger.info("Importing N8N workflows...")
        import_script = f"n8n import:workflow --separate --input={repo_dir}/n8n_workflows"
        r = exec_sh(ctx.run, CONTAINER, import_script, check=False)

        guidance: tuple[str, ...] = ()
        if r.returncode != 0:
            logger.error("Failed to import workflows. You may need to do this manually.")
            guidance = ("To import manually, run:", exec_sh_command(CONTAINER, import_script))
        else:
            logger.info("N8N workflows imported successfully.")

        logger.info("Access N8N at http://%s:%d", primary_ip(ctx.run), ctx.config.n8n_port)
        return Outcome.success(guidance=guidance)
