from __future__ import annotations

import logging

from ..lib.git import clone_or_pull
from ..outcome import AdvancePolicy, Outcome, StageContext

logger = logging.getLogger(__name__)


class HostRepoStage:
    name = "Git Repo Clone (Host)"
    advance_policy = AdvancePolicy.AUTO_ADVANCE_AND_CONTINUE

    def run(self, ctx: StageContext) -> Outcome:
        logger.info("Cloning repository to host machine...")
        dest = ctx.git_dir / ctx.config.workflow_repo_name
        clone_or_pull(ctx.run, ctx.config.url("workflow_repo"), dest, dry_run=ctx.dry_run)
        return Outcome.success()
