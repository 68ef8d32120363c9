from __future__ import annotations

import logging

from ..lib.pkg import apt_cleanup, apt_full_upgrade, apt_update
from ..outcome import AdvancePolicy, Outcome, StageContext

logger = logging.getLogger(__name__)


class SystemUpdateStage:
    name = "System Update & Reboot"
    advance_policy = AdvancePolicy.AUTO_ADVANCE_AND_REBOOT

    def run(self, ctx: StageContext) -> Outcome:
        logger.info("Updating system packages...")
        apt_update(ctx.run)
        # full-upgrade covers both upgrade and dist-upgrade
        apt_full_upgrade(ctx.run)
        apt_cleanup(ctx.run)
        return Outcome.needs_reboot()
