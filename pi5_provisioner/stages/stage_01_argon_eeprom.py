from __future__ import annotations

import logging

from ..lib.net import run_remote_script
from ..outcome import AdvancePolicy, Outcome, StageContext

logger = logging.getLogger(__name__)


class ArgonScriptStage:
    """Fetch one of Argon40's installer scripts and pipe it into bash."""

    name = ""
    url_key = ""
    description = ""
    advance_policy = AdvancePolicy.AUTO_ADVANCE_AND_REBOOT

    def run(self, ctx: StageContext) -> Outcome:
        logger.info("Installing %s...", self.description)
        run_remote_script(ctx.run, ctx.config.url(self.url_key))
        return Outcome.needs_reboot()


class ArgonEepromStage(ArgonScriptStage):
    name = "Argon EEPROM Install & Reboot"
    url_key = "argon_eeprom"
    description = "Argon EEPROM (this may update bootloader settings)"
