from __future__ import annotations

import logging

from ..lib.pkg import sudo
from ..outcome import AdvancePolicy, Outcome, StageContext

logger = logging.getLogger(__name__)


class ForceSdBootStage:
    name = "Force SD Card Boot & Reboot"
    advance_policy = AdvancePolicy.AUTO_ADVANCE_AND_REBOOT

    def run(self, ctx: StageContext) -> Outcome:
        order = ctx.config.boot_order
        # B1 = SD card. Keeps setup booting from SD instead of a blank NVMe
        # after the Argon EEPROM update.
        logger.info("Setting bootloader boot order to %s...", order)
        ctx.run(sudo(["raspi-config", "nonint", "do_boot_order", order]))
        return Outcome.needs_reboot()
