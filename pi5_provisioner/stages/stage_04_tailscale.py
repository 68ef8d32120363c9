from __future__ import annotations

import logging

from ..lib.net import run_remote_script
from ..lib.pkg import sudo, write_root_file
from ..outcome import AdvancePolicy, Outcome, StageContext

logger = logging.getLogger(__name__)

SYSCTL_PATH = "/etc/sysctl.d/99-tailscale.conf"
SYSCTL_FORWARDING = "net.ipv4.ip_forward = 1\nnet.ipv6.conf.all.forwarding = 1\n"


class TailscaleStage:
    name = "Tailscale Installation"
    advance_policy = AdvancePolicy.AUTO_ADVANCE_AND_CONTINUE

    def run(self, ctx: StageContext) -> Outcome:
        auth_key = ctx.prompt_secret("Please enter your Tailscale auth key: ").strip()
        if not auth_key:
            return Outcome.failure(
                "No auth key provided.",
                "Please run the script again and provide a valid Tailscale auth key.",
            )

        logger.info("Installing Tailscale and connecting with exit node advertisement...")
        run_remote_script(ctx.run, ctx.config.url("tailscale_install"), shell="sh")
        ctx.run(
            sudo(
                [
                    "tailscale",
                    "up",
                    f"--auth-key={auth_key}",
                    "--advertise-exit-node",
                    "--accept-dns=false",
                ]
            ),
            secrets=[auth_key],
        )

        logger.info("Enabling IP forwarding for exit node functionality...")
        write_root_file(ctx.run, SYSCTL_PATH, SYSCTL_FORWARDING)
        ctx.run(sudo(["sysctl", "-p", SYSCTL_PATH]))
        return Outcome.success()
