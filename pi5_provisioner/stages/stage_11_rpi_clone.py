from __future__ import annotations

import logging
from typing import List

from ..config import repo_dir_name
from ..lib.block import block_device_present
from ..lib.git import clone_or_pull
from ..lib.net import primary_ip
from ..lib.pkg import sudo
from ..outcome import AdvancePolicy, Outcome, StageContext

logger = logging.getLogger(__name__)

INSTALL_DIR = "/usr/local/sbin"
SCRIPTS = ["rpi-clone", "rpi-clone-setup"]


def device_guidance(device: str, present: bool) -> List[str]:
    if present:
        return [
            f"NVMe drive detected ({device})",
            "Ready to clone SD card to NVMe drive",
            "To clone your SD card to NVMe, run:",
            f"  sudo rpi-clone {device}",
            "This will:",
            "1. Create a bootable backup of your SD card on the NVMe",
            "2. Allow you to boot from NVMe for better performance",
            "3. Keep SD card as backup",
            f"CAUTION: This will ERASE all data on {device}!",
        ]
    return [
        f"No NVMe drive detected at {device}",
        "rpi-clone installed. When you connect an NVMe drive, run:",
        "  lsblk  (to identify the drive)",
        f"  sudo rpi-clone {device}  (or appropriate device name)",
    ]


class RpiCloneStage:
    name = "RPI-Clone Setup & Final Summary"
    advance_policy = AdvancePolicy.TERMINAL_CLEAR

    def _tailscale_ip(self, ctx: StageContext) -> str:
        r = ctx.run(["tailscale", "ip"], check=False)
        ips = (r.stdout or "").split()
        return ips[0] if r.returncode == 0 and ips else "Run: sudo tailscale up"

    def summary(self, ctx: StageContext) -> List[str]:
        ip = primary_ip(ctx.run)
        cfg = ctx.config
        return [
            "==========================================",
            "=== SETUP COMPLETE ===",
            "==========================================",
            "Services installed:",
            f"- Tailscale: {self._tailscale_ip(ctx)}",
            f"- AdGuard Home: http://{ip}:{cfg.adguard_port}",
            f"- Portainer: https://{ip}:9443",
            f"- N8N: http://{ip}:{cfg.n8n_port}",
            f"- rpi-clone: Installed at {INSTALL_DIR}/rpi-clone",
            "Manual steps remaining:",
            "1. Configure AdGuard Home filters and upstream DNS",
            "2. Add AdGuard's Tailscale IP to Tailscale DNS settings",
            "3. Access Portainer to manage containers",
            "4. Configure N8N workflows as needed",
            f"5. (Optional) Clone to NVMe: sudo rpi-clone {cfg.clone_device}",
        ]

    def run(self, ctx: StageContext) -> Outcome:
        url = ctx.config.url("rpi_clone_repo")
        checkout = ctx.git_dir / repo_dir_name(url)

        logger.info("Installing rpi-clone...")
        clone_or_pull(ctx.run, url, checkout, dry_run=ctx.dry_run)

        logger.info("Installing rpi-clone scripts...")
        ctx.run(sudo(["cp", *SCRIPTS, INSTALL_DIR]), cwd=str(checkout))

        device = ctx.config.clone_device
        logger.info("Checking for NVMe drive...")
        present = block_device_present(ctx.run, device)

        return Outcome.success(
            guidance=tuple(device_guidance(device, present)),
            summary=tuple(self.summary(ctx)),
        )
