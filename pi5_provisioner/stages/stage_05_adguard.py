from __future__ import annotations

import json
import logging

from ..lib.command import CommandError
from ..lib.net import download, fetch_json, find_release_asset_url, primary_ip
from ..lib.pkg import sudo
from ..outcome import AdvancePolicy, Outcome, StageContext

logger = logging.getLogger(__name__)

INSTALL_DIR_NAME = "AdGuardHome"


class AdGuardHomeStage:
    name = "AdGuard Home Installation"
    advance_policy = AdvancePolicy.AUTO_ADVANCE_AND_CONTINUE

    def _latest_asset_url(self, ctx: StageContext) -> str | None:
        pattern = ctx.config.adguard_asset_pattern
        logger.info("Finding latest AdGuard Home release matching %s...", pattern)
        try:
            release = fetch_json(ctx.run, ctx.config.url("adguard_releases"))
        except (CommandError, json.JSONDecodeError) as e:
            logger.error("Release index query failed: %s", e)
            return None
        if not isinstance(release, dict):
            return None
        return find_release_asset_url(release, pattern)

    def run(self, ctx: StageContext) -> Outcome:
        url = self._latest_asset_url(ctx)
        if not url:
            if not ctx.dry_run:
                return Outcome.failure(
                    "Could not find latest AdGuard Home URL.",
                    f"Check {ctx.config.url('adguard_releases')} for a release asset matching "
                    f"'{ctx.config.adguard_asset_pattern}', then run this script again.",
                )
            url = "https://example.invalid/AdGuardHome_linux_arm64.tar.gz"

        archive = ctx.home / url.rsplit("/", 1)[-1]
        install_dir = ctx.home / INSTALL_DIR_NAME

        logger.info("Downloading AdGuard Home: %s", url)
        download(ctx.run, url, str(archive))

        logger.info("Extracting AdGuard Home...")
        ctx.run(["tar", "-xzf", str(archive), "-C", str(ctx.home)])
        archive.unlink(missing_ok=True)

        if not install_dir.is_dir() and not ctx.dry_run:
            return Outcome.failure(
                f"Extracted directory '{INSTALL_DIR_NAME}' not found in {ctx.home}.",
                "Please check the extraction and run this script again.",
            )

        logger.info("Installing AdGuard Home as service...")
        ctx.run(sudo(["./AdGuardHome", "-s", "install"]), cwd=str(install_dir))

        web = f"http://{primary_ip(ctx.run)}:{ctx.config.adguard_port}"
        logger.info("AdGuard Home installed. Access it at %s", web)
        return Outcome.success(
            guidance=(
                "Manual steps required:",
                f"1. Complete AdGuard Home setup in web interface ({web})",
                "2. Set to listen on all interfaces (0.0.0.0)",
                "3. Configure Cloudflare TLS: tls://one.one.one.one",
                "4. Set rate limit to 0",
                "5. Add filters as needed",
                "6. Add AdGuard's Tailscale IP to Tailscale admin DNS settings",
            )
        )
