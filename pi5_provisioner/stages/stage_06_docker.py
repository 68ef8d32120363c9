from __future__ import annotations

import logging

from ..lib.command import best_effort
from ..lib.docker import smoke_test
from ..lib.pkg import (
    apt_install,
    apt_remove_if_present,
    apt_update,
    dpkg_architecture,
    os_release_codename,
    sudo,
    write_root_file,
)
from ..outcome import AdvancePolicy, Outcome, StageContext

logger = logging.getLogger(__name__)

CONFLICTING_PACKAGES = [
    "docker.io",
    "docker-doc",
    "docker-compose",
    "podman-docker",
    "containerd",
    "runc",
]
DOCKER_PACKAGES = [
    "docker-ce",
    "docker-ce-cli",
    "containerd.io",
    "docker-buildx-plugin",
    "docker-compose-plugin",
]
KEYRING_DIR = "/etc/apt/keyrings"
KEYRING_PATH = f"{KEYRING_DIR}/docker.asc"
SOURCE_LIST_PATH = "/etc/apt/sources.list.d/docker.list"


def docker_source_line(*, arch: str, codename: str, repo_url: str) -> str:
    return f"deb [arch={arch} signed-by={KEYRING_PATH}] {repo_url} {codename} stable\n"


class DockerStage:
    name = "Docker Install & Logout"
    # Group membership only takes effect in a new login session.
    advance_policy = AdvancePolicy.AUTO_ADVANCE_AND_EXIT

    def run(self, ctx: StageContext) -> Outcome:
        logger.info("Removing old Docker packages...")
        apt_remove_if_present(ctx.run, CONFLICTING_PACKAGES)

        logger.info("Installing prerequisites...")
        apt_update(ctx.run)
        apt_install(ctx.run, ["ca-certificates", "curl"])

        logger.info("Adding Docker GPG key...")
        ctx.run(sudo(["install", "-m", "0755", "-d", KEYRING_DIR]))
        ctx.run(sudo(["curl", "-fsSL", ctx.config.url("docker_gpg"), "-o", KEYRING_PATH]))
        ctx.run(sudo(["chmod", "a+r", KEYRING_PATH]))

        logger.info("Adding Docker repository...")
        codename = os_release_codename(ctx.os_release_path) or "bookworm"
        line = docker_source_line(
            arch=dpkg_architecture(ctx.run),
            codename=codename,
            repo_url=ctx.config.url("docker_repo"),
        )
        write_root_file(ctx.run, SOURCE_LIST_PATH, line)
        apt_update(ctx.run)

        logger.info("Installing Docker...")
        apt_install(ctx.run, DOCKER_PACKAGES)

        logger.info("Configuring Docker permissions...")
        best_effort("groupadd docker", ctx.run, sudo(["groupadd", "docker"]))
        ctx.run(sudo(["usermod", "-aG", "docker", ctx.user]))

        logger.info("Testing Docker...")
        # sudo: the new group is not active in this session yet
        smoke_test(ctx.run)

        return Outcome.needs_reauth(
            "Docker installed but you need to log out and back in for group permissions to take effect.",
            "After logging back in, run this script again to continue.",
        )
