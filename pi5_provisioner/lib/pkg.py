from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from .command import CommandRunner, best_effort

logger = logging.getLogger(__name__)


def sudo(argv: Sequence[str]) -> list[str]:
    return ["sudo", *argv]


def apt_update(run: CommandRunner) -> None:
    run(sudo(["apt-get", "update"]))


def apt_full_upgrade(run: CommandRunner) -> None:
    run(sudo(["apt-get", "full-upgrade", "-y"]))


def apt_cleanup(run: CommandRunner) -> None:
    run(sudo(["apt-get", "autoremove", "-y"]))
    run(sudo(["apt-get", "clean"]))


def apt_install(run: CommandRunner, packages: Sequence[str]) -> None:
    if not packages:
        return
    run(sudo(["apt-get", "install", "-y", *packages]))


def apt_remove_if_present(run: CommandRunner, packages: Sequence[str]) -> list[str]:
    """Remove each package independently; absence is not an error.

    Returns the packages whose removal did not succeed.
    """

    skipped: list[str] = []
    for p in packages:
        if not best_effort(f"apt-get remove {p}", run, sudo(["apt-get", "remove", "-y", p])):
            skipped.append(p)
    return skipped


def dpkg_architecture(run: CommandRunner) -> str:
    r = run(["dpkg", "--print-architecture"])
    return (r.stdout or "").strip() or "arm64"


def os_release_codename(path: str = "/etc/os-release") -> str:
    """Return VERSION_CODENAME from os-release (empty if unknown)."""

    p = Path(path)
    if not p.exists():
        return ""
    for line in p.read_text(encoding="utf-8", errors="ignore").splitlines():
        key, _, value = line.partition("=")
        if key.strip() == "VERSION_CODENAME":
            return value.strip().strip('"').strip("'")
    return ""


def write_root_file(run: CommandRunner, path: str, content: str) -> None:
    """Overwrite a root-owned file through ``sudo tee``."""

    run(sudo(["tee", path]), input_text=content)
    logger.info("Wrote %s", path)
