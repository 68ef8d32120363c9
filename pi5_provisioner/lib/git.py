from __future__ import annotations

import logging
from pathlib import Path

from .command import CommandRunner

logger = logging.getLogger(__name__)


def clone_or_pull(run: CommandRunner, url: str, dest: Path, *, dry_run: bool = False) -> str:
    """Clone url into dest, or pull if dest is already a checkout.

    dry_run leaves the filesystem alone (the runner only logs).
    Returns "pulled" or "cloned".
    """

    if dest.is_dir():
        logger.info("Repository already exists at %s, pulling latest changes...", dest)
        run(["git", "pull"], cwd=str(dest))
        return "pulled"

    if not dry_run:
        dest.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Cloning %s into %s", url, dest)
    run(["git", "clone", url, str(dest)])
    return "cloned"
