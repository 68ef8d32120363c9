from __future__ import annotations

import logging
import re

from .command import CommandRunner

logger = logging.getLogger(__name__)


def block_device_present(run: CommandRunner, name: str) -> bool:
    """Return True if lsblk lists a device whose name matches ``name``."""

    r = run(["lsblk", "-n", "-o", "NAME"], check=False)
    rx = re.compile(rf"\b{re.escape(name)}\b")
    return any(rx.search(line) for line in (r.stdout or "").splitlines())
