from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _home() -> Path:
    return Path.home()


@dataclass(frozen=True)
class Paths:
    home: Path = field(default_factory=_home)

    @property
    def state_default(self) -> str:
        return str(self.home / ".pi5_setup_stage")

    @property
    def log_default(self) -> str:
        return str(self.home / "pi5_setup.log")

    @property
    def config_default(self) -> str:
        return str(self.home / ".config" / "pi5-provisioner" / "config.yaml")


PATHS = Paths()


def current_user() -> str:
    return os.environ.get("USER") or os.environ.get("LOGNAME") or "pi"


def is_root() -> bool:
    return hasattr(os, "geteuid") and os.geteuid() == 0
