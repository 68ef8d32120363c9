from __future__ import annotations

import enum
import getpass
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Tuple

from .config import ProvisionConfig
from .lib.command import CommandRunner, run_cmd
from .lib.env import current_user


class OutcomeKind(enum.Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    NEEDS_REBOOT = "needs_reboot"
    NEEDS_REAUTH = "needs_reauth"


class AdvancePolicy(enum.Enum):
    AUTO_ADVANCE_AND_REBOOT = "reboot"
    AUTO_ADVANCE_AND_EXIT = "exit"
    AUTO_ADVANCE_AND_CONTINUE = "continue"
    TERMINAL_CLEAR = "terminal"


@dataclass(frozen=True)
class Outcome:
    kind: OutcomeKind
    reason: str = ""
    guidance: Tuple[str, ...] = ()
    summary: Tuple[str, ...] = ()

    @property
    def failed(self) -> bool:
        return self.kind is OutcomeKind.FAILURE

    @classmethod
    def success(cls, *, guidance: Tuple[str, ...] = (), summary: Tuple[str, ...] = ()) -> "Outcome":
        return cls(OutcomeKind.SUCCESS, guidance=guidance, summary=summary)

    @classmethod
    def failure(cls, reason: str, *guidance: str) -> "Outcome":
        return cls(OutcomeKind.FAILURE, reason=reason, guidance=guidance)

    @classmethod
    def needs_reboot(cls) -> "Outcome":
        return cls(OutcomeKind.NEEDS_REBOOT)

    @classmethod
    def needs_reauth(cls, *guidance: str) -> "Outcome":
        return cls(OutcomeKind.NEEDS_REAUTH, guidance=guidance)


@dataclass(frozen=True)
class Readiness:
    ready: bool
    reason: str = ""
    guidance: Tuple[str, ...] = ()

    @classmethod
    def ok(cls) -> "Readiness":
        return cls(True)

    @classmethod
    def blocked(cls, reason: str, *guidance: str) -> "Readiness":
        return cls(False, reason=reason, guidance=guidance)


@dataclass
class StageContext:
    """Collaborators handed to every stage action."""

    config: ProvisionConfig = field(default_factory=ProvisionConfig)
    run: CommandRunner = run_cmd
    prompt_secret: Callable[[str], str] = getpass.getpass
    sleep: Callable[[float], None] = time.sleep
    user: str = field(default_factory=current_user)
    home: Path = field(default_factory=Path.home)
    dry_run: bool = False
    os_release_path: str = "/etc/os-release"

    @property
    def git_dir(self) -> Path:
        return Path(self.config.git_dir) if self.config.git_dir else self.home / "git"
