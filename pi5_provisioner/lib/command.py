from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Protocol, Sequence

logger = logging.getLogger(__name__)

REDACTED = "********"


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandError(RuntimeError):
    """A checked command exited non-zero."""

    def __init__(self, message: str, result: CmdResult) -> None:
        super().__init__(message)
        self.result = result


class CommandRunner(Protocol):
    def __call__(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        env: Mapping[str, str] | None = None,
        cwd: str | None = None,
        input_text: str | None = None,
        secrets: Sequence[str] = (),
    ) -> CmdResult:
        ...


def _redact(text: str, secrets: Sequence[str]) -> str:
    for s in secrets:
        if s:
            text = text.replace(s, REDACTED)
    return text


def _fmt_argv(argv: Sequence[str], secrets: Sequence[str] = ()) -> str:
    return _redact(" ".join(shlex.quote(a) for a in argv), secrets)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    input_text: str | None = None,
    secrets: Sequence[str] = (),
    dry_run: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command, with any ``secrets`` masked.
    - Captures stdout/stderr so stages can inspect them.
    - dry_run logs but does not execute.
    """

    argv_list = list(argv)
    shown = _fmt_argv(argv_list, secrets)
    logger.info("CMD %s", shown)

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    p = subprocess.run(
        argv_list,
        input=input_text,
        text=True,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        cwd=cwd,
        env=dict(os.environ, **(env or {})),
    )

    if p.stdout:
        logger.debug("STDOUT %s", _redact(p.stdout.strip(), secrets))
    if p.stderr:
        logger.debug("STDERR %s", _redact(p.stderr.strip(), secrets))

    result = CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)
    if check and p.returncode != 0:
        raise CommandError(
            f"Command failed ({p.returncode}): {shown}\n{_redact(p.stderr, secrets)}",
            result,
        )

    return result


def make_runner(*, dry_run: bool = False) -> CommandRunner:
    def runner(argv: Sequence[str], **kwargs: Any) -> CmdResult:
        return run_cmd(argv, dry_run=dry_run, **kwargs)

    return runner


def best_effort(description: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> bool:
    """Run a sub-action whose failure must not abort the stage.

    Only CommandError is tolerated; anything else still propagates.
    Returns True if the sub-action succeeded.
    """

    try:
        fn(*args, **kwargs)
        return True
    except CommandError as e:
        logger.warning("%s failed (ignored): exit %s", description, e.result.returncode)
        return False
