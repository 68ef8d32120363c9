from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import pytest

from pi5_provisioner.config import ProvisionConfig
from pi5_provisioner.lib.command import CmdResult, CommandError
from pi5_provisioner.outcome import StageContext


@dataclass
class Call:
    argv: List[str]
    cwd: Optional[str] = None
    input_text: Optional[str] = None
    secrets: Tuple[str, ...] = ()


@dataclass
class _Rule:
    prefix: Tuple[str, ...]
    returncode: int
    stdout: str
    times: Optional[int]


@dataclass
class FakeRunner:
    """Records commands and answers them from rules matched by argv prefix.

    Later rules win over earlier ones; unmatched commands succeed silently.
    """

    calls: List[Call] = field(default_factory=list)
    rules: List[_Rule] = field(default_factory=list)

    def on(self, *prefix: str, returncode: int = 0, stdout: str = "", times: Optional[int] = None) -> "FakeRunner":
        self.rules.append(_Rule(tuple(prefix), returncode, stdout, times))
        return self

    def _match(self, argv: List[str]) -> Optional[_Rule]:
        for rule in reversed(self.rules):
            if tuple(argv[: len(rule.prefix)]) != rule.prefix:
                continue
            if rule.times is not None:
                if rule.times <= 0:
                    continue
                rule.times -= 1
            return rule
        return None

    def __call__(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        env=None,
        cwd: Optional[str] = None,
        input_text: Optional[str] = None,
        secrets: Sequence[str] = (),
    ) -> CmdResult:
        argv_list = list(argv)
        self.calls.append(Call(argv_list, cwd, input_text, tuple(secrets)))
        rule = self._match(argv_list)
        rc, out = (rule.returncode, rule.stdout) if rule else (0, "")
        result = CmdResult(argv=argv_list, returncode=rc, stdout=out, stderr="")
        if check and rc != 0:
            raise CommandError(f"fake failure: {argv_list}", result)
        return result

    @property
    def argvs(self) -> List[List[str]]:
        return [c.argv for c in self.calls]

    def ran(self, *prefix: str) -> bool:
        return any(tuple(a[: len(prefix)]) == prefix for a in self.argvs)

    def find(self, *prefix: str) -> Call:
        for c in self.calls:
            if tuple(c.argv[: len(prefix)]) == prefix:
                return c
        raise AssertionError(f"no call starting with {prefix}; calls: {self.argvs}")


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def ctx(tmp_path, runner, sleeps) -> StageContext:
    os_release = tmp_path / "etc" / "os-release"
    os_release.parent.mkdir()
    os_release.write_text('ID=debian\nVERSION_CODENAME="bookworm"\n', encoding="utf-8")
    return StageContext(
        os_release_path=str(os_release),
        config=ProvisionConfig(environ={}),
        run=runner,
        prompt_secret=lambda _prompt: "tskey-auth-secret",
        sleep=sleeps.append,
        user="pi",
        home=tmp_path,
    )
