from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from .command import CmdResult, CommandRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContainerSpec:
    name: str
    image: str
    ports: Tuple[str, ...] = ()
    volumes: Tuple[str, ...] = ()
    env: Dict[str, str] = field(default_factory=dict)
    restart: str = "always"

    def run_argv(self) -> List[str]:
        argv = ["docker", "run", "-d", "--name", self.name, f"--restart={self.restart}"]
        for p in self.ports:
            argv += ["-p", p]
        for k, v in self.env.items():
            argv += ["-e", f"{k}={v}"]
        for v in self.volumes:
            argv += ["-v", v]
        argv.append(self.image)
        return argv


def docker_usable_without_sudo(run: CommandRunner) -> bool:
    r = run(["docker", "ps"], check=False)
    return r.returncode == 0


def volume_create(run: CommandRunner, name: str) -> None:
    # `docker volume create` is a no-op for an existing volume.
    run(["docker", "volume", "create", name])


def _filter_ids(run: CommandRunner, name: str, *extra: str) -> List[str]:
    r = run(["docker", "ps", "-a", "-q", "--filter", f"name=^{name}$", *extra], check=False)
    return [line for line in (r.stdout or "").split() if line]


def container_exists(run: CommandRunner, name: str) -> bool:
    return bool(_filter_ids(run, name))


def container_running(run: CommandRunner, name: str) -> bool:
    return bool(_filter_ids(run, name, "--filter", "status=running"))


def ensure_container(run: CommandRunner, spec: ContainerSpec) -> None:
    """Start spec's container, creating it only if it does not exist yet."""

    if container_exists(run, spec.name):
        logger.info("Container %s already exists; starting it", spec.name)
        run(["docker", "start", spec.name])
        return
    run(spec.run_argv())


def exec_sh(
    run: CommandRunner,
    container: str,
    script: str,
    *,
    user: str = "node",
    check: bool = True,
) -> CmdResult:
    return run(["docker", "exec", "-u", user, container, "/bin/sh", "-c", script], check=check)


def exec_sh_command(container: str, script: str, *, user: str = "node") -> str:
    """Shell form of exec_sh, for printing manual-recovery hints."""

    return f"docker exec -u {user} {container} /bin/sh -c '{script}'"


def smoke_test(run: CommandRunner, argv_prefix: Sequence[str] = ("sudo",)) -> None:
    run([*argv_prefix, "docker", "run", "--rm", "hello-world"])
