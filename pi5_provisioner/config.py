from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

DEFAULT_TIMEZONE = "Asia/Dhaka"

DEFAULT_URLS: Dict[str, str] = {
    "argon_eeprom": "https://download.argon40.com/argon-eeprom.sh",
    "argon_one": "https://download.argon40.com/argon1.sh",
    "tailscale_install": "https://tailscale.com/install.sh",
    "adguard_releases": "https://api.github.com/repos/AdguardTeam/AdGuardHome/releases/latest",
    "docker_gpg": "https://download.docker.com/linux/debian/gpg",
    "docker_repo": "https://download.docker.com/linux/debian",
    "workflow_repo": "https://github.com/WUOTE/dunkbin-stats-images.git",
    "rpi_clone_repo": "https://github.com/geerlingguy/rpi-clone.git",
}


class ConfigError(ValueError):
    pass


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"config section '{name}' must be a mapping")
    return value


@dataclass(frozen=True)
class ProvisionConfig:
    raw: Dict[str, Any] = field(default_factory=dict)
    environ: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))

    def url(self, key: str) -> str:
        return str(_section(self.raw, "urls").get(key) or DEFAULT_URLS[key])

    @property
    def git_dir(self) -> Optional[str]:
        value = _section(self.raw, "paths").get("git_dir")
        return str(value) if value else None

    @property
    def boot_order(self) -> str:
        return str(self.raw.get("boot_order") or "B1")

    @property
    def adguard_asset_pattern(self) -> str:
        return str(_section(self.raw, "adguard").get("asset_pattern") or r"linux_arm64\.tar\.gz")

    @property
    def adguard_port(self) -> int:
        return int(_section(self.raw, "adguard").get("port") or 3000)

    @property
    def portainer_image(self) -> str:
        return str(_section(self.raw, "portainer").get("image") or "portainer/portainer-ee:sts")

    @property
    def n8n_image(self) -> str:
        return str(_section(self.raw, "n8n").get("image") or "docker.n8n.io/n8nio/n8n")

    @property
    def n8n_port(self) -> int:
        return int(_section(self.raw, "n8n").get("port") or 5678)

    @property
    def n8n_health_url(self) -> str:
        return str(_section(self.raw, "n8n").get("health_url") or f"http://127.0.0.1:{self.n8n_port}/healthz")

    @property
    def n8n_health_attempts(self) -> int:
        return int(_section(self.raw, "n8n").get("health_attempts") or 30)

    @property
    def n8n_health_interval(self) -> float:
        return float(_section(self.raw, "n8n").get("health_interval") or 1.0)

    @property
    def n8n_restrict_path(self) -> str:
        default = "/home/node/git/dunkbin-stats-images/"
        return str(_section(self.raw, "n8n").get("restrict_file_access_to") or default)

    @property
    def timezone(self) -> str:
        # The environment wins over the file so a one-off run can override it.
        return self.environ.get("TIMEZONE") or str(_section(self.raw, "n8n").get("timezone") or DEFAULT_TIMEZONE)

    @property
    def clone_device(self) -> str:
        return str(_section(self.raw, "clone").get("device") or "nvme0n1")

    @property
    def workflow_repo_name(self) -> str:
        return repo_dir_name(self.url("workflow_repo"))


def repo_dir_name(url: str) -> str:
    name = url.rstrip("/").rsplit("/", 1)[-1]
    return name[: -len(".git")] if name.endswith(".git") else name


def load_config(path: Optional[str]) -> ProvisionConfig:
    """Load the optional YAML config; a missing file means all defaults."""

    if not path or not Path(path).exists():
        return ProvisionConfig()

    p = Path(path)
    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError("provisioner config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("PyYAML is required to read the provisioner config") from e

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{p} must contain a mapping/object")

    return ProvisionConfig(raw=raw)
