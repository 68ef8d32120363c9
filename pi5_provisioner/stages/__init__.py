from ..registry import StageRegistry
from .stage_00_system_update import SystemUpdateStage
from .stage_01_argon_eeprom import ArgonEepromStage
from .stage_02_argon_one import ArgonOneScriptStage
from .stage_03_boot_order import ForceSdBootStage
from .stage_04_tailscale import TailscaleStage
from .stage_05_adguard import AdGuardHomeStage
from .stage_06_docker import DockerStage
from .stage_07_portainer import PortainerStage
from .stage_08_n8n import N8nStage
from .stage_09_workflow_import import WorkflowImportStage
from .stage_10_host_repo import HostRepoStage
from .stage_11_rpi_clone import RpiCloneStage


def build_stages():
    return [
        SystemUpdateStage(),
        ArgonEepromStage(),
        ArgonOneScriptStage(),
        ForceSdBootStage(),
        TailscaleStage(),
        AdGuardHomeStage(),
        DockerStage(),
        PortainerStage(),
        N8nStage(),
        WorkflowImportStage(),
        HostRepoStage(),
        RpiCloneStage(),
    ]


def build_registry() -> StageRegistry:
    return StageRegistry.from_stages(build_stages())


__all__ = [
    "SystemUpdateStage",
    "ArgonEepromStage",
    "ArgonOneScriptStage",
    "ForceSdBootStage",
    "TailscaleStage",
    "AdGuardHomeStage",
    "DockerStage",
    "PortainerStage",
    "N8nStage",
    "WorkflowImportStage",
    "HostRepoStage",
    "RpiCloneStage",
    "build_stages",
    "build_registry",
]
