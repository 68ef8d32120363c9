from __future__ import annotations

from .stage_01_argon_eeprom import ArgonScriptStage


class ArgonOneScriptStage(ArgonScriptStage):
    name = "Argon One Script Install & Reboot"
    url_key = "argon_one"
    description = "Argon One script"
