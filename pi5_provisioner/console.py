from __future__ import annotations

import sys
from typing import Callable, List, Optional, TextIO

from .registry import StageRegistry

DONE = "[DONE]"
NEXT = "[NEXT]"
PENDING = "[PENDING]"


class SelectionError(ValueError):
    pass


def stage_status(index: int, cursor: int) -> str:
    if index < cursor:
        return DONE
    if index == cursor:
        return NEXT
    return PENDING


def render_catalog(cursor: int, registry: StageRegistry) -> List[str]:
    lines = ["", "--- Raspberry Pi Setup Stages ---"]
    for d in registry:
        lines.append(f"  {stage_status(d.index, cursor):<10} Stage {d.index:<2}: {d.name}")
    lines.append("-----------------------------------")
    lines.append("")
    return lines


def show_catalog(cursor: int, registry: StageRegistry, out: Optional[TextIO] = None) -> None:
    out = out or sys.stdout
    for line in render_catalog(cursor, registry):
        print(line, file=out)


def prompt_selection(
    default: int,
    *,
    last_index: int,
    input_fn: Callable[[str], str] = input,
) -> int:
    raw = input_fn(f"Enter stage to run (0-{last_index}) [Default: {default}]: ").strip()
    if not raw:
        return default
    if not (raw.isascii() and raw.isdigit()):
        raise SelectionError(f"Invalid selection {raw!r}. Please enter a number between 0 and {last_index}.")
    return int(raw)


def validate_selection(selection: int, registry: StageRegistry) -> int:
    if not 0 <= selection <= registry.last_index:
        raise SelectionError(f"Invalid selection. Please enter a number between 0 and {registry.last_index}.")
    return selection
