from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .console import SelectionError, validate_selection
from .outcome import AdvancePolicy, Outcome, StageContext
from .registry import StageDescriptor, StageRegistry
from .state_store import CursorStore, StateError

logger = logging.getLogger(__name__)


class RunState(enum.Enum):
    IDLE = "idle"
    SELECTION_PENDING = "selection_pending"
    READINESS_CHECK = "readiness_check"
    EXECUTING = "executing"
    ADVANCED = "advanced"
    HALTED = "halted"


class Continuation(enum.Enum):
    """How the operator picks up after this invocation."""

    NONE = "none"
    REBOOT = "reboot"
    RELOGIN = "relogin"
    RERUN = "rerun"
    COMPLETE = "complete"


_CONTINUATIONS = {
    AdvancePolicy.AUTO_ADVANCE_AND_REBOOT: Continuation.REBOOT,
    AdvancePolicy.AUTO_ADVANCE_AND_EXIT: Continuation.RELOGIN,
    AdvancePolicy.AUTO_ADVANCE_AND_CONTINUE: Continuation.RERUN,
    AdvancePolicy.TERMINAL_CLEAR: Continuation.COMPLETE,
}


@dataclass(frozen=True)
class RunReport:
    state: RunState
    cursor_before: int
    stage: Optional[StageDescriptor] = None
    outcome: Optional[Outcome] = None
    continuation: Continuation = Continuation.NONE
    # Last phase entered before the run ended.
    phase: RunState = RunState.IDLE

    @property
    def exit_code(self) -> int:
        return 0 if self.state is RunState.ADVANCED else 1


def _halt(
    cursor: int,
    phase: RunState,
    stage: Optional[StageDescriptor] = None,
    outcome: Optional[Outcome] = None,
) -> RunReport:
    return RunReport(state=RunState.HALTED, cursor_before=cursor, stage=stage, outcome=outcome, phase=phase)


def _log_guidance(lines) -> None:
    for line in lines:
        logger.warning("%s", line)


def run_stage(
    *,
    store: CursorStore,
    registry: StageRegistry,
    ctx: StageContext,
    choose: Callable[[int], int],
    show: Callable[[int, StageRegistry], None],
) -> RunReport:
    """Run exactly one stage and move the persisted cursor accordingly.

    ``choose`` receives the current cursor and returns the operator's pick
    (it may raise SelectionError); ``show`` renders the catalog.
    Unexpected exceptions propagate with the cursor untouched.
    """

    cursor = store.load()
    logger.info("Current stage file indicates next stage is: %d", cursor)
    if cursor > len(registry):
        raise StateError(f"Stored cursor {cursor} is beyond the last stage ({registry.last_index})")
    show(cursor, registry)

    try:
        selection = validate_selection(choose(cursor), registry)
    except SelectionError as e:
        logger.error("%s", e)
        return _halt(cursor, RunState.SELECTION_PENDING)

    stage = registry.describe(selection)
    logger.info("--- User selected Stage %d: %s ---", stage.index, stage.name)

    if stage.readiness is not None:
        readiness = stage.readiness(ctx)
        if not readiness.ready:
            logger.error("Stage %d not ready: %s", stage.index, readiness.reason)
            _log_guidance(readiness.guidance)
            return _halt(cursor, RunState.READINESS_CHECK, stage)

    logger.info("=== STAGE %d: %s ===", stage.index, stage.name)
    outcome = stage.action(ctx)
    if outcome.failed:
        logger.error("Stage %d failed: %s", stage.index, outcome.reason)
        _log_guidance(outcome.guidance)
        return _halt(cursor, RunState.EXECUTING, stage, outcome)

    _log_guidance(outcome.guidance)
    policy = stage.advance_policy
    if policy is AdvancePolicy.TERMINAL_CLEAR:
        store.clear()
        for line in outcome.summary:
            logger.info("%s", line)
        logger.info("All done!")
    else:
        store.save(stage.index + 1)
        if policy is AdvancePolicy.AUTO_ADVANCE_AND_REBOOT:
            logger.info("Stage %d complete. Rebooting...", stage.index)
        elif policy is AdvancePolicy.AUTO_ADVANCE_AND_EXIT:
            logger.info(
                "Stage %d complete. Please log out and log back in, then run this script again.", stage.index
            )
        else:
            logger.info("Stage %d complete. Run this script again to continue.", stage.index)

    return RunReport(
        state=RunState.ADVANCED,
        cursor_before=cursor,
        stage=stage,
        outcome=outcome,
        continuation=_CONTINUATIONS[policy],
        phase=RunState.EXECUTING,
    )
