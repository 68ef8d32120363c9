from __future__ import annotations

import argparse
import logging
import time
from typing import Callable, Optional

from .config import load_config
from .console import prompt_selection, show_catalog
from .lib.command import CommandError, make_runner
from .lib.env import PATHS, is_root
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .outcome import StageContext
from .pipeline import Continuation, RunReport, run_stage
from .stages import build_registry
from .state_store import CursorStore, FileCursorStore, MemoryCursorStore

logger = logging.getLogger(__name__)


DEFAULT_STATE_PATH = PATHS.state_default
DEFAULT_CONFIG_PATH = PATHS.config_default


def reboot(*, dry_run: bool = False, delay: float = 2.0) -> None:
    runner = make_runner(dry_run=dry_run)
    runner(["sync"])
    if not dry_run:
        time.sleep(delay)
    runner(["sudo", "reboot"])


def run(
    *,
    state_path: str = DEFAULT_STATE_PATH,
    config_path: Optional[str] = DEFAULT_CONFIG_PATH,
    log_path: Optional[str] = None,
    dry_run: bool = False,
    input_fn: Optional[Callable[[str], str]] = None,
) -> RunReport:
    """Run the stage the operator picks, persisting the cursor for resume."""

    config = load_config(config_path)
    registry = build_registry()

    store: CursorStore = FileCursorStore(state_path)
    if dry_run:
        # Dry runs read the real cursor but never write it back.
        store = MemoryCursorStore(store.load())

    ctx = StageContext(config=config, run=make_runner(dry_run=dry_run), dry_run=dry_run)

    report = run_stage(
        store=store,
        registry=registry,
        ctx=ctx,
        choose=lambda cursor: prompt_selection(cursor, last_index=registry.last_index, input_fn=input_fn or input),
        show=show_catalog,
    )

    if report.continuation is Continuation.REBOOT:
        # The cursor is already saved; a failed or interrupted reboot must not
        # be reported as a failed stage.
        try:
            reboot(dry_run=dry_run)
        except (CommandError, OSError, KeyboardInterrupt) as e:
            logger.error(
                "Reboot did not happen (%s). The stage cursor was already advanced; "
                "reboot manually with: sudo reboot",
                type(e).__name__,
            )
    elif report.continuation is Continuation.COMPLETE and log_path:
        logger.info("Setup log saved to: %s", log_path)
    return report


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="pi5-provisioner")
    p.add_argument("--state", default=DEFAULT_STATE_PATH, help="Path to the stage cursor file")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to the setup log")
    p.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Optional YAML config overriding defaults")
    p.add_argument("--dry-run", action="store_true", help="Log commands without running them")

    args = p.parse_args(argv)

    log_path = configure_logging(log_path=args.log)

    if is_root():
        logger.error("Please do not run this script as root. Run as regular user with sudo privileges.")
        return 1

    try:
        report = run(
            state_path=args.state,
            config_path=args.config,
            log_path=log_path,
            dry_run=bool(args.dry_run),
        )
    except KeyboardInterrupt:
        logger.error("Interrupted. The stage cursor was not advanced; run this script again to retry.")
        return 1
    except Exception:
        logger.exception("Provisioner failed")
        logger.error("The stage cursor was not advanced; fix the error above and run this script again.")
        return 1

    return report.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
