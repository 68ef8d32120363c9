from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class StateError(RuntimeError):
    pass


class CursorStore(Protocol):
    """Durable "next stage to run" value; absence means stage 0."""

    def load(self) -> int:
        ...

    def save(self, value: int) -> None:
        ...

    def clear(self) -> None:
        ...


def _check_value(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise StateError(f"Stage cursor must be a non-negative integer, got {value!r}")
    return value


class FileCursorStore:
    """Cursor persisted as a decimal number in a small text file."""

    def __init__(self, path: str) -> None:
        self.path = Path(path)

    def load(self) -> int:
        if not self.path.exists():
            return 0
        text = self.path.read_text(encoding="utf-8").strip()
        if not (text.isascii() and text.isdigit()):
            raise StateError(
                f"Stage file {self.path} is corrupt ({text!r}). "
                f"To reset, run: rm {self.path}"
            )
        return int(text)

    def save(self, value: int) -> None:
        _check_value(value)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Write a sibling temp file and rename it over the target so a
        # concurrent load never observes a partial write.
        fd, tmp = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(f"{value}\n")
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        logger.info("Stage cursor set to %d (%s)", value, self.path)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
        logger.info("Stage cursor cleared (%s)", self.path)

    def __repr__(self) -> str:
        return f"FileCursorStore({str(self.path)!r})"


class MemoryCursorStore:
    def __init__(self, value: Optional[int] = None) -> None:
        self.value = None if value is None else _check_value(value)

    def load(self) -> int:
        return 0 if self.value is None else self.value

    def save(self, value: int) -> None:
        self.value = _check_value(value)

    def clear(self) -> None:
        self.value = None
