from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional, Protocol, Tuple

from .outcome import AdvancePolicy, Outcome, Readiness, StageContext

StageAction = Callable[[StageContext], Outcome]
ReadinessCheck = Callable[[StageContext], Readiness]


class Stage(Protocol):
    """A single provisioning stage; safe to re-run after a failure."""

    name: str
    advance_policy: AdvancePolicy

    def run(self, ctx: StageContext) -> Outcome:
        ...


@dataclass(frozen=True)
class StageDescriptor:
    index: int
    name: str
    action: StageAction
    advance_policy: AdvancePolicy
    readiness: Optional[ReadinessCheck] = None

    @classmethod
    def from_stage(cls, index: int, stage: Stage) -> "StageDescriptor":
        return cls(
            index=index,
            name=stage.name,
            action=stage.run,
            advance_policy=stage.advance_policy,
            readiness=getattr(stage, "check_ready", None),
        )


class StageRegistry:
    """Fixed, ordered catalog of stages with dense indices 0..N-1."""

    def __init__(self, descriptors: Iterable[StageDescriptor]) -> None:
        items: Tuple[StageDescriptor, ...] = tuple(descriptors)
        if not items:
            raise ValueError("Stage registry must not be empty")
        for expected, d in enumerate(items):
            if d.index != expected:
                raise ValueError(f"Stage indices must be dense and ordered: expected {expected}, got {d.index}")
        self._items = items

    @classmethod
    def from_stages(cls, stages: Iterable[Stage]) -> "StageRegistry":
        return cls(StageDescriptor.from_stage(i, s) for i, s in enumerate(stages))

    def describe(self, index: int) -> StageDescriptor:
        if not 0 <= index < len(self._items):
            raise IndexError(f"No stage {index} (valid: 0-{self.last_index})")
        return self._items[index]

    @property
    def last_index(self) -> int:
        return len(self._items) - 1

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[StageDescriptor]:
        return iter(self._items)
