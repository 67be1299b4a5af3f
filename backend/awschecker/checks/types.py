"""Value types shared by the check engine."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable


class Outcome(str, Enum):
    """Classification of a completed check chain."""

    success = "Success"
    failure = "Failure"


@dataclass(frozen=True)
class Observation:
    """One completed chain folded into the latency distribution."""

    service: str
    method: str
    outcome: Outcome
    duration: float


@dataclass(frozen=True)
class OperationStep:
    """A single timed operation against a target resource.

    ``action`` receives ``target`` explicitly and signals failure by raising.
    """

    name: str
    target: Any
    action: Callable[[Any], Awaitable[None]]

    async def execute(self) -> None:
        await self.action(self.target)


@dataclass(frozen=True)
class CheckChain:
    """Ordered steps scored as one unit under ``method``."""

    method: str
    steps: tuple[OperationStep, ...]

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError(f"check chain {self.method!r} has no steps")

    @classmethod
    def single(cls, step: OperationStep) -> "CheckChain":
        """Chain of one step, named after the step."""
        return cls(method=step.name, steps=(step,))


@dataclass(frozen=True)
class CheckGroup:
    """Static catalog of chains for one monitored service."""

    service: str
    chains: tuple[CheckChain, ...]

    def checks(self) -> tuple[CheckChain, ...]:
        return self.chains

    @property
    def methods(self) -> tuple[str, ...]:
        return tuple(chain.method for chain in self.chains)
