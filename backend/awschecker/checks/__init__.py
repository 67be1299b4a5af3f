"""Check engine: catalogs, sequencing and periodic scheduling."""

from awschecker.checks.types import (
    CheckChain,
    CheckGroup,
    Observation,
    OperationStep,
    Outcome,
)

__all__ = ["CheckChain", "CheckGroup", "Observation", "OperationStep", "Outcome"]
