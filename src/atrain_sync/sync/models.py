"""Domain models for one sync run."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


@dataclass(frozen=True, slots=True)
class InputItem:
    """One discovered audio file, identified by its stem."""

    path: Path

    @property
    def stem(self) -> str:
        return self.path.stem


class ItemOutcome(str, Enum):
    """What happened to one selected input during a run."""

    MATERIALIZED = "materialized"
    ENGINE_FAILED = "engine_failed"
    NOT_LOCATED = "not_located"
    INCOMPLETE = "incomplete"
    COPY_FAILED = "copy_failed"
    DUPLICATE_STEM = "duplicate_stem"


@dataclass(slots=True)
class ItemResult:
    """Per-item outcome with a human-readable reason for anything but success."""

    item: InputItem
    outcome: ItemOutcome
    detail: str | None = None
    destination: Path | None = None


@dataclass(slots=True)
class SyncSummary:
    """Result of one sync run."""

    discovered: int
    already_done: int
    selected: int
    results: list[ItemResult] = field(default_factory=list)

    def count(self, outcome: ItemOutcome) -> int:
        return sum(1 for result in self.results if result.outcome is outcome)

    def counts(self) -> dict[ItemOutcome, int]:
        tally = Counter(result.outcome for result in self.results)
        return {outcome: tally.get(outcome, 0) for outcome in ItemOutcome}

    @property
    def materialized(self) -> list[Path]:
        return [
            result.destination
            for result in self.results
            if result.outcome is ItemOutcome.MATERIALIZED and result.destination is not None
        ]
