"""Batch result types and progress callbacks shared by the actions."""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum


class ItemStatus(Enum):
    """Outcome of one object in a batch."""

    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class ItemResult:
    """Result of processing one druid."""

    druid: str
    status: ItemStatus = ItemStatus.COMPLETED
    error: str | None = None
    # Human readable lines describing what was done (or would be, in a dry run)
    actions: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status != ItemStatus.FAILED

    def fail(self, error: str) -> "ItemResult":
        self.status = ItemStatus.FAILED
        self.error = error
        return self

    def skip(self, reason: str) -> "ItemResult":
        self.status = ItemStatus.SKIPPED
        self.error = reason
        return self


@dataclass
class BatchReport:
    """Result of running an operation over a list of druids."""

    operation: str
    results: list[ItemResult] = field(default_factory=list)

    def add(self, result: ItemResult) -> ItemResult:
        self.results.append(result)
        return result

    @property
    def succeeded(self) -> list[ItemResult]:
        return [r for r in self.results if r.status == ItemStatus.COMPLETED]

    @property
    def failed(self) -> list[ItemResult]:
        return [r for r in self.results if r.status == ItemStatus.FAILED]

    @property
    def skipped(self) -> list[ItemResult]:
        return [r for r in self.results if r.status == ItemStatus.SKIPPED]

    @property
    def success(self) -> bool:
        return not self.failed

    @property
    def errors(self) -> list[str]:
        return [f"{r.druid}: {r.error}" for r in self.failed]


@dataclass
class BatchCallbacks:
    """
    Callbacks for batch progress reporting.

    Allows the CLI to display progress without coupling actions to Rich/UI.
    All callbacks are optional - if None, no callback is made.
    """

    on_item_start: Callable[[str, int, int], None] | None = None  # druid, index, total
    on_action: Callable[[str, str], None] | None = None  # druid, description
    on_item_complete: Callable[[ItemResult], None] | None = None

    def item_start(self, druid: str, index: int, total: int) -> None:
        if self.on_item_start:
            self.on_item_start(druid, index, total)

    def action(self, druid: str, description: str) -> None:
        if self.on_action:
            self.on_action(druid, description)

    def item_complete(self, result: ItemResult) -> None:
        if self.on_item_complete:
            self.on_item_complete(result)
