"""Serial batch loop with per-item failure capture."""

import logging
from collections.abc import Callable

from ..results import BatchCallbacks, BatchReport, ItemResult

logger = logging.getLogger(__name__)

# worker(result, note) - note(text) records an action line for the item
Worker = Callable[[ItemResult, Callable[[str], None]], None]


def run_batch(
    operation: str, druids: list[str], worker: Worker, callbacks: BatchCallbacks | None = None
) -> BatchReport:
    """
    Run worker for each druid in order.

    An exception from the worker marks that druid as failed, is logged,
    and the loop moves on to the next druid.
    """
    cb = callbacks or BatchCallbacks()
    report = BatchReport(operation=operation)
    total = len(druids)

    for idx, druid in enumerate(druids, start=1):
        cb.item_start(druid, idx, total)
        result = ItemResult(druid=druid)

        def note(text: str, result: ItemResult = result) -> None:
            result.actions.append(text)
            cb.action(result.druid, text)

        try:
            worker(result, note)
        except Exception as e:
            result.fail(str(e))
            logger.error(f"{operation} failed for {druid}: {e}")

        report.add(result)
        cb.item_complete(result)

    return report
