"""Repository actions - Deleting, unregistering, exporting and importing objects."""

import logging
from collections.abc import Callable
from pathlib import Path

from ..constants import ASSEMBLY_WF_STEPS, DEFAULT_ERROR_MESSAGE
from ..results import BatchCallbacks, BatchReport, ItemResult
from ..services import Services
from .batch import run_batch
from .workflow import set_workflow_step_to_error

logger = logging.getLogger(__name__)


def delete_from_dor(pid: str, services: Services) -> None:
    """Delete an object from DOR."""
    services.repository.delete(pid)


def unregister(pid: str, services: Services, message: str = DEFAULT_ERROR_MESSAGE) -> bool:
    """
    Unregister a DOR object: set every assembly step to error, then delete it.

    Returns:
        True if both succeeded
    """
    try:
        for step, _status in ASSEMBLY_WF_STEPS:
            set_workflow_step_to_error(pid, step, services, message)
        delete_from_dor(pid, services)
        return True
    except Exception as e:
        logger.error(f"Unregistering {pid} failed: {e}")
        return False


def export_filename(pid: str) -> str:
    """FOXML filename for a druid, e.g. druid_aa000aa0001.xml."""
    return f"{pid.replace(':', '_')}.xml"


def export_objects(
    druids: list[str], output_dir: Path, services: Services, callbacks: BatchCallbacks | None = None
) -> BatchReport:
    """Export each object as FOXML into output_dir."""
    output_dir.mkdir(parents=True, exist_ok=True)

    def worker(result: ItemResult, note: Callable[[str], None]) -> None:
        target = output_dir / export_filename(result.druid)
        target.write_bytes(services.repository.export(result.druid))
        note(f"exported to {target}")

    return run_batch("export", druids, worker, callbacks)


def import_objects(files: list[Path], services: Services, callbacks: BatchCallbacks | None = None) -> BatchReport:
    """Ingest FOXML files; each item in the report is keyed by filename."""
    by_name = {str(f): f for f in files}

    def worker(result: ItemResult, note: Callable[[str], None]) -> None:
        pid = services.repository.ingest(by_name[result.druid].read_bytes())
        note(f"ingested as {pid}")

    return run_batch("import", list(by_name), worker, callbacks)
