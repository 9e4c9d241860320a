"""
Workflow actions - Step status lookups, reports, resets and error marking.

The assembly steps are walked in the fixed order of ASSEMBLY_WF_STEPS.
"""

import csv
import logging
from collections.abc import Callable
from enum import Enum
from pathlib import Path

from ..constants import (
    ACCESSION_REPORT_STEPS,
    ACCESSION_WF,
    ASSEMBLY_WF,
    ASSEMBLY_WF_STEPS,
    DEFAULT_ERROR_MESSAGE,
    NOT_FOUND,
)
from ..results import BatchCallbacks, BatchReport, ItemResult
from ..services import Services
from .batch import run_batch

logger = logging.getLogger(__name__)


class ReportWorkflow(str, Enum):
    """Workflows that can be included in the status report."""

    ASSEMBLY = "assembly"
    ACCESSION = "accession"


def assembly_steps() -> list[str]:
    return [step for step, _status in ASSEMBLY_WF_STEPS]


def get_workflow_status(druid: str, workflow: str, step: str, services: Services) -> str:
    """
    Get the status of a step, or NOT FOUND if it cannot be looked up.

    Example:
        get_workflow_status("druid:aa000aa0001", "assemblyWF", "jp2-create", services) -> "completed"
    """
    try:
        return services.workflow.get_workflow_status(services.repository_name, druid, workflow, step)
    except Exception as e:
        logger.debug(f"{workflow}:{step} lookup failed for {druid}: {e}")
        return NOT_FOUND


def report_header(workflows: list[ReportWorkflow]) -> list[str]:
    header = ["druid"]
    if ReportWorkflow.ASSEMBLY in workflows:
        header.extend(assembly_steps())
    if ReportWorkflow.ACCESSION in workflows:
        header.extend(ACCESSION_REPORT_STEPS)
    return header


def workflow_status_report(
    druids: list[str],
    services: Services,
    workflows: list[ReportWorkflow] | None = None,
    filename: Path | None = None,
    on_row: Callable[[list[str]], None] | None = None,
) -> list[list[str]]:
    """
    Build a status report of assembly and/or accession steps for druids.

    Args:
        druids: Druids to report on
        services: Service clients
        workflows: Workflows to include (default: assembly only)
        filename: Optional CSV file to write
        on_row: Called with the header and then each row as it is produced

    Returns:
        Header row followed by one row per druid
    """
    workflows = workflows or [ReportWorkflow.ASSEMBLY]

    header = report_header(workflows)
    rows = [header]
    if on_row:
        on_row(header)

    for druid in druids:
        row = [druid]
        if ReportWorkflow.ASSEMBLY in workflows:
            row.extend(get_workflow_status(druid, ASSEMBLY_WF, step, services) for step in assembly_steps())
        if ReportWorkflow.ACCESSION in workflows:
            row.extend(get_workflow_status(druid, ACCESSION_WF, step, services) for step in ACCESSION_REPORT_STEPS)
        rows.append(row)
        if on_row:
            on_row(row)

    if filename:
        write_csv(filename, rows)
        logger.info(f"Report generated in {filename}")

    return rows


def write_csv(filename: Path, rows: list[list]) -> None:
    with open(filename, "w", newline="") as f:
        csv.writer(f).writerows(rows)


def set_workflow_step_to_error(
    pid: str, step: str, services: Services, message: str = DEFAULT_ERROR_MESSAGE
) -> None:
    """
    Set an assembly workflow step to error.

    Raises:
        ServiceError: If the workflow service rejects the update
    """
    services.workflow.update_workflow_error_status(services.repository_name, pid, ASSEMBLY_WF, step, message)


def clear_stray_workflows(
    services: Services, message: str = DEFAULT_ERROR_MESSAGE, callbacks: BatchCallbacks | None = None
) -> BatchReport:
    """
    Push stray assembly objects to error.

    For every assembly step, finds objects where start-assembly is completed
    but that step is still waiting, and sets the waiting step to error.
    """
    repo = services.repository_name
    steps = assembly_steps()
    completed = steps[0]

    stray: list[tuple[str, str]] = []
    for waiting in steps:
        for druid in services.workflow.get_objects_for_workstep(completed, waiting, repo, ASSEMBLY_WF):
            stray.append((druid, waiting))

    # run_batch calls the worker once per druid, in order
    waiting_steps = iter(waiting for _druid, waiting in stray)

    def worker(result: ItemResult, note: Callable[[str], None]) -> None:
        waiting = next(waiting_steps)
        services.workflow.update_workflow_error_status(repo, result.druid, ASSEMBLY_WF, waiting, message)
        note(f"updated {ASSEMBLY_WF}:{waiting} to error")

    return run_batch("clear-stray-workflows", [druid for druid, _waiting in stray], worker, callbacks)


def reset_workflow_states(
    druids: list[str],
    steps: dict[str, list[str]],
    services: Services,
    status: str = "waiting",
    callbacks: BatchCallbacks | None = None,
) -> BatchReport:
    """
    Reset workflow steps for a list of druids.

    Args:
        druids: Druids to reset
        steps: Workflow name to step names, e.g. {"assemblyWF": ["checksum-compute"]}
        services: Service clients
        status: Status to set (default: waiting)

    Example:
        reset_workflow_states(
            ["druid:aa111aa1111"],
            {"assemblyWF": ["checksum-compute"], "accessionWF": ["content-metadata"]},
            services,
        )
    """

    def worker(result: ItemResult, note: Callable[[str], None]) -> None:
        for workflow, workflow_steps in steps.items():
            for step in workflow_steps:
                note(f"Updating {workflow}:{step} to {status}")
                services.workflow.update_workflow_status(
                    services.repository_name, result.druid, workflow, step, status
                )

    return run_batch("reset-workflows", druids, worker, callbacks)


def delete_workflows(druids: list[str], services: Services, callbacks: BatchCallbacks | None = None) -> BatchReport:
    """Delete all workflow records for each druid."""

    def worker(result: ItemResult, note: Callable[[str], None]) -> None:
        deleted = services.workflow.delete_all_workflows(services.repository_name, result.druid)
        if not deleted:
            result.skip("no workflows found")
            return
        note(f"deleted workflows {', '.join(deleted)}")

    return run_batch("delete-workflows", druids, worker, callbacks)


def parse_workflow_steps(names: list[str]) -> dict[str, list[str]]:
    """
    Parse "workflow:step" strings into the mapping used by reset_workflow_states.

    Example:
        parse_workflow_steps(["assemblyWF:jp2-create", "assemblyWF:exif-collect"])
        -> {"assemblyWF": ["jp2-create", "exif-collect"]}
    """
    steps: dict[str, list[str]] = {}
    for name in names:
        workflow, sep, step = name.partition(":")
        if not sep or not workflow or not step:
            raise ValueError(f"Expected workflow:step, got {name!r}")
        steps.setdefault(workflow, [])
        if step not in steps[workflow]:
            steps[workflow].append(step)
    return steps
