"""
Cleanup actions - Destructive removal of objects and their files.

WARNING: VERY DESTRUCTIVE. Nothing here can be undone, and no step is
rolled back when a later step for the same object fails.

Confirmation is not read here: cleanup() asks a caller-supplied
`confirm(prompt) -> bool` for each prompt, so the terminal stays in the CLI.
"""

import logging
import shutil
from collections.abc import Callable
from enum import Enum

from ..config import AppConfig
from ..druid import druid_path
from ..results import BatchCallbacks, BatchReport, ItemResult
from ..services import RemoteShell, ServiceError, Services
from .batch import run_batch
from .repository import unregister

logger = logging.getLogger(__name__)


class CleanupStep(str, Enum):
    """Destructive steps; declaration order is execution order."""

    DOR = "dor"
    WORKFLOWS = "workflows"
    INDEX = "index"
    SYMLINKS = "symlinks"
    STAGE = "stage"
    STACKS = "stacks"


class CleanupAborted(Exception):
    """Raised when cleanup stops before touching any object."""

    pass


def step_description(step: CleanupStep, config: AppConfig) -> str:
    descriptions = {
        CleanupStep.STACKS: "This will remove all files from the stacks that were shelved for the objects",
        CleanupStep.DOR: "This will delete objects from Fedora",
        CleanupStep.STAGE: f"This will delete the staged content in {config.paths.assembly_workspace}",
        CleanupStep.SYMLINKS: f"This will remove the symlink from {config.paths.dor_workspace}",
        CleanupStep.WORKFLOWS: "This will delete all workflow records for the objects",
        CleanupStep.INDEX: "This will remove the objects from the search index",
    }
    return descriptions[step]


# Service endpoints each step talks to; the rest only touch files
STEP_ENDPOINTS = {
    CleanupStep.DOR: ("workflow_url", "fedora_url"),
    CleanupStep.WORKFLOWS: ("workflow_url",),
    CleanupStep.INDEX: ("solr_url",),
}


def required_endpoints(steps: list[CleanupStep], dry_run: bool = False) -> list[str]:
    """Service endpoints the selected steps need. A dry run needs none."""
    if dry_run:
        return []
    needed: list[str] = []
    for step in steps:
        for endpoint in STEP_ENDPOINTS.get(step, ()):
            if endpoint not in needed:
                needed.append(endpoint)
    return needed


def parse_steps(names: list[str]) -> list[CleanupStep]:
    """
    Convert step names to CleanupSteps, in execution order.

    Unknown names are dropped with a warning.
    """
    selected = set()
    for name in names:
        try:
            selected.add(CleanupStep(name.strip().lower()))
        except ValueError:
            logger.warning(f"Ignoring unknown cleanup step: {name}")
    return [step for step in CleanupStep if step in selected]


def is_affirmative(answer: str) -> bool:
    """True only for an explicit 'y' or 'yes'."""
    return answer.strip().lower() in ("y", "yes")


def confirmation_prompts(steps: list[CleanupStep], config: AppConfig) -> list[str]:
    """Prompts the operator must answer affirmatively before cleanup runs."""
    stop = "Any response other than 'y' or 'yes' will stop the cleanup now."
    prompts = [f"Run on '{config.environment}'? {stop}"]
    if config.is_production:
        prompts.append("Are you really sure you want to run on production?  CLEANUP IS NOT REVERSIBLE")
    for step in steps:
        prompts.append(f"Run step '{step.value}'?  {step_description(step, config)}.  {stop}")
    return prompts


def cleanup_object(
    pid: str,
    steps: list[CleanupStep],
    services: Services,
    config: AppConfig,
    shell: RemoteShell | None = None,
    dry_run: bool = False,
    note: Callable[[str], None] | None = None,
) -> ItemResult:
    """
    Clean up a single object.

    Every selected step is attempted even when an earlier one fails. Failures
    are recorded in the returned result rather than raised.

    Example:
        cleanup_object("druid:aa000aa0001", [CleanupStep.DOR, CleanupStep.STAGE], services, config)
    """
    result = ItemResult(druid=pid)

    def record(text: str) -> None:
        result.actions.append(text)
        if note:
            note(text)

    errors = []
    for step in CleanupStep:
        if step not in steps:
            continue
        try:
            _cleanup_step(step, pid, record, services, config, shell, dry_run)
        except Exception as e:
            errors.append(f"{step.value}: {e}")
            logger.error(f"cleaning up {step.value} failed for {pid} with {e}")

    if errors:
        result.fail("; ".join(errors))
    return result


def _cleanup_step(
    step: CleanupStep,
    pid: str,
    record: Callable[[str], None],
    services: Services,
    config: AppConfig,
    shell: RemoteShell | None,
    dry_run: bool,
) -> None:
    if step == CleanupStep.DOR:
        record(f"deleting {pid} from Fedora {config.environment}")
        if not dry_run and not unregister(pid, services):
            raise ServiceError(f"could not unregister {pid}")

    elif step == CleanupStep.WORKFLOWS:
        record(f"deleting workflows for {pid}")
        if not dry_run:
            services.workflow.delete_all_workflows(services.repository_name, pid)

    elif step == CleanupStep.INDEX:
        record(f"deleting {pid} from the search index")
        if not dry_run:
            services.search.delete(pid)

    elif step == CleanupStep.SYMLINKS:
        path_to_symlink = druid_path(pid, config.paths.dor_workspace)
        record(f"deleting symlink {path_to_symlink}")
        if not dry_run and (path_to_symlink.is_symlink() or path_to_symlink.exists()):
            path_to_symlink.unlink()

    elif step == CleanupStep.STAGE:
        path_to_content = druid_path(pid, config.paths.assembly_workspace)
        record(f"deleting folder {path_to_content}")
        if not dry_run and path_to_content.exists():
            shutil.rmtree(path_to_content)

    elif step == CleanupStep.STACKS:
        path_to_content = druid_path(pid, config.stacks.root)
        record(f"removing files from the stacks on {config.stacks_host} at {path_to_content}")
        if not dry_run:
            if shell is None:
                raise ServiceError(f"no stacks server for environment '{config.environment}'")
            shell.remove_tree(path_to_content)


def cleanup(
    druids: list[str],
    steps: list[CleanupStep | str],
    services: Services,
    config: AppConfig,
    confirm: Callable[[str], bool],
    dry_run: bool = False,
    callbacks: BatchCallbacks | None = None,
) -> BatchReport:
    """
    Clean up a list of objects and their files.

    Args:
        druids: Druids to clean up
        steps: Steps to run (CleanupStep or names); unknown names are ignored
        services: Service clients
        config: App config (environment and workspace locations)
        confirm: Asked each confirmation prompt; any False aborts
        dry_run: Report what would be done without doing it
        callbacks: Optional progress callbacks

    Returns:
        BatchReport with one result per druid

    Raises:
        CleanupAborted: No valid steps, no druids, no stacks server for the
            stacks step, or a prompt was declined
    """
    selected = parse_steps([s.value if isinstance(s, CleanupStep) else s for s in steps])
    if not selected:
        raise CleanupAborted("no valid steps specified for cleanup")
    if not druids:
        raise CleanupAborted("no druids provided")
    if CleanupStep.STACKS in selected and not dry_run and not services.stacks_host:
        raise CleanupAborted(f"no stacks server for environment '{config.environment}'")

    if dry_run:
        logger.warning("THIS IS A DRY RUN")

    for prompt in confirmation_prompts(selected, config):
        if not confirm(prompt):
            raise CleanupAborted("Exiting")

    shell = None
    if CleanupStep.STACKS in selected and not dry_run:
        shell = services.remote_shell()

    def worker(result: ItemResult, note: Callable[[str], None]) -> None:
        outcome = cleanup_object(result.druid, selected, services, config, shell, dry_run, note)
        result.status = outcome.status
        result.error = outcome.error

    try:
        report = run_batch("cleanup", druids, worker, callbacks)
    finally:
        if shell is not None:
            shell.close()

    if CleanupStep.INDEX in selected and not dry_run:
        try:
            services.search.commit()
        except ServiceError as e:
            logger.error(f"Search index commit failed: {e}")

    return report
