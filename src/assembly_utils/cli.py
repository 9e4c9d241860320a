"""
CLI module - Command line interface for Assembly Utils

Entry point for the `asu` command using Typer. The CLI owns all terminal
input and output; the actions it calls never read or print.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .actions import (
    CleanupAborted,
    CleanupStep,
    ReportWorkflow,
    cleanup,
    clear_stray_workflows,
    completion_report,
    delete_workflows,
    druids_by_source_id,
    export_objects,
    get_workflow_status,
    import_objects,
    is_affirmative,
    parse_steps,
    replace_datastreams,
    reset_workflow_states,
    republish_metadata,
    required_endpoints,
    robot_status,
    start_robots_commands,
    unregister,
    update_datastreams,
    update_rights_metadata,
    workflow_status_report,
)
from .actions.workflow import parse_workflow_steps
from .config import AppConfig, load_config, validate_services
from .druid import staging_path
from .files import druids_from_log, read_file
from .log import setup_logging
from .results import BatchCallbacks, BatchReport, ItemResult, ItemStatus
from .services import ServiceError, Services

console = Console()
app = typer.Typer(
    name="asu",
    help="Assembly Utils - administrative tools for the digital object repository.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    if value:
        console.print(f"asu version {__version__}")
        raise typer.Exit()


# Type aliases for common options
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to config file", exists=True, dir_okay=False),
]
EnvOption = Annotated[
    str | None,
    typer.Option("--env", "-e", help="Environment (development, test, production)"),
]
DruidsArgument = Annotated[list[str] | None, typer.Argument(help="Druids to process")]
DruidsFileOption = Annotated[
    Path | None,
    typer.Option("--druids-file", help="File with one druid per line", exists=True, dir_okay=False),
]
LogOption = Annotated[
    Path | None,
    typer.Option("--log", help="Take druids from a pre-assembly progress log", exists=True, dir_okay=False),
]
FailedOption = Annotated[bool, typer.Option("--failed", help="With --log, take the druids that did not finish")]


def get_config(config_path: Path | None = None, env: str | None = None) -> AppConfig:
    """Load configuration and set up logging."""
    cfg = load_config(config_path, environment=env)
    setup_logging(cfg.logging, console)
    return cfg


def get_services(cfg: AppConfig, required: list[str] | None = None) -> Services:
    """Build service clients, exiting if required endpoints are missing."""
    errors = validate_services(cfg, required)
    if errors:
        for err in errors:
            console.print(f"[red]Error:[/red] {escape(err)}")
        raise typer.Exit(1)
    return Services.from_config(cfg)


def resolve_druids(
    druids: list[str] | None,
    druids_file: Path | None = None,
    log: Path | None = None,
    failed: bool = False,
) -> list[str]:
    """Collect druids from arguments, a druids file and a progress log, in that order."""
    result = list(druids or [])
    if druids_file:
        result.extend(line.strip() for line in read_file(druids_file).splitlines() if line.strip())
    if log:
        result.extend(druids_from_log(log, completed=not failed))
    return result


def require_druids(druids: list[str]) -> None:
    if not druids:
        console.print("[red]Error:[/red] no druids provided")
        raise typer.Exit(1)


def progress_callbacks() -> BatchCallbacks:
    """Callbacks printing batch progress to the console."""

    def on_item_start(druid: str, idx: int, total: int):
        console.print(f"[bold]\\[{idx}/{total}][/bold] {escape(druid)}")

    def on_action(druid: str, description: str):
        console.print(f"  -- {escape(description)}")

    def on_item_complete(result: ItemResult):
        if result.status == ItemStatus.FAILED:
            console.print(f"  [red]✗[/red] {escape(result.druid)}: {escape(result.error or '')}")
        elif result.status == ItemStatus.SKIPPED:
            console.print(f"  [yellow]-[/yellow] {escape(result.error or 'skipped')}")

    return BatchCallbacks(on_item_start=on_item_start, on_action=on_action, on_item_complete=on_item_complete)


def print_summary(report: BatchReport) -> None:
    """Print a batch summary and exit non-zero if anything failed."""
    console.print()
    console.print(
        f"[bold]Complete:[/bold] {report.operation}: {len(report.succeeded)} succeeded, "
        f"{len(report.skipped)} skipped, {len(report.failed)} failed"
    )
    if report.failed:
        console.print("\n[yellow]Errors:[/yellow]")
        for err in report.errors:
            console.print(f"  {escape(err)}")
        raise typer.Exit(1)


@app.callback()
def main(
    version: Annotated[
        bool, typer.Option("--version", "-v", callback=version_callback, is_eager=True, help="Show version")
    ] = False,
):
    """Assembly Utils - administrative tools for the digital object repository."""
    pass


@app.command("staging-path")
def staging_path_cmd(
    druid: Annotated[str, typer.Argument(help="Druid, e.g. druid:aa000aa0001")],
    base_path: Annotated[str, typer.Option("--base", "-b", help="Base path to prepend")] = "",
):
    """
    Show the staging directory tree for a druid.

    [bold]Examples:[/bold]

        asu staging-path aa000aa0001                 # aa/000/aa/0001

        asu staging-path druid:aa000aa0001 -b /tmp   # /tmp/aa/000/aa/0001
    """
    try:
        console.print(staging_path(druid, base_path))
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None


@app.command()
def lookup(
    source_ids: Annotated[list[str], typer.Argument(help="Source ids to look up")],
    config: ConfigOption = None,
    env: EnvOption = None,
):
    """Find druids by source id."""
    services = get_services(get_config(config, env))
    try:
        druids = druids_by_source_id(source_ids, services)
    except ServiceError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None

    if not druids:
        console.print("No druids found")
        return
    for druid in druids:
        console.print(druid)


@app.command("druids-from-log")
def druids_from_log_cmd(
    log: Annotated[Path, typer.Argument(help="Pre-assembly progress log", exists=True, dir_okay=False)],
    failed: FailedOption = False,
):
    """List druids that completed (or, with --failed, did not) in a progress log."""
    for druid in druids_from_log(log, completed=not failed):
        console.print(druid)


@app.command("step-status")
def step_status(
    druid: Annotated[str, typer.Argument(help="Druid")],
    workflow: Annotated[str, typer.Argument(help="Workflow name, e.g. assemblyWF")],
    step: Annotated[str, typer.Argument(help="Step name, e.g. jp2-create")],
    config: ConfigOption = None,
    env: EnvOption = None,
):
    """Show the status of one workflow step."""
    services = get_services(get_config(config, env))
    console.print(get_workflow_status(druid, workflow, step, services))


@app.command("workflow-status")
def workflow_status(
    druids: DruidsArgument = None,
    workflows: Annotated[
        list[ReportWorkflow] | None, typer.Option("--workflow", "-w", help="Workflows to include (default: assembly)")
    ] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Write the report to a CSV file")] = None,
    druids_file: DruidsFileOption = None,
    log: LogOption = None,
    failed: FailedOption = False,
    config: ConfigOption = None,
    env: EnvOption = None,
):
    """
    Report assembly and/or accession step statuses for druids.

    [bold]Examples:[/bold]

        asu workflow-status druid:aa000aa0001 druid:aa000aa0002 -w assembly -w accession

        asu workflow-status --log progress.yaml -o report.csv
    """
    services = get_services(get_config(config, env))
    all_druids = resolve_druids(druids, druids_file, log, failed)

    console.print("Generating report")
    workflow_status_report(
        all_druids,
        services,
        workflows=list(workflows or [ReportWorkflow.ASSEMBLY]),
        filename=output,
        on_row=lambda row: console.print(escape(",".join(row))),
    )
    if output:
        console.print(f"Report generated in {output}")


@app.command("reset-workflows")
def reset_workflows(
    druids: DruidsArgument = None,
    steps: Annotated[
        list[str] | None, typer.Option("--step", "-s", help="workflow:step to reset, e.g. assemblyWF:jp2-create")
    ] = None,
    status: Annotated[str, typer.Option("--status", help="Status to set")] = "waiting",
    druids_file: DruidsFileOption = None,
    log: LogOption = None,
    failed: FailedOption = False,
    config: ConfigOption = None,
    env: EnvOption = None,
):
    """
    Reset workflow steps for druids (to waiting by default).

    [bold]Examples:[/bold]

        asu reset-workflows druid:aa111aa1111 -s assemblyWF:checksum-compute -s accessionWF:content-metadata
    """
    try:
        step_map = parse_workflow_steps(steps or [])
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None
    if not step_map:
        console.print("[red]Error:[/red] no steps specified (use --step workflow:step)")
        raise typer.Exit(1)

    services = get_services(get_config(config, env))
    all_druids = resolve_druids(druids, druids_file, log, failed)
    require_druids(all_druids)

    report = reset_workflow_states(all_druids, step_map, services, status, progress_callbacks())
    print_summary(report)


@app.command("clear-stray-workflows")
def clear_stray(
    config: ConfigOption = None,
    env: EnvOption = None,
):
    """Set waiting assembly steps to error for objects left behind by integration tests."""
    services = get_services(get_config(config, env))
    try:
        report = clear_stray_workflows(services, callbacks=progress_callbacks())
    except ServiceError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None
    print_summary(report)


@app.command("delete-workflows")
def delete_workflows_cmd(
    druids: DruidsArgument = None,
    druids_file: DruidsFileOption = None,
    log: LogOption = None,
    failed: FailedOption = False,
    config: ConfigOption = None,
    env: EnvOption = None,
):
    """Delete all workflow records for druids."""
    services = get_services(get_config(config, env))
    all_druids = resolve_druids(druids, druids_file, log, failed)
    require_druids(all_druids)
    print_summary(delete_workflows(all_druids, services, progress_callbacks()))


@app.command("cleanup")
def cleanup_cmd(
    druids: DruidsArgument = None,
    steps: Annotated[
        list[str] | None,
        typer.Option("--step", "-s", help=f"Step to run: {', '.join(s.value for s in CleanupStep)}"),
    ] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Show what would be done without making changes")] = False,
    druids_file: DruidsFileOption = None,
    log: LogOption = None,
    failed: FailedOption = False,
    config: ConfigOption = None,
    env: EnvOption = None,
):
    """
    Clean up objects and their files.  [bold red]WARNING: VERY DESTRUCTIVE.[/bold red]

    Asks for confirmation of the environment and of every step.

    [bold]Examples:[/bold]

        asu cleanup druid:aa000aa0001 -s stacks -s dor -s stage -s symlinks

        asu cleanup --log progress.yaml --failed -s stage --dry-run
    """
    cfg = get_config(config, env)
    selected = parse_steps(steps or [])
    services = get_services(cfg, required_endpoints(selected, dry_run))
    all_druids = resolve_druids(druids, druids_file, log, failed)

    def confirm(prompt: str) -> bool:
        console.print(prompt)
        return is_affirmative(console.input("> "))

    try:
        report = cleanup(all_druids, selected, services, cfg, confirm, dry_run, progress_callbacks())
    except CleanupAborted as e:
        console.print(f"[red]Cleanup aborted:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None

    print_summary(report)


@app.command("unregister")
def unregister_cmd(
    druids: DruidsArgument = None,
    druids_file: DruidsFileOption = None,
    config: ConfigOption = None,
    env: EnvOption = None,
):
    """Set all assembly steps to error and delete the objects from DOR."""
    services = get_services(get_config(config, env))
    all_druids = resolve_druids(druids, druids_file)
    require_druids(all_druids)

    report = BatchReport(operation="unregister")
    for druid in all_druids:
        result = report.add(ItemResult(druid=druid))
        if unregister(druid, services):
            console.print(f"  [green]✓[/green] {escape(druid)}")
        else:
            result.fail("unregister failed")
            console.print(f"  [red]✗[/red] {escape(druid)}")
    print_summary(report)


@app.command("replace-datastream")
def replace_datastream(
    datastream: Annotated[str, typer.Argument(help="Datastream name, e.g. rightsMetadata")],
    content_file: Annotated[Path, typer.Argument(help="File holding the new content", exists=True, dir_okay=False)],
    druids: DruidsArgument = None,
    druids_file: DruidsFileOption = None,
    config: ConfigOption = None,
    env: EnvOption = None,
):
    """Replace a datastream's entire content for a list of druids."""
    services = get_services(get_config(config, env))
    all_druids = resolve_druids(druids, druids_file)
    require_druids(all_druids)
    report = replace_datastreams(all_druids, datastream, read_file(content_file), services, progress_callbacks())
    print_summary(report)


@app.command("update-datastream")
def update_datastream(
    datastream: Annotated[str, typer.Argument(help="Datastream name")],
    find: Annotated[str, typer.Argument(help="Text to find")],
    replace: Annotated[str, typer.Argument(help="Replacement text")],
    druids: DruidsArgument = None,
    druids_file: DruidsFileOption = None,
    config: ConfigOption = None,
    env: EnvOption = None,
):
    """Search and replace text in a datastream for a list of druids."""
    services = get_services(get_config(config, env))
    all_druids = resolve_druids(druids, druids_file)
    require_druids(all_druids)
    print_summary(update_datastreams(all_druids, datastream, find, replace, services, progress_callbacks()))


@app.command("update-rights")
def update_rights(
    apo: Annotated[str, typer.Argument(help="APO druid to take defaultObjectRights from")],
    druids: DruidsArgument = None,
    druids_file: DruidsFileOption = None,
    config: ConfigOption = None,
    env: EnvOption = None,
):
    """Replace rightsMetadata with the default object rights of an APO."""
    services = get_services(get_config(config, env))
    all_druids = resolve_druids(druids, druids_file)
    require_druids(all_druids)
    try:
        report = update_rights_metadata(all_druids, apo, services, progress_callbacks())
    except ServiceError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None
    print_summary(report)


@app.command()
def republish(
    druids: DruidsArgument = None,
    druids_file: DruidsFileOption = None,
    config: ConfigOption = None,
    env: EnvOption = None,
):
    """Re-publish public metadata for druids."""
    services = get_services(get_config(config, env))
    all_druids = resolve_druids(druids, druids_file)
    require_druids(all_druids)
    print_summary(republish_metadata(all_druids, services, progress_callbacks()))


@app.command("export")
def export_cmd(
    druids: DruidsArgument = None,
    output: Annotated[Path, typer.Option("--output", "-o", help="Directory for FOXML files", file_okay=False)] = Path(
        "."
    ),
    druids_file: DruidsFileOption = None,
    config: ConfigOption = None,
    env: EnvOption = None,
):
    """Export objects as FOXML."""
    services = get_services(get_config(config, env))
    all_druids = resolve_druids(druids, druids_file)
    require_druids(all_druids)
    print_summary(export_objects(all_druids, output, services, progress_callbacks()))


@app.command("import")
def import_cmd(
    files: Annotated[list[Path], typer.Argument(help="FOXML files to ingest", exists=True, dir_okay=False)],
    config: ConfigOption = None,
    env: EnvOption = None,
):
    """Ingest objects from FOXML files."""
    services = get_services(get_config(config, env))
    print_summary(import_objects(files, services, progress_callbacks()))


@app.command("completion-report")
def completion_report_cmd(
    query: Annotated[str, typer.Argument(help="Search query selecting the objects")],
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Write the report to a CSV file")] = None,
    check_dor: Annotated[
        bool, typer.Option("--check-dor", help="Check workflow status in DOR instead of trusting the index")
    ] = False,
    config: ConfigOption = None,
    env: EnvOption = None,
):
    """
    Completion report for objects matching a search query.

    [bold]Examples:[/bold]

        asu completion-report 'is_governed_by_s:"info:fedora/druid:cc222cc2222"' -o report.csv
    """
    services = get_services(get_config(config, env))
    try:
        rows = completion_report(query, services, filename=output, check_status_in_dor=check_dor)
    except ServiceError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None

    table = Table(title=f"Completion Report ({len(rows) - 1} objects)")
    for column in rows[0]:
        table.add_column(column)
    for row in rows[1:]:
        table.add_row(*(escape(str(value)) for value in row))
    console.print(table)

    if output:
        console.print(f"Report generated in {output}")


# =============================================================================
# Robots Command Group
# =============================================================================

robots_app = typer.Typer(name="robots", help="Assembly and accession robot commands")
app.add_typer(robots_app)


@robots_app.command("status")
def robots_status():
    """Show whether the robots are running on this server."""
    labels = {"accessionWF": "Accession", "assemblyWF": "Assembly"}
    for workflow, running in robot_status().items():
        state = "[green]running[/green]" if running else "[red]NOT running[/red]"
        console.print(f"{labels.get(workflow, workflow)} robots are {state}")


@robots_app.command("start")
def robots_start(
    config: ConfigOption = None,
    env: EnvOption = None,
):
    """Show the commands that start the robots (does not run them)."""
    cfg = get_config(config, env)
    console.print("To start robots:")
    for command in start_robots_commands(cfg):
        console.print(escape(command), soft_wrap=True)


def main_cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main_cli()
