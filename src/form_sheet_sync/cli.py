"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys

import click

from form_sheet_sync.activity_log import ActivityLogError
from form_sheet_sync.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    load_configuration,
    write_placeholder_configuration,
)
from form_sheet_sync.form_catalog import CatalogError
from form_sheet_sync.mapping_persistence import MappingStoreError
from form_sheet_sync.sync_orchestration import RecordSyncStatus, SyncError
from form_sheet_sync.sync_orchestration.wiring import SyncRuntime, build_sync_runtime

_OPERATION_ERRORS = (SyncError, CatalogError, MappingStoreError, ActivityLogError)
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

config_option = click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON sync configuration file",
)
form_option = click.option(
    "--form",
    "form_id",
    required=True,
    type=int,
    help="Identifier of the form in the catalog",
)


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="form-sheet-sync")
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Verbosity of diagnostic logging on stderr",
)
def cli(log_level: str) -> None:
    """Mirror form submissions into per-form spreadsheet workbooks."""
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(log_level.upper())


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML sync configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML sync configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="headers")
@config_option
@form_option
def show_headers(config_path: str, form_id: int) -> None:
    """Print the header row the form's current fields produce."""
    runtime = _load_runtime(config_path)
    try:
        headers = runtime.orchestrator.preview_headers(form_id)
    except _OPERATION_ERRORS as exc:
        raise CliError(str(exc)) from exc
    for header in headers:
        click.echo(header)


@cli.command(name="sync-all")
@config_option
def sync_all(config_path: str) -> None:
    """Create a workbook for every form that has no reachable one."""
    runtime = _load_runtime(config_path)
    try:
        outcome = runtime.orchestrator.sync_all_forms()
    except _OPERATION_ERRORS as exc:
        raise CliError(str(exc)) from exc
    for item in outcome.created:
        click.echo(f"created  #{item.form_id} {item.title}: {item.destination_url}")
    for item in outcome.skipped:
        click.echo(f"skipped  #{item.form_id} {item.title}: {item.reason}")
    for item in outcome.errored:
        click.echo(f"error    #{item.form_id} {item.title}: {item.error}", err=True)
    click.echo(
        f"{len(outcome.created)} created, {len(outcome.skipped)} skipped, "
        f"{len(outcome.errored)} failed"
    )
    if outcome.errored:
        raise CliError(f"{len(outcome.errored)} form(s) could not be provisioned.")


@cli.command(name="resync")
@config_option
@form_option
def resync(config_path: str, form_id: int) -> None:
    """Drop the form's mapping and create a fresh workbook."""
    runtime = _load_runtime(config_path)
    try:
        state = runtime.orchestrator.resync(form_id)
    except _OPERATION_ERRORS as exc:
        raise CliError(str(exc)) from exc
    click.echo(state.destination_url)


@cli.command(name="import")
@config_option
@form_option
def import_existing(config_path: str, form_id: int) -> None:
    """Append every stored submission of a mapped form, oldest first."""
    runtime = _load_runtime(config_path)
    try:
        result = runtime.orchestrator.import_existing(form_id)
    except _OPERATION_ERRORS as exc:
        raise CliError(str(exc)) from exc
    click.echo(f"imported {result.imported} of {result.total} submissions")
    for failure in result.errors:
        click.echo(
            f"batch {failure.batch_number} (rows {failure.first_row + 1}-"
            f"{failure.first_row + failure.row_count}) failed: {failure.message}",
            err=True,
        )
    if result.has_failures:
        raise CliError(f"{result.failed} of {result.total} submissions were not imported.")


@cli.command(name="submit")
@config_option
@form_option
@click.option(
    "--record",
    "record_id",
    required=True,
    type=str,
    help="Identifier of the catalog submission to deliver",
)
def submit(config_path: str, form_id: int, record_id: str) -> None:
    """Deliver one catalog submission as if it had just been received."""
    runtime = _load_runtime(config_path)
    try:
        records = runtime.catalog.list_historical(form_id)
        record = next((item for item in records if item.record_id == record_id), None)
        if record is None:
            raise CliError(f"Form {form_id} has no submission with id {record_id}.")
        outcome = runtime.orchestrator.sync_one(form_id, record)
    except _OPERATION_ERRORS as exc:
        raise CliError(str(exc)) from exc
    if outcome.status is RecordSyncStatus.FAILED:
        raise CliError(f"Submission {record_id} was not synced: {outcome.error_message}")
    if outcome.status is RecordSyncStatus.SKIPPED:
        click.echo(f"skipped: form {form_id} has no workbook yet")
        return
    click.echo(f"synced submission {record_id} of form {form_id}")


@cli.command(name="reconcile-headers")
@config_option
@form_option
def reconcile_headers(config_path: str, form_id: int) -> None:
    """Append header labels the form's current fields add."""
    runtime = _load_runtime(config_path)
    try:
        change = runtime.orchestrator.reconcile_headers(form_id)
    except _OPERATION_ERRORS as exc:
        raise CliError(str(exc)) from exc
    if change.is_noop:
        click.echo("headers up to date")
        return
    for header in change.appended:
        click.echo(f"added {header}")


@cli.command(name="log")
@config_option
@click.option("--limit", default=20, show_default=True, type=click.IntRange(min=1))
@click.option("--clear", is_flag=True, default=False, help="Empty the sync log after printing.")
@click.option(
    "--notices",
    is_flag=True,
    default=False,
    help="Print and dismiss pending error notices instead of log entries.",
)
def show_log(config_path: str, limit: int, clear: bool, notices: bool) -> None:
    """Print recent sync log entries, newest first."""
    runtime = _load_runtime(config_path)
    activity_log = runtime.activity_log
    try:
        if notices:
            for notice in activity_log.drain_error_notices():
                click.echo(
                    f"{notice.timestamp.isoformat()} {notice.title} (#{notice.form_id}): "
                    f"{notice.message}"
                )
            return
        for entry in activity_log.recent(limit):
            click.echo(f"{entry.timestamp.isoformat()} {entry.kind.value:<7} {entry.describe()}")
        if clear:
            activity_log.clear()
    except ActivityLogError as exc:
        raise CliError(str(exc)) from exc


def _load_runtime(config_path: str) -> SyncRuntime:
    try:
        return build_sync_runtime(load_configuration(config_path))
    except (ConfigurationError, CatalogError, ValueError) as exc:
        raise CliError(str(exc)) from exc


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
