"""
CLI interface for tablesweep.

Truncates and/or drops the tables of a BigQuery dataset. Dry run is the
default; pass --execute to actually run the statements.
"""

import json

import click

from tablesweep import __version__
from tablesweep.errors import InvalidOperation, StatementExecutionFailure
from tablesweep.models import NoTargetsReport
from tablesweep.operations import VALID_OPERATIONS, validate_operation


@click.group()
@click.version_option(version=__version__, prog_name="tablesweep")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Override configured log level",
)
@click.pass_context
def main(ctx, log_level):
    """
    tablesweep - Truncate or drop BigQuery tables in bulk.
    """
    from tablesweep.config import TableSweepConfig, load_config
    from tablesweep.utils import setup_logging

    ctx.ensure_object(dict)
    try:
        config = load_config()
    except Exception as e:
        # Commands that need project/dataset can still take them as arguments
        ctx.obj["config_error"] = str(e)
        config = TableSweepConfig()
    ctx.obj["config"] = config

    setup_logging(
        log_file=config.get_log_file_path(),
        log_level=log_level or config.log_level,
        log_format=config.log_format,
    )


def _resolve_location(ctx, project_id, dataset_id):
    """Fill project/dataset from config when not given on the command line."""
    config = ctx.obj["config"]
    project_id = project_id or config.project
    dataset_id = dataset_id or config.dataset

    if not project_id or not dataset_id:
        hint = ctx.obj.get("config_error")
        msg = "PROJECT_ID and DATASET_ID are required (pass them or set project/dataset in config.yaml)"
        if hint:
            msg += f"\nConfig not loaded: {hint}"
        raise click.UsageError(msg)

    return project_id, dataset_id


def _echo_no_targets(report: NoTargetsReport) -> None:
    for line in report.lines():
        click.echo(line)


@main.command("run")
@click.argument("project_id", required=False)
@click.argument("dataset_id", required=False)
@click.option("--operation", "-o", required=True,
              help=f"One of: {', '.join(VALID_OPERATIONS)}")
@click.option("--table", "-t", "tables", multiple=True,
              help="Only act on this table (repeatable)")
@click.option("--all-tables", is_flag=True, help="Act on every table, ignoring --table")
@click.option("--dry-run/--execute", default=True, show_default=True,
              help="Preview statements or run them")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation for --execute")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@click.pass_context
def run(ctx, project_id, dataset_id, operation, tables, all_tables, dry_run, yes, as_json):
    """
    Truncate and/or drop tables in a dataset.

    Examples:

        tablesweep run my-project scratch -o DROP -t tmp_a -t tmp_b

        tablesweep run my-project scratch -o TRUNCATE --all-tables --execute
    """
    from tablesweep.cleanup import run_cleanup

    try:
        validate_operation(operation)
    except InvalidOperation as e:
        raise click.UsageError(str(e))

    project_id, dataset_id = _resolve_location(ctx, project_id, dataset_id)
    filter_specific_tables = bool(tables) and not all_tables

    if dry_run:
        click.echo("=== DRY RUN MODE === (no statements executed)", err=True)
    elif not yes:
        scope = ", ".join(tables) if filter_specific_tables else "ALL tables"
        click.confirm(
            f"{operation} {scope} in {project_id}.{dataset_id}? This deletes data",
            abort=True,
        )

    try:
        report = run_cleanup(
            project_id,
            dataset_id,
            filter_specific_tables,
            list(tables),
            operation,
            dry_run,
            location=ctx.obj["config"].location,
        )
    except StatementExecutionFailure as e:
        # Statements that ran before the failure are not rolled back
        done = e.report.lines if e.report is not None else []
        if as_json:
            click.echo(json.dumps({
                "status": "failed",
                "operation": operation,
                "lines": list(done),
                "error": str(e),
            }, indent=2, ensure_ascii=False))
        else:
            for line in done:
                click.echo(line)
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
        return

    if isinstance(report, NoTargetsReport):
        _echo_no_targets(report)
        return

    for line in report:
        click.echo(line)


@main.command("tables")
@click.argument("project_id", required=False)
@click.argument("dataset_id", required=False)
@click.option("--table", "-t", "tables", multiple=True,
              help="Only list this table if present (repeatable)")
@click.pass_context
def list_tables(ctx, project_id, dataset_id, tables):
    """List the tables a run would act on."""
    from google.cloud import bigquery

    from tablesweep.catalog import BigQueryCatalog, resolve_targets

    project_id, dataset_id = _resolve_location(ctx, project_id, dataset_id)
    client = bigquery.Client(project=project_id)
    catalog = BigQueryCatalog(client, location=ctx.obj["config"].location)

    targets = resolve_targets(catalog, project_id, dataset_id, bool(tables), list(tables))
    if not targets:
        _echo_no_targets(NoTargetsReport(
            dataset_id=dataset_id,
            filter_specific_tables=bool(tables),
            table_names=tuple(tables),
        ))
        return

    for target in targets:
        click.echo(target.full_name)
    click.echo(f"\n({len(targets)} tables)")


@main.command("init")
@click.option("--force", is_flag=True, help="Overwrite existing configuration")
def init(force: bool):
    """Initialize tablesweep configuration."""
    import yaml

    from tablesweep.config import get_tablesweep_home

    home = get_tablesweep_home()
    if not home.exists():
        home.mkdir(parents=True)

    cfg_path = home / "config.yaml"
    if cfg_path.exists() and not force:
        click.echo(f"Config already exists at {cfg_path}. Use --force to overwrite.", err=True)
        raise SystemExit(1)

    default_cfg = {
        "project": "my-gcp-project",
        "dataset": "scratch",
        "location": None,
        "log_level": "INFO",
        "log_format": "pretty",
        "log_file": None,
        "env_file": str(home / ".env"),
    }
    cfg_path.write_text(yaml.safe_dump(default_cfg, sort_keys=False))

    env_path = home / ".env"
    if not env_path.exists():
        env_path.write_text("# GOOGLE_APPLICATION_CREDENTIALS=...\n")

    click.echo(f"Initialized tablesweep config at {cfg_path}")


if __name__ == "__main__":
    main()
