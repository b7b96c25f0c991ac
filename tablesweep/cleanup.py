"""
Cleanup orchestration.

Runs the four stages in order for one CleanupRequest:

1. validate the operation mode (before any warehouse access)
2. resolve target tables from the catalog
3. build the statement pair for each table
4. report (dry run) or execute and report (live), table by table

Zero targets short-circuits after step 2 with a NoTargetsReport. In live mode
the first failing statement aborts the run; statements already executed are
not rolled back.
"""

from __future__ import annotations

import logging
from typing import Sequence

from tablesweep.catalog import BigQueryCatalog, Catalog, resolve_targets
from tablesweep.errors import StatementExecutionFailure
from tablesweep.executor import BigQueryExecutor, StatementExecutor
from tablesweep.models import (
    CleanupRequest,
    ExecutionReport,
    NoTargetsReport,
    Statement,
)
from tablesweep.operations import validate_operation
from tablesweep.statements import build_statements, render_statement

logger = logging.getLogger(__name__)

DRY_RUN_PREFIX = "[DRY RUN] Would execute: "
EXECUTED_PREFIX = "✓ Executed: "


def _apply(
    statement: Statement,
    report: ExecutionReport,
    executor: StatementExecutor,
) -> ExecutionReport:
    """Preview or run one statement and record the outcome line."""
    sql = render_statement(statement)

    if report.dry_run:
        logger.info("[DRY-RUN] %s", sql)
        report.append(f"{DRY_RUN_PREFIX}{sql}")
        return report

    logger.info("Executing: %s", sql)
    try:
        executor.execute(sql)
    except Exception as e:
        logger.error("Statement failed: %s: %s", sql, e)
        raise StatementExecutionFailure(sql, e, report=report) from e

    report.append(f"{EXECUTED_PREFIX}{sql}")
    return report


def cleanup_tables(
    request: CleanupRequest,
    catalog: Catalog,
    executor: StatementExecutor,
) -> ExecutionReport | NoTargetsReport:
    """Truncate and/or drop the tables of a dataset.

    Args:
        request: Invocation parameters
        catalog: Lists the dataset's tables
        executor: Runs statements (never called in dry-run mode)

    Returns:
        NoTargetsReport if nothing matched, else the ExecutionReport

    Raises:
        InvalidOperation: If request.operation is not recognised
        StatementExecutionFailure: If a statement fails in live mode
    """
    operation = validate_operation(request.operation)

    logger.info(
        "Cleanup %s on %s.%s (dry_run=%s)",
        operation.value, request.project_id, request.dataset_id, request.dry_run,
    )

    targets = resolve_targets(
        catalog,
        request.project_id,
        request.dataset_id,
        request.filter_specific_tables,
        request.table_names,
    )

    if not targets:
        logger.warning(
            "No tables found in %s (filter_specific_tables=%s, table_names=%s)",
            request.dataset_id, request.filter_specific_tables, list(request.table_names),
        )
        return NoTargetsReport(
            dataset_id=request.dataset_id,
            filter_specific_tables=request.filter_specific_tables,
            table_names=request.table_names,
        )

    report = ExecutionReport(operation=operation, dry_run=request.dry_run)
    for target in targets:
        pair = build_statements(target)
        for statement in pair.for_operation(operation):
            report = _apply(statement, report, executor)

    logger.info(
        "Cleanup %s finished: %d statement(s) %s",
        operation.value, len(report), "previewed" if request.dry_run else "executed",
    )
    return report


def run_cleanup(
    project_id: str,
    dataset_id: str,
    filter_specific_tables: bool,
    table_names: Sequence[str],
    operation: str,
    dry_run: bool,
    *,
    catalog: Catalog | None = None,
    executor: StatementExecutor | None = None,
    client=None,
    location: str | None = None,
) -> ExecutionReport | NoTargetsReport:
    """Six-parameter entry point; builds BigQuery collaborators when not given.

    The operation is validated before a BigQuery client is created.
    """
    request = CleanupRequest(
        project_id=project_id,
        dataset_id=dataset_id,
        filter_specific_tables=filter_specific_tables,
        table_names=table_names,
        operation=operation,
        dry_run=dry_run,
    )
    # Validate before a BigQuery client is created
    validate_operation(request.operation)

    if catalog is None or executor is None:
        if client is None:
            from google.cloud import bigquery
            client = bigquery.Client(project=project_id)
        if catalog is None:
            catalog = BigQueryCatalog(client, location=location)
        if executor is None:
            executor = BigQueryExecutor(client, location=location)

    return cleanup_tables(request, catalog, executor)
