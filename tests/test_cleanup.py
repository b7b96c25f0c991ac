"""Tests for cleanup orchestration.

Covers:
- Validation happens before any collaborator call
- Dry run never executes, live executes once per phase per table
- Table-then-phase ordering
- No-targets advisory
- Fail-fast on execution errors
"""

from unittest.mock import MagicMock, patch

import pytest

from tablesweep.cleanup import cleanup_tables, run_cleanup
from tablesweep.errors import InvalidOperation, StatementExecutionFailure
from tablesweep.models import CleanupRequest, ExecutionReport, NoTargetsReport


def _request(operation="DROP", dry_run=True, filtered=False, names=()):
    return CleanupRequest(
        project_id="p",
        dataset_id="d",
        filter_specific_tables=filtered,
        table_names=names,
        operation=operation,
        dry_run=dry_run,
    )


class TestValidation:
    """Invalid modes fail before the catalog or executor is touched."""

    @pytest.mark.parametrize("operation", ["DELETE", "drop", "TRUNCATE AND DROP", ""])
    def test_invalid_operation_makes_no_calls(self, operation):
        catalog = MagicMock()
        executor = MagicMock()

        with pytest.raises(InvalidOperation):
            cleanup_tables(_request(operation=operation, dry_run=False), catalog, executor)

        catalog.list_tables.assert_not_called()
        executor.execute.assert_not_called()

    def test_delete_scenario_message(self, catalog, executor):
        with pytest.raises(InvalidOperation) as exc_info:
            cleanup_tables(_request(operation="DELETE"), catalog, executor)

        message = str(exc_info.value)
        assert "DELETE" in message
        assert "TRUNCATE, DROP, TRUNCATE_AND_DROP" in message
        assert catalog.calls == []


class TestDryRun:
    """Tests for dry-run reports."""

    def test_truncate_and_drop_scenario(self, catalog, executor):
        """Two tables, both phases: four preview lines in table-then-phase order."""
        report = cleanup_tables(
            _request("TRUNCATE_AND_DROP", dry_run=True, filtered=True, names=["t1", "t2"]),
            catalog,
            executor,
        )

        assert isinstance(report, ExecutionReport)
        assert report.lines == [
            "[DRY RUN] Would execute: TRUNCATE TABLE `p.d.t1`",
            "[DRY RUN] Would execute: DROP TABLE IF EXISTS `p.d.t1`",
            "[DRY RUN] Would execute: TRUNCATE TABLE `p.d.t2`",
            "[DRY RUN] Would execute: DROP TABLE IF EXISTS `p.d.t2`",
        ]
        assert executor.executed == []

    def test_never_calls_executor(self, catalog):
        executor = MagicMock()

        cleanup_tables(_request("TRUNCATE_AND_DROP", dry_run=True), catalog, executor)

        executor.execute.assert_not_called()

    def test_dry_run_ignores_failing_executor(self, catalog, make_executor):
        executor = make_executor(fail_on="t1")

        report = cleanup_tables(_request("DROP", dry_run=True), catalog, executor)

        assert len(report) == 2

    def test_truncate_only(self, catalog, executor):
        report = cleanup_tables(_request("TRUNCATE"), catalog, executor)

        assert report.lines == [
            "[DRY RUN] Would execute: TRUNCATE TABLE `p.d.t1`",
            "[DRY RUN] Would execute: TRUNCATE TABLE `p.d.t2`",
        ]

    def test_unfiltered_ignores_name_set(self, catalog, executor):
        report = cleanup_tables(
            _request("DROP", filtered=False, names=["t2", "unrelated"]),
            catalog,
            executor,
        )

        assert report.lines == [
            "[DRY RUN] Would execute: DROP TABLE IF EXISTS `p.d.t1`",
            "[DRY RUN] Would execute: DROP TABLE IF EXISTS `p.d.t2`",
        ]


class TestLive:
    """Tests for live execution."""

    def test_executes_once_per_phase_per_table(self, catalog, executor):
        report = cleanup_tables(_request("TRUNCATE_AND_DROP", dry_run=False), catalog, executor)

        assert executor.executed == [
            "TRUNCATE TABLE `p.d.t1`",
            "DROP TABLE IF EXISTS `p.d.t1`",
            "TRUNCATE TABLE `p.d.t2`",
            "DROP TABLE IF EXISTS `p.d.t2`",
        ]
        assert report.lines == [f"✓ Executed: {sql}" for sql in executor.executed]
        assert report.dry_run is False

    def test_drop_only(self, catalog, executor):
        cleanup_tables(_request("DROP", dry_run=False), catalog, executor)

        assert executor.executed == [
            "DROP TABLE IF EXISTS `p.d.t1`",
            "DROP TABLE IF EXISTS `p.d.t2`",
        ]

    def test_failure_aborts_remaining_tables(self, catalog, make_executor):
        original = PermissionError("Access Denied: Table p:d.t1")
        executor = make_executor(fail_on="DROP TABLE IF EXISTS `p.d.t1`", error=original)

        with pytest.raises(StatementExecutionFailure) as exc_info:
            cleanup_tables(_request("TRUNCATE_AND_DROP", dry_run=False), catalog, executor)

        # Wipe of t1 already happened; nothing for t2
        assert executor.executed == ["TRUNCATE TABLE `p.d.t1`"]
        error = exc_info.value
        assert error.statement == "DROP TABLE IF EXISTS `p.d.t1`"
        assert error.original is original
        assert error.__cause__ is original

    def test_failure_keeps_lines_for_completed_statements(self, catalog, make_executor):
        executor = make_executor(fail_on="`p.d.t2`")

        with pytest.raises(StatementExecutionFailure) as exc_info:
            cleanup_tables(_request("TRUNCATE", dry_run=False), catalog, executor)

        report = exc_info.value.report
        assert isinstance(report, ExecutionReport)
        assert report.lines == ["✓ Executed: TRUNCATE TABLE `p.d.t1`"]
        assert exc_info.value.statement == "TRUNCATE TABLE `p.d.t2`"

    def test_failure_on_first_statement_has_empty_report(self, catalog, make_executor):
        executor = make_executor(fail_on="t1")

        with pytest.raises(StatementExecutionFailure) as exc_info:
            cleanup_tables(_request("DROP", dry_run=False), catalog, executor)

        assert exc_info.value.report.lines == []

    def test_failure_is_logged(self, catalog, make_executor, caplog):
        import logging

        executor = make_executor(fail_on="t2")

        with caplog.at_level(logging.ERROR, logger="tablesweep"):
            with pytest.raises(StatementExecutionFailure):
                cleanup_tables(_request("TRUNCATE", dry_run=False), catalog, executor)

        assert "Statement failed: TRUNCATE TABLE `p.d.t2`" in caplog.text


class TestNoTargets:
    """Tests for the no-targets outcome."""

    def test_missing_table_scenario(self, catalog, executor):
        report = cleanup_tables(
            _request("DROP", dry_run=True, filtered=True, names=["missing_table"]),
            catalog,
            executor,
        )

        assert isinstance(report, NoTargetsReport)
        assert "- table_names = missing_table" in report.lines()
        assert "- filter_specific_tables = true" in report.lines()
        assert "- Tables exist in dataset: d" in report.lines()

    def test_empty_dataset_live_never_executes(self, make_catalog):
        executor = MagicMock()

        report = cleanup_tables(_request("TRUNCATE", dry_run=False), make_catalog([]), executor)

        assert isinstance(report, NoTargetsReport)
        executor.execute.assert_not_called()

    def test_no_targets_skips_statement_builder(self, make_catalog, executor):
        with patch("tablesweep.cleanup.build_statements") as mock_build:
            cleanup_tables(_request("DROP"), make_catalog([]), executor)

        mock_build.assert_not_called()


class TestRunCleanup:
    """Tests for the six-parameter wrapper."""

    def test_uses_given_collaborators(self, catalog, executor):
        report = run_cleanup("p", "d", True, ["t2"], "DROP", False, catalog=catalog, executor=executor)

        assert report.lines == ["✓ Executed: DROP TABLE IF EXISTS `p.d.t2`"]

    def test_invalid_operation_creates_no_client(self):
        with patch("google.cloud.bigquery.Client") as mock_client_cls:
            with pytest.raises(InvalidOperation):
                run_cleanup("p", "d", False, [], "DELETE", True)

        mock_client_cls.assert_not_called()

    def test_builds_bigquery_collaborators(self):
        mock_client = MagicMock()
        mock_client.query.return_value.result.return_value = [{"table_id": "t1"}]

        with patch("google.cloud.bigquery.Client", return_value=mock_client) as mock_client_cls:
            report = run_cleanup("p", "d", False, [], "TRUNCATE", True)

        mock_client_cls.assert_called_once_with(project="p")
        assert report.lines == ["[DRY RUN] Would execute: TRUNCATE TABLE `p.d.t1`"]
        # Only the catalog query ran
        assert mock_client.query.call_count == 1
