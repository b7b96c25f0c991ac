"""
Value types passed between the cleanup stages.

CleanupRequest goes in; either an ExecutionReport or a NoTargetsReport comes
out. Statements are typed (target + phase) and only turned into SQL text by
tablesweep.statements.render_statement.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from tablesweep.operations import Operation, Phase


@dataclass(frozen=True)
class CleanupRequest:
    """
    The six parameters of one cleanup invocation.

    ``operation`` holds the caller's raw value so that an unrecognised mode
    can be reported verbatim by the validator.

    Attributes:
        project_id: Warehouse project
        dataset_id: Dataset whose tables are enumerated
        filter_specific_tables: Restrict to ``table_names`` when True
        table_names: Allow-list, ignored unless filtering
        operation: TRUNCATE, DROP or TRUNCATE_AND_DROP
        dry_run: Report statements without running them
    """
    project_id: str
    dataset_id: str
    filter_specific_tables: bool
    table_names: tuple[str, ...]
    operation: str
    dry_run: bool = True

    def __post_init__(self):
        if isinstance(self.table_names, str):
            raise TypeError("table_names must be a sequence of names, not a str")
        # Freeze list input so the request stays immutable
        object.__setattr__(self, "table_names", tuple(self.table_names or ()))


@dataclass(frozen=True)
class TableTarget:
    """One resolved table."""
    project_id: str
    dataset_id: str
    table_id: str

    @property
    def full_name(self) -> str:
        return f"{self.project_id}.{self.dataset_id}.{self.table_id}"


@dataclass(frozen=True)
class Statement:
    """A phase to run against a target. Not yet SQL."""
    target: TableTarget
    phase: Phase


@dataclass(frozen=True)
class StatementPair:
    """Row-wipe and removal statements for one target.

    Both always exist; the operation decides which of them are used.
    """
    truncate: Statement
    drop: Statement

    def for_operation(self, operation: Operation) -> Iterator[Statement]:
        """Yield the statements selected by operation, row-wipe first."""
        for phase in operation.phases:
            yield self.truncate if phase is Phase.TRUNCATE else self.drop


@dataclass
class ExecutionReport:
    """
    Ordered outcome lines for a dry-run or live invocation.

    Append-only: one line per phase actually considered, in table-then-phase
    order.
    """
    operation: Operation
    dry_run: bool
    lines: list[str] = field(default_factory=list)

    def append(self, line: str) -> None:
        self.lines.append(line)

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": "dry_run" if self.dry_run else "executed",
            "operation": self.operation.value,
            "lines": list(self.lines),
        }


@dataclass(frozen=True)
class NoTargetsReport:
    """
    Advisory returned when no table matched.

    Echoes the inputs that decided the empty result so the caller can spot a
    typo or an empty dataset.
    """
    dataset_id: str
    filter_specific_tables: bool
    table_names: tuple[str, ...]

    WARNING = "No tables found matching the criteria. Check that:"

    def lines(self) -> list[str]:
        flag = "true" if self.filter_specific_tables else "false"
        return [
            self.WARNING,
            f"- Tables exist in dataset: {self.dataset_id}",
            f"- filter_specific_tables = {flag}",
            f"- table_names = {', '.join(self.table_names)}",
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": "no_targets",
            "warning": self.WARNING,
            "dataset_id": self.dataset_id,
            "filter_specific_tables": self.filter_specific_tables,
            "table_names": list(self.table_names),
        }
