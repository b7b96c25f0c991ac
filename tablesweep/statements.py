"""
Statement builder and renderer.

build_statements() is pure: it derives both statements for a table without
looking at the requested operation. render_statement() produces the BigQuery
text and is only called where a statement is reported or executed.
"""

from tablesweep.models import Statement, StatementPair, TableTarget
from tablesweep.operations import Phase


def build_statements(target: TableTarget) -> StatementPair:
    """Derive the row-wipe and removal statements for a table."""
    return StatementPair(
        truncate=Statement(target=target, phase=Phase.TRUNCATE),
        drop=Statement(target=target, phase=Phase.DROP),
    )


def render_statement(statement: Statement) -> str:
    """Render a statement as BigQuery SQL.

    TRUNCATE keeps the table and its schema. DROP uses IF EXISTS so an
    already-removed table is not an error.

    Raises:
        ValueError: If the phase has no rendering
    """
    ref = f"`{statement.target.full_name}`"
    if statement.phase is Phase.TRUNCATE:
        return f"TRUNCATE TABLE {ref}"
    if statement.phase is Phase.DROP:
        return f"DROP TABLE IF EXISTS {ref}"
    raise ValueError(f"Unknown phase: {statement.phase}")
