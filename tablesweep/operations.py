"""
Operation taxonomy for tablesweep.

An Operation is what the caller asks for; a Phase is one statement kind run
against one table. TRUNCATE_AND_DROP expands to both phases, row-wipe first.
"""

from enum import Enum

from tablesweep.errors import InvalidOperation


class Phase(str, Enum):
    """Statement kinds that can be run against a table."""
    TRUNCATE = "TRUNCATE"
    DROP = "DROP"


class Operation(str, Enum):
    """Operation modes accepted by cleanup_tables."""
    TRUNCATE = "TRUNCATE"
    DROP = "DROP"
    TRUNCATE_AND_DROP = "TRUNCATE_AND_DROP"

    @property
    def phases(self) -> tuple[Phase, ...]:
        """Phases this operation runs per table, in execution order."""
        return _PHASES[self]


_PHASES = {
    Operation.TRUNCATE: (Phase.TRUNCATE,),
    Operation.DROP: (Phase.DROP,),
    Operation.TRUNCATE_AND_DROP: (Phase.TRUNCATE, Phase.DROP),
}

VALID_OPERATIONS = tuple(op.value for op in Operation)


def validate_operation(value) -> Operation:
    """Map an operation string to an Operation.

    Matching is exact: no case folding, no whitespace trimming.

    Args:
        value: Operation mode as supplied by the caller

    Returns:
        The matching Operation

    Raises:
        InvalidOperation: If value is not one of VALID_OPERATIONS
    """
    if isinstance(value, Operation):
        return value
    if not isinstance(value, str) or value not in VALID_OPERATIONS:
        raise InvalidOperation(value, VALID_OPERATIONS)
    return Operation(value)
