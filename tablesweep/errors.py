"""
Error classes for tablesweep.

- InvalidOperation: the requested operation mode is not recognised.
  Raised before any catalog or warehouse access; fix the input and retry.
- StatementExecutionFailure: the warehouse rejected a row-wipe or removal
  statement. Raised in live mode only and aborts the remaining tables.

"Nothing matched" is not an error. It is returned as a NoTargetsReport.
"""


class TableSweepError(Exception):
    """Base exception for tablesweep."""
    pass


class InvalidOperation(TableSweepError):
    """
    Unrecognised operation mode.

    Attributes:
        operation: The offending value, exactly as supplied
    """

    def __init__(self, operation, valid):
        self.operation = operation
        self.valid = tuple(valid)
        super().__init__(
            f"Invalid operation: {operation}. "
            f"Valid options are: {', '.join(self.valid)}"
        )


class StatementExecutionFailure(TableSweepError):
    """
    A statement failed in the warehouse.

    The collaborator's exception is kept unmodified on ``original`` and is
    also chained as ``__cause__``.

    Attributes:
        statement: Rendered SQL that failed
        original: Exception raised by the execution collaborator
        report: ExecutionReport holding the statements that already ran
    """

    def __init__(self, statement: str, original: BaseException, report=None):
        self.statement = statement
        self.original = original
        self.report = report
        super().__init__(f"Failed to execute: {statement}: {original}")
