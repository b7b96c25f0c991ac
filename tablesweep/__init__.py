"""
tablesweep - Bulk truncate/drop for BigQuery datasets

Enumerates the tables of a dataset, optionally restricted to an allow-list,
and truncates and/or drops each one. Dry run reports the statements only.
"""

__version__ = "0.1.0"


__all__ = [
    "CleanupRequest",
    "ExecutionReport",
    "NoTargetsReport",
    "Operation",
    "cleanup_tables",
    "run_cleanup",
]

from .cleanup import cleanup_tables, run_cleanup
from .models import CleanupRequest, ExecutionReport, NoTargetsReport
from .operations import Operation
