"""
Statement execution collaborator.

An executor runs one SQL statement and raises on failure. BigQueryExecutor
submits the statement as a query job and waits for it to finish.
"""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class StatementExecutor(Protocol):
    """Runs a row-wipe or removal statement."""

    def execute(self, sql: str) -> None:
        ...


class BigQueryExecutor:
    """Executor backed by a BigQuery client."""

    def __init__(self, client, location: str | None = None):
        self.client = client
        self.location = location

    def execute(self, sql: str) -> None:
        """Run sql and block until the job completes.

        Raises:
            google.api_core.exceptions.GoogleAPICallError: If BigQuery rejects the job
        """
        job = self.client.query(sql, location=self.location)
        job.result()
        logger.debug("Job %s finished", getattr(job, "job_id", "?"))
