"""
Target resolution against the warehouse catalog.

The catalog is anything with a ``list_tables(project_id, dataset_id,
table_names=None)`` method returning table ids in its natural order.
BigQueryCatalog reads the dataset's ``__TABLES__`` metadata view.
"""

from __future__ import annotations

import logging
from typing import Iterable, Protocol, Sequence

from tablesweep.models import TableTarget

logger = logging.getLogger(__name__)


class Catalog(Protocol):
    """Lists the tables of a dataset."""

    def list_tables(
        self,
        project_id: str,
        dataset_id: str,
        table_names: Sequence[str] | None = None,
    ) -> Iterable[str]:
        ...


class BigQueryCatalog:
    """Catalog backed by the BigQuery ``__TABLES__`` metadata view.

    Names are passed as query parameters, never spliced into the SQL.
    """

    def __init__(self, client, location: str | None = None):
        self.client = client
        self.location = location

    def build_query(
        self,
        project_id: str,
        dataset_id: str,
        table_names: Sequence[str] | None = None,
    ):
        """Build the metadata query and its parameters.

        Returns:
            Tuple of (SQL string, list of bigquery query parameters)
        """
        from google.cloud import bigquery

        sql = (
            f"SELECT table_id FROM `{project_id}.{dataset_id}.__TABLES__` "
            "WHERE dataset_id = @dataset_id"
        )
        params = [bigquery.ScalarQueryParameter("dataset_id", "STRING", dataset_id)]

        if table_names is not None:
            sql += " AND table_id IN UNNEST(@table_names)"
            params.append(
                bigquery.ArrayQueryParameter("table_names", "STRING", list(table_names))
            )

        return sql, params

    def list_tables(
        self,
        project_id: str,
        dataset_id: str,
        table_names: Sequence[str] | None = None,
    ) -> list[str]:
        from google.cloud import bigquery

        sql, params = self.build_query(project_id, dataset_id, table_names)
        job_config = bigquery.QueryJobConfig(query_parameters=params)
        logger.debug("Catalog query: %s", sql)

        rows = self.client.query(sql, job_config=job_config, location=self.location).result()
        return [row["table_id"] for row in rows]


def resolve_targets(
    catalog: Catalog,
    project_id: str,
    dataset_id: str,
    filter_specific_tables: bool,
    table_names: Sequence[str] = (),
) -> list[TableTarget]:
    """Resolve the tables a cleanup will act on.

    Without filtering, every table of the dataset is returned and
    ``table_names`` is ignored. With filtering, only tables whose id is in
    ``table_names`` are kept (exact, case-sensitive match).

    Args:
        catalog: Catalog to query
        project_id: Warehouse project
        dataset_id: Dataset to enumerate
        filter_specific_tables: Restrict to table_names
        table_names: Allow-list used when filtering

    Returns:
        Targets in catalog order. May be empty.
    """
    if filter_specific_tables:
        allowed = list(table_names)
        table_ids = catalog.list_tables(project_id, dataset_id, table_names=allowed)
        wanted = set(allowed)
        table_ids = [t for t in table_ids if t in wanted]
    else:
        table_ids = catalog.list_tables(project_id, dataset_id)

    targets = [
        TableTarget(project_id=project_id, dataset_id=dataset_id, table_id=table_id)
        for table_id in table_ids
    ]
    logger.info(
        "Resolved %d table(s) in %s.%s (filter_specific_tables=%s)",
        len(targets), project_id, dataset_id, filter_specific_tables,
    )
    return targets
