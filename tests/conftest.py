import pytest
from unittest.mock import patch

from tablesweep.config import TableSweepConfig


class FakeCatalog:
    """Catalog returning a fixed table list and recording every call.

    Ignores the table_names hint so tests see the resolver's own filtering.
    """

    def __init__(self, tables):
        self.tables = list(tables)
        self.calls = []

    def list_tables(self, project_id, dataset_id, table_names=None):
        self.calls.append((project_id, dataset_id, table_names))
        return iter(self.tables)


class FakeExecutor:
    """Executor recording SQL; raises for statements containing fail_on."""

    def __init__(self, fail_on=None, error=None):
        self.fail_on = fail_on
        self.error = error or RuntimeError("Access Denied")
        self.executed = []

    def execute(self, sql):
        if self.fail_on and self.fail_on in sql:
            raise self.error
        self.executed.append(sql)


@pytest.fixture
def test_config():
    return TableSweepConfig(project="test-project", dataset="test_dataset")


@pytest.fixture
def make_catalog():
    return FakeCatalog


@pytest.fixture
def make_executor():
    return FakeExecutor


@pytest.fixture
def catalog():
    return FakeCatalog(["t1", "t2"])


@pytest.fixture
def executor():
    return FakeExecutor()


@pytest.fixture(autouse=True)
def mock_load_config(request, test_config):
    # Don't patch for config tests
    if "test_config" in request.module.__name__:
        yield
        return

    with patch("tablesweep.config.load_config", return_value=test_config):
        yield
