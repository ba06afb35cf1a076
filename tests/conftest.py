# tests/conftest.py
from pathlib import Path

import pytest

from querysnoop.core import log
from querysnoop.core import metrics


@pytest.fixture(scope="session", autouse=True)
def _bootstrap_logging():
    # reads LOG_LEVEL / LOG_JSON / .env if available
    log.setup()
    yield


@pytest.fixture(autouse=True)
def _fresh_metrics():
    metrics.reset()
    yield


@pytest.fixture
def write_queries(tmp_path: Path):
    """Write lines to a query file and return its path."""
    def _write(lines, name="queries.txt", eol="\n", trailing=True):
        text = eol.join(lines) + (eol if trailing and lines else "")
        p = tmp_path / name
        p.write_bytes(text.encode("utf-8"))
        return p
    return _write
