from __future__ import annotations

import asyncio

from textual.widgets import DataTable

from poddiag.apps.tui import PodDiagTui, _rows
from poddiag.config import Settings
from poddiag.core.service import StatusService


def test_rows_flatten_nested_values():
    rows = _rows({"a": 1, "b": {"c": None}, "d": ["X", "Y"], "e": []})
    assert rows == [("a", "1"), ("b.c", "NA"), ("d", "X, Y"), ("e", "-")]


def test_initial_payload_fills_table(make_record):
    app = PodDiagTui(StatusService(Settings()), payload=make_record(fault=0x14).hex())

    async def scenario() -> int:
        async with app.run_test():
            return app.query_one("#fields", DataTable).row_count

    assert asyncio.run(scenario()) > 0


def test_bad_payload_leaves_table_empty():
    app = PodDiagTui(StatusService(Settings()), payload="0208")

    async def scenario() -> int:
        async with app.run_test():
            return app.query_one("#fields", DataTable).row_count

    assert asyncio.run(scenario()) == 0
