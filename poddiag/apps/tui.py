from __future__ import annotations

import logging
from typing import Any

from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, DataTable, Footer, Header, Input, Static

from poddiag.core.service import StatusService


log = logging.getLogger(__name__)


class PodDiagTui(App[None]):
    CSS = """
    #panel {
        width: 100%;
        height: 100%;
        padding: 1;
        border: solid $accent;
    }

    #status {
        height: 1;
        color: $text-muted;
    }

    #ref {
        height: 1;
        text-style: bold;
    }
    """

    BINDINGS = [("q", "quit", "Quit")]

    def __init__(self, service: StatusService, *, payload: str | None = None) -> None:
        super().__init__()
        self._service = service
        self._initial_payload = payload

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        with Vertical(id="panel"):
            with Horizontal():
                yield Input(placeholder="Detailed status hex (e.g. 0216...)", id="payload")
                yield Button("Decode", id="decode")
                yield Button("Quit", id="quit")
            yield Static("", id="status")
            yield Static("", id="ref")
            table = DataTable(id="fields")
            table.add_columns("Field", "Value")
            yield table
        yield Footer()

    def on_mount(self) -> None:
        self.title = "poddiag"
        if self._initial_payload:
            self.query_one("#payload", Input).value = self._initial_payload
            self._decode(self._initial_payload)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "quit":
            self.exit()
            return
        if event.button.id == "decode":
            self._decode(self.query_one("#payload", Input).value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._decode(event.value)

    def _decode(self, payload: str) -> None:
        status = self.query_one("#status", Static)
        ref = self.query_one("#ref", Static)
        table = self.query_one("#fields", DataTable)
        table.clear()
        ref.update("")

        response = self._service.decode(payload)
        if not response.get("ok"):
            status.update(f"Error: {response.get('error')}")
            return

        status.update("Faulted." if response.get("faulted") else "No fault.")
        ref.update(str(response.get("ref") or "No Ref code."))
        for name, value in _rows(response["status"]):
            table.add_row(name, value)


def _rows(status: dict[str, Any], prefix: str = "") -> list[tuple[str, str]]:
    rows: list[tuple[str, str]] = []
    for key, value in status.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            rows.extend(_rows(value, prefix=f"{name}."))
        elif isinstance(value, list):
            rows.append((name, ", ".join(str(v) for v in value) or "-"))
        elif value is None:
            rows.append((name, "NA"))
        else:
            rows.append((name, str(value)))
    return rows


def run_tui(service: StatusService, *, payload: str | None = None) -> None:
    log.info("Starting TUI")
    PodDiagTui(service, payload=payload).run()
