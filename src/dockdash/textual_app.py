"""Textual-based UI for dockdash."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Tuple

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.message import Message
from textual.widgets import DataTable, Static

from .backend import GatewayError, RuntimeGateway
from .messages import (
    ActionCompleted, Command, ContainersLoaded, CursorMoved, Event, KeyPressed,
    ListFailed, LoadContainers, Quit, RefreshDue, Resized, RunAction,
    ScheduleRefresh,
)
from .model import COLUMN_TITLES, Layout, Row
from .scheduler import RefreshScheduler
from .state import StateMachine
from .ui import Renderer

logger = logging.getLogger(__name__)


class Envelope(Message):
    """Carries a state machine event through the app's message queue."""

    def __init__(self, event: Event) -> None:
        super().__init__()
        self.event = event


class ContainerTable(DataTable, can_focus=False):
    """Row-cursor table; the app owns every key, so it never takes focus.

    The cursor belongs to the state machine: a click on a row is reported
    as RowClicked and the table only moves once the state says so.
    """

    class RowClicked(Message):
        def __init__(self, row: int) -> None:
            super().__init__()
            self.row = row

    async def _on_click(self, event: events.Click) -> None:
        # Replaces DataTable's handler, which would move the cursor itself
        event.prevent_default()
        event.stop()
        row = event.style.meta.get("row")
        if isinstance(row, int) and row >= 0:
            self.post_message(self.RowClicked(row))


def key_name(event: events.Key) -> str:
    """Printable characters as themselves, everything else by key name."""
    char = event.character
    if char and len(char) == 1 and char.isprintable():
        return char
    return event.key


class DashboardApp(App[None]):
    TITLE = "dockdash"
    ENABLE_COMMAND_PALETTE = False
    AUTO_FOCUS = None

    CSS = """
    Screen {
      layout: vertical;
    }

    #title {
      height: 1;
      padding: 0 1;
      margin-bottom: 1;
    }

    #filter {
      height: 1;
      padding: 0 1;
    }

    #status {
      height: 1;
      padding: 0 1;
    }

    #containers {
      height: auto;
      margin: 1 0;
    }

    #help {
      height: 1;
      padding: 0 1;
    }
    """

    BINDINGS = [
        # ctrl+c must reach the state machine in every mode
        Binding("ctrl+c", "send_key('ctrl+c')", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        gateway: RuntimeGateway,
        machine: Optional[StateMachine] = None,
        presenter: Optional[Renderer] = None,
    ) -> None:
        super().__init__()
        self.gateway = gateway
        self.machine = machine or StateMachine()
        self.presenter = presenter or Renderer()
        self.scheduler = RefreshScheduler(self.set_timer, self._refresh_due)
        self._shown_layout: Optional[Layout] = None
        self._shown_rows: Optional[Tuple[Row, ...]] = None

    def compose(self) -> ComposeResult:
        yield Static("", id="title")
        yield Static("", id="filter")
        yield Static("", id="status")
        yield ContainerTable(id="containers", cursor_type="row")
        yield Static("", id="help")

    def on_mount(self) -> None:
        logger.info("Dashboard mounted")
        self._run_commands(self.machine.initial_commands())
        self.post_event(Resized(self.size.width, self.size.height))
        self._sync_view()

    def on_resize(self, event: events.Resize) -> None:
        self.post_event(Resized(event.size.width, event.size.height))

    async def on_key(self, event: events.Key) -> None:
        event.stop()
        self.post_event(KeyPressed(key_name(event)))

    def action_send_key(self, key: str) -> None:
        self.post_event(KeyPressed(key))

    def on_container_table_row_clicked(self, message: ContainerTable.RowClicked) -> None:
        self.post_event(CursorMoved(message.row))

    def post_event(self, event: Event) -> None:
        self.post_message(Envelope(event))

    def on_envelope(self, message: Envelope) -> None:
        commands = self.machine.dispatch(message.event)
        self._sync_view()
        self._run_commands(commands)

    # --- COMMANDS ---

    def _run_commands(self, commands: List[Command]) -> None:
        for command in commands:
            if isinstance(command, LoadContainers):
                self.run_worker(self._load_containers(command.origin), group="gateway")
            elif isinstance(command, RunAction):
                self.run_worker(self._run_action(command), group="gateway")
            elif isinstance(command, ScheduleRefresh):
                self.scheduler.schedule(command.action_id, command.delay)
            elif isinstance(command, Quit):
                self._finish(command.error)

    async def _load_containers(self, origin: Optional[int]) -> None:
        try:
            records = await asyncio.to_thread(self.gateway.list_containers)
        except GatewayError as e:
            self.post_event(ListFailed(str(e)))
            return
        self.post_event(ContainersLoaded(tuple(records), origin))

    async def _run_action(self, command: RunAction) -> None:
        result = await asyncio.to_thread(
            self.gateway.run_action, command.kind, command.container_id
        )
        self.post_event(ActionCompleted(command.action_id, result))

    def _refresh_due(self, action_id: int) -> None:
        self.post_event(RefreshDue(action_id))

    def _finish(self, error: Optional[str]) -> None:
        self.scheduler.cancel_all()
        if error:
            logger.info("Exiting after fatal error")
            self.exit(return_code=1, message=self.presenter.error_line(self.machine.state))
        else:
            logger.info("Quitting")
            self.exit()

    # --- VIEW ---

    def _sync_view(self) -> None:
        state = self.machine.state
        if state.error:
            return
        self.query_one("#title", Static).update(self.presenter.title(state))
        self.query_one("#filter", Static).update(self.presenter.filter_line(state))
        self.query_one("#status", Static).update(self.presenter.status_line(state))
        self.query_one("#help", Static).update(self.presenter.help_line(state))

        table = self.query_one(ContainerTable)
        if state.layout != self._shown_layout:
            table.clear(columns=True)
            for title, width in zip(COLUMN_TITLES, state.layout.column_widths):
                table.add_column(title, width=width)
            table.styles.height = state.layout.table_height + 1
            self._shown_layout = state.layout
            self._shown_rows = None

        if state.rows != self._shown_rows:
            table.clear()
            table.add_rows(self.presenter.rows(state))
            self._shown_rows = state.rows

        if state.rows and table.cursor_row != state.cursor:
            table.move_cursor(row=state.cursor)
