"""
Application state machine.

The dashboard keeps a single immutable AppState. Every key press, resize and
runtime result is applied through StateMachine.dispatch(), which swaps in a
new state and returns the commands the application shell has to run.

Modes:
  - BROWSING: keys navigate the table and trigger actions
  - FILTERING: keys edit the live filter text
  - TERMINATING: quit requested or fatal error; every further event is ignored

The in-flight marker (AppState.pending) is orthogonal to the mode: it names
the refresh or action that is dispatched and not yet resolved, and drives the
loading indicator.

Action Flow:
  1. 's' / 'x' / 'd' on the selected row sets a "Starting <id>..." style
     status and the pending marker
  2. RunAction and ScheduleRefresh are returned to the shell
  3. ActionCompleted sets the result message and clears the marker
  4. RefreshDue (the delayed refresh) turns into LoadContainers, whose
     ContainersLoaded result replaces the records
  5. An action that completes after its delayed refresh landed (a slow
     stop) asks for one more LoadContainers

The cursor is owned here. Pointer selections on the table come back as
CursorMoved and are clamped like keyboard navigation.
"""

import logging
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Tuple

from .layout import compute_layout
from .messages import (
    ActionCompleted, Command, ContainersLoaded, CursorMoved, Event, KeyPressed,
    ListFailed, LoadContainers, Quit, RefreshDue, Resized, RunAction,
    ScheduleRefresh,
)
from .model import AppState, ContainerRecord, Mode, OpKind, PendingOp
from .projection import filter_records, project_rows

logger = logging.getLogger(__name__)

REFRESHING = "Refreshing..."
ALREADY_RUNNING = "Container is already running"
NOT_RUNNING = "Container is not running"
FILTER_CHAR_LIMIT = 50
DEFAULT_REFRESH_DELAY = 2.0

STEP_KEYS = {"up": -1, "k": -1, "down": 1, "j": 1}
PAGE_KEYS = {"pageup": -1, "b": -1, "pagedown": 1, "f": 1}

Transition = Tuple[AppState, List[Command]]


def selected_container(state: AppState) -> Optional[ContainerRecord]:
    """The record under the cursor, or None if nothing is selectable."""
    visible = filter_records(state.records, state.filter_text)
    if 0 <= state.cursor < len(visible):
        return visible[state.cursor]
    return None


def reproject(state: AppState, **changes) -> AppState:
    """Apply changes and rebuild the rows so they never go stale."""
    state = replace(state, **changes)
    rows = project_rows(state.records, state.filter_text, state.layout)
    cursor = max(0, min(state.cursor, len(rows) - 1))
    return replace(state, rows=rows, cursor=cursor)


def begin(state: AppState, kind: OpKind, container_id: str, status: str) -> Tuple[AppState, int]:
    """Mark a new operation as in flight and return its action id."""
    action_id = state.last_action_id + 1
    state = replace(
        state,
        pending=PendingOp(kind, action_id, container_id),
        status=status,
        last_action_id=action_id,
    )
    return state, action_id


def terminate(state: AppState, error: Optional[str] = None) -> Transition:
    return replace(state, mode=Mode.TERMINATING, pending=None, error=error), [Quit(error)]


class StateMachine:
    """Event-driven dashboard state."""

    def __init__(self, refresh_delay: float = DEFAULT_REFRESH_DELAY):
        self.refresh_delay = refresh_delay
        self._state = AppState()
        self._handlers: Dict[type, Callable[[AppState, Event], Transition]] = {
            Resized: self._on_resized,
            KeyPressed: self._on_key,
            CursorMoved: self._on_cursor_moved,
            ContainersLoaded: self._on_containers_loaded,
            ListFailed: self._on_list_failed,
            ActionCompleted: self._on_action_completed,
            RefreshDue: self._on_refresh_due,
        }

    @property
    def state(self) -> AppState:
        return self._state

    def initial_commands(self) -> List[Command]:
        self._state, _ = begin(self._state, OpKind.REFRESH, "", "")
        return [LoadContainers()]

    def selected_container(self) -> Optional[ContainerRecord]:
        return selected_container(self._state)

    def dispatch(self, event: Event) -> List[Command]:
        if self._state.mode is Mode.TERMINATING:
            logger.debug(f"Ignoring {type(event).__name__} while terminating")
            return []
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unknown event: {event!r}")
        self._state, commands = handler(self._state, event)
        if commands:
            logger.debug(f"{type(event).__name__} -> {commands}")
        return commands

    # --- EVENTS ---

    def _on_resized(self, state: AppState, event: Resized) -> Transition:
        layout = compute_layout(event.width, event.height)
        return reproject(state, width=event.width, height=event.height, layout=layout), []

    def _on_containers_loaded(self, state: AppState, event: ContainersLoaded) -> Transition:
        pending = state.pending
        if pending is not None and (pending.kind is OpKind.REFRESH or pending.action_id == event.origin):
            pending = None
        status = "" if state.status == REFRESHING else state.status
        refreshed = max(state.refreshed_through, event.origin or 0)
        return reproject(
            state,
            records=tuple(event.records),
            pending=pending,
            status=status,
            refreshed_through=refreshed,
        ), []

    def _on_list_failed(self, state: AppState, event: ListFailed) -> Transition:
        logger.error(f"Listing failed: {event.error}")
        return terminate(state, event.error)

    def _on_action_completed(self, state: AppState, event: ActionCompleted) -> Transition:
        pending = state.pending
        if pending is not None and pending.action_id == event.action_id:
            pending = None
        state = replace(state, pending=pending, status=event.result.message)
        if event.action_id <= state.refreshed_through:
            # The delayed refresh beat the runtime; its rows predate this result
            logger.debug(f"Action {event.action_id} finished after its refresh, reloading")
            return state, [LoadContainers(origin=event.action_id)]
        return state, []

    def _on_cursor_moved(self, state: AppState, event: CursorMoved) -> Transition:
        if not state.rows:
            return state, []
        cursor = max(0, min(event.row, len(state.rows) - 1))
        if cursor == state.cursor:
            return state, []
        return replace(state, cursor=cursor), []

    def _on_refresh_due(self, state: AppState, event: RefreshDue) -> Transition:
        return state, [LoadContainers(origin=event.action_id)]

    # --- KEYS ---

    def _on_key(self, state: AppState, event: KeyPressed) -> Transition:
        if state.mode is Mode.FILTERING:
            return self._filtering_key(state, event.key)
        return self._browsing_key(state, event.key)

    def _filtering_key(self, state: AppState, key: str) -> Transition:
        if key == "ctrl+c":
            return terminate(state)
        if key == "escape":
            # Text is applied live, leaving keeps it
            return replace(state, mode=Mode.BROWSING), []
        if key == "enter":
            return reproject(state, mode=Mode.BROWSING), []
        if key == "backspace":
            return reproject(state, filter_text=state.filter_text[:-1], cursor=0), []
        if key == "ctrl+u":
            return reproject(state, filter_text="", cursor=0), []
        if len(key) == 1 and key.isprintable():
            if len(state.filter_text) >= FILTER_CHAR_LIMIT:
                return state, []
            return reproject(state, filter_text=state.filter_text + key, cursor=0), []
        return state, []

    def _browsing_key(self, state: AppState, key: str) -> Transition:
        if key in ("q", "ctrl+c"):
            return terminate(state)
        if key == "/":
            return replace(state, mode=Mode.FILTERING), []
        if key == "r":
            state, _ = begin(state, OpKind.REFRESH, "", REFRESHING)
            return state, [LoadContainers()]
        if key == "s":
            return self._container_action(state, OpKind.START)
        if key == "x":
            return self._container_action(state, OpKind.STOP)
        if key == "d":
            return self._container_action(state, OpKind.DELETE)
        return self._navigate(state, key), []

    def _container_action(self, state: AppState, kind: OpKind) -> Transition:
        container = selected_container(state)
        if container is None:
            return state, []

        if kind is OpKind.START:
            if container.is_running:
                return replace(state, status=ALREADY_RUNNING), []
            status = f"Starting {container.short_id}..."
        elif kind is OpKind.STOP:
            if not container.is_running:
                return replace(state, status=NOT_RUNNING), []
            status = f"Stopping {container.short_id}..."
        else:
            status = f"Deleting {container.short_id}..."

        state, action_id = begin(state, kind, container.id, status)
        return state, [
            RunAction(kind, container.id, action_id),
            ScheduleRefresh(action_id, self.refresh_delay),
        ]

    def _navigate(self, state: AppState, key: str) -> AppState:
        count = len(state.rows)
        if count == 0:
            return state
        if key in STEP_KEYS:
            cursor = state.cursor + STEP_KEYS[key]
        elif key in PAGE_KEYS:
            cursor = state.cursor + PAGE_KEYS[key] * state.layout.table_height
        elif key in ("home", "g"):
            cursor = 0
        elif key in ("end", "G"):
            cursor = count - 1
        else:
            return state
        cursor = max(0, min(cursor, count - 1))
        if cursor == state.cursor:
            return state
        return replace(state, cursor=cursor)
