"""
Data models and structures for dockdash application state.

This module defines immutable dataclasses that represent container records and
the dashboard state. Used throughout the app for:
  - Type safety and IDE autocomplete
  - Clear separation of data (models) from logic (backend/state/ui)
  - Cheap equality checks between successive states

Data Classes:
  - ContainerRecord: One decoded line of the runtime listing
  - Layout: Column widths and table height for the current terminal
  - ActionResult: Outcome of a start/stop/delete command
  - PendingOp: The refresh or action currently in flight
  - AppState: Complete application state, replaced on every transition

Key Fields:
  - All dataclasses are frozen; transitions build a new AppState with
    dataclasses.replace()
  - AppState.rows always holds the projection of the filtered records
  - AppState.error is only ever set together with Mode.TERMINATING
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

SHORT_ID_LENGTH = 12

# JSON key -> ContainerRecord field
RECORD_FIELDS = {
    "ID": "id",
    "Image": "image",
    "Command": "command",
    "CreatedAt": "created",
    "Status": "status",
    "Ports": "ports",
    "Names": "name",
    "State": "state",
}


def short_id(container_id: str) -> str:
    return container_id[:SHORT_ID_LENGTH]


@dataclass(frozen=True)
class ContainerRecord:
    id: str = ""
    image: str = ""
    command: str = ""
    created: str = ""
    status: str = ""  # human text, e.g. "Up 3 hours"
    ports: str = ""
    name: str = ""  # may carry a leading "/"
    state: str = ""  # running, exited, paused, ...

    @property
    def short_id(self) -> str:
        return short_id(self.id)

    @property
    def display_name(self) -> str:
        return self.name[1:] if self.name.startswith("/") else self.name

    @property
    def is_running(self) -> bool:
        return self.state == "running"


@dataclass(frozen=True)
class Layout:
    id_width: int
    name_width: int
    image_width: int
    status_width: int
    ports_width: int
    table_height: int

    @property
    def column_widths(self) -> Tuple[int, int, int, int, int]:
        return (self.id_width, self.name_width, self.image_width,
                self.status_width, self.ports_width)


# Columns used until the first resize arrives
DEFAULT_LAYOUT = Layout(
    id_width=14,
    name_width=25,
    image_width=30,
    status_width=16,
    ports_width=25,
    table_height=15,
)

COLUMN_TITLES = ("ID", "NAME", "IMAGE", "STATUS", "PORTS")

Row = Tuple[str, str, str, str, str]


@dataclass(frozen=True)
class ActionResult:
    ok: bool
    message: str


class Mode(Enum):
    BROWSING = "browsing"
    FILTERING = "filtering"
    TERMINATING = "terminating"


class OpKind(Enum):
    REFRESH = "refresh"
    START = "start"
    STOP = "stop"
    DELETE = "delete"


@dataclass(frozen=True)
class PendingOp:
    kind: OpKind
    action_id: int
    container_id: str = ""


@dataclass(frozen=True)
class AppState:
    records: Tuple[ContainerRecord, ...] = ()
    filter_text: str = ""
    mode: Mode = Mode.BROWSING
    pending: Optional[PendingOp] = None
    cursor: int = 0
    width: int = 100
    height: int = 30
    layout: Layout = DEFAULT_LAYOUT
    rows: Tuple[Row, ...] = ()
    status: str = ""
    error: Optional[str] = None
    last_action_id: int = 0
    refreshed_through: int = 0  # newest action id whose delayed refresh has landed

    @property
    def loading(self) -> bool:
        return self.pending is not None

    @property
    def is_filtering(self) -> bool:
        return self.mode is Mode.FILTERING
