"""
Events fed into the state machine and commands it hands back.

Events describe something that happened (a key press, a resize, a runtime
result). Commands describe work the application shell must carry out; their
outcome comes back later as another event. Both carry immutable payloads only.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .model import ActionResult, ContainerRecord, OpKind


# --- EVENTS ---

@dataclass(frozen=True)
class Resized:
    width: int
    height: int


@dataclass(frozen=True)
class KeyPressed:
    key: str  # printable character, or a key name such as "escape", "ctrl+c", "up"


@dataclass(frozen=True)
class CursorMoved:
    row: int  # row picked with the pointer


@dataclass(frozen=True)
class ContainersLoaded:
    records: Tuple[ContainerRecord, ...]
    origin: Optional[int] = None  # action id of a delayed refresh, None when manual


@dataclass(frozen=True)
class ListFailed:
    error: str


@dataclass(frozen=True)
class ActionCompleted:
    action_id: int
    result: ActionResult


@dataclass(frozen=True)
class RefreshDue:
    action_id: int


Event = Union[
    Resized, KeyPressed, CursorMoved, ContainersLoaded, ListFailed, ActionCompleted, RefreshDue,
]


# --- COMMANDS ---

@dataclass(frozen=True)
class LoadContainers:
    origin: Optional[int] = None


@dataclass(frozen=True)
class RunAction:
    kind: OpKind
    container_id: str
    action_id: int


@dataclass(frozen=True)
class ScheduleRefresh:
    action_id: int
    delay: float


@dataclass(frozen=True)
class Quit:
    error: Optional[str] = None


Command = Union[LoadContainers, RunAction, ScheduleRefresh, Quit]
