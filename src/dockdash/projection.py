"""
Filtering and row projection for the container table.

filter_records() narrows the listing down to what the user typed, and
project_record() turns a record into the five display strings of a table row
(ID, NAME, IMAGE, STATUS, PORTS) sized to the current layout.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from .model import ContainerRecord, DEFAULT_LAYOUT, Layout, Row

PORTS_PLACEHOLDER = "—"
DEFAULT_BIND_PREFIX = "0.0.0.0:"
DEFAULT_PORTS_WIDTH = 25

STATUS_LABELS = {
    "running": "RUNNING",
    "exited": "STOPPED",
    "paused": "PAUSED",
    "restarting": "RESTART",
    "removing": "REMOVING",
    "dead": "DEAD",
    "created": "CREATED",
}


def truncate(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    if max_len <= 3:
        return text[:max_len]
    return text[:max_len - 3] + "..."


def status_label(state: str) -> str:
    return STATUS_LABELS.get(state, state.upper())


def format_ports(ports: str, width: int = DEFAULT_PORTS_WIDTH) -> str:
    if not ports:
        return PORTS_PLACEHOLDER
    return truncate(ports.replace(DEFAULT_BIND_PREFIX, ""), width)


def matches(record: ContainerRecord, needle: str) -> bool:
    """Case-insensitive substring match of an already lower-cased needle."""
    haystacks = (
        record.display_name,
        record.image,
        record.state,
        record.id,
        record.ports,
    )
    return any(needle in h.lower() for h in haystacks)


def filter_records(records: Sequence[ContainerRecord], text: str) -> List[ContainerRecord]:
    if not text:
        return list(records)
    needle = text.lower()
    return [r for r in records if matches(r, needle)]


def project_record(record: ContainerRecord, layout: Optional[Layout] = None) -> Row:
    layout = layout or DEFAULT_LAYOUT
    return (
        truncate(record.id, layout.id_width),
        truncate(record.display_name, layout.name_width),
        truncate(record.image, layout.image_width),
        # Status is never truncated, it gets styled later
        status_label(record.state),
        format_ports(record.ports, layout.ports_width),
    )


def project_rows(records: Iterable[ContainerRecord], text: str,
                 layout: Optional[Layout] = None) -> Tuple[Row, ...]:
    return tuple(project_record(r, layout) for r in filter_records(list(records), text))
