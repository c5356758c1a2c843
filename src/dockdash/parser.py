"""Decoding of the runtime's line-delimited JSON listing."""

import json
import logging
from typing import Any, Dict, List, Optional

from .model import ContainerRecord, RECORD_FIELDS

logger = logging.getLogger(__name__)


def decode_record(obj: Any) -> Optional[ContainerRecord]:
    """Build a record from one decoded JSON value, or None if it doesn't fit."""
    if not isinstance(obj, dict):
        return None
    values: Dict[str, str] = {}
    for key, attr in RECORD_FIELDS.items():
        value = obj.get(key, "")
        if not isinstance(value, str):
            return None
        values[attr] = value
    return ContainerRecord(**values)


def parse_records(raw: str) -> List[ContainerRecord]:
    """
    Parse newline-delimited JSON objects into container records.

    Blank lines are skipped and lines that fail to decode are dropped, so one
    corrupt line never hides the rest of the listing. Source order is kept.
    """
    records: List[ContainerRecord] = []
    for lineno, line in enumerate(raw.strip().split("\n"), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            record = decode_record(json.loads(line))
        except ValueError:
            record = None
        if record is None:
            logger.debug(f"Skipping undecodable listing line {lineno}")
            continue
        records.append(record)
    return records
