"""Plain message model shared by the broker and its tools."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Message:
    """A single message addressed to a topic partition."""

    key: str
    topic: str
    partition: str
    payload: str
    timestamp: datetime = field(default_factory=datetime.now)