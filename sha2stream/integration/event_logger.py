"""
Event Logger Module

Records what the hashing pipeline and its collaborators did, as an
in-memory event log that can be filtered, printed and exported.

Features:
- Digest start / per-block / completion events
- File hashed and file skipped events
- Reference cross-check and test-vector results
- Callbacks for live reporting (used by the CLI --verbose flag)
- Compact JSON export/import
"""

import time
import json
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any, Callable, Deque

from ..core.digest import sha
from ..core.segmenter import MessageSource
from ..core.variants import Variant


# ============================================================================
# Constants
# ============================================================================

EVENT_VERSION = "1.0"
DEFAULT_MAX_EVENTS = 10_000


# ============================================================================
# Event Types
# ============================================================================

class EventType(Enum):
    """Types of events that can be logged."""

    # Digest events
    DIGEST_START = "digest_start"
    BLOCK_COMPRESSED = "block_compressed"
    DIGEST_COMPLETE = "digest_complete"

    # File events
    FILE_HASHED = "file_hashed"
    FILE_SKIPPED = "file_skipped"

    # Verification events
    CHECK_PASSED = "check_passed"
    CHECK_FAILED = "check_failed"
    VECTOR_PASSED = "vector_passed"
    VECTOR_FAILED = "vector_failed"


# ============================================================================
# Event Structure
# ============================================================================

@dataclass
class DigestEvent:
    """Represents one logged event."""
    event_type: EventType
    subject: str  # file path, vector name or "<memory>"
    timestamp: float
    details: Dict[str, Any] = field(default_factory=dict)

    def to_record(self) -> str:
        """Convert event to a compact JSON record."""
        return json.dumps({
            'version': EVENT_VERSION,
            'type': self.event_type.value,
            'subject': self.subject,
            'time': self.timestamp,
            'details': self.details,
        }, separators=(',', ':'))

    @classmethod
    def from_record(cls, record: str) -> 'DigestEvent':
        """Parse event from a JSON record."""
        data = json.loads(record)
        return cls(
            event_type=EventType(data['type']),
            subject=data['subject'],
            timestamp=data['time'],
            details=data.get('details', {}),
        )

    def __str__(self) -> str:
        dt = datetime.fromtimestamp(self.timestamp)
        return (
            f"[{dt.strftime('%Y-%m-%d %H:%M:%S')}] "
            f"{self.event_type.value} | {self.subject}"
        )


# ============================================================================
# Event Logger
# ============================================================================

class EventLogger:
    """
    In-memory event log for digest computations.

    Each EventLogger is independent; nothing is shared between instances.
    """

    def __init__(self, trace_blocks: bool = False,
                 max_events: int = DEFAULT_MAX_EVENTS):
        """
        Initialize the event logger.

        Args:
            trace_blocks: If True, record a BLOCK_COMPRESSED event per block
            max_events: Oldest events are dropped beyond this many
        """
        self._events: Deque[DigestEvent] = deque(maxlen=max_events)
        self._callbacks: List[Callable[[DigestEvent], None]] = []
        self._trace_blocks = trace_blocks

    @property
    def trace_blocks(self) -> bool:
        return self._trace_blocks

    def _add_event(self, event: DigestEvent) -> None:
        """Store event and notify callbacks."""
        self._events.append(event)

        for callback in self._callbacks:
            try:
                callback(event)
            except Exception:
                pass  # Don't let callbacks break hashing

    def log(self, event_type: EventType, subject: str, **details: Any) -> DigestEvent:
        """Record an event and return it."""
        event = DigestEvent(
            event_type=event_type,
            subject=subject,
            timestamp=time.time(),
            details=details,
        )
        self._add_event(event)
        return event

    def add_callback(self, callback: Callable[[DigestEvent], None]) -> None:
        """Add a callback to be notified of new events."""
        self._callbacks.append(callback)

    def remove_callback(self, callback: Callable[[DigestEvent], None]) -> None:
        """Remove a callback."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    # ========================================================================
    # Digest Events
    # ========================================================================

    def digest(self, variant: Variant, message: MessageSource,
               subject: str = "<memory>") -> bytes:
        """
        Compute a digest while logging start, completion and (optionally)
        every compressed block.

        Args:
            variant: SHA-2 variant to use
            message: Message source accepted by the digest driver
            subject: Label stored with the events

        Returns:
            The digest bytes
        """
        self.log(EventType.DIGEST_START, subject, algo=variant.name)

        blocks = 0

        def on_block(index: int, block: bytes, state: tuple) -> None:
            nonlocal blocks
            blocks = index + 1
            if self._trace_blocks:
                self.log(
                    EventType.BLOCK_COMPRESSED, subject,
                    index=index,
                    state=state[0].to_bytes(variant.word_bytes, 'big').hex(),
                )

        result = sha(variant, message, observer=on_block)
        self.log(
            EventType.DIGEST_COMPLETE, subject,
            algo=variant.name, blocks=blocks, digest=result.hex(),
        )
        return result

    # ========================================================================
    # Retrieval
    # ========================================================================

    def get_all_events(self) -> List[DigestEvent]:
        """Return all logged events, oldest first."""
        return list(self._events)

    def get_events_by_type(self, event_type: EventType) -> List[DigestEvent]:
        """Get all events of a specific type."""
        return [e for e in self._events if e.event_type == event_type]

    def get_subject_events(self, subject: str) -> List[DigestEvent]:
        """Get all events for one file or vector."""
        return [e for e in self._events if e.subject == subject]

    def get_recent_events(self, count: int = 10) -> List[DigestEvent]:
        """Get the most recent events."""
        return list(self._events)[-count:] if count > 0 else []

    def clear(self) -> None:
        self._events.clear()

    def print_log(self, last_n: Optional[int] = None) -> None:
        """Print the event log in a readable format."""
        events = self.get_all_events()
        if last_n:
            events = events[-last_n:]

        print("\n" + "=" * 70)
        print("DIGEST EVENT LOG")
        print("=" * 70)

        for event in events:
            print(event)
            if event.details:
                for k, v in event.details.items():
                    print(f"    {k}: {v}")

        print("=" * 70)
        print(f"Total events: {len(self._events)}")
        print("=" * 70)

    def export_log(self) -> str:
        """Export the event log as a JSON array of records."""
        return json.dumps([json.loads(e.to_record()) for e in self._events])

    @classmethod
    def import_log(cls, json_str: str) -> 'EventLogger':
        """Import an event log from JSON."""
        logger = cls()
        for item in json.loads(json_str):
            logger._events.append(DigestEvent.from_record(json.dumps(item)))
        return logger


# ============================================================================
# Convenience Functions
# ============================================================================

def create_event_logger(trace_blocks: bool = False) -> EventLogger:
    """Create a new event logger."""
    return EventLogger(trace_blocks=trace_blocks)
