"""
Shared types for todokern.

The record and request dataclasses are the vocabulary shared by the codec,
the action engine and the dispatch loop.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional

# Signed 64-bit bounds for timestamps and ids
I64_MIN = -(2**63)
I64_MAX = 2**63 - 1


# === Enums ===


class Action(IntEnum):
    """What an inbound request does to its record.

    The integer value is the wire discriminant.
    """

    CREATE = 0
    READ = 1
    DELETE = 2
    MARK_COMPLETE = 3


class MessageTag(IntEnum):
    """Leading byte of every inbound message."""

    KERNEL = 0x00  # Reserved for kernel-internal messages
    USER = 0x01  # Payload is an encoded ActionRequest


class MessageKind(str, Enum):
    """How the dispatch loop classified a message."""

    KERNEL = "kernel"
    USER = "user"
    UNKNOWN = "unknown"


# === Records ===


@dataclass
class Record:
    """A todo item as it is persisted.

    Attributes:
        title: Free text title
        created_time: Signed 64-bit timestamp, no timezone semantics
        due_time: Signed 64-bit timestamp, 0 when unset
        completed: False until explicitly marked
        owner: Controlling user; empty string means unassigned
    """

    title: str = ""
    created_time: int = 0
    due_time: int = 0
    completed: bool = False
    owner: str = ""

    @classmethod
    def default(cls) -> "Record":
        return cls()

    def is_completed(self) -> bool:
        return self.completed

    def mark_completed(self) -> None:
        self.completed = True

    def is_due(self, now: Optional[int] = None) -> bool:
        """Check whether the due time has passed.

        Compares against ``now`` when given, otherwise against the
        record's own creation time.
        """
        reference = self.created_time if now is None else now
        return self.due_time > 0 and self.due_time < reference

    def accessible_by(self, user: str) -> bool:
        return self.owner == user

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "created_time": self.created_time,
            "due_time": self.due_time,
            "completed": self.completed,
            "owner": self.owner,
        }


@dataclass
class ActionRequest:
    """A decoded inbound user message.

    Transient: decoded from one message and consumed in the same dispatch
    cycle. ``record`` only matters for CREATE.
    """

    id: int
    action: Action
    user: str
    record: Record = field(default_factory=Record)

    def to_message(self) -> bytes:
        """Encode as a tagged user message ready for the inbox."""
        from todokern.codec import encode_request

        return bytes([MessageTag.USER]) + encode_request(self)
