"""
Dispatch loop: drains the inbox one message at a time.

Each message is ``[tag: 1 byte][payload]``:
- 0x00  kernel-internal, reserved, currently ignored
- 0x01  user message, payload is an encoded ActionRequest
- else  unrecognized, logged and discarded

The loop is iterative and single-threaded. Message N is fully applied or
fully failed before message N+1 is read, and a failing message never stops
the loop.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from todokern import codec
from todokern.config import KernelConfig
from todokern.engine import ActionEngine, ActionResult
from todokern.protocols import (
    KeyValueStore,
    MessageSource,
    MessageTooLargeError,
    TodokernError,
)
from todokern.storage.records import DEFAULT_NAMESPACE, RecordStore
from todokern.types import MessageKind, MessageTag

logger = logging.getLogger(__name__)


@dataclass
class MessageFailure:
    """One message that could not be applied."""

    index: int
    error: TodokernError

    def to_dict(self) -> dict:
        return {"index": self.index, "kind": self.error.kind, "error": str(self.error)}


@dataclass
class DispatchSummary:
    """Counters for one drain of the inbox."""

    processed: int = 0
    kernel: int = 0
    user: int = 0
    unknown: int = 0
    succeeded: int = 0
    failed: int = 0
    failures: List[MessageFailure] = field(default_factory=list)
    results: List[ActionResult] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "processed": self.processed,
            "kernel": self.kernel,
            "user": self.user,
            "unknown": self.unknown,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "failures": [f.to_dict() for f in self.failures],
        }


def classify(message: bytes) -> MessageKind:
    """Classify a raw message by its leading tag byte."""
    if not message:
        return MessageKind.UNKNOWN
    if message[0] == MessageTag.KERNEL:
        return MessageKind.KERNEL
    if message[0] == MessageTag.USER:
        return MessageKind.USER
    return MessageKind.UNKNOWN


class DispatchLoop:
    """Pull, decode, act, repeat until the source is exhausted."""

    def __init__(
        self,
        source: MessageSource,
        engine: ActionEngine,
        max_message_size: Optional[int] = None,
    ):
        self._source = source
        self._engine = engine
        self.max_message_size = max_message_size

    def handle_message(self, message: bytes) -> Optional[ActionResult]:
        """Route one message. Errors propagate to the caller.

        Returns the action result for user messages, None otherwise.
        """
        if self.max_message_size is not None and len(message) > self.max_message_size:
            raise MessageTooLargeError(len(message), self.max_message_size)

        kind = classify(message)
        if kind is MessageKind.KERNEL:
            logger.debug("Message from the kernel, ignored")
            return None
        if kind is MessageKind.UNKNOWN:
            logger.info(f"Message with unknown tag discarded: {message[:16].hex()}")
            return None

        request = codec.decode_request(message[1:])
        return self._engine.execute(request)

    def run(self) -> DispatchSummary:
        summary = DispatchSummary()
        while True:
            message = self._source.next_message()
            if message is None:
                break

            index = summary.processed
            summary.processed += 1
            kind = classify(message)
            logger.debug(f"Start input {index} ({kind.value}, {len(message)} bytes)")

            try:
                result = self.handle_message(message)
            except TodokernError as e:
                logger.warning(f"Message {index} failed ({e.kind}): {e}")
                summary.failed += 1
                summary.failures.append(MessageFailure(index, e))
                if kind is MessageKind.USER:
                    summary.user += 1
                continue

            if kind is MessageKind.KERNEL:
                summary.kernel += 1
            elif kind is MessageKind.UNKNOWN:
                summary.unknown += 1
            else:
                summary.user += 1
                summary.succeeded += 1
                summary.results.append(result)

        logger.info(
            f"Inbox drained: {summary.processed} messages, "
            f"{summary.succeeded} applied, {summary.failed} failed"
        )
        return summary


def entry(
    source: MessageSource,
    kv: KeyValueStore,
    config: Optional[KernelConfig] = None,
) -> DispatchSummary:
    """Wire store, engine and loop together and drain ``source``."""
    namespace = config.namespace if config else DEFAULT_NAMESPACE
    max_size = config.max_message_size if config else None

    engine = ActionEngine(RecordStore(kv, namespace=namespace))
    summary = DispatchLoop(source, engine, max_message_size=max_size).run()
    logger.info("End of kernel run")
    return summary
