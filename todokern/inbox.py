"""
Message sources for the dispatch loop.

- QueueMessageSource: in-memory FIFO, for tests and embedding
- InputsFileSource: loads a rollup-debugger style ``inputs.json``
"""

import json
import logging
from collections import deque
from pathlib import Path
from typing import Any, Iterable, List, Optional

from todokern.types import MessageTag

logger = logging.getLogger(__name__)


class QueueMessageSource:
    """FIFO of raw messages. Returns None once drained."""

    def __init__(self, messages: Iterable[bytes] = ()):
        self._queue = deque(bytes(m) for m in messages)

    def push(self, message: bytes) -> None:
        self._queue.append(bytes(message))

    def next_message(self) -> Optional[bytes]:
        if not self._queue:
            return None
        return self._queue.popleft()

    def __len__(self) -> int:
        return len(self._queue)


def _parse_hex(value: Any, where: str) -> bytes:
    if not isinstance(value, str):
        raise ValueError(f"{where}: expected a hex string, got {type(value).__name__}")
    text = value.strip()
    if text.startswith(("0x", "0X")):
        text = text[2:]
    try:
        return bytes.fromhex(text)
    except ValueError as e:
        raise ValueError(f"{where}: invalid hex: {e}") from e


def parse_inputs(data: Any) -> List[bytes]:
    """Flatten an inputs document into raw messages.

    Accepted shapes:
    - ``[["<hex>", ...], ...]`` or ``["<hex>", ...]``
    - ``[[{"external": "<hex>"}, ...], ...]`` (levels of debugger inputs)

    Objects without an ``external`` field are delivered as a bare
    kernel-tagged message.
    """
    if not isinstance(data, list):
        raise ValueError("Inputs must be a JSON list")

    messages: List[bytes] = []

    def add(item: Any, where: str) -> None:
        if isinstance(item, dict):
            if "external" in item:
                messages.append(_parse_hex(item["external"], where))
            else:
                messages.append(bytes([MessageTag.KERNEL]))
        else:
            messages.append(_parse_hex(item, where))

    for level_index, level in enumerate(data):
        if isinstance(level, list):
            for item_index, item in enumerate(level):
                add(item, f"level {level_index} item {item_index}")
        else:
            add(level, f"item {level_index}")
    return messages


class InputsFileSource(QueueMessageSource):
    """Messages read from a JSON inputs file, in file order."""

    def __init__(self, path: Path):
        self.path = Path(path)
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {self.path}: {e}") from e
        messages = parse_inputs(data)
        logger.info(f"Loaded {len(messages)} messages from {self.path}")
        super().__init__(messages)
