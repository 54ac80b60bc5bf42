"""
Action engine: applies one decoded request to the record store.

Transitions, addressed by (id, user):
- CREATE:        claim ownership if unassigned, encode, seal under owner, put
- READ:          get, open under the requesting user, decode
- DELETE:        unconditional, idempotent delete
- MARK_COMPLETE: get, open under user, set completed, re-seal under the
                 stored owner, put

Errors from the store, crypto and codec are not caught here. CREATE does
not check for an existing record and DELETE does not check ownership.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional

from todokern import codec, crypto
from todokern.storage.records import RecordStore
from todokern.types import Action, ActionRequest, Record

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    """Outcome of one executed request.

    ``record`` is the written record for CREATE, the decoded record for
    READ and MARK_COMPLETE, and None for DELETE.
    """

    action: Action
    id: int
    record: Optional[Record] = None


class ActionEngine:
    """Executes action requests against a RecordStore."""

    def __init__(self, store: RecordStore):
        self._store = store

    def execute(self, request: ActionRequest) -> ActionResult:
        logger.debug(f"Executing {request.action.name} on id={request.id} for user={request.user!r}")
        match request.action:
            case Action.CREATE:
                return self._create(request)
            case Action.READ:
                return self._read(request)
            case Action.DELETE:
                return self._delete(request)
            case Action.MARK_COMPLETE:
                return self._mark_complete(request)

    def _load(self, record_id: int, user: str) -> Record:
        blob = self._store.get(record_id)
        return codec.decode_record(crypto.open_sealed(blob, user))

    def _save(self, record_id: int, record: Record) -> None:
        self._store.put(record_id, crypto.seal(codec.encode_record(record), record.owner))

    def _create(self, request: ActionRequest) -> ActionResult:
        record = replace(request.record)
        if record.owner == "":
            record.owner = request.user
        self._save(request.id, record)
        logger.debug(f"Created record {request.id} owned by {record.owner!r}")
        return ActionResult(Action.CREATE, request.id, record)

    def _read(self, request: ActionRequest) -> ActionResult:
        # Opened with the caller's identity, never the stored owner
        record = self._load(request.id, request.user)
        logger.debug(f"Read record {request.id}: {record}")
        return ActionResult(Action.READ, request.id, record)

    def _delete(self, request: ActionRequest) -> ActionResult:
        self._store.delete(request.id)
        return ActionResult(Action.DELETE, request.id)

    def _mark_complete(self, request: ActionRequest) -> ActionResult:
        record = self._load(request.id, request.user)
        record.mark_completed()
        self._save(request.id, record)
        return ActionResult(Action.MARK_COMPLETE, request.id, record)
