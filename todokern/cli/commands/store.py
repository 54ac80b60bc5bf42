"""Commands that touch the SQLite record store.

- todokern run INPUTS     Drain an inputs file into the store
- todokern read           Open one record as a given user
- todokern list           List stored record ids
"""

import json
from typing import TYPE_CHECKING

from todokern.engine import ActionEngine
from todokern.inbox import InputsFileSource
from todokern.kernel import entry
from todokern.storage import RecordStore, SQLiteKeyValueStore
from todokern.types import Action, ActionRequest

if TYPE_CHECKING:
    import argparse

    from todokern.config import KernelConfig


def _open_kv(args: "argparse.Namespace", config: "KernelConfig") -> SQLiteKeyValueStore:
    return SQLiteKeyValueStore(args.db or config.db_path)


def cmd_run(args: "argparse.Namespace", config: "KernelConfig") -> None:
    """Drain an inputs file and report what happened."""
    source = InputsFileSource(args.inputs)
    summary = entry(source, _open_kv(args, config), config)

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
        return

    print(f"✓ Processed {summary.processed} messages")
    print(f"  User: {summary.user}  Kernel: {summary.kernel}  Unknown: {summary.unknown}")
    print(f"  Applied: {summary.succeeded}  Failed: {summary.failed}")
    for failure in summary.failures:
        print(f"  ✗ #{failure.index} {failure.error.kind}: {failure.error}")


def cmd_read(args: "argparse.Namespace", config: "KernelConfig") -> None:
    """Open and print one record. Errors propagate to main()."""
    engine = ActionEngine(RecordStore(_open_kv(args, config), namespace=config.namespace))
    result = engine.execute(ActionRequest(id=args.id, action=Action.READ, user=args.user))
    record = result.record

    if args.json:
        print(json.dumps({"id": args.id, **record.to_dict()}, indent=2))
        return

    status = "✓" if record.completed else "○"
    print(f"{status} [{args.id}] {record.title}")
    print(f"  Owner: {record.owner}")
    print(f"  Created: {record.created_time}  Due: {record.due_time or '-'}")


def cmd_list(args: "argparse.Namespace", config: "KernelConfig") -> None:
    """List ids of stored records."""
    ids = RecordStore(_open_kv(args, config), namespace=config.namespace).ids()
    if not ids:
        print("No records stored.")
        return
    for record_id in ids:
        print(record_id)
