"""Build inbound messages for feeding the kernel.

- todokern encode --id 1 --action create --user alice --title "Buy milk"

Prints the hex of the tagged user message, ready to paste into an
inputs file as an ``external`` entry.
"""

import json
from typing import TYPE_CHECKING

from todokern.types import Action, ActionRequest, Record

if TYPE_CHECKING:
    import argparse

ACTION_NAMES = {
    "create": Action.CREATE,
    "read": Action.READ,
    "delete": Action.DELETE,
    "complete": Action.MARK_COMPLETE,
}


def build_request(args: "argparse.Namespace") -> ActionRequest:
    record = Record(
        title=args.title or "",
        created_time=args.created,
        due_time=args.due,
        completed=bool(args.completed),
        owner=args.owner or "",
    )
    return ActionRequest(id=args.id, action=ACTION_NAMES[args.action], user=args.user, record=record)


def cmd_encode(args: "argparse.Namespace") -> None:
    """Print the hex encoding of one user message."""
    message = build_request(args).to_message().hex()
    if getattr(args, "json", False):
        print(json.dumps({"external": message}))
    else:
        print(message)
