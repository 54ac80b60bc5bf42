"""Shared helpers."""

import os
from pathlib import Path


def get_todokern_home() -> Path:
    """Data directory: $TODOKERN_HOME, or ~/.todokern."""
    env_home = os.environ.get("TODOKERN_HOME")
    if env_home:
        return Path(env_home).expanduser()
    return Path.home() / ".todokern"
