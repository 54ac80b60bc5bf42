"""Kernel configuration loaded from environment variables."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from todokern.storage.records import DEFAULT_NAMESPACE, validate_namespace
from todokern.utils import get_todokern_home

DEFAULT_LOG_LEVEL = "WARNING"


def _int_env(env: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class KernelConfig:
    """Runtime settings for one kernel run.

    Attributes:
        db_path: SQLite file holding the key-value store
        namespace: First path segment of every record key
        max_message_size: Messages longer than this are rejected unread;
            None (the default) means no limit
        log_level: Name of the logging level for the CLI
    """

    db_path: Path
    namespace: str = DEFAULT_NAMESPACE
    max_message_size: Optional[int] = None
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "KernelConfig":
        env = os.environ if env is None else env

        db_env = env.get("TODOKERN_DB_PATH", "").strip()
        if db_env:
            db_path = Path(db_env).expanduser()
        elif env.get("TODOKERN_HOME", "").strip():
            db_path = Path(env["TODOKERN_HOME"]).expanduser() / "store.db"
        else:
            db_path = get_todokern_home() / "store.db"

        log_level = env.get("TODOKERN_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"TODOKERN_LOG_LEVEL is not a logging level: {log_level!r}")

        return cls(
            db_path=db_path,
            namespace=validate_namespace(env.get("TODOKERN_NAMESPACE", DEFAULT_NAMESPACE)),
            max_message_size=_int_env(env, "TODOKERN_MAX_MESSAGE_SIZE", None),
            log_level=log_level,
        )
