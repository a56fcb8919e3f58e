# src/heat_planner/logs.py
from __future__ import annotations

import contextvars
import logging

from . import config

# Controlled by env var HEATPLAN_LOG:
#   off | summary | full
# - summary: one line per run (counts, ms)
# - full: summary + every allocation decision (DEBUG)
LOG_SUMMARY = config.LOG_MODE in {"summary", "full"}
LOG_DECISIONS = config.LOG_MODE == "full"

# correlation id for request-scoped logs
_request_id_ctx: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="-")


def set_request_id(rid: str) -> contextvars.Token:
    return _request_id_ctx.set(str(rid))


def reset_request_id(token: contextvars.Token) -> None:
    _request_id_ctx.reset(token)


def get_request_id() -> str:
    return _request_id_ctx.get()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"heat_planner.{name}")


def configure_logging(level: int | None = None) -> None:
    """Attach a stream handler to the ``heat_planner`` logger tree.

    Library code only emits records; the CLI and the API call this once.
    Repeated calls do not stack handlers.
    """
    root = logging.getLogger("heat_planner")
    if level is None:
        if config.LOG_MODE == "off":
            level = logging.WARNING
        elif LOG_DECISIONS:
            level = logging.DEBUG
        else:
            level = logging.INFO
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)
