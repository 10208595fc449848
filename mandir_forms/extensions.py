import atexit
import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, Optional

from blinker import Namespace
from flask_cors import CORS
from flask_mail import Mail
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

log = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────
# Core singletons
# ─────────────────────────────────────────────────────────────
db = SQLAlchemy()
migrate = Migrate()
mail = Mail()
cors = CORS()


# ─────────────────────────────────────────────────────────────
# Background tasks + clean shutdown
# ─────────────────────────────────────────────────────────────
_BG_MAX_WORKERS = int(os.getenv("BG_MAX_WORKERS", "8"))
_EXECUTOR = ThreadPoolExecutor(max_workers=_BG_MAX_WORKERS, thread_name_prefix="mandir-bg")


def run_bg(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
    return _EXECUTOR.submit(func, *args, **kwargs)


@atexit.register
def _shutdown_executor() -> None:
    _EXECUTOR.shutdown(wait=False, cancel_futures=True)


# ─────────────────────────────────────────────────────────────
# Lightweight signals
# ─────────────────────────────────────────────────────────────
_signals = Namespace()
app_event = _signals.signal("app-event")


def emit_event(name: str, data: Optional[Dict[str, Any]] = None) -> None:
    """Publish an operational event (swallowed sync/email failures, etc.)."""
    payload = dict(data or {})
    try:
        app_event.send(name, **payload)
    except Exception as e:
        log.warning("app_event receiver failed for %s: %s", name, e)


__all__ = [
    "db",
    "migrate",
    "mail",
    "cors",
    "run_bg",
    "app_event",
    "emit_event",
]
