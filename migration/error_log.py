# migration/error_log.py
import os, json, uuid, datetime, traceback
from typing import Optional

from migration.logging_utils import get_logger

logger = get_logger(__name__)


def _nowz():
    return datetime.datetime.now(datetime.timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def log_error(error_type: str, message: str, log_path: str, context: dict = None, tb: str = "") -> str:
    """Append one JSON line to log_path and return its unique error id."""
    err_id = f"err_{uuid.uuid4().hex[:8]}"
    entry = {
        "id": err_id,
        "time": _nowz(),
        "error_type": error_type,
        "context": context or {},
        "traceback": tb,
        "exc_str": message,
    }
    try:
        os.makedirs(os.path.dirname(log_path) or ".", exist_ok=True)
        with open(log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, ensure_ascii=False, default=str) + "\n")
    except OSError:
        # error log unwritable: keep the entry in the process log instead
        logger.exception("failed to write error log %s: %s", log_path, entry)
    return err_id


def log_exception(exc: Exception, log_path: str, context: dict = None) -> str:
    """Write full traceback + context to the error log and return unique id."""
    tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return log_error(type(exc).__name__, str(exc), log_path, context=context, tb=tb)


def read_last_error(log_path: str) -> Optional[dict]:
    """Return the last JSON entry in the error log, or None if there is none."""
    if not os.path.exists(log_path):
        return None
    last = None
    with open(log_path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                last = json.loads(line)
            except ValueError:
                # skip non-json lines
                continue
    return last
