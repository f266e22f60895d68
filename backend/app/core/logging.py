"""JSON line logging for the API and the dataset CLI.

Each record is one JSON object: time, level, logger, msg, then whichever of the
request keys (trace_id, method, path, status, duration_ms) or triage keys
(email_id, sentiment, priority, key) were passed via ``extra``.
"""
import logging, os, json, sys
from typing import Optional

REQUEST_KEYS = ["trace_id", "method", "path", "status", "duration_ms"]
TRIAGE_KEYS = ["email_id", "sentiment", "priority", "key"]
EXTRA_KEYS = REQUEST_KEYS + TRIAGE_KEYS


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = {
            "time": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        base.update({k: getattr(record, k) for k in EXTRA_KEYS if hasattr(record, k)})
        if record.exc_info:
            base["exc"] = self.formatException(record.exc_info)
        # datetimes and exceptions in extras render as text
        return json.dumps(base, ensure_ascii=False, default=str)


def init_logging(level: Optional[str] = None):
    """Route the root logger to stdout as JSON. ``level`` wins over LOG_LEVEL."""
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    root.setLevel(level)
    logging.getLogger("uvicorn.access").propagate = False
    logging.getLogger("uvicorn.error").propagate = False
