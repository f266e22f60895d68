import csv
import logging
import os
from pathlib import Path
from typing import Any, Dict, List

from ..core.errors import ValidationError
from .email_service import process_email, require_fields, wipe_emails
from .kv_store import KVStore

log = logging.getLogger(__name__)

DEFAULT_DATASET = Path(__file__).resolve().parent.parent / "data" / "sample_emails.csv"


def dataset_path() -> str:
    return os.getenv("DATASET_CSV_PATH") or str(DEFAULT_DATASET)


def read_rows(path: Path) -> List[Dict[str, Any]]:
    """Parse every CSV row into a raw email mapping. Raises ValidationError if the file is unreadable."""
    try:
        with path.open("r", encoding="utf-8", newline="") as f:
            rows = []
            for row in csv.DictReader(f):
                # Normalize header names to lower for safety
                row = {(k or "").strip().lower(): (v or "").strip() for k, v in row.items() if k is not None}
                rows.append({
                    "sender": row.get("sender"),
                    "subject": row.get("subject"),
                    "body": row.get("body"),
                    "sent_date": row.get("sent_date") or row.get("date") or None,
                })
            return rows
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        log.error("dataset_unreadable", exc_info=e, extra={"path": str(path)})
        raise ValidationError(f"Dataset file could not be read: {path.name}") from e


def load_dataset(
    store: KVStore,
    csv_path: str,
    *,
    wipe: bool = True,
) -> Dict[str, Any]:
    """Load support emails from a CSV dataset, optionally replacing what is stored.

    CSV Columns (header required): sender,subject,body,sent_date
    Unknown / extra columns are ignored. Each row runs through process_email, so
    daily counters grow by one email per loaded row. The whole file is parsed
    before anything is deleted; an unreadable file leaves the store untouched.

    Parameters:
        store: key-value store.
        csv_path: path to CSV file.
        wipe: if True, every stored email is deleted before inserting new ones.
    Returns summary dict.
    """
    path = Path(csv_path)
    if not path.is_file():
        raise FileNotFoundError(f"Dataset file not found: {csv_path}")

    rows = read_rows(path)
    removed = wipe_emails(store) if wipe else 0

    loaded = 0
    errors = 0
    for raw in rows:
        try:
            require_fields(raw)
        except ValidationError:
            errors += 1
            continue
        process_email(raw, store)
        loaded += 1

    log.info("dataset_loaded", extra={"path": str(path)})
    return {
        "loaded": loaded,
        "errors": errors,
        "removed": removed,
        "wipe": wipe,
        "path": str(path.resolve()),
    }
