"""CLI utility to wipe & load the support emails dataset into the key-value store.

Usage:
  python -m backend.app.scripts.load_dataset -p backend/app/data/sample_emails.csv

By default it wipes existing emails. Pass --no-wipe to keep existing and append.
"""
import argparse
from pathlib import Path

from ..core.errors import ValidationError
from ..core.logging import init_logging
from ..db.database import SessionLocal, ensure_schema
from ..services.dataset_loader import dataset_path, load_dataset
from ..services.kv_store import KVStore


def main(argv=None):
    parser = argparse.ArgumentParser(description="Load support emails dataset into the store")
    parser.add_argument("-p", "--path", dest="path", required=False, default=dataset_path(), help="Path to CSV dataset")
    parser.add_argument("--no-wipe", action="store_true", help="Do not delete existing emails (append instead)")
    parser.add_argument("--log-level", dest="log_level", default=None, help="Override LOG_LEVEL for this run")
    args = parser.parse_args(argv)

    csv_path = Path(args.path)
    if not csv_path.is_file():
        raise SystemExit(f"Dataset file not found: {csv_path}")

    init_logging(args.log_level)
    ensure_schema()
    session = SessionLocal()
    try:
        try:
            summary = load_dataset(KVStore(session), str(csv_path), wipe=not args.no_wipe)
        except ValidationError as e:
            raise SystemExit(str(e))
        print("Dataset load summary:")
        for k, v in summary.items():
            print(f"  {k}: {v}")
    finally:
        session.close()
    return summary


if __name__ == "__main__":  # pragma: no cover
    main()
