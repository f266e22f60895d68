"""Thin key-value store over a single SQLAlchemy table.

Exposes exactly the operations the triage services consume:
get / set / get_by_prefix / mset / mdel. Values are JSON-serializable records
or integers. Any database failure is rolled back, logged and re-raised as
StoreError; nothing here retries.
"""
import logging
from contextlib import contextmanager
from typing import Any, Iterable, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import StoreError
from ..models.kv_model import KvEntry

log = logging.getLogger(__name__)


class KVStore:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, op: str, key: Optional[str] = None):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            log.error("store_error", exc_info=e, extra={"key": key or op})
            raise StoreError(f"{op} failed") from e

    def _entry(self, key: str) -> Optional[KvEntry]:
        return self.db.query(KvEntry).filter(KvEntry.key == key).first()

    def _put(self, key: str, value: Any):
        entry = self._entry(key)
        if entry is None:
            self.db.add(KvEntry(key=key, value=value))
        else:
            entry.value = value

    def get(self, key: str) -> Any:
        with self._guard("get", key):
            entry = self._entry(key)
            return entry.value if entry else None

    def set(self, key: str, value: Any) -> None:
        with self._guard("set", key):
            self._put(key, value)
            self.db.commit()

    def get_by_prefix(self, prefix: str) -> List[Any]:
        with self._guard("get_by_prefix", prefix):
            rows = (
                self.db.query(KvEntry)
                .filter(KvEntry.key.startswith(prefix, autoescape=True))
                .order_by(KvEntry.id)
                .all()
            )
            # sqlite LIKE ignores ASCII case
            return [r.value for r in rows if r.key.startswith(prefix)]

    def mset(self, keys: Sequence[str], values: Sequence[Any]) -> None:
        if len(keys) != len(values):
            raise ValueError("mset requires as many values as keys")
        with self._guard("mset"):
            for key, value in zip(keys, values):
                self._put(key, value)
                # flush so a repeated key in the same batch updates instead of inserting twice
                self.db.flush()
            self.db.commit()

    def mdel(self, keys: Iterable[str]) -> None:
        keys = list(keys)
        if not keys:
            return
        with self._guard("mdel"):
            self.db.query(KvEntry).filter(KvEntry.key.in_(keys)).delete(synchronize_session=False)
            self.db.commit()

    def count_prefix(self, prefix: str) -> int:
        with self._guard("count_prefix", prefix):
            return self.db.query(KvEntry).filter(KvEntry.key.startswith(prefix, autoescape=True)).count()


def get_store():
    from ..db.database import SessionLocal
    db = SessionLocal()
    try:
        yield KVStore(db)
    finally:
        db.close()
