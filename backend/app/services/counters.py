"""Per-day aggregate counters.

Keys look like ``stats:{metric}:{YYYY-MM-DD}`` where metric is one of
emails:total, emails:pending, emails:resolved, sentiment:{bucket},
priority:{bucket}. The day is the UTC date at the moment of the mutation,
never the email's sent_date.

Updates are read-then-write through get/mset; two requests racing on the same
key can lose an increment.
"""
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from ..schemas.email import Analytics, Comparison, DailyStats, PriorityCounts, SentimentCounts
from .kv_store import KVStore

TOTAL = 'emails:total'
PENDING = 'emails:pending'
RESOLVED = 'emails:resolved'


def day_of(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime('%Y-%m-%d')


def counter_key(metric: str, day: str) -> str:
    return f"stats:{metric}:{day}"


def read_counter(store: KVStore, metric: str, day: str) -> int:
    return int(store.get(counter_key(metric, day)) or 0)


def adjust(store: KVStore, deltas: Dict[str, int], now: Optional[datetime] = None) -> Dict[str, int]:
    """Apply deltas to today's counters with one mset. Values never drop below zero."""
    day = day_of(now)
    keys = [counter_key(m, day) for m in deltas]
    values = [max(0, read_counter(store, m, day) + d) for m, d in deltas.items()]
    store.mset(keys, values)
    return dict(zip(deltas, values))


def record_created(store: KVStore, sentiment: str, priority: str, now: Optional[datetime] = None):
    return adjust(store, {
        TOTAL: 1,
        PENDING: 1,
        f"sentiment:{sentiment}": 1,
        f"priority:{priority}": 1,
    }, now)


def record_closed(store: KVStore, now: Optional[datetime] = None):
    return adjust(store, {RESOLVED: 1, PENDING: -1}, now)


def daily_stats(store: KVStore, day: str) -> DailyStats:
    def read(metric: str) -> int:
        return read_counter(store, metric, day)

    return DailyStats(
        total=read(TOTAL),
        pending=read(PENDING),
        resolved=read(RESOLVED),
        sentiment=SentimentCounts(
            positive=read('sentiment:positive'),
            negative=read('sentiment:negative'),
            neutral=read('sentiment:neutral'),
        ),
        priority=PriorityCounts(
            urgent=read('priority:urgent'),
            normal=read('priority:normal'),
        ),
    )


def total_change(today_total: int, yesterday_total: int) -> float:
    return (today_total - yesterday_total) / max(1, yesterday_total) * 100


def analytics_summary(store: KVStore, now: Optional[datetime] = None) -> Analytics:
    now = now or datetime.now(timezone.utc)
    today = daily_stats(store, day_of(now))
    yesterday_total = read_counter(store, TOTAL, day_of(now - timedelta(days=1)))
    return Analytics(
        today=today,
        comparison=Comparison(totalChange=total_change(today.total, yesterday_total)),
    )
