import heapq
import itertools
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Iterator

@dataclass(order=True)
class PrioritizedEmail:
    priority_rank: int
    # newest first: negated epoch seconds
    recency: float
    seq: int
    email_id: str = field(compare=False)
    data: Any = field(compare=False, default=None)

class EmailPriorityQueue:
    """Urgent before normal, then newest sent_date first, then insertion order."""

    def __init__(self):
        self._heap: List[PrioritizedEmail] = []
        self._counter = itertools.count()

    def push(self, email_id: str, urgency: str, sent_date: datetime, data=None):
        rank = 0 if urgency == 'urgent' else 1
        heapq.heappush(self._heap, PrioritizedEmail(rank, -sent_date.timestamp(), next(self._counter), email_id, data))

    def __len__(self):
        return len(self._heap)

    def __iter__(self) -> Iterator[PrioritizedEmail]:
        return (item for item in sorted(self._heap))
