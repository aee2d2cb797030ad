"""
Change notifications for the store.

Write endpoints publish a ``Change`` after each commit. Subscribers are plain
callables; ``MonthlyReportWatcher`` is the one that keeps a fresh monthly
summary around, recomputed from the store on every shift change.
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Deque, Dict, List, Optional, Tuple

from sqlalchemy.orm import sessionmaker

from shiftbook.db.queries import load_month_records, load_roster
from shiftbook.domain import MonthlySummaryRow
from shiftbook.report.monthly import summarize
from shiftbook.utils.timeutils import parse_period

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Change:
    entity: str                     # "employee" | "shift"
    action: str                     # "created" | "updated" | "deleted"
    entity_id: int
    periods: Tuple[str, ...] = ()   # affected "YYYY-MM" months, shifts only
    at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict:
        return {"entity": self.entity, "action": self.action, "entity_id": self.entity_id,
                "periods": list(self.periods), "at": self.at.isoformat()}


Subscriber = Callable[[Change], None]

HISTORY_LIMIT = 200


class ChangeFeed:
    def __init__(self, history_limit: int = HISTORY_LIMIT):
        self._subscribers: List[Subscriber] = []
        # only the most recent changes are kept
        self.history: Deque[Change] = deque(maxlen=history_limit)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback; returns a function that removes it again."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, change: Change) -> None:
        self.history.append(change)
        for callback in list(self._subscribers):
            try:
                callback(change)
            except Exception:
                # the write is already committed at this point
                log.exception("Change subscriber %r failed on %s", callback, change)

    def recent(self, limit: int = 20) -> List[Change]:
        """Newest changes first."""
        return list(self.history)[::-1][:limit]

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)


def log_change(change: Change) -> None:
    log.info("%s %s: %s %s", change.entity.capitalize(), change.action, change.entity_id,
             ",".join(change.periods))


class MonthlyReportWatcher:
    """Keeps the latest summary for every month touched by a change."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory
        self.latest: Dict[str, List[MonthlySummaryRow]] = {}

    def __call__(self, change: Change) -> None:
        if change.entity == "employee":
            # rate or name changes affect every month already computed
            periods = tuple(self.latest)
        else:
            periods = change.periods
        for period in periods:
            self.refresh(period)

    def refresh(self, period: str) -> Optional[List[MonthlySummaryRow]]:
        parsed = parse_period(period)
        if parsed is None:
            return None
        y, m = parsed
        db = self.session_factory()
        try:
            rows = summarize(load_month_records(db, y, m), load_roster(db))
        finally:
            db.close()
        self.latest[period] = rows
        log.info("Monthly summary refreshed for %s (%d employees)", period, len(rows))
        return rows
