import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.models import ANALYTICS_COUNTERS, AnalyticsCounter, AnalyticsEvent, Business

logger = logging.getLogger(__name__)

# Event types that bump a counter; anything else is only appended to the event log
COUNTER_FOR_EVENT = {
    "visitor": "visitor_count",
    "call_click": "call_clicks",
    "whatsapp_click": "whatsapp_clicks",
    "whatsapp_widget_click": "whatsapp_clicks",
    "gallery_view": "gallery_views",
    "map_click": "map_clicks",
}

PERIOD_DAYS = {
    "week": 7,
    "month": 30,
}


class AnalyticsRecorder:
    """
    Counts visitor interactions per business.

    Recording never fails from the caller's point of view: a broken write is
    rolled back, logged and dropped.
    """

    def __init__(self, db: Session):
        self.db = db

    def record_event(self, business_id: Optional[int], event_type: Optional[str]) -> bool:
        if not business_id or not event_type:
            return True

        try:
            exists = self.db.query(Business.id).filter(Business.id == business_id).first()
            if exists is None:
                logger.debug(f"Analytics event for unknown business {business_id} ignored")
                return True

            self.db.add(AnalyticsEvent(business_id=business_id, event_type=event_type))
            counter = COUNTER_FOR_EVENT.get(event_type)
            if counter:
                self._increment(business_id, counter)
            self.db.commit()
        except Exception as exc:
            self.db.rollback()
            logger.warning(f"Failed to record analytics event {event_type!r} for business {business_id}: {exc}")
        return True

    def _increment(self, business_id: int, counter: str) -> None:
        row = self.db.query(AnalyticsCounter).filter(AnalyticsCounter.business_id == business_id).first()
        if row is None:
            row = AnalyticsCounter(business_id=business_id, **{name: 0 for name in ANALYTICS_COUNTERS})
            self.db.add(row)
            self.db.flush()
        # Incremented in SQL so concurrent beacons do not overwrite each other
        self.db.query(AnalyticsCounter).filter(AnalyticsCounter.id == row.id).update(
            {counter: getattr(AnalyticsCounter, counter) + 1}, synchronize_session=False
        )

    def get_stats(self, business_id: int) -> Dict[str, int]:
        row = self.db.query(AnalyticsCounter).filter(AnalyticsCounter.business_id == business_id).first()
        return {name: (getattr(row, name) or 0) if row else 0 for name in ANALYTICS_COUNTERS}

    def get_time_based_stats(
        self, business_id: int, period: str = "all", now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """
        Event counts for the last week, month or all time.

        Counters are derived from the event log so they respect the period.
        Unknown periods fall back to ``all``.
        """
        if period not in PERIOD_DAYS:
            period = "all"

        query = self.db.query(AnalyticsEvent.event_type, func.count(AnalyticsEvent.id)).filter(
            AnalyticsEvent.business_id == business_id
        )
        if period in PERIOD_DAYS:
            since = (now or datetime.utcnow()) - timedelta(days=PERIOD_DAYS[period])
            query = query.filter(AnalyticsEvent.created_at >= since)

        breakdown = {event_type: count for event_type, count in query.group_by(AnalyticsEvent.event_type).all()}

        totals = {name: 0 for name in ANALYTICS_COUNTERS}
        for event_type, count in breakdown.items():
            counter = COUNTER_FOR_EVENT.get(event_type)
            if counter:
                totals[counter] += count
        totals["total_events"] = sum(breakdown.values())

        return {"period": period, "totals": totals, "breakdown": breakdown}
