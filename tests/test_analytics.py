"""
Tests for analytics recording
"""
from datetime import datetime, timedelta

import pytest

from app.models.models import AnalyticsEvent
from app.services import business_service
from app.services.analytics_service import AnalyticsRecorder


@pytest.mark.unit
class TestRecordEvent:
    """Tests for recording page interactions"""

    def test_counts_and_logs_event(self, db, test_business):
        recorder = AnalyticsRecorder(db)
        assert recorder.record_event(test_business.id, "visitor") is True
        recorder.record_event(test_business.id, "visitor")
        recorder.record_event(test_business.id, "whatsapp_click")
        recorder.record_event(test_business.id, "whatsapp_widget_click")

        stats = recorder.get_stats(test_business.id)
        assert stats["visitor_count"] == 2
        assert stats["whatsapp_clicks"] == 2
        assert stats["call_clicks"] == 0
        assert db.query(AnalyticsEvent).count() == 4

    def test_unknown_event_type_only_logged(self, db, test_business):
        recorder = AnalyticsRecorder(db)
        recorder.record_event(test_business.id, "share_click")
        assert recorder.get_stats(test_business.id) == {
            "visitor_count": 0, "call_clicks": 0, "whatsapp_clicks": 0, "gallery_views": 0, "map_clicks": 0,
        }
        assert db.query(AnalyticsEvent).filter(AnalyticsEvent.event_type == "share_click").count() == 1

    def test_missing_input_is_ignored(self, db, test_business):
        recorder = AnalyticsRecorder(db)
        assert recorder.record_event(None, "visitor") is True
        assert recorder.record_event(test_business.id, None) is True
        assert recorder.record_event(999, "visitor") is True
        assert db.query(AnalyticsEvent).count() == 0

    def test_counter_failure_is_absorbed(self, db, test_business, monkeypatch):
        def broken_increment(self, business_id, counter):
            raise RuntimeError("counter table unavailable")

        monkeypatch.setattr(AnalyticsRecorder, "_increment", broken_increment)
        assert AnalyticsRecorder(db).record_event(test_business.id, "whatsapp_click") is True
        assert db.query(AnalyticsEvent).count() == 0

    def test_track_event_tolerates_malformed_id(self, db, test_business):
        business_service.track_event(db, "not-a-number", "visitor")
        business_service.track_event(db, str(test_business.id), "call_click")
        assert AnalyticsRecorder(db).get_stats(test_business.id)["call_clicks"] == 1


@pytest.mark.unit
class TestTimeBasedStats:
    """Tests for period statistics"""

    def test_period_filters_old_events(self, db, test_business):
        now = datetime(2026, 6, 30, 12, 0)
        db.add_all([
            AnalyticsEvent(business_id=test_business.id, event_type="visitor", created_at=now - timedelta(days=1)),
            AnalyticsEvent(business_id=test_business.id, event_type="map_click", created_at=now - timedelta(days=10)),
            AnalyticsEvent(business_id=test_business.id, event_type="visitor", created_at=now - timedelta(days=60)),
        ])
        db.commit()
        recorder = AnalyticsRecorder(db)

        week = recorder.get_time_based_stats(test_business.id, "week", now=now)
        assert week["totals"]["visitor_count"] == 1
        assert week["totals"]["map_clicks"] == 0
        assert week["totals"]["total_events"] == 1

        month = recorder.get_time_based_stats(test_business.id, "month", now=now)
        assert month["breakdown"] == {"visitor": 1, "map_click": 1}

        everything = recorder.get_time_based_stats(test_business.id, "decade", now=now)
        assert everything["period"] == "all"
        assert everything["totals"]["visitor_count"] == 2
        assert everything["totals"]["total_events"] == 3
