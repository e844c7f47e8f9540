"""Monitoring run: alert rule, daily dedup, retry after failure, and per-game error isolation."""
from datetime import timedelta

import pytest

from conftest import E2E_HTML, E2E_HTML_LOW_STOCK, RECIPIENT, RECIPIENT_DIGITS, SENDER, FakeNotifier, StaticFetcher, fixed_clock, make_reading
from speetto_monitor.core.constants import TRACKED_GAMES, Game
from speetto_monitor.core.errors import MSG_SMS_NOT_CONFIGURED, PersistenceError
from speetto_monitor.models import GameReadingRow, NotificationLog
from speetto_monitor.services import alert_state_service
from speetto_monitor.services.monitoring_service import MonitoringService, RunOutcome
from speetto_monitor.services.sms import SendResult
from speetto_monitor.services.speetto import extract, is_eligible


def _service(db, settings, fetcher, notifier, now):
    return MonitoringService(db, settings, fetcher=fetcher, notifier=notifier, clock=fixed_clock(now))


def _logs(db):
    return db.query(NotificationLog).order_by(NotificationLog.id.asc()).all()


@pytest.fixture
def subscribed(db_session):
    alert_state_service.ensure_recipient(db_session, RECIPIENT, TRACKED_GAMES)
    return db_session


@pytest.mark.parametrize(
    "rate, first, expected",
    [(100, 1, True), (100, 0, False), (99, 5, False), (150, 2, True)],
)
def test_alert_rule(rate, first, expected):
    assert is_eligible(make_reading(rate=rate, first=first)) is expected


def test_alert_rule_uses_configured_threshold():
    assert is_eligible(make_reading(rate=80, first=1), stock_threshold=80)


def test_walkthrough_sends_exactly_one_alert(subscribed, test_settings, morning):
    fetcher = StaticFetcher(extract(E2E_HTML, today=morning.date()))
    notifier = FakeNotifier()

    summary = _service(subscribed, test_settings, fetcher, notifier, morning).run()

    assert summary.outcome == RunOutcome.SUCCESS
    assert (summary.games_checked, summary.alerts_sent) == (1, 1)
    assert fetcher.calls == [morning.date()]
    (sent,) = notifier.sent
    assert sent["to"] == RECIPIENT_DIGITS
    assert sent["from"] == SENDER
    assert sent["type"] == "LMS"
    assert "스피또1000 99회" in sent["text"]

    (log,) = _logs(subscribed)
    assert (log.phone_number, log.game_name, log.round, log.status) == (RECIPIENT_DIGITS, "speetto1000", 99, "sent")
    assert log.provider_message_id == "M1"
    assert log.sent_on == morning.date()


def test_second_run_same_day_does_not_resend(subscribed, test_settings, morning):
    fetcher = StaticFetcher(extract(E2E_HTML, today=morning.date()))
    notifier = FakeNotifier()

    _service(subscribed, test_settings, fetcher, notifier, morning).run()
    later = _service(subscribed, test_settings, fetcher, notifier, morning + timedelta(hours=3)).run()

    assert later.outcome == RunOutcome.SUCCESS
    assert later.alerts_sent == 0
    assert len(notifier.sent) == 1
    assert [log.status for log in _logs(subscribed)] == ["sent"]


def test_next_day_alerts_again(subscribed, test_settings, morning):
    fetcher = StaticFetcher(extract(E2E_HTML, today=morning.date()))
    notifier = FakeNotifier()

    _service(subscribed, test_settings, fetcher, notifier, morning).run()
    _service(subscribed, test_settings, fetcher, notifier, morning + timedelta(days=1)).run()

    assert len(notifier.sent) == 2
    assert [log.sent_on for log in _logs(subscribed)] == [morning.date(), morning.date() + timedelta(days=1)]


def test_low_stock_is_recorded_without_alert(subscribed, test_settings, morning):
    fetcher = StaticFetcher(extract(E2E_HTML_LOW_STOCK, today=morning.date()))
    notifier = FakeNotifier()

    summary = _service(subscribed, test_settings, fetcher, notifier, morning).run()

    assert summary.outcome == RunOutcome.SUCCESS
    assert summary.alerts_sent == 0
    assert notifier.sent == []
    assert _logs(subscribed) == []
    assert alert_state_service.latest_status(subscribed)[Game.SPEETTO1000].store_instock_rate == 14


def test_failed_send_is_retried_on_next_run(subscribed, test_settings, morning):
    fetcher = StaticFetcher([make_reading()])
    notifier = FakeNotifier(results=[SendResult(success=False, error="잔액 부족")])

    first = _service(subscribed, test_settings, fetcher, notifier, morning).run()
    assert first.outcome == RunOutcome.PARTIAL
    assert first.alerts_sent == 0
    assert "잔액 부족" in first.errors[0]

    second = _service(subscribed, test_settings, fetcher, notifier, morning + timedelta(minutes=30)).run()
    assert second.outcome == RunOutcome.SUCCESS
    assert second.alerts_sent == 1

    logs = _logs(subscribed)
    assert [log.status for log in logs] == ["failed", "sent"]
    assert logs[0].error == "잔액 부족"
    assert logs[0].provider_message_id is None


def test_persistence_failure_isolated_to_one_game(subscribed, test_settings, morning, monkeypatch):
    real_record = alert_state_service.record_reading

    def flaky_record(db, reading, now):
        if reading.game == Game.SPEETTO1000:
            raise PersistenceError("database is locked")
        return real_record(db, reading, now)

    monkeypatch.setattr(alert_state_service, "record_reading", flaky_record)
    fetcher = StaticFetcher([make_reading(Game.SPEETTO1000), make_reading(Game.SPEETTO2000, 61, first=2)])
    notifier = FakeNotifier()

    summary = _service(subscribed, test_settings, fetcher, notifier, morning).run()

    assert summary.outcome == RunOutcome.PARTIAL
    assert summary.games_checked == 2
    assert summary.alerts_sent == 1
    assert len(summary.errors) == 1
    assert "speetto1000" in summary.errors[0]
    (log,) = _logs(subscribed)
    assert (log.game_name, log.round) == ("speetto2000", 61)


def test_fetch_error_is_fatal(subscribed, test_settings, morning):
    def broken_fetcher(today):
        raise RuntimeError("source exploded")

    notifier = FakeNotifier()
    summary = _service(subscribed, test_settings, broken_fetcher, notifier, morning).run()

    assert summary.outcome == RunOutcome.FATAL
    assert summary.errors == ["source exploded"]
    assert notifier.sent == []
    assert subscribed.query(GameReadingRow).count() == 0


def test_recipient_lookup_error_is_fatal(subscribed, test_settings, morning, monkeypatch):
    def broken_lookup(db, game):
        raise PersistenceError("recipients table unavailable")

    monkeypatch.setattr(alert_state_service, "get_recipients_for", broken_lookup)
    summary = _service(subscribed, test_settings, StaticFetcher([make_reading()]), FakeNotifier(), morning).run()

    assert summary.outcome == RunOutcome.FATAL
    assert "recipients table unavailable" in summary.message
    assert subscribed.query(GameReadingRow).count() == 0


def test_missing_sms_client_still_persists_readings(subscribed, test_settings, morning):
    summary = _service(subscribed, test_settings, StaticFetcher([make_reading()]), None, morning).run()

    assert summary.outcome == RunOutcome.PARTIAL
    assert MSG_SMS_NOT_CONFIGURED in summary.errors[0]
    assert _logs(subscribed) == []
    assert Game.SPEETTO1000 in alert_state_service.latest_status(subscribed)


def test_fallback_flag_reaches_summary(subscribed, test_settings, morning):
    fetcher = StaticFetcher([make_reading(rate=14)], used_fallback=True)
    summary = _service(subscribed, test_settings, fetcher, FakeNotifier(), morning).run()

    assert summary.used_fallback is True
    assert summary.to_dict()["outcome"] == "success"


def test_one_recipient_failure_does_not_block_others(subscribed, test_settings, morning):
    alert_state_service.ensure_recipient(subscribed, "010-3333-4444", [Game.SPEETTO1000])
    notifier = FakeNotifier(results=[SendResult(success=False, error="invalid number")])

    summary = _service(subscribed, test_settings, StaticFetcher([make_reading()]), notifier, morning).run()

    assert summary.outcome == RunOutcome.PARTIAL
    assert summary.alerts_sent == 1
    assert [n["to"] for n in notifier.sent] == [RECIPIENT_DIGITS, "01033334444"]
    assert [(log.phone_number, log.status) for log in _logs(subscribed)] == [
        (RECIPIENT_DIGITS, "failed"),
        ("01033334444", "sent"),
    ]


def test_recipient_not_subscribed_to_game_is_skipped(db_session, test_settings, morning):
    alert_state_service.ensure_recipient(db_session, RECIPIENT, [Game.SPEETTO2000])
    notifier = FakeNotifier()

    summary = _service(db_session, test_settings, StaticFetcher([make_reading()]), notifier, morning).run()

    assert summary.outcome == RunOutcome.SUCCESS
    assert notifier.sent == []


def test_same_handset_in_two_formats_gets_one_alert(db_session, test_settings, morning):
    alert_state_service.ensure_recipient(db_session, "010-1111-2222", TRACKED_GAMES)
    alert_state_service.ensure_recipient(db_session, "01011112222", TRACKED_GAMES)
    notifier = FakeNotifier()

    summary = _service(db_session, test_settings, StaticFetcher([make_reading()]), notifier, morning).run()

    assert summary.alerts_sent == 1
    assert [n["to"] for n in notifier.sent] == [RECIPIENT_DIGITS]


def test_delivered_but_unrecorded_alert_is_logged(subscribed, test_settings, morning, monkeypatch, caplog):
    def broken_append(db, record):
        raise PersistenceError("database is locked")

    monkeypatch.setattr(alert_state_service, "append_notification", broken_append)
    notifier = FakeNotifier()

    with caplog.at_level("ERROR", logger="speetto_monitor.services.monitoring_service"):
        summary = _service(subscribed, test_settings, StaticFetcher([make_reading()]), notifier, morning).run()

    assert len(notifier.sent) == 1
    assert summary.outcome == RunOutcome.PARTIAL
    assert summary.alerts_sent == 0
    assert "database is locked" in summary.errors[0]
    assert any(
        "delivered but not recorded" in r.getMessage() and "M1" in r.getMessage() for r in caplog.records
    )


def test_failed_send_that_cannot_be_recorded_is_not_reported_as_delivered(
    subscribed, test_settings, morning, monkeypatch, caplog
):
    def broken_append(db, record):
        raise PersistenceError("database is locked")

    monkeypatch.setattr(alert_state_service, "append_notification", broken_append)
    notifier = FakeNotifier(results=[SendResult(success=False, error="invalid number")])

    with caplog.at_level("ERROR", logger="speetto_monitor.services.monitoring_service"):
        _service(subscribed, test_settings, StaticFetcher([make_reading()]), notifier, morning).run()

    assert not any("delivered but not recorded" in r.getMessage() for r in caplog.records)
