from decimal import Decimal

from conftest import make_employee, make_shift

from shiftbook.db.feed import Change, ChangeFeed


def test_subscribe_and_unsubscribe():
    feed = ChangeFeed()
    seen = []
    unsubscribe = feed.subscribe(seen.append)

    feed.publish(Change("shift", "created", 1, ("2025-09",)))
    unsubscribe()
    feed.publish(Change("shift", "deleted", 1, ("2025-09",)))

    assert [c.action for c in seen] == ["created"]
    assert len(feed.history) == 2
    assert feed.subscriber_count == 0


def test_history_keeps_only_recent_changes():
    feed = ChangeFeed(history_limit=3)
    for i in range(10):
        feed.publish(Change("shift", "created", i, ("2025-09",)))

    assert len(feed.history) == 3
    assert [c.entity_id for c in feed.recent()] == [9, 8, 7]
    assert [c.entity_id for c in feed.recent(2)] == [9, 8]
    assert feed.recent(1)[0].to_dict()["periods"] == ["2025-09"]


def test_failing_subscriber_does_not_stop_others(caplog):
    feed = ChangeFeed()
    seen = []

    def broken(change):
        raise RuntimeError("boom")

    feed.subscribe(broken)
    feed.subscribe(seen.append)
    feed.publish(Change("employee", "updated", 3))

    assert len(seen) == 1
    assert "boom" in caplog.text


def test_write_endpoints_publish_changes(client, ctx):
    seen = []
    ctx.feed.subscribe(seen.append)

    e = make_employee(client)
    s = make_shift(client, e["id"], day="2025-09-30")
    client.put(f"/shifts/{s['id']}", data={"employee_id": e["id"], "date": "2025-10-01",
                                           "start": "09:00", "end": "12:00"})
    client.delete(f"/shifts/{s['id']}")

    assert [(c.entity, c.action) for c in seen] == [
        ("employee", "created"), ("shift", "created"), ("shift", "updated"), ("shift", "deleted"),
    ]
    assert seen[1].periods == ("2025-09",)
    assert seen[2].periods == ("2025-09", "2025-10")
    assert seen[3].periods == ("2025-10",)


def test_watcher_keeps_month_summary_fresh(client, ctx):
    e = make_employee(client, "Ayse", "100")
    make_shift(client, e["id"], day="2025-09-10", start="09:00", end="17:00")

    rows = ctx.watcher.latest["2025-09"]
    assert rows[0].total_hours == Decimal("8.00")

    make_shift(client, e["id"], day="2025-09-11", start="09:00", end="11:00")
    assert ctx.watcher.latest["2025-09"][0].total_hours == Decimal("10.00")

    # a rate change refreshes months already tracked
    client.put(f"/employees/{e['id']}", data={"hourly_rate": "200"})
    assert ctx.watcher.latest["2025-09"][0].total_pay == Decimal("2000.00")


def test_watcher_ignores_bad_period(ctx):
    assert ctx.watcher.refresh("not-a-month") is None
