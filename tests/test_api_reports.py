from io import BytesIO

from conftest import make_employee, make_shift
from openpyxl import load_workbook

from shiftbook.utils.timeutils import today_in


def _september(client):
    m1 = make_employee(client, "Mustafa (1)", "150")
    m2 = make_employee(client, "Mustafa (2)", "150")
    ay = make_employee(client, "Ayse", "140")
    old = make_employee(client, "Mehmet", "160")
    make_shift(client, m1["id"], day="2025-09-10", start="10:00", end="20:00", break_min=60)
    make_shift(client, m2["id"], day="2025-09-11", start="21:00", end="05:00", break_min=30)
    make_shift(client, m1["id"], day="2025-09-12", start="10:00", end="00:00", break_min=30)
    make_shift(client, ay["id"], day="2025-09-15", is_leave="true", leave_type="annual")
    make_shift(client, old["id"], day="2025-09-16", start="09:00", end="13:00")
    client.put(f"/employees/{old['id']}", data={"active": "false"})
    return m1, m2, ay, old


def test_monthly_report(client):
    _september(client)

    body = client.get("/reports/monthly", params={"year": 2025, "month": 9}).json()

    assert body["period"] == "2025-09"
    assert body["month_label"] == "September 2025"
    assert body["shop_name"] == "Test Shop"
    rows = [(r["employee"]["full_name"], r["total_hours"], r["total_pay"]) for r in body["rows"]]
    assert rows == [
        ("Mustafa (1)", "22.50", "3375.00"),
        ("Mustafa (2)", "7.50", "1125.00"),
        ("Mehmet", "4.00", "640.00"),
        ("Ayse", "0.00", "0.00"),
    ]
    assert body["rows"][2]["employee"]["active"] is False
    assert body["grand_total"] == {
        "total_hours": "34.00",
        "total_pay": "5140.00",
        "average_hourly_rate": "151.18",
        "employee_count": 3,
    }


def test_monthly_report_hide_empty(client):
    _september(client)
    body = client.get("/reports/monthly", params={"year": 2025, "month": 9, "hide_empty": "true"}).json()
    assert [r["employee"]["full_name"] for r in body["rows"]] == ["Mustafa (1)", "Mustafa (2)", "Mehmet"]
    assert body["grand_total"]["employee_count"] == 3


def test_monthly_report_skips_orphans(client):
    m1, m2, _, _ = _september(client)
    client.delete(f"/employees/{m2['id']}")

    body = client.get("/reports/monthly", params={"year": 2025, "month": 9}).json()

    assert len(body["rows"]) == 3
    assert body["grand_total"]["total_hours"] == "26.50"


def test_monthly_report_defaults_to_current_month(client, ctx):
    today = today_in(ctx.settings.timezone)
    body = client.get("/reports/monthly").json()
    assert body["period"] == f"{today.year:04d}-{today.month:02d}"
    assert client.get("/reports/monthly", params={"year": 2025, "month": 13}).status_code == 422


def test_monthly_report_is_repeatable(client):
    _september(client)
    first = client.get("/reports/monthly", params={"year": 2025, "month": 9}).json()
    second = client.get("/reports/monthly", params={"year": 2025, "month": 9}).json()
    assert first == second


def test_monthly_xlsx(client):
    _september(client)

    r = client.get("/reports/monthly.xlsx", params={"year": 2025, "month": 9})

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/vnd.openxmlformats")
    assert 'filename="Monthly_Report_2025-09.xlsx"' in r.headers["content-disposition"]
    ws = load_workbook(BytesIO(r.content)).active
    assert ws["A2"].value == "Test Shop"
    assert ws["A6"].value == "Mustafa (1)"
    assert ws["B6"].value == "22.50"
    assert ws["A11"].value == "GRAND TOTAL"
    assert ws["D11"].value == "5140.00"


def test_monthly_print(client):
    _september(client)
    r = client.get("/reports/monthly/print", params={"year": 2025, "month": 9})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert "Mustafa (1)" in r.text
    assert "₺5140.00" in r.text


def test_dashboard(client, ctx):
    today = today_in(ctx.settings.timezone).isoformat()
    a = make_employee(client, "A", "100")
    make_employee(client, "B", "100", active=False)
    make_shift(client, a["id"], day=today, start="09:00", end="13:30")
    make_shift(client, a["id"], day=today, is_leave="true", leave_type="excuse")

    body = client.get("/reports/dashboard").json()

    assert body["today"] == today
    assert body["today_shifts"] == 2
    assert body["weekly_hours"] == "4.50"
    assert body["monthly_hours"] == "4.50"
    assert body["active_employees"] == 1
    recent = body["recent_changes"]
    assert [(c["entity"], c["action"]) for c in recent][:2] == [("shift", "created"), ("shift", "created")]
    assert len(recent) == 4


def test_monthly_report_rejects_zero_month_and_year(client):
    assert client.get("/reports/monthly", params={"year": 2025, "month": 0}).status_code == 422
    assert client.get("/reports/monthly", params={"year": 0, "month": 9}).status_code == 422
    assert client.get("/reports/monthly.xlsx", params={"year": 2025, "month": 0}).status_code == 422
