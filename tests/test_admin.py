from decimal import Decimal

from conftest import make_employee, make_shift


def test_ping(client):
    assert client.get("/admin/ping").json() == {"ok": True, "where": "admin"}


def test_employee_pages(client):
    r = client.post("/admin/employees/new", data={"full_name": "Zeynep", "hourly_rate": "130",
                                                   "active": "true"}, follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/admin/employees?ok=1"

    page = client.get("/admin/employees")
    assert page.status_code == 200
    assert "Zeynep" in page.text
    assert "130.00" in page.text

    r = client.post("/admin/employees/new", data={"full_name": "", "hourly_rate": "130"},
                    follow_redirects=False)
    assert "error=" in r.headers["location"]


def test_toggle_and_filter(client):
    e = make_employee(client, "Kaan")
    client.post(f"/admin/employees/{e['id']}/toggle")

    assert client.get(f"/employees/{e['id']}").json()["active"] is False
    assert "Kaan" in client.get("/admin/employees?status=inactive").text
    assert "Kaan" not in client.get("/admin/employees?status=active").text


def test_shift_pages(client):
    e = make_employee(client, "Selin")
    r = client.post("/admin/shifts/new", data={"employee_id": e["id"], "date": "2025-09-10",
                                                "start": "21:00", "end": "05:00", "break_min": 30},
                    follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/admin/shifts?month=2025-09&ok=1"

    page = client.get("/admin/shifts?month=2025-09")
    assert "Selin" in page.text
    assert "7.50" in page.text
    assert "1 shifts, 0 leave days" in page.text


def test_shift_page_rejects_bad_entries(client):
    e = make_employee(client, "Onur", active=False)
    r = client.post("/admin/shifts/new", data={"employee_id": e["id"], "date": "2025-09-10",
                                                "start": "09:00", "end": "17:00"},
                    follow_redirects=False)
    assert "error=" in r.headers["location"]

    r = client.post("/admin/shifts/new", data={"employee_id": e["id"], "date": "2025-02-30"},
                    follow_redirects=False)
    assert "error=" in r.headers["location"]


def test_leave_shows_label(client):
    e = make_employee(client, "Ece")
    make_shift(client, e["id"], day="2025-09-03", is_leave="true", leave_type="unpaid")
    page = client.get("/admin/shifts?month=2025-09")
    assert "Unpaid leave" in page.text
    assert "0 shifts, 1 leave days" in page.text


def test_seed_demo_data(client, ctx):
    seen = []
    ctx.feed.subscribe(seen.append)
    r = client.post("/admin/seed", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/admin/employees?ok=seeded-4"

    # every seeded row goes through the feed, so the September summary is fresh
    assert [c.entity for c in seen].count("employee") == 4
    assert [c.entity for c in seen].count("shift") == 7
    fresh = {row.employee.full_name: row.total_hours for row in ctx.watcher.latest["2025-09"]}
    assert fresh["Mustafa (1)"] == Decimal("30.00")

    employees = client.get("/employees").json()
    assert len(employees) == 4
    assert sum(1 for e in employees if not e["active"]) == 1

    report = client.get("/reports/monthly", params={"year": 2025, "month": 9}).json()
    hours = {r["employee"]["full_name"]: r["total_hours"] for r in report["rows"]}
    assert hours == {"Mustafa (1)": "30.00", "Mustafa (2)": "14.75",
                     "Ayse Yilmaz": "14.50", "Mehmet Demir": "0.00"}


def test_seed_refuses_a_store_with_employees(client):
    client.post("/admin/seed")
    r = client.post("/admin/seed", follow_redirects=False)

    assert r.status_code == 303
    assert "error=" in r.headers["location"]
    assert len(client.get("/employees").json()) == 4
