import os

# importing shiftbook.main builds the module-level app; keep it off disk
os.environ.setdefault("SHIFTBOOK_DATABASE_URL", "sqlite://")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from shiftbook.config import Settings
from shiftbook.domain import EmployeeRef
from shiftbook.main import create_app


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", shop_name="Test Shop", timezone="Europe/Istanbul")


@pytest.fixture
def app(settings):
    application = create_app(settings)
    yield application
    application.state.ctx.close()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def ctx(app):
    return app.state.ctx


def make_employee(client, full_name="Ayse", hourly_rate="100", active=True):
    r = client.post("/employees", data={
        "full_name": full_name, "hourly_rate": hourly_rate, "active": str(active).lower(),
    })
    assert r.status_code == 200, r.text
    return r.json()["employee"]


def make_shift(client, employee_id, day="2025-09-10", start="09:00", end="17:00", break_min=0, **extra):
    data = {"employee_id": employee_id, "date": day, "start": start, "end": end,
            "break_min": break_min}
    data.update(extra)
    r = client.post("/shifts", data=data)
    assert r.status_code == 200, r.text
    return r.json()["shift"]


def emp(id, rate="100", name=None, active=True):
    return EmployeeRef(id=id, full_name=name or f"Employee {id}", hourly_rate=Decimal(rate), active=active)
