import logging
from typing import Optional

from fastapi import FastAPI

from shiftbook.admin import routes as admin_routes
from shiftbook.api import employees, reports, shifts
from shiftbook.config import Settings, configure_logging
from shiftbook.context import AppContext

log = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.load()
    configure_logging(settings)
    ctx = AppContext.build(settings)

    app = FastAPI(title="Shiftbook API", version="0.1.0", docs_url="/docs", redoc_url="/redoc")
    app.state.ctx = ctx

    @app.get("/")
    def root(): return {"ok": True, "msg": "API is running", "shop": settings.shop_name}

    @app.get("/test")
    def test(): return {"ok": True, "msg": "Test endpoint is working"}

    app.include_router(employees.router)
    app.include_router(shifts.router)
    app.include_router(reports.router)
    app.include_router(admin_routes.router)   # admin pages

    log.info("Shiftbook ready for %s (db=%s, tz=%s)", settings.shop_name,
             ctx.engine.url.render_as_string(hide_password=True), settings.timezone)
    return app


app = create_app()
