from dataclasses import dataclass

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from shiftbook.config import Settings
from shiftbook.db.base import Base, make_engine, make_session_factory
from shiftbook.db.feed import ChangeFeed, MonthlyReportWatcher, log_change


@dataclass
class AppContext:
    """Everything a request needs, built once at process start."""
    settings: Settings
    engine: Engine
    session_factory: sessionmaker
    feed: ChangeFeed
    watcher: MonthlyReportWatcher

    @classmethod
    def build(cls, settings: Settings) -> "AppContext":
        engine = make_engine(settings.database_url)
        Base.metadata.create_all(bind=engine)
        session_factory = make_session_factory(engine)

        feed = ChangeFeed()
        watcher = MonthlyReportWatcher(session_factory)
        feed.subscribe(log_change)
        feed.subscribe(watcher)
        return cls(settings=settings, engine=engine, session_factory=session_factory,
                   feed=feed, watcher=watcher)

    def close(self) -> None:
        self.engine.dispose()
