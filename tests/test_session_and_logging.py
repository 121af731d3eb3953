import logging

import pytest
from sqlalchemy.orm import sessionmaker

from journeyapi.database.session import get_db_context
from journeyapi.logging_config import ACCESS_LOGGER, APP_LOGGER, build_logging_config, setup_logging
from journeyapi.models import User


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


class TestDbContext:
    def test_commits_on_success(self, session_factory):
        with get_db_context(session_factory) as db:
            db.add(User(device_id="script-device", points=0, is_active=True))

        with session_factory() as check:
            assert check.query(User).filter(User.device_id == "script-device").count() == 1

    def test_rolls_back_on_error(self, session_factory):
        with pytest.raises(RuntimeError):
            with get_db_context(session_factory) as db:
                db.add(User(device_id="doomed-device", points=0, is_active=True))
                db.flush()
                raise RuntimeError("boom")

        with session_factory() as check:
            assert check.query(User).filter(User.device_id == "doomed-device").count() == 0


class TestLoggingConfig:
    def test_access_lines_do_not_propagate(self):
        config = build_logging_config("debug")

        access = config["loggers"][ACCESS_LOGGER]
        assert access["handlers"] == ["access"]
        assert access["propagate"] is False
        assert access["level"] == "DEBUG"

    def test_sql_echo_toggles_engine_logger(self):
        assert build_logging_config()["loggers"]["sqlalchemy.engine"]["level"] == "WARNING"
        assert build_logging_config(sql_echo=True)["loggers"]["sqlalchemy.engine"]["level"] == "INFO"

    def test_setup_applies_levels(self):
        setup_logging("warning")
        try:
            assert logging.getLogger(APP_LOGGER).level == logging.WARNING
            assert logging.getLogger(ACCESS_LOGGER).level == logging.WARNING
        finally:
            setup_logging("INFO")
