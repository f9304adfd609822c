import logging

import pytest

from config import Settings
from utils.logging_config import PeeweeFilter, setup_logging


def _record(msg: str, sql: str | None = None) -> logging.LogRecord:
    record = logging.LogRecord("peewee", logging.DEBUG, "", 0, msg, None, None)
    if sql is not None:
        record.sql = sql
    return record


@pytest.mark.parametrize(
    "record",
    [
        _record("SELECT * FROM orders"),
        _record("ignored", sql="  SELECT COUNT(1) FROM orders"),
    ],
)
def test_filter_hides_select(record):
    assert not PeeweeFilter().filter(record)


@pytest.mark.parametrize("query", ['UPDATE "orders" SET "manager_id" = ?', "INSERT INTO comment VALUES (1)"])
def test_filter_keeps_writes(query):
    assert PeeweeFilter().filter(_record(query))
    assert PeeweeFilter().filter(_record("ignored", sql=f"   {query}"))


def test_setup_logging_writes_log_file(tmp_path):
    settings = Settings(log_dir=str(tmp_path / "logs"), log_level="WARNING")
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging(settings)
        assert root.level == logging.WARNING
        logging.getLogger("services.order_service").warning("Order not found")
        for handler in root.handlers:
            handler.flush()
        assert "Order not found" in (tmp_path / "logs" / "crm.log").read_text(encoding="utf-8")
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
        logging.getLogger("peewee").filters.clear()
