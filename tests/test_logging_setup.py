# tests/test_logging_setup.py
import logging

from tech_news.logging_setup import get_logger, request_id_var, setup_logging


def test_records_carry_request_id(tmp_path):
    log_file = setup_logging(tmp_path / "logs" / "tech_news.log", "DEBUG")
    try:
        token = request_id_var.set("req-42")
        try:
            get_logger("tech_news.checks").debug("HELLO")
        finally:
            request_id_var.reset(token)
        get_logger("tech_news.checks").info("OUTSIDE")
        for handler in logging.getLogger("tech_news").handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "LOGGING_READY" in text
        assert "req=req-42 | HELLO" in text
        assert "req=- | OUTSIDE" in text
    finally:
        setup_logging()
