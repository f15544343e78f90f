# tests/utils/test_logging_config.py
import json
import logging

import structlog

from opening_trainer.utils.logging_config import setup_logging


def test_log_file_receives_json_lines(tmp_path):
    log_file = tmp_path / "trainer.log"
    setup_logging(log_level="DEBUG", log_to_console=False, log_file=log_file)

    structlog.get_logger("opening_trainer.test").info("Loaded opening.", opening="italian")
    logging.getLogger("opening_trainer.stdlib").warning("plain stdlib record")
    for handler in logging.getLogger().handlers:
        handler.flush()

    records = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert records[0]["event"] == "Loaded opening."
    assert records[0]["opening"] == "italian"
    assert records[0]["level"] == "info"
    assert records[1]["event"] == "plain stdlib record"
    assert records[1]["level"] == "warning"


def test_log_level_is_applied():
    setup_logging(log_level="warning", log_to_console=True)

    assert logging.getLogger().level == logging.WARNING
