from __future__ import annotations

import logging

from oil_bulletin.logging.init import (
    LOGGER_NAME,
    SUMMARY_LEVEL,
    get_logger,
    log_summary,
    setup_logging,
)


def test_setup_logging_is_idempotent(fresh_logging):
    first = setup_logging()
    second = setup_logging()
    assert first is second
    assert len(first.handlers) == 1
    assert first.propagate is False


def test_labels_on_stdout(fresh_logging, capsys):
    logger = setup_logging()
    logger.info("starting")
    logger.warning("no link found")
    logger.error("fetch: boom")
    log_summary("sources=1 success=1")
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "INFO starting",
        "WARN no link found",
        "ERROR fetch: boom",
        "SUMMARY sources=1 success=1",
    ]


def test_debug_hidden_by_default(fresh_logging, capsys):
    logger = setup_logging()
    logger.debug("hidden")
    assert capsys.readouterr().out == ""


def test_debug_switch_after_first_setup(fresh_logging, capsys):
    setup_logging()
    logger = setup_logging(debug=True)
    logger.debug("visible")
    assert capsys.readouterr().out == "DEBUG visible\n"


def test_module_loggers_share_handler(fresh_logging, capsys):
    setup_logging()
    logging.getLogger(f"{LOGGER_NAME}.services.price_extractor").info("from module")
    assert capsys.readouterr().out == "INFO from module\n"


def test_get_logger_configures_on_first_use(fresh_logging):
    logger = get_logger()
    assert logger.name == LOGGER_NAME
    assert logging.getLevelName(SUMMARY_LEVEL) == "SUMMARY"


def test_debug_switch_back_off(fresh_logging, capsys):
    setup_logging(debug=True)
    logger = setup_logging(debug=False)
    logger.debug("hidden again")
    logger.info("shown")
    assert capsys.readouterr().out == "INFO shown\n"
