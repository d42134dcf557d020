"""Unit tests for logging helpers."""

import logging

from finternet_sdk.logging_config import configure_logging, get_logger, log_with_context


def test_log_with_context(caplog):
    logger = get_logger("finternet_sdk.tests")

    with caplog.at_level(logging.WARNING, logger="finternet_sdk.tests"):
        log_with_context(logger, "warning", "Skipping account", index=2, encoding="base58")

    assert caplog.records[-1].levelno == logging.WARNING
    assert caplog.records[-1].getMessage() == "Skipping account [index=2, encoding='base58']"


def test_log_without_context(caplog):
    logger = get_logger("finternet_sdk.tests")

    with caplog.at_level(logging.INFO, logger="finternet_sdk.tests"):
        log_with_context(logger, "info", "plain")

    assert caplog.records[-1].getMessage() == "plain"


def test_configure_logging_quiets_transport_loggers():
    configure_logging("DEBUG")

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING
