"""Tests for the logging helpers."""

import logging

from getnet_recon.core.logging import get_logger, setup_logging


def test_module_loggers_share_the_application_namespace():
    assert get_logger("getnet_recon.services.ingestion.parser").name == (
        "getnet_recon.services.ingestion.parser"
    )
    assert get_logger("scripts").name == "getnet_recon.scripts"


def test_setup_logging_is_idempotent():
    logger = setup_logging("DEBUG")
    handlers = list(logger.handlers)

    again = setup_logging("warning")

    assert again is logger
    assert again.handlers == handlers
    assert again.level == logging.WARNING
    setup_logging("INFO")


def test_unknown_level_falls_back_to_info():
    assert setup_logging("LOUD").level == logging.INFO
