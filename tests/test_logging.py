"""Tests for logging helpers."""

import io
import logging

from assetkit.logging import (
    disable,
    enable,
    get_logger,
    get_plugin_logger,
    set_level,
    setup_logging,
)


class TestLogging:
    def test_get_logger_prefixes_package(self) -> None:
        assert get_logger("registry").name == "assetkit.registry"
        assert get_logger("assetkit.host").name == "assetkit.host"

    def test_plugin_logger_name(self) -> None:
        assert get_plugin_logger("stats").name == "assetkit.plugin.stats"

    def test_setup_logging_writes_to_stream(self) -> None:
        stream = io.StringIO()
        setup_logging("INFO", format="%(name)s %(message)s", stream=stream)

        get_logger("host").info("hello")

        assert stream.getvalue() == "assetkit.host hello\n"

    def test_set_level(self) -> None:
        set_level("warning")
        assert logging.getLogger("assetkit").level == logging.WARNING

        set_level(logging.DEBUG)
        assert logging.getLogger("assetkit").level == logging.DEBUG

    def test_disable_and_enable(self) -> None:
        stream = io.StringIO()
        setup_logging("INFO", format="%(message)s", stream=stream)
        logger = get_logger("host")

        disable()
        logger.info("hidden")
        enable()
        logger.info("shown")

        assert stream.getvalue() == "shown\n"
