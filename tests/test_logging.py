import logging

import pytest
import structlog

from config.logging import configure_logging


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_output_carries_event_and_context(capsys):
    configure_logging("INFO", console=False)

    structlog.get_logger("test").bind(domain="a.com").info("scrape.start")

    line = capsys.readouterr().out.strip().splitlines()[-1]
    assert '"event": "scrape.start"' in line
    assert '"domain": "a.com"' in line
    assert '"timestamp"' in line


def test_level_filters_debug(capsys):
    configure_logging("INFO", console=False)

    structlog.get_logger("test").debug("scrape.finish")

    assert "scrape.finish" not in capsys.readouterr().out
