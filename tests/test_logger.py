"""Tests for logging setup."""

import logging

import pytest
from rich.logging import RichHandler

from codeflow.utils.config import config
from codeflow.utils.logger import setup_from_config, setup_logger


@pytest.fixture(autouse=True)
def _restore_loggers():
    yield
    for name in ("codeflow", "codeflow.server", "codeflow.analyzers.javascript"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)


def test_package_level_and_rich_console():
    logger = setup_logger(level="warning")
    assert logger.name == "codeflow"
    assert logger.level == logging.WARNING
    assert [type(h) for h in logger.handlers] == [RichHandler]


def test_plain_console_output():
    logger = setup_logger(rich_output=False)
    assert type(logger.handlers[0]) is logging.StreamHandler


def test_module_levels_override_package_level():
    setup_logger(level="INFO", module_levels={"server": "ERROR", "analyzers.javascript": "DEBUG"})
    assert logging.getLogger("codeflow.server").getEffectiveLevel() == logging.ERROR
    assert logging.getLogger("codeflow.analyzers.javascript").getEffectiveLevel() == logging.DEBUG
    assert logging.getLogger("codeflow.storage").getEffectiveLevel() == logging.INFO


def test_repeated_setup_replaces_handlers(tmp_path):
    setup_logger(log_file=tmp_path / "a.log")
    logger = setup_logger()
    assert len(logger.handlers) == 1


def test_setup_from_config_file(tmp_path):
    log_file = tmp_path / "logs" / "codeflow.log"
    path = tmp_path / "config.yaml"
    path.write_text(
        "logging:\n"
        "  level: ERROR\n"
        f"  file: {log_file.as_posix()}\n"
        "  rich: false\n"
        "  modules:\n"
        "    server: DEBUG\n",
        encoding="utf-8",
    )
    config.load(path)

    logger = setup_from_config(config)
    logging.getLogger("codeflow.server").debug("server detail")
    logging.getLogger("codeflow.storage").warning("filtered out")

    assert logger.level == logging.ERROR
    for handler in logger.handlers:
        handler.flush()
    content = log_file.read_text(encoding="utf-8")
    assert "codeflow.server: server detail" in content
    assert "filtered out" not in content


def test_verbose_forces_debug(config_file):
    config.load(config_file)
    assert setup_from_config(config).level == logging.WARNING
    assert setup_from_config(config, verbose=True).level == logging.DEBUG
