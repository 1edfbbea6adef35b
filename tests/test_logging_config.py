# Tests for the error log setup

import logging
import sys

from chaos.config import logging_config
from chaos.config.config_chaos import VERSION


def raised(exc):
    try:
        raise exc
    except type(exc):
        return sys.exc_info()


def test_uncaught_exception_is_logged(caplog, capsys, monkeypatch, tmp_path):
    monkeypatch.setattr(logging_config, "_log_file", tmp_path / "error.log")
    monkeypatch.setattr(logging_config, "_command", "get")

    with caplog.at_level(logging.ERROR):
        logging_config.log_uncaught_exceptions(*raised(RuntimeError("boom")))

    assert f"chaos {VERSION} crashed in command 'get'" in caplog.text
    assert "RuntimeError: boom" in caplog.text
    assert "test_logging_config.py:" in caplog.text
    err = capsys.readouterr().err
    assert "chaos get failed unexpectedly" in err
    assert str(tmp_path / "error.log") in err


def test_crash_before_a_command_is_known(caplog, monkeypatch):
    monkeypatch.setattr(logging_config, "_command", None)

    with caplog.at_level(logging.ERROR):
        logging_config.log_uncaught_exceptions(*raised(ValueError("early")))

    assert "crashed in command '<none>'" in caplog.text


def test_setup_is_skipped_when_configured(tmp_path, monkeypatch):
    monkeypatch.setattr(logging_config, "_command", None)
    handler = logging.NullHandler()
    logging.getLogger().addHandler(handler)
    hook = sys.excepthook
    try:
        logging_config.setup_logging(tmp_path / "error.log", command="rm")
    finally:
        logging.getLogger().removeHandler(handler)

    assert sys.excepthook is hook
    assert not (tmp_path / "error.log").exists()
    assert logging_config._command == "rm"
