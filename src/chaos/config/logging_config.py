import logging
import os
import sys
import traceback
import pendulum

from chaos.config.config_chaos import DATA_DIR, LOG_FILE_NAME, VERSION

LOG_FILE = DATA_DIR / LOG_FILE_NAME

_log_file = LOG_FILE
_command = None

def setup_logging(log_file=LOG_FILE, command: str | None = None) -> None:
    """
    Send errors to a log file and catch uncaught exceptions.

    command names the subcommand being run; it goes into the crash
    record. The log file's directory must exist. Calling this again once
    the root logger has handlers only updates the command.
    """
    global _log_file, _command

    _command = command
    if logging.getLogger().handlers:
        return  # already configured

    _log_file = log_file
    logging.basicConfig(
        filename=str(log_file),
        filemode="a",
        level=logging.ERROR,
        format="%(message)s",
    )

    sys.excepthook = log_uncaught_exceptions


def log_uncaught_exceptions(exctype, value, tb):
    """Write a short crash record for chaos and point the user at it."""
    now = pendulum.now().to_iso8601_string()

    # innermost frame first, file names only
    frames = [
        f'  {os.path.basename(frame.filename)}:{frame.lineno} in {frame.name}'
        for frame in reversed(traceback.extract_tb(tb))
    ]
    where = "\n".join(frames) or "  <no traceback>"
    command = _command or "<none>"

    logging.error(
        f"[{now}] chaos {VERSION} crashed in command '{command}'\n"
        f"{exctype.__name__}: {value}\n"
        f"{where}\n"
    )

    print(f"\nError! chaos {command} failed unexpectedly.", file=sys.stderr)
    print(f"Details saved to {_log_file}\n", file=sys.stderr)
