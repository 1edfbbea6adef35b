# config_chaos.py
"""
Configuration constants
"""
from pathlib import Path
# ==============================================================
# Data directory
# ==============================================================
# Software version
VERSION = "0.3.0"

# Everything chaos keeps lives here. The directory is a git repository.
DATA_DIR = Path("~/.chaos").expanduser()

DATA_FILE_NAME = "data.json"
KEY_FILE_NAME = "key"
LOG_FILE_NAME = "error.log"

# Permissions. The key file is read-only for the owner once written.
DATA_DIR_MODE = 0o700
DATA_FILE_MODE = 0o600
KEY_FILE_MODE = 0o400

# Commit every change of the data file
USE_GIT = True
GIT_USER = "chaos"

# ==============================================================
# Derivation
# ==============================================================
# XSalsa20 parameters. Changing these invalidates every password. DO NOT CHANGE
KEY_LEN = 32
SALT_LEN = 24

# ==============================================================
# New entry defaults
# ==============================================================
DEFAULT_FORMAT = 1          # see FormatChoice
DEFAULT_LENGTH = 20         # characters
MAX_LENGTH = 1024

# ==============================================================
# Clipboard
# ==============================================================
CLIPBOARD_TIMEOUT = 30      # Seconds before auto-clear

# ==============================================================
# Display & formatting
# ==============================================================
UTF8 = "utf-8"
TITLE_LEN = 24

# ==============================================================
# Optional: local overrides
# Local configuration file overrides standard config values.
# Put e.g. DATA_DIR = Path("~/sync/chaos").expanduser() or USE_GIT = False
# in chaos/config/config_local.py

# ==============================================================
try:
    from chaos.config.config_local import *
except ImportError:
    pass  # No local config, use defaults above
