import logging
import subprocess
from pathlib import Path

import pendulum

from chaos.config.config_chaos import *
from chaos.utils.errors import CommitFailure
from chaos.utils.file_utils import FileSystem, LOCAL_FS

logger = logging.getLogger(__name__)


def _git(data_dir, *args: str) -> None:
    """
    Run one git command inside the data directory.

    Raises:
        CommitFailure: If git is missing or exits with an error.
    """
    try:
        subprocess.run(
            ["git", *args],
            cwd=str(data_dir),
            check=True,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError:
        raise CommitFailure("git is not installed") from None
    except subprocess.CalledProcessError as e:
        output = (e.stderr or e.stdout or "").strip()
        now = pendulum.now().to_iso8601_string()
        logger.error(f"[{now}] git {' '.join(args)} failed: {output}")
        raise CommitFailure(f"git {args[0]} failed: {output}") from None

def ensure_data_dir(data_dir, fs: FileSystem = LOCAL_FS, use_git: bool = USE_GIT) -> None:
    """
    Make sure the data directory exists and is a git repository.

    The directory is restricted to the owner. A new repository gets a
    local committer identity so commits work without a global git config.
    """
    fs.make_dirs(data_dir, DATA_DIR_MODE)

    if not use_git or fs.exists(Path(data_dir) / ".git"):
        return

    _git(data_dir, "init")
    _git(data_dir, "config", "user.email", GIT_USER)
    _git(data_dir, "config", "user.name", GIT_USER)

def commit_data(data_dir, data_file, commit_text: str) -> None:
    """
    Commit the data file.

    Args:
        data_dir: The git repository.
        data_file: Path of the data file inside data_dir.
        commit_text: Commit message, e.g. "new github".

    Raises:
        CommitFailure: If git add or git commit fails.
    """
    _git(data_dir, "add", str(data_file))
    _git(data_dir, "commit", "-m", commit_text)
