import os
from pathlib import Path

from chaos.config.config_chaos import DATA_FILE_MODE, UTF8


class FileSystem:
    """
    Local filesystem access used by the data file and the key file.

    The store and the key loader take one of these instead of calling
    os directly, so tests can hand them an in-memory replacement with the
    same methods.
    """

    def exists(self, path) -> bool:
        return Path(path).exists()

    def read_text(self, path) -> str:
        with open(path, "r", encoding=UTF8) as f:
            return f.read()

    def write_text(self, path, data: str, mode: int = DATA_FILE_MODE) -> None:
        """
        Write a file so that it is either fully replaced or untouched.

        The data goes to a temporary file that is flushed and synced
        before it replaces the target. The temporary file is created with
        mode, so its contents are never readable by other users.
        """
        path = Path(path)
        tmp = path.with_suffix(path.suffix + ".tmp")
        # a leftover from a crash keeps its old mode if opened again
        tmp.unlink(missing_ok=True)
        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_EXCL, mode)
        with os.fdopen(fd, "w", encoding=UTF8) as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno()) # force to disk

        os.replace(tmp, path)

    def set_mode(self, path, mode: int) -> None:
        os.chmod(path, mode)

    def make_dirs(self, path, mode: int) -> None:
        os.makedirs(path, exist_ok=True)
        # makedirs applies the umask, chmod does not
        os.chmod(path, mode)


LOCAL_FS = FileSystem()
