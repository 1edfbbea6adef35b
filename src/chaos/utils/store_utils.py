import json
import logging
import sys
from dataclasses import dataclass, field
from typing import Dict

import pendulum

from chaos.config.config_chaos import *
from chaos.utils.Entry import Entry
from chaos.utils.errors import ChaosError, MalformedStoreDocument, TitleNotFound
from chaos.utils.file_utils import FileSystem, LOCAL_FS

logger = logging.getLogger(__name__)

ROOT_FIELD = "passwords"


@dataclass
class EntryStore:
    """
    All entries, keyed by title.

    Titles are case-sensitive. The store does not protect titles from
    being overwritten; the caller checks exists() first when it has to.
    """
    passwords: Dict[str, Entry] = field(default_factory=dict)

    def exists(self, title: str) -> bool:
        return title in self.passwords

    def insert(self, title: str, entry: Entry) -> None:
        """Insert or replace the entry for title."""
        if not isinstance(title, str) or not title:
            raise ValueError("Title cannot be empty")
        self.passwords[title] = entry

    def remove(self, title: str) -> None:
        self.passwords.pop(title, None)

    def find_or_fail(self, title: str) -> Entry:
        """
        Get the entry for title.

        Raises:
            TitleNotFound: If there is no such title.
        """
        try:
            return self.passwords[title]
        except KeyError:
            raise TitleNotFound(title) from None

    def titles(self) -> list[str]:
        return sorted(self.passwords)

    def __len__(self):
        return len(self.passwords)

    def serialize(self) -> str:
        """
        Serialize the store as pretty-printed JSON.

        Titles are sorted and entry fields keep a fixed order, so the same
        store always produces the same text and git diffs stay small.
        """
        data = {
            ROOT_FIELD: {
                title: self.passwords[title].to_dict()
                for title in self.titles()
            }
        }
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"

    @classmethod
    def deserialize(cls, text: str) -> "EntryStore":
        """
        Parse the data file contents.

        Raises:
            MalformedStoreDocument: If the text is not a valid data file.
            UnknownFormat: If an entry has an unknown format code.
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedStoreDocument(f"Data file is not valid JSON: {e}") from None
        except RecursionError:
            raise MalformedStoreDocument("Data file is nested too deeply") from None

        if not isinstance(data, dict) or not isinstance(data.get(ROOT_FIELD), dict):
            raise MalformedStoreDocument(f"Data file has no '{ROOT_FIELD}' object")

        store = cls()
        for title, entry_data in data[ROOT_FIELD].items():
            if not title:
                raise MalformedStoreDocument("Data file has an empty title")
            store.insert(title, Entry.from_dict(entry_data))
        return store

    @classmethod
    def load(cls, path, fs: FileSystem = LOCAL_FS) -> "EntryStore":
        """
        Load the store from the data file.

        A missing, empty or unreadable data file gives an empty store, so
        new entries can still be made. Corruption is logged. The previous
        contents remain in the git history.
        """
        if not fs.exists(path):
            return cls()

        try:
            text = fs.read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            _log_load_failure(path, e)
            return cls()

        if not text.strip():
            return cls()

        try:
            return cls.deserialize(text)
        except ChaosError as e:
            _log_load_failure(path, e)
            return cls()

    def save(self, path, fs: FileSystem = LOCAL_FS) -> None:
        """
        Write the whole store to the data file.

        Returns only after the data is on disk. Errors propagate.
        """
        fs.write_text(path, self.serialize(), mode=DATA_FILE_MODE)
        fs.set_mode(path, DATA_FILE_MODE)


def _log_load_failure(path, error: Exception) -> None:
    msg = f"Could not load {path}, starting with no entries: {error}"
    print(f"Warning: {msg}", file=sys.stderr)
    now = pendulum.now().to_iso8601_string()
    logger.error(f"[{now}] {msg}")
