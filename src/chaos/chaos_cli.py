"""
chaos - a stateless password generator
"""
# ==============================================================
# Standard imports
# ==============================================================
import argparse
import logging
import sys
from pathlib import Path

# ==============================================================
# Other imports
# ==============================================================

try:
    import pendulum
    from chaos.config.config_chaos import *
    from chaos.config.logging_config import setup_logging
    from chaos.utils.crypto_utils import load_or_create_master_key
    from chaos.utils.password_generator import new_entry, derive_password
    from chaos.utils.store_utils import EntryStore
    from chaos.utils.vcs_utils import ensure_data_dir, commit_data
    from chaos.utils.clipboard_utils import copy_to_clipboard
    from chaos.utils.file_utils import LOCAL_FS
    from chaos.utils.errors import ChaosError, TitleNotFound, UnknownFormat

except ImportError as e:
    missing_package = e.name if hasattr(e, "name") else "unknown package"
    print("Missing required dependency!")
    print(f"  {missing_package} is not installed")
    print("\nInstall with:")
    print("  pip install chaos-passwords")
    sys.exit(1)

logger = logging.getLogger(__name__)

# ==============================================================
# Functions
# ==============================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chaos",
        description="Stateless password generator. Passwords are derived from "
                    "a local key and per-entry metadata kept in git.",
    )
    parser.add_argument("--data-dir", type=Path, default=DATA_DIR,
                        help=f"data directory (default: {DATA_DIR})")
    parser.add_argument("--no-git", action="store_true",
                        help="do not commit changes of the data file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")

    sub = parser.add_subparsers(dest="command")

    ls = sub.add_parser("ls", help="lists entries (default action if none specified)")
    ls.add_argument("-v", "--verbose", action="store_true",
                    help="show format, length and text")

    new = sub.add_parser("new", help="generate new entry")
    new.add_argument("title")
    new.add_argument("-l", "--length", type=int, default=DEFAULT_LENGTH,
                     help=f"wanted length of the password (default: {DEFAULT_LENGTH})")
    new.add_argument("-f", "--format", type=int, default=DEFAULT_FORMAT,
                     help="1=alphanumsymbol, 2=alphanum, 3=alpha, 4=num, 5=lol "
                          f"(default: {DEFAULT_FORMAT})")
    new.add_argument("-t", "--text", default="",
                     help="free text shown with the entry")
    new.add_argument("--force", action="store_true",
                     help="replace an existing entry")

    get = sub.add_parser("get", help="get entry")
    get.add_argument("title")
    get.add_argument("-c", "--clip", action="store_true",
                     help=f"copy to clipboard instead of printing, cleared after "
                          f"{CLIPBOARD_TIMEOUT}s")

    rm = sub.add_parser("rm", help="remove entry")
    rm.add_argument("title")
    rm.add_argument("--force", action="store_true",
                    help="actually removes the entry")

    return parser

def list_entries(store: EntryStore, verbose: bool = False) -> int:
    """
    Print all titles in sorted order.

    With verbose, each title is followed by its format, password length
    and text. No key is needed.
    """
    if not len(store):
        print("No entries yet.")
        return 0

    for title in store.titles():
        if not verbose:
            print(title)
            continue
        entry = store.find_or_fail(title)
        length = entry.length if entry.length is not None else "?"
        print(f"{title:<{TITLE_LEN}} {entry.format.description:<15} {length:>5}  {entry.text}")
    return 0

def new_command(store: EntryStore, args, data_dir: Path, data_file: Path, use_git: bool) -> int:
    """
    Create an entry and save it.

    An existing title is replaced only with --force: a new salt and meat
    means a different password.
    """
    title = args.title
    if not title:
        print("Title cannot be empty")
        return 1

    if store.exists(title) and not args.force:
        print(f"'{title}' exists already. --force to overwrite")
        return 1

    try:
        entry = new_entry(args.format, args.length, args.text)
    except UnknownFormat as e:
        print(f"{e}. Use 1=alphanumsymbol, 2=alphanum, 3=alpha, 4=num, 5=lol")
        return 1
    except ValueError as e:
        print(e)
        return 1

    store.insert(title, entry)
    save_store(store, data_dir, data_file, f"new {title}", use_git)
    print(f"{title} added")
    return 0

def get_command(store: EntryStore, args, key_file: Path) -> int:
    """
    Print (or copy) the password of an entry.

    The title is looked up before the key is touched, so a typo never
    creates a key file.
    """
    title = args.title
    try:
        entry = store.find_or_fail(title)
    except TitleNotFound as e:
        print(e)
        return 2

    if not LOCAL_FS.exists(key_file):
        print(f"Creating a new key in {key_file}")
    key = load_or_create_master_key(key_file)

    try:
        password = derive_password(key, entry)
    except ChaosError as e:
        msg = f"Cannot generate the password for '{title}': {e}"
        print(msg, file=sys.stderr)
        now = pendulum.now().to_iso8601_string()
        logger.error(f"[{now}] {msg}")
        return 1

    if args.clip:
        copy_to_clipboard(password)
    else:
        print(password)
    return 0

def rm_command(store: EntryStore, args, data_dir: Path, data_file: Path, use_git: bool) -> int:
    title = args.title
    if not store.exists(title):
        print(f"'{title}' does not exist.")
        return 2

    if not args.force:
        print(f"'{title}' exists. --force to remove")
        return 1

    store.remove(title)
    save_store(store, data_dir, data_file, f"rm {title}", use_git)
    print(f"{title} removed")
    return 0

def save_store(store: EntryStore, data_dir: Path, data_file: Path,
               commit_text: str, use_git: bool) -> None:
    """Write the data file and commit it. Both must succeed before success is reported."""
    store.save(data_file)
    if use_git:
        commit_data(data_dir, data_file.name, commit_text)


# ==============================================================
# MAIN
# ==============================================================
def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    data_dir = Path(args.data_dir).expanduser()
    data_file = data_dir / DATA_FILE_NAME
    key_file = data_dir / KEY_FILE_NAME
    use_git = USE_GIT and not args.no_git

    try:
        ensure_data_dir(data_dir, use_git=use_git)
        setup_logging(data_dir / LOG_FILE_NAME, command=args.command or "ls")

        store = EntryStore.load(data_file)

        # Functionality that does not require loading the key
        if args.command in (None, "ls"):
            return list_entries(store, verbose=getattr(args, "verbose", False))

        if args.command == "new":
            return new_command(store, args, data_dir, data_file, use_git)

        if args.command == "rm":
            return rm_command(store, args, data_dir, data_file, use_git)

        # Functionality that does require loading the key
        if args.command == "get":
            return get_command(store, args, key_file)

    except (OSError, ChaosError) as e:
        msg = f"Error: {e}"
        print(msg, file=sys.stderr)
        now = pendulum.now().to_iso8601_string()
        logger.error(f"[{now}] {msg}")
        return 1

    return 0

def run():
    sys.exit(main())

if __name__ == "__main__":
    run()
