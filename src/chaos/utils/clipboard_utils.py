import pyperclip
import time

from chaos.config.config_chaos import *

def copy_to_clipboard(text: str, timeout: int = CLIPBOARD_TIMEOUT) -> None:
    """
    Copy a password to the system clipboard and clear it after a delay.

    chaos exits right after a command, so the wait happens here in the
    foreground. Ctrl-C clears the clipboard immediately.

    Args:
        text: Text to copy.
        timeout: Seconds before the clipboard is cleared. A value of 0 or
            less leaves the text on the clipboard.

    Side Effects:
        Copies data to the system clipboard.
        Blocks for up to timeout seconds.
    """
    if not text:
        print(" Nothing to copy.")
        return

    pyperclip.copy(text)

    message = " Copied!" + (f" (auto-clears in {timeout}s, Ctrl-C to clear now)" if timeout > 0 else "")
    print(message, flush=True)

    if timeout <= 0:
        return

    try:
        time.sleep(timeout)
    except KeyboardInterrupt:
        pass
    finally:
        clear_clipboard(text)

def clear_clipboard(text: str) -> None:
    """Clear the clipboard if it still holds text."""
    # Leave it alone if the user has copied something else meanwhile
    if pyperclip.paste() == text:
        pyperclip.copy("")
        print(" Clipboard cleared.")
