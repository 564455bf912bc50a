"""CLI Utility Functions"""

import shutil
import subprocess
import sys

CLIPBOARD_TIMEOUT = 5.0


def _clipboard_commands() -> list[list[str]]:
    if sys.platform == 'win32':
        return [['clip']]
    if sys.platform == 'darwin':
        return [['pbcopy']]
    return [
        ['xclip', '-selection', 'clipboard'],
        ['xsel', '--clipboard', '--input'],
        ['wl-copy'],
    ]


def copy_to_clipboard(text: str) -> tuple[bool, str]:
    """Copy text with the first clipboard tool found on PATH.

    Returns (success, failure_reason).
    """
    command = next((cmd for cmd in _clipboard_commands() if shutil.which(cmd[0])), None)
    if command is None:
        if sys.platform.startswith('linux'):
            return False, "Install xclip, xsel or wl-clipboard: sudo apt install xclip"
        return False, "No clipboard tool found"

    try:
        subprocess.run(command, input=text.encode('utf-8'), check=True, timeout=CLIPBOARD_TIMEOUT)
    except subprocess.TimeoutExpired:
        return False, f"Clipboard command timed out: {command[0]}"
    except (subprocess.CalledProcessError, OSError) as e:
        return False, f"Clipboard command failed: {e}"
    return True, ""
