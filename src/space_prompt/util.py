from __future__ import annotations
import logging
from pathlib import Path
import subprocess

log = logging.getLogger(__name__)

#: Default number of seconds to let an external command run before giving up
#: on it
DEFAULT_TIMEOUT = 3.0


def cat(path: Path) -> str | None:
    """
    Return the contents of the given file.  If the file does not exist, return
    `None`.  Any other error reading the file is propagated.
    """
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None


def run(*args: str, timeout: float = DEFAULT_TIMEOUT) -> bytes | None:
    """
    Run a command (suppressing stderr) and return its raw stdout.  If the
    command is not installed, exits nonzero, or does not finish within
    ``timeout`` seconds, return `None`.
    """
    try:
        return subprocess.run(
            args,
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            timeout=timeout,
        ).stdout
    except (FileNotFoundError, subprocess.CalledProcessError):
        return None
    except subprocess.TimeoutExpired:
        log.warning("`%s` timed out after %g seconds", " ".join(args), timeout)
        return None
