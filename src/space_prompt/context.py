from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass
import logging
import os
from pathlib import Path
from .styles import AccentColor, AnyColor, Color

log = logging.getLogger(__name__)

#: Accent color used when :envvar:`SPACE_PROMPT_COLOR` is unset or empty
DEFAULT_COLOR = Color.BLUE


class HomeDirectoryError(Exception):
    """Raised when the user's home directory cannot be determined"""

    def __str__(self) -> str:
        return "Could not determine home directory"


@dataclass(frozen=True)
class Context:
    """
    Facts about the shell session & the environment that are shared by all
    modules.  Instances are never modified after creation.
    """

    #: `True` iff we're running inside an SSH session
    in_ssh: bool

    #: How long the last command took to run, in nanoseconds
    duration: int

    #: The exit status of the last command
    status: int

    #: The number of background jobs in the shell
    jobs: int

    home: Path

    #: The color of the block at the end of the prompt
    color: AnyColor = DEFAULT_COLOR

    @classmethod
    def from_env(
        cls,
        status: int = 0,
        duration: str | None = None,
        jobs: int = 0,
        environ: Mapping[str, str] | None = None,
    ) -> Context:
        """
        Construct a `Context` from the values passed in by the shell hook and
        from the process environment.

        :raises HomeDirectoryError: if the home directory cannot be resolved
        """
        if environ is None:
            environ = os.environ
        return cls(
            in_ssh=bool(environ.get("SSH_CONNECTION")),
            duration=parse_duration(duration),
            status=status,
            jobs=max(jobs, 0),
            home=home_directory(environ),
            color=accent_color(environ.get("SPACE_PROMPT_COLOR")),
        )


def parse_duration(s: str | None) -> int:
    """
    Convert a duration in nanoseconds, as passed on the command line, to an
    `int`.  A missing or empty value means that no timing is available and
    is treated as zero, as are unparseable & negative values.
    """
    if not s:
        return 0
    try:
        ns = int(s)
    except ValueError:
        log.debug("Ignoring invalid duration %r", s)
        return 0
    return max(ns, 0)


def home_directory(environ: Mapping[str, str]) -> Path:
    if home := environ.get("HOME"):
        return Path(home)
    # Fall back to the password database
    home = os.path.expanduser("~")
    if home == "~" or not home:
        raise HomeDirectoryError()
    return Path(home)


def accent_color(spec: str | None) -> AnyColor:
    """
    Interpret the value of :envvar:`SPACE_PROMPT_COLOR`.  The eight basic color
    names become `Color`s; anything else is kept as given, for zsh to
    interpret.
    """
    if not spec or not (spec := spec.strip()):
        return DEFAULT_COLOR
    try:
        return Color.from_name(spec)
    except ValueError:
        return AccentColor(spec)
