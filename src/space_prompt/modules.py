"""
The prompt's modules.  Each module inspects one facet of the environment and
returns a styled fragment of the prompt, or an empty string if it has nothing
to show.  Modules may raise exceptions on genuine errors; the caller is
responsible for logging them and carrying on without the module's fragment.
"""

from __future__ import annotations
import os
from pathlib import Path
import pwd
import socket
from typing import ClassVar, Protocol
import yaml
from . import util
from .context import Context
from .git import git_status
from .styles import Painter
from .styles import StyleClass as SC
from .toolchain import go_version

#: Commands that take less than this many nanoseconds do not get their
#: runtime shown
MIN_TOOK_DURATION = 2_000_000_000

KUBE_GLYPH = "☸"
SSH_GLYPH = "\ufd3d"
OK_GLYPH = "✓"
FAILED_GLYPH = "✗"


class Module(Protocol):
    #: The identifier used to place the module's fragment in the prompt layout
    name: ClassVar[str]

    def render(self, ctx: Context, paint: Painter) -> str: ...


class UserModule:
    """Shows the username, but only when it's root"""

    name: ClassVar[str] = "user"

    def render(self, ctx: Context, paint: Painter) -> str:
        try:
            username = pwd.getpwuid(os.getuid()).pw_name
        except KeyError:
            raise RuntimeError(f"No passwd entry for UID {os.getuid()}") from None
        if username != "root":
            return ""
        return paint(f" {username}", SC.USER)


class KubernetesModule:
    """Shows the ``current-context`` of the user's kubeconfig"""

    name: ClassVar[str] = "kubernetes"

    def render(self, ctx: Context, paint: Painter) -> str:
        if (context := current_kube_context(ctx.home)) is None:
            return ""
        return paint(f" {KUBE_GLYPH} {context}", SC.KUBE)


def current_kube_context(home: Path) -> str | None:
    """
    Return the ``current-context`` set in ``~/.kube/config``, or `None` if
    the file does not exist or does not set one.

    :raises OSError: if the file exists but cannot be read
    :raises ValueError: if the file is not a valid kubeconfig
    """
    src = util.cat(home / ".kube" / "config")
    if src is None:
        return None
    try:
        data = yaml.safe_load(src)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid kubeconfig: {e}") from e
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValueError("Invalid kubeconfig: top level is not a mapping")
    context = data.get("current-context")
    if not context:
        return None
    return str(context)


class DirectoryModule:
    """Shows the name of the current directory, or ``~`` at home"""

    name: ClassVar[str] = "directory"

    def render(self, ctx: Context, paint: Painter) -> str:
        return paint(" in", SC.LABEL) + " " + paint(dirname(ctx.home), SC.CWD)


def dirname(home: Path) -> str:
    # Prefer $PWD to os.getcwd() as the former does not resolve symlinks
    cwd = Path(os.environ.get("PWD") or os.getcwd())
    if cwd == home:
        return "~"
    return cwd.name or str(cwd)


class GitModule:
    """Shows the current branch & a summary of the repository's status"""

    name: ClassVar[str] = "git"

    def __init__(self, timeout: float = util.DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout

    def render(self, ctx: Context, paint: Painter) -> str:
        if (gs := git_status(timeout=self.timeout)) is None:
            return ""
        return gs.display(paint)


class GolangModule:
    """Shows the Go toolchain version when inside a Go module"""

    name: ClassVar[str] = "golang"

    def __init__(self, timeout: float = util.DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout

    def render(self, ctx: Context, paint: Painter) -> str:
        if (version := go_version(timeout=self.timeout)) is None:
            return ""
        return paint(f" Go v{version}", SC.TOOLCHAIN)


class HostnameModule:
    """Shows the short hostname, marked when in an SSH session"""

    name: ClassVar[str] = "hostname"

    def render(self, ctx: Context, paint: Painter) -> str:
        hostname = socket.gethostname().split(".", 1)[0]
        s = ""
        if ctx.in_ssh:
            s += paint(f" {SSH_GLYPH}", SC.SSH)
        s += paint(f" {hostname}", SC.HOST)
        return s


class StatusModule:
    """Shows whether the last command succeeded"""

    name: ClassVar[str] = "status"

    def render(self, ctx: Context, paint: Painter) -> str:
        if ctx.status == 0:
            return paint(f" {OK_GLYPH} ", SC.STATUS_OK)
        return paint(f" {FAILED_GLYPH} ", SC.STATUS_FAILED)


class TookModule:
    """Shows how long the last command took, if it was slow"""

    name: ClassVar[str] = "took"

    def render(self, ctx: Context, paint: Painter) -> str:
        if ctx.duration < MIN_TOOK_DURATION:
            return ""
        return " took " + paint(format_duration(ctx.duration), SC.TOOK)


def format_duration(ns: int) -> str:
    """
    Format a duration in nanoseconds, rounded to the nearest millisecond,
    as hours, minutes & seconds, e.g. ``2.5s``, ``1m5.123s``, or ``1h0m0s``
    """
    ms, rem = divmod(ns, 1_000_000)
    if 2 * rem >= 1_000_000:
        ms += 1
    hours, ms = divmod(ms, 3_600_000)
    minutes, ms = divmod(ms, 60_000)
    seconds, ms = divmod(ms, 1000)
    s = ""
    if hours:
        s += f"{hours}h"
    if hours or minutes:
        s += f"{minutes}m"
    s += str(seconds)
    if ms:
        s += "." + f"{ms:03d}".rstrip("0")
    return s + "s"


def default_modules(timeout: float = util.DEFAULT_TIMEOUT) -> list[Module]:
    """
    Return an instance of each module.  ``timeout`` bounds the runtime of
    each external command run by a module.
    """
    return [
        UserModule(),
        KubernetesModule(),
        DirectoryModule(),
        GitModule(timeout=timeout),
        GolangModule(timeout=timeout),
        HostnameModule(),
        StatusModule(),
        TookModule(),
    ]
