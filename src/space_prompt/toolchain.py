from __future__ import annotations
from dataclasses import dataclass
import logging
import os
import re
from typing import Union
from . import util

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolchainVersion:
    version: str


@dataclass(frozen=True)
class ParseFailure:
    reason: str


VersionResult = Union[ToolchainVersion, ParseFailure]


def parse_go_version(text: str) -> VersionResult:
    """
    Extract the version from the output of ``go version``.

    Release builds print ``go version go1.21.3 linux/amd64``, from which
    ``1.21.3`` is returned.  Development builds print ``go version devel
    go1.22-abc123 <date> linux/amd64`` (or, on older toolchains, ``go version
    devel +abc123 <date> ...``), from which the token after ``devel`` is
    returned, minus any leading ``go``.
    """
    words = text.split()
    if words[:2] != ["go", "version"]:
        return ParseFailure(f"not `go version` output: {text.strip()!r}")
    if len(words) < 3:
        return ParseFailure("no version in `go version` output")
    token = words[2]
    if token == "devel":
        if len(words) < 4:
            return ParseFailure("no version after `devel` in `go version` output")
        return ToolchainVersion(re.sub(r"^go(?=\d)", "", words[3]))
    if not token.startswith("go") or len(token) == 2:
        return ParseFailure(f"unexpected version token {token!r}")
    return ToolchainVersion(token[2:])


def go_version(timeout: float = util.DEFAULT_TIMEOUT) -> str | None:
    """
    If the current directory contains a ``go.mod`` file, return the version of
    the installed Go toolchain.  Returns `None` if there is no ``go.mod``, or
    Go is not installed, or ``go version`` fails, times out, or prints
    something unrecognizable.
    """
    try:
        os.stat("go.mod")
    except FileNotFoundError:
        return None
    output = util.run("go", "version", timeout=timeout)
    if output is None:
        return None
    r = parse_go_version(output.decode("utf-8", "replace"))
    if isinstance(r, ParseFailure):
        log.debug("Could not parse `go version` output: %s", r.reason)
        return None
    return r.version
