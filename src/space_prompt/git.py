from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import re
from . import util
from .styles import Painter
from .styles import StyleClass as SC

#: Glyph shown in front of the branch name (Powerline "branch" symbol)
BRANCH_GLYPH = "\ue0a0"

#: Prefixes that ``git status --branch`` puts in front of the branch name in a
#: repository without any commits
NO_COMMITS_PREFIXES = ("No commits yet on ", "Initial commit on ")


class ChangeFlag(Enum):
    """
    The kinds of changes summarized in the prompt.  The members are listed in
    the order in which they are displayed, and the value of each member is
    the glyph displayed for it.
    """

    UNTRACKED = "?"
    STAGED = "+"
    MODIFIED = "!"
    RENAMED = "»"
    DELETED = "✘"
    STASHED = "$"
    UNMERGED = "="


class AheadBehind(Enum):
    """
    How the current branch relates to its upstream.  The value of each member
    is the glyph displayed for it.
    """

    NONE = ""
    AHEAD = "⇡"
    BEHIND = "⇣"
    DIVERGED = "⇕"


#: Patterns that each indicate the presence of a kind of change when they
#: match at the start of any line of ``git status --porcelain`` output.  A
#: path can match more than one pattern (e.g., a renamed & modified file).
FLAG_PATTERNS = {
    ChangeFlag.UNTRACKED: re.compile(rb"^\?\? ", flags=re.M),
    ChangeFlag.STAGED: re.compile(rb"^(A[ MDAU] |M[ MD] |UA)", flags=re.M),
    ChangeFlag.MODIFIED: re.compile(rb"^[ MARC]M ", flags=re.M),
    ChangeFlag.RENAMED: re.compile(rb"^R[ MD]", flags=re.M),
    ChangeFlag.DELETED: re.compile(rb"^([MARCDU ]D|D[ UM]) ", flags=re.M),
    ChangeFlag.UNMERGED: re.compile(rb"^(U[UDA]|AA|DD|[DA]U) ", flags=re.M),
}

AHEAD_RGX = re.compile(rb"^## .*ahead")
BEHIND_RGX = re.compile(rb"^## .*behind")


@dataclass
class VcsStatus:
    #: The name of the current branch (or whatever Git put in the branch
    #: header, e.g. ``HEAD (no branch)`` when detached)
    branch: str

    #: The kinds of changes present, in display order, each at most once
    flags: list[ChangeFlag] = field(default_factory=list)

    ahead_behind: AheadBehind = AheadBehind.NONE

    @property
    def stashed(self) -> bool:
        return ChangeFlag.STASHED in self.flags

    def summary(self) -> str:
        """
        Return the compact glyph string for the changes & the upstream
        relation, e.g. ``?!$⇡``
        """
        return "".join(f.value for f in self.flags) + self.ahead_behind.value

    def display(self, paint: Painter) -> str:
        s = paint(" on", SC.LABEL)
        s += paint(f" {BRANCH_GLYPH} {self.branch}", SC.GIT_BRANCH)
        if summary := self.summary():
            s += " " + paint(f"[{summary}]", SC.GIT_FLAGS)
        return s


def parse_status(output: bytes, stashed: bool = False) -> VcsStatus | None:
    """
    Parse the output of ``git status --porcelain --branch`` into a
    `VcsStatus`.  ``stashed`` states whether the repository has any stashed
    changes, which ``git status`` does not report.

    Returns `None` if the output is too short to contain a branch header.

    Each kind of change is detected by testing the whole output against its
    pattern, so the result only records which kinds of changes are present,
    not how many paths have them.
    """
    if len(output) < 4:
        return None
    m = re.search(rb"[.\n]", output)
    end = m.start() if m else len(output)
    branch = output[3:end].decode("utf-8", "replace")
    for prefix in NO_COMMITS_PREFIXES:
        if branch.startswith(prefix):
            branch = branch[len(prefix) :]
            break
    detected = {flag for flag, rgx in FLAG_PATTERNS.items() if rgx.search(output)}
    if stashed:
        detected.add(ChangeFlag.STASHED)
    header = output.split(b"\n", 1)[0]
    ahead = AHEAD_RGX.search(header) is not None
    behind = BEHIND_RGX.search(header) is not None
    if ahead and behind:
        ahead_behind = AheadBehind.DIVERGED
    elif ahead:
        ahead_behind = AheadBehind.AHEAD
    elif behind:
        ahead_behind = AheadBehind.BEHIND
    else:
        ahead_behind = AheadBehind.NONE
    return VcsStatus(
        branch=branch,
        flags=[f for f in ChangeFlag if f in detected],
        ahead_behind=ahead_behind,
    )


def git_status(timeout: float = util.DEFAULT_TIMEOUT) -> VcsStatus | None:
    """
    If the current directory is in a Git repository, ``git_status()`` returns
    a `VcsStatus` instance describing the repository's current state.

    If the current directory is not in a Git repository, or if Git is not
    installed, or if a Git command runs longer than ``timeout`` seconds,
    ``git_status()`` returns `None`.
    """
    output = util.run("git", "status", "--porcelain", "-b", timeout=timeout)
    if output is None:
        return None
    stash = util.run(
        "git", "rev-parse", "--verify", "--quiet", "refs/stash", timeout=timeout
    )
    return parse_status(output, stashed=stash is not None)
