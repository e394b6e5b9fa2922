from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import logging
import re
from typing import ClassVar, Protocol, Union

log = logging.getLogger(__name__)


class Color(Enum):
    """
    An enumeration of the supported colors.  Each color's value equals its
    xterm number.
    """

    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7

    def asfg(self) -> int:
        """
        Return the ANSI SGR parameter for setting the color as the foreground
        color
        """
        return self.value + 30

    def asbg(self) -> int:
        """
        Return the ANSI SGR parameter for setting the color as the background
        color
        """
        return self.value + 40

    def zsh(self) -> str:
        """Return the color as written inside zsh's ``%F{...}`` escapes"""
        return self.name.lower()

    @classmethod
    def from_name(cls, name: str) -> Color:
        """
        Look up a color by its (case-insensitive) name, as used in zsh's
        ``%F{...}`` escapes.  Raises `ValueError` on unknown names.
        """
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown color: {name!r}") from None


@dataclass(frozen=True)
class AccentColor:
    """
    A color given by the user in any form that zsh's ``%F{...}`` escapes
    accept: a 256-color number (e.g., ``208``), a ``#rrggbb`` or ``#rgb``
    hex triplet, or a name from the terminal's palette (e.g., ``orange``)
    """

    spec: str

    def zsh(self) -> str:
        return self.spec

    def sgr(self) -> str | None:
        """
        Return the SGR color parameters (without the leading ``38``/``48``)
        for the color, or `None` if it cannot be expressed with ANSI escape
        sequences
        """
        if re.fullmatch(r"[0-9]{1,3}", self.spec) and int(self.spec) <= 255:
            return f"5;{int(self.spec)}"
        if m := re.fullmatch(r"#([0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})", self.spec):
            digits = m[1]
            if len(digits) == 3:
                digits = "".join(c * 2 for c in digits)
            r, g, b = (int(digits[i : i + 2], 16) for i in (0, 2, 4))
            return f"2;{r};{g};{b}"
        return None

    def asfg(self) -> str:
        if (params := self.sgr()) is None:
            raise ValueError(
                f"Color {self.spec!r} cannot be shown with ANSI escapes"
            )
        return f"38;{params}"

    def asbg(self) -> str:
        if (params := self.sgr()) is None:
            raise ValueError(
                f"Color {self.spec!r} cannot be shown with ANSI escapes"
            )
        return f"48;{params}"


AnyColor = Union[Color, AccentColor]


@dataclass
class Style:
    fg: AnyColor | None = None
    bg: AnyColor | None = None
    bold: bool = False

    def as_params(self) -> list[str]:
        params = []
        if self.fg is not None:
            params.append(str(self.fg.asfg()))
        if self.bg is not None:
            params.append(str(self.bg.asbg()))
        if self.bold:
            params.append("1")
        return params


class Styler(Protocol):
    #: Whether colors are rendered as ANSI SGR parameters
    ansi_colors: ClassVar[bool]

    def __call__(self, s: str, style: Style) -> str: ...


class BashStyler:
    """Class for escaping & styling strings for use in Bash's PS1 variable"""

    ansi_colors: ClassVar[bool] = True

    def __call__(self, s: str, style: Style) -> str:
        r"""
        Return the string ``s`` escaped for use in a PS1 variable and wrapped
        in the escape sequences for ``style``.  All escape sequences are
        wrapped in ``\[ ... \]`` so that they may be used in a PS1 variable.

        :param str s: the string to stylize
        :param Style style: the colors & weight to stylize the string with
        """
        s = self.escape(s)
        if params := style.as_params():
            s = rf"\[\e[{';'.join(params)}m\]{s}\[\e[m\]"
        return s

    def escape(self, s: str) -> str:
        """
        Escape characters in the string ``s`` that have special meaning in a
        PS1 variable
        """
        return s.replace("\\", r"\\")


class ANSIStyler:
    """Class for styling strings for display immediately in the terminal"""

    ansi_colors: ClassVar[bool] = True

    def __call__(self, s: str, style: Style) -> str:
        """
        Stylize the string ``s`` with ANSI escape sequences for ``style``.

        :param str s: the string to stylize
        :param Style style: the colors & weight to stylize the string with
        """
        if params := style.as_params():
            s = f"\x1B[{';'.join(params)}m{s}\x1B[m"
        return s


class ZshStyler:
    """Class for escaping & styling strings for use in zsh's PROMPT variable"""

    ansi_colors: ClassVar[bool] = False

    def __call__(self, s: str, style: Style) -> str:
        """
        Return the string ``s`` escaped for use in a zsh prompt.  Bold text is
        wrapped in ``%B ... %b``, the background color in ``%K{...} ... %k``
        and the foreground color in ``%F{...} ... %f``.

        :param str s: the string to stylize
        :param Style style: the colors & weight to stylize the string with
        """
        s = self.escape(s)
        if style.bold:
            s = f"%B{s}%b"
        if style.bg is not None:
            s = f"%K{{{style.bg.zsh()}}}{s}%k"
        if style.fg is not None:
            s = f"%F{{{style.fg.zsh()}}}{s}%f"
        return s

    def escape(self, s: str) -> str:
        return s.replace("%", "%%")


StyleClass = Enum(
    "StyleClass",
    [
        "LABEL",
        "USER",
        "KUBE",
        "CWD",
        "GIT_BRANCH",
        "GIT_FLAGS",
        "TOOLCHAIN",
        "TOOK",
        "SSH",
        "HOST",
        "STATUS_OK",
        "STATUS_FAILED",
        "ACCENT_BLOCK",
        "ACCENT_ARROW",
    ],
)

Theme = dict[StyleClass, Style]

DEFAULT_THEME = {
    StyleClass.LABEL: Style(Color.WHITE),
    StyleClass.USER: Style(Color.RED),
    StyleClass.KUBE: Style(Color.BLUE, bold=True),
    StyleClass.CWD: Style(Color.CYAN, bold=True),
    StyleClass.GIT_BRANCH: Style(Color.MAGENTA, bold=True),
    StyleClass.GIT_FLAGS: Style(Color.RED),
    StyleClass.TOOLCHAIN: Style(Color.CYAN),
    StyleClass.TOOK: Style(Color.YELLOW, bold=True),
    StyleClass.SSH: Style(bg=Color.BLACK),
    StyleClass.HOST: Style(Color.WHITE, Color.BLACK),
    StyleClass.STATUS_OK: Style(Color.GREEN, Color.BLACK, bold=True),
    StyleClass.STATUS_FAILED: Style(Color.RED, Color.BLACK, bold=True),
    StyleClass.ACCENT_BLOCK: Style(Color.BLACK, Color.BLUE),
    StyleClass.ACCENT_ARROW: Style(Color.BLUE),
}


def make_theme(accent: AnyColor, ansi_colors: bool = False) -> Theme:
    """
    Return a copy of `DEFAULT_THEME` with the trailing block at the end of the
    prompt drawn in the accent color ``accent``.  If ``ansi_colors`` is true
    and ``accent`` cannot be expressed with ANSI escape sequences, blue is
    used instead.
    """
    if ansi_colors and isinstance(accent, AccentColor) and accent.sgr() is None:
        log.warning(
            "Color %r cannot be shown with ANSI escapes; using blue", accent.spec
        )
        accent = Color.BLUE
    return DEFAULT_THEME | {
        StyleClass.ACCENT_BLOCK: Style(Color.BLACK, accent),
        StyleClass.ACCENT_ARROW: Style(accent),
    }


@dataclass
class Painter:
    styler: Styler
    theme: Theme

    def __call__(self, s: str, klass: StyleClass) -> str:
        return self.styler(s, self.theme[klass])
