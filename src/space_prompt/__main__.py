from __future__ import annotations
import argparse
import logging
import sys
from . import __url__, __version__
from .context import Context, HomeDirectoryError
from .hooks import SHELLS, init_script
from .modules import default_modules
from .prompt import render_prompt
from .styles import ANSIStyler, BashStyler, Painter, ZshStyler, make_theme
from .util import DEFAULT_TIMEOUT

log = logging.getLogger("space_prompt")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="space-prompt",
        description=(
            "A fast, Git-aware, two-line zsh prompt."
            f"  Visit <{__url__}> for more information."
        ),
    )
    parser.add_argument(
        "--ansi",
        action="store_const",
        dest="stylecls",
        const=ANSIStyler,
        help="Format prompt for direct display",
    )
    parser.add_argument(
        "--bash",
        action="store_const",
        dest="stylecls",
        const=BashStyler,
        help="Format prompt for Bash's PS1",
    )
    parser.add_argument(
        "--zsh",
        action="store_const",
        dest="stylecls",
        const=ZshStyler,
        help="Format prompt for zsh's PROMPT (default)",
    )
    parser.add_argument(
        "--command-timeout",
        type=float,
        metavar="SECONDS",
        default=DEFAULT_TIMEOUT,
        help=(
            "Leave out any module whose external command runs longer than this"
            f"  [default: {DEFAULT_TIMEOUT:g}]"
        ),
    )
    parser.add_argument(
        "--duration",
        "-duration",
        metavar="NANOSECONDS",
        help="How long the last command took to run",
    )
    parser.add_argument(
        "--init",
        choices=list(SHELLS.keys()),
        metavar="SHELL",
        help="Print the code for hooking space-prompt into SHELL and exit",
    )
    parser.add_argument(
        "--jobs",
        "-jobs",
        type=int,
        default=0,
        help="Number of background jobs",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Set the level of diagnostics written to stderr  [default: WARNING]",
    )
    parser.add_argument(
        "--status",
        "-status",
        type=int,
        default=0,
        help="Exit status of the last command",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(
        format="space-prompt: %(levelname)s: %(message)s",
        level=getattr(logging, args.log_level),
    )
    if args.init is not None:
        sys.stdout.write(init_script(args.init))
        return
    try:
        ctx = Context.from_env(
            status=args.status, duration=args.duration, jobs=args.jobs
        )
    except HomeDirectoryError as e:
        log.critical("%s", e)
        sys.exit(1)
    styler = (args.stylecls or ZshStyler)()
    theme = make_theme(ctx.color, ansi_colors=styler.ansi_colors)
    paint = Painter(styler=styler, theme=theme)
    s = render_prompt(ctx, paint, modules=default_modules(args.command_timeout))
    sys.stdout.write(s)


if __name__ == "__main__":
    main()
