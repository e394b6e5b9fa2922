from __future__ import annotations
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
import logging
from .context import Context
from .modules import Module, default_modules
from .styles import Painter
from .styles import StyleClass as SC

log = logging.getLogger(__name__)

#: Layout entry for a line break
NEWLINE = "\n"

#: The order in which module fragments appear in the prompt, given as module
#: names and `NEWLINE`s
LAYOUT: tuple[str, ...] = (
    NEWLINE,
    "user",
    "kubernetes",
    "directory",
    "git",
    "golang",
    "took",
    NEWLINE,
    "hostname",
    "status",
)

#: Powerline arrow drawn after the accent block at the end of the prompt
ARROW_GLYPH = "\ue0b0"


def render_prompt(
    ctx: Context,
    paint: Painter,
    modules: Sequence[Module] | None = None,
    layout: Sequence[str] = LAYOUT,
) -> str:
    """
    Run all of the modules concurrently, wait for every one of them to
    finish, and then join their fragments in the order given by ``layout``,
    followed by the accent block that ends the prompt.

    A module that raises an exception contributes nothing; the error is
    logged and the rest of the prompt is rendered as normal.
    """
    if modules is None:
        modules = default_modules()
    fragments = run_modules(ctx, paint, modules)
    ps1 = ""
    for entry in layout:
        if entry == NEWLINE:
            ps1 += NEWLINE
        elif entry in fragments:
            ps1 += fragments[entry]
        else:
            log.debug("No module named %r in layout", entry)
    ps1 += paint(f"{ARROW_GLYPH} ", SC.ACCENT_BLOCK)
    ps1 += paint(f"{ARROW_GLYPH} ", SC.ACCENT_ARROW)
    return ps1


def run_modules(
    ctx: Context, paint: Painter, modules: Sequence[Module]
) -> dict[str, str]:
    """
    Render each module in its own thread and return a `dict` mapping module
    names to fragments.  Does not return until all modules have finished.
    """
    futures: dict[str, Future[str]] = {}
    with ThreadPoolExecutor(max_workers=max(len(modules), 1)) as executor:
        for m in modules:
            futures[m.name] = executor.submit(m.render, ctx, paint)
    # Leaving the `with` block waits for every future to complete.
    fragments: dict[str, str] = {}
    for name, fut in futures.items():
        try:
            fragments[name] = fut.result()
        except Exception as e:
            log.error("%s module failed: %s: %s", name, type(e).__name__, e)
            fragments[name] = ""
    return fragments
