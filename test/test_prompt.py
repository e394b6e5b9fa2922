from __future__ import annotations
import logging
from pathlib import Path
import pwd
import socket
import threading
import time
from types import SimpleNamespace
from typing import ClassVar
import pytest
from space_prompt import util
from space_prompt.context import Context
from space_prompt.modules import default_modules
from space_prompt.prompt import LAYOUT, NEWLINE, render_prompt, run_modules
from space_prompt.styles import Color, Painter, ZshStyler, make_theme

END = "%F{black}%K{blue}\ue0b0 %k%f%F{blue}\ue0b0 %f"


class FakeModule:
    def __init__(self, name: str, fragment: str, delay: float = 0) -> None:
        self.name = name
        self.fragment = fragment
        self.delay = delay

    def render(self, ctx: Context, paint: Painter) -> str:
        time.sleep(self.delay)
        return self.fragment


class FailingModule:
    name: ClassVar[str] = "broken"

    def render(self, ctx: Context, paint: Painter) -> str:
        raise ValueError("Invalid kubeconfig: top level is not a mapping")


@pytest.fixture
def ctx(tmp_path: Path) -> Context:
    return Context(in_ssh=False, duration=0, status=0, jobs=0, home=tmp_path)


@pytest.fixture
def paint() -> Painter:
    return Painter(ZshStyler(), make_theme(Color.BLUE))


def fake_modules(delays: list[float]) -> list[FakeModule]:
    names = [entry for entry in LAYOUT if entry != NEWLINE]
    return [
        FakeModule(name, f"<{name}>", delay) for name, delay in zip(names, delays)
    ]


def test_render_prompt_layout(ctx: Context, paint: Painter) -> None:
    assert render_prompt(ctx, paint, fake_modules([0] * 8)) == (
        "\n<user><kubernetes><directory><git><golang><took>\n<hostname><status>"
        + END
    )


def test_render_prompt_order_independent_of_completion(
    ctx: Context, paint: Painter
) -> None:
    first_fast = render_prompt(
        ctx, paint, fake_modules([0.01 * i for i in range(8)])
    )
    first_slow = render_prompt(
        ctx, paint, fake_modules([0.01 * (7 - i) for i in range(8)])
    )
    assert first_fast == first_slow


def test_render_prompt_order_independent_of_module_order(
    ctx: Context, paint: Painter
) -> None:
    modules = fake_modules([0] * 8)
    assert render_prompt(ctx, paint, modules) == render_prompt(
        ctx, paint, modules[::-1]
    )


def test_run_modules_waits_for_all(ctx: Context, paint: Painter) -> None:
    release = threading.Event()

    class Waiting:
        name = "slow"

        def render(self, ctx: Context, paint: Painter) -> str:
            assert release.wait(5)
            return "slow"

    class Releasing:
        name = "fast"

        def render(self, ctx: Context, paint: Painter) -> str:
            time.sleep(0.05)
            release.set()
            return "fast"

    assert run_modules(ctx, paint, [Waiting(), Releasing()]) == {
        "slow": "slow",
        "fast": "fast",
    }


def test_run_modules_concurrently(ctx: Context, paint: Painter) -> None:
    # Each module waits for all of the others to start; this would deadlock if
    # they were run one at a time.
    barrier = threading.Barrier(3, timeout=5)

    class Meeting:
        def __init__(self, name: str) -> None:
            self.name = name

        def render(self, ctx: Context, paint: Painter) -> str:
            barrier.wait()
            return self.name

    assert run_modules(ctx, paint, [Meeting("a"), Meeting("b"), Meeting("c")]) == {
        "a": "a",
        "b": "b",
        "c": "c",
    }


def test_failing_module_contributes_nothing(
    caplog: pytest.LogCaptureFixture, ctx: Context, paint: Painter
) -> None:
    modules = [
        FakeModule("directory", "<directory>"),
        FailingModule(),
        FakeModule("status", "<status>"),
    ]
    layout = ("directory", "broken", NEWLINE, "status")
    with caplog.at_level(logging.ERROR, logger="space_prompt"):
        s = render_prompt(ctx, paint, modules, layout=layout)
    assert s == "<directory>\n<status>" + END
    assert "broken module failed" in caplog.text
    assert "top level is not a mapping" in caplog.text


def test_unknown_layout_entry(ctx: Context, paint: Painter) -> None:
    modules = [FakeModule("status", "<status>"), FakeModule("extra", "<extra>")]
    assert render_prompt(ctx, paint, modules, layout=("missing", "status")) == (
        "<status>" + END
    )


def test_accent_color(ctx: Context) -> None:
    paint = Painter(ZshStyler(), make_theme(Color.MAGENTA))
    assert render_prompt(ctx, paint, [], layout=()) == (
        "%F{black}%K{magenta}\ue0b0 %k%f%F{magenta}\ue0b0 %f"
    )


def test_render_prompt_default_modules(
    monkeypatch: pytest.MonkeyPatch, paint: Painter, tmp_path: Path
) -> None:
    monkeypatch.setattr(util, "run", lambda *_args, timeout: None)
    monkeypatch.setattr(pwd, "getpwuid", lambda _: SimpleNamespace(pw_name="alice"))
    monkeypatch.setattr(socket, "gethostname", lambda: "firefly.example.com")
    monkeypatch.setenv("PWD", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    ctx = Context(
        in_ssh=False, duration=3_000_000_000, status=1, jobs=0, home=tmp_path
    )
    assert render_prompt(ctx, paint, default_modules()) == (
        "\n"
        "%F{white} in%f %F{cyan}%B~%b%f"
        " took %F{yellow}%B3s%b%f"
        "\n"
        "%F{white}%K{black} firefly%k%f"
        "%F{red}%K{black}%B ✗ %b%k%f" + END
    )


def test_render_prompt_failed_command_is_isolated(
    monkeypatch: pytest.MonkeyPatch, paint: Painter, tmp_path: Path
) -> None:
    def fake_run(*args: str, timeout: float) -> bytes | None:
        if args[:2] == ("git", "status"):
            return b"## main\n"
        # No stash; `go version` fails
        return None

    monkeypatch.setattr(util, "run", fake_run)
    monkeypatch.setattr(pwd, "getpwuid", lambda _: SimpleNamespace(pw_name="root"))
    monkeypatch.setattr(socket, "gethostname", lambda: "firefly")
    monkeypatch.setenv("PWD", str(tmp_path / "proj"))
    monkeypatch.chdir(tmp_path)
    (tmp_path / "go.mod").write_text("module example.com/foo\n", encoding="utf-8")
    ctx = Context(in_ssh=True, duration=0, status=0, jobs=0, home=tmp_path)
    assert render_prompt(ctx, paint, default_modules()) == (
        "\n"
        "%F{red} root%f"
        "%F{white} in%f %F{cyan}%Bproj%b%f"
        "%F{white} on%f%F{magenta}%B \ue0a0 main%b%f"
        "\n"
        "%K{black} \ufd3d%k%F{white}%K{black} firefly%k%f"
        "%F{green}%K{black}%B ✓ %b%k%f" + END
    )
