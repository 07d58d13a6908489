from __future__ import annotations

import pathlib
import stat
import typing

import typing_extensions

import pytest

from sketchflash.util_baseclasses import Peripheral, PeripheralParams
from sketchflash.util_output_classifier import EnumOutputKind, OutputEvent
from sketchflash.util_serial import SerialCapabilitiesABC
from sketchflash.util_workspace import WorkspaceLayout

PNP_ID_UNO = "USB\\VID_2341&PID_0043\\85739313137351F0B1A1"
PNP_ID_LEONARDO_BOOT = "USB\\VID_2341&PID_0036\\6&2B5B8E6E&0&1"
PNP_ID_MAKEYMAKEY_BOOT = "USB\\VID_1B4F&PID_2B75\\5&1A2B3C&0&2"


class FakeCapabilities(SerialCapabilitiesABC):
    """
    Records all calls in 'calls'.
    Every call to 'list()' pops the next entry of 'listings'.
    """

    def __init__(self, listings: list[list[Peripheral] | None] | None = None):
        self.listings = listings if listings is not None else []
        self.calls: list[tuple[str, typing.Any]] = []

    @typing_extensions.override
    async def connect(self, params: PeripheralParams, exclusive: bool) -> None:
        self.calls.append(("connect", (params, exclusive)))

    @typing_extensions.override
    async def disconnect(self) -> None:
        self.calls.append(("disconnect", None))

    @typing_extensions.override
    async def list(self) -> list[Peripheral] | None:
        self.calls.append(("list", None))
        return self.listings.pop(0)

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


class RecordingSleep:
    """
    Replaces 'asyncio.sleep': Returns immediately and records the delay.
    The delays are also appended to 'timeline' to verify the ordering.
    """

    def __init__(self, timeline: list[tuple[str, typing.Any]] | None = None):
        self.delays_s: list[float] = []
        self.timeline = timeline

    async def __call__(self, delay_s: float) -> None:
        self.delays_s.append(delay_s)
        if self.timeline is not None:
            self.timeline.append(("sleep", delay_s))


class Sink(list[OutputEvent]):
    def __call__(self, event: OutputEvent) -> None:
        self.append(event)

    def text(self, kind: EnumOutputKind | None = None) -> str:
        return "".join(e.text for e in self if kind is None or e.kind == kind)


def write_tool(
    filename: pathlib.Path,
    stdout: str = "",
    stderr: str = "",
    returncode: int = 0,
    extra: str = "",
) -> pathlib.Path:
    """
    Writes a shell script which replaces arduino-builder/avrdude.
    The arguments are written to '<filename>.args', one per line.
    """
    filename.parent.mkdir(parents=True, exist_ok=True)
    filename.write_text(
        f"""#!/bin/sh
printf '%s\\n' "$@" > "$0.args"
{extra}
cat <<'__STDOUT__'
{stdout}
__STDOUT__
cat >&2 <<'__STDERR__'
{stderr}
__STDERR__
exit {returncode}
""",
        encoding="utf-8",
    )
    filename.chmod(filename.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP)
    return filename


def tool_args(filename: pathlib.Path) -> list[str]:
    args_file = filename.with_name(filename.name + ".args")
    return args_file.read_text().splitlines()


@pytest.fixture
def workspace(tmp_path: pathlib.Path) -> WorkspaceLayout:
    return WorkspaceLayout(user_data=tmp_path / "user_data", tools=tmp_path / "tools")
