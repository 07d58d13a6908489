from __future__ import annotations

import asyncio
import logging
import pathlib
import sys
from collections.abc import Awaitable, Callable
from typing import Optional

import typer
import typing_extensions

from ..lib_arduino import Arduino
from ..util_baseclasses import (
    PeripheralParams,
    SketchflashException,
    UnknownBoardException,
)
from ..util_boards import BOARDS, board_factory
from ..util_constants import (
    DIRECTORY_SKETCHFLASH_TOOLS,
    DIRECTORY_SKETCHFLASH_USER_DATA,
    ExitCode,
)
from ..util_logging import init_logging
from ..util_output_render import AnsiSink
from ..util_serial import PyserialCapabilities
from ..util_usb_id import lookup, pnp_id_prefix
from ..util_workspace import WorkspaceLayout

# 'typer' does not work correctly with typing.Annotated
# Required is: typing_extensions.Annotated
TyperAnnotated = typing_extensions.Annotated

# mypy: disable-error-code="valid-type"

logger = logging.getLogger(__file__)

app = typer.Typer()

_BoardAnnotation = TyperAnnotated[
    str,
    typer.Option(help=f"fqbn of the board. One of: {', '.join(BOARDS)}"),
]
_PortAnnotation = TyperAnnotated[
    str,
    typer.Option(help="Serial port of the board, for example /dev/ttyACM0 or COM3"),
]
_UserDataAnnotation = TyperAnnotated[
    pathlib.Path,
    typer.Option(help="Directory for the build workspace"),
]
_ToolsAnnotation = TyperAnnotated[
    pathlib.Path,
    typer.Option(help="Directory containing 'Arduino/arduino-builder'"),
]
_DebugAnnotation = TyperAnnotated[bool, typer.Option(help="Verbose logging")]
_NoColorAnnotation = TyperAnnotated[bool, typer.Option(help="Do not colorize")]


def _arduino(
    board: str,
    port: str,
    user_data: pathlib.Path,
    tools: pathlib.Path,
    debug: bool,
    no_color: bool,
) -> Arduino:
    init_logging(logging.DEBUG if debug else None, color=not no_color)
    try:
        board_profile = board_factory(board)
    except UnknownBoardException as e:
        raise typer.BadParameter(str(e)) from e

    def write(text: str) -> None:
        sys.stdout.write(text)
        sys.stdout.flush()

    return Arduino(
        workspace=WorkspaceLayout(user_data=user_data, tools=tools),
        board=board_profile,
        params=PeripheralParams(path=port),
        capabilities=PyserialCapabilities(),
        sendstd=AnsiSink(write=write, color=not no_color),
    )


def _run(operation: Callable[[], Awaitable[None]]) -> None:
    try:
        asyncio.run(operation())
    except SketchflashException as e:
        logger.error(f"[COLOR_ERROR]{e}")
        raise typer.Exit(code=ExitCode.FAILURE) from e


@app.command(name="list", help="List serial ports and the boards connected.")
def list_ports(debug: _DebugAnnotation = False) -> None:
    init_logging(logging.DEBUG if debug else None)

    peripherals = asyncio.run(PyserialCapabilities().list())
    if not peripherals:
        print("No serial ports visible.")
        return
    for peripheral in peripherals:
        name = lookup(pnp_id_prefix(peripheral.pnp_id))
        print(f"{peripheral.path}: {name} ({peripheral.pnp_id})")


@app.command(help="Compile a sketch.")
def build(
    sketch: pathlib.Path,
    board: _BoardAnnotation,
    user_data: _UserDataAnnotation = DIRECTORY_SKETCHFLASH_USER_DATA,
    tools: _ToolsAnnotation = DIRECTORY_SKETCHFLASH_TOOLS,
    debug: _DebugAnnotation = False,
    no_color: _NoColorAnnotation = False,
) -> None:
    arduino = _arduino(board, "", user_data, tools, debug, no_color)
    code = sketch.read_text()
    _run(lambda: arduino.build(code))


@app.command(help="Compile a sketch and flash it.")
def upload(
    sketch: pathlib.Path,
    board: _BoardAnnotation,
    port: _PortAnnotation,
    user_data: _UserDataAnnotation = DIRECTORY_SKETCHFLASH_USER_DATA,
    tools: _ToolsAnnotation = DIRECTORY_SKETCHFLASH_TOOLS,
    debug: _DebugAnnotation = False,
    no_color: _NoColorAnnotation = False,
) -> None:
    arduino = _arduino(board, port, user_data, tools, debug, no_color)
    code = sketch.read_text()

    async def build_and_flash() -> None:
        await arduino.build(code)
        await arduino.flash()

    _run(build_and_flash)


@app.command(help="Flash a hex file. Default: The hex file built last.")
def flash(
    board: _BoardAnnotation,
    port: _PortAnnotation,
    firmware: TyperAnnotated[
        Optional[pathlib.Path],  # noqa: UP045
        typer.Option(help="Hex file to flash"),
    ] = None,
    user_data: _UserDataAnnotation = DIRECTORY_SKETCHFLASH_USER_DATA,
    tools: _ToolsAnnotation = DIRECTORY_SKETCHFLASH_TOOLS,
    debug: _DebugAnnotation = False,
    no_color: _NoColorAnnotation = False,
) -> None:
    arduino = _arduino(board, port, user_data, tools, debug, no_color)
    _run(lambda: arduino.flash(firmware=firmware))


@app.command(help="Flash the realtime firmware of the board.")
def flash_realtime(
    board: _BoardAnnotation,
    port: _PortAnnotation,
    user_data: _UserDataAnnotation = DIRECTORY_SKETCHFLASH_USER_DATA,
    tools: _ToolsAnnotation = DIRECTORY_SKETCHFLASH_TOOLS,
    debug: _DebugAnnotation = False,
    no_color: _NoColorAnnotation = False,
) -> None:
    arduino = _arduino(board, port, user_data, tools, debug, no_color)
    _run(arduino.flash_realtime_firmware)


if __name__ == "__main__":
    app()
