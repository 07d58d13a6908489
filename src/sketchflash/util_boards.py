"""
Boards known to sketchflash.

Boards which reset into the bootloader by a 1200 baud touch
are listed in TOUCH_RESET_BOARDS together with the name they report
on usb. See util_usb_id.py.
"""

from __future__ import annotations

from .util_baseclasses import BoardProfile, UnknownBoardException
from .util_usb_id import NAME_ARDUINO_LEONARDO, NAME_MAKEY_MAKEY

FQBN_LEONARDO = "arduino:avr:leonardo"
FQBN_MAKEYMAKEY = "SparkFun:avr:makeymakey"

TOUCH_RESET_BOARDS: dict[str, str] = {
    FQBN_LEONARDO: NAME_ARDUINO_LEONARDO,
    FQBN_MAKEYMAKEY: NAME_MAKEY_MAKEY,
}
"""
fqbn -> device name after the touch reset
"""

_BOARDS = [
    BoardProfile(
        fqbn="arduino:avr:uno",
        partno="atmega328p",
        programmer_id="arduino",
        baudrate=115200,
    ),
    BoardProfile(
        fqbn="arduino:avr:nano:cpu=atmega328",
        partno="atmega328p",
        programmer_id="arduino",
        baudrate=115200,
    ),
    BoardProfile(
        fqbn="arduino:avr:nano:cpu=atmega328old",
        partno="atmega328p",
        programmer_id="arduino",
        baudrate=57600,
    ),
    BoardProfile(
        fqbn="arduino:avr:mega:cpu=atmega2560",
        partno="atmega2560",
        programmer_id="wiring",
        baudrate=115200,
    ),
    BoardProfile(
        fqbn=FQBN_LEONARDO,
        partno="atmega32u4",
        programmer_id="avr109",
        baudrate=57600,
    ),
    BoardProfile(
        fqbn=FQBN_MAKEYMAKEY,
        partno="atmega32u4",
        programmer_id="avr109",
        baudrate=57600,
    ),
]

BOARDS: dict[str, BoardProfile] = {board.fqbn: board for board in _BOARDS}


def touch_reset_device_name(board: BoardProfile) -> str | None:
    """
    Return the usb device name to look for after the touch reset.
    Return None if the board does not require a touch reset.
    """
    assert isinstance(board, BoardProfile)
    return TOUCH_RESET_BOARDS.get(board.fqbn, None)


def board_factory(fqbn: str) -> BoardProfile:
    assert isinstance(fqbn, str)
    try:
        return BOARDS[fqbn]
    except KeyError as e:
        raise UnknownBoardException(
            f"Unknown board '{fqbn}'! Known boards: {', '.join(BOARDS)}"
        ) from e
