"""
The realtime firmware turns the board into a device which is
controlled live over the serial port (firmata style).
One prebuilt hex file per board.
"""

from __future__ import annotations

import pathlib

from .util_baseclasses import UnknownBoardException

FIRMWARE: dict[str, str] = {
    "arduino:avr:uno": "arduinoUno.standardFirmata.ino.hex",
    "arduino:avr:nano:cpu=atmega328": "arduinoNano.standardFirmata.ino.hex",
    "arduino:avr:nano:cpu=atmega328old": "arduinoNano.standardFirmata.ino.hex",
    "arduino:avr:leonardo": "arduinoLeonardo.standardFirmata.ino.hex",
    "arduino:avr:mega:cpu=atmega2560": "arduinoMega2560.standardFirmata.ino.hex",
    "SparkFun:avr:makeymakey": "makeymakey.standardFirmata.ino.hex",
}


def firmware_filename(directory: pathlib.Path, fqbn: str) -> pathlib.Path:
    """
    Example return: <tools>/RealtimeFirmware/arduino/arduinoUno.standardFirmata.ino.hex
    """
    assert isinstance(directory, pathlib.Path)
    assert isinstance(fqbn, str)
    try:
        return directory / FIRMWARE[fqbn]
    except KeyError as e:
        raise UnknownBoardException(
            f"No realtime firmware for board '{fqbn}'!"
        ) from e
