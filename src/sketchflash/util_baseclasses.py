from __future__ import annotations

import dataclasses


class SketchflashException(Exception):
    """
    Base of all exceptions raised by a build or flash operation.
    """


class WorkspaceIOException(SketchflashException):
    """
    Creating a workspace directory or writing the sketch failed.
    """


class SpawnException(SketchflashException):
    """
    The executable is missing or not runnable.
    """


class DeviceNotFoundException(SketchflashException):
    """
    After the touch reset, the board did not show up again.
    """


class OrchestratorBusyException(SketchflashException):
    """
    A build or flash is already in flight on this instance.
    """


class SerialIOException(SketchflashException):
    """
    Opening or closing the serial port failed.
    """


class UnknownBoardException(SketchflashException, KeyError):
    def __str__(self) -> str:
        # KeyError would quote the message
        return Exception.__str__(self)


class ExitCodeException(SketchflashException):
    MSG = "Tool failed"

    def __init__(self, returncode: int, args: list[str]) -> None:
        assert isinstance(returncode, int)
        assert isinstance(args, list)
        self.returncode = returncode
        self.args_tool = args
        super().__init__(f"{self.MSG} (returncode={returncode}): {' '.join(args)}")


class BuildException(ExitCodeException):
    MSG = "Build failed"


class BuildFailedException(BuildException):
    MSG = "Build failed"


class SketchNotFoundException(BuildException):
    MSG = "Sketch not found"


class InvalidArgumentsException(BuildException):
    MSG = "Invalid (argument for) commandline option"


class UnknownPreferenceException(BuildException):
    MSG = "Preference passed to --get-pref does not exist"


class FlashFailedException(ExitCodeException):
    MSG = "avrdude failed to flash"


class UnrecognizedExitCodeException(ExitCodeException):
    MSG = "Unrecognized exit code"


@dataclasses.dataclass(frozen=True, repr=True, eq=True)
class BoardProfile:
    """
    Example:

    >>> BoardProfile(
        fqbn="arduino:avr:uno",
        partno="atmega328p",
        programmer_id="arduino",
        baudrate=115200,
    )
    """

    fqbn: str
    """
    fully qualified board name, as used by arduino-builder
    """
    partno: str
    """
    avrdude '-p'
    """
    programmer_id: str
    """
    avrdude '-c'
    """
    baudrate: int
    """
    avrdude '-b'
    """

    def __post_init__(self) -> None:
        assert isinstance(self.fqbn, str)
        assert isinstance(self.partno, str)
        assert isinstance(self.programmer_id, str)
        assert isinstance(self.baudrate, int)


@dataclasses.dataclass(frozen=True, repr=True, eq=True)
class Peripheral:
    """
    A serial port visible to the host.
    """

    path: str
    """
    Example: /dev/ttyACM0, COM3
    """
    pnp_id: str
    """
    Example: USB\\VID_2341&PID_8036\\6&2B5B8E6E&0&1
    The first 21 characters are the key into the usb id table.
    """

    def __post_init__(self) -> None:
        assert isinstance(self.path, str)
        assert isinstance(self.pnp_id, str)


@dataclasses.dataclass(frozen=True, repr=True, eq=True)
class PeripheralParams:
    """
    Parameters used to open a serial port.
    """

    path: str
    baudrate: int = 115200

    def __post_init__(self) -> None:
        assert isinstance(self.path, str)
        assert isinstance(self.baudrate, int)
