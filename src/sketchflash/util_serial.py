"""
The serial port operations required by the touch reset.

Build and flash only need 'connect', 'disconnect' and 'list'.
They are injected so that a host application may share its
own serial connection and tests may record the calls.
"""

from __future__ import annotations

import abc
import asyncio
import logging
import typing

import typing_extensions

import serial
from serial.tools import list_ports

from .util_baseclasses import Peripheral, PeripheralParams, SerialIOException
from .util_usb_id import pnp_id_from_usb

logger = logging.getLogger(__file__)


class SerialCapabilitiesABC(abc.ABC):
    @abc.abstractmethod
    async def connect(self, params: PeripheralParams, exclusive: bool) -> None:
        """
        Open the port 'params.path' with 'params.baudrate'.
        When this returns, the port is open.
        """

    @abc.abstractmethod
    async def disconnect(self) -> None:
        """
        Close the port opened by 'connect()'.
        Does nothing if no port is open.
        """

    @abc.abstractmethod
    async def list(self) -> list[Peripheral] | None:
        """
        Return the ports currently visible.
        None or [] means: No devices visible. This is not an error.
        """


class PyserialCapabilities(SerialCapabilitiesABC):
    def __init__(self) -> None:
        self._serial: serial.Serial | None = None

    @typing_extensions.override
    async def connect(self, params: PeripheralParams, exclusive: bool) -> None:
        assert isinstance(params, PeripheralParams)
        assert isinstance(exclusive, bool)
        await self.disconnect()
        logger.debug(f"Open {params.path} with baudrate={params.baudrate}")
        try:
            self._serial = await asyncio.to_thread(
                serial.Serial,
                port=params.path,
                baudrate=params.baudrate,
                exclusive=exclusive,
            )
        except (OSError, serial.SerialException) as e:
            raise SerialIOException(
                f"Failed to open '{params.path}' at {params.baudrate} baud: {e}"
            ) from e

    @typing_extensions.override
    async def disconnect(self) -> None:
        if self._serial is None:
            return
        logger.debug(f"Close {self._serial.port}")
        serial_port, self._serial = self._serial, None
        try:
            await asyncio.to_thread(serial_port.close)
        except (OSError, serial.SerialException) as e:
            raise SerialIOException(f"Failed to close '{serial_port.port}': {e}") from e

    @typing_extensions.override
    async def list(self) -> list[Peripheral] | None:
        ports = await asyncio.to_thread(list_ports.comports)
        return [peripheral_factory(port) for port in ports]


def peripheral_factory(port: typing.Any) -> Peripheral:
    """
    'port' is a 'ListPortInfo' as returned by 'serial.tools.list_ports.comports()'.
    """
    if port.vid is None or port.pid is None:
        return Peripheral(path=port.device, pnp_id=port.hwid)
    return Peripheral(
        path=port.device,
        pnp_id=pnp_id_from_usb(
            vid=port.vid, pid=port.pid, serial_number=port.serial_number
        ),
    )
