"""
Leonardo style boards require to open and close the serial port
at 1200 baud to enter the bootloader.

The bootloader enumerates as a new usb device. On windows, this
changes the serial port name. The new port is found by rescanning
the ports and matching the usb id.
"""

from __future__ import annotations

import asyncio
import dataclasses
import enum
import logging
from collections.abc import Awaitable, Callable

from .util_baseclasses import PeripheralParams
from .util_constants import DELAY_AFTER_CLOSE_S, DELAY_AFTER_OPEN_S, TOUCH_BAUDRATE
from .util_device_rediscovery import resolve
from .util_serial import SerialCapabilitiesABC

logger = logging.getLogger(__file__)

SleepCallback = Callable[[float], Awaitable[None]]


class EnumHandshakeState(enum.StrEnum):
    IDLE = "idle"
    TOUCHING = "touching"
    SETTLING_AFTER_OPEN = "settling_after_open"
    DISCONNECTED = "disconnected"
    SETTLING_AFTER_CLOSE = "settling_after_close"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    FAILED = "failed"


class BootloaderHandshake:
    """
    One touch reset. Use a new instance for every flash operation:
    The resolved path must never leak into a later flash.
    """

    def __init__(
        self,
        capabilities: SerialCapabilitiesABC,
        params: PeripheralParams,
        target_name: str,
        sleep: SleepCallback = asyncio.sleep,
    ) -> None:
        assert isinstance(capabilities, SerialCapabilitiesABC)
        assert isinstance(params, PeripheralParams)
        assert isinstance(target_name, str)
        self._capabilities = capabilities
        self._params = params
        self._target_name = target_name
        self._sleep = sleep
        self.state = EnumHandshakeState.IDLE

    def _set_state(self, state: EnumHandshakeState) -> None:
        logger.debug(f"{self._target_name}: {self.state} -> {state}")
        self.state = state

    async def run(self) -> str:
        """
        Return the serial port of the board in bootloader mode.
        """
        assert self.state == EnumHandshakeState.IDLE, self.state

        params_touch = dataclasses.replace(self._params, baudrate=TOUCH_BAUDRATE)
        logger.info(
            f"Touch reset {self._target_name} on {params_touch.path} at {TOUCH_BAUDRATE} baud"
        )

        try:
            path = await self._touch_and_resolve(params_touch)
        except Exception:
            self._set_state(EnumHandshakeState.FAILED)
            raise

        self._set_state(EnumHandshakeState.RESOLVED)
        logger.info(f"{self._target_name} bootloader on {path}")
        return path

    async def _touch_and_resolve(self, params_touch: PeripheralParams) -> str:
        self._set_state(EnumHandshakeState.TOUCHING)
        await self._capabilities.connect(params_touch, True)
        self._set_state(EnumHandshakeState.SETTLING_AFTER_OPEN)
        await self._sleep(DELAY_AFTER_OPEN_S)
        await self._capabilities.disconnect()
        self._set_state(EnumHandshakeState.DISCONNECTED)
        self._set_state(EnumHandshakeState.SETTLING_AFTER_CLOSE)
        await self._sleep(DELAY_AFTER_CLOSE_S)

        self._set_state(EnumHandshakeState.RESOLVING)
        peripherals = await self._capabilities.list()
        return resolve(peripherals, self._target_name)
