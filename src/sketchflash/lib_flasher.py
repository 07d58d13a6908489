"""
Flashes a hex file using avrdude.

avrdude exit codes:
  0: Success
  1: Failed to flash
"""

from __future__ import annotations

import asyncio
import logging
import pathlib

from .lib_builder import OutputSink
from .util_baseclasses import (
    BoardProfile,
    FlashFailedException,
    PeripheralParams,
    UnrecognizedExitCodeException,
)
from .util_boards import touch_reset_device_name
from .util_bootloader import BootloaderHandshake, SleepCallback
from .util_constants import SETTLE_AFTER_FLASH_S
from .util_firmware import firmware_filename
from .util_output_classifier import classify_flash_stderr, classify_flash_stdout
from .util_serial import SerialCapabilitiesABC
from .util_subprocess import subprocess_stream
from .util_workspace import WorkspaceLayout

logger = logging.getLogger(__file__)


class FlashOrchestrator:
    def __init__(
        self,
        workspace: WorkspaceLayout,
        board: BoardProfile,
        params: PeripheralParams,
        capabilities: SerialCapabilitiesABC,
        sendstd: OutputSink,
        sleep: SleepCallback = asyncio.sleep,
    ) -> None:
        assert isinstance(workspace, WorkspaceLayout)
        assert isinstance(board, BoardProfile)
        assert isinstance(params, PeripheralParams)
        assert isinstance(capabilities, SerialCapabilitiesABC)
        self._workspace = workspace
        self._board = board
        self._params = params
        self._capabilities = capabilities
        self._sendstd = sendstd
        self._sleep = sleep

    @property
    def touch_reset_name(self) -> str | None:
        return touch_reset_device_name(self._board)

    async def resolve_target(self) -> str:
        """
        Return the serial port to be passed to avrdude.

        Touch reset boards change the port when entering the bootloader.
        The port is resolved again for every flash.
        """
        target_name = self.touch_reset_name
        if target_name is None:
            return self._params.path

        handshake = BootloaderHandshake(
            capabilities=self._capabilities,
            params=self._params,
            target_name=target_name,
            sleep=self._sleep,
        )
        return await handshake.run()

    def args(self, target: str, firmware: pathlib.Path) -> list[str]:
        assert isinstance(target, str)
        assert isinstance(firmware, pathlib.Path)
        ws = self._workspace
        return [
            str(ws.filename_avrdude),
            "-C",
            str(ws.filename_avrdude_conf),
            "-v",
            f"-p{self._board.partno}",
            f"-c{self._board.programmer_id}",
            f"-P{target}",
            f"-b{self._board.baudrate}",
            "-D",
            f"-Uflash:w:{firmware}:i",
        ]

    def _send_stderr(self, chunk: str) -> None:
        for event in classify_flash_stderr(chunk):
            self._sendstd(event)

    def _send_stdout(self, chunk: str) -> None:
        for event in classify_flash_stdout(chunk):
            self._sendstd(event)

    async def flash(self, firmware: pathlib.Path | None = None) -> None:
        """
        If 'firmware' is None: Flash the hex file just built.
        """
        assert isinstance(firmware, pathlib.Path | None)
        if firmware is None:
            firmware = self._workspace.filename_hex
        # avrdude runs in its own directory
        firmware = firmware.absolute()

        target = await self.resolve_target()

        args = self.args(target=target, firmware=firmware)
        returncode = await subprocess_stream(
            args=args,
            cwd=self._workspace.filename_avrdude.parent,
            on_stdout=self._send_stdout,
            on_stderr=self._send_stderr,
        )

        if returncode == 0:
            if self.touch_reset_name is not None:
                # Wait for the board to re-enumerate in application mode
                await self._sleep(SETTLE_AFTER_FLASH_S)
            logger.info(f"[COLOR_SUCCESS]Flashed {firmware.name} to {target}")
            return
        if returncode == 1:
            raise FlashFailedException(returncode=returncode, args=args)
        raise UnrecognizedExitCodeException(returncode=returncode, args=args)

    async def flash_realtime_firmware(self) -> None:
        firmware = firmware_filename(
            directory=self._workspace.directory_realtime_firmware,
            fqbn=self._board.fqbn,
        )
        await self.flash(firmware=firmware)
