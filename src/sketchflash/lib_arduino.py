from __future__ import annotations

import asyncio
import contextlib
import logging
import pathlib
from collections.abc import Iterator

from .lib_builder import BuildOrchestrator, OutputSink
from .lib_flasher import FlashOrchestrator
from .util_baseclasses import BoardProfile, OrchestratorBusyException, PeripheralParams
from .util_bootloader import SleepCallback
from .util_encoding import encode_source
from .util_serial import SerialCapabilitiesABC
from .util_workspace import WorkspaceLayout

logger = logging.getLogger(__file__)


class Arduino:
    """
    Builds a sketch and flashes it to one board.

    Build and flash are sequential: Starting an operation while
    another one is in flight raises OrchestratorBusyException.
    """

    def __init__(
        self,
        workspace: WorkspaceLayout,
        board: BoardProfile,
        params: PeripheralParams,
        capabilities: SerialCapabilitiesABC,
        sendstd: OutputSink,
        sleep: SleepCallback = asyncio.sleep,
    ) -> None:
        self.workspace = workspace
        self.board = board
        self.builder = BuildOrchestrator(
            workspace=workspace,
            board=board,
            sendstd=sendstd,
        )
        self.flasher = FlashOrchestrator(
            workspace=workspace,
            board=board,
            params=params,
            capabilities=capabilities,
            sendstd=sendstd,
            sleep=sleep,
        )
        self._busy: str | None = None

    @contextlib.contextmanager
    def _operation(self, label: str) -> Iterator[None]:
        if self._busy is not None:
            raise OrchestratorBusyException(
                f"Can not start '{label}' while '{self._busy}' is in flight!"
            )
        self._busy = label
        try:
            yield
        finally:
            self._busy = None

    async def build(self, code: str, locale_name: str | None = None) -> None:
        with self._operation("build"):
            await self.builder.build(encode_source(code, locale_name=locale_name))

    async def flash(self, firmware: pathlib.Path | None = None) -> None:
        with self._operation("flash"):
            await self.flasher.flash(firmware=firmware)

    async def flash_realtime_firmware(self) -> None:
        with self._operation("flash_realtime_firmware"):
            await self.flasher.flash_realtime_firmware()
