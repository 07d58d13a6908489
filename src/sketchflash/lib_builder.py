"""
Compiles the sketch using arduino-builder.

arduino-builder exit codes:
  0: Success
  1: Build failed
  2: Sketch not found
  3: Invalid (argument for) commandline option
  4: Preference passed to --get-pref does not exist
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .util_baseclasses import (
    BoardProfile,
    BuildException,
    BuildFailedException,
    InvalidArgumentsException,
    SketchNotFoundException,
    UnknownPreferenceException,
    UnrecognizedExitCodeException,
)
from .util_output_classifier import (
    EnumOutputKind,
    OutputEvent,
    classify_build_stderr,
    classify_build_stdout,
)
from .util_subprocess import subprocess_stream
from .util_workspace import WorkspaceLayout

logger = logging.getLogger(__file__)

OutputSink = Callable[[OutputEvent], None]

_DICT_EXIT_CODES: dict[int, type[BuildException]] = {
    1: BuildFailedException,
    2: SketchNotFoundException,
    3: InvalidArgumentsException,
    4: UnknownPreferenceException,
}


class BuildOrchestrator:
    def __init__(
        self,
        workspace: WorkspaceLayout,
        board: BoardProfile,
        sendstd: OutputSink,
    ) -> None:
        assert isinstance(workspace, WorkspaceLayout)
        assert isinstance(board, BoardProfile)
        self._workspace = workspace
        self._board = board
        self._sendstd = sendstd

    def args(self) -> list[str]:
        ws = self._workspace
        args = [
            str(ws.filename_arduino_builder),
            "-compile",
            "-logger=human",
            "-hardware",
            str(ws.directory_arduino / "hardware"),
            "-tools",
            str(ws.directory_arduino / "tools-builder"),
            "-tools",
            str(ws.directory_avr_tools),
            "-libraries",
            str(ws.directory_arduino / "libraries"),
            "-fqbn",
            self._board.fqbn,
            "-build-path",
            str(ws.directory_build),
            "-build-cache",
            str(ws.directory_cache),
            "-warnings=none",
            "-verbose",
            str(ws.filename_sketch),
        ]
        if ws.directory_extensions_libraries.exists():
            # Directly after the base libraries: arduino-builder uses them as fallback.
            idx = args.index(str(ws.directory_arduino / "libraries")) + 1
            args[idx:idx] = ["-libraries", str(ws.directory_extensions_libraries)]
        return args

    def _send(self, events: list[OutputEvent]) -> None:
        for event in events:
            self._sendstd(event)

    async def build(self, code: bytes) -> None:
        """
        Writes the sketch and compiles it.
        Raises a BuildException depending on the exit code of arduino-builder.
        """
        assert isinstance(code, bytes)
        self._workspace.write_sketch(code)

        args = self.args()
        returncode = await subprocess_stream(
            args=args,
            cwd=self._workspace.directory_project,
            on_stdout=lambda chunk: self._send(classify_build_stdout(chunk)),
            on_stderr=lambda chunk: self._send(classify_build_stderr(chunk)),
        )
        self._sendstd(OutputEvent(EnumOutputKind.PLAIN, "\r\n"))

        if returncode == 0:
            logger.info("[COLOR_SUCCESS]Build succeeded")
            return
        try:
            cls_exception = _DICT_EXIT_CODES[returncode]
        except KeyError as e:
            raise UnrecognizedExitCodeException(returncode=returncode, args=args) from e
        raise cls_exception(returncode=returncode, args=args)
