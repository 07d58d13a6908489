"""
Directory layout used by the build and flash operations.

<user_data>/arduino/project/arduino.ino           sketch
<user_data>/arduino/project/build/                build output
<user_data>/arduino/project/build/arduino.ino.hex artifact
<user_data>/arduino/project/cache/                build cache
<user_data>/../extensions/libraries/Arduino       optional extension libraries

<tools>/Arduino/arduino-builder
<tools>/Arduino/hardware/tools/avr/bin/avrdude
<tools>/Arduino/hardware/tools/avr/etc/avrdude.conf
<tools>/RealtimeFirmware/arduino/                 prebuilt realtime firmware
"""

from __future__ import annotations

import dataclasses
import logging
import pathlib

from .util_baseclasses import WorkspaceIOException

logger = logging.getLogger(__file__)

FILENAME_SKETCH = "arduino.ino"
FILENAME_HEX = FILENAME_SKETCH + ".hex"


@dataclasses.dataclass(frozen=True, repr=True)
class WorkspaceLayout:
    user_data: pathlib.Path
    tools: pathlib.Path

    def __post_init__(self) -> None:
        assert isinstance(self.user_data, pathlib.Path)
        assert isinstance(self.tools, pathlib.Path)
        # The tools run with a different cwd: All paths passed must be absolute.
        object.__setattr__(self, "user_data", self.user_data.absolute())
        object.__setattr__(self, "tools", self.tools.absolute())

    @property
    def directory_project(self) -> pathlib.Path:
        return self.user_data / "arduino" / "project"

    @property
    def filename_sketch(self) -> pathlib.Path:
        return self.directory_project / FILENAME_SKETCH

    @property
    def directory_build(self) -> pathlib.Path:
        return self.directory_project / "build"

    @property
    def directory_cache(self) -> pathlib.Path:
        return self.directory_project / "cache"

    @property
    def filename_hex(self) -> pathlib.Path:
        return self.directory_build / FILENAME_HEX

    @property
    def directory_extensions_libraries(self) -> pathlib.Path:
        return self.user_data.parent / "extensions" / "libraries" / "Arduino"

    @property
    def directory_arduino(self) -> pathlib.Path:
        return self.tools / "Arduino"

    @property
    def directory_avr_tools(self) -> pathlib.Path:
        return self.directory_arduino / "hardware" / "tools" / "avr"

    @property
    def filename_arduino_builder(self) -> pathlib.Path:
        return self.directory_arduino / "arduino-builder"

    @property
    def filename_avrdude(self) -> pathlib.Path:
        return self.directory_avr_tools / "bin" / "avrdude"

    @property
    def filename_avrdude_conf(self) -> pathlib.Path:
        return self.directory_avr_tools / "etc" / "avrdude.conf"

    @property
    def directory_realtime_firmware(self) -> pathlib.Path:
        return self.tools / "RealtimeFirmware" / "arduino"

    def write_sketch(self, code: bytes) -> None:
        """
        Create the build and cache directory and write the sketch.
        arduino-builder fails if the cache directory does not exist.
        """
        assert isinstance(code, bytes)
        try:
            self.directory_build.mkdir(parents=True, exist_ok=True)
            self.directory_cache.mkdir(parents=True, exist_ok=True)
            self.filename_sketch.write_bytes(code)
        except OSError as e:
            raise WorkspaceIOException(
                f"Failed to write sketch '{self.filename_sketch}': {e!r}"
            ) from e
        logger.debug(f"Wrote {len(code)} bytes to {self.filename_sketch}")
