import enum
import os
import pathlib

ENV_SKETCHFLASH_USER_DATA = "SKETCHFLASH_USER_DATA"
try:
    DIRECTORY_SKETCHFLASH_USER_DATA = pathlib.Path(
        os.environ[ENV_SKETCHFLASH_USER_DATA]
    )
except KeyError:
    DIRECTORY_SKETCHFLASH_USER_DATA = pathlib.Path.home() / ".sketchflash"

ENV_SKETCHFLASH_TOOLS = "SKETCHFLASH_TOOLS"
try:
    DIRECTORY_SKETCHFLASH_TOOLS = pathlib.Path(os.environ[ENV_SKETCHFLASH_TOOLS])
except KeyError:
    DIRECTORY_SKETCHFLASH_TOOLS = DIRECTORY_SKETCHFLASH_USER_DATA / "tools"

TOUCH_BAUDRATE = 1200
"""
Opening and closing the serial port at this baudrate resets
a 32u4 based board into its bootloader.
"""

DELAY_AFTER_OPEN_S = 0.1
DELAY_AFTER_CLOSE_S = 1.0
"""
The board reboots into the bootloader and the OS enumerates it again.
"""

SETTLE_AFTER_FLASH_S = 1.0
"""
After flashing, the board leaves the bootloader and re-enumerates.
"""

PNP_ID_PREFIX_LEN = 21
"""
Example: USB\\VID_2341&PID_8036
"""


class ExitCode(enum.IntEnum):
    """
    Exit codes of the 'sketchflash' command.
    """

    SUCCESS = 0
    "Build/flash succeeded"
    FAILURE = 1
    "Build/flash failed: See the output of the tool."
