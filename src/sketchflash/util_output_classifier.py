"""
Splits the raw output of arduino-builder and avrdude into tagged segments.

The classifier is stateless: it only sees one chunk.
avrdude writes its progress bar intermittently, so a progress span
typically starts in one chunk and ends in a later one.
Tracking open spans is the job of the renderer, see util_output_render.py.
"""

from __future__ import annotations

import dataclasses
import enum
import re

RE_BUILD_BANNER = re.compile(r"Sketch uses|Global variables")
"""
Example: Sketch uses 924 bytes (2%) of program storage space. Maximum is 32256 bytes.
"""

RE_FLASH_PROGRESS_START = re.compile(r"Reading \||Writing \|")
"""
Example: Writing | ################################################## | 100% 0.40s
"""
RE_FLASH_PROGRESS_END = re.compile(r"%")
RE_FLASH_DONE = re.compile(r"avrdude done")
RE_FLASH_ERROR = re.compile(r"can't open device|programmer is not responding")


class EnumOutputKind(enum.StrEnum):
    PROGRESS_START = "progress-start"
    PROGRESS_END = "progress-end"
    BANNER = "banner"
    ERROR = "error"
    PLAIN = "plain"


@dataclasses.dataclass(frozen=True, repr=True, eq=True)
class OutputEvent:
    kind: EnumOutputKind
    text: str

    def __post_init__(self) -> None:
        assert isinstance(self.kind, EnumOutputKind)
        assert isinstance(self.text, str)


def classify_build_stderr(chunk: str) -> list[OutputEvent]:
    assert isinstance(chunk, str)
    if chunk.strip() == "":
        return [OutputEvent(EnumOutputKind.PLAIN, chunk)]
    return [OutputEvent(EnumOutputKind.ERROR, chunk)]


def classify_build_stdout(chunk: str) -> list[OutputEvent]:
    """
    The memory usage report is a banner, everything else is plain.
    """
    assert isinstance(chunk, str)
    if RE_BUILD_BANNER.search(chunk) is None:
        return [OutputEvent(EnumOutputKind.PLAIN, chunk)]
    return [OutputEvent(EnumOutputKind.BANNER, chunk)]


def classify_flash_stdout(chunk: str) -> list[OutputEvent]:
    """
    avrdude does not seem to use stdout.
    """
    assert isinstance(chunk, str)
    return [OutputEvent(EnumOutputKind.PLAIN, chunk)]


def _flash_boundaries(chunk: str) -> dict[int, EnumOutputKind]:
    """
    Return position -> kind of the segment starting at this position.
    """
    boundaries: dict[int, EnumOutputKind] = {}
    for match in RE_FLASH_PROGRESS_START.finditer(chunk):
        boundaries[match.start()] = EnumOutputKind.PROGRESS_START
    for match in RE_FLASH_DONE.finditer(chunk):
        boundaries[match.start()] = EnumOutputKind.BANNER
    for match in RE_FLASH_ERROR.finditer(chunk):
        boundaries[match.start()] = EnumOutputKind.ERROR
    for match in RE_FLASH_PROGRESS_END.finditer(chunk):
        # The percent sign becomes a segment of its own.
        boundaries[match.start()] = EnumOutputKind.PROGRESS_END
        boundaries.setdefault(match.end(), EnumOutputKind.PLAIN)
    return boundaries


def classify_flash_stderr(chunk: str) -> list[OutputEvent]:
    """
    Example chunk: 'avrdude: 45% '
    Returns:
      plain 'avrdude: 45'
      progress-end '%'
      plain ' '

    Joining the text of the returned events gives back 'chunk'.
    """
    assert isinstance(chunk, str)
    boundaries = _flash_boundaries(chunk)
    boundaries.setdefault(0, EnumOutputKind.PLAIN)
    positions = sorted(p for p in boundaries if p < len(chunk))

    events: list[OutputEvent] = []
    for idx, begin in enumerate(positions):
        end = positions[idx + 1] if idx + 1 < len(positions) else len(chunk)
        text = chunk[begin:end]
        if text == "":
            continue
        events.append(OutputEvent(boundaries[begin], text))
    return events
