from __future__ import annotations

import dataclasses

import pytest

from sketchflash.util_output_classifier import (
    EnumOutputKind,
    OutputEvent,
    classify_build_stderr,
    classify_build_stdout,
    classify_flash_stderr,
    classify_flash_stdout,
)
from sketchflash.util_output_render import STYLE_ERROR, STYLE_PROGRESS, OutputRenderer

K = EnumOutputKind


@dataclasses.dataclass
class Ttestparam:
    label: str
    chunk: str
    expected: list[tuple[EnumOutputKind, str]]

    @property
    def pytest_id(self) -> str:
        return self.label


_TESTPARAMS_FLASH = [
    Ttestparam(label="empty", chunk="", expected=[]),
    Ttestparam(
        label="plain",
        chunk="avrdude: Device signature = 0x1e950f (probably m328p)\n",
        expected=[(K.PLAIN, "avrdude: Device signature = 0x1e950f (probably m328p)\n")],
    ),
    Ttestparam(
        label="progress-start",
        chunk="\nWriting | ####",
        expected=[(K.PLAIN, "\n"), (K.PROGRESS_START, "Writing | ####")],
    ),
    Ttestparam(
        label="progress-end",
        chunk="avrdude: 45% ",
        expected=[(K.PLAIN, "avrdude: 45"), (K.PROGRESS_END, "%"), (K.PLAIN, " ")],
    ),
    Ttestparam(
        label="progress-complete",
        chunk="Reading | ###### | 100% 0.01s\n",
        expected=[
            (K.PROGRESS_START, "Reading | ###### | 100"),
            (K.PROGRESS_END, "%"),
            (K.PLAIN, " 0.01s\n"),
        ],
    ),
    Ttestparam(
        label="done",
        chunk="\navrdude done.  Thank you.\n\n",
        expected=[(K.PLAIN, "\n"), (K.BANNER, "avrdude done.  Thank you.\n\n")],
    ),
    Ttestparam(
        label="cant-open-device",
        chunk="avrdude: ser_open(): can't open device \"COM3\": No such file\n",
        expected=[
            (K.PLAIN, "avrdude: ser_open(): "),
            (K.ERROR, "can't open device \"COM3\": No such file\n"),
        ],
    ),
    Ttestparam(
        label="not-responding",
        chunk="avrdude: stk500_recv(): programmer is not responding\n",
        expected=[
            (K.PLAIN, "avrdude: stk500_recv(): "),
            (K.ERROR, "programmer is not responding\n"),
        ],
    ),
    Ttestparam(
        label="two-progress-bars",
        chunk="Writing | ## | 100% 0.4s\n\nReading | ## | 100% 0.3s\n",
        expected=[
            (K.PROGRESS_START, "Writing | ## | 100"),
            (K.PROGRESS_END, "%"),
            (K.PLAIN, " 0.4s\n\n"),
            (K.PROGRESS_START, "Reading | ## | 100"),
            (K.PROGRESS_END, "%"),
            (K.PLAIN, " 0.3s\n"),
        ],
    ),
]


@pytest.mark.parametrize(
    "testparam", _TESTPARAMS_FLASH, ids=lambda testparam: testparam.pytest_id
)
def test_classify_flash_stderr(testparam: Ttestparam) -> None:
    events = classify_flash_stderr(testparam.chunk)
    assert [(e.kind, e.text) for e in events] == testparam.expected
    assert "".join(e.text for e in events) == testparam.chunk


def test_classify_build() -> None:
    banner = "Sketch uses 924 bytes (2%) of program storage space.\n"
    assert classify_build_stdout(banner) == [OutputEvent(K.BANNER, banner)]
    variables = "Global variables use 9 bytes (0%) of dynamic memory.\n"
    assert classify_build_stdout(variables) == [OutputEvent(K.BANNER, variables)]
    compiling = "Compiling sketch...\n"
    assert classify_build_stdout(compiling) == [OutputEvent(K.PLAIN, compiling)]

    error = "arduino.ino:3:1: error: expected ';' before '}' token\n"
    assert classify_build_stderr(error) == [OutputEvent(K.ERROR, error)]
    assert classify_build_stderr("\n") == [OutputEvent(K.PLAIN, "\n")]


def test_classify_flash_stdout_is_verbatim() -> None:
    chunk = "Writing | 50% avrdude done"
    assert classify_flash_stdout(chunk) == [OutputEvent(K.PLAIN, chunk)]


def test_render_progress_over_chunks() -> None:
    """
    The progress span opened in the first chunk is closed
    by the percent sign in the second chunk.
    """
    renderer = OutputRenderer()
    events = classify_flash_stderr("\nWriting | ##") + classify_flash_stderr(
        "avrdude: 45% done\n"
    )
    kinds = [e.kind for e in events]
    assert kinds.index(K.PROGRESS_START) < kinds.index(K.PROGRESS_END)

    rendered = [renderer.render(e) for e in events]
    assert rendered == [
        "\n",
        STYLE_PROGRESS.render("Writing | ##"),
        STYLE_PROGRESS.render("avrdude: 45"),
        STYLE_PROGRESS.render("%"),
        " done\n",
    ]


def test_render_error_and_no_color() -> None:
    event = OutputEvent(K.ERROR, "programmer is not responding")
    assert OutputRenderer().render(event) == STYLE_ERROR.render(event.text)
    assert OutputRenderer(color=False).render(event) == event.text

    renderer = OutputRenderer()
    renderer.render(OutputEvent(K.PROGRESS_START, "Writing | "))
    # The banner closes the progress span
    assert renderer.render(OutputEvent(K.BANNER, "avrdude done")) == "avrdude done"
    assert renderer.render(OutputEvent(K.PLAIN, "\n")) == "\n"
