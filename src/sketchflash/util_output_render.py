from __future__ import annotations

import logging
from collections.abc import Callable

from rich.style import Style

from .util_output_classifier import EnumOutputKind, OutputEvent

logger = logging.getLogger(__file__)

STYLE_PROGRESS = Style(color="green")
STYLE_ERROR = Style(color="red")


class OutputRenderer:
    """
    Renders OutputEvents as ansi text.

    A progress span opens with 'progress-start' and stays open,
    possibly over several chunks, until 'progress-end' or 'banner'.
    """

    def __init__(self, color: bool = True) -> None:
        assert isinstance(color, bool)
        self.color = color
        self._progress_open = False

    def _style(self, event: OutputEvent) -> Style | None:
        kind = event.kind
        if kind == EnumOutputKind.PROGRESS_START:
            self._progress_open = True
            return STYLE_PROGRESS
        if kind == EnumOutputKind.PROGRESS_END:
            was_open = self._progress_open
            self._progress_open = False
            return STYLE_PROGRESS if was_open else None
        if kind == EnumOutputKind.BANNER:
            self._progress_open = False
            return None
        if kind == EnumOutputKind.ERROR:
            return STYLE_ERROR
        return STYLE_PROGRESS if self._progress_open else None

    def render(self, event: OutputEvent) -> str:
        assert isinstance(event, OutputEvent)
        style = self._style(event)
        if not self.color or style is None:
            return event.text
        return style.render(event.text)


class AnsiSink:
    """
    Adapts a text sink, for example 'sys.stdout.write', to OutputEvents.
    """

    def __init__(self, write: Callable[[str], object], color: bool = True) -> None:
        self._write = write
        self._renderer = OutputRenderer(color=color)

    def __call__(self, event: OutputEvent) -> None:
        self._write(self._renderer.render(event))
