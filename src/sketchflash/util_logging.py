from __future__ import annotations

import json
import logging
import logging.config
import pathlib
import re
import typing

import typing_extensions

from rich.style import Style

DIRECTORY_OF_THIS_FILE = pathlib.Path(__file__).parent
FILENAME_LOGGING_JSON = DIRECTORY_OF_THIS_FILE / "util_logging_config.json"

_STYLE_FALLBACK = Style(color="purple")

_DICT_STYLES = {
    "COLOR_INFO": Style(color="blue"),
    "COLOR_SUCCESS": Style(color="green"),
    "COLOR_FAILED": Style(color="orange1"),
    "COLOR_ERROR": Style(color="red"),
}


class ColorFormatter(logging.Formatter):
    RE_TAG = re.compile(r"^\[(?P<tag>COLOR_[A-Z]+)\](?P<msg>.*$)", re.DOTALL)
    """
    Example: [COLOR_SUCCESS]Build succeeded
    tag: COLOR_SUCCESS
    msg: Build succeeded
    """

    def __init__(self, *args: typing.Any, color: bool = True, **kwargs: typing.Any):
        super().__init__(*args, **kwargs)
        self.color = color

    @typing_extensions.override
    def format(self, record: logging.LogRecord) -> str:
        if not isinstance(record.msg, str):
            return super().format(record)
        match = self.RE_TAG.match(record.msg)
        if match is None:
            return super().format(record)

        msg_before = record.msg
        try:
            record.msg = match.group("msg")
            message = super().format(record)
            if not self.color:
                return message
            style = _DICT_STYLES.get(match.group("tag"), _STYLE_FALLBACK)
            return style.render(message)
        finally:
            record.msg = msg_before


def init_logging(level: int | None = None, color: bool = True) -> None:
    logging.config.dictConfig(json.loads(FILENAME_LOGGING_JSON.read_text()))
    if level is not None:
        logging.getLogger().setLevel(level=level)
    if not color:
        for handler in logging.getLogger().handlers:
            if isinstance(handler.formatter, ColorFormatter):
                handler.formatter.color = False
