from __future__ import annotations

import locale

ENCODING_ZH_CN = "gb2312"
ENCODING_DEFAULT = "utf-8"


def current_locale() -> str | None:
    """
    Example: 'zh_CN'
    """
    language_code, _encoding = locale.getlocale()
    return language_code


def encode_source(code: str, locale_name: str | None = None) -> bytes:
    """
    The arduino toolchain on a chinese windows reads the sketch as gb2312.
    All other locales get utf-8.
    """
    assert isinstance(code, str)
    assert isinstance(locale_name, str | None)
    if locale_name is None:
        locale_name = current_locale()
    if locale_name is not None and locale_name.replace("_", "-").lower() == "zh-cn":
        return code.encode(ENCODING_ZH_CN, errors="replace")
    return code.encode(ENCODING_DEFAULT)
