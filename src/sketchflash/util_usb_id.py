"""
Maps the start of a PnP id to a human readable device name.

The PnP id looks like 'USB\\VID_2341&PID_8036\\6&2B5B8E6E&0&1'.
The first 21 characters identify vendor and product.

A board in bootloader mode typically reports a different product id
than in application mode. Both ids map to the same name.
"""

from __future__ import annotations

from .util_constants import PNP_ID_PREFIX_LEN

UNKNOWN_DEVICE = "Unknown device"

NAME_ARDUINO_LEONARDO = "Arduino Leonardo"
NAME_MAKEY_MAKEY = "Makey Makey"

USB_ID: dict[str, str] = {
    "USB\\VID_2341&PID_0043": "Arduino Uno",
    "USB\\VID_2341&PID_0001": "Arduino Uno",
    "USB\\VID_2A03&PID_0043": "Arduino Uno",
    "USB\\VID_2341&PID_0243": "Arduino Uno",
    "USB\\VID_2341&PID_0010": "Arduino Mega 2560",
    "USB\\VID_2341&PID_0042": "Arduino Mega 2560",
    "USB\\VID_2A03&PID_0042": "Arduino Mega 2560",
    "USB\\VID_2341&PID_0036": NAME_ARDUINO_LEONARDO,
    "USB\\VID_2341&PID_8036": NAME_ARDUINO_LEONARDO,
    "USB\\VID_2A03&PID_0036": NAME_ARDUINO_LEONARDO,
    "USB\\VID_2A03&PID_8036": NAME_ARDUINO_LEONARDO,
    "USB\\VID_1B4F&PID_2B74": NAME_MAKEY_MAKEY,
    "USB\\VID_1B4F&PID_2B75": NAME_MAKEY_MAKEY,
    "USB\\VID_1A86&PID_7523": "USB-SERIAL CH340",
    "USB\\VID_0403&PID_6001": "FT232R USB UART",
    "USB\\VID_10C4&PID_EA60": "CP210x UART Bridge",
}


def pnp_id_prefix(pnp_id: str) -> str:
    assert isinstance(pnp_id, str)
    return pnp_id[:PNP_ID_PREFIX_LEN]


def lookup(prefix: str) -> str:
    """
    Return UNKNOWN_DEVICE for unknown prefixes.
    """
    assert isinstance(prefix, str)
    return USB_ID.get(prefix, UNKNOWN_DEVICE)


def pnp_id_from_usb(vid: int, pid: int, serial_number: str | None = None) -> str:
    """
    Build a windows style PnP id from the values reported by pyserial.

    Example: USB\\VID_2341&PID_8036\\75735323230351A0A0E1
    """
    assert isinstance(vid, int)
    assert isinstance(pid, int)
    pnp_id = f"USB\\VID_{vid:04X}&PID_{pid:04X}"
    if serial_number:
        pnp_id += f"\\{serial_number}"
    return pnp_id
