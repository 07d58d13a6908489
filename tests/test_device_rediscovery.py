from __future__ import annotations

import dataclasses

import pytest
from conftest import PNP_ID_LEONARDO_BOOT, PNP_ID_MAKEYMAKEY_BOOT, PNP_ID_UNO

from sketchflash.util_baseclasses import DeviceNotFoundException, Peripheral
from sketchflash.util_device_rediscovery import resolve
from sketchflash.util_usb_id import (
    NAME_ARDUINO_LEONARDO,
    NAME_MAKEY_MAKEY,
    UNKNOWN_DEVICE,
    lookup,
    pnp_id_from_usb,
    pnp_id_prefix,
)


@dataclasses.dataclass
class Ttestparam:
    label: str
    peripherals: list[Peripheral] | None
    target_name: str
    expected_path: str | None
    """
    None: DeviceNotFoundException expected
    """

    @property
    def pytest_id(self) -> str:
        return self.label


_TESTPARAMS = [
    Ttestparam(
        label="none-visible",
        peripherals=None,
        target_name=NAME_ARDUINO_LEONARDO,
        expected_path=None,
    ),
    Ttestparam(
        label="empty",
        peripherals=[],
        target_name=NAME_ARDUINO_LEONARDO,
        expected_path=None,
    ),
    Ttestparam(
        label="no-match",
        peripherals=[
            Peripheral(path="/dev/ttyACM0", pnp_id=PNP_ID_UNO),
            Peripheral(path="/dev/ttyACM1", pnp_id=PNP_ID_MAKEYMAKEY_BOOT),
        ],
        target_name=NAME_ARDUINO_LEONARDO,
        expected_path=None,
    ),
    Ttestparam(
        label="one-match",
        peripherals=[
            Peripheral(path="COM3", pnp_id=PNP_ID_UNO),
            Peripheral(path="COM7", pnp_id=PNP_ID_LEONARDO_BOOT),
            Peripheral(path="COM1", pnp_id="ACPI\\PNP0501\\1"),
        ],
        target_name=NAME_ARDUINO_LEONARDO,
        expected_path="COM7",
    ),
    Ttestparam(
        label="last-match-wins",
        peripherals=[
            Peripheral(path="COM4", pnp_id=PNP_ID_MAKEYMAKEY_BOOT),
            Peripheral(path="COM3", pnp_id=PNP_ID_UNO),
            Peripheral(path="COM9", pnp_id=PNP_ID_MAKEYMAKEY_BOOT),
        ],
        target_name=NAME_MAKEY_MAKEY,
        expected_path="COM9",
    ),
]


@pytest.mark.parametrize(
    "testparam", _TESTPARAMS, ids=lambda testparam: testparam.pytest_id
)
def test_resolve(testparam: Ttestparam) -> None:
    if testparam.expected_path is None:
        with pytest.raises(DeviceNotFoundException, match=testparam.target_name):
            resolve(testparam.peripherals, testparam.target_name)
        return

    path = resolve(testparam.peripherals, testparam.target_name)
    assert path == testparam.expected_path


def test_lookup() -> None:
    assert lookup(pnp_id_prefix(PNP_ID_LEONARDO_BOOT)) == NAME_ARDUINO_LEONARDO
    assert lookup("USB\\VID_2341&PID_8036") == NAME_ARDUINO_LEONARDO
    assert lookup(pnp_id_prefix(PNP_ID_MAKEYMAKEY_BOOT)) == NAME_MAKEY_MAKEY
    assert lookup("USB\\VID_FFFF&PID_FFFF") == UNKNOWN_DEVICE
    assert lookup("") == UNKNOWN_DEVICE


def test_pnp_id_from_usb() -> None:
    pnp_id = pnp_id_from_usb(vid=0x2341, pid=0x8036, serial_number="HIDPC")
    assert pnp_id == "USB\\VID_2341&PID_8036\\HIDPC"
    assert pnp_id_prefix(pnp_id) == "USB\\VID_2341&PID_8036"
    assert pnp_id_from_usb(vid=0x1B4F, pid=0x2B74) == "USB\\VID_1B4F&PID_2B74"
