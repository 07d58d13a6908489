from __future__ import annotations

import logging

from .util_baseclasses import DeviceNotFoundException, Peripheral
from .util_usb_id import lookup, pnp_id_prefix

logger = logging.getLogger(__file__)


def resolve(peripherals: list[Peripheral] | None, target_name: str) -> str:
    """
    Return the path of the peripheral whose usb id resolves to 'target_name'.

    The whole list is scanned: If several peripherals match, the last one wins.
    """
    assert isinstance(peripherals, list | None)
    assert isinstance(target_name, str)

    if not peripherals:
        raise DeviceNotFoundException(
            f"Cannot discover '{target_name}': No serial ports visible!"
        )

    path: str | None = None
    for peripheral in peripherals:
        assert isinstance(peripheral, Peripheral)
        name = lookup(pnp_id_prefix(peripheral.pnp_id))
        logger.debug(f"  {peripheral.path}: {peripheral.pnp_id} -> {name}")
        if name == target_name:
            path = peripheral.path

    if path is None:
        paths = ", ".join(p.path for p in peripherals)
        raise DeviceNotFoundException(
            f"Cannot discover '{target_name}' on any of: {paths}"
        )
    return path
