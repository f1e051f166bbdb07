#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
UdapDeviceRegistry -- the in-memory set of known TVs, keyed by uuid.
"""

from __future__ import annotations

from .internal_types import *
from .pkg_logging import logger
from .device import UdapDevice, UdapDeviceInfo

class UdapDeviceRegistry:
    """An ordered collection of UdapDevice's with at most one entry per uuid.

    Entries are only ever replaced, never removed. Replacing a device carries its
    pairing key forward, so rediscovering a TV never forgets that it was paired.
    """

    _devices: List[UdapDevice]

    def __init__(self) -> None:
        self._devices = []

    def get(self, uuid: str) -> Optional[UdapDevice]:
        for device in self._devices:
            if device.uuid == uuid:
                return device
        return None

    def upsert(self, device: UdapDevice) -> UdapDevice:
        """Adds a device, replacing any existing entry with the same uuid. The existing
           entry's pairing key is copied onto the new device first. The new entry is
           appended at the end. Returns the stored device."""
        known_device = self.get(device.uuid)
        if not known_device is None:
            device.pairing_key = known_device.pairing_key
        self._devices = [ d for d in self._devices if d.uuid != device.uuid ]
        self._devices.append(device)
        logger.debug(f"Registered {device}")
        return device

    def set_pairing_key(self, uuid: str, pairing_key: Optional[str]) -> bool:
        """Stores a pairing key on a known device. Returns False (and logs an error)
           if the device is unknown."""
        device = self.get(uuid)
        if device is None:
            logger.error(f"Unable to save pairing key for unknown device {uuid!r}")
            return False
        device.pairing_key = pairing_key
        return True

    def list(self) -> List[UdapDeviceInfo]:
        return [ device.info() for device in self._devices ]

    def list_paired(self) -> List[UdapDeviceInfo]:
        """Returns the views of all devices that have a non-empty pairing key."""
        return [ device.info() for device in self._devices if device.registered ]

    def __len__(self) -> int:
        return len(self._devices)

    def __contains__(self, uuid: object) -> bool:
        return isinstance(uuid, str) and not self.get(uuid) is None

    def __iter__(self) -> Iterator[UdapDevice]:
        return iter(list(self._devices))
