#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Descriptions of known TVs, and the simplified views of them handed out to callers.
"""

from __future__ import annotations

from enum import Enum

from .internal_types import *

class PairingStatus(Enum):
    """The protocol-level outcome of a pairing request."""
    CONNECTED = "CONNECTED"
    INVALID_PAIRING_KEY = "INVALID_PAIRING_KEY"
    PAIRING_KEY_DISPLAYED = "PAIRING_KEY_DISPLAYED"

class UdapDevice:
    """A TV discovered on the network, as stored in the device registry."""

    uuid: str
    """The unique identifier of the TV, taken from its description document."""

    name: str
    """The model name of the TV."""

    friendly_name: str

    type: str
    """The UPnP device type of the TV."""

    hostname: str
    port: int

    pairing_key: Optional[str] = None
    """The pairing key that authorizes commands, or None until pairing succeeds."""

    def __init__(
            self,
            uuid: str,
            name: str,
            friendly_name: str,
            type: str,
            hostname: str,
            port: int,
            pairing_key: Optional[str]=None,
          ) -> None:
        self.uuid = uuid
        self.name = name
        self.friendly_name = friendly_name
        self.type = type
        self.hostname = hostname
        self.port = port
        self.pairing_key = pairing_key

    @property
    def registered(self) -> bool:
        """True if a non-empty pairing key is stored for this TV."""
        return bool(self.pairing_key)

    def info(self) -> UdapDeviceInfo:
        return UdapDeviceInfo(self.uuid, self.name, self.friendly_name, self.type, self.registered)

    def __str__(self) -> str:
        return f"UdapDevice(uuid={self.uuid!r}, name={self.name!r}, addr={self.hostname}:{self.port}, registered={self.registered})"

    def __repr__(self) -> str:
        return str(self)

class UdapDeviceInfo:
    """The view of a TV that is exposed to callers. It deliberately has no network
       address or pairing key."""

    __slots__ = ('uuid', 'name', 'friendly_name', 'type', 'registered')

    uuid: str
    name: str
    friendly_name: str
    type: str
    registered: bool

    def __init__(self, uuid: str, name: str, friendly_name: str, type: str, registered: bool) -> None:
        self.uuid = uuid
        self.name = name
        self.friendly_name = friendly_name
        self.type = type
        self.registered = registered

    def to_jsonable(self) -> JsonableDict:
        return {
            "uuid": self.uuid,
            "name": self.name,
            "friendly_name": self.friendly_name,
            "type": self.type,
            "registered": self.registered,
        }

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, UdapDeviceInfo):
            return False
        return self.to_jsonable() == other.to_jsonable()

    def __str__(self) -> str:
        return f"UdapDeviceInfo({self.to_jsonable()})"

    def __repr__(self) -> str:
        return str(self)

class PairingResult:
    """The result of UdapRemote.start_pairing()."""

    status: PairingStatus
    device: UdapDeviceInfo

    def __init__(self, status: PairingStatus, device: UdapDeviceInfo) -> None:
        self.status = status
        self.device = device

    def to_jsonable(self) -> JsonableDict:
        return {
            "status": self.status.value,
            "device": self.device.to_jsonable(),
        }

    def __str__(self) -> str:
        return f"PairingResult(status={self.status.value}, device={self.device})"
