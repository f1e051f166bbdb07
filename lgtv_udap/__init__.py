# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Package lgtv_udap discovers LG televisions on the local network and remote-controls
them over UDAP, LG's HTTP/XML "Universal Device Access Protocol".

TVs are found by multicasting an SSDP-style M-SEARCH probe and collecting the
responses for a short window. Each response names an XML description document that
identifies the TV. A TV must then be paired: it displays a pairing key on screen, and
the key is sent back to it. Once paired, key-input commands can be sent to the TV.

All state (discovered TVs and their pairing keys) is held in memory by a UdapRemote.
"""

from .version import __version__

from .internal_types import Jsonable, JsonableDict

from .exceptions import UdapError, UdapTransportError, UdapDescriptionError, UdapDeviceNotFoundError

from .discovery_reply import DiscoveryReply
from .udap_socket import UdapSocket, UdapSocketBinding
from .discovery import UdapDiscoveryClient, UdapDiscoverySweep, DiscoveryResponseInfo
from .device import UdapDevice, UdapDeviceInfo, PairingStatus, PairingResult
from .registry import UdapDeviceRegistry
from .description import DescriptionLocation, parse_device_description, resolve_device
from .content import encode_udap_content
from .transport import UdapRequestTransport, UdapResponse
from .remote import UdapRemote
from .util import CaseInsensitiveDict
from .constants import (
    UDAP_MULTICAST_ADDRESS,
    UDAP_MULTICAST_PORT,
    UDAP_LOCAL_PORT,
    DEFAULT_RESPONSE_WAIT_TIME,
  )

__all__ = [
    '__version__',
    'Jsonable', 'JsonableDict',
    'UdapError', 'UdapTransportError', 'UdapDescriptionError', 'UdapDeviceNotFoundError',
    'DiscoveryReply',
    'UdapSocket', 'UdapSocketBinding',
    'UdapDiscoveryClient', 'UdapDiscoverySweep', 'DiscoveryResponseInfo',
    'UdapDevice', 'UdapDeviceInfo', 'PairingStatus', 'PairingResult',
    'UdapDeviceRegistry',
    'DescriptionLocation', 'parse_device_description', 'resolve_device',
    'encode_udap_content',
    'UdapRequestTransport', 'UdapResponse',
    'UdapRemote',
    'CaseInsensitiveDict',
    'UDAP_MULTICAST_ADDRESS', 'UDAP_MULTICAST_PORT', 'UDAP_LOCAL_PORT',
    'DEFAULT_RESPONSE_WAIT_TIME',
]
