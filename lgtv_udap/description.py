#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Resolution of discovery responses into UdapDevice's, by fetching and parsing the
XML description document named by each response's LOCATION header.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from urllib.parse import urlsplit

from .internal_types import *
from .pkg_logging import logger
from .exceptions import UdapDescriptionError
from .device import UdapDevice
from .discovery_reply import DiscoveryReply
from .transport import UdapRequestTransport

DEFAULT_PORTS: Dict[str, int] = { "http": 80, "https": 443 }

class DescriptionLocation:
    """The connection parameters parsed out of a discovery response's LOCATION URL."""

    host: str
    """The network location as it appears in the URL; e.g., '10.0.0.5:8080'"""

    hostname: str
    port: int

    path: str
    """The path (and query, if any) of the description document."""

    def __init__(self, host: str, hostname: str, port: int, path: str) -> None:
        self.host = host
        self.hostname = hostname
        self.port = port
        self.path = path

    @classmethod
    def from_url(cls, url: str) -> DescriptionLocation:
        try:
            parts = urlsplit(url.strip())
            port = parts.port
        except ValueError as e:
            raise UdapDescriptionError(f"Invalid description location {url!r}: {e}") from e
        if not parts.hostname:
            raise UdapDescriptionError(f"Description location {url!r} has no host")
        if port is None:
            port = DEFAULT_PORTS.get(parts.scheme.lower(), 80)
        path = parts.path or '/'
        if parts.query:
            path += '?' + parts.query
        return cls(parts.netloc, parts.hostname, port, path)

    def __str__(self) -> str:
        return f"DescriptionLocation({self.hostname}:{self.port}{self.path})"

    def __repr__(self) -> str:
        return str(self)

def _find_text(root: ET.Element, tag: str) -> str:
    # '{*}' matches the tag in any namespace, or none
    element = root.find(f".//{{*}}{tag}")
    if element is None:
        raise UdapDescriptionError(f"Description document has no <{tag}> element")
    return (element.text or '').strip()

def parse_device_description(xml_text: str, location: DescriptionLocation) -> UdapDevice:
    """Builds a UdapDevice (with no pairing key) from a description document.

    Raises UdapDescriptionError if the document is not well-formed XML or lacks any
    of the uuid, modelName, friendlyName or deviceType elements.
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise UdapDescriptionError(f"Malformed description document from {location}: {e}") from e
    uuid = _find_text(root, "uuid")
    if uuid == '':
        raise UdapDescriptionError(f"Description document from {location} has an empty <uuid>")
    device = UdapDevice(
        uuid=uuid,
        name=_find_text(root, "modelName"),
        friendly_name=_find_text(root, "friendlyName"),
        type=_find_text(root, "deviceType"),
        hostname=location.hostname,
        port=location.port,
      )
    logger.debug(f"Device model name = {device.name}, uuid = {device.uuid}")
    return device

async def resolve_device(transport: UdapRequestTransport, reply: DiscoveryReply) -> Optional[UdapDevice]:
    """Fetches and parses the description document of the TV that sent a discovery response.

    Returns None, without any network I/O, if the response has no LOCATION header.
    Raises UdapTransportError if the document cannot be fetched, and UdapDescriptionError
    if it is unusable.
    """
    url = reply.location
    if url is None:
        logger.warning(f"Discovery response has no LOCATION header: {reply}")
        return None
    location = DescriptionLocation.from_url(url)
    response = await transport.get(location.hostname, location.port, location.path)
    if not response.ok:
        raise UdapDescriptionError(f"Fetching description document {url} returned HTTP {response.status_code}")
    return parse_device_description(response.body, location)
