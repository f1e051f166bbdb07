# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
UdapRemote -- The public interface of this package. A UdapRemote can:

  1. Discover TVs on the local network and remember them in its device registry
  2. List the TVs that have been paired
  3. Pair with a TV (asking it to display a pairing key, or confirming a key), and end pairing
  4. Send remote-control key commands to a paired TV
"""

from __future__ import annotations

import asyncio

from .internal_types import *
from .pkg_logging import logger
from .constants import (
    UDAP_MULTICAST_ADDRESS,
    UDAP_MULTICAST_PORT,
    UDAP_LOCAL_PORT,
    DEFAULT_RESPONSE_WAIT_TIME,
    DEFAULT_HTTP_TIMEOUT,
    PAIRING_PATH,
    COMMAND_PATH,
  )
from .exceptions import UdapTransportError, UdapDescriptionError, UdapDeviceNotFoundError
from .content import show_key_content, hello_content, byebye_content, key_input_content
from .device import UdapDevice, UdapDeviceInfo, PairingStatus, PairingResult
from .registry import UdapDeviceRegistry
from .discovery_reply import DiscoveryReply
from .discovery import UdapDiscoveryClient
from .description import resolve_device
from .transport import UdapRequestTransport, UdapResponse

class UdapRemote(AsyncContextManager['UdapRemote']):
    """
    Discovers, pairs with and controls TVs.

    All state is held in self.registry, which lives as long as this object. Nothing is
    persisted, so a new UdapRemote must rediscover (and re-pair with) its TVs.

    Usage:
        async with UdapRemote() as remote:
            for device in await remote.discover():
                print(device.to_jsonable())
            result = await remote.start_pairing(uuid, "123456")
            if result.status == PairingStatus.CONNECTED:
                await remote.send_cmd(uuid, 1)
    """

    registry: UdapDeviceRegistry
    transport: UdapRequestTransport

    response_wait_time: float
    multicast_address: str
    multicast_port: int
    local_port: int
    bind_addresses: Optional[List[str]]
    all_interfaces: bool

    _owns_transport: bool

    def __init__(
            self,
            registry: Optional[UdapDeviceRegistry]=None,
            transport: Optional[UdapRequestTransport]=None,
            response_wait_time: float=DEFAULT_RESPONSE_WAIT_TIME,
            multicast_address: str=UDAP_MULTICAST_ADDRESS,
            multicast_port: int=UDAP_MULTICAST_PORT,
            local_port: int=UDAP_LOCAL_PORT,
            bind_addresses: Optional[Iterable[str]]=None,
            all_interfaces: bool=False,
            http_timeout: float=DEFAULT_HTTP_TIMEOUT,
          ) -> None:
        self.registry = UdapDeviceRegistry() if registry is None else registry
        self._owns_transport = transport is None
        self.transport = UdapRequestTransport(timeout=http_timeout) if transport is None else transport
        self.response_wait_time = response_wait_time
        self.multicast_address = multicast_address
        self.multicast_port = multicast_port
        self.local_port = local_port
        self.bind_addresses = None if bind_addresses is None else list(bind_addresses)
        self.all_interfaces = all_interfaces

    async def collect_replies(self) -> List[DiscoveryReply]:
        """Runs one discovery sweep and returns the parsed responses."""
        async with UdapDiscoveryClient(
                response_wait_time=self.response_wait_time,
                multicast_address=self.multicast_address,
                multicast_port=self.multicast_port,
                local_port=self.local_port,
                bind_addresses=self.bind_addresses,
                all_interfaces=self.all_interfaces,
              ) as client:
            return await client.collect_replies()

    async def _resolve_and_register(self, reply: DiscoveryReply) -> Optional[UdapDevice]:
        try:
            device = await resolve_device(self.transport, reply)
        except (UdapTransportError, UdapDescriptionError) as e:
            logger.warning(f"Unable to resolve device at {reply.location}: {e}")
            return None
        if device is None:
            return None
        logger.info(f"Discovered {device}")
        return self.registry.upsert(device)

    async def discover(self) -> List[UdapDeviceInfo]:
        """Discovers the TVs on the local network and adds them to the registry.

        Every response is resolved concurrently; a response that cannot be resolved is
        logged and left out. Returns the views of the TVs found by this sweep (an empty
        list if none responded). A TV that responds more than once is listed once.
        """
        replies = await self.collect_replies()
        devices = await asyncio.gather(*(self._resolve_and_register(reply) for reply in replies))
        results: List[UdapDeviceInfo] = []
        seen: Set[str] = set()
        for device in devices:
            if device is not None and device.uuid not in seen:
                seen.add(device.uuid)
                results.append(device.info())
        return results

    async def list_paired(self) -> List[UdapDeviceInfo]:
        return self.registry.list_paired()

    def _require_device(self, uuid: str) -> UdapDevice:
        device = self.registry.get(uuid)
        if device is None:
            raise UdapDeviceNotFoundError(uuid)
        return device

    async def start_pairing(self, uuid: str, key: Optional[str]="") -> PairingResult:
        """Pairs with a TV.

        If key is empty the TV's stored pairing key is used; if there is none either, the TV
        is asked to display a pairing key on screen and PAIRING_KEY_DISPLAYED is returned.
        Otherwise the key is offered to the TV; if the TV accepts it (HTTP 200) it is stored
        and CONNECTED is returned, else INVALID_PAIRING_KEY is returned and the stored key
        is left unchanged.

        Raises UdapDeviceNotFoundError if the TV is not in the registry, and
        UdapTransportError if the request could not be completed.
        """
        device = self._require_device(uuid)
        key_to_send = key if key else device.pairing_key
        if key_to_send:
            logger.debug(f"Sending pairing key to {device}")
            response = await self.transport.post(
                device.hostname, device.port, PAIRING_PATH, hello_content(key_to_send, device.port))
            if response.ok:
                self.registry.set_pairing_key(uuid, key_to_send)
                status = PairingStatus.CONNECTED
            else:
                status = PairingStatus.INVALID_PAIRING_KEY
        else:
            logger.debug(f"Requesting pairing key display on {device}")
            await self.transport.post(device.hostname, device.port, PAIRING_PATH, show_key_content())
            status = PairingStatus.PAIRING_KEY_DISPLAYED
        # the entry may have been replaced by a discover() while the request was in flight
        return PairingResult(status, self._require_device(uuid).info())

    async def end_pairing(self, uuid: str) -> UdapResponse:
        """Ends the pairing session with a TV. The stored pairing key is kept, so a later
           start_pairing(uuid) reconnects without a new key."""
        device = self._require_device(uuid)
        logger.debug(f"Ending pairing with {device}")
        return await self.transport.post(device.hostname, device.port, PAIRING_PATH, byebye_content(device.port))

    async def send_cmd(self, uuid: str, cmd: Union[str, int]) -> UdapResponse:
        """Sends a remote-control key code to a TV and returns the TV's response."""
        device = self._require_device(uuid)
        logger.debug(f"Sending command {cmd} to {device}")
        return await self.transport.post(device.hostname, device.port, COMMAND_PATH, key_input_content(cmd))

    async def close(self) -> None:
        if self._owns_transport:
            await self.transport.close()

    async def __aenter__(self) -> UdapRemote:
        return self

    async def __aexit__(
            self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> bool:
        await self.close()
        return False
