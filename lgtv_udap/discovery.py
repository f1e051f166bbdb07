# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
UdapDiscoveryClient -- A UDAP discovery client that can:

  1. Send a discovery probe to a multicast UDP address (typically 239.255.255.250:1900)
     from a fixed local port (typically 1901)
  2. Receive and parse discovery responses from TVs on the local network
  3. Collect and return responses received within a fixed time window
"""

from __future__ import annotations


import asyncio
import socket
import time

from .internal_types import *
from .pkg_logging import logger
from .constants import (
    UDAP_MULTICAST_ADDRESS,
    UDAP_MULTICAST_PORT,
    UDAP_LOCAL_PORT,
    DEFAULT_RESPONSE_WAIT_TIME,
    DISCOVERY_REQUEST,
  )

from .discovery_reply import DiscoveryReply
from .udap_socket import UdapSocket, UdapSocketBinding
from .util import get_local_ip_addresses

class DiscoveryResponseInfo:
    socket_binding: UdapSocketBinding
    """The socket binding on which the response was received"""

    src_addr: HostAndPort
    """The source address of the response"""

    reply: DiscoveryReply
    """The parsed response"""

    def __init__(
            self,
            socket_binding: UdapSocketBinding,
            src_addr: HostAndPort,
            reply: DiscoveryReply,
          ) -> None:
        self.socket_binding = socket_binding
        self.src_addr = src_addr
        self.reply = reply

class UdapDiscoverySweep(
        AsyncContextManager['UdapDiscoverySweep'],
        AsyncIterable[DiscoveryResponseInfo]
      ):
    """An object that manages a single discovery sweep on a UdapDiscoveryClient: one probe, and all of the
       responses received within the response window, behind an AsyncContextManager/AsyncIterable interface."""

    client: UdapDiscoveryClient
    response_wait_time: float
    max_responses: int
    end_time: float = 0.0

    def __init__(
            self,
            client: UdapDiscoveryClient,
            response_wait_time: Optional[float]=None,
            max_responses: int=0,
          ):
        """Create an async context manager/iterable that sends a multicast discovery probe and returns the
        responses as they arrive.

        Parameters:
            client:             The UdapDiscoveryClient to use for sending the probe and receiving responses.
            response_wait_time: The amount of time (in seconds) to wait for responses to come in. Defaults to
                                   client.response_wait_time.
            max_responses:      The maximum number of responses to return. If 0 (the default), all responses
                                   received within response_wait_time will be returned.

        Usage:
            async with UdapDiscoverySweep(client) as sweep:
                async for info in sweep:
                    print(info.reply.location)
        """
        self.client = client
        self.response_wait_time = client.response_wait_time if response_wait_time is None else response_wait_time
        self.max_responses = max_responses

    async def __aenter__(self) -> UdapDiscoverySweep:
        self.client.sendto(DISCOVERY_REQUEST.encode('utf-8'), (self.client.multicast_address, self.client.multicast_port))
        self.end_time = time.monotonic() + self.response_wait_time
        return self

    async def __aexit__(
            self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> bool:
        return False

    async def iter_responses(self) -> AsyncIterator[DiscoveryResponseInfo]:
        n = 0
        while True:
            if self.max_responses > 0 and n >= self.max_responses:
                break
            remaining_time = self.end_time - time.monotonic()
            if remaining_time <= 0.0:
                break
            try:
                received = await asyncio.wait_for(self.client.receive(), remaining_time)
            except asyncio.TimeoutError:
                break
            if received is None:
                break
            socket_binding, addr, text = received
            reply = DiscoveryReply.parse(text)
            if reply is None:
                logger.error(f"Ignoring unsuccessful discovery response from {addr}: {text!r}")
                continue
            n += 1
            yield DiscoveryResponseInfo(socket_binding, addr, reply)

    def __aiter__(self) -> AsyncIterator[DiscoveryResponseInfo]:
        return self.iter_responses()


class UdapDiscoveryClient(UdapSocket):
    """
    A UDAP discovery client. The socket is bound when the client's context is entered and
    closed when it exits; responses that arrive after that are dropped.

    Usage:
        async with UdapDiscoveryClient() as client:
            replies = await client.collect_replies()
    """
    response_wait_time: float
    """The amount of time (in seconds) to wait for responses to come in."""

    multicast_address: str
    multicast_port: int

    local_port: int
    """The local port to bind to on each bind address."""

    bind_addresses: List[str]
    """The local IP addresses to bind to. '' binds to all interfaces with a single socket."""

    def __init__(
            self,
            response_wait_time: float=DEFAULT_RESPONSE_WAIT_TIME,
            multicast_address: str=UDAP_MULTICAST_ADDRESS,
            multicast_port: int=UDAP_MULTICAST_PORT,
            local_port: int=UDAP_LOCAL_PORT,
            bind_addresses: Optional[Iterable[str]]=None,
            all_interfaces: bool=False,
          ) -> None:
        """Create a discovery client.

        Parameters:
            response_wait_time: Seconds to collect responses after the probe is sent.
            multicast_address:  The address to send the probe to.
            multicast_port:     The port to send the probe to.
            local_port:         The local port to send from and listen on.
            bind_addresses:     Explicit local IP addresses to bind to. Takes precedence over all_interfaces.
            all_interfaces:     If True and bind_addresses is not given, bind one socket per local non-loopback
                                   IPv4 address instead of a single wildcard socket.
        """
        super().__init__()
        self.response_wait_time = response_wait_time
        self.multicast_address = multicast_address
        self.multicast_port = multicast_port
        self.local_port = local_port
        if bind_addresses is None:
            bind_addresses = get_local_ip_addresses() if all_interfaces else ['']
        self.bind_addresses = list(bind_addresses)

    async def add_socket_bindings(self) -> None:
        logger.debug(f"Creating socket bindings to {self.bind_addresses} port {self.local_port}")
        for bind_address in self.bind_addresses:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            try:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
                sock.bind((bind_address, self.local_port))
            except BaseException:
                sock.close()
                raise
            self.add_socket_binding(UdapSocketBinding(sock))

    def sweep(
            self,
            response_wait_time: Optional[float]=None,
            max_responses: int=0,
          ) -> UdapDiscoverySweep:
        """Create an async context manager/iterable that sends a discovery probe and returns the
           responses as they arrive. See UdapDiscoverySweep."""
        return UdapDiscoverySweep(self, response_wait_time=response_wait_time, max_responses=max_responses)

    async def collect_replies(self, response_wait_time: Optional[float]=None) -> List[DiscoveryReply]:
        """Sends a single discovery probe, waits for the full response window, and returns every
           successfully parsed response. Returns an empty list if no TV responded."""
        results: List[DiscoveryReply] = []
        async with self.sweep(response_wait_time=response_wait_time) as sweep:
            async for info in sweep:
                logger.debug(f"Discovery response from {info.src_addr}: location={info.reply.location}")
                results.append(info.reply)
        logger.debug(f"Discovery sweep collected {len(results)} response(s)")
        return results

    async def __aenter__(self) -> UdapDiscoveryClient:
        await super().__aenter__()
        return self
