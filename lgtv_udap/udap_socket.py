#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
UdapSocket -- An abstract base class for an async UDP socket that can:

  1. Bind one or more low-level datagram sockets (typically one per network interface)
  2. Send raw datagrams to a remote multicast or unicast address
  3. Receive datagrams from remote nodes, decode them as text, and queue them for a
     single async reader until the socket is closed

  Subclasses must implement the add_socket_bindings() method to create and bind the
  sockets that will be used to receive and send datagrams.
"""

from __future__ import annotations


import asyncio
from asyncio import Future
import socket
from abc import ABC, abstractmethod

from .internal_types import *
from .pkg_logging import logger
from .exceptions import UdapError

MAX_QUEUE_SIZE = 1000

class UdapSocketBinding:
    """
    An encapsulation of the binding of a UdapSocket to a single low-level
    bound datagram socket.

    Instances of this class are created prior to loop.create_datagram_endpoint,
    and are later bound to the asyncio transport that it creates.
    """

    udap_socket: Optional[UdapSocket] = None
    """The UdapSocket that owns this binding."""

    index: int = -1
    """The index of this socket binding within UdapSocket. Set to -1 until this socket binding is added."""

    sock: Optional[socket.socket] = None
    """The low-level socket. Ownership passes to the transport once the endpoint is created."""

    _transport: Optional[asyncio.DatagramTransport] = None

    unicast_addr: HostAndPort
    """The local ip address and port that the socket is bound to."""

    sockname: str
    """The name of the socket as it should be displayed in logs, etc"""

    def __init__(self, sock: socket.socket, sockname: Optional[str]=None):
        self.sock = sock
        self.unicast_addr = sock.getsockname()[:2]
        self.sockname = str(self.unicast_addr) if sockname is None else sockname

    def attach_to_udap_socket(self, udap_socket: UdapSocket, index: int) -> None:
        if self.index >= 0:
            raise UdapError(f"Attempt to reattach UdapSocketBinding: {self}")
        self.udap_socket = udap_socket
        self.index = index

    @property
    def transport(self) -> Optional[asyncio.DatagramTransport]:
        return self._transport

    @transport.setter
    def transport(self, transport: Optional[asyncio.DatagramTransport]) -> None:
        if transport != self._transport:
            assert self._transport is None or transport is None
        self._transport = transport

    def sendto(self, data: bytes, addr: HostAndPort) -> None:
        logger.debug(f"Sending datagram via {self} to {addr}: {data!r}")
        if self.transport is None:
            raise UdapError(f"Attempt to send on closed {self}")
        self.transport.sendto(data, addr)

    def __str__(self) -> str:
        return f"UdapSocketBinding({self.index}: {self.sockname})"

    def __repr__(self) -> str:
        return str(self)

class _UdapSocketProtocol(asyncio.DatagramProtocol):
    """An adapter between an asyncio datagram transport and UdapSocket. There is one instance
       of this class for each socket binding."""

    socket_binding: UdapSocketBinding

    def __init__(self, socket_binding: UdapSocketBinding):
        self.socket_binding = socket_binding

    @property
    def udap_socket(self) -> UdapSocket:
        assert self.socket_binding.udap_socket is not None
        return self.socket_binding.udap_socket

    def connection_made(self, transport: asyncio.BaseTransport):
        # asyncio datagram transports do not actually inherit from asyncio.DatagramTransport
        self.socket_binding.transport = transport # type: ignore[assignment]
        self.udap_socket.connection_made(self.socket_binding)

    def datagram_received(self, data: bytes, addr: Tuple[str, int]):
        self.udap_socket.datagram_received(self.socket_binding, addr, data)

    def error_received(self, exc: Exception):
        self.udap_socket.error_received(self.socket_binding, exc)

    def connection_lost(self, exc: Optional[Exception]) -> None:
        self.socket_binding.transport = None
        self.udap_socket.connection_lost(self.socket_binding, exc)

ReceivedDatagram = Tuple[UdapSocketBinding, HostAndPort, str]
"""A received datagram: (socket_binding, src_addr, decoded_text)"""

class UdapSocket(AsyncContextManager['UdapSocket'], ABC):
    """
    An abstract async UDP socket that sends raw datagrams and queues received ones
    for a single reader. Received datagrams are available through receive() until
    the socket is closed, after which receive() drains the queue and then returns None.
    """

    socket_bindings: List[UdapSocketBinding]
    """A list of UdapSocketBinding instances, one for each low-level socket that is in use."""

    final_result: Future[None]
    """A future that is set when the socket is closed."""

    queue: asyncio.Queue[Optional[ReceivedDatagram]]

    eos: bool = False
    """True once no more datagrams will be queued."""

    def __init__(self, max_queue_size: int=MAX_QUEUE_SIZE):
        self.final_result = asyncio.get_event_loop().create_future()
        self.socket_bindings = []
        self.queue = asyncio.Queue(max_queue_size)

    def add_socket_binding(self, socket_binding: UdapSocketBinding) -> None:
        i = len(self.socket_bindings)
        socket_binding.attach_to_udap_socket(self, i)
        self.socket_bindings.append(socket_binding)
        logger.debug(f"Added socket binding {i}: {socket_binding}")

    @abstractmethod
    async def add_socket_bindings(self) -> None:
        """Abstract method that creates and binds the sockets that will be used to receive
           and send datagrams, and adds them with self.add_socket_binding().
           Must be overridden by subclasses."""
        raise NotImplementedError()

    async def start(self) -> None:
        try:
            loop = asyncio.get_running_loop()
            await self.add_socket_bindings()
            if len(self.socket_bindings) == 0:
                raise UdapError("No datagram sockets were added to UdapSocket")

            for socket_binding in self.socket_bindings:
                await loop.create_datagram_endpoint(
                    lambda sb=socket_binding: _UdapSocketProtocol(sb),
                    sock=socket_binding.sock
                  )
                logger.debug(f"Created datagram endpoint for {socket_binding}")
        except BaseException:
            # the error is raised to the caller; just release the sockets
            self.set_final_result()
            raise

    async def wait_for_done(self) -> None:
        await self.final_result

    def sendto(self, data: bytes, addr: HostAndPort) -> None:
        """Send a raw datagram on every socket binding."""
        for socket_binding in self.socket_bindings:
            socket_binding.sendto(data, addr)

    async def receive(self) -> Optional[ReceivedDatagram]:
        """Waits for the next received datagram. Returns None once the socket
           has been closed and all queued datagrams have been consumed."""
        if self.eos and self.queue.empty():
            return None
        result = await self.queue.get()
        self.queue.task_done()
        return result

    def connection_made(self, socket_binding: UdapSocketBinding) -> None:
        logger.debug(f"Connection made: {socket_binding}")

    def datagram_received(self, socket_binding: UdapSocketBinding, addr: HostAndPort, data: bytes) -> None:
        if self.eos:
            return
        text = data.decode('utf-8', errors='replace')
        logger.debug(f"Received datagram from {addr} on {socket_binding}:\n{text}")
        try:
            self.queue.put_nowait((socket_binding, addr, text))
        except asyncio.QueueFull:
            logger.warning(f"Queue full, dropping datagram from {addr} on {socket_binding}")

    def error_received(self, socket_binding: UdapSocketBinding, exc: Exception) -> None:
        """Called when a send or receive operation raises an OSError. A single bad
           send or receive does not end the socket."""
        logger.warning(f"Error received from transport {socket_binding}: {exc}")

    def connection_lost(self, socket_binding: UdapSocketBinding, exc: Optional[Exception]) -> None:
        logger.debug(f"Connection to transport lost on {socket_binding}, exc={exc}")
        if exc is None:
            self.set_final_result()
        else:
            self.set_final_exception(exc)

    def _end_of_stream(self) -> None:
        if not self.eos:
            self.eos = True
            try:
                # wake up any waiting reader
                self.queue.put_nowait(None)
            except asyncio.QueueFull:
                # queue is full so the reader will wake up anyway
                pass

    def _close_all(self) -> None:
        for socket_binding in self.socket_bindings:
            if not socket_binding.transport is None:
                # the transport owns and closes the low-level socket
                socket_binding.transport.close()
                socket_binding.transport = None
                socket_binding.sock = None
            elif not socket_binding.sock is None:
                try:
                    socket_binding.sock.close()
                except OSError as e:
                    logger.error(f"Error closing socket on {socket_binding}: {e}")
                socket_binding.sock = None

    def set_final_exception(self, exc: BaseException) -> None:
        if not self.final_result.done():
            logger.debug(f"UdapSocket: Setting final exception: {exc}")
            self.final_result.set_exception(exc)
            self._end_of_stream()
            self._close_all()

    def set_final_result(self) -> None:
        if not self.final_result.done():
            logger.debug("UdapSocket: Setting final result to success")
            self.final_result.set_result(None)
            self._end_of_stream()
            self._close_all()

    async def __aenter__(self) -> Self:
        await self.start()
        return self

    async def __aexit__(
            self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> bool:
        if exc is None:
            self.set_final_result()
        else:
            self.set_final_exception(exc)
        try:
            # ensure that final_result has been awaited
            await self.wait_for_done()
        except BaseException:
            if exc is None:
                raise
        return False
