#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

import sys
import argparse
import json
import asyncio
import logging

from lgtv_udap.internal_types import *

from lgtv_udap import (
    __version__ as pkg_version,
    UdapRemote,
    PairingStatus,
    DEFAULT_RESPONSE_WAIT_TIME,
  )

class CmdExitError(RuntimeError):
    exit_code: int

    def __init__(self, exit_code: int, msg: Optional[str]=None):
        if msg is None:
            msg = f"Command exited with return code {exit_code}"
        super().__init__(msg)
        self.exit_code = exit_code

class ArgparseExitError(CmdExitError):
    pass

class NoExitArgumentParser(argparse.ArgumentParser):
    def exit(self, status=0, message=None):
        if message:
            self._print_message(message, sys.stderr)
        raise ArgparseExitError(status, message)

class CommandHandler:
    _argv: Optional[Sequence[str]]
    _parser: argparse.ArgumentParser
    _args: argparse.Namespace
    _provide_traceback: bool = True

    def __init__(self, argv: Optional[Sequence[str]]=None):
        self._argv = argv

    def pretty_print(self, value: Jsonable) -> None:
        print(json.dumps(value, indent=2, sort_keys=True))
        sys.stdout.flush()

    def create_remote(self) -> UdapRemote:
        bind_addresses: Optional[List[str]] = self._args.bind_addresses
        if not bind_addresses is None and len(bind_addresses) == 0:
            bind_addresses = None
        return UdapRemote(
            response_wait_time=self._args.wait_time,
            bind_addresses=bind_addresses,
            all_interfaces=self._args.all_interfaces,
          )

    async def discover_device(self, remote: UdapRemote, uuid: str) -> None:
        devices = await remote.discover()
        if not any(device.uuid == uuid for device in devices):
            raise CmdExitError(1, f"TV {uuid} did not respond to discovery")

    async def connect(self, remote: UdapRemote, uuid: str, key: str) -> None:
        await self.discover_device(remote, uuid)
        result = await remote.start_pairing(uuid, key)
        if result.status != PairingStatus.CONNECTED:
            raise CmdExitError(1, f"TV {uuid} rejected the pairing key: {result.status.value}")

    async def cmd_bare(self) -> int:
        print("A command is required", file=sys.stderr)
        return 1

    async def cmd_discover(self) -> int:
        async with self.create_remote() as remote:
            devices = await remote.discover()
        self.pretty_print([ device.to_jsonable() for device in devices ])
        return 0

    async def cmd_pair(self) -> int:
        uuid: str = self._args.uuid
        key: str = self._args.key
        async with self.create_remote() as remote:
            await self.discover_device(remote, uuid)
            result = await remote.start_pairing(uuid, key)
        self.pretty_print(result.to_jsonable())
        return 0 if result.status != PairingStatus.INVALID_PAIRING_KEY else 1

    async def cmd_unpair(self) -> int:
        uuid: str = self._args.uuid
        async with self.create_remote() as remote:
            await self.connect(remote, uuid, self._args.key)
            response = await remote.end_pairing(uuid)
        self.pretty_print({ "status_code": response.status_code })
        return 0 if response.ok else 1

    async def cmd_cmd(self) -> int:
        uuid: str = self._args.uuid
        async with self.create_remote() as remote:
            await self.connect(remote, uuid, self._args.key)
            response = await remote.send_cmd(uuid, self._args.code)
        self.pretty_print({ "status_code": response.status_code })
        return 0 if response.ok else 1

    async def cmd_version(self) -> int:
        print(pkg_version)
        return 0

    async def arun(self) -> int:
        """Run the lgtv-udap command-line tool with provided arguments

        Args:
            argv (Optional[Sequence[str]], optional):
                A list of commandline arguments (NOT including the program as argv[0]!),
                or None to use sys.argv[1:]. Defaults to None.

        Returns:
            int: The exit code that would be returned if this were run as a standalone command.
        """
        parser = NoExitArgumentParser(description="Discover and remote-control LG TVs over UDAP.")

        # ======================= Main command

        self._parser = parser
        parser.add_argument('--traceback', "--tb", action='store_true', default=False,
                            help='Display detailed exception information')
        parser.add_argument('--log-level', dest='log_level', default='warning',
                            choices=['debug', 'info', 'warning', 'error', 'critical'],
                            help='''The logging level to use. Default: warning''')
        parser.add_argument('--wait-time', type=float, default=DEFAULT_RESPONSE_WAIT_TIME,
                            help=f'''The amount of time to wait for discovery responses, in seconds. Default: {DEFAULT_RESPONSE_WAIT_TIME}''')
        parser.add_argument('-b', '--bind', dest="bind_addresses", action='append', default=[],
                            help='''The local IP address to send discovery from. May be repeated. Default: all interfaces through one socket.''')
        parser.add_argument('--all-interfaces', dest="all_interfaces", action='store_true', default=False,
                            help='''Send discovery from every local non-loopback IPv4 address.''')
        parser.set_defaults(func=self.cmd_bare)

        subparsers = parser.add_subparsers(
                            title='Commands',
                            description='Valid commands',
                            help='Additional help available with "<command-name> -h"')

        # ======================= discover

        parser_discover = subparsers.add_parser('discover', description="Discover TVs on the local network")
        parser_discover.set_defaults(func=self.cmd_discover)

        # ======================= pair

        parser_pair = subparsers.add_parser('pair',
                                description="Pair with a TV. Without --key, the TV displays its pairing key.")
        parser_pair.add_argument('uuid', help='The uuid of the TV')
        parser_pair.add_argument('-k', '--key', default="", help='The pairing key displayed by the TV')
        parser_pair.set_defaults(func=self.cmd_pair)

        # ======================= unpair

        parser_unpair = subparsers.add_parser('unpair', description="End pairing with a TV")
        parser_unpair.add_argument('uuid', help='The uuid of the TV')
        parser_unpair.add_argument('-k', '--key', required=True, help='The pairing key displayed by the TV')
        parser_unpair.set_defaults(func=self.cmd_unpair)

        # ======================= cmd

        parser_cmd = subparsers.add_parser('cmd', description="Send a remote-control key code to a TV")
        parser_cmd.add_argument('uuid', help='The uuid of the TV')
        parser_cmd.add_argument('code', help='The key code to send')
        parser_cmd.add_argument('-k', '--key', required=True, help='The pairing key displayed by the TV')
        parser_cmd.set_defaults(func=self.cmd_cmd)

        # ======================= version

        parser_version = subparsers.add_parser('version',
                                description='''Display version information.''')
        parser_version.set_defaults(func=self.cmd_version)

        # =========================================================

        try:
            args = parser.parse_args(self._argv)
        except ArgparseExitError as ex:
            return ex.exit_code
        traceback: bool = args.traceback
        self._provide_traceback = traceback

        try:
            logging.basicConfig(
                level=logging.getLevelName(args.log_level.upper()),
            )
            self._args = args
            func: Callable[[], Awaitable[int]] = args.func
            logging.debug(f"Running command {func.__name__}, tb = {traceback}")
            rc = await func()
            logging.debug(f"Command {func.__name__} returned {rc}")
        except Exception as ex:
            if isinstance(ex, CmdExitError):
                rc = ex.exit_code
            else:
                rc = 1
            if rc != 0:
                if traceback:
                    raise
            print(f"lgtv-udap: error: {ex}", file=sys.stderr)

        return rc

    def run(self) -> int:
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            rc = loop.run_until_complete(self.arun())
        finally:
            loop.close()
        return rc

def run(argv: Optional[Sequence[str]]=None) -> int:
    try:
        rc = CommandHandler(argv).run()
    except CmdExitError as ex:
        rc = ex.exit_code
    return rc

async def arun(argv: Optional[Sequence[str]]=None) -> int:
    try:
        rc = await CommandHandler(argv).arun()
    except CmdExitError as ex:
        rc = ex.exit_code
    return rc

def main() -> None:
    sys.exit(run())

# allow running with "python3 -m", or as a standalone script
if __name__ == "__main__":
    main()
