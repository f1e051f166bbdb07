#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Simple utility functions used by this package
"""

from __future__ import annotations

from ipaddress import IPv4Address

import re

import netifaces
from requests.structures import CaseInsensitiveDict

from .internal_types import *

_line_break_re = re.compile(r"\r\n|\r|\n")

def split_lines(text: str) -> List[str]:
    """Split a string into lines at CRLF, LF or CR, with the delimiters removed.

    A bare LF or CR is accepted as a line delimiter even though CRLF is required by the
    HTTP-like UDAP wire format.
    """
    return _line_break_re.split(text)

def get_default_ipv4_interface() -> Optional[str]:
    """Returns the name of the network interface that holds the default IPv4 route,
       or None if there is no default route."""
    gws = netifaces.gateways()
    default_gateways = gws.get("default", {})
    if netifaces.AF_INET in default_gateways:
        return default_gateways[netifaces.AF_INET][1]
    return None

def get_local_ip_addresses(include_loopback: bool=False) -> List[str]:
    """Returns the IPv4 addresses of the local host, with the address on the default
       gateway interface first and loopback addresses (if included) last."""
    default_ifname = get_default_ipv4_interface()
    prioritized: List[Tuple[int, str]] = []
    for ifname in netifaces.interfaces():
        for addrinfo in netifaces.ifaddresses(ifname).get(netifaces.AF_INET, []):
            ip_str = addrinfo['addr']
            if IPv4Address(ip_str).is_loopback:
                if not include_loopback:
                    continue
                priority = 2
            elif ifname == default_ifname:
                priority = 0
            else:
                priority = 1
            prioritized.append((priority, ip_str))
    return [ ip for _, ip in sorted(prioritized) ]
