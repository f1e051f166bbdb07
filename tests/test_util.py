#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

import netifaces
import pytest

from lgtv_udap import UdapDiscoveryClient
from lgtv_udap.util import get_local_ip_addresses, split_lines

INTERFACES = {
    "lo": { netifaces.AF_INET: [ { "addr": "127.0.0.1" } ] },
    "docker0": { netifaces.AF_INET: [ { "addr": "172.17.0.1" } ] },
    "eth0": { netifaces.AF_INET: [ { "addr": "192.168.1.20" } ] },
    "wlan0": {},
}

@pytest.fixture
def fake_interfaces(monkeypatch):
    monkeypatch.setattr(netifaces, "interfaces", lambda: list(INTERFACES))
    monkeypatch.setattr(netifaces, "ifaddresses", lambda ifname: INTERFACES[ifname])
    monkeypatch.setattr(netifaces, "gateways", lambda: { "default": { netifaces.AF_INET: ("192.168.1.1", "eth0") } })


def test_split_lines():
    assert split_lines("a\r\nb\nc\r\n") == [ "a", "b", "c", "" ]
    assert split_lines("a\rb\r\n\rc") == [ "a", "b", "", "c" ]

def test_local_ip_addresses(fake_interfaces):
    assert get_local_ip_addresses() == [ "192.168.1.20", "172.17.0.1" ]
    assert get_local_ip_addresses(include_loopback=True) == [ "192.168.1.20", "172.17.0.1", "127.0.0.1" ]

@pytest.mark.asyncio
async def test_client_bind_addresses(fake_interfaces):
    assert UdapDiscoveryClient().bind_addresses == [ "" ]
    assert UdapDiscoveryClient(all_interfaces=True).bind_addresses == [ "192.168.1.20", "172.17.0.1" ]
    assert UdapDiscoveryClient(bind_addresses=[ "10.0.0.2" ], all_interfaces=True).bind_addresses == [ "10.0.0.2" ]
