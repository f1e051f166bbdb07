#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

from typing import Dict, List, Optional, Tuple, Union

from lgtv_udap import UdapRequestTransport, UdapResponse, UdapTransportError

DESCRIPTION_TEMPLATE = (
    '<?xml version="1.0" encoding="utf-8"?>'
    '<root xmlns="urn:schemas-upnp-org:device-1-0">'
    '<specVersion><major>1</major><minor>0</minor></specVersion>'
    '<device>'
    '<deviceType>{type}</deviceType>'
    '<friendlyName>{friendly_name}</friendlyName>'
    '<manufacturer>LG Electronics</manufacturer>'
    '<modelName>{name}</modelName>'
    '<uuid>{uuid}</uuid>'
    '</device>'
    '</root>'
  )

def make_description(uuid: str="ABC-1", name: str="OLED55", friendly_name: str="Living Room TV", type: str="tv") -> str:
    return DESCRIPTION_TEMPLATE.format(uuid=uuid, name=name, friendly_name=friendly_name, type=type)

def make_reply_text(location: Optional[str]="http://10.0.0.5:8080/desc.xml", status: str="200 OK") -> str:
    lines = [
        f"HTTP/1.1 {status}",
        "CACHE-CONTROL: max-age=1800",
        "ST: udap:rootservice",
        "USN: uuid:ABC-1::udap:rootservice",
      ]
    if location is not None:
        lines.append(f"LOCATION: {location}")
    return "\r\n".join(lines) + "\r\n\r\n"

FakeResult = Union[UdapResponse, Exception]

class FakeTransport(UdapRequestTransport):
    """Records requests and answers them from a table keyed by (method, hostname, port, path)."""

    results: Dict[Tuple[str, str, int, str], FakeResult]
    calls: List[Tuple[str, str, int, str, Optional[str]]]

    def __init__(self) -> None:
        super().__init__()
        self.results = {}
        self.calls = []

    def set_result(self, method: str, hostname: str, port: int, path: str, result: FakeResult) -> None:
        self.results[(method, hostname, port, path)] = result

    async def request(
            self,
            method: str,
            hostname: str,
            port: int,
            path: str,
            body: Optional[str]=None,
          ) -> UdapResponse:
        self.calls.append((method, hostname, port, path, body))
        result = self.results.get((method, hostname, port, path))
        if result is None:
            raise UdapTransportError(f"No route to {hostname}:{port}{path}")
        if isinstance(result, Exception):
            raise result
        return result

