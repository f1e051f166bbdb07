#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Abstraction of a UDAP discovery response received from a TV.
"""

from __future__ import annotations

import re

from .internal_types import *
from .pkg_logging import logger
from .constants import DISCOVERY_SUCCESS_MARKER, LOCATION_HEADER
from .util import CaseInsensitiveDict, split_lines

class DiscoveryReply(Mapping[str, str]):
    """A parsed UDAP discovery response.

    This class provides a read-only dict-like interface to the "TOKEN: value" headers
    of the HTTP-like response text, plus a few convenient properties. Instances are
    normally created with DiscoveryReply.parse().
    """

    _header_re = re.compile(r'^(?P<name>[A-Z-]+):( )?(?P<value>.*)$')

    _statement_line: str
    """The first line of the response; e.g., 'HTTP/1.1 200 OK'"""

    _headers: CaseInsensitiveDict[str]

    def __init__(self, statement_line: str, headers: Mapping[str, str]):
        self._statement_line = statement_line
        self._headers = CaseInsensitiveDict(headers)

    @classmethod
    def parse(cls, raw_text: str) -> Optional[DiscoveryReply]:
        """Parse the text of a discovery response datagram.

        Returns None if the response does not contain the "200 OK" success marker.
        Header names must be upper case letters and hyphens; if a header appears more
        than once, the last value wins.
        """
        if DISCOVERY_SUCCESS_MARKER not in raw_text:
            return None
        lines = split_lines(raw_text)
        headers: Dict[str, str] = {}
        for line in lines:
            m = cls._header_re.match(line)
            if m:
                headers[m.group('name')] = m.group('value')
        result = cls(lines[0], headers)
        logger.debug(f"Parsed discovery reply: {result}")
        return result

    def __str__(self) -> str:
        return f"DiscoveryReply('{self._statement_line}', headers={dict(self._headers)})"

    def __repr__(self) -> str:
        return str(self)

    @property
    def statement_line(self) -> str:
        """The first line of the response; e.g., 'HTTP/1.1 200 OK'"""
        return self._statement_line

    @property
    def location(self) -> Optional[str]:
        """The URL of the device description document, or None if there is no LOCATION header."""
        return self._headers.get(LOCATION_HEADER)

    def __getitem__(self, key: str) -> str:
        return self._headers[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)
