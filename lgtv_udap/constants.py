# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Constants used by this package"""

UDAP_MULTICAST_ADDRESS = "239.255.255.250"
"""The multicast address to which UDAP discovery requests are sent."""

UDAP_MULTICAST_PORT = 1900
"""The multicast port to which UDAP discovery requests are sent."""

UDAP_LOCAL_PORT = 1901
"""The local UDP port that discovery requests are sent from and responses are received on."""

DEFAULT_RESPONSE_WAIT_TIME = 1.0
"""The default amount of time (in seconds) to wait for discovery responses to come in."""

DEFAULT_HTTP_TIMEOUT = 10.0
"""The default total timeout (in seconds) for a single HTTP request to a TV."""

UDAP_USER_AGENT = "UDAP/2.0"

DISCOVERY_REQUEST = (
    'M-SEARCH * HTTP/1.1\r\n'
    f'HOST: {UDAP_MULTICAST_ADDRESS}:{UDAP_MULTICAST_PORT}\r\n'
    'MAN: "ssdp:discover"\r\n'
    'MX: 3\r\n'
    'ST: udap:rootservice\r\n'
    f'USER-AGENT: {UDAP_USER_AGENT}\r\n'
    '\r\n'
  )
"""The discovery probe multicast to all TVs on the local network."""

DISCOVERY_SUCCESS_MARKER = "200 OK"
"""A discovery response must contain this text to be considered."""

LOCATION_HEADER = "LOCATION"
"""The discovery response header giving the URL of the device description document."""

PAIRING_PATH = "/udap/api/pairing"
COMMAND_PATH = "/udap/api/command"
