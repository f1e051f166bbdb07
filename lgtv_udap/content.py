#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Encoding of the XML request bodies sent to the UDAP pairing and command endpoints.

A request body looks like:

    <?xml version="1.0" encoding="utf-8"?>
    <envelope><api type="pairing"><name>hello</name><value>123456</value><port>8080</port></api></envelope>
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from .internal_types import *

API_TYPE_PAIRING = "pairing"
API_TYPE_COMMAND = "command"

PAIRING_SHOW_KEY = "showKey"
PAIRING_HELLO = "hello"
PAIRING_BYEBYE = "byebye"
COMMAND_HANDLE_KEY_INPUT = "HandleKeyInput"

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'

def encode_udap_content(
        api_type: str,
        name: str,
        value: Optional[Union[str, int]]=None,
        port: Optional[int]=None,
      ) -> str:
    """Builds the XML body for a UDAP API request. The value and port elements are
       only included when given."""
    envelope = ET.Element("envelope")
    api = ET.SubElement(envelope, "api", type=api_type)
    ET.SubElement(api, "name").text = name
    if value is not None:
        ET.SubElement(api, "value").text = str(value)
    if port is not None:
        ET.SubElement(api, "port").text = str(port)
    return XML_DECLARATION + ET.tostring(envelope, encoding="unicode")

def show_key_content() -> str:
    return encode_udap_content(API_TYPE_PAIRING, PAIRING_SHOW_KEY)

def hello_content(pairing_key: str, port: int) -> str:
    return encode_udap_content(API_TYPE_PAIRING, PAIRING_HELLO, pairing_key, port)

def byebye_content(port: int) -> str:
    return encode_udap_content(API_TYPE_PAIRING, PAIRING_BYEBYE, port=port)

def key_input_content(key_code: Union[str, int]) -> str:
    return encode_udap_content(API_TYPE_COMMAND, COMMAND_HANDLE_KEY_INPUT, key_code)
