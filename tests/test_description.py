#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

import pytest

from lgtv_udap import (
    DescriptionLocation,
    DiscoveryReply,
    UdapDescriptionError,
    UdapResponse,
    UdapTransportError,
    parse_device_description,
    resolve_device,
  )

from .helpers import make_description, make_reply_text


class TestDescriptionLocation:

    def test_from_url(self):
        location = DescriptionLocation.from_url("http://10.0.0.5:8080/desc.xml")
        assert location.host == "10.0.0.5:8080"
        assert location.hostname == "10.0.0.5"
        assert location.port == 8080
        assert location.path == "/desc.xml"

    def test_default_port_and_path(self):
        location = DescriptionLocation.from_url("http://10.0.0.5")
        assert location.port == 80
        assert location.path == "/"

    def test_query_is_kept(self):
        location = DescriptionLocation.from_url("http://10.0.0.5:1234/udap/api/data?target=rootservice.xml")
        assert location.path == "/udap/api/data?target=rootservice.xml"

    @pytest.mark.parametrize("url", [ "not a url", "http://10.0.0.5:notaport/x.xml" ])
    def test_invalid(self, url):
        with pytest.raises(UdapDescriptionError):
            DescriptionLocation.from_url(url)


class TestParseDeviceDescription:

    location = DescriptionLocation.from_url("http://10.0.0.5:8080/desc.xml")

    def test_namespaced_document(self):
        device = parse_device_description(make_description(), self.location)
        assert device.uuid == "ABC-1"
        assert device.name == "OLED55"
        assert device.friendly_name == "Living Room TV"
        assert device.type == "tv"
        assert device.hostname == "10.0.0.5"
        assert device.port == 8080
        assert device.pairing_key is None

    def test_plain_document(self):
        xml = ("<root><uuid>ABC-1</uuid><modelName>OLED55</modelName>"
               "<friendlyName>Living Room TV</friendlyName><deviceType>tv</deviceType></root>")
        device = parse_device_description(xml, self.location)
        assert device.uuid == "ABC-1"
        assert device.type == "tv"

    def test_malformed_xml(self):
        with pytest.raises(UdapDescriptionError):
            parse_device_description("<root><uuid>ABC-1</root>", self.location)

    def test_missing_element(self):
        xml = "<root><uuid>ABC-1</uuid><modelName>OLED55</modelName><deviceType>tv</deviceType></root>"
        with pytest.raises(UdapDescriptionError, match="friendlyName"):
            parse_device_description(xml, self.location)

    def test_empty_uuid(self):
        with pytest.raises(UdapDescriptionError):
            parse_device_description(make_description(uuid=""), self.location)


class TestResolveDevice:

    @pytest.mark.asyncio
    async def test_resolve(self, fake_transport):
        fake_transport.set_result("GET", "10.0.0.5", 8080, "/desc.xml", UdapResponse(200, make_description()))
        device = await resolve_device(fake_transport, DiscoveryReply.parse(make_reply_text()))
        assert device.uuid == "ABC-1"
        assert fake_transport.calls == [ ("GET", "10.0.0.5", 8080, "/desc.xml", None) ]

    @pytest.mark.asyncio
    async def test_no_location_makes_no_request(self, fake_transport):
        device = await resolve_device(fake_transport, DiscoveryReply.parse(make_reply_text(location=None)))
        assert device is None
        assert fake_transport.calls == []

    @pytest.mark.asyncio
    async def test_transport_error(self, fake_transport):
        with pytest.raises(UdapTransportError):
            await resolve_device(fake_transport, DiscoveryReply.parse(make_reply_text()))

    @pytest.mark.asyncio
    async def test_http_error(self, fake_transport):
        fake_transport.set_result("GET", "10.0.0.5", 8080, "/desc.xml", UdapResponse(404, "Not Found"))
        with pytest.raises(UdapDescriptionError):
            await resolve_device(fake_transport, DiscoveryReply.parse(make_reply_text()))
