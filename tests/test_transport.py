#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

import asyncio
import socket

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from lgtv_udap import UdapRequestTransport, UdapTransportError
from lgtv_udap.description import DescriptionLocation
from lgtv_udap.transport import build_url


def make_tv_app() -> web.Application:
    async def description(request: web.Request) -> web.Response:
        return web.Response(text="<root><uuid>ABC-1</uuid></root>", content_type="text/xml")

    async def pairing(request: web.Request) -> web.Response:
        body = await request.text()
        if "<value>1234</value>" not in body:
            return web.Response(status=401)
        return web.Response(text=f"{request.headers['User-Agent']}|{request.headers['Content-Type']}")

    app = web.Application()
    app.router.add_get("/desc.xml", description)
    async def slow(request: web.Request) -> web.Response:
        await asyncio.sleep(1.0)
        return web.Response(text="late")

    app.router.add_post("/udap/api/pairing", pairing)
    app.router.add_get("/slow.xml", slow)
    return app

def unused_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


class TestUdapRequestTransport:

    @pytest.mark.asyncio
    async def test_get(self):
        async with TestServer(make_tv_app(), host='127.0.0.1') as server:
            async with UdapRequestTransport() as transport:
                response = await transport.get('127.0.0.1', server.port, "/desc.xml")
        assert response.ok
        assert response.body == "<root><uuid>ABC-1</uuid></root>"

    @pytest.mark.asyncio
    async def test_post_headers_and_status(self):
        async with TestServer(make_tv_app(), host='127.0.0.1') as server:
            async with UdapRequestTransport() as transport:
                accepted = await transport.post('127.0.0.1', server.port, "/udap/api/pairing", "<value>1234</value>")
                rejected = await transport.post('127.0.0.1', server.port, "/udap/api/pairing", "<value>9999</value>")
        assert accepted.status_code == 200
        assert accepted.body == "UDAP/2.0|text/xml; charset=utf-8"
        assert rejected.status_code == 401
        assert not rejected.ok

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        async with UdapRequestTransport(timeout=2.0) as transport:
            with pytest.raises(UdapTransportError):
                await transport.get('127.0.0.1', unused_port(), "/desc.xml")

    @pytest.mark.asyncio
    async def test_ipv6_literal_host(self):
        server = TestServer(make_tv_app(), host='::1')
        try:
            await server.start_server()
        except OSError:
            pytest.skip("IPv6 loopback is not available")
        try:
            location = DescriptionLocation.from_url(f"http://[::1]:{server.port}/desc.xml")
            async with UdapRequestTransport() as transport:
                response = await transport.get(location.hostname, location.port, location.path)
        finally:
            await server.close()
        assert location.hostname == "::1"
        assert response.ok

    @pytest.mark.asyncio
    async def test_timeout_applies_to_injected_session(self):
        async with TestServer(make_tv_app(), host='127.0.0.1') as server:
            async with aiohttp.ClientSession() as session:
                transport = UdapRequestTransport(timeout=0.2, session=session)
                with pytest.raises(UdapTransportError):
                    await transport.get('127.0.0.1', server.port, "/slow.xml")
                response = await transport.post('127.0.0.1', server.port, "/udap/api/pairing", "<value>1234</value>")
                await transport.close()
                assert not session.closed
        assert response.body == "UDAP/2.0|text/xml; charset=utf-8"


def test_build_url():
    assert build_url("10.0.0.5", 8080, "/desc.xml") == "http://10.0.0.5:8080/desc.xml"
    assert build_url("fe80::1", 8080, "/desc.xml") == "http://[fe80::1]:8080/desc.xml"
    assert build_url("[fe80::1]", 80, "/") == "http://[fe80::1]:80/"
    assert build_url("tv.local", 80, "/a?b=1") == "http://tv.local:80/a?b=1"
