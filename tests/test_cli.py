#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

import json
from unittest.mock import AsyncMock, patch

import pytest

from lgtv_udap import PairingResult, PairingStatus, UdapDeviceInfo, __version__
from lgtv_udap.__main__ import arun


class TestCommandLine:

    @pytest.mark.asyncio
    async def test_version(self, capsys):
        assert await arun(["version"]) == 0
        assert capsys.readouterr().out.strip() == __version__

    @pytest.mark.asyncio
    async def test_no_command(self, capsys):
        assert await arun([]) == 1
        assert "A command is required" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_bad_arguments(self):
        assert await arun(["pair"]) == 2

    @pytest.mark.asyncio
    async def test_discover(self, capsys):
        info = UdapDeviceInfo("ABC-1", "OLED55", "Living Room TV", "tv", False)
        with patch("lgtv_udap.remote.UdapRemote.discover", AsyncMock(return_value=[ info ])):
            assert await arun(["--wait-time", "0.1", "discover"]) == 0
        assert json.loads(capsys.readouterr().out) == [ info.to_jsonable() ]

    @pytest.mark.asyncio
    async def test_pair_unknown_tv(self, capsys):
        with patch("lgtv_udap.remote.UdapRemote.discover", AsyncMock(return_value=[])):
            assert await arun(["pair", "ABC-1"]) == 1
        assert "did not respond" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_pair_displays_key(self, capsys):
        info = UdapDeviceInfo("ABC-1", "OLED55", "Living Room TV", "tv", False)
        result = PairingResult(PairingStatus.PAIRING_KEY_DISPLAYED, info)
        with patch("lgtv_udap.remote.UdapRemote.discover", AsyncMock(return_value=[ info ])), \
                patch("lgtv_udap.remote.UdapRemote.start_pairing", AsyncMock(return_value=result)) as start_pairing:
            assert await arun(["pair", "ABC-1"]) == 0
        start_pairing.assert_awaited_once_with("ABC-1", "")
        assert json.loads(capsys.readouterr().out)["status"] == "PAIRING_KEY_DISPLAYED"
