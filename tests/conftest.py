#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

import pytest

from .helpers import FakeTransport

@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()
