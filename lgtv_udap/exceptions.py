#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Exceptions defined by this package"""

class UdapError(Exception):
  """Base class for all error exceptions defined by this package."""
  pass

class UdapTransportError(UdapError):
  """An HTTP request to a TV could not be completed."""
  pass

class UdapDescriptionError(UdapError):
  """A device description document was malformed or incomplete."""
  pass

class UdapDeviceNotFoundError(UdapError):
  """An operation referenced a device uuid that is not in the registry."""
  uuid: str

  def __init__(self, uuid: str):
    super().__init__(f"No known device with uuid {uuid!r}")
    self.uuid = uuid
