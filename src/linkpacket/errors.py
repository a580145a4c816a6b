"""Packet construction errors.

All of these are raised while setting up a packet; a packet that raised
one of them during construction is never handed back to the caller.
"""

from __future__ import annotations


class PacketError(ValueError):
    """Base class for all packet setup errors."""


class MalformedWireData(PacketError):
    """The wire decoder could not make sense of the incoming data."""


class InvalidSetupData(PacketError):
    """The setup data is None, or not a mapping once decoded."""


class MissingCommandIdentifier(PacketError):
    """The setup data has no command under either key vocabulary."""
