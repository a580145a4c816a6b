""" Python implementation of a layer-agnostic packet: a message envelope for
    request/response traffic that tracks its own send lifecycle and knows
    how to put itself on, and take itself off, the wire.
"""

__version__ = '1.1.1'

# Utility components.

from . import json
from . import log
from . import errors
from . import fields

# Submodules used by multiple other components.

from . import config
from . import state

# Primary public-facing interfaces.

from . import packet
from .packet import Packet, Options
from .config import Configuration
from .fields import PacketType, SendState
from .errors import PacketError, MalformedWireData, InvalidSetupData, MissingCommandIdentifier

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
