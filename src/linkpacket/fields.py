"""Packet vocabulary.

Keep the short (wire) and long (programmatic) key names in one place, so
the two vocabularies cannot drift apart.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


OK = "OK"
ACK = "ACK"
NOPE = "NOPE"


class PacketType(str, Enum):
    REQUEST = "RQ"
    RESPONSE = "RP"


class SendState(str, Enum):
    """Send lifecycle of a packet. TIMEOUT is only ever a transition
    target; it is folded into QUEUE or FAILED and never stored.
    """

    QUEUE = "queue"
    SENDING = "sending"
    REPLYWAIT = "replywait"
    TIMEOUT = "timeout"
    FAILED = "failed"
    COMPLETED = "completed"


class _Vocabulary(Enum):
    """Members carry a (short, long) pair of key names."""

    def __init__(self, short, long):
        self.short = short
        self.long = long

    def key(self, long: bool = False) -> str:
        return self.long if long else self.short


class MainField(_Vocabulary):
    # Order matters: this is the order of keys in a copied packet.
    COMMAND = ("CO", "command")
    TARGET = ("TA", "target")
    ORIGIN = ("OR", "origin")
    PAYLOAD = ("PL", "payload")
    OPTIONS = ("OP", "options")
    SESSIONID = ("SI", "sessionid")
    SEQID = ("SQ", "seqid")
    SEQSERIAL = ("SS", "seqserial")
    STATUS = ("ST", "status")


class OptionField(_Vocabulary):
    REPLY = ("RR", "reply")
    REQUESTACK = ("RA", "requestack")
    DESTROYAFTER = ("DA", "destroyafter")
    DONOTRECONNECT = ("NR", "donotreconnect")
    BLOCKUI = ("BU", "blockui")
    TYPE = ("TY", "type")
    LAYER = ("LA", "layer")


_main_short = {field.short: field for field in MainField}
_main_long = {field.long: field for field in MainField}
_option_short = {field.short: field for field in OptionField}
_option_long = {field.long: field for field in OptionField}


def lookup_main(key, long: bool = False) -> Optional[MainField]:
    """Resolve a top-level key in the short or long vocabulary."""
    table = _main_long if long else _main_short
    return table.get(key)


def lookup_option(key, long: bool = False) -> Optional[OptionField]:
    """Resolve an option key in the short or long vocabulary."""
    table = _option_long if long else _option_short
    return table.get(key)
