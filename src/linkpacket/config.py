""" Configuration shared by packets: the wire codec, the sequence id
    generator, and the default values for the requestack and blockui
    options. Packets constructed without an explicit :class:`Configuration`
    use the shared :data:`default` instance; changing an attribute of that
    instance changes the behavior of every packet constructed afterwards.
"""

import itertools
import os
import random
import threading
import time

from . import json
from .errors import MalformedWireData


def json_encode(data):
    """ The built-in wire encoder. Returns bytes.
    """

    return json.dumps(data)


def json_decode(data):
    """ The built-in wire decoder. Any failure to parse the supplied *data*
        is reported as :class:`MalformedWireData`.
    """

    # Not every backend accepts a memoryview.
    if isinstance(data, memoryview):
        data = bytes(data)

    try:
        return json.loads(data)
    except json.DecodeError as e:
        raise MalformedWireData('incorrect packet data (%s decode failure)' % (json.backend)) from e


def simple_id(packet=None):
    """ Return a unique-enough sequence id for the supplied *packet*: four
        random hexadecimal digits and the current time in milliseconds,
        separated by a dash.
    """

    milliseconds = int(time.time() * 1000)
    prefix = '%04x' % (random.randrange(0x10000))
    return prefix + '-' + str(milliseconds)


_id_min = 0
_id_max = 0xFFFFFFFF
_id_lock = threading.Lock()
_id_ticker = itertools.count(_id_min)


def sequential_id(packet=None):
    """ Return the next locally unique sequence id, as eight hexadecimal
        digits. This is an alternative to :func:`simple_id` for applications
        that prefer compact, ordered identifiers; set it as the
        *make_seqid* of a :class:`Configuration`. Unlike the request ids it
        derives from, the id is a str, since seqid travels inside the JSON
        document rather than as a raw frame.
    """

    global _id_ticker
    _id_lock.acquire()
    id = next(_id_ticker)

    if id >= _id_max:
        _id_ticker = itertools.count(_id_min)

        if id > _id_max:
            # This shouldn't happen, but here we are...
            id = next(_id_ticker)

    _id_lock.release()

    id = '%08x' % (id)
    return id


def _boolean(value):
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Configuration:
    """ A convenience class to represent packet configuration. The codec
        is a pair of callables: *encode* turns a plain structure into wire
        data, *decode* does the reverse. The *make_seqid* callable receives
        the packet needing an id and returns a string.
    """

    def __init__(self, encode=None, decode=None, make_seqid=None, request_ack=True, block_ui=True):

        if encode is None:
            encode = json_encode
        if decode is None:
            decode = json_decode
        if make_seqid is None:
            make_seqid = simple_id

        self.encode = encode
        self.decode = decode
        self.make_seqid = make_seqid
        self.request_ack = request_ack
        self.block_ui = block_ui


    def __repr__(self):
        return 'Configuration(request_ack=%r, block_ui=%r)' % (self.request_ack, self.block_ui)


    @classmethod
    def from_environment(cls, environ=None, **kwargs):
        """ Build a :class:`Configuration` whose defaults come from the
            LINKPACKET_REQUEST_ACK and LINKPACKET_BLOCK_UI environment
            variables, when set. Any keyword arguments are passed through
            to the constructor and take precedence.
        """

        if environ is None:
            environ = os.environ

        try:
            request_ack = environ['LINKPACKET_REQUEST_ACK']
        except KeyError:
            pass
        else:
            kwargs.setdefault('request_ack', _boolean(request_ack))

        try:
            block_ui = environ['LINKPACKET_BLOCK_UI']
        except KeyError:
            pass
        else:
            kwargs.setdefault('block_ui', _boolean(block_ui))

        return cls(**kwargs)


    def packet(self, data=None):
        """ Construct a new :class:`linkpacket.Packet` using this
            configuration.
        """

        from .packet import Packet
        return Packet(data, config=self)


# end of class Configuration


default = Configuration()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
