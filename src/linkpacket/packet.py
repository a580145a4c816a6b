""" A class representation of a layer-agnostic packet: the envelope that
    carries request and response traffic between two endpoints, regardless
    of the link underneath.
"""

import collections.abc
import copy as copymodule

from . import config as configmodule
from . import fields
from . import log
from .errors import InvalidSetupData, MalformedWireData, MissingCommandIdentifier
from .fields import MainField, OptionField, PacketType
from .state import CommState

logger = log.get_logger('packet')

_wire_types = (str, bytes, bytearray, memoryview)


class Options:
    """ The behavior flags of a :class:`Packet`. The attribute names are the
        long option names; see :class:`linkpacket.fields.OptionField`.
    """

    def __init__(self, requestack=True, blockui=True):

        self.reply = False
        self.requestack = requestack
        self.destroyafter = False
        self.donotreconnect = False
        self.blockui = blockui
        self.type = PacketType.REQUEST
        self.layer = None


    def __repr__(self):
        return repr(self.to_dict(True))


    @property
    def type(self):
        return self._type


    @type.setter
    def type(self, value):
        # Raises ValueError for anything but RQ or RP.
        self._type = PacketType(value)


    def set(self, field, value):
        """ Set the option identified by the :class:`OptionField` *field*.
            The type option only accepts :class:`PacketType` values.
        """

        try:
            setattr(self, field.long, value)
        except ValueError:
            raise InvalidSetupData('invalid packet type: ' + repr(value)) from None


    def to_dict(self, use_long_keys=False):

        options = dict()

        for field in OptionField:
            value = getattr(self, field.long)
            if field == OptionField.TYPE:
                value = value.value
            options[field.key(use_long_keys)] = value

        return options


# end of class Options



class Packet:
    """ The :class:`Packet` is the unit of communication. It can be built
        from nothing, from wire data (a str or bytes, decoded with the
        configured codec), from a mapping using either the long or the short
        key vocabulary, or from another :class:`Packet`.

        The send-state machine, and all the timing bookkeeping attached to
        it, lives in the :class:`linkpacket.state.CommState` instance held
        in the *commstate* attribute; the methods here delegate to it, so
        that a queue manager only needs to deal with the packet.

        :ivar command: The application-level verb.
        :ivar target: The intended recipient, if any.
        :ivar origin: The sender, if any.
        :ivar payload: The message body; any structure that can be deep-copied.
        :ivar status: The outcome code, meaningful once this is a reply.
        :ivar options: An :class:`Options` instance.
        :ivar sessionid: Correlates packets to a session.
        :ivar seqid: Unique identifier, generated if not supplied.
        :ivar seqserial: Sequence counter within a session.
        :ivar states: The history stack; see :func:`add_state`.
        :ivar commstate: Transport bookkeeping; never on the wire.
        :ivar config: The :class:`linkpacket.config.Configuration` in use.
    """

    def __init__(self, data=None, config=None):

        if config is None:
            config = configmodule.default

        self.config = config

        self.command = fields.NOPE
        self.target = None
        self.origin = None
        self.payload = None
        self.status = None
        self.options = Options(config.request_ack, config.block_ui)
        self.sessionid = None
        self.seqid = None
        self.seqserial = 0
        self.states = list()
        self.commstate = CommState()

        if data is not None:
            self.setup(data, initial=True)

        if self.seqid is None:
            self.seqid = config.make_seqid(self)


    def __repr__(self):
        return 'Packet(%r)' % (self.copy(),)


    def setup(self, data, initial=False):
        """ Set up this packet from *data*, which is one of:

            * wire data (str or bytes), which will be decoded with the
              configured codec to yield a mapping;
            * a mapping using the long key names (it has a 'command' key),
              optionally also holding 'states' and 'commstate';
            * a mapping using the short key names (it has a 'CO' key);
            * another :class:`Packet`.

            The *initial* flag is set when this is part of the original
            construction; the payload is only deep-copied in that case.
            Raises :class:`MalformedWireData`, :class:`InvalidSetupData`, or
            :class:`MissingCommandIdentifier` if nothing intelligible can be
            extracted from *data*.
        """

        if isinstance(data, Packet):
            data = data.copy(True)

        elif isinstance(data, _wire_types):
            try:
                data = self.config.decode(data)
            except MalformedWireData:
                raise
            except (TypeError, ValueError) as e:
                raise MalformedWireData('incorrect packet data: ' + str(e)) from e

        if data is None or not isinstance(data, collections.abc.Mapping):
            raise InvalidSetupData('incorrect packet setup data (null or not a mapping)')

        if MainField.COMMAND.long in data:
            use_long = True
        elif MainField.COMMAND.short in data:
            use_long = False
        else:
            raise MissingCommandIdentifier('incorrect packet setup data (missing command identifier)')

        # Resolve everything before touching this instance, so that a bad
        # value leaves no partial setup behind.

        main = dict()
        options = list()

        for key,value in data.items():
            field = fields.lookup_main(key, use_long)

            if field == MainField.OPTIONS:
                options.extend(self._resolve_options(value))
            elif field is not None:
                main[field] = value
            else:
                option = fields.lookup_option(key, use_long)
                if option is not None:
                    options.append((option, value))
                elif key != 'states' and key != 'commstate':
                    logger.debug("dropping unrecognized packet key %r", key)

        scratch = copymodule.copy(self.options)
        for option,value in options:
            scratch.set(option, value)

        commstate = data.get('commstate')
        if isinstance(commstate, collections.abc.Mapping):
            try:
                commstate = CommState(**commstate)
            except (TypeError, ValueError) as e:
                raise InvalidSetupData('incorrect packet bookkeeping: ' + str(e)) from e
        elif commstate is not None and not isinstance(commstate, CommState):
            raise InvalidSetupData('packet bookkeeping must be a mapping, not ' + type(commstate).__name__)

        states = data.get('states')
        if states is not None and not isinstance(states, list):
            raise InvalidSetupData('packet states must be a list, not ' + type(states).__name__)

        for field,value in main.items():
            if field == MainField.PAYLOAD and initial:
                value = copymodule.deepcopy(value)
            setattr(self, field.long, value)

        self.options = scratch

        if states is not None:
            self.states = states

        if commstate is not None:
            self.commstate = commstate


    @staticmethod
    def _resolve_options(value):

        if not isinstance(value, collections.abc.Mapping):
            raise InvalidSetupData('packet options must be a mapping, not ' + type(value).__name__)

        resolved = list()

        for key,option_value in value.items():
            option = fields.lookup_option(key)
            if option is None:
                option = fields.lookup_option(key, long=True)

            if option is None:
                logger.debug("dropping unrecognized option key %r", key)
            else:
                resolved.append((option, option_value))

        return resolved


    # Options and behaviours.

    def ack(self):
        """ ACK this packet: turn it into an empty 'OK' reply with the
            command 'ACK'. An ACK acknowledges receipt, and is only expected
            when the requestack option is set.
        """

        return self.reply(None, fields.OK, fields.ACK)


    def reply(self, data=None, status=fields.OK, command=None):
        """ Turn this packet into its own reply, in place:

            * the reply option is cleared, otherwise replies would request
              replies forever;
            * the type becomes :attr:`PacketType.RESPONSE`;
            * the payload and status become *data* and *status*;
            * the command is replaced if a new *command* is given;
            * origin and target are swapped.

            The same instance is returned. Callers that still need the
            original request must :func:`clone` it before replying.
        """

        self.require_reply(False)
        self.options.type = PacketType.RESPONSE
        self.payload = data
        self.status = status

        self.origin, self.target = self.target, self.origin

        if command is not None:
            self.command = command

        return self


    def request_ack(self, flag=True):
        self.options.requestack = flag is True
        return self


    def requests_ack(self):
        """ Return True if an ACK is required for this packet upon receipt.
            Note that this reflects the reply option, not requestack.
        """

        return self.options.reply


    def require_reply(self, flag=True):
        self.options.reply = flag is True
        return self


    def requires_reply(self):
        return self.options.reply


    def no_reconnect_after(self, flag=True):
        """ Ask the transport not to reconnect once this packet has been
            processed.
        """

        self.options.donotreconnect = flag is True
        return self


    def doesnt_reconnect_after(self):
        return self.options.donotreconnect


    def destroy_after(self, flag=True):
        self.options.destroyafter = flag is True
        return self


    def destroys_after(self):
        return self.options.destroyafter


    def block_ui(self, flag=True):
        """ Set whether the UI should be blocked while this packet is in
            transit.
        """

        self.options.blockui = flag is True
        return self


    def blocks_ui(self):
        return self.options.blockui


    def set_layer(self, layer):
        self.options.layer = layer
        return self


    @property
    def layer(self):
        return self.options.layer


    def is_request(self):
        return self.options.type == PacketType.REQUEST


    def is_response(self):
        return self.options.type == PacketType.RESPONSE


    # State machine.

    def to_state(self, newstate):
        """ Move this packet to *newstate*; see
            :func:`linkpacket.state.CommState.to_state`. Returns the
            (sending, completed, failed) events the queue manager should
            propagate.
        """

        return self.commstate.to_state(newstate)


    def can_be_sent(self):
        return self.commstate.can_be_sent()


    def can_be_removed(self):
        return self.commstate.can_be_removed()


    def is_timed_out(self):
        return self.commstate.is_timed_out()


    def is_active(self):
        return self.commstate.is_active()


    def should_block_ui(self):
        """ Return True if the UI should be blocked right now.
        """

        return self.options.blockui is True and self.commstate.is_active()


    def is_suspended(self):
        return self.commstate.suspended is True


    def suspend(self, flag=True):
        """ Mark this packet as suspended, or not. This is advisory: the
            send state is not affected, the queue manager decides what a
            suspended packet means for scheduling.
        """

        self.commstate.suspended = flag is True
        return self


    # Housekeeping.

    def add_state(self):
        """ Push a snapshot of the current command, addressing, payload,
            type and session onto the history stack.
        """

        snapshot = dict()
        snapshot['command'] = self.command
        snapshot['target'] = self.target
        snapshot['origin'] = self.origin
        snapshot['payload'] = copymodule.deepcopy(self.payload)
        snapshot['type'] = self.options.type.value
        snapshot['sessionid'] = self.sessionid

        self.states.append(snapshot)
        return self


    def link(self, link):
        """ Attach the live transport handle (a connection, a websocket,
            a reply callback...) this packet came from or goes out on.
        """

        self.commstate.responselink = link
        return self


    def unlink(self):
        """ Drop the transport handle and the history stack, so that both
            can be collected.
        """

        self.commstate.responselink = None
        self.states = list()
        return self


    def copy(self, use_long_keys=False):
        """ Return a plain dictionary holding the wire-visible fields of
            this packet, keyed with the short names unless *use_long_keys*
            is True. The payload is deep-copied; the history stack and the
            transport bookkeeping are left out.
        """

        copied = dict()

        for field in MainField:
            if field == MainField.OPTIONS:
                value = self.options.to_dict(use_long_keys)
            elif field == MainField.PAYLOAD:
                value = copymodule.deepcopy(self.payload)
            else:
                value = getattr(self, field.long)

            copied[field.key(use_long_keys)] = value

        return copied


    def clone(self, copy_response_link=True, copy_comm_state=False, copy_states=False):
        """ Return a new :class:`Packet` built from :func:`copy`. By default
            the clone shares the transport handle but starts with fresh
            bookkeeping and an empty history, which is what a retry or a
            reply envelope wants.

            :param copy_response_link: share this packet's transport handle.
            :param copy_comm_state: copy this packet's bookkeeping.
            :param copy_states: deep-copy this packet's history stack.
        """

        cloned = Packet(self.copy(True), config=self.config)

        if copy_comm_state:
            cloned.commstate = self.commstate.copy()

        if copy_response_link:
            cloned.commstate.responselink = self.commstate.responselink

        if copy_states:
            cloned.states = copymodule.deepcopy(self.states)

        return cloned


    def clone_for_send(self):
        """ Return this packet serialized for the wire, using the short key
            names and the configured encoder.
        """

        return self.config.encode(self.copy())


# end of class Packet


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
