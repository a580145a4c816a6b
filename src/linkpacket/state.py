""" Transport bookkeeping for a packet, including the send-state machine
    driven by whatever queue manager owns the packet. All times are UNIX
    epoch milliseconds; all policy knobs (timeout, replytimeout, retrywait)
    are in seconds.
"""

import collections
import time as timemodule

from .fields import SendState
from . import log

logger = log.get_logger('state')


Events = collections.namedtuple('Events', ('sending', 'completed', 'failed'))
Events.__doc__ = """ The events a queue manager should propagate after a
    state transition. Each field is True or False if the event should be
    emitted with that value, or None if it should not be emitted at all.
"""


def now():
    """ Return the current time in milliseconds.
    """

    return int(timemodule.time() * 1000)


class CommState:
    """ The :class:`CommState` holds everything a transport or queue manager
        needs to know about a packet in transit. None of it goes on the wire.

        :ivar sendstate: The current :class:`SendState`.
        :ivar sendwhen: Earliest time the packet may be sent; 0 for no delay.
        :ivar timesout: Deadline for the current send or reply wait; 0 for none.
        :ivar retrycount: How many times the packet was put back in the queue.
        :ivar timeout: Seconds allowed for sending, 0 for no limit.
        :ivar replytimeout: Seconds allowed for a reply, 0 for no limit.
        :ivar retries: Remaining retries after a failure or timeout.
        :ivar retrywait: Seconds to wait before a retry.
        :ivar lastsent: Time of the most recent transition to sending.
        :ivar responselink: Opaque handle to the live transport connection.
    """

    fields = ('sendstate', 'sendwhen', 'timesout', 'retrycount',
              'timeout', 'replytimeout', 'retries', 'retrywait',
              'lastsent', 'responselink', 'suspended', 'failed',
              'completed', 'aborted', 'replied')

    def __init__(self, **kwargs):

        self.sendstate = SendState.QUEUE
        self.sendwhen = 0
        self.timesout = 0
        self.retrycount = 0

        # Set by the transfer manager.
        self.timeout = 0
        self.replytimeout = 0
        self.retries = 0
        self.retrywait = 0

        self.lastsent = 0
        self.responselink = None

        # Advisory flags.
        self.suspended = False
        self.failed = False
        self.completed = False
        self.aborted = False
        self.replied = False

        for key,value in kwargs.items():
            if key not in self.fields:
                raise TypeError('unexpected CommState field: ' + repr(key))
            setattr(self, key, value)

        self.sendstate = SendState(self.sendstate)


    def __repr__(self):
        return 'CommState(%s)' % (', '.join('%s=%r' % (key, getattr(self, key)) for key in self.fields))


    def copy(self):
        """ Return a new :class:`CommState` with the same values, except
            for the response link, which is never carried over.
        """

        values = self.to_dict()
        values['responselink'] = None
        return CommState(**values)


    def to_dict(self):
        return dict((key, getattr(self, key)) for key in self.fields)


    def to_state(self, newstate):
        """ Move to *newstate*, a :class:`SendState` or its string value,
            applying the deadline and retry bookkeeping attached to that
            transition. Returns an :class:`Events` tuple.
        """

        sending = None
        completed = None
        failed = None

        try:
            newstate = SendState(newstate)
        except ValueError:
            logger.warning("ignoring transition to unknown send state %r", newstate)
            return Events(sending, completed, failed)

        previous = SendState(self.sendstate)
        nt = now()

        if newstate == SendState.FAILED or newstate == SendState.TIMEOUT:
            if previous == SendState.SENDING:
                sending = False

            self.sendwhen = 0
            self.timesout = 0

            if self.retries > 0:
                self.retries -= 1
                self.retrycount += 1
                self.sendwhen = nt + self.retrywait * 1000
                self.sendstate = SendState.QUEUE
                logger.debug("%s after %s, retrying in %s sec, %d retries left",
                        newstate.value, previous.value, self.retrywait, self.retries)
            else:
                self.sendstate = SendState.FAILED
                failed = True
                logger.info("%s after %s, no retries left", newstate.value, previous.value)

        elif newstate == SendState.REPLYWAIT:
            self.sendstate = newstate
            self.sendwhen = 0

            # Without a reply timeout any send deadline stays in force.
            if self.replytimeout > 0:
                self.timesout = nt + self.replytimeout * 1000

        elif newstate == SendState.QUEUE:
            if previous == SendState.SENDING:
                sending = False

            self.sendstate = newstate
            self.sendwhen = 0
            self.timesout = 0

        elif newstate == SendState.SENDING:
            if previous != SendState.SENDING:
                sending = True

            self.sendstate = newstate
            self.sendwhen = 0
            self.timesout = 0
            self.lastsent = nt

            if self.timeout > 0:
                self.timesout = nt + self.timeout * 1000

        elif newstate == SendState.COMPLETED:
            if previous == SendState.SENDING:
                sending = False

            completed = True
            self.sendstate = newstate
            self.sendwhen = 0
            self.timesout = 0

        if newstate != SendState.FAILED and newstate != SendState.TIMEOUT:
            logger.debug("%s -> %s", previous.value, newstate.value)

        return Events(sending, completed, failed)


    def can_be_sent(self):
        """ Return True if the packet is queued and its send delay, if any,
            has passed.
        """

        return self.sendstate == SendState.QUEUE and self.sendwhen < now()


    def can_be_removed(self):
        """ Return True if the packet has completed its trip, one way or the
            other, and can be discarded.
        """

        return self.sendstate in (SendState.FAILED, SendState.COMPLETED)


    def is_active(self):
        return self.sendstate in (SendState.SENDING, SendState.REPLYWAIT)


    def is_timed_out(self):
        """ Return True if the packet is in transit and its deadline has
            passed.
        """

        return self.is_active() and self.timesout > 0 and self.timesout <= now()


# end of class CommState


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
