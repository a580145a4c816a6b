import pytest

import linkpacket
from linkpacket import Packet, PacketType


def test_scenario(request_data):

    packet = Packet(request_data)
    assert packet.payload['two'] is True

    packet.reply({'one': 2, 'two': None})
    assert packet.payload['one'] == 2
    assert packet.payload['two'] is None
    assert packet.options.type == 'RP'
    assert packet.options.type is PacketType.RESPONSE


def test_reply():

    packet = Packet({'command': 'GET', 'origin': 'client', 'target': 'server'})
    packet.require_reply()

    result = packet.reply({'value': 44})
    assert result is packet
    assert packet.is_response()
    assert not packet.is_request()
    assert packet.requires_reply() == False
    assert packet.status == 'OK'
    assert packet.command == 'GET'
    assert packet.origin == 'server'
    assert packet.target == 'client'

    packet.reply(None, 'ERROR', 'GET-FAILED')
    assert packet.status == 'ERROR'
    assert packet.command == 'GET-FAILED'
    assert packet.payload is None
    assert packet.origin == 'client'
    assert packet.target == 'server'


def test_reply_without_addressing():

    packet = Packet({'command': 'x', 'origin': 'only'})
    packet.reply()

    assert packet.origin is None
    assert packet.target == 'only'
    assert packet.payload is None
    assert packet.status == 'OK'


def test_ack():

    packet = Packet({'command': 'SET', 'origin': 'a', 'target': 'b', 'payload': 12})
    packet.require_reply()

    result = packet.ack()
    assert result is packet
    assert packet.command == 'ACK'
    assert packet.status == 'OK'
    assert packet.payload is None
    assert packet.is_response()
    assert packet.requires_reply() == False
    assert packet.origin == 'b'
    assert packet.target == 'a'


def test_request_ack():

    packet = Packet()
    assert packet.request_ack(False) is packet
    assert packet.options.requestack == False

    packet.request_ack()
    assert packet.options.requestack == True

    # Anything but True is False.

    packet.request_ack(1)
    assert packet.options.requestack == False


def test_requests_ack_reads_reply():

    packet = Packet()
    packet.request_ack(True)
    packet.require_reply(False)
    assert packet.requests_ack() == False

    packet.request_ack(False)
    packet.require_reply(True)
    assert packet.requests_ack() == True


def test_flags():

    packet = Packet()

    assert packet.require_reply() is packet
    assert packet.requires_reply() == True
    packet.require_reply('yes')
    assert packet.requires_reply() == False

    assert packet.doesnt_reconnect_after() == False
    assert packet.no_reconnect_after() is packet
    assert packet.doesnt_reconnect_after() == True
    packet.no_reconnect_after(False)
    assert packet.doesnt_reconnect_after() == False

    assert packet.blocks_ui() == True
    assert packet.block_ui(False) is packet
    assert packet.blocks_ui() == False
    packet.block_ui()
    assert packet.blocks_ui() == True

    assert packet.destroys_after() == False
    assert packet.destroy_after() is packet
    assert packet.destroys_after() == True

    assert packet.layer is None
    assert packet.set_layer('websocket') is packet
    assert packet.layer == 'websocket'
    assert packet.options.layer == 'websocket'


def test_type_assignment():

    packet = Packet({'command': 'x'})

    packet.options.type = 'RP'
    assert packet.options.type is PacketType.RESPONSE
    assert packet.is_response()
    assert packet.copy()['OP']['TY'] == 'RP'

    with pytest.raises(ValueError):
        packet.options.type = 'XX'

    assert packet.is_response()


def test_state_machine(clock):

    packet = Packet({'command': 'x'})
    packet.commstate.timeout = 2

    assert packet.can_be_sent()
    assert not packet.should_block_ui()

    events = packet.to_state('sending')
    assert events == (True, None, None)
    assert packet.should_block_ui()
    assert packet.is_active()
    assert not packet.is_timed_out()

    clock.advance(2.5)
    assert packet.is_timed_out()

    events = packet.to_state('failed')
    assert events == (False, None, True)
    assert not packet.is_active()
    assert not packet.should_block_ui()
    assert packet.can_be_removed()


def test_should_block_ui_honors_option(clock):

    packet = Packet({'command': 'x'}).block_ui(False)
    packet.to_state('replywait')

    assert packet.is_active()
    assert not packet.should_block_ui()


def test_retry_through_packet(clock):

    packet = Packet({'command': 'x'})
    packet.commstate.retries = 2
    packet.to_state('sending')

    events = packet.to_state('failed')
    assert events.sending == False
    assert events.failed is None
    assert packet.commstate.retries == 1
    assert packet.commstate.sendstate == 'queue'


def test_suspend():

    packet = Packet()
    assert not packet.is_suspended()

    assert packet.suspend() is packet
    assert packet.is_suspended()
    assert packet.commstate.sendstate == 'queue'

    packet.suspend(False)
    assert not packet.is_suspended()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
