import pytest

import linkpacket


class Clock:
    """ A stand-in for :func:`linkpacket.state.now` that only moves when
        told to.
    """

    def __init__(self, start):
        self.current = start

    def __call__(self):
        return self.current

    def advance(self, seconds):
        self.current += round(seconds * 1000)


@pytest.fixture
def clock(monkeypatch):

    clock = Clock(1700000000000)
    monkeypatch.setattr(linkpacket.state, 'now', clock)
    yield clock


@pytest.fixture
def configuration():
    """ A fresh configuration, so that tests tinkering with the defaults
        never leak into one another.
    """

    return linkpacket.Configuration()


@pytest.fixture
def request_data():

    data = dict()
    data['command'] = 'test'
    data['origin'] = 'sys'
    data['payload'] = {'one': 1, 'two': True}
    data['options'] = {'reply': True, 'blockui': True, 'type': 'RQ'}
    return data

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
