''' Wrapper module to select the most performant available library to handle
    the equivalent of :func:`json.loads` and :func:`json.dumps` for packets
    going on the wire. msgspec is always installed; orjson (the 'orjson'
    extra) and the standard library only come into play without it.

    On top of the selection, two things are specific to packets:
    :data:`DecodeError` names the exceptions the selected backend raises for
    data it cannot parse, so that :func:`linkpacket.config.json_decode` can
    report them all as malformed wire data, and :data:`backend` names the
    module in use.
'''

# The business about conditionally importing the libraries is intended to
# avoid importing less efficient libraries if they are not available. With
# the right build process this could be determined at build time, instead
# of at run time.

msgspec = None
orjson = None
json = None

try:
    import msgspec
except ImportError:
    pass

if msgspec is None:
    try:
        import orjson
    except ImportError:
        pass

if msgspec is None and orjson is None:
    import json


# The msgspec 'encode' operation returns bytes, as does orjson.dumps. To
# maintain alignment all 'dumps' methods need to do so as well.

def json_dumps(*args, **kwargs):
    return json.dumps(*args, **kwargs).encode()

if msgspec is not None:
    encoder = msgspec.json.Encoder()
    decoder = msgspec.json.Decoder()
    dumps = encoder.encode
    loads = decoder.decode
    DecodeError = (msgspec.DecodeError, TypeError, ValueError)
elif orjson is not None:
    dumps = orjson.dumps
    loads = orjson.loads
    DecodeError = (orjson.JSONDecodeError, TypeError)
else:
    dumps = json_dumps
    loads = json.loads
    DecodeError = (json.JSONDecodeError, TypeError, UnicodeDecodeError)

backend = (msgspec or orjson or json).__name__

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
