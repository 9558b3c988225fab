"""
Stream keys are URL-safe base64 (no padding) of a small JSON object:

    {"directUrl": "https://example.com/stream.m3u8", "referer": "https://example.com"}

Whoever holds a well-formed key can point the proxy at any URL; keys are
neither signed nor expiring.
"""
import argparse
import base64
import binascii
import json
from collections import namedtuple
from urllib.parse import urlparse

from api.errors import InvalidStreamKey

StreamDescriptor = namedtuple('StreamDescriptor', ['direct_url', 'referer'])


def encode_stream_key(direct_url, referer=''):
    payload = json.dumps({'directUrl': direct_url, 'referer': referer})
    return base64.urlsafe_b64encode(payload.encode('utf-8')).decode('ascii').rstrip('=')


def _b64url_decode(text):
    padded = text + '=' * (-len(text) % 4)
    # validate=True so stray characters fail instead of being dropped
    return base64.b64decode(padded, altchars=b'-_', validate=True)


def decode_stream_key(raw_key):
    """Turn a raw path segment into a StreamDescriptor, or raise InvalidStreamKey."""
    if not raw_key:
        raise InvalidStreamKey('stream_key is required')

    try:
        data = _b64url_decode(raw_key)
    except (binascii.Error, ValueError) as e:
        raise InvalidStreamKey('invalid stream_key', f'not base64url: {e}') from e

    try:
        obj = json.loads(data.decode('utf-8'))
    except UnicodeDecodeError as e:
        raise InvalidStreamKey('invalid stream_key', 'not utf-8') from e
    except ValueError as e:
        raise InvalidStreamKey('invalid stream_key', f'not json: {e}') from e

    if not isinstance(obj, dict):
        raise InvalidStreamKey('invalid stream_key', 'not a json object')

    direct_url = obj.get('directUrl')
    referer = obj.get('referer')
    if not isinstance(direct_url, str) or not isinstance(referer, str):
        raise InvalidStreamKey('invalid stream_key', 'directUrl and referer must be strings')

    try:
        parsed = urlparse(direct_url)
    except ValueError as e:
        raise InvalidStreamKey('invalid stream_key', f'bad directUrl: {e}') from e
    if not parsed.scheme or not parsed.netloc:
        raise InvalidStreamKey('invalid stream_key', 'directUrl is not an absolute url')

    return StreamDescriptor(direct_url, referer)


def main(argv=None):
    parser = argparse.ArgumentParser(description='Build a /stream/ key for the proxy.')
    parser.add_argument('direct_url', help='URL of the stream to fetch upstream')
    parser.add_argument('referer', nargs='?', default='', help='Referer to send upstream')
    args = parser.parse_args(argv)
    print(encode_stream_key(args.direct_url, args.referer))


if __name__ == '__main__':
    main()
