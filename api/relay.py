import logging

import requests

from api.errors import UpstreamFetchError

log = logging.getLogger('stream_proxy.relay')

# Some origins refuse python-requests' default UA
DEFAULT_USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36'

PASS_THROUGH_HEADERS = (
    'content-type', 'content-length', 'content-range',
    'accept-ranges', 'cache-control', 'last-modified', 'etag', 'content-disposition',
)


def build_upstream_headers(descriptor, range_header=None):
    headers = {
        'Referer': descriptor.referer,
        'User-Agent': DEFAULT_USER_AGENT,
        # keep Content-Length meaningful for the bytes we relay
        'Accept-Encoding': 'identity',
    }
    # forward range header for video seeking
    if range_header:
        headers['Range'] = range_header
    return headers


def fetch_upstream(descriptor, range_header=None, timeout=None):
    """Open a streamed GET to the descriptor's URL.

    HTTP error statuses are returned like any other response; only failures to
    reach or talk to the upstream raise UpstreamFetchError.
    """
    headers = build_upstream_headers(descriptor, range_header)
    try:
        r = requests.get(descriptor.direct_url, headers=headers, stream=True, timeout=timeout)
    except (requests.RequestException, ValueError) as e:
        # ValueError: header values http.client cannot encode, e.g. a non-latin-1 referer
        log.error('Fetching %s failed: %s', descriptor.direct_url, e)
        raise UpstreamFetchError(str(e) or e.__class__.__name__) from e

    log.info('Fetching %s, status: %s', descriptor.direct_url, r.status_code)
    return r


def project_headers(upstream_headers):
    """Allow-listed upstream headers plus the CORS header, nothing else."""
    headers = {}
    for name in PASS_THROUGH_HEADERS:
        value = upstream_headers.get(name)
        if value:
            headers[name] = value

    # requests decodes compressed bodies, so the upstream length would lie
    if upstream_headers.get('content-encoding'):
        headers.pop('content-length', None)

    headers['Access-Control-Allow-Origin'] = '*'
    return headers


def relay_body(upstream, chunk_size):
    try:
        for chunk in upstream.iter_content(chunk_size=chunk_size):
            if chunk:
                yield chunk
    except requests.RequestException:
        # headers are already out; let the server drop the connection
        log.exception('Upstream stream from %s broke mid-transfer', upstream.url)
        raise
    finally:
        upstream.close()
