from flask import Flask, request, Response, abort, jsonify
import logging

from api import config
from api.errors import InvalidStreamKey, UpstreamFetchError
from api.relay import fetch_upstream, project_headers, relay_body
from api.stream_key import decode_stream_key

logging.basicConfig(level=config.LOG_LEVEL, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
log = logging.getLogger('stream_proxy')

app = Flask(__name__)

PREFLIGHT_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'GET, OPTIONS',
    'Access-Control-Allow-Headers': 'Range',
}


def _without_content_type(resp):
    # Flask adds text/html by default; only send what upstream actually sent
    del resp.headers['Content-Type']
    return resp


@app.route('/stream', methods=['GET', 'OPTIONS'])
def bare_stream():
    # without this rule werkzeug redirects /stream to /stream/
    abort(404)


@app.route('/stream/', defaults={'stream_key': ''}, methods=['GET', 'OPTIONS'])
@app.route('/stream/<stream_key>', methods=['GET', 'OPTIONS'])
def stream(stream_key):
    if request.method == 'OPTIONS':
        return preflight()

    descriptor = decode_stream_key(stream_key)
    upstream = fetch_upstream(descriptor, request.headers.get('Range'), timeout=config.UPSTREAM_TIMEOUT)

    headers = project_headers(upstream.headers)
    resp = Response(relay_body(upstream, config.CHUNK_SIZE), status=upstream.status_code, headers=headers)
    if 'content-type' not in headers:
        _without_content_type(resp)
    # covers a client that disconnects before the first chunk is pulled
    resp.call_on_close(upstream.close)
    return resp


def preflight():
    return _without_content_type(Response(status=200, headers=PREFLIGHT_HEADERS))


@app.errorhandler(InvalidStreamKey)
def invalid_stream_key(e):
    log.warning('Rejected stream_key (%d chars): %s', len((request.view_args or {}).get('stream_key') or ''), e.reason)
    return Response(e.message, status=e.status_code, mimetype='text/plain')


@app.errorhandler(UpstreamFetchError)
def stream_failed(e):
    return jsonify(error='stream failed', message=e.message), e.status_code


@app.errorhandler(404)
@app.errorhandler(405)
def not_found(e):
    return Response('Not Found', status=404, mimetype='text/plain')


if __name__ == '__main__':
    if config.ON_VERCEL:
        pass  # Vercel handles running
    else:
        app.run(host=config.HOST, port=config.PORT)  # Local dev
