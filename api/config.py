import os


def _optional_float(name):
    value = os.environ.get(name, '').strip()
    return float(value) if value else None


# Vercel sets this in its runtime; locally we start the dev server ourselves
ON_VERCEL = bool(os.environ.get('VERCEL'))

HOST = os.environ.get('HOST', '0.0.0.0')
PORT = int(os.environ.get('PORT', 4123))

CHUNK_SIZE = int(os.environ.get('CHUNK_SIZE', 65536))
UPSTREAM_TIMEOUT = _optional_float('UPSTREAM_TIMEOUT')  # None = wait as long as upstream does

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
