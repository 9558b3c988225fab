class StreamProxyError(Exception):
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class InvalidStreamKey(StreamProxyError):
    """The stream key is missing or does not decode to a usable descriptor."""

    status_code = 400

    def __init__(self, message, reason=None):
        super().__init__(message)
        self.reason = reason or message


class UpstreamFetchError(StreamProxyError):
    """The upstream could not be reached or read."""

    status_code = 500
