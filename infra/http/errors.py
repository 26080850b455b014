class HttpError(Exception):
    pass


class HttpResponseError(HttpError):
    def __init__(self, status, body):
        super().__init__("HTTP {}: {}".format(status, body))
        self.status = status
        self.body = body


class ResponseTooLargeError(HttpError):
    def __init__(self, limit):
        super().__init__("response exceeds {} bytes".format(limit))
        self.limit = limit
