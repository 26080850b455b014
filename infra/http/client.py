import http.client
import json
import socket
import urllib.error
import urllib.request

from infra.http.errors import HttpError, HttpResponseError, ResponseTooLargeError

DEFAULT_MAX_BYTES = 1024 * 1024


def _read_limited(response, max_bytes):
    body = response.read(max_bytes + 1)
    if len(body) > max_bytes:
        raise ResponseTooLargeError(max_bytes)
    return body.decode("utf-8", errors="replace")


def _open(url, timeout, max_bytes, data=None, headers=None):
    try:
        request = urllib.request.Request(url, data=data, headers=headers or {})
        with urllib.request.urlopen(request, timeout=timeout) as response:
            return _read_limited(response, max_bytes)
    except urllib.error.HTTPError as err:
        detail = err.read(4096).decode("utf-8", errors="replace")
        raise HttpResponseError(err.code, detail) from err
    except urllib.error.URLError as err:
        raise HttpError(str(err.reason)) from err
    except (socket.timeout, TimeoutError) as err:
        raise HttpError("request timed out after {}s".format(timeout)) from err
    except OSError as err:
        raise HttpError(str(err)) from err
    except http.client.HTTPException as err:
        raise HttpError("malformed response: {!r}".format(err)) from err
    except ValueError as err:
        raise HttpError("invalid request: {}".format(err)) from err


def post_json(url, payload, headers=None, timeout=60, max_bytes=DEFAULT_MAX_BYTES):
    data = json.dumps(payload).encode("utf-8")
    request_headers = {"Content-Type": "application/json"}
    if headers:
        request_headers.update(headers)
    return _open(url, timeout, max_bytes, data=data, headers=request_headers)


def get_text(url, headers=None, timeout=10, max_bytes=DEFAULT_MAX_BYTES):
    return _open(url, timeout, max_bytes, headers=dict(headers or {}))
