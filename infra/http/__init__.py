from infra.http.client import get_text, post_json
from infra.http.errors import HttpError, HttpResponseError, ResponseTooLargeError

__all__ = [
    "get_text",
    "post_json",
    "HttpError",
    "HttpResponseError",
    "ResponseTooLargeError",
]
