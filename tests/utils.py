from typing import Any, Callable

import requests

Handler = Callable[[str, dict[str, Any]], "FakeResponse | Exception"]


def uint_max(bits: int) -> int:
    return 2**bits - 1


class FakeResponse:
    """Stand-in for :class:`requests.Response` with a canned JSON body"""

    def __init__(self, payload: Any = None, status_code: int = 200, reason: str = "OK", text: str | None = None):
        self._payload = payload
        self.status_code = status_code
        self.reason = reason
        self.text = text if text is not None else str(payload)

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error: {self.reason}", response=self)


class FakeSession:
    """
    Records requests, and answers them with a handler.  The handler receives the url & request kwargs, and
    returns a :class:`FakeResponse` or an exception to raise.
    """

    def __init__(self, handler: Handler):
        self.handler = handler
        self.requests: list[tuple[str, str, dict[str, Any]]] = []

    def _respond(self, method: str, url: str, kwargs: dict[str, Any]) -> FakeResponse:
        self.requests.append((method, url, kwargs))
        response = self.handler(url, kwargs)
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._respond("GET", url, kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._respond("POST", url, kwargs)


def sequence_handler(*responses: FakeResponse | Exception) -> Handler:
    """Answers requests with responses in order, repeating the last response once exhausted"""
    queue = list(responses)

    def _handler(url: str, kwargs: dict[str, Any]) -> FakeResponse | Exception:
        return queue.pop(0) if len(queue) > 1 else queue[0]

    return _handler
