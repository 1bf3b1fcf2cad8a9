from typing import Any, Protocol

import requests


class HTTPSession(Protocol):
    """Subset of :class:`requests.Session` used by the API clients.  The requests module itself also satisfies it"""

    def get(self, url: str, **kwargs: Any) -> requests.Response:
        ...

    def post(self, url: str, **kwargs: Any) -> requests.Response:
        ...
