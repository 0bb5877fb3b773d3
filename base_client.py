from typing import Any, Callable, Optional
from urllib.parse import quote

import httpx

from api_helpers import make_request
from polling import await_until
from specs import ApiSpecifications, init_specs


class BaseApiClient:
    """
    Shared plumbing for the /pet, /user and /store clients.

    Every public call is one of three shapes built on the same transport call:
      raw        -> _raw()          one exchange, no assertions
      expect-ok  -> _expect_ok()    one exchange + 200/JSON response spec
      awaited    -> _await(...)     raw exchange polled until a predicate holds
    The client keeps no entity state; only the specs and the httpx.Client.
    """

    def __init__(self, http_client: httpx.Client, specs: Optional[ApiSpecifications] = None):
        self.http = http_client
        self.specs = specs or init_specs()

    def _raw(self, method: str, url: str, params=None, json=None) -> httpx.Response:
        return make_request(self.http, method, url, params=params, json=json)

    def _expect_ok(self, method: str, url: str, params=None, json=None) -> httpx.Response:
        return self.specs.response_200.verify(self._raw(method, url, params=params, json=json))

    def _await(
        self,
        action: Callable[[], httpx.Response],
        predicate: Callable[[httpx.Response], bool],
        *,
        timeout: float,
        interval: float,
        description: str,
    ) -> httpx.Response:
        return await_until(action, predicate, timeout=timeout, interval=interval, description=description)


def path_segment(key: Any) -> str:
    """Percent-encodes a key (username, id) so it always fills exactly one path segment."""
    return quote(str(key), safe="")


def payload(entity: Any) -> Any:
    if isinstance(entity, (list, tuple)):
        return [payload(e) for e in entity]
    return entity.to_dict() if hasattr(entity, "to_dict") else entity
