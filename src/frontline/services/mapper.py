"""RequestMapper: translates external identifiers to request names and back.

The default mapping is the identity. Applications swap in their own mapper
through the ``request_mapper`` configuration key; a subclass typically
overrides :meth:`uri_to_request` and defers to ``super()`` for the rest.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

DEFAULT_REQUEST = "default"
NOT_FOUND_REQUEST = "404"
REQUEST_PARAM = "ff"


class RequestMapper:
    """Identity mapper with a query-string URL builder."""

    def __init__(
        self,
        loggers: Any = None,
        caches: Any = None,
        datasources: Any = None,
        *,
        base_url: str = "/",
    ) -> None:
        self.loggers = loggers
        self.caches = caches
        self.datasources = datasources
        self._base_url = base_url

    def uri_to_request(self, identifier: str) -> str:
        """Map an external identifier to a request name."""
        identifier = identifier.strip() if identifier else ""
        return identifier or DEFAULT_REQUEST

    def request_to_uri(
        self,
        request: str = DEFAULT_REQUEST,
        params: Mapping[str, Any] | None = None,
        fragment: str | None = None,
    ) -> str:
        """Build a URL that will reach *request*.

        >>> RequestMapper().request_to_uri("login", {"next": "home"})
        '/?ff=login&next=home'
        """
        query: dict[str, Any] = {}
        if request != DEFAULT_REQUEST:
            query[REQUEST_PARAM] = request
        query.update(params or {})
        uri = self.base_url()
        if query:
            uri += "?" + urlencode(query)
        if fragment:
            uri += "#" + fragment
        return uri

    def base_url(self) -> str:
        return self._base_url
