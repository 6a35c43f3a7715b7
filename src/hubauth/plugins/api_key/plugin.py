"""API key strategy -- appends the static key to every request URL.

This module provides :class:`ApiKeyAuth`, an :class:`httpx.Auth` that sets
the ``hapikey`` query parameter on each outgoing request, and
:class:`ApiKeyStrategy`, the :class:`~hubauth.auth.base.CredentialStrategy`
the selector installs when ``Auth.apikey`` is configured.

See Also:
    :class:`hubauth.auth.base.CredentialStrategy` for the base interface.
"""

from __future__ import annotations

from typing import Generator, Optional, Union
from urllib.parse import quote

import httpx

from hubauth.auth.base import BearerHandlerFactory, CredentialStrategy
from hubauth.models import API_KEY_PARAM, AuthMode


def decorate_url(url: Union[httpx.URL, str], api_key: str) -> httpx.URL:
    """Return *url* with the ``hapikey`` query parameter set to *api_key*.

    The path and the rest of the query are kept byte for byte, so
    encodings such as ``%20`` and valueless flags survive. Any existing
    ``hapikey`` pair is dropped and the key is appended, so the result
    always carries exactly one.

    Raises:
        httpx.InvalidURL: If *url* cannot be parsed.
    """
    parsed = httpx.URL(url)
    name = API_KEY_PARAM.encode("ascii")
    pairs = [
        pair for pair in parsed.query.split(b"&") if pair and pair.split(b"=", 1)[0] != name
    ]
    pairs.append(name + b"=" + quote(api_key, safe="").encode("ascii"))
    return parsed.copy_with(query=b"&".join(pairs))


class ApiKeyAuth(httpx.Auth):
    """Decorate every request with the gateway API key.

    Nothing is read from the response, so one instance can be shared by
    concurrent requests.
    """

    def __init__(self, api_key: str) -> None:
        self._api_key = api_key

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.url = decorate_url(request.url, self._api_key)
        yield request


class ApiKeyStrategy(CredentialStrategy):
    """Authenticate with a static API key passed as ``hapikey``."""

    def __init__(self, api_key: str) -> None:
        self._api_key = api_key

    @property
    def mode(self) -> AuthMode:
        return AuthMode.API_KEY

    def build_auth(self, bearer_factory: Optional[BearerHandlerFactory] = None) -> httpx.Auth:
        return ApiKeyAuth(self._api_key)

    def decorate(self, url: Union[httpx.URL, str]) -> httpx.URL:
        """Apply the key to a single URL."""
        return decorate_url(url, self._api_key)
