"""Credential selection for hubauth.

The main entry points are:

- :class:`CredentialStrategy` -- abstract base class of the two strategies.
- :class:`CredentialFilter` -- picks a strategy from configuration once and
  produces the :class:`httpx.Auth` to install on the host's client.
- :class:`BearerHandlerFactory` / :data:`TokenRequester` -- the host
  interfaces the OAuth2 strategy plugs into.

Typical usage::

    from hubauth.auth import CredentialFilter

    credentials = CredentialFilter(resolver, callback_uri=CALLBACK)
    client = httpx.Client(auth=credentials.build_auth(bearer_factory))
"""

from hubauth.auth.base import BearerHandlerFactory, CredentialStrategy, TokenRequester
from hubauth.auth.filter import CredentialFilter, select_strategy

__all__ = [
    "BearerHandlerFactory",
    "CredentialFilter",
    "CredentialStrategy",
    "TokenRequester",
    "select_strategy",
]
