"""Strategy base class and host-facing interfaces of the auth subsystem.

This module defines:

- :class:`CredentialStrategy` -- the abstract base class both authentication
  strategies extend. A strategy turns resolved configuration into the
  :class:`httpx.Auth` that decorates outgoing requests.
- :data:`TokenRequester` -- the callable the host bearer-token handler invokes
  to obtain a token response.
- :class:`BearerHandlerFactory` -- the host-supplied constructor for that
  bearer-token handler. Token caching, refresh scheduling, and applying the
  ``Authorization`` header are its job, not hubauth's.

See Also:
    :mod:`hubauth.auth.filter` for the selector that picks a strategy.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Optional, Protocol

import httpx

from hubauth.models import AuthContext, AuthMode

TokenRequester = Callable[[AuthContext], httpx.Response]
"""Performs one token exchange and returns the raw token endpoint response."""


class BearerHandlerFactory(Protocol):
    """Host-provided constructor for the OAuth2 bearer-token handler.

    The returned :class:`httpx.Auth` decides when a token is needed, builds
    an :class:`~hubauth.models.AuthContext`, calls *request_token*, interprets
    the response, caches the token, and applies it to outgoing requests.
    """

    def __call__(self, request_token: TokenRequester, token_url: str) -> httpx.Auth: ...


class CredentialStrategy(ABC):
    """Abstract base class for authentication strategies.

    Every concrete strategy must provide:

    1. A :attr:`mode` property identifying it.
    2. A :meth:`build_auth` implementation returning the request decorator to
       install on the host's HTTP client.
    """

    @property
    @abstractmethod
    def mode(self) -> AuthMode:
        """Return the :class:`~hubauth.models.AuthMode` this strategy implements."""
        ...

    @abstractmethod
    def build_auth(self, bearer_factory: Optional[BearerHandlerFactory] = None) -> httpx.Auth:
        """Return the :class:`httpx.Auth` that decorates outgoing requests.

        Args:
            bearer_factory: Host bearer-token handler constructor. Strategies
                that do not use bearer tokens ignore it.

        Raises:
            InvalidUsageError: If the strategy needs a bearer handler and none
                was supplied.
        """
        ...

    def validate_config(self) -> list[str]:
        """Check the configuration without failing.

        Returns:
            Human-readable problems. An empty list means the configuration
            is complete.
        """
        return []
