"""Credential filter -- selects the auth strategy and builds the request decorator.

:class:`CredentialFilter` is what a host wires into its HTTP client. At
construction it reads ``Auth.apikey`` once:

- non-empty -> :class:`~hubauth.plugins.api_key.ApiKeyStrategy`
- empty     -> :class:`~hubauth.plugins.oauth2_auth_code.OAuth2Strategy`

The choice is never re-evaluated per request. Missing OAuth2 properties do
not fail here; they surface on the first token exchange.

Instead of registering itself into the client at runtime, the filter hands
back an :class:`httpx.Auth` (:meth:`CredentialFilter.build_auth`) to pass as
``auth=`` when the client is built, or builds the client itself
(:meth:`CredentialFilter.create_client`).
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from hubauth.auth.base import BearerHandlerFactory, CredentialStrategy
from hubauth.config import ConfigResolver
from hubauth.exceptions import InvalidUsageError
from hubauth.models import AuthMode, Property
from hubauth.plugins.api_key import ApiKeyStrategy
from hubauth.plugins.oauth2_auth_code import OAuth2Strategy

logger = logging.getLogger(__name__)


def select_strategy(
    resolver: ConfigResolver, callback_uri: Optional[str] = None
) -> CredentialStrategy:
    """Choose the strategy for a client.

    An API key takes precedence over OAuth2 client credentials when both
    are configured.

    Args:
        resolver: Configuration resolver for the client.
        callback_uri: The host-registered OAuth2 redirect URI.

    Returns:
        The selected :class:`~hubauth.auth.base.CredentialStrategy`.
    """
    api_key = resolver.read(Property.API_KEY)
    if api_key:
        return ApiKeyStrategy(api_key)
    return OAuth2Strategy(resolver, callback_uri)


class CredentialFilter:
    """Authentication adapter for one HubSpot API client.

    Args:
        resolver: Configuration resolver (per-client overrides first, then
            the process-wide variable store).
        callback_uri: The redirect URI registered with the provider. Only
            needed in OAuth2 mode.

    Example::

        credentials = CredentialFilter(create_resolver({"Auth.apikey": "ABC"}))
        with credentials.create_client() as client:
            client.get("https://api.hubapi.com/crm/v3/objects/contacts")
    """

    def __init__(self, resolver: ConfigResolver, callback_uri: Optional[str] = None) -> None:
        self._strategy = select_strategy(resolver, callback_uri)
        logger.debug("Selected %s authentication", self._strategy.mode.value)

    @property
    def mode(self) -> AuthMode:
        return self._strategy.mode

    @property
    def strategy(self) -> CredentialStrategy:
        return self._strategy

    def build_auth(self, bearer_factory: Optional[BearerHandlerFactory] = None) -> httpx.Auth:
        """Return the request decorator for the selected strategy.

        Args:
            bearer_factory: Host bearer-token handler constructor, required
                in OAuth2 mode and ignored in API-key mode.

        Raises:
            InvalidUsageError: In OAuth2 mode without *bearer_factory*.
        """
        return self._strategy.build_auth(bearer_factory)

    def create_client(
        self,
        bearer_factory: Optional[BearerHandlerFactory] = None,
        **client_kwargs: Any,
    ) -> httpx.Client:
        """Build an :class:`httpx.Client` with the selected decorator installed.

        Args:
            bearer_factory: See :meth:`build_auth`.
            **client_kwargs: Forwarded to :class:`httpx.Client`.
        """
        return httpx.Client(auth=self.build_auth(bearer_factory), **client_kwargs)

    def authorization_uri(self) -> httpx.URL:
        """Return the consent URI.

        Raises:
            InvalidUsageError: In API-key mode.
            MissingConfigurationError: If the client id or scope is not set.
        """
        return self.oauth2_strategy().exchanger.authorization_uri()

    def validate_config(self) -> list[str]:
        """Return configuration problems of the selected strategy."""
        return self._strategy.validate_config()

    def oauth2_strategy(self) -> OAuth2Strategy:
        """Return the OAuth2 strategy.

        Raises:
            InvalidUsageError: In API-key mode.
        """
        if not isinstance(self._strategy, OAuth2Strategy):
            raise InvalidUsageError("Only available in OAuth2 mode (an API key is configured)")
        return self._strategy
