"""OAuth2 authorization-code / refresh-token strategy.

This module builds the two requests the OAuth2 flow needs from hubauth:

1. The **authorization URI** (:func:`build_authorization_uri`) the end user is
   sent to when no grant is available yet.
2. The **token exchange** (:class:`OAuth2TokenExchanger`) that trades an
   authorization code or refresh token for an access token.

Everything around them -- deciding when a token is needed, caching it,
refreshing it, applying it as a bearer header, and showing the consent page
-- belongs to the host. :class:`OAuth2Strategy` hands the exchanger to the
host's bearer-token handler through a
:class:`~hubauth.auth.base.BearerHandlerFactory`.

See Also:
    :class:`hubauth.auth.base.CredentialStrategy` for the base interface.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from hubauth.auth.base import BearerHandlerFactory, CredentialStrategy
from hubauth.config import ConfigResolver
from hubauth.exceptions import (
    ConfigError,
    ConsentRequiredError,
    ExchangeFailedError,
    InvalidUsageError,
)
from hubauth.models import (
    DEFAULT_AUTHORIZE_BASE_URI,
    DEFAULT_TOKEN_BASE_URI,
    AuthContext,
    AuthMode,
    Property,
    TokenRequestForm,
)

logger = logging.getLogger(__name__)

CONSENT_MESSAGE = "missing permission from user to act in his name"


def _join(base: str, segment: str) -> str:
    return f"{base.rstrip('/')}/{segment}"


def _require_callback(callback_uri: Optional[str]) -> str:
    if not callback_uri:
        raise ConfigError("No OAuth2 callback URI registered for this client")
    return callback_uri


def authorize_endpoint(resolver: ConfigResolver) -> str:
    """Return the consent endpoint (``<Auth.baseUri>/authorize``)."""
    return _join(resolver.read(Property.AUTH_BASE_URI, DEFAULT_AUTHORIZE_BASE_URI), "authorize")


def token_endpoint(resolver: ConfigResolver) -> str:
    """Return the token endpoint (``<Auth.baseUri>/token``)."""
    return _join(resolver.read(Property.AUTH_BASE_URI, DEFAULT_TOKEN_BASE_URI), "token")


def build_authorization_uri(resolver: ConfigResolver, callback_uri: str) -> httpx.URL:
    """Build the URI that asks the end user to grant access.

    Pure and idempotent: the same configuration always yields the same
    query parameters.

    Args:
        resolver: Source of ``Auth.clientId``, ``Auth.scope`` and
            ``Auth.baseUri``.
        callback_uri: The redirect URI registered by the host.

    Returns:
        The authorization URI with ``client_id``, ``scope``,
        ``response_type=code``, ``response_mode=query`` and ``redirect_uri``.

    Raises:
        MissingConfigurationError: If the scope is not set.
    """
    params = {
        "client_id": resolver.read(Property.CLIENT_ID, ""),
        "scope": resolver.read_mandatory(Property.SCOPE),
        "response_type": "code",
        "response_mode": "query",
        "redirect_uri": callback_uri,
    }
    return httpx.URL(authorize_endpoint(resolver), params=params)


def build_token_form(
    resolver: ConfigResolver,
    callback_uri: str,
    auth_code: Optional[str] = None,
    refresh_token: Optional[str] = None,
) -> TokenRequestForm:
    """Build the form posted to the token endpoint.

    Exactly one grant is encoded. When both an authorization code and a
    refresh token are given, the code wins: it carries the most recent
    consent of the user.

    Client id and client secret fall back to empty strings when unset;
    :meth:`OAuth2Strategy.validate_config` reports them.

    Args:
        resolver: Source of client id, client secret and scope.
        callback_uri: The redirect URI registered by the host.
        auth_code: Authorization code from the consent redirect.
        refresh_token: Refresh token from an earlier exchange.

    Returns:
        A fresh :data:`~hubauth.models.TokenRequestForm`. ``grant_type`` is
        only present when a code or refresh token was supplied.

    Raises:
        MissingConfigurationError: If the scope is not set.
    """
    form: TokenRequestForm = {
        "client_id": resolver.read(Property.CLIENT_ID, ""),
        "scope": resolver.read_mandatory(Property.SCOPE),
    }
    if auth_code:
        if refresh_token:
            logger.warning(
                "Both authorization code and refresh token supplied; "
                "using the authorization code"
            )
        form["code"] = auth_code
        form["grant_type"] = "authorization_code"
    elif refresh_token:
        form["refresh_token"] = refresh_token
        form["grant_type"] = "refresh_token"
    form["redirect_uri"] = callback_uri
    form["client_secret"] = resolver.read(Property.CLIENT_SECRET, "")
    return form


def raise_for_exchange(response: httpx.Response) -> httpx.Response:
    """Return *response* if the exchange succeeded.

    A helper for bearer-token handlers that want hubauth's error type.

    Raises:
        ExchangeFailedError: If the token endpoint answered with a non-2xx
            status.
    """
    if not response.is_success:
        raise ExchangeFailedError(response)
    return response


class OAuth2TokenExchanger:
    """Trade an authorization code or refresh token for an access token.

    The host's bearer-token handler calls :meth:`request_token` each time it
    needs a token. Every call is an independent attempt: nothing is cached
    or retried here.

    Args:
        resolver: Configuration resolver for the client credentials.
        callback_uri: The redirect URI registered by the host.
    """

    def __init__(self, resolver: ConfigResolver, callback_uri: Optional[str]) -> None:
        self._resolver = resolver
        self._callback_uri = callback_uri

    def authorization_uri(self) -> httpx.URL:
        """Return the consent URI for this client."""
        return build_authorization_uri(self._resolver, _require_callback(self._callback_uri))

    def request_token(self, ctx: AuthContext) -> httpx.Response:
        """Run one token exchange.

        Args:
            ctx: The attempt's credentials and token endpoint.

        Returns:
            The raw token endpoint response. The body is not inspected;
            interpreting it is up to the caller (see
            :func:`raise_for_exchange`).

        Raises:
            ConsentRequiredError: If *ctx* carries neither a code nor a
                refresh token. No request is sent.
            MissingConfigurationError: If a mandatory property is not set.
            httpx.HTTPError: Transport failures are not handled here.
        """
        if not ctx.auth_code and not ctx.refresh_token:
            uri = self.authorization_uri()
            logger.info("No grant available, user consent required")
            raise ConsentRequiredError(str(uri), CONSENT_MESSAGE)

        form = build_token_form(
            self._resolver,
            _require_callback(self._callback_uri),
            auth_code=ctx.auth_code,
            refresh_token=ctx.refresh_token,
        )
        logger.debug("Requesting token (%s) from %s", form["grant_type"], ctx.token_url)
        return ctx.client.post(
            ctx.token_url,
            data=form,
            headers={"Accept": "*/*"},
            auth=None,
        )

    __call__ = request_token


class OAuth2Strategy(CredentialStrategy):
    """Authenticate through the host's OAuth2 bearer-token handler.

    Args:
        resolver: Configuration resolver for the client credentials.
        callback_uri: The redirect URI registered by the host.
    """

    def __init__(self, resolver: ConfigResolver, callback_uri: Optional[str]) -> None:
        self._resolver = resolver
        self._callback_uri = callback_uri
        self.exchanger = OAuth2TokenExchanger(resolver, callback_uri)

    @property
    def mode(self) -> AuthMode:
        return AuthMode.OAUTH2

    @property
    def token_url(self) -> str:
        return token_endpoint(self._resolver)

    def build_auth(self, bearer_factory: Optional[BearerHandlerFactory] = None) -> httpx.Auth:
        if bearer_factory is None:
            raise InvalidUsageError(
                "OAuth2 mode requires a bearer-token handler (no API key configured)"
            )
        return bearer_factory(self.exchanger.request_token, self.token_url)

    def validate_config(self) -> list[str]:
        errors: list[str] = []
        for key in (Property.CLIENT_ID, Property.CLIENT_SECRET, Property.SCOPE):
            if not self._resolver.read(key):
                errors.append(f"OAuth2 mode requires '{key}'")
        if not self._callback_uri:
            errors.append("OAuth2 mode requires a registered callback URI")
        return errors
