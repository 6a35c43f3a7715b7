"""Auth commands -- inspect the selected strategy and drive one OAuth2 exchange.

Provides the top-level ``mode``, ``authorize-url``, ``decorate`` and
``exchange`` commands. Every command builds a fresh
:class:`~hubauth.auth.filter.CredentialFilter` from the ``--set`` overrides
and the process-wide variable store, exactly as a host client would.

Typical OAuth2 workflow::

    hubauth authorize-url              # open the printed URL, grant access
    hubauth exchange --code <code>     # trade the code for tokens
    hubauth exchange --refresh-token <token>
"""

from __future__ import annotations

from typing import Optional

import httpx
import typer

from hubauth.auth.filter import CredentialFilter
from hubauth.config import create_resolver
from hubauth.exceptions import ConsentRequiredError, HubauthError, InvalidUsageError
from hubauth.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INVALID_USAGE
from hubauth.models import AuthContext
from hubauth.output import debug, emit, emit_body, error, info, suggest, warning
from hubauth.plugins.api_key import ApiKeyStrategy
from hubauth.plugins.oauth2_auth_code import raise_for_exchange


def parse_overrides(pairs: list[str]) -> dict[str, str]:
    """Turn ``KEY=VALUE`` strings into an override mapping.

    Raises:
        InvalidUsageError: If an entry has no ``=`` or an empty key.
    """
    overrides: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise InvalidUsageError(f"Invalid override '{pair}': expected KEY=VALUE")
        overrides[key.strip()] = value
    return overrides


def build_filter(ctx: typer.Context) -> CredentialFilter:
    """Create the credential filter for the current invocation."""
    obj = ctx.obj or {}
    resolver = create_resolver(parse_overrides(obj.get("overrides", [])))
    credentials = CredentialFilter(resolver, callback_uri=obj.get("callback_uri"))
    debug(f"Selected auth mode: {credentials.mode.value}")
    return credentials


def _fail(exc: HubauthError) -> typer.Exit:
    error(str(exc))
    if isinstance(exc, ConsentRequiredError):
        suggest(f"Grant access at: {exc.redirect_uri}")
    return typer.Exit(code=exc.exit_code)


def mode_command(ctx: typer.Context) -> None:
    """Print the authentication strategy the configuration selects."""
    try:
        credentials = build_filter(ctx)
    except HubauthError as exc:
        raise _fail(exc) from None

    emit(credentials.mode.value)
    for problem in credentials.validate_config():
        warning(problem)


def authorize_url_command(ctx: typer.Context) -> None:
    """Print the consent URI the end user must visit."""
    try:
        uri = build_filter(ctx).authorization_uri()
    except HubauthError as exc:
        raise _fail(exc) from None
    emit(str(uri))


def decorate_command(
    ctx: typer.Context,
    url: str = typer.Argument(help="Request URL to decorate."),
) -> None:
    """Print URL with the API key applied (API-key mode only)."""
    try:
        credentials = build_filter(ctx)
        strategy = credentials.strategy
        if not isinstance(strategy, ApiKeyStrategy):
            raise InvalidUsageError("No API key configured; requests use OAuth2 bearer tokens")
        decorated = strategy.decorate(url)
    except HubauthError as exc:
        raise _fail(exc) from None
    except httpx.InvalidURL as exc:
        error(f"Invalid URL '{url}': {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None
    emit(str(decorated))


def exchange_command(
    ctx: typer.Context,
    code: Optional[str] = typer.Option(
        None, "--code", help="Authorization code from the consent redirect."
    ),
    refresh_token: Optional[str] = typer.Option(
        None, "--refresh-token", help="Refresh token from an earlier exchange."
    ),
    timeout: float = typer.Option(30.0, "--timeout", help="Request timeout in seconds."),
) -> None:
    """Run one token exchange and print the raw token endpoint response.

    Without --code or --refresh-token the command fails with the consent URI.
    """
    try:
        credentials = build_filter(ctx)
        strategy = credentials.oauth2_strategy()
        with httpx.Client(timeout=timeout) as client:
            auth_ctx = AuthContext(
                token_url=strategy.token_url,
                client=client,
                auth_code=code,
                refresh_token=refresh_token,
            )
            response = strategy.exchanger.request_token(auth_ctx)
    except HubauthError as exc:
        raise _fail(exc) from None
    except httpx.HTTPError as exc:
        error(f"Token request failed: {exc}")
        raise typer.Exit(code=EXIT_GENERIC_FAILURE) from None

    info(f"HTTP {response.status_code} {response.reason_phrase or ''}".rstrip())
    if response.content:
        try:
            emit_body(response.json())
        except ValueError:
            emit_body(response.text)

    try:
        raise_for_exchange(response)
    except HubauthError as exc:
        raise _fail(exc) from None
