"""Shared value types for hubauth.

Every other module imports its data shapes from here:

* :class:`AuthMode` -- the strategy chosen by the credential selector.
* :class:`Property` -- configuration property keys and the variable namespace.
* :class:`VariableFile` -- Pydantic model of the persisted variable file.
* :class:`AuthContext` -- the per-attempt input to the token exchanger.
* :data:`TokenRequestForm` -- the form posted to the token endpoint.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    import httpx


VARIABLE_NAMESPACE = "Hubspot"
"""Prefix under which properties are looked up in the process-wide variable store."""

DEFAULT_AUTHORIZE_BASE_URI = "https://app.hubspot.com/oauth"
"""Base of the user-facing consent endpoint (``/authorize`` is appended)."""

DEFAULT_TOKEN_BASE_URI = "https://api.hubapi.com/oauth/v1"
"""Base of the token endpoint (``/token`` is appended)."""

API_KEY_PARAM = "hapikey"
"""Query parameter the gateway reads the static API key from."""


class AuthMode(str, enum.Enum):
    """Authentication strategy selected once per client."""

    API_KEY = "api_key"
    OAUTH2 = "oauth2"


class Property:
    """Configuration property keys.

    Each key can be overridden per client; otherwise it is looked up in the
    variable store as ``Hubspot.<key>`` (see :func:`variable_name`).
    """

    API_KEY = "Auth.apikey"
    CLIENT_ID = "Auth.clientId"
    CLIENT_SECRET = "Auth.clientSecret"
    SCOPE = "Auth.scope"
    AUTH_BASE_URI = "Auth.baseUri"

    ALL = (API_KEY, CLIENT_ID, CLIENT_SECRET, SCOPE, AUTH_BASE_URI)


def variable_name(key: str) -> str:
    """Return the namespaced variable name for a property key."""
    return f"{VARIABLE_NAMESPACE}.{key}"


class VariableFile(BaseModel):
    """On-disk layout of the process-wide variable store.

    Persisted as JSON at ``<config_dir>/variables.json`` by
    :class:`~hubauth.config.FileVariableStore`.

    Example::

        VariableFile(variables={"Hubspot.Auth.scope": "contacts"})
    """

    variables: dict[str, str] = Field(
        default_factory=dict,
        description="Namespaced variable name -> value",
    )


TokenRequestForm = dict[str, str]
"""Field name -> value pairs posted form-encoded to the token endpoint."""


@dataclass
class AuthContext:
    """Input to a single token-exchange attempt.

    Built by the host's bearer-token handler each time it needs a token and
    discarded once the exchange response has been produced. In a
    well-formed flow at most one of ``auth_code`` and ``refresh_token`` is
    set.

    Attributes:
        token_url: The token endpoint the form is posted to.
        client: The host's HTTP client used to reach ``token_url``. The
            exchange is sent without the client's own ``auth``.
        auth_code: Authorization code returned by the consent redirect.
        refresh_token: Refresh token from an earlier exchange.
    """

    token_url: str
    client: httpx.Client
    auth_code: Optional[str] = None
    refresh_token: Optional[str] = None
