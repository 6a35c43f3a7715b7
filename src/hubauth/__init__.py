"""hubauth -- API-key or OAuth2 authentication for HubSpot API clients.

This package decorates outbound :mod:`httpx` requests to the HubSpot API
gateway with credentials. A single :class:`~hubauth.auth.filter.CredentialFilter`
inspects the configuration once per client and picks one of two strategies:

* **API key** -- every request URL gets a ``hapikey`` query parameter.
* **OAuth2** -- a host-supplied bearer-token handler calls back into
  :class:`~hubauth.plugins.oauth2_auth_code.OAuth2TokenExchanger` whenever it
  needs a fresh token, and users without a grant are redirected to the
  consent page.

Typical usage::

    from hubauth import CredentialFilter, create_resolver

    credentials = CredentialFilter(create_resolver(), callback_uri=CALLBACK)
    with credentials.create_client(bearer_factory=my_bearer_handler) as client:
        client.get("https://api.hubapi.com/crm/v3/objects/contacts")

Modules:
    app: Typer application and CLI entry point.
    models: Shared value types (auth mode, property names, auth context).
    config: XDG paths, variable stores, and the layered config resolver.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

from hubauth.auth.filter import CredentialFilter
from hubauth.config import ConfigResolver, create_resolver

__version__ = "0.1.0"

__all__ = ["ConfigResolver", "CredentialFilter", "create_resolver"]
