"""OAuth2 authorization-code / refresh-token strategy.

Builds the consent URI and the token-exchange request that the host's
bearer-token handler drives.

See Also:
    :class:`~hubauth.plugins.oauth2_auth_code.plugin.OAuth2Strategy`
"""

from hubauth.plugins.oauth2_auth_code.plugin import (
    CONSENT_MESSAGE,
    OAuth2Strategy,
    OAuth2TokenExchanger,
    build_authorization_uri,
    build_token_form,
    raise_for_exchange,
    token_endpoint,
)

__all__ = [
    "CONSENT_MESSAGE",
    "OAuth2Strategy",
    "OAuth2TokenExchanger",
    "build_authorization_uri",
    "build_token_form",
    "raise_for_exchange",
    "token_endpoint",
]
