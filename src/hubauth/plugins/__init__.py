"""Built-in credential strategies.

Each sub-package implements one :class:`~hubauth.auth.base.CredentialStrategy`:

* :mod:`hubauth.plugins.api_key` -- static ``hapikey`` query parameter.
* :mod:`hubauth.plugins.oauth2_auth_code` -- OAuth2 authorization-code and
  refresh-token exchange for the host's bearer-token handler.
"""
