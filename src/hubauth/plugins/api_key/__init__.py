"""API key strategy.

Implements the ``api_key`` mode, which injects the static gateway key into
every outgoing request URL as the ``hapikey`` query parameter.

See Also:
    :class:`~hubauth.plugins.api_key.plugin.ApiKeyStrategy`
    :mod:`hubauth.auth.base` for the strategy interface contract.
"""

from hubauth.plugins.api_key.plugin import ApiKeyAuth, ApiKeyStrategy, decorate_url

__all__ = ["ApiKeyAuth", "ApiKeyStrategy", "decorate_url"]
