"""CLI sub-commands for hubauth.

* :mod:`hubauth.commands.auth` -- ``mode``, ``authorize-url``, ``decorate``,
  ``exchange``.
* :mod:`hubauth.commands.vars` -- ``vars set|get|unset|list``.
"""
