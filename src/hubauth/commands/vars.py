"""Variable commands -- manage the process-wide variable file.

Values stored here are the fallback for every property that a client does
not override. Keys are given as property keys (``Auth.scope``) and stored
under the ``Hubspot.`` namespace.

Typical workflow::

    hubauth vars set Auth.clientId my-client
    hubauth vars set Auth.scope contacts
    hubauth vars list
"""

from __future__ import annotations

import typer

from hubauth.config import get_variables_path, load_variables, set_variable, unset_variable
from hubauth.exceptions import ConfigError
from hubauth.exit_codes import EXIT_GENERIC_FAILURE
from hubauth.models import Property, variable_name
from hubauth.output import emit, emit_table, error, info, success, warning


vars_app = typer.Typer(no_args_is_help=True)

_SECRET_KEYS = {variable_name(Property.API_KEY), variable_name(Property.CLIENT_SECRET)}


def mask(value: str) -> str:
    """Hide all but the last four characters of a secret."""
    if len(value) <= 4:
        return "****"
    return "****" + value[-4:]


def _check_key(key: str) -> None:
    if key not in Property.ALL:
        warning(f"'{key}' is not a known property ({', '.join(Property.ALL)})")


@vars_app.command("set")
def vars_set(
    key: str = typer.Argument(help="Property key, e.g. Auth.scope."),
    value: str = typer.Argument(help="Value to store."),
) -> None:
    """Store a variable."""
    _check_key(key)
    try:
        set_variable(variable_name(key), value)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    success(f"Set {variable_name(key)}")


@vars_app.command("get")
def vars_get(
    key: str = typer.Argument(help="Property key, e.g. Auth.scope."),
) -> None:
    """Print a stored variable."""
    try:
        variables = load_variables().variables
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    name = variable_name(key)
    if name not in variables:
        error(f"Variable '{name}' is not set")
        raise typer.Exit(code=EXIT_GENERIC_FAILURE)
    emit(variables[name])


@vars_app.command("unset")
def vars_unset(
    key: str = typer.Argument(help="Property key, e.g. Auth.scope."),
) -> None:
    """Remove a stored variable."""
    try:
        removed = unset_variable(variable_name(key))
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    if removed:
        success(f"Removed {variable_name(key)}")
    else:
        info(f"Variable '{variable_name(key)}' was not set")


@vars_app.command("list")
def vars_list(
    show_secrets: bool = typer.Option(
        False, "--show-secrets", help="Print API keys and client secrets in clear."
    ),
) -> None:
    """List stored variables. Secrets are masked unless --show-secrets is given."""
    try:
        variables = load_variables().variables
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if not variables:
        info(f"No variables stored in {get_variables_path()}")
        return

    rows = []
    for name in sorted(variables):
        value = variables[name]
        if name in _SECRET_KEYS and not show_secrets:
            value = mask(value)
        rows.append([name, value])
    emit_table(["Variable", "Value"], rows, title="Variables")
