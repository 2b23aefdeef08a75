"""Options of the convert command that are forwarded to the loader"""

from typing import Any, Callable, Optional

import click
from click.core import ParameterSource

LOADER_OPTIONS = "loader_options"


def loader_option(*args: Any, **kwargs: Any) -> Callable:
    """Same as click.option, except the value lands in the loader_options
    dict given to the command instead of its own argument"""
    return click.option(
        *args, callback=store_loader_option, expose_value=False, **kwargs
    )


def store_loader_option(
    ctx: click.Context, param: click.Parameter, value: Optional[Any]
) -> None:
    assert param.name is not None
    # Loaders have their own defaults, only pass what the user asked for
    if given_by_the_user(ctx, param.name):
        ctx.params.setdefault(LOADER_OPTIONS, {})[param.name] = value


def given_by_the_user(ctx: click.Context, name: str) -> bool:
    return ctx.get_parameter_source(name) not in (
        None,
        ParameterSource.DEFAULT,
        ParameterSource.DEFAULT_MAP,
    )
