"""fitpulse CLI — entry point for import, aliases and learn commands."""

import click

from fitpulse import __version__


@click.group()
@click.version_option(version=__version__, package_name="fitpulse")
@click.option(
    "--config", "config_file", type=click.Path(dir_okay=False), default=None, help="Path to a YAML/JSON config file."
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def main(ctx: click.Context, config_file: str | None, verbose: bool) -> None:
    """fitpulse — normalize WHOOP and StrongLifts CSV exports."""
    from fitpulse.core.cli.common import load_config
    from fitpulse.core.exceptions import ConfigurationError
    from fitpulse.core.utils.logging import setup_logging_from_config

    config = load_config(config_file)
    try:
        setup_logging_from_config(config, verbose=verbose)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e
    ctx.obj = config


# Register subcommands (lazy imports keep startup fast)
from .aliases_cmd import aliases, learn
from .import_cmd import import_files

main.add_command(import_files)
main.add_command(aliases)
main.add_command(learn)
