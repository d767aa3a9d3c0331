"""Main CLI application for layerkit."""

import logging
import sys
from importlib.metadata import distribution
from typing import Annotated

import typer

from layerkit.cli.decorators.error_handling import (
    EXIT_INVALID,
    print_stack_trace_if_verbose,
)
from layerkit.cli.helpers.theme import get_icon_mode_from_config, get_themed_console
from layerkit.config.user_config import UserConfig, create_user_config
from layerkit.core.errors import ConfigError
from layerkit.core.logging import setup_logging


__all__ = ["app", "main", "__version__", "setup_logging"]


__version__ = distribution("layerkit").version

logger = logging.getLogger(__name__)


class AppContext:
    """Application context for storing shared state."""

    def __init__(
        self,
        verbose: int = 0,
        log_file: str | None = None,
        config_file: str | None = None,
        user_config: UserConfig | None = None,
    ):
        self.verbose = verbose
        self.log_file = log_file
        self.config_file = config_file
        self.user_config = user_config or create_user_config(cli_config_path=config_file)

    @property
    def icon_mode(self) -> str:
        return get_icon_mode_from_config(self.user_config)

    @property
    def strict(self) -> bool:
        return bool(self.user_config.config.strict)


app = typer.Typer(
    name="layerkit",
    help=f"""layerkit keyboard layout toolkit v{__version__}

Checks keyboard firmware layouts: layer-switching macros, tap-dance
definitions, keycodes and key positions.

Common workflows:
  • Validate a layout:     layerkit validate layout.json
  • Inspect layer links:   layerkit layer-refs layout.json
  • Manage tap dances:     layerkit tap-dance list layout.json
  • Manage layers:         layerkit layer add layout.json Nav""",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity (-v=INFO, -vv=DEBUG)",
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging (equivalent to -vv)"),
    ] = False,
    log_file: Annotated[
        str | None, typer.Option("--log-file", help="Log to file")
    ] = None,
    config_file: Annotated[
        str | None,
        typer.Option("-c", "--config", help="Path to configuration file"),
    ] = None,
    version: Annotated[
        bool, typer.Option("--version", help="Show version and exit")
    ] = False,
) -> None:
    """layerkit keyboard layout toolkit."""
    if version:
        print(f"layerkit v{__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        print(ctx.get_help())
        raise typer.Exit()

    try:
        user_config = create_user_config(cli_config_path=config_file)
    except ConfigError as e:
        get_themed_console(stderr=True).print_error(str(e))
        raise typer.Exit(EXIT_INVALID) from e

    ctx.obj = AppContext(
        verbose=verbose,
        log_file=log_file,
        config_file=config_file,
        user_config=user_config,
    )

    # Set log level based on verbosity, debug flag, or config
    if debug or verbose >= 2:
        log_level_name = "DEBUG"
    elif verbose == 1:
        log_level_name = "INFO"
    else:
        log_level_name = user_config.config.log_level

    setup_logging(log_level_name=log_level_name, log_file=log_file)


def main() -> int:
    """Main CLI entry point."""
    exit_code = 0

    try:
        from layerkit.cli.commands import register_all_commands

        register_all_commands(app)
        app()

    except SystemExit as e:
        exit_code = e.code if isinstance(e.code, int) else 0

    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        print_stack_trace_if_verbose()
        exit_code = EXIT_INVALID

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
